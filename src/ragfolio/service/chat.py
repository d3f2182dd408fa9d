"""Question answering over the vector store (the RAG query pipeline)."""

import logging
from enum import Enum

from ragfolio.config import Settings
from ragfolio.constants import CONTENT_PREVIEW_LENGTH
from ragfolio.errors import ProviderError
from ragfolio.llm.base import EmbeddingService, LLMService
from ragfolio.models import (
    ASSISTANT_ROLE,
    USER_ROLE,
    QueryResult,
    SimilarityMatch,
    SourceExcerpt,
)
from ragfolio.service.conversations import ConversationStore
from ragfolio.service.guard import ContentGuard
from ragfolio.service.vector_store import VectorStore

logger = logging.getLogger(__name__)

NO_INFO_MESSAGES = {
    "en": "I don't have information about that in my portfolio.",
    "id": "Saya tidak memiliki informasi tentang itu di portfolio saya.",
}

SYSTEM_PROMPTS = {
    "en": """You are a professional portfolio assistant. Answer questions briefly and directly to the point.

Rules:
- Answer VERY SHORT (1-2 sentences maximum)
- Get straight to the point, no long explanations
- Only use data from the context
- Don't add information that isn't there
- Use chat history to understand conversation context
- If you don't know, say "No information about that"
- Answer in English""",
    "id": """Anda adalah asisten portfolio profesional. Jawab pertanyaan dengan singkat dan langsung ke intinya.

Aturan:
- Jawab SANGAT SINGKAT (1-2 kalimat maksimal)
- Langsung ke poin, tanpa penjelasan panjang
- Hanya gunakan data dari konteks
- Jangan tambahkan informasi yang tidak ada
- Gunakan riwayat chat untuk memahami konteks percakapan
- Jika tidak tahu, katakan "Tidak ada informasi tentang itu"
- Jawab dalam Bahasa Indonesia""",
}

USER_PROMPTS = {
    "en": """Portfolio data:
{context}

Question: {question}

Answer briefly and directly (maximum 2 sentences).""",
    "id": """Data portfolio:
{context}

Pertanyaan: {question}

Jawab singkat dan langsung (maksimal 2 kalimat).""",
}


class QueryStage(str, Enum):
    """Stages a question passes through, in order."""

    GUARD_CHECK = "guard_check"
    EMBED = "embed"
    SEARCH = "search"
    FILTER = "filter"
    NO_MATCH = "no_match"
    BUILD_CONTEXT = "build_context"
    GENERATE = "generate"
    RESPOND = "respond"


def _localized(table: dict[str, str], language: str) -> str:
    return table.get(language, table["en"])


def build_system_prompt(language: str = "en") -> str:
    return _localized(SYSTEM_PROMPTS, language)


def build_user_prompt(question: str, context: str, language: str = "en") -> str:
    return _localized(USER_PROMPTS, language).format(context=context, question=question)


def format_context(matches: list[SimilarityMatch]) -> str:
    """Join matched chunk texts with blank lines, highest score first."""
    ordered = sorted(matches, key=lambda match: match.score, reverse=True)
    return "\n\n".join(match.record.text for match in ordered)


def excerpt(match: SimilarityMatch) -> SourceExcerpt:
    return SourceExcerpt(
        text=match.record.text[:CONTENT_PREVIEW_LENGTH] + "...",
        source=match.record.source,
        score=match.score,
        id=match.record.id,
    )


class ChatService:
    """Answers questions from retrieved context plus recent conversation history.

    Flow: guard check, embed the question, search, drop matches below the
    similarity threshold, then either return the no-information message or
    build a prompt and ask the LLM. Confidence is the mean score of the
    matches used.
    """

    def __init__(
        self,
        llm_service: LLMService,
        embedding_service: EmbeddingService,
        vector_store: VectorStore,
        conversations: ConversationStore,
        settings: Settings | None = None,
        guard: ContentGuard | None = None,
    ) -> None:
        self.llm_service = llm_service
        self.embedding_service = embedding_service
        self.vector_store = vector_store
        self.conversations = conversations
        self.settings = settings or Settings()
        self.guard = guard or ContentGuard()

    def _enter(self, stage: QueryStage) -> None:
        logger.debug(f"Query stage: {stage.value}")

    def _empty_sources(self) -> list[SourceExcerpt] | None:
        return [] if self.settings.show_sources else None

    def embed_question(self, question: str) -> list[float]:
        """Embed a single question, failing if the provider returns no vector."""
        embeddings = self.embedding_service.generate_embeddings(
            [question], self.settings.embedding_model
        )
        if len(embeddings) != 1:
            raise ProviderError(
                "embedding", f"expected 1 embedding for the question, got {len(embeddings)}"
            )
        return embeddings[0]

    def retrieve(self, question: str) -> list[SimilarityMatch]:
        """Embed the question and return matches at or above the threshold."""
        self._enter(QueryStage.EMBED)
        query_embedding = self.embed_question(question)

        self._enter(QueryStage.SEARCH)
        results = self.vector_store.query(query_embedding, self.settings.top_k)
        logger.info(f"🔍 Vector search completed: {len(results)} results")

        self._enter(QueryStage.FILTER)
        threshold = self.settings.similarity_threshold
        relevant = [match for match in results if match.score >= threshold]
        logger.info(f"  {len(relevant)} result(s) at or above threshold {threshold}")
        return relevant

    async def process_query(
        self,
        question: str,
        conversation_id: str | None = None,
        language: str = "en",
        chat_history: list[dict] | None = None,
    ) -> QueryResult:
        """Answer a question.

        Args:
            question: The user's question
            conversation_id: When given, history is read from and written to
                the conversation store
            language: "en" or "id"; other values fall back to English
            chat_history: Caller-supplied history used when there is no
                conversation id. It is not persisted.

        Returns:
            QueryResult: answer, confidence and (optionally) source excerpts

        Raises:
            ProviderError: If the embedding, search or LLM call fails
        """
        logger.info(f"📨 Processing query: '{question[:100]}' (conversation={conversation_id})")

        self._enter(QueryStage.GUARD_CHECK)
        if self.guard.is_blocked(question):
            return self.guard.refusal(language, self.settings.show_sources)

        relevant = self.retrieve(question)

        if not relevant:
            self._enter(QueryStage.NO_MATCH)
            return QueryResult(
                answer=_localized(NO_INFO_MESSAGES, language),
                confidence=0.0,
                sources=self._empty_sources(),
            )

        self._enter(QueryStage.BUILD_CONTEXT)
        context = format_context(relevant)

        self._enter(QueryStage.GENERATE)
        if conversation_id:
            history = [entry.to_dict() for entry in self.conversations.get_history(conversation_id)]
        else:
            history = list(chat_history or [])

        window = self.settings.history_window
        recent_history = history[-window:] if window > 0 else []
        messages = [
            {"role": "system", "content": build_system_prompt(language)},
            *recent_history,
            {"role": "user", "content": build_user_prompt(question, context, language)},
        ]

        logger.info(f"🤖 Generating response from LLM with {len(messages)} messages...")
        answer = await self.llm_service.generate_response(messages)

        self._enter(QueryStage.RESPOND)
        if conversation_id:
            self.conversations.add_messages(
                conversation_id, [(USER_ROLE, question), (ASSISTANT_ROLE, answer)]
            )

        confidence = sum(match.score for match in relevant) / len(relevant)
        sources = [excerpt(match) for match in relevant] if self.settings.show_sources else None

        logger.info(f"✅ Query answered (confidence={confidence:.3f})")
        return QueryResult(answer=answer, confidence=confidence, sources=sources)
