"""Google Gemini LLM service implementation."""

import logging

from google import genai

from ragfolio.constants import DEFAULT_REQUEST_TIMEOUT_SECONDS, get_embedding_model
from ragfolio.llm.base import log_messages, to_provider_error

logger = logging.getLogger(__name__)

# Gemini calls the assistant role "model"
_ROLE_MAP = {"user": "user", "assistant": "model"}


class GeminiService:
    """Google Gemini LLM service implementation.

    This service uses the Google Gemini API to generate responses from Google's LLM models.
    The API key is automatically retrieved from the GEMINI_API_KEY environment variable.
    """

    def __init__(
        self,
        model: str,
        embedding_model: str | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the Gemini service.

        Args:
            model: The model name to use (e.g., "gemini-2.5-flash")
            embedding_model: Embedding model (default: EMBEDDING_MODEL env or "text-embedding-004")
            timeout: Per-request timeout in seconds
        """
        self.model = model
        self.embedding_model = embedding_model or get_embedding_model("gemini")
        logger.info(f"🤖 Initializing GeminiService: model={model}")
        # The client gets the API key from the GEMINI_API_KEY environment variable
        self.client = genai.Client(
            http_options=genai.types.HttpOptions(timeout=int(timeout * 1000))
        )

    def _convert_messages(
        self, messages: list[dict]
    ) -> tuple[str | None, list[genai.types.Content]]:
        """Split out system turns and convert the rest to Gemini contents.

        Args:
            messages: List of message dictionaries with 'role' and 'content' keys

        Returns:
            Tuple of (system_instruction, contents)
        """
        system_parts = []
        contents = []
        for msg in messages:
            role = msg.get("role", "user")
            text = msg.get("content", "")
            if role == "system":
                system_parts.append(text)
                continue
            contents.append(
                genai.types.Content(
                    role=_ROLE_MAP.get(role, "user"),
                    parts=[genai.types.Part(text=text)],
                )
            )
        system_instruction = "\n\n".join(system_parts) if system_parts else None
        return system_instruction, contents

    async def generate_response(self, messages: list[dict]) -> str:
        """Generate a response using Gemini.

        System messages are passed as ``system_instruction`` so they take
        priority over user turns; the remaining turns keep their order.

        Args:
            messages: List of message dictionaries with 'role' and 'content' keys.

        Returns:
            str: The generated response content from the model.
        """
        logger.info(f"🗣️  Generating response with {self.model}")
        log_messages(messages)

        system_instruction, contents = self._convert_messages(messages)

        generate_kwargs = {"model": self.model, "contents": contents}
        if system_instruction:
            generate_kwargs["config"] = genai.types.GenerateContentConfig(
                system_instruction=system_instruction,
            )

        try:
            response = self.client.models.generate_content(**generate_kwargs)
        except Exception as e:
            logger.error(f"❌ Gemini API error: {e}", exc_info=True)
            raise to_provider_error("gemini", e) from e

        content = response.text or ""
        logger.info(f"✅ Response generated: {len(content)} characters")
        return content

    def generate_embeddings(self, texts: list[str], model: str | None = None) -> list[list[float]]:
        """Generate embeddings for a list of texts using Gemini.

        Args:
            texts: List of text strings to embed
            model: Optional embedding model name. If None, uses the service default.

        Returns:
            list[list[float]]: List of embedding vectors
        """
        embedding_model = model or self.embedding_model
        if not texts:
            return []

        try:
            response = self.client.models.embed_content(model=embedding_model, contents=texts)
        except Exception as e:
            logger.error(f"❌ Gemini embedding error: {e}", exc_info=True)
            raise to_provider_error("gemini", e) from e

        embeddings = [list(embedding.values) for embedding in response.embeddings]
        logger.info(f"✅ Generated {len(embeddings)} embeddings with {embedding_model}")
        return embeddings
