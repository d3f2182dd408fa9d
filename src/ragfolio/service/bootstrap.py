"""Builds the pipeline objects from settings."""

import logging
from dataclasses import dataclass

from ragfolio.config import Settings
from ragfolio.llm import LLMService, get_embedding_service, get_llm_service
from ragfolio.service.chat import ChatService
from ragfolio.service.conversations import ConversationStore, ConversationSweeper
from ragfolio.service.documents import DocumentPipeline
from ragfolio.service.vector_store import VectorStore, get_vector_store

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything a request handler or CLI command needs."""

    settings: Settings
    llm_service: LLMService
    embedding_service: LLMService
    vector_store: VectorStore
    conversations: ConversationStore
    chat_service: ChatService
    document_pipeline: DocumentPipeline
    sweeper: ConversationSweeper


def build_services(
    settings: Settings,
    llm_service: LLMService | None = None,
    embedding_service: LLMService | None = None,
    vector_store: VectorStore | None = None,
) -> Services:
    """Create providers and pipelines for the given settings.

    Provider selection happens once here; explicit instances override the
    configured ones (used by tests).
    """
    logger.info("🔧 Initializing services...")

    if llm_service is None:
        llm_service = get_llm_service(settings.llm_config())
    if embedding_service is None:
        if settings.embedding_service == settings.llm_service:
            embedding_service = llm_service
        else:
            embedding_service = get_embedding_service(settings.embedding_config())
    if vector_store is None:
        vector_store = get_vector_store(settings)

    conversations = ConversationStore(
        max_history_length=settings.max_history_length,
        ttl_seconds=settings.conversation_ttl_seconds,
    )
    chat_service = ChatService(
        llm_service=llm_service,
        embedding_service=embedding_service,
        vector_store=vector_store,
        conversations=conversations,
        settings=settings,
    )
    document_pipeline = DocumentPipeline(
        embedding_service=embedding_service,
        vector_store=vector_store,
        chunk_size=settings.chunk_size,
        embedding_model=settings.embedding_model,
    )
    sweeper = ConversationSweeper(conversations, settings.cleanup_interval_seconds)

    logger.info(
        f"✅ Services initialized: llm={settings.llm_service}, "
        f"embeddings={settings.embedding_service}, vector_store={settings.vector_store}"
    )
    return Services(
        settings=settings,
        llm_service=llm_service,
        embedding_service=embedding_service,
        vector_store=vector_store,
        conversations=conversations,
        chat_service=chat_service,
        document_pipeline=document_pipeline,
        sweeper=sweeper,
    )
