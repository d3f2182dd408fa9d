"""Factory for selecting the configured vector store backend."""

import logging

from ragfolio.config import Settings
from ragfolio.service.vector_store.base import VectorStore
from ragfolio.service.vector_store.memory import InMemoryVectorStore
from ragfolio.service.vector_store.ravendb_store import RavenDBVectorStore
from ragfolio.service.vector_store.vectorize import VectorizeStore

logger = logging.getLogger(__name__)


def get_vector_store(settings: Settings) -> VectorStore:
    """Create the vector store named by ``settings.vector_store``.

    Args:
        settings: Runtime settings; VECTOR_STORE is one of "memory",
            "ravendb" or "vectorize".

    Returns:
        VectorStore: configured store instance

    Raises:
        ValueError: If the backend name is unknown
    """
    backend = settings.vector_store.lower()

    if backend == "memory":
        logger.info("Creating in-memory vector store (single-process mode)")
        return InMemoryVectorStore(dimensions=settings.embedding_dimensions)

    if backend == "ravendb":
        return RavenDBVectorStore(
            dimensions=settings.embedding_dimensions,
            url=settings.ravendb_url,
            database=settings.ravendb_database,
        )

    if backend == "vectorize":
        return VectorizeStore(
            account_id=settings.cloudflare_account_id,
            api_token=settings.cloudflare_api_token,
            index_name=settings.vectorize_index_name,
            dimensions=settings.embedding_dimensions,
            timeout=settings.request_timeout_seconds,
        )

    raise ValueError(
        f"Invalid VECTOR_STORE: {settings.vector_store}. "
        f"Must be 'memory', 'ravendb' or 'vectorize'."
    )
