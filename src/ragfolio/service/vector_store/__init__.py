"""Vector store backends.

Usage:
    from ragfolio.service.vector_store import get_vector_store

    store = get_vector_store(Settings.from_env())
    matches = store.query(vector, top_k=5)
"""

from ragfolio.service.vector_store.base import VectorStore, check_dimensions, cosine_similarity
from ragfolio.service.vector_store.factory import get_vector_store
from ragfolio.service.vector_store.memory import InMemoryVectorStore
from ragfolio.service.vector_store.ravendb_store import RavenDBVectorStore
from ragfolio.service.vector_store.vectorize import VectorizeStore

__all__ = [
    "VectorStore",
    "InMemoryVectorStore",
    "RavenDBVectorStore",
    "VectorizeStore",
    "get_vector_store",
    "check_dimensions",
    "cosine_similarity",
]
