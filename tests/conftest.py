"""Pytest configuration and shared fixtures for the test suite."""

import math
import re
import zlib

import pytest
import requests

from ragfolio.config import Settings
from ragfolio.service.bootstrap import build_services
from ragfolio.service.vector_store import InMemoryVectorStore

TEST_DIMENSIONS = 64
WORD = re.compile(r"[a-z0-9]+")


# Service availability checks
def ollama_available() -> bool:
    """Check if Ollama server is running and accessible.

    Returns:
        True if Ollama is available, False otherwise
    """
    try:
        response = requests.get("http://localhost:11434/api/tags", timeout=2)
        return response.status_code == 200
    except requests.RequestException:
        return False


def ravendb_available() -> bool:
    """Check if RavenDB server is running and accessible.

    Returns:
        True if RavenDB is available, False otherwise
    """
    try:
        response = requests.get("http://localhost:8080/databases", timeout=2)
        return response.status_code in (200, 401)  # Auth required is OK
    except requests.RequestException:
        return False


def bag_of_words(text: str, dimensions: int = TEST_DIMENSIONS) -> list[float]:
    """Deterministic unit vector from hashed lowercase words.

    Texts sharing all their words embed identically (cosine 1.0); texts with
    no shared words are orthogonal unless two words hash to the same slot.
    """
    vector = [0.0] * dimensions
    for word in WORD.findall(text.lower()):
        vector[zlib.crc32(word.encode()) % dimensions] += 1.0
    norm = math.sqrt(sum(v * v for v in vector))
    if norm == 0:
        vector[0] = 1.0
        return vector
    return [v / norm for v in vector]


class FakeEmbeddingService:
    """Embedding service with scripted vectors and a bag-of-words fallback."""

    def __init__(self, vectors: dict | None = None, fail: Exception | None = None):
        self.vectors = vectors or {}
        self.fail = fail
        self.calls: list[list[str]] = []

    def generate_embeddings(self, texts, model=None):
        self.calls.append(list(texts))
        if self.fail is not None:
            raise self.fail
        return [self.vectors.get(text) or bag_of_words(text) for text in texts]


class FakeLLMService(FakeEmbeddingService):
    """LLM service that records the messages it is sent."""

    def __init__(self, answer: str = "Test answer", **kwargs):
        super().__init__(**kwargs)
        self.answer = answer
        self.received: list[list[dict]] = []

    async def generate_response(self, messages):
        self.received.append(messages)
        return self.answer


@pytest.fixture
def settings() -> Settings:
    """Settings sized for the fake providers."""
    return Settings(
        llm_service="fake",
        embedding_service="fake",
        embedding_dimensions=TEST_DIMENSIONS,
        chunk_size=100,
        top_k=5,
        similarity_threshold=0.7,
        history_window=6,
        max_history_length=6,
    )


@pytest.fixture
def embedding_service() -> FakeEmbeddingService:
    return FakeEmbeddingService()


@pytest.fixture
def llm_service() -> FakeLLMService:
    return FakeLLMService()


@pytest.fixture
def vector_store() -> InMemoryVectorStore:
    return InMemoryVectorStore(TEST_DIMENSIONS)


@pytest.fixture
def services(settings, llm_service, embedding_service, vector_store):
    """Fully wired services backed by fakes and the in-memory store."""
    return build_services(
        settings,
        llm_service=llm_service,
        embedding_service=embedding_service,
        vector_store=vector_store,
    )


@pytest.fixture
def client(services):
    """Flask test client with fake-backed services installed."""
    from ragfolio.client.app import app
    from ragfolio.client.routes import init_config

    app.config["TESTING"] = True
    init_config(services=services, show_stack_traces=False)
    with app.test_client() as test_client:
        yield test_client


# Service fixtures with skip markers
@pytest.fixture
def ollama_service():
    """Provide OllamaService instance, skip if Ollama not available.

    Raises:
        pytest.skip: If Ollama server is not running
    """
    if not ollama_available():
        pytest.skip("Ollama server not running on localhost:11434")

    from ragfolio.llm import OllamaService

    return OllamaService(host="http://localhost:11434", model="llama3")


@pytest.fixture
def ravendb_vector_store():
    """Provide a RavenDB-backed vector store, skip if RavenDB not available.

    Raises:
        pytest.skip: If RavenDB server is not running
    """
    if not ravendb_available():
        pytest.skip("RavenDB server not running on localhost:8080")

    from ragfolio.service.vector_store import RavenDBVectorStore

    store = RavenDBVectorStore(
        dimensions=4, url="http://localhost:8080", database="ragfolio_test"
    )
    yield store
    store.close()
