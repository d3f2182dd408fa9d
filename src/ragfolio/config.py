"""Runtime settings loaded from environment variables."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from ragfolio.constants import (
    DEFAULT_CHUNK_OVERLAP,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_CLEANUP_INTERVAL_SECONDS,
    DEFAULT_CONVERSATION_TTL_SECONDS,
    DEFAULT_EMBEDDING_DIMENSIONS,
    DEFAULT_HISTORY_WINDOW,
    DEFAULT_MAX_HISTORY_LENGTH,
    DEFAULT_OLLAMA_HOST,
    DEFAULT_RAVENDB_DATABASE,
    DEFAULT_RAVENDB_URL,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_SIMILARITY_THRESHOLD,
    DEFAULT_TOP_K,
    LLM_MODEL_DEFAULTS,
    get_embedding_model,
)

# Load environment variables
load_dotenv()


def env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


@dataclass
class Settings:
    """Configuration for the retrieval pipeline and its providers.

    Every field has a default so tests can build a ``Settings`` directly;
    ``Settings.from_env()`` is what the app and CLI use.
    """

    llm_service: str = "ollama"
    llm_model: str = LLM_MODEL_DEFAULTS["ollama"]
    ollama_host: str = DEFAULT_OLLAMA_HOST
    embedding_service: str = "ollama"
    embedding_model: str = "nomic-embed-text"
    embedding_dimensions: int = DEFAULT_EMBEDDING_DIMENSIONS

    chunk_size: int = DEFAULT_CHUNK_SIZE
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP
    top_k: int = DEFAULT_TOP_K
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    show_sources: bool = True
    history_window: int = DEFAULT_HISTORY_WINDOW

    max_history_length: int = DEFAULT_MAX_HISTORY_LENGTH
    conversation_ttl_seconds: float = DEFAULT_CONVERSATION_TTL_SECONDS
    cleanup_interval_seconds: float = DEFAULT_CLEANUP_INTERVAL_SECONDS

    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS

    vector_store: str = "memory"
    ravendb_url: str = DEFAULT_RAVENDB_URL
    ravendb_database: str = DEFAULT_RAVENDB_DATABASE
    cloudflare_account_id: str | None = None
    cloudflare_api_token: str | None = None
    vectorize_index_name: str | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (and a ``.env`` file).

        Returns:
            Settings: populated settings instance

        Raises:
            ValueError: If a numeric variable cannot be parsed.
        """
        llm_service = os.getenv("LLM_SERVICE", "ollama")
        embedding_service = os.getenv("EMBEDDING_SERVICE") or llm_service

        return cls(
            llm_service=llm_service,
            llm_model=os.getenv(
                "LLM_MODEL", LLM_MODEL_DEFAULTS.get(llm_service, LLM_MODEL_DEFAULTS["ollama"])
            ),
            ollama_host=os.getenv("OLLAMA_HOST", DEFAULT_OLLAMA_HOST),
            embedding_service=embedding_service,
            embedding_model=get_embedding_model(embedding_service),
            embedding_dimensions=env_int("EMBEDDING_DIMENSIONS", DEFAULT_EMBEDDING_DIMENSIONS),
            chunk_size=env_int("CHUNK_SIZE", DEFAULT_CHUNK_SIZE),
            chunk_overlap=env_int("CHUNK_OVERLAP", DEFAULT_CHUNK_OVERLAP),
            top_k=env_int("TOP_K_RESULTS", DEFAULT_TOP_K),
            similarity_threshold=env_float("SIMILARITY_THRESHOLD", DEFAULT_SIMILARITY_THRESHOLD),
            show_sources=os.getenv("SHOW_SOURCES", "true").strip().lower() != "false",
            history_window=env_int("HISTORY_WINDOW", DEFAULT_HISTORY_WINDOW),
            max_history_length=env_int("MAX_HISTORY_LENGTH", DEFAULT_MAX_HISTORY_LENGTH),
            conversation_ttl_seconds=env_float(
                "CONVERSATION_TTL_SECONDS", DEFAULT_CONVERSATION_TTL_SECONDS
            ),
            cleanup_interval_seconds=env_float(
                "CLEANUP_INTERVAL_SECONDS", DEFAULT_CLEANUP_INTERVAL_SECONDS
            ),
            request_timeout_seconds=env_float(
                "REQUEST_TIMEOUT_SECONDS", DEFAULT_REQUEST_TIMEOUT_SECONDS
            ),
            vector_store=os.getenv("VECTOR_STORE", "memory"),
            ravendb_url=os.getenv("RAVENDB_URL", DEFAULT_RAVENDB_URL),
            ravendb_database=os.getenv("RAVENDB_DATABASE", DEFAULT_RAVENDB_DATABASE),
            cloudflare_account_id=os.getenv("CLOUDFLARE_ACCOUNT_ID"),
            cloudflare_api_token=os.getenv("CLOUDFLARE_API_TOKEN"),
            vectorize_index_name=os.getenv("VECTORIZE_INDEX_NAME"),
        )

    def llm_config(self) -> dict:
        """Config dict understood by ``get_llm_service``."""
        return {
            "service": self.llm_service,
            "model": self.llm_model,
            "host": self.ollama_host,
            "timeout": self.request_timeout_seconds,
            "account_id": self.cloudflare_account_id,
            "api_token": self.cloudflare_api_token,
        }

    def embedding_config(self) -> dict:
        """Config dict understood by ``get_embedding_service``."""
        return {
            "service": self.embedding_service,
            "model": self.llm_model if self.embedding_service == self.llm_service else None,
            "embedding_model": self.embedding_model,
            "host": self.ollama_host,
            "timeout": self.request_timeout_seconds,
            "account_id": self.cloudflare_account_id,
            "api_token": self.cloudflare_api_token,
        }
