"""Application-wide constants and defaults for ragfolio.

This module provides a single source of truth for configuration defaults,
magic numbers, and other constants used throughout the application.
"""

import os

# =============================================================================
# Chunking
# =============================================================================
DEFAULT_CHUNK_SIZE = 500  # Characters per chunk
DEFAULT_CHUNK_OVERLAP = 50  # Parsed but not consumed by the paragraph chunker

# =============================================================================
# Retrieval Settings
# =============================================================================
DEFAULT_TOP_K = 5  # Default number of results for vector search
DEFAULT_SIMILARITY_THRESHOLD = 0.7
DEFAULT_HISTORY_WINDOW = 6  # Last 6 messages (3 exchanges) sent to the LLM

# =============================================================================
# Conversation Memory
# =============================================================================
DEFAULT_MAX_HISTORY_LENGTH = 6
DEFAULT_CONVERSATION_TTL_SECONDS = 60 * 60  # 1 hour
DEFAULT_CLEANUP_INTERVAL_SECONDS = 10 * 60  # 10 minutes

# =============================================================================
# Display Settings
# =============================================================================
CONTENT_PREVIEW_LENGTH = 200  # Characters to show in source excerpts

# =============================================================================
# Upload Settings
# =============================================================================
DEFAULT_MAX_UPLOAD_SIZE_MB = 50

# =============================================================================
# Network
# =============================================================================
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0
RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})

# =============================================================================
# Default URLs and Hosts
# =============================================================================
DEFAULT_OLLAMA_HOST = "http://localhost:11434"
DEFAULT_RAVENDB_URL = "http://localhost:8080"
DEFAULT_RAVENDB_DATABASE = "ragfolio"
CLOUDFLARE_API_BASE = "https://api.cloudflare.com/client/v4"

# =============================================================================
# Model Defaults
# =============================================================================
LLM_MODEL_DEFAULTS = {
    "ollama": "llama3",
    "gemini": "gemini-2.5-flash",
    "openai": "gpt-4o-mini",
    "cloudflare": "@cf/meta/llama-3.1-8b-instruct",
}

EMBEDDING_DEFAULTS = {
    "ollama": "nomic-embed-text",
    "gemini": "text-embedding-004",
    "openai": "text-embedding-3-small",
    "cloudflare": "@cf/baai/bge-base-en-v1.5",
}

# Default embedding dimensions (must match the vector index)
DEFAULT_EMBEDDING_DIMENSIONS = 768


def get_embedding_model(service: str | None = None) -> str:
    """Get the default embedding model for a given embedding service.

    Checks the EMBEDDING_MODEL environment variable first, then falls back
    to service-specific defaults.

    Args:
        service: The service name ("ollama", "gemini", "openai", "cloudflare").
                If None, uses EMBEDDING_SERVICE, then LLM_SERVICE, then "ollama".

    Returns:
        str: The embedding model name to use.
    """
    env_model = os.getenv("EMBEDDING_MODEL")
    if env_model:
        return env_model

    if service is None:
        service = os.getenv("EMBEDDING_SERVICE") or os.getenv("LLM_SERVICE", "ollama")

    return EMBEDDING_DEFAULTS.get(service, EMBEDDING_DEFAULTS["ollama"])
