"""Base protocols and error mapping for LLM and embedding services."""

import logging
from typing import Protocol

import requests

from ragfolio.errors import ProviderError

logger = logging.getLogger(__name__)


class EmbeddingService(Protocol):
    """Protocol for services that turn text into fixed-length vectors."""

    def generate_embeddings(self, texts: list[str], model: str | None = None) -> list[list[float]]:
        """Generate embeddings for a list of texts in one batch.

        Args:
            texts: List of text strings to embed
            model: Optional embedding model name. If None, uses the service default.

        Returns:
            list[list[float]]: One embedding vector per input text, in order
        """
        ...


class LLMService(EmbeddingService, Protocol):
    """Protocol defining the interface for LLM services.

    This protocol ensures type safety and allows for multiple LLM provider
    implementations while maintaining a consistent interface.
    """

    async def generate_response(self, messages: list[dict]) -> str:
        """Generate a response from the LLM based on the provided messages.

        Args:
            messages: List of message dictionaries with 'role' and 'content' keys.
                     Roles are "system", "user" or "assistant".
                     Example: [{"role": "user", "content": "Hello"}]

        Returns:
            str: The generated response content from the LLM.
        """
        ...


def _status_code_of(error: Exception) -> int | None:
    for attr in ("status_code", "code"):
        value = getattr(error, attr, None)
        if isinstance(value, int):
            return value
    response = getattr(error, "response", None)
    value = getattr(response, "status_code", None)
    return value if isinstance(value, int) else None


def to_provider_error(provider: str, error: Exception) -> ProviderError:
    """Wrap a client library exception as a ``ProviderError``.

    Timeouts and connection failures are retryable, as are 408/429/5xx
    responses. Everything else (auth, bad request) is permanent.

    Args:
        provider: Backend name reported to the caller
        error: The original exception

    Returns:
        ProviderError: classified error, ready to be raised ``from error``
    """
    if isinstance(error, ProviderError):
        return error

    status_code = _status_code_of(error)
    transient = isinstance(
        error, (TimeoutError, ConnectionError, requests.Timeout, requests.ConnectionError)
    ) or any(marker in type(error).__name__ for marker in ("Timeout", "Connect"))

    retryable = True if transient else None
    return ProviderError(provider, str(error) or type(error).__name__, status_code, retryable)


def log_messages(messages: list[dict]) -> None:
    """Debug-log a preview of each outgoing message."""
    logger.debug(f"Messages: {len(messages)} messages")
    for i, msg in enumerate(messages):
        role = msg.get("role", "unknown")
        content_preview = msg.get("content", "")[:100]
        logger.debug(f"  Message {i + 1} ({role}): {content_preview}...")
