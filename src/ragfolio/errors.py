"""Exception types shared by the pipeline, providers and HTTP layer."""

from typing import Any

from ragfolio.constants import RETRYABLE_STATUS_CODES


class RagfolioError(Exception):
    """Base class for all ragfolio errors."""


class ValidationError(RagfolioError):
    """Malformed input. Carries a structured list of violations."""

    def __init__(self, message: str, details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or []


class ProviderError(RagfolioError):
    """An embedding, LLM or vector store call failed.

    Attributes:
        provider: Name of the failing backend (e.g. "ollama", "vectorize")
        status_code: Transport status code, when one was received
        retryable: True for timeouts, connection failures and 408/429/5xx
    """

    def __init__(
        self,
        provider: str,
        message: str,
        status_code: int | None = None,
        retryable: bool | None = None,
    ) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message
        self.status_code = status_code
        if retryable is None:
            retryable = status_code in RETRYABLE_STATUS_CODES if status_code else False
        self.retryable = retryable
