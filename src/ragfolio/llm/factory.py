"""Factory functions for creating LLM and embedding service instances."""

import logging
import os

from dotenv import load_dotenv

from ragfolio.constants import (
    DEFAULT_OLLAMA_HOST,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    LLM_MODEL_DEFAULTS,
)
from ragfolio.llm.base import LLMService
from ragfolio.llm.cloudflare import CloudflareService
from ragfolio.llm.gemini import GeminiService
from ragfolio.llm.ollama import OllamaService
from ragfolio.llm.openai_service import OpenAIService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

SUPPORTED_SERVICES = ("ollama", "gemini", "openai", "cloudflare")


def _build_service(service_type: str, config: dict) -> LLMService:
    model = config.get("model") or os.getenv("LLM_MODEL") or LLM_MODEL_DEFAULTS.get(service_type)
    embedding_model = config.get("embedding_model")
    timeout = config.get("timeout") or DEFAULT_REQUEST_TIMEOUT_SECONDS

    if service_type == "ollama":
        host = config.get("host") or os.getenv("OLLAMA_HOST", DEFAULT_OLLAMA_HOST)
        return OllamaService(
            host=host, model=model, embedding_model=embedding_model, timeout=timeout
        )

    if service_type == "gemini":
        return GeminiService(model=model, embedding_model=embedding_model, timeout=timeout)

    if service_type == "openai":
        return OpenAIService(
            model=model,
            embedding_model=embedding_model,
            api_key=config.get("api_key") or os.getenv("OPENAI_API_KEY"),
            timeout=timeout,
        )

    if service_type == "cloudflare":
        return CloudflareService(
            account_id=config.get("account_id") or os.getenv("CLOUDFLARE_ACCOUNT_ID"),
            api_token=config.get("api_token") or os.getenv("CLOUDFLARE_API_TOKEN"),
            model=model,
            embedding_model=embedding_model,
            timeout=timeout,
        )

    raise ValueError(f"Unsupported service type: {service_type}")


def get_llm_service(config: dict | None = None) -> LLMService:
    """Factory function to create an LLM service instance.

    Args:
        config: Optional configuration dictionary. If None, uses environment variables.
                Expected keys:
                - 'service': Service type (default: from LLM_SERVICE env, or "ollama")
                - 'host': Ollama host URL (default: from OLLAMA_HOST env)
                - 'model': Model name (default: from LLM_MODEL env, then per-service default)
                - 'timeout': Per-request timeout in seconds
                - 'account_id' / 'api_token': Cloudflare credentials

    Returns:
        LLMService: An instance implementing the LLMService protocol.
    """
    if config is None:
        config = {}

    service_type = config.get("service") or os.getenv("LLM_SERVICE", "ollama")
    logger.debug(f"Creating LLM service: {service_type}")
    return _build_service(service_type, config)


def get_embedding_service(config: dict | None = None) -> LLMService:
    """Factory function to create the service used for embeddings.

    The embedding backend may differ from the chat backend (e.g. Gemini for
    answers, OpenAI for vectors). It is read from 'service', then the
    EMBEDDING_SERVICE env var, then LLM_SERVICE.

    Args:
        config: Same keys as ``get_llm_service`` plus 'embedding_model'.

    Returns:
        LLMService: An instance whose ``generate_embeddings`` is used.
    """
    if config is None:
        config = {}

    service_type = (
        config.get("service")
        or os.getenv("EMBEDDING_SERVICE")
        or os.getenv("LLM_SERVICE", "ollama")
    )
    logger.debug(f"Creating embedding service: {service_type}")
    return _build_service(service_type, config)
