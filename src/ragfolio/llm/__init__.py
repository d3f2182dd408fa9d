"""LLM and embedding service abstraction layer for ragfolio.

This package provides a unified interface for multiple providers:
- OllamaService: Local LLM via Ollama
- GeminiService: Google Gemini API
- OpenAIService: OpenAI API
- CloudflareService: Cloudflare Workers AI

All services implement the LLMService protocol.

Usage:
    from ragfolio.llm import get_llm_service, LLMService

    # Create service from environment config
    service = get_llm_service()

    # Or with explicit config
    service = get_llm_service({"service": "gemini", "model": "gemini-2.5-flash"})
"""

from ragfolio.llm.base import EmbeddingService, LLMService, to_provider_error
from ragfolio.llm.cloudflare import CloudflareService
from ragfolio.llm.factory import SUPPORTED_SERVICES, get_embedding_service, get_llm_service
from ragfolio.llm.gemini import GeminiService
from ragfolio.llm.ollama import OllamaService
from ragfolio.llm.openai_service import OpenAIService

__all__ = [
    "EmbeddingService",
    "LLMService",
    "OllamaService",
    "GeminiService",
    "OpenAIService",
    "CloudflareService",
    "SUPPORTED_SERVICES",
    "get_llm_service",
    "get_embedding_service",
    "to_provider_error",
]
