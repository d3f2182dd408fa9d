"""Cloudflare Workers AI LLM service implementation."""

import logging
from typing import Any

import requests

from ragfolio.constants import (
    CLOUDFLARE_API_BASE,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    get_embedding_model,
)
from ragfolio.errors import ProviderError
from ragfolio.llm.base import log_messages, to_provider_error

logger = logging.getLogger(__name__)


class CloudflareService:
    """Workers AI models called through the Cloudflare REST API."""

    def __init__(
        self,
        account_id: str | None,
        api_token: str | None,
        model: str,
        embedding_model: str | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        if not account_id or not api_token:
            raise ValueError("CLOUDFLARE_ACCOUNT_ID and CLOUDFLARE_API_TOKEN must be set")
        self.account_id = account_id
        self.api_token = api_token
        self.model = model
        self.embedding_model = embedding_model or get_embedding_model("cloudflare")
        self.timeout = timeout
        self.base_url = f"{CLOUDFLARE_API_BASE}/accounts/{account_id}/ai/run"
        logger.info(f"🤖 Initializing CloudflareService: model={model}")

    def _run(self, model: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST a payload to a Workers AI model and return its ``result``."""
        try:
            response = requests.post(
                f"{self.base_url}/{model}",
                headers={"Authorization": f"Bearer {self.api_token}"},
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise to_provider_error("cloudflare", e) from e

        if not response.ok:
            raise ProviderError(
                "cloudflare",
                f"{model} failed: {response.text}",
                status_code=response.status_code,
            )
        return response.json().get("result", {})

    async def generate_response(self, messages: list[dict]) -> str:
        """Generate a response with a Workers AI text generation model.

        Args:
            messages: List of message dictionaries with 'role' and 'content' keys.

        Returns:
            str: The generated response content from the model.
        """
        logger.info(f"🗣️  Generating response with {self.model}")
        log_messages(messages)

        try:
            result = self._run(self.model, {"messages": messages})
        except ProviderError as e:
            logger.error(f"❌ Cloudflare API error: {e}")
            raise

        content = result.get("response") or ""
        logger.info(f"✅ Response generated: {len(content)} characters")
        return content

    def generate_embeddings(self, texts: list[str], model: str | None = None) -> list[list[float]]:
        """Generate embeddings for a list of texts in a single request.

        Args:
            texts: List of text strings to embed
            model: Optional embedding model name. If None, uses the service default.

        Returns:
            list[list[float]]: List of embedding vectors
        """
        embedding_model = model or self.embedding_model
        if not texts:
            return []

        try:
            result = self._run(embedding_model, {"text": texts})
        except ProviderError as e:
            logger.error(f"❌ Cloudflare embedding error: {e}")
            raise

        embeddings = result.get("data", [])
        logger.info(f"✅ Generated {len(embeddings)} embeddings with {embedding_model}")
        return embeddings
