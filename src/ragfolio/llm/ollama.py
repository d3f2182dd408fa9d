"""Ollama LLM service implementation."""

import logging

import ollama

from ragfolio.constants import DEFAULT_REQUEST_TIMEOUT_SECONDS, get_embedding_model
from ragfolio.llm.base import log_messages, to_provider_error

logger = logging.getLogger(__name__)


class OllamaService:
    """Ollama LLM service implementation.

    This service uses the Ollama API to generate responses and embeddings
    from local models.
    """

    def __init__(
        self,
        host: str,
        model: str,
        embedding_model: str | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the Ollama service.

        Args:
            host: The Ollama server host URL (e.g., "http://localhost:11434")
            model: The chat model name to use (e.g., "llama3")
            embedding_model: Embedding model (default: EMBEDDING_MODEL env or "nomic-embed-text")
            timeout: Per-request timeout in seconds
        """
        self.host = host
        self.model = model
        self.embedding_model = embedding_model or get_embedding_model("ollama")
        logger.info(f"🤖 Initializing OllamaService: host={host}, model={model}")
        # Configure the Ollama client with the specified host
        self.client = ollama.Client(host=host, timeout=timeout)

    async def generate_response(self, messages: list[dict]) -> str:
        """Generate a response using Ollama.

        Args:
            messages: List of message dictionaries with 'role' and 'content' keys.

        Returns:
            str: The generated response content from the model.

        Raises:
            ProviderError: If the Ollama call fails.
        """
        logger.info(f"🗣️  Generating response with {self.model}")
        log_messages(messages)

        try:
            response = self.client.chat(model=self.model, messages=messages)
        except Exception as e:
            logger.error(f"❌ Ollama API error: {e}", exc_info=True)
            raise to_provider_error("ollama", e) from e

        content = response.message.content or ""
        logger.info(f"✅ Response generated: {len(content)} characters")
        return content

    def generate_embeddings(self, texts: list[str], model: str | None = None) -> list[list[float]]:
        """Generate embeddings for a list of texts using Ollama.

        All texts are sent in a single ``embed`` call.

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
            response = self.client.embed(model=embedding_model, input=texts)
        except Exception as e:
            logger.error(f"❌ Ollama embedding error: {e}", exc_info=True)
            raise to_provider_error("ollama", e) from e

        embeddings = [list(vector) for vector in response["embeddings"]]
        logger.info(f"✅ Generated {len(embeddings)} embeddings with {embedding_model}")
        return embeddings
