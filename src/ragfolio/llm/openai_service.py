"""OpenAI LLM service implementation."""

import logging

from openai import AsyncOpenAI, OpenAI

from ragfolio.constants import DEFAULT_REQUEST_TIMEOUT_SECONDS, get_embedding_model
from ragfolio.llm.base import log_messages, to_provider_error

logger = logging.getLogger(__name__)


class OpenAIService:
    """OpenAI chat completions and embeddings.

    The API key is read from the OPENAI_API_KEY environment variable unless
    one is passed explicitly.
    """

    def __init__(
        self,
        model: str,
        embedding_model: str | None = None,
        api_key: str | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        temperature: float = 0.7,
        max_tokens: int = 500,
    ) -> None:
        self.model = model
        self.embedding_model = embedding_model or get_embedding_model("openai")
        self.temperature = temperature
        self.max_tokens = max_tokens
        logger.info(f"🤖 Initializing OpenAIService: model={model}")
        self.client = AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.embedding_client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    async def generate_response(self, messages: list[dict]) -> str:
        """Generate a response with the chat completions API.

        Args:
            messages: List of message dictionaries with 'role' and 'content' keys.

        Returns:
            str: The generated response content from the model.
        """
        logger.info(f"🗣️  Generating response with {self.model}")
        log_messages(messages)

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            logger.error(f"❌ OpenAI API error: {e}", exc_info=True)
            raise to_provider_error("openai", e) from e

        content = response.choices[0].message.content or ""
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
            response = self.embedding_client.embeddings.create(model=embedding_model, input=texts)
        except Exception as e:
            logger.error(f"❌ OpenAI embedding error: {e}", exc_info=True)
            raise to_provider_error("openai", e) from e

        embeddings = [item.embedding for item in response.data]
        logger.info(f"✅ Generated {len(embeddings)} embeddings with {embedding_model}")
        return embeddings
