"""
OpenAI embedder using official SDK.
"""

from openai import AsyncOpenAI

from notecoach.core.embeddings.base import EmbeddingProvider
from notecoach.utils.exceptions import EmbeddingError, ValidationError
from notecoach.utils.logger import get_logger

logger = get_logger(__name__)

# Published output sizes; other models are probed on first use
KNOWN_DIMENSIONS = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
}


class OpenAIEmbedder(EmbeddingProvider):
    """
    Hosted embeddings from the OpenAI API (or an OpenAI-compatible server).
    """

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-ada-002",
        organization: str | None = None,
        base_url: str | None = None,
        timeout: float = 120.0,
    ):
        """
        Initialize OpenAI embedder.

        Args:
            api_key: OpenAI API key
            model: Embedding model name
            organization: Optional organization ID
            base_url: Optional custom base URL
            timeout: Request timeout in seconds
        """
        self.model = model
        self._dimension = KNOWN_DIMENSIONS.get(model)

        self.client = AsyncOpenAI(
            api_key=api_key, organization=organization, base_url=base_url, timeout=timeout
        )

    async def embed(self, text: str, **kwargs) -> list[float]:
        """
        Embed block text with the configured OpenAI model.

        Args:
            text: Text to embed
            **kwargs: Extra request parameters (e.g. dimensions, user)

        Returns:
            Embedding vector

        Raises:
            ValidationError: If text is blank
            EmbeddingError: If the API call fails or the vector is unusable
        """
        if not text or not text.strip():
            raise ValidationError("Text cannot be empty")

        try:
            response = await self.client.embeddings.create(model=self.model, input=text, **kwargs)
        except Exception as e:
            logger.error(
                "OpenAI embedding request failed",
                extra={"model": self.model, "error": str(e), "error_type": type(e).__name__},
            )
            raise EmbeddingError(f"OpenAI embedding error: {e}") from e

        return self._accept(response.data[0].embedding if response.data else None)

    async def close(self):
        """Close OpenAI client."""
        await self.client.close()
