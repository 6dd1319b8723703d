"""
Ollama embedder using native ollama-python SDK.
"""

import ollama

from notecoach.core.embeddings.base import EmbeddingProvider
from notecoach.utils.exceptions import EmbeddingError, ValidationError
from notecoach.utils.logger import get_logger

logger = get_logger(__name__)


class OllamaEmbedder(EmbeddingProvider):
    """
    Local embeddings served by Ollama (nomic-embed-text, mxbai-embed-large, ...).
    """

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "nomic-embed-text",
        timeout: float = 120.0,
    ):
        self.host = host
        self.model = model
        self.timeout = timeout
        self._dimension = None

        self.client = ollama.AsyncClient(host=host, timeout=timeout)

    async def embed(self, text: str, **kwargs) -> list[float]:
        """
        Embed block text with the configured Ollama model.

        Args:
            text: Text to embed
            **kwargs: Extra request fields (e.g. keep_alive)

        Returns:
            Embedding vector

        Raises:
            ValidationError: If text is blank
            EmbeddingError: If the request fails or the vector is unusable
        """
        if not text or not text.strip():
            raise ValidationError("Text cannot be empty")

        try:
            response = await self.client.embeddings(model=self.model, prompt=text, **kwargs)
        except Exception as e:
            logger.error(
                "Ollama embedding request failed",
                extra={"model": self.model, "host": self.host, "error": str(e)},
            )
            raise EmbeddingError(f"Ollama embedding error: {e}") from e

        return self._accept(response["embedding"] if response else None)

    async def close(self):
        """Nothing to release; the SDK manages its own connections."""
        pass
