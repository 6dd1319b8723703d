"""
Abstract base class for embedding providers.
Turns block text into vectors for similarity linking and search.
"""

import math
from abc import ABC, abstractmethod

from notecoach.utils.exceptions import EmbeddingError


class EmbeddingProvider(ABC):
    """
    Abstract base for embedding providers.

    Responsibilities:
    - Generate a vector embedding for a piece of text
    - Consistent vector dimensions across calls
    - Wrap transport/API failures into EmbeddingError
    """

    _dimension: int | None = None

    @abstractmethod
    async def embed(self, text: str, **kwargs) -> list[float]:
        """
        Generate embedding vector for text.

        Args:
            text: Text to embed
            **kwargs: Provider-specific parameters

        Returns:
            List of floats representing the embedding vector

        Raises:
            ValidationError: If text is empty
            EmbeddingError: If embedding generation fails
        """
        pass

    def _accept(self, vector) -> list[float]:
        """
        Validate a provider vector and remember its dimension.

        Raises:
            EmbeddingError: If the vector is empty, holds non-finite values,
                or its dimension differs from earlier vectors
        """
        if not vector:
            raise EmbeddingError("Provider returned an empty embedding")

        values = [float(x) for x in vector]
        if not all(math.isfinite(x) for x in values):
            raise EmbeddingError("Provider returned non-finite embedding values")

        if self._dimension is None:
            self._dimension = len(values)
        elif len(values) != self._dimension:
            raise EmbeddingError(
                f"Embedding dimension changed from {self._dimension} to {len(values)}",
                context={"expected": self._dimension, "actual": len(values)},
            )
        return values

    async def get_dimension(self) -> int:
        """
        Get the dimension of embeddings produced by this provider.

        Uses the dimension seen so far, or embeds a probe string.

        Returns:
            Embedding vector dimension
        """
        if self._dimension is None:
            await self.embed("test")
        return self._dimension

    @abstractmethod
    async def close(self):
        """
        Close any open connections.
        """
        pass
