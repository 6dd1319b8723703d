"""
Tests for Ollama embedder.
"""

from unittest.mock import AsyncMock, patch

import pytest

from notecoach.core.embeddings.base import EmbeddingProvider
from notecoach.core.embeddings.ollama import OllamaEmbedder
from notecoach.utils.exceptions import EmbeddingError, ProviderError, ValidationError


@pytest.fixture
def ollama_embedder():
    """Create Ollama embedder for testing."""
    return OllamaEmbedder(host="http://localhost:11434", model="nomic-embed-text", timeout=120.0)


@pytest.mark.unit
@pytest.mark.asyncio
class TestOllamaEmbedder:
    """Test Ollama embedder."""

    async def test_initialization(self, ollama_embedder):
        """Test embedder initialization."""
        assert isinstance(ollama_embedder, EmbeddingProvider)
        assert ollama_embedder.host == "http://localhost:11434"
        assert ollama_embedder.model == "nomic-embed-text"
        assert ollama_embedder.timeout == 120.0
        assert ollama_embedder.client is not None
        assert ollama_embedder._dimension is None

    async def test_abstract_instantiation(self):
        """Test that the abstract base cannot be instantiated."""
        with pytest.raises(TypeError):
            EmbeddingProvider()

    async def test_embed(self, ollama_embedder):
        """Test embedding generation."""
        with patch.object(ollama_embedder.client, "embeddings", new_callable=AsyncMock) as mock_embed:
            mock_embed.return_value = {"embedding": [0.1, 0.2, 0.3]}

            result = await ollama_embedder.embed("test text")

            assert result == [0.1, 0.2, 0.3]
            mock_embed.assert_called_once_with(model="nomic-embed-text", prompt="test text")

    async def test_embed_empty_text(self, ollama_embedder):
        """Test blank text is rejected before any call."""
        with patch.object(ollama_embedder.client, "embeddings", new_callable=AsyncMock) as mock_embed:
            with pytest.raises(ValidationError):
                await ollama_embedder.embed("   ")

            mock_embed.assert_not_called()

    async def test_embed_empty_response(self, ollama_embedder):
        """Test an empty vector is an embedding error."""
        with patch.object(ollama_embedder.client, "embeddings", new_callable=AsyncMock) as mock_embed:
            mock_embed.return_value = {"embedding": []}

            with pytest.raises(EmbeddingError):
                await ollama_embedder.embed("test")

    async def test_embed_transport_error_wrapped(self, ollama_embedder):
        """Test transport errors surface as EmbeddingError."""
        with patch.object(ollama_embedder.client, "embeddings", new_callable=AsyncMock) as mock_embed:
            mock_embed.side_effect = ConnectionError("connection refused")

            with pytest.raises(EmbeddingError, match="connection refused") as exc_info:
                await ollama_embedder.embed("test")

            assert isinstance(exc_info.value, ProviderError)
            assert isinstance(exc_info.value.__cause__, ConnectionError)

    async def test_get_dimension_cached(self, ollama_embedder):
        """Test dimension detection runs once."""
        with patch.object(ollama_embedder.client, "embeddings", new_callable=AsyncMock) as mock_embed:
            mock_embed.return_value = {"embedding": [0.0] * 768}

            assert await ollama_embedder.get_dimension() == 768
            assert await ollama_embedder.get_dimension() == 768
            mock_embed.assert_called_once()

    async def test_dimension_change_rejected(self, ollama_embedder):
        """Test a vector of a different size than earlier ones is an error."""
        with patch.object(ollama_embedder.client, "embeddings", new_callable=AsyncMock) as mock_embed:
            mock_embed.return_value = {"embedding": [0.1, 0.2, 0.3]}
            await ollama_embedder.embed("first")

            mock_embed.return_value = {"embedding": [0.1, 0.2]}
            with pytest.raises(EmbeddingError, match="dimension changed"):
                await ollama_embedder.embed("second")

    async def test_non_finite_values_rejected(self, ollama_embedder):
        """Test NaN components are an embedding error."""
        with patch.object(ollama_embedder.client, "embeddings", new_callable=AsyncMock) as mock_embed:
            mock_embed.return_value = {"embedding": [0.1, float("nan")]}

            with pytest.raises(EmbeddingError, match="non-finite"):
                await ollama_embedder.embed("test")
