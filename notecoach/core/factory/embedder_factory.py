"""
Factory for creating embedding providers.
"""

from notecoach.config import EmbedderConfig
from notecoach.core.embeddings.base import EmbeddingProvider
from notecoach.core.embeddings.ollama import OllamaEmbedder
from notecoach.core.embeddings.openai import OpenAIEmbedder
from notecoach.utils.exceptions import ConfigurationError


class EmbedderFactory:
    """Factory for creating embedding providers from configuration."""

    @staticmethod
    def create(config: EmbedderConfig) -> EmbeddingProvider:
        """
        Create embedder from configuration.

        Args:
            config: Embedder configuration

        Returns:
            Embedding provider instance

        Raises:
            ConfigurationError: If provider is not supported or misconfigured
        """
        if config.provider == "ollama":
            return OllamaEmbedder(
                host=config.base_url,
                model=config.model,
                timeout=config.timeout,
            )
        elif config.provider == "openai":
            if not config.api_key:
                raise ConfigurationError("OpenAI API key is required")
            return OpenAIEmbedder(
                api_key=config.api_key,
                model=config.model,
                timeout=config.timeout,
            )
        else:
            raise ConfigurationError(f"Unsupported embedder provider: {config.provider}")

    @staticmethod
    async def get_dimension(
        embedder: EmbeddingProvider, config: EmbedderConfig | None = None
    ) -> int:
        """
        Get embedding dimension with fallback logic.

        Priority:
        1. From config if provided
        2. From the provider itself

        Args:
            embedder: Embedding provider instance
            config: Optional embedder config with dimension hint

        Returns:
            Embedding dimension
        """
        if config and config.dimension:
            return config.dimension

        return await embedder.get_dimension()
