"""
Factory for creating completion providers.
"""

from notecoach.config import LLMConfig
from notecoach.core.llm.base import CompletionProvider
from notecoach.core.llm.ollama import OllamaCompletion
from notecoach.core.llm.openai import OpenAICompletion
from notecoach.utils.exceptions import ConfigurationError


class LLMFactory:
    """Factory for creating completion providers from configuration."""

    @staticmethod
    def create(config: LLMConfig) -> CompletionProvider:
        """
        Create completion provider from configuration.

        Args:
            config: LLM configuration

        Returns:
            Completion provider instance

        Raises:
            ConfigurationError: If provider is not supported or misconfigured
        """
        if config.provider == "ollama":
            return OllamaCompletion(
                host=config.base_url,
                model=config.model,
                timeout=config.timeout,
                temperature=config.temperature,
            )
        elif config.provider == "openai":
            if not config.api_key:
                raise ConfigurationError("OpenAI API key is required")
            return OpenAICompletion(
                api_key=config.api_key,
                model=config.model,
                timeout=config.timeout,
                temperature=config.temperature,
            )
        else:
            raise ConfigurationError(f"Unsupported LLM provider: {config.provider}")
