"""
Abstract base class for completion providers.
Produces the coach's follow-up question from a system prompt and user text.
"""

from abc import ABC, abstractmethod


class CompletionProvider(ABC):
    """
    Abstract base for chat completion providers.

    Responsibilities:
    - Single-turn chat completion (system prompt + user text)
    - Wrap transport/API failures into LLMError
    """

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_text: str,
        max_tokens: int = 50,
        temperature: float | None = None,
        **kwargs,
    ) -> str:
        """
        Generate a completion.

        Args:
            system_prompt: Instructions plus any context for the model
            user_text: The writer's submitted text
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature (provider default when None)
            **kwargs: Provider-specific parameters

        Returns:
            Generated text

        Raises:
            LLMError: If the provider call fails or returns nothing
        """
        pass

    @abstractmethod
    async def close(self):
        """
        Close any open connections.
        """
