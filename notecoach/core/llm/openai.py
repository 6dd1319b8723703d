"""
OpenAI completion provider using official SDK.
"""

from openai import AsyncOpenAI

from notecoach.core.llm.base import CompletionProvider
from notecoach.utils.exceptions import LLMError
from notecoach.utils.logger import get_logger

logger = get_logger(__name__)


class OpenAICompletion(CompletionProvider):
    """
    OpenAI chat completion provider.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        organization: str | None = None,
        base_url: str | None = None,
        timeout: float = 120.0,
        temperature: float = 0.7,
    ):
        """
        Initialize OpenAI completion provider.

        Args:
            api_key: OpenAI API key
            model: Model name (e.g., "gpt-4o-mini", "gpt-3.5-turbo")
            organization: Optional organization ID
            base_url: Optional custom base URL
            timeout: Request timeout in seconds
            temperature: Default sampling temperature
        """
        self.model = model
        self.temperature = temperature

        self.client = AsyncOpenAI(
            api_key=api_key, organization=organization, base_url=base_url, timeout=timeout
        )

    async def complete(
        self,
        system_prompt: str,
        user_text: str,
        max_tokens: int = 50,
        temperature: float | None = None,
        **kwargs,
    ) -> str:
        """
        Generate completion using OpenAI.

        Args:
            system_prompt: System message content
            user_text: User message content
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature (provider default when None)
            **kwargs: Additional parameters (e.g., stop, presence_penalty)
        Returns:
            Generated text
        Raises:
            LLMError: If OpenAI API call fails or returns empty content
        """
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_text},
        ]

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=self.temperature if temperature is None else temperature,
                **kwargs,
            )
            content = response.choices[0].message.content if response.choices else None

            if not content:
                raise LLMError("OpenAI returned empty content")

            return content
        except LLMError:
            raise
        except Exception as e:
            logger.error(
                "OpenAI API error",
                extra={"model": self.model, "error": str(e), "error_type": type(e).__name__},
            )
            raise LLMError(f"OpenAI API error: {e}") from e

    async def close(self):
        """Close OpenAI client."""
        await self.client.close()
