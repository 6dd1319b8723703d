"""
Ollama completion provider using native ollama-python SDK.
"""

import ollama

from notecoach.core.llm.base import CompletionProvider
from notecoach.utils.exceptions import LLMError
from notecoach.utils.logger import get_logger

logger = get_logger(__name__)


class OllamaCompletion(CompletionProvider):
    """
    Ollama chat completion provider.
    """

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "llama3.1:8b",
        timeout: float = 120.0,
        temperature: float = 0.7,
    ):
        """
        Initialize Ollama completion provider.

        Args:
            host: Ollama server URL
            model: Model name for text generation (e.g., "llama3.1", "mistral")
            timeout: Request timeout in seconds
            temperature: Default sampling temperature
        """
        self.host = host
        self.temperature = temperature
        self.model = model
        self.timeout = timeout

        self.client = ollama.AsyncClient(host=host, timeout=timeout)

    async def complete(
        self,
        system_prompt: str,
        user_text: str,
        max_tokens: int = 50,
        temperature: float | None = None,
        **kwargs,
    ) -> str:
        """
        Generate completion using Ollama.

        Args:
            system_prompt: System message content
            user_text: User message content
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature (provider default when None)
            **kwargs: Additional options (passed to Ollama)

        Returns:
            Generated text

        Raises:
            LLMError: If the Ollama call fails or returns empty content
        """
        options = {
            "temperature": self.temperature if temperature is None else temperature,
            "num_predict": max_tokens,
            **kwargs.get("options", {}),
        }
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_text},
        ]

        try:
            response = await self.client.chat(
                model=self.model,
                messages=messages,
                options=options,
                **{k: v for k, v in kwargs.items() if k != "options"},
            )
            content = response["message"]["content"]
        except Exception as e:
            logger.error(
                "Ollama chat error",
                extra={"model": self.model, "host": self.host, "error": str(e)},
            )
            raise LLMError(f"Ollama chat error: {e}") from e

        if not content or not content.strip():
            raise LLMError("Ollama returned empty content")

        return content.strip()

    async def close(self):
        """Close client (Ollama SDK handles cleanup internally)."""
        pass
