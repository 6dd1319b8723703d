"""
Shared test fixtures for all test modules.

Providers are replaced by in-memory fakes so no test needs a running
Ollama server or an OpenAI key.
"""

import asyncio

import pytest

from notecoach.config import CoachConfig
from notecoach.core.block_store import BlockStore
from notecoach.core.embeddings.base import EmbeddingProvider
from notecoach.core.llm.base import CompletionProvider
from notecoach.services.coach_session import CoachSession
from notecoach.utils.exceptions import EmbeddingError, LLMError, ValidationError


class FakeEmbedder(EmbeddingProvider):
    """
    Embedder returning fixed vectors.

    Known texts map to the vectors given at construction. Unknown texts get
    one-hot vectors, so distinct unknown texts are orthogonal.
    """

    def __init__(self, vectors: dict[str, list[float]] | None = None, dimension: int = 8):
        self.vectors = dict(vectors or {})
        self.dimension = dimension
        self.fail = False
        self.calls: list[str] = []
        self._assigned: dict[str, list[float]] = {}

    async def embed(self, text: str, **kwargs) -> list[float]:
        if not text or not text.strip():
            raise ValidationError("Text cannot be empty")
        self.calls.append(text)
        if self.fail:
            raise EmbeddingError("embedder offline")
        if text in self.vectors:
            return list(self.vectors[text])
        if text not in self._assigned:
            vector = [0.0] * self.dimension
            vector[len(self._assigned) % self.dimension] = 1.0
            self._assigned[text] = vector
        return list(self._assigned[text])

    async def get_dimension(self) -> int:
        return self.dimension

    async def close(self):
        pass


class FakeCompletion(CompletionProvider):
    """
    Completion provider echoing the user text as a question.

    ``delays`` maps user text to seconds slept before answering.
    """

    def __init__(self, delays: dict[str, float] | None = None):
        self.delays = dict(delays or {})
        self.fail = False
        self.reply: str | None = None
        self.calls: list[dict] = []

    async def complete(
        self,
        system_prompt: str,
        user_text: str,
        max_tokens: int = 50,
        temperature: float | None = None,
        **kwargs,
    ) -> str:
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_text": user_text,
                "max_tokens": max_tokens,
                "time": asyncio.get_running_loop().time(),
            }
        )
        delay = self.delays.get(user_text, 0)
        if delay:
            await asyncio.sleep(delay)
        if self.fail:
            raise LLMError("completion offline")
        if self.reply is not None:
            return self.reply
        return f"What about {user_text}?"

    async def close(self):
        pass


@pytest.fixture
def store():
    """Empty block store."""
    return BlockStore()


@pytest.fixture
def embedder():
    """Fake embedder with orthogonal vectors for unknown texts."""
    return FakeEmbedder()


@pytest.fixture
def llm():
    """Fake completion provider."""
    return FakeCompletion()


@pytest.fixture
def coach_config():
    """Coach config with a short debounce window."""
    return CoachConfig(debounce_seconds=0.05)


@pytest.fixture
def session(store, embedder, llm, coach_config):
    """Coach session wired to the fakes."""
    return CoachSession(store=store, embedder=embedder, llm=llm, config=coach_config)
