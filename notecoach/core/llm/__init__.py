"""
Completion provider abstraction layer.

Supported providers:
- Ollama (native SDK)
- OpenAI (official SDK)
"""

from notecoach.core.llm.base import CompletionProvider
from notecoach.core.llm.ollama import OllamaCompletion
from notecoach.core.llm.openai import OpenAICompletion

__all__ = [
    "CompletionProvider",
    "OllamaCompletion",
    "OpenAICompletion",
]
