"""
Embedding provider abstraction layer.

Supported providers:
- Ollama (native SDK)
- OpenAI (official SDK)
"""

from notecoach.core.embeddings.base import EmbeddingProvider
from notecoach.core.embeddings.ollama import OllamaEmbedder
from notecoach.core.embeddings.openai import OpenAIEmbedder

__all__ = [
    "EmbeddingProvider",
    "OllamaEmbedder",
    "OpenAIEmbedder",
]
