"""
Factory modules for creating NoteCoach providers from configuration.
"""

from notecoach.core.factory.embedder_factory import EmbedderFactory
from notecoach.core.factory.llm_factory import LLMFactory

__all__ = [
    "LLMFactory",
    "EmbedderFactory",
]
