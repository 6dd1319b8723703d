"""Relationship inference between blocks."""

from notecoach.core.relationships.semantic import (
    LinkSuggester,
    batch_cosine_similarity,
    cosine_similarity,
)

__all__ = [
    "LinkSuggester",
    "cosine_similarity",
    "batch_cosine_similarity",
]
