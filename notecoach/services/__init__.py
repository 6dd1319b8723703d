"""
Services for NoteCoach.

High-level coaching services:
- CoachSession: Submission cycle (embed, link, build context, complete, append)
- EditorBridge: Two-way sync between an editable document and the block store
- EmbeddingIndex: Cached block embeddings
- ContextBuilder: Similar and recent context for the completion call
- NoteSearch: Rank notes against a query
"""

from notecoach.services.coach_session import CoachSession
from notecoach.services.context_builder import ContextBuilder
from notecoach.services.editor_bridge import EditorBridge
from notecoach.services.embedding_index import EmbeddingIndex
from notecoach.services.note_search import NoteSearch

__all__ = [
    "CoachSession",
    "ContextBuilder",
    "EditorBridge",
    "EmbeddingIndex",
    "NoteSearch",
]
