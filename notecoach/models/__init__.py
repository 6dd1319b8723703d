"""
Data models for NoteCoach.

Core models:
- Note: ordered container of blocks
- UserBlock, AIBlock: block variants (tagged on ``role``)
- Link: directed similarity suggestion between blocks
- ChatMessage, Interaction: transcript and recency log
- DocumentNode: editor-side projection of a block
- SessionState, CoachContext, SubmissionResult, SearchResult: cycle results
"""

from notecoach.models.block import (
    AIBlock,
    BaseBlock,
    Block,
    BlockRole,
    UserBlock,
    compute_content_hash,
)
from notecoach.models.chat import ChatMessage, Interaction, Sender
from notecoach.models.document import (
    AI_RESPONSE,
    PARAGRAPH,
    DocumentNode,
    ReconcileDiff,
    fingerprint_nodes,
)
from notecoach.models.note import Note
from notecoach.models.relationships import Link
from notecoach.models.session import (
    CoachContext,
    ScoredBlock,
    SearchResult,
    SessionState,
    SubmissionResult,
)

__all__ = [
    # Block models
    "Block",
    "BaseBlock",
    "BlockRole",
    "UserBlock",
    "AIBlock",
    "compute_content_hash",
    # Note
    "Note",
    # Relationship models
    "Link",
    # Conversation models
    "ChatMessage",
    "Interaction",
    "Sender",
    # Document models
    "DocumentNode",
    "PARAGRAPH",
    "AI_RESPONSE",
    "fingerprint_nodes",
    "ReconcileDiff",
    # Session models
    "SessionState",
    "ScoredBlock",
    "CoachContext",
    "SubmissionResult",
    "SearchResult",
]
