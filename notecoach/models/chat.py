"""
Conversation records: the chat transcript and the interaction log.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from notecoach.utils.id_generator import generate_interaction_id


class Sender(str, Enum):
    """Author of a chat message."""

    AI = "AI"
    USER = "User"


class ChatMessage(BaseModel):
    """One line of the coach transcript."""

    sender: Sender
    text: str


class Interaction(BaseModel):
    """Submitted user text, kept for recency-based context."""

    id: str = Field(default_factory=generate_interaction_id, description="Interaction ID")
    timestamp: datetime = Field(default_factory=datetime.now, description="Submission time")
    content: str = Field(..., description="Submitted text")
