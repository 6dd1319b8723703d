"""
Results produced by a coaching cycle.
"""

from enum import Enum

from pydantic import BaseModel, Field

from notecoach.models.block import AIBlock, Block
from notecoach.models.chat import Interaction
from notecoach.models.note import Note
from notecoach.models.relationships import Link


class SessionState(str, Enum):
    """Phases of one submission cycle."""

    IDLE = "idle"
    EMBEDDING = "embedding"
    LINKING = "linking"
    CONTEXT_BUILDING = "context_building"
    COMPLETING = "completing"
    APPENDING_RESULT = "appending_result"


class ScoredBlock(BaseModel):
    """A block ranked by similarity to the submitting block."""

    block: Block
    score: float


class CoachContext(BaseModel):
    """Bounded context handed to the completion call."""

    similar: list[ScoredBlock] = Field(default_factory=list)
    recent: list[Interaction] = Field(default_factory=list)
    text: str = ""


class SubmissionResult(BaseModel):
    """Outcome of one submission cycle."""

    note_id: str
    block_id: str
    ai_block: AIBlock
    links: list[Link] = Field(default_factory=list)
    context: CoachContext = Field(default_factory=CoachContext)
    embedded: bool = Field(default=False, description="Whether the submitted block was embedded")
    used_fallback: bool = Field(default=False, description="Whether the fallback reply was used")


class SearchResult(BaseModel):
    """A note ranked against a search query."""

    note: Note
    similarity: float
