"""
Link model: directed, weighted suggestion of semantic relation between blocks.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class Link(BaseModel):
    """
    Directed similarity link from a newly embedded block to an existing one.

    Links are append-only. Mirrored pairs (A->B and later B->A) are kept.
    """

    from_id: str = Field(..., description="Newly submitted block")
    to_id: str = Field(..., description="Previously embedded block")
    strength: float = Field(..., ge=0.0, le=1.0, description="Cosine similarity")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")
