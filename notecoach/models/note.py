"""
Note model: an ordered container of blocks.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from notecoach.models.block import Block
from notecoach.utils.id_generator import generate_note_id


class Note(BaseModel):
    """
    Ordered sequence of blocks.

    Block identity is independent of position: reordering changes only the
    order of ``blocks``, never a block's id, content or embedding.
    """

    id: str = Field(default_factory=generate_note_id, description="Unique note ID (note_xxx)")
    title: str = Field(default="New Note", description="Display title")
    blocks: list[Block] = Field(default_factory=list, description="Blocks in display order")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")

    @property
    def block_ids(self) -> list[str]:
        """Block ids in display order."""
        return [block.id for block in self.blocks]

    def index_of(self, block_id: str) -> int | None:
        """
        Find the position of a block.

        Args:
            block_id: Block to look up

        Returns:
            Zero-based index, or None if the block is not in this note
        """
        for index, block in enumerate(self.blocks):
            if block.id == block_id:
                return index
        return None
