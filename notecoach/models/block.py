"""
Block models: the atomic unit of written content.

A block is either written by the user or produced by the coach. The two
variants form a tagged union discriminated on ``role`` so each carries only
the fields it needs.
"""

import hashlib
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from notecoach.utils.id_generator import generate_block_id


class BlockRole(str, Enum):
    """Author of a block."""

    USER = "user"
    AI = "ai"


class BaseBlock(BaseModel):
    """Fields shared by every block variant."""

    id: str = Field(default_factory=generate_block_id, description="Stable block ID (blk_xxx)")
    content: str = Field(default="", description="Block text")
    embedding: list[float] | None = Field(
        default=None, description="Vector embedding, present only after a successful embed"
    )
    embedded_hash: str | None = Field(
        default=None, description="Content hash the current embedding was computed from"
    )

    @property
    def content_hash(self) -> str:
        """Hash of the current content."""
        return compute_content_hash(self.content)

    def has_fresh_embedding(self) -> bool:
        """
        Check whether the embedding still describes the current content.

        Returns:
            True if an embedding is attached and was computed from this content
        """
        return self.embedding is not None and self.embedded_hash == self.content_hash


class UserBlock(BaseBlock):
    """Block typed by the writer."""

    role: Literal["user"] = "user"
    prompt: str = Field(default="", description="Coach question shown when the block was created")


class AIBlock(BaseBlock):
    """Coach response inserted after the block that triggered it."""

    role: Literal["ai"] = "ai"
    source_block_id: str | None = Field(
        default=None, description="User block whose submission produced this response"
    )


Block = Annotated[UserBlock | AIBlock, Field(discriminator="role")]


def compute_content_hash(content: str) -> str:
    """
    Compute SHA256 hash of content.

    The hash is prefixed with "sha256:" for easy identification of the algorithm used.
    Content is normalized (stripped) before hashing so whitespace-only edits
    do not count as a material change.

    Args:
        content: Text content to hash

    Returns:
        Hash string in format "sha256:hexdigest"
    """
    normalized = content.strip()
    hash_bytes = hashlib.sha256(normalized.encode("utf-8")).hexdigest()
    return f"sha256:{hash_bytes}"
