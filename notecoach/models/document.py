"""
Editor-side node model.

The editable document is owned by an external editor. The bridge talks to
it in terms of DocumentNode values whose ``id`` is the block id.
"""

import hashlib
import json
from typing import Any

from pydantic import BaseModel, Field

PARAGRAPH = "paragraph"
AI_RESPONSE = "ai-response"


class DocumentNode(BaseModel):
    """A single node of the editable document tree."""

    id: str = Field(..., description="External node id; equals the block id")
    type: str = Field(default=PARAGRAPH, description="Node type: paragraph or ai-response")
    content: str = Field(default="", description="Plain text content")
    props: dict[str, Any] = Field(default_factory=dict, description="Type-specific props")
    editable: bool = Field(default=True, description="Whether the writer may edit the node")

    @property
    def is_ai(self) -> bool:
        """True for coach response nodes."""
        return self.type == AI_RESPONSE


def fingerprint_nodes(nodes: list[DocumentNode]) -> str:
    """
    Compute an order-sensitive fingerprint of a document state.

    Only id, type and content take part, so cursor moves or prop noise from
    the editor do not look like edits.

    Args:
        nodes: Document nodes in order

    Returns:
        Hash string in format "sha256:hexdigest"
    """
    payload = json.dumps(
        [[node.id, node.type, node.content] for node in nodes],
        ensure_ascii=False,
        separators=(",", ":"),
    )
    return f"sha256:{hashlib.sha256(payload.encode('utf-8')).hexdigest()}"


class ReconcileDiff(BaseModel):
    """Changes applied to the block store from one document state."""

    inserted: list[str] = Field(default_factory=list)
    updated: list[str] = Field(default_factory=list)
    deleted: list[str] = Field(default_factory=list)
    reordered: bool = False
    rekeyed: dict[str, str] = Field(
        default_factory=dict, description="Node ids that collided with retired block ids"
    )
    retyped: list[str] = Field(
        default_factory=list, description="Ids whose node kind no longer matched the stored block"
    )

    @property
    def is_empty(self) -> bool:
        """True when the document matched the store."""
        return not (
            self.inserted or self.updated or self.deleted or self.reordered or self.retyped
        )

    @property
    def changed_ids(self) -> list[str]:
        """Ids whose content was inserted or edited."""
        return self.inserted + self.updated
