"""
ID generation utilities for NoteCoach.

Every entity id is a type prefix followed by 12 hex characters:
- Notes: note_xxx
- Blocks: blk_xxx
- Interactions: int_xxx

Block ids double as document node ids in the editor.
"""

from uuid import uuid4


def _generate(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex[:12]}"


def generate_note_id() -> str:
    """Generate a unique Note ID (note_xxx)."""
    return _generate("note")


def generate_block_id() -> str:
    """
    Generate a unique Block ID.

    Returns:
        ID in format "blk_xxx" where xxx is 12 hex characters
    """
    return _generate("blk")


def generate_interaction_id() -> str:
    """Generate a unique Interaction ID (int_xxx)."""
    return _generate("int")
