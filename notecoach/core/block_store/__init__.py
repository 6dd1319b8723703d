"""
In-memory block store: the canonical model of notes, blocks and session logs.
"""

from notecoach.core.block_store.block_store import BlockStore

__all__ = ["BlockStore"]
