"""
Tests for note search.
"""

import pytest

from notecoach.models.block import UserBlock
from notecoach.services.embedding_index import EmbeddingIndex
from notecoach.services.note_search import NoteSearch


@pytest.fixture
def search(embedder, store):
    """Note search over the fake embedder."""
    embedder.vectors.update(
        {
            "beach day": [1.0, 0.0, 0.0],
            "swimming in the sea": [0.9, 0.1, 0.0],
            "tax forms": [0.0, 1.0, 0.0],
            "ocean": [1.0, 0.0, 0.0],
            "inland": [-1.0, 0.0, 0.0],
        }
    )
    return NoteSearch(EmbeddingIndex(embedder, store), store, limit=5)


async def add_note(store, search, title: str, *contents: str):
    """Create a note whose blocks are embedded."""
    note = store.create_note(title=title)
    for content in contents:
        block = store.append_block(note.id, UserBlock(content=content))
        await search.index.embed_block(block)
    return note


@pytest.mark.unit
@pytest.mark.asyncio
class TestNoteSearch:
    """Test note ranking."""

    async def test_ranks_by_best_block(self, store, search):
        """Test notes are ordered by their most similar block."""
        paperwork = await add_note(store, search, "Paperwork", "tax forms")
        summer = await add_note(store, search, "Summer", "tax forms", "swimming in the sea")

        results = await search.search("ocean")

        assert [r.note.id for r in results] == [summer.id, paperwork.id]
        assert results[0].similarity == pytest.approx(0.9 / (0.81 + 0.01) ** 0.5)
        assert results[1].similarity == pytest.approx(0.0)

    async def test_note_without_embeddings_scores_zero(self, store, search):
        """Test notes with no embedded blocks are still listed."""
        empty = store.create_note(title="Empty")

        results = await search.search("ocean")

        assert [(r.note.id, r.similarity) for r in results] == [(empty.id, 0.0)]

    async def test_opposing_blocks_score_zero(self, store, search):
        """Test a note whose only block points away from the query is not negative."""
        desert = await add_note(store, search, "Desert", "inland")

        results = await search.search("ocean")

        assert [(r.note.id, r.similarity) for r in results] == [(desert.id, 0.0)]

    async def test_limit(self, store, search):
        """Test the result count is bounded."""
        for i in range(4):
            await add_note(store, search, f"Note {i}", "beach day")

        assert len(await search.search("ocean", limit=2)) == 2
        assert len(await search.search("ocean")) == 4

    async def test_empty_query(self, store, search):
        """Test blank queries return nothing."""
        await add_note(store, search, "Summer", "beach day")

        assert await search.search("  ") == []

    async def test_embedding_failure(self, store, search, embedder):
        """Test an unavailable embedder yields no results."""
        await add_note(store, search, "Summer", "beach day")
        embedder.fail = True

        assert await search.search("ocean") == []
