"""
Note Search - ranks notes against a free-text query.

A note's score is the best similarity of any of its embedded blocks.
"""

from notecoach.core.block_store import BlockStore
from notecoach.core.relationships.semantic import batch_cosine_similarity
from notecoach.models.session import SearchResult
from notecoach.services.embedding_index import EmbeddingIndex
from notecoach.utils.logger import get_logger

logger = get_logger(__name__)


class NoteSearch:
    """Semantic search over the notes in a block store."""

    def __init__(self, index: EmbeddingIndex, store: BlockStore, limit: int = 5):
        self.index = index
        self.store = store
        self.limit = limit

    async def search(self, query: str, limit: int | None = None) -> list[SearchResult]:
        """
        Find the notes closest to a query.

        Scores are floored at 0, so notes without embedded blocks (or only
        opposing ones) score 0. An empty query or an embedding
        failure yields no results.

        Args:
            query: Search text
            limit: Maximum number of results (defaults to the configured limit)

        Returns:
            Results ordered by similarity, best first
        """
        if not query or not query.strip():
            return []

        query_vector = await self.index.embed_text(query)
        if query_vector is None:
            return []

        results = []
        for note in self.store.notes:
            vectors = [
                block.embedding
                for block in note.blocks
                if block.embedding is not None and len(block.embedding) == len(query_vector)
            ]
            scores = batch_cosine_similarity(query_vector, vectors)
            results.append(SearchResult(note=note, similarity=max([0.0, *scores])))

        results.sort(key=lambda result: result.similarity, reverse=True)

        logger.info(
            f"Search matched {len(results)} notes",
            extra={"query": query[:50], "notes": len(results)},
        )
        return results[: limit or self.limit]
