"""Semantic similarity and link suggestion between embedded blocks."""

from collections.abc import Iterable

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity as pairwise_cosine

from notecoach.models.block import Block
from notecoach.models.relationships import Link
from notecoach.utils.exceptions import ValidationError
from notecoach.utils.logger import get_logger

logger = get_logger(__name__)


def cosine_similarity(embedding1: list[float], embedding2: list[float]) -> float:
    """
    Compute cosine similarity between two embeddings.

    Defined as 0.0 (never NaN) when either vector has zero magnitude.

    Args:
        embedding1: First embedding vector
        embedding2: Second embedding vector

    Returns:
        Similarity score in [-1, 1]

    Raises:
        ValidationError: If the vectors have different dimensions
    """
    return batch_cosine_similarity(embedding1, [embedding2])[0]


def batch_cosine_similarity(
    query_embedding: list[float], embeddings: list[list[float]]
) -> list[float]:
    """
    Compute cosine similarity between a query and multiple embeddings.

    Args:
        query_embedding: Query embedding vector
        embeddings: List of embedding vectors to compare against

    Returns:
        List of similarity scores, same order as ``embeddings``

    Raises:
        ValidationError: If any vector dimension differs from the query's
    """
    if not embeddings:
        return []

    query_vec = np.asarray(query_embedding, dtype=float).reshape(1, -1)
    if any(len(embedding) != query_vec.shape[1] for embedding in embeddings):
        raise ValidationError(
            "Embedding dimensions do not match",
            context={"query_dimension": query_vec.shape[1]},
        )
    embedding_matrix = np.asarray(embeddings, dtype=float)

    # Zero vectors normalize to zero, so their similarity is 0 rather than NaN
    similarities = pairwise_cosine(query_vec, embedding_matrix)[0]
    similarities = np.nan_to_num(np.clip(similarities, -1.0, 1.0), nan=0.0)

    return [float(score) for score in similarities]


class LinkSuggester:
    """
    Suggests links from a newly embedded block to previously embedded blocks.

    Every candidate whose cosine similarity is strictly above the threshold
    yields one directional link. Earlier links are never consulted, so a
    mirrored pair can appear over time.

    Cost is linear in the number of embedded candidates, which is fine at
    the scale of a single writing session.
    """

    def __init__(self, similarity_threshold: float = 0.8):
        """
        Initialize link suggester.

        Args:
            similarity_threshold: Similarity a candidate must exceed to be linked
        """
        self.similarity_threshold = similarity_threshold

    def score(
        self, block_id: str, embedding: list[float], candidates: Iterable[Block]
    ) -> list[tuple[Block, float]]:
        """
        Score every embedded candidate other than the block itself.

        Candidates without an embedding or with a mismatched dimension are skipped.

        Args:
            block_id: Id of the block being compared
            embedding: Its embedding
            candidates: Blocks to compare against

        Returns:
            (block, similarity) pairs in candidate order
        """
        comparable = [
            block
            for block in candidates
            if block.id != block_id
            and block.embedding is not None
            and len(block.embedding) == len(embedding)
        ]
        if not comparable:
            return []

        scores = batch_cosine_similarity(embedding, [block.embedding for block in comparable])
        return list(zip(comparable, scores))

    def suggest(
        self, block_id: str, embedding: list[float], candidates: Iterable[Block]
    ) -> list[Link]:
        """
        Emit links for every candidate above the similarity threshold.

        Args:
            block_id: Newly embedded block (link source)
            embedding: Its embedding
            candidates: Previously embedded blocks (link targets)

        Returns:
            New links, in candidate order
        """
        links = [
            Link(from_id=block_id, to_id=block.id, strength=min(1.0, score))
            for block, score in self.score(block_id, embedding, candidates)
            if score > self.similarity_threshold
        ]

        logger.debug(
            f"Suggested {len(links)} links",
            extra={"block_id": block_id, "threshold": self.similarity_threshold},
        )
        return links
