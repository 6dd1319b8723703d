"""
Tests for cosine similarity and link suggestion.
"""

import math

import pytest

from notecoach.core.relationships.semantic import (
    LinkSuggester,
    batch_cosine_similarity,
    cosine_similarity,
)
from notecoach.models.block import UserBlock
from notecoach.utils.exceptions import ValidationError


def embedded_block(content: str, embedding: list[float]) -> UserBlock:
    """Build a block that already carries an embedding."""
    block = UserBlock(content=content, embedding=embedding)
    block.embedded_hash = block.content_hash
    return block


WOLF = [0.85, math.sqrt(1 - 0.85**2)]
FOX = [1.0, 0.0]


@pytest.mark.unit
class TestCosineSimilarity:
    """Test cosine similarity identities."""

    def test_identical_vectors(self):
        """Test cos(v, v) == 1."""
        assert cosine_similarity([0.3, 0.4, 0.5], [0.3, 0.4, 0.5]) == pytest.approx(1.0)

    def test_orthogonal_vectors(self):
        """Test orthogonal vectors score 0."""
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    def test_opposite_vectors(self):
        """Test opposite vectors score -1."""
        assert cosine_similarity([1.0, 2.0], [-1.0, -2.0]) == pytest.approx(-1.0)

    def test_symmetric(self):
        """Test cos(a, b) == cos(b, a)."""
        a, b = [0.2, 0.9, 0.1], [0.7, 0.1, 0.4]
        assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))

    def test_scale_invariant(self):
        """Test magnitude doesn't matter."""
        assert cosine_similarity([1.0, 1.0], [5.0, 5.0]) == pytest.approx(1.0)

    def test_zero_vector_is_zero_not_nan(self):
        """Test zero-magnitude vectors score exactly 0."""
        score = cosine_similarity([0.0, 0.0], [1.0, 0.0])

        assert score == 0.0
        assert not math.isnan(score)

    def test_dimension_mismatch(self):
        """Test vectors of different length are rejected."""
        with pytest.raises(ValidationError):
            cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])

    def test_batch_keeps_order(self):
        """Test batch scores line up with the input order."""
        scores = batch_cosine_similarity([1.0, 0.0], [[0.0, 1.0], [1.0, 0.0], WOLF])

        assert scores == pytest.approx([0.0, 1.0, 0.85])

    def test_batch_empty(self):
        """Test empty batch."""
        assert batch_cosine_similarity([1.0, 0.0], []) == []


@pytest.mark.unit
class TestLinkSuggester:
    """Test link emission."""

    def test_similar_blocks_linked(self):
        """Test a block at 0.85 similarity is linked with that strength."""
        fox = embedded_block("The quick brown fox", FOX)
        wolf = embedded_block("A fast brown wolf", WOLF)

        links = LinkSuggester().suggest(wolf.id, wolf.embedding, [fox])

        assert len(links) == 1
        assert links[0].from_id == wolf.id
        assert links[0].to_id == fox.id
        assert links[0].strength == pytest.approx(0.85)

    def test_orthogonal_blocks_not_linked(self):
        """Test unrelated blocks produce no link."""
        a = embedded_block("a", [1.0, 0.0])
        b = embedded_block("b", [0.0, 1.0])

        assert LinkSuggester().suggest(b.id, b.embedding, [a]) == []

    def test_threshold_is_strict(self):
        """Test a score equal to the threshold is not linked."""
        a = embedded_block("a", [1.0, 0.0])
        b = embedded_block("b", [1.0, 0.0])

        assert LinkSuggester(similarity_threshold=1.0).suggest(b.id, b.embedding, [a]) == []
        assert len(LinkSuggester(similarity_threshold=0.99).suggest(b.id, b.embedding, [a])) == 1

    def test_self_never_linked(self):
        """Test the block itself is skipped among candidates."""
        a = embedded_block("a", [1.0, 0.0])

        assert LinkSuggester().suggest(a.id, a.embedding, [a]) == []

    def test_unembedded_and_mismatched_skipped(self):
        """Test candidates without a comparable embedding are ignored."""
        new = embedded_block("new", [1.0, 0.0])
        unembedded = UserBlock(content="pending")
        wrong_dim = embedded_block("other model", [1.0, 0.0, 0.0])
        match = embedded_block("match", [1.0, 0.0])

        links = LinkSuggester().suggest(new.id, new.embedding, [unembedded, wrong_dim, match])

        assert [link.to_id for link in links] == [match.id]

    def test_links_follow_candidate_order(self):
        """Test every qualifying candidate yields a link, in order."""
        new = embedded_block("new", FOX)
        candidates = [
            embedded_block("c1", WOLF),
            embedded_block("c2", [0.0, 1.0]),
            embedded_block("c3", [2.0, 0.0]),
        ]

        links = LinkSuggester().suggest(new.id, new.embedding, candidates)

        assert [link.to_id for link in links] == [candidates[0].id, candidates[2].id]
        assert all(0.0 <= link.strength <= 1.0 for link in links)

    def test_score_pairs(self):
        """Test raw scores are returned with their blocks."""
        new = embedded_block("new", FOX)
        other = embedded_block("other", [0.0, 1.0])

        scored = LinkSuggester().score(new.id, new.embedding, [other])

        assert scored[0][0] is other
        assert scored[0][1] == pytest.approx(0.0)
