"""
Context Builder - assembles the bounded context for a completion call.

Two sources are combined:
1. Similarity: the blocks closest to the submitting block (top-k)
2. Recency: the most recent submitted interactions (last-k)

Similarity content comes first, recency content second, newline-joined.
"""

from collections.abc import Iterable

from notecoach.core.relationships.semantic import LinkSuggester
from notecoach.models.block import Block
from notecoach.models.chat import Interaction
from notecoach.models.session import CoachContext, ScoredBlock
from notecoach.utils.logger import get_logger

logger = get_logger(__name__)


class ContextBuilder:
    """Ranks embedded blocks and recent interactions into a prompt context."""

    def __init__(
        self,
        scorer: LinkSuggester,
        system_prompt: str,
        similar_limit: int = 3,
        recent_limit: int = 3,
    ):
        """
        Initialize context builder.

        Args:
            scorer: Similarity scorer shared with link suggestion
            system_prompt: Coach instructions placed before the context
            similar_limit: Number of similarity-ranked blocks to include
            recent_limit: Number of recent interactions to include
        """
        self.scorer = scorer
        self.system_prompt = system_prompt
        self.similar_limit = similar_limit
        self.recent_limit = recent_limit

    def build(
        self,
        block_id: str,
        embedding: list[float] | None,
        candidates: Iterable[Block],
        interactions: Iterable[Interaction],
    ) -> CoachContext:
        """
        Build the context for one submission.

        Args:
            block_id: Submitting block; never part of its own context
            embedding: Its embedding, or None when embedding failed
            candidates: Blocks eligible for similarity ranking
            interactions: Interaction log, excluding the current submission

        Returns:
            Context with the ranked entries and the joined text
        """
        similar = self.rank_similar(block_id, embedding, candidates)
        recent = self.most_recent(interactions)

        text = "\n".join(
            [scored.block.content for scored in similar]
            + [interaction.content for interaction in recent]
        )

        logger.debug(
            "Context built",
            extra={"block_id": block_id, "similar": len(similar), "recent": len(recent)},
        )
        return CoachContext(similar=similar, recent=recent, text=text)

    def rank_similar(
        self, block_id: str, embedding: list[float] | None, candidates: Iterable[Block]
    ) -> list[ScoredBlock]:
        """
        Top blocks by similarity, descending. Ties keep candidate order.
        """
        if embedding is None or self.similar_limit == 0:
            return []

        scored = self.scorer.score(block_id, embedding, candidates)
        # sorted() is stable, and reverse=True preserves the order of equal keys
        ranked = sorted(scored, key=lambda pair: pair[1], reverse=True)

        return [
            ScoredBlock(block=block, score=score) for block, score in ranked[: self.similar_limit]
        ]

    def most_recent(self, interactions: Iterable[Interaction]) -> list[Interaction]:
        """
        Latest interactions by timestamp, returned oldest first.
        """
        if self.recent_limit == 0:
            return []
        ordered = sorted(interactions, key=lambda interaction: interaction.timestamp)
        return ordered[-self.recent_limit :]

    def system_message(self, context: CoachContext) -> str:
        """Coach instructions followed by the context text."""
        return f"{self.system_prompt}\n{context.text}"
