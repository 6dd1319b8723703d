"""
Coach Session - orchestrates one submission cycle.

Cycle:
IDLE -> EMBEDDING -> LINKING -> CONTEXT_BUILDING -> COMPLETING -> APPENDING_RESULT -> IDLE

Failure policy:
- Embedding failure: linking is skipped and the context is recency-only
- Completion failure: a fixed fallback question is used
Either way the cycle completes and appends its results.

Cycles are serialized per note so coach replies are appended in the order
their submissions were made, whatever order the provider calls return in.
"""

import asyncio
from collections import defaultdict
from datetime import datetime

from notecoach.config import CoachConfig
from notecoach.core.block_store import BlockStore
from notecoach.core.embeddings.base import EmbeddingProvider
from notecoach.core.llm.base import CompletionProvider
from notecoach.core.relationships.semantic import LinkSuggester
from notecoach.models.block import AIBlock, Block, BlockRole
from notecoach.models.chat import Sender
from notecoach.models.note import Note
from notecoach.models.session import CoachContext, SearchResult, SessionState, SubmissionResult
from notecoach.services.context_builder import ContextBuilder
from notecoach.services.embedding_index import EmbeddingIndex
from notecoach.services.note_search import NoteSearch
from notecoach.utils.exceptions import NotFoundError, ProviderError, ValidationError
from notecoach.utils.logger import get_logger

logger = get_logger(__name__)


class CoachSession:
    """
    Writing coach bound to a block store.

    Features:
    - Embed, link, build context and complete for each submission
    - Per-note FIFO serialization of cycles
    - Opening question and note search
    """

    def __init__(
        self,
        store: BlockStore,
        embedder: EmbeddingProvider,
        llm: CompletionProvider,
        config: CoachConfig | None = None,
    ):
        """
        Initialize coach session.

        Args:
            store: Block store holding notes and session logs
            embedder: Embedding provider
            llm: Completion provider
            config: Coach behaviour settings
        """
        self.store = store
        self.llm = llm
        self.config = config or CoachConfig()

        self.index = EmbeddingIndex(embedder, store, cache_size=self.config.embedding_cache_size)
        self.link_suggester = LinkSuggester(similarity_threshold=self.config.similarity_threshold)
        self.context_builder = ContextBuilder(
            scorer=self.link_suggester,
            system_prompt=self.config.system_prompt,
            similar_limit=self.config.similar_context_size,
            recent_limit=self.config.recent_context_size,
        )
        self.note_search = NoteSearch(self.index, store, limit=self.config.search_limit)

        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._states: dict[str, SessionState] = {}
        self._closed = False

    # ------------------------------------------------------------------ state

    @property
    def closed(self) -> bool:
        """Whether the session has been torn down."""
        return self._closed

    @property
    def state(self) -> SessionState:
        """Cycle state of the current note."""
        note = self.store.current_note
        return self.state_of(note.id) if note else SessionState.IDLE

    def state_of(self, note_id: str) -> SessionState:
        """Cycle state of a given note."""
        return self._states.get(note_id, SessionState.IDLE)

    def _set_state(self, note_id: str, state: SessionState) -> None:
        self._states[note_id] = state
        logger.debug(f"Note {note_id} -> {state.value}", extra={"note_id": note_id})

    # ------------------------------------------------------------- submission

    async def submit(
        self, content: str, block_id: str | None = None, note_id: str | None = None
    ) -> SubmissionResult | None:
        """
        Run one coaching cycle for submitted text.

        Args:
            content: Submitted text
            block_id: Existing user block that holds the text; when omitted a new
                user block is appended to ``note_id`` or the current note
            note_id: Target note for a new block (ignored with ``block_id``)

        Returns:
            Cycle result, or None if the session closed while the cycle was in flight

        Raises:
            ValidationError: If content is blank, the block is an AI block,
                or the session is closed
            NotFoundError: If block_id or note_id doesn't exist
        """
        if not content or not content.strip():
            raise ValidationError("Submission content cannot be empty")
        if self._closed:
            raise ValidationError("Coach session is closed")

        # Resolve the trigger before waiting so blocks keep submission order
        note, block = self._resolve_trigger(content, block_id, note_id)

        logger.info(
            "Submission queued",
            extra={"note_id": note.id, "block_id": block.id, "preview": content[:50]},
        )

        async with self._locks[note.id]:
            if self._closed:
                return None
            return await self._run_cycle(note, block, content)

    def _resolve_trigger(
        self, content: str, block_id: str | None, note_id: str | None
    ) -> tuple[Note, Block]:
        if block_id is not None:
            block = self.store.get_block(block_id)
            if block is None:
                raise NotFoundError(f"Block not found: {block_id}", context={"block_id": block_id})
            if block.role == BlockRole.AI:
                raise ValidationError(
                    "Coach blocks cannot be submitted", context={"block_id": block_id}
                )
            if block.content != content:
                self.store.update_block_content(block_id, content)
            return self.store.note_for_block(block_id), block

        if note_id is not None:
            note = self.store.get_note(note_id)
            if note is None:
                raise NotFoundError(f"Note not found: {note_id}", context={"note_id": note_id})
        else:
            note = self.store.current_note or self.store.create_note(title=_title_from(content))

        block = self.store.append_block(note.id, self.store.new_user_block(content))
        return note, block

    async def _run_cycle(self, note: Note, block: Block, content: str) -> SubmissionResult | None:
        try:
            self._set_state(note.id, SessionState.EMBEDDING)
            embedding = await self.index.embed_block(block, content)

            links = []
            if embedding is not None:
                self._set_state(note.id, SessionState.LINKING)
                links = self.store.add_links(
                    self.link_suggester.suggest(
                        block.id, embedding, self.store.embedded_blocks(exclude=[block.id])
                    )
                )
            else:
                logger.warning(
                    "Block not embedded; using recency-only context",
                    extra={"block_id": block.id},
                )

            self._set_state(note.id, SessionState.CONTEXT_BUILDING)
            context = self.context_builder.build(
                block.id,
                embedding,
                self.store.embedded_blocks(exclude=[block.id]),
                self.store.interactions,
            )

            self._set_state(note.id, SessionState.COMPLETING)
            reply, used_fallback = await self._complete(content, context)

            if self._closed:
                logger.info(
                    "Session closed during cycle; discarding reply",
                    extra={"block_id": block.id},
                )
                return None

            self._set_state(note.id, SessionState.APPENDING_RESULT)
            ai_block = self._append_result(note, block, content, reply)

            logger.info(
                "Cycle complete",
                extra={
                    "note_id": note.id,
                    "block_id": block.id,
                    "links": len(links),
                    "used_fallback": used_fallback,
                },
            )
            return SubmissionResult(
                note_id=note.id,
                block_id=block.id,
                ai_block=ai_block,
                links=links,
                context=context,
                embedded=embedding is not None,
                used_fallback=used_fallback,
            )
        finally:
            self._set_state(note.id, SessionState.IDLE)

    async def _complete(self, content: str, context: CoachContext) -> tuple[str, bool]:
        try:
            reply = await self.llm.complete(
                system_prompt=self.context_builder.system_message(context),
                user_text=content,
                max_tokens=self.config.max_tokens,
            )
        except ProviderError as e:
            logger.warning(
                "Completion failed, using fallback",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            return self.config.fallback_response, True

        if not reply or not reply.strip():
            return self.config.fallback_response, True
        return reply.strip(), False

    def _append_result(self, note: Note, block: Block, content: str, reply: str) -> AIBlock:
        self.store.record_interaction(content)
        self.store.append_chat(Sender.USER, content)
        self.store.append_chat(Sender.AI, reply)

        ai_block = AIBlock(content=reply, source_block_id=block.id)
        if self.store.get_block(block.id) is not None:
            self.store.insert_block_after(block.id, ai_block)
        else:
            # Trigger was deleted while the cycle was in flight
            self.store.append_block(note.id, ai_block)
        return ai_block

    # ------------------------------------------------------------------ extras

    async def start(self) -> str:
        """
        Open the conversation with a coach question.

        Ensures a current note with a first user block, and appends the
        question to the transcript.

        Returns:
            The opening question
        """
        try:
            question = await self.llm.complete(
                system_prompt=self.config.opening_prompt,
                user_text=f"Current time: {datetime.now():%Y-%m-%d %H:%M}",
                max_tokens=self.config.max_tokens,
            )
            question = question.strip() or self.config.opening_fallback
        except ProviderError as e:
            logger.warning(
                "Opening question failed, using fallback",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            question = self.config.opening_fallback

        self.store.append_chat(Sender.AI, question)

        note = self.store.current_note or self.store.create_note()
        if not note.blocks:
            self.store.append_block(note.id, self.store.new_user_block())
        return question

    async def search(self, query: str, limit: int | None = None) -> list[SearchResult]:
        """Rank notes against a query."""
        return await self.note_search.search(query, limit)

    def close(self) -> None:
        """
        Tear the session down.

        In-flight provider calls are not cancelled; their results are discarded
        when they return.
        """
        self._closed = True
        logger.info("Coach session closed")


def _title_from(content: str, length: int = 20) -> str:
    text = content.strip()
    return text if len(text) <= length else f"{text[:length]}..."
