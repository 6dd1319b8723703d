"""
Editor Bridge - keeps an external editable document and the block store consistent.

Direction store -> document (projection):
- Every block becomes a DocumentNode tagged with the block id
- The fingerprint of each written snapshot is remembered, and the first
  notification carrying that exact state is ignored (echo suppression)
- Node kinds are owned by the store; a retyped node is projected back

Direction document -> store (extraction):
- Nodes are turned back into blocks and diffed against the store by id,
  never by position, detecting inserts, edits, deletions and reorders
- Document-originated updates are applied to the store only; they are
  never projected back

Edits are debounced (trailing edge) before a submission fires. Pressing
Enter splits the block and submits the head immediately.
"""

import asyncio

from notecoach.core.editor.debounce import DebounceTimer
from notecoach.core.editor.document import EditableDocument
from notecoach.models.block import AIBlock, Block, BlockRole, UserBlock
from notecoach.models.document import (
    AI_RESPONSE,
    PARAGRAPH,
    DocumentNode,
    ReconcileDiff,
    fingerprint_nodes,
)
from notecoach.models.note import Note
from notecoach.models.session import SubmissionResult
from notecoach.services.coach_session import CoachSession
from notecoach.utils.exceptions import NotFoundError, ValidationError
from notecoach.utils.id_generator import generate_block_id
from notecoach.utils.logger import get_logger

logger = get_logger(__name__)


class EditorBridge:
    """
    Two-way reconciliation between one note and an editable document.
    """

    def __init__(
        self,
        document: EditableDocument,
        session: CoachSession,
        note_id: str | None = None,
        debounce_seconds: float | None = None,
    ):
        """
        Initialize the bridge and project the note into the document.

        Args:
            document: Editable document surface
            session: Coach session whose store holds the note
            note_id: Note to mirror (defaults to the current note, created if missing)
            debounce_seconds: Quiescence before a typed block is submitted
        """
        self.document = document
        self.session = session
        self.store = session.store

        if note_id is None:
            note = self.store.current_note or self.store.create_note()
            note_id = note.id
        elif self.store.get_note(note_id) is None:
            raise NotFoundError(f"Note not found: {note_id}", context={"note_id": note_id})
        self.note_id = note_id

        delay = session.config.debounce_seconds if debounce_seconds is None else debounce_seconds
        self._debounce = DebounceTimer(delay, self._fire_submission)
        self._submissions: set[asyncio.Task] = set()
        self._last_store_fingerprint: str | None = None
        self._last_seen_fingerprint: str | None = None
        self._closed = False

        self._unsubscribe = document.subscribe(self._on_document_change)
        self.project()

    @property
    def note(self) -> Note:
        """The mirrored note."""
        return self.store.get_note(self.note_id)

    @property
    def submission_pending(self) -> bool:
        """Whether a debounced submission is waiting to fire."""
        return self._debounce.pending

    # ------------------------------------------------------------- projection

    @staticmethod
    def to_node(block: Block) -> DocumentNode:
        """Convert a block to its document node."""
        if block.role == BlockRole.AI:
            return DocumentNode(
                id=block.id,
                type=AI_RESPONSE,
                content=block.content,
                props={"source_block_id": block.source_block_id},
                editable=False,
            )
        return DocumentNode(
            id=block.id,
            type=PARAGRAPH,
            content=block.content,
            props={"prompt": block.prompt},
            editable=True,
        )

    def project_nodes(self) -> list[DocumentNode]:
        """Document nodes for the note's current blocks."""
        return [self.to_node(block) for block in self.note.blocks]

    def project(self) -> str:
        """
        Write the note into the document.

        Returns:
            Fingerprint of the written snapshot
        """
        nodes = self.project_nodes()
        fingerprint = fingerprint_nodes(nodes)

        # Record before writing: the document notifies synchronously
        self._last_store_fingerprint = fingerprint
        self._last_seen_fingerprint = fingerprint
        self.document.replace_nodes(nodes)
        return fingerprint

    # ------------------------------------------------------------- extraction

    @staticmethod
    def to_block(node: DocumentNode) -> Block:
        """Reconstruct a block from a document node."""
        if node.type == AI_RESPONSE:
            return AIBlock(
                id=node.id,
                content=node.content,
                source_block_id=node.props.get("source_block_id"),
            )
        return UserBlock(id=node.id, content=node.content, prompt=node.props.get("prompt", ""))

    def extract(self, nodes: list[DocumentNode]) -> list[Block]:
        """
        Rebuild the ordered block sequence described by document nodes.

        Duplicate node ids keep their first occurrence.
        """
        blocks = []
        seen = set()
        for node in nodes:
            if node.id in seen:
                logger.warning("Duplicate document node id", extra={"node_id": node.id})
                continue
            seen.add(node.id)
            blocks.append(self.to_block(node))
        return blocks

    def reconcile(self, nodes: list[DocumentNode]) -> ReconcileDiff:
        """
        Apply a document state to the store, diffing by block id.

        Args:
            nodes: Document nodes in order

        Returns:
            The applied changes
        """
        note = self.note
        incoming = self.extract(nodes)
        incoming_ids = {block.id for block in incoming}
        previous_order = note.block_ids
        diff = ReconcileDiff()

        for block_id in previous_order:
            if block_id not in incoming_ids:
                self.store.remove_block(block_id)
                diff.deleted.append(block_id)

        for block in incoming:
            current = self.store.get_block(block.id)
            if current is not None and self.store.note_for_block(block.id).id != note.id:
                # Id belongs to another note; treat the node as a new block
                current = None
                self._rekey(block, diff)
            elif current is None and self.store.is_known_id(block.id):
                self._rekey(block, diff)

            if current is None:
                if block.role == BlockRole.USER and not block.prompt:
                    block.prompt = self.store.last_coach_message() or ""
                self.store.append_block(note.id, block)
                diff.inserted.append(block.id)
            else:
                if current.role != block.role:
                    logger.warning(
                        "Document node changed block kind; keeping stored kind",
                        extra={"block_id": block.id, "role": current.role.value},
                    )
                    diff.retyped.append(block.id)
                if current.content == block.content:
                    continue
                self.store.update_block_content(block.id, block.content)
                diff.updated.append(block.id)

        final_order = [block.id for block in incoming]
        surviving = set(previous_order) & set(final_order)
        diff.reordered = [i for i in previous_order if i in surviving] != [
            i for i in final_order if i in surviving
        ]
        if note.block_ids != final_order:
            self.store.reorder_blocks(note.id, final_order)

        return diff

    def _rekey(self, block: Block, diff: ReconcileDiff) -> None:
        new_id = generate_block_id()
        logger.warning(
            "Document node reuses a retired block id; assigned a new id",
            extra={"node_id": block.id, "block_id": new_id},
        )
        diff.rekeyed[block.id] = new_id
        block.id = new_id

    def _on_document_change(self, document: EditableDocument) -> None:
        if self._closed:
            return

        nodes = document.nodes()
        fingerprint = fingerprint_nodes(nodes)
        if fingerprint == self._last_store_fingerprint:
            # Echo of our own write is suppressed once
            self._last_store_fingerprint = None
            return
        self._last_store_fingerprint = None
        if fingerprint == self._last_seen_fingerprint:
            return
        self._last_seen_fingerprint = fingerprint

        diff = self.reconcile(nodes)
        if diff.rekeyed or diff.retyped:
            # Store owns ids and block kinds
            self.project()

        edited = self._edited_block_id(document, diff)
        if edited is not None:
            self._debounce.trigger(edited)

    def _edited_block_id(self, document: EditableDocument, diff: ReconcileDiff) -> str | None:
        changed = diff.changed_ids
        if not changed:
            return None
        cursor = diff.rekeyed.get(document.cursor_node_id, document.cursor_node_id)
        return cursor if cursor in changed else changed[-1]

    # -------------------------------------------------------------- submission

    def _is_bare_response(self) -> bool:
        # A coach reply followed only by the empty block placed after it
        nodes = self.document.nodes()
        return (
            len(nodes) == 2
            and nodes[0].is_ai
            and not nodes[1].is_ai
            and not nodes[1].content.strip()
        )

    async def _fire_submission(self, block_id: str) -> SubmissionResult | None:
        if self._closed:
            return None

        block = self.store.get_block(block_id)
        if block is None or block.role == BlockRole.AI:
            return None
        if self._is_bare_response() or not block.content.strip():
            return None

        return await self._submit(block_id, block.content)

    async def _submit(self, block_id: str, content: str) -> SubmissionResult | None:
        task = asyncio.current_task()
        if task is not None:
            self._submissions.add(task)
        try:
            result = await self.session.submit(content, block_id=block_id)
        except (ValidationError, NotFoundError) as e:
            logger.warning("Submission skipped", extra={"block_id": block_id, "error": e.message})
            return None
        finally:
            if task is not None:
                self._submissions.discard(task)

        if result is None or self._closed:
            return result

        self._ensure_trailing_block()
        self.project()
        return result

    def _ensure_trailing_block(self) -> None:
        blocks = self.note.blocks
        if blocks and blocks[-1].role == BlockRole.AI:
            self.store.append_block(self.note_id, self.store.new_user_block())

    async def handle_enter(
        self, block_id: str, cursor: int | None = None
    ) -> SubmissionResult | None:
        """
        Split a block at the cursor and submit the head immediately.

        The pending debounced submission is cancelled. The tail (empty when
        the cursor is at the end) moves into a new user block placed directly
        after the split block.

        Args:
            block_id: Block holding the cursor
            cursor: Character offset of the split (defaults to the end)

        Returns:
            Cycle result, or None when nothing was submitted

        Raises:
            NotFoundError: If the block doesn't exist
        """
        self._debounce.cancel()

        block = self.store.get_block(block_id)
        if block is None:
            raise NotFoundError(f"Block not found: {block_id}", context={"block_id": block_id})

        if block.role == BlockRole.AI:
            self.store.insert_block_after(block_id, self.store.new_user_block())
            self.project()
            return None

        content = block.content
        split_at = len(content) if cursor is None else max(0, min(cursor, len(content)))
        head, tail = content[:split_at], content[split_at:]

        if head != content:
            self.store.update_block_content(block_id, head)
        self.store.insert_block_after(block_id, self.store.new_user_block(tail))
        self.project()

        if not head.strip():
            return None
        return await self._submit(block_id, head)

    def move_block(self, block_id: str, new_index: int) -> None:
        """
        Move a block to a new position; id, content and embedding are untouched.

        Raises:
            NotFoundError: If the block isn't part of this note
        """
        order = self.note.block_ids
        if block_id not in order:
            raise NotFoundError(
                f"Block not in note: {block_id}",
                context={"block_id": block_id, "note_id": self.note_id},
            )
        order.remove(block_id)
        order.insert(max(0, min(new_index, len(order))), block_id)
        self.store.reorder_blocks(self.note_id, order)
        self.project()

    # --------------------------------------------------------------- lifecycle

    async def drain(self) -> None:
        """Wait for the pending debounce window and every in-flight submission."""
        await self._debounce.wait()
        if self._submissions:
            await asyncio.gather(*list(self._submissions), return_exceptions=True)

    def close(self) -> None:
        """Cancel the pending submission and stop listening to the document."""
        self._closed = True
        self._debounce.cancel()
        self._unsubscribe()
