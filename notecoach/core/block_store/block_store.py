"""
Block Store - Canonical in-memory model of notes and blocks.

Every other component reads and writes notes through this store. It also
owns the append-only session logs (links, interactions, chat transcript).

All mutations are synchronous and total: each operation validates first
and then applies its change, so a failed call leaves the store untouched.
State lives only for the lifetime of the process.
"""

from collections.abc import Iterable, Iterator

from notecoach.models.block import Block, BlockRole, UserBlock, compute_content_hash
from notecoach.models.chat import ChatMessage, Interaction, Sender
from notecoach.models.note import Note
from notecoach.models.relationships import Link
from notecoach.utils.exceptions import NotFoundError, ValidationError
from notecoach.utils.logger import get_logger

logger = get_logger(__name__)


class BlockStore:
    """
    Notes, blocks and session logs held in process memory.

    Block ids are never reused: the store remembers every id it has seen,
    including ids of blocks that were later removed.
    """

    def __init__(self):
        """Initialize an empty store."""
        self._notes: dict[str, Note] = {}
        self._block_index: dict[str, str] = {}  # block_id -> note_id
        self._issued_ids: set[str] = set()
        self._current_note_id: str | None = None

        self._links: list[Link] = []
        self._interactions: list[Interaction] = []
        self._chat: list[ChatMessage] = []

    # ------------------------------------------------------------------ notes

    def create_note(self, title: str = "New Note", make_current: bool = True) -> Note:
        """
        Create an empty note.

        Args:
            title: Display title
            make_current: Whether the new note becomes the current note

        Returns:
            The created note
        """
        note = Note(title=title)
        self._notes[note.id] = note
        if make_current:
            self._current_note_id = note.id

        logger.debug(f"Created note {note.id}", extra={"note_id": note.id})
        return note

    def get_note(self, note_id: str) -> Note | None:
        """Get a note by id, or None if it doesn't exist."""
        return self._notes.get(note_id)

    def _require_note(self, note_id: str) -> Note:
        note = self._notes.get(note_id)
        if note is None:
            raise NotFoundError(f"Note not found: {note_id}", context={"note_id": note_id})
        return note

    @property
    def notes(self) -> list[Note]:
        """All notes in creation order."""
        return list(self._notes.values())

    @property
    def current_note(self) -> Note | None:
        """The note the writer is working in, if any."""
        if self._current_note_id is None:
            return None
        return self._notes.get(self._current_note_id)

    def set_current_note(self, note_id: str) -> Note:
        """
        Make an existing note current.

        Raises:
            NotFoundError: If the note doesn't exist
        """
        note = self._require_note(note_id)
        self._current_note_id = note.id
        return note

    # ----------------------------------------------------------------- blocks

    def get_block(self, block_id: str) -> Block | None:
        """Get a block by id, or None if it doesn't exist."""
        note_id = self._block_index.get(block_id)
        if note_id is None:
            return None
        note = self._notes[note_id]
        index = note.index_of(block_id)
        return note.blocks[index] if index is not None else None

    def _require_block(self, block_id: str) -> Block:
        block = self.get_block(block_id)
        if block is None:
            raise NotFoundError(f"Block not found: {block_id}", context={"block_id": block_id})
        return block

    def note_for_block(self, block_id: str) -> Note | None:
        """Get the note that contains a block."""
        note_id = self._block_index.get(block_id)
        return self._notes.get(note_id) if note_id else None

    def _claim_id(self, block: Block) -> None:
        if block.id in self._issued_ids:
            raise ValidationError(
                f"Block id already used: {block.id}", context={"block_id": block.id}
            )
        self._issued_ids.add(block.id)

    def is_known_id(self, block_id: str) -> bool:
        """Whether the id has ever been used by a block in this store."""
        return block_id in self._issued_ids

    def append_block(self, note_id: str, block: Block) -> Block:
        """
        Append a block to the end of a note.

        Raises:
            NotFoundError: If the note doesn't exist
            ValidationError: If the block id was already used
        """
        note = self._require_note(note_id)
        self._claim_id(block)

        note.blocks.append(block)
        self._block_index[block.id] = note.id
        return block

    def insert_block_after(self, block_id: str, new_block: Block) -> Block:
        """
        Insert a block directly after an existing block, in the same note.

        Raises:
            NotFoundError: If the anchor block doesn't exist
            ValidationError: If the new block id was already used
        """
        note = self.note_for_block(block_id)
        if note is None:
            raise NotFoundError(f"Block not found: {block_id}", context={"block_id": block_id})
        self._claim_id(new_block)

        index = note.index_of(block_id)
        note.blocks.insert(index + 1, new_block)
        self._block_index[new_block.id] = note.id
        return new_block

    def update_block_content(self, block_id: str, content: str) -> Block:
        """
        Replace a block's content in place.

        A material change (different content hash) clears the embedding so the
        block drops out of similarity comparisons until it is re-submitted.

        Raises:
            NotFoundError: If the block doesn't exist
        """
        block = self._require_block(block_id)
        if compute_content_hash(content) != block.content_hash:
            block.embedding = None
            block.embedded_hash = None
        block.content = content
        return block

    def attach_embedding(self, block_id: str, embedding: list[float], content_hash: str) -> bool:
        """
        Attach an embedding computed from a content snapshot.

        The embedding is only attached if the block still holds that content;
        a block edited while its embedding was in flight keeps no embedding.

        Returns:
            True if the embedding was attached
        """
        block = self.get_block(block_id)
        if block is None or block.content_hash != content_hash:
            return False
        block.embedding = list(embedding)
        block.embedded_hash = content_hash
        return True

    def reorder_blocks(self, note_id: str, new_order: list[str]) -> Note:
        """
        Reorder a note's blocks. Identity, content and embeddings are untouched.

        Args:
            note_id: Note to reorder
            new_order: Permutation of the note's current block ids

        Raises:
            NotFoundError: If the note doesn't exist
            ValidationError: If new_order is not a permutation of the note's blocks
        """
        note = self._require_note(note_id)
        if len(new_order) != len(note.blocks) or set(new_order) != set(note.block_ids):
            raise ValidationError(
                "New order must be a permutation of the note's block ids",
                context={"note_id": note_id, "new_order": new_order},
            )

        by_id = {block.id: block for block in note.blocks}
        note.blocks = [by_id[block_id] for block_id in new_order]
        return note

    def remove_block(self, block_id: str) -> Block:
        """
        Remove a block. Links that reference it are left dangling.

        Raises:
            NotFoundError: If the block doesn't exist
        """
        note = self.note_for_block(block_id)
        if note is None:
            raise NotFoundError(f"Block not found: {block_id}", context={"block_id": block_id})

        block = note.blocks.pop(note.index_of(block_id))
        del self._block_index[block_id]
        return block

    def all_blocks(self) -> Iterator[Block]:
        """
        Lazily iterate every block of every note.

        Each call returns a fresh generator, so iteration can be restarted.
        """
        for note in list(self._notes.values()):
            yield from list(note.blocks)

    def embedded_blocks(self, exclude: Iterable[str] = ()) -> Iterator[Block]:
        """Iterate blocks that carry an embedding, skipping the given ids."""
        excluded = set(exclude)
        for block in self.all_blocks():
            if block.embedding is not None and block.id not in excluded:
                yield block

    def new_user_block(self, content: str = "") -> UserBlock:
        """
        Build an unattached user block whose prompt is the latest coach question.
        """
        return UserBlock(content=content, prompt=self.last_coach_message() or "")

    # ------------------------------------------------------------------- logs

    def add_links(self, links: Iterable[Link]) -> list[Link]:
        """Append links. No deduplication is performed."""
        added = list(links)
        self._links.extend(added)
        return added

    @property
    def links(self) -> list[Link]:
        """All links in creation order, including dangling ones."""
        return list(self._links)

    def resolved_links(self) -> list[Link]:
        """Links whose endpoints both still exist."""
        return [
            link
            for link in self._links
            if link.from_id in self._block_index and link.to_id in self._block_index
        ]

    def record_interaction(self, content: str) -> Interaction:
        """Append submitted user text to the interaction log."""
        interaction = Interaction(content=content)
        self._interactions.append(interaction)
        return interaction

    @property
    def interactions(self) -> list[Interaction]:
        """Interaction log in submission order."""
        return list(self._interactions)

    def append_chat(self, sender: Sender, text: str) -> ChatMessage:
        """Append a message to the transcript."""
        message = ChatMessage(sender=sender, text=text)
        self._chat.append(message)
        return message

    @property
    def chat(self) -> list[ChatMessage]:
        """Chat transcript in order."""
        return list(self._chat)

    def last_coach_message(self) -> str | None:
        """Text of the most recent AI chat message."""
        for message in reversed(self._chat):
            if message.sender == Sender.AI:
                return message.text
        return None

    def is_ai_block(self, block_id: str) -> bool:
        """Whether the id names an existing AI block."""
        block = self.get_block(block_id)
        return block is not None and block.role == BlockRole.AI
