"""
Tests for all model classes in NoteCoach.

Test Organization:
1. Block Models: UserBlock, AIBlock and the role-tagged union
2. Note Model: ordering helpers
3. Link Model: strength bounds
4. Document Models: DocumentNode, fingerprint_nodes, ReconcileDiff
5. Utility Functions: compute_content_hash
"""

import pytest
from pydantic import TypeAdapter, ValidationError

from notecoach.models import (
    AI_RESPONSE,
    PARAGRAPH,
    AIBlock,
    Block,
    BlockRole,
    DocumentNode,
    Link,
    Note,
    ReconcileDiff,
    UserBlock,
    compute_content_hash,
    fingerprint_nodes,
)


class TestBlocks:
    """Tests for the block variants."""

    def test_user_block_defaults(self):
        """Test user block creation with defaults."""
        block = UserBlock(content="Went hiking")

        assert block.id.startswith("blk_")
        assert block.role == BlockRole.USER
        assert block.prompt == ""
        assert block.embedding is None
        assert block.embedded_hash is None

    def test_ai_block_source(self):
        """Test AI block carries the triggering block id."""
        block = AIBlock(content="Where did you go?", source_block_id="blk_abc")

        assert block.role == BlockRole.AI
        assert block.source_block_id == "blk_abc"

    def test_union_dispatches_on_role(self):
        """Test the tagged union picks the variant from ``role``."""
        adapter = TypeAdapter(Block)

        user = adapter.validate_python({"role": "user", "content": "hi", "prompt": "Q?"})
        ai = adapter.validate_python({"role": "ai", "content": "Q?", "source_block_id": "b1"})

        assert isinstance(user, UserBlock)
        assert isinstance(ai, AIBlock)

    def test_union_rejects_unknown_role(self):
        """Test unknown roles are rejected."""
        with pytest.raises(ValidationError):
            TypeAdapter(Block).validate_python({"role": "system", "content": "x"})

    def test_fresh_embedding(self):
        """Test embedding freshness follows the content hash."""
        block = UserBlock(content="cats")
        assert block.has_fresh_embedding() is False

        block.embedding = [1.0, 0.0]
        block.embedded_hash = block.content_hash
        assert block.has_fresh_embedding() is True

        block.content = "dogs"
        assert block.has_fresh_embedding() is False


class TestNote:
    """Tests for the Note model."""

    def test_note_defaults(self):
        """Test note creation with defaults."""
        note = Note()

        assert note.id.startswith("note_")
        assert note.title == "New Note"
        assert note.blocks == []

    def test_index_of(self):
        """Test block lookup by position."""
        first, second = UserBlock(content="a"), AIBlock(content="b")
        note = Note(blocks=[first, second])

        assert note.block_ids == [first.id, second.id]
        assert note.index_of(second.id) == 1
        assert note.index_of("blk_missing") is None

    def test_note_round_trips_through_json(self):
        """Test mixed blocks survive JSON serialization."""
        note = Note(blocks=[UserBlock(content="a"), AIBlock(content="b", source_block_id="x")])

        restored = Note.model_validate_json(note.model_dump_json())

        assert isinstance(restored.blocks[0], UserBlock)
        assert isinstance(restored.blocks[1], AIBlock)


class TestLink:
    """Tests for the Link model."""

    def test_strength_bounds(self):
        """Test strength must lie in [0, 1]."""
        Link(from_id="a", to_id="b", strength=1.0)
        with pytest.raises(ValidationError):
            Link(from_id="a", to_id="b", strength=1.2)
        with pytest.raises(ValidationError):
            Link(from_id="a", to_id="b", strength=-0.1)


class TestDocumentModels:
    """Tests for editor-side models."""

    def test_node_defaults(self):
        """Test a paragraph node is editable by default."""
        node = DocumentNode(id="blk_1")

        assert node.type == PARAGRAPH
        assert node.editable is True
        assert node.is_ai is False
        assert DocumentNode(id="blk_2", type=AI_RESPONSE).is_ai is True

    def test_fingerprint_is_order_sensitive(self):
        """Test reordering changes the fingerprint."""
        a = DocumentNode(id="a", content="one")
        b = DocumentNode(id="b", content="two")

        assert fingerprint_nodes([a, b]) != fingerprint_nodes([b, a])
        assert fingerprint_nodes([a, b]) == fingerprint_nodes([a.model_copy(), b.model_copy()])

    def test_fingerprint_ignores_props(self):
        """Test editor props don't affect the fingerprint."""
        plain = DocumentNode(id="a", content="one")
        decorated = DocumentNode(id="a", content="one", props={"textColor": "red"})

        assert fingerprint_nodes([plain]) == fingerprint_nodes([decorated])

    def test_reconcile_diff(self):
        """Test diff helpers."""
        assert ReconcileDiff().is_empty is True

        diff = ReconcileDiff(inserted=["a"], updated=["b"])
        assert diff.is_empty is False
        assert diff.changed_ids == ["a", "b"]
        assert ReconcileDiff(reordered=True).is_empty is False


class TestComputeContentHash:
    """Tests for compute_content_hash."""

    def test_format(self):
        """Test hash format."""
        content_hash = compute_content_hash("hello")

        assert content_hash.startswith("sha256:")
        assert len(content_hash) == 7 + 64

    def test_whitespace_normalized(self):
        """Test surrounding whitespace is not a material change."""
        assert compute_content_hash("hello") == compute_content_hash("  hello\n")
        assert compute_content_hash("hello") != compute_content_hash("hello!")
