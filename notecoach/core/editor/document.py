"""
Editable document collaborator.

The document tree belongs to an external editor. The core only needs the
operations declared on EditableDocument; InMemoryDocument is a plain
list-backed implementation for in-process use.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from notecoach.models.document import DocumentNode
from notecoach.utils.exceptions import NotFoundError

ChangeListener = Callable[["EditableDocument"], None]


class EditableDocument(ABC):
    """
    Abstract editable document surface.

    Responsibilities:
    - Expose an ordered list of nodes with stable external ids
    - Notify subscribers after every change
    - Apply imperative replace/insert operations
    """

    @abstractmethod
    def nodes(self) -> list[DocumentNode]:
        """Return a snapshot of the document's nodes in order."""
        pass

    @abstractmethod
    def replace_nodes(self, nodes: list[DocumentNode]) -> None:
        """Replace the whole document content."""
        pass

    @abstractmethod
    def insert_nodes(self, nodes: list[DocumentNode], after_id: str | None = None) -> None:
        """Insert nodes after the given node, or at the end when ``after_id`` is None."""
        pass

    @abstractmethod
    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            Callable that removes the listener
        """
        pass

    @property
    @abstractmethod
    def cursor_node_id(self) -> str | None:
        """Id of the node holding the text cursor."""
        pass


class InMemoryDocument(EditableDocument):
    """List-backed document that notifies listeners synchronously."""

    def __init__(self, nodes: list[DocumentNode] | None = None):
        self._nodes: list[DocumentNode] = [node.model_copy() for node in nodes or []]
        self._listeners: list[ChangeListener] = []
        self._cursor: str | None = None

    def nodes(self) -> list[DocumentNode]:
        return [node.model_copy(deep=True) for node in self._nodes]

    def replace_nodes(self, nodes: list[DocumentNode]) -> None:
        self._nodes = [node.model_copy(deep=True) for node in nodes]
        if self._cursor not in {node.id for node in self._nodes}:
            self._cursor = self._nodes[-1].id if self._nodes else None
        self._notify()

    def insert_nodes(self, nodes: list[DocumentNode], after_id: str | None = None) -> None:
        index = len(self._nodes) if after_id is None else self._index(after_id) + 1
        self._nodes[index:index] = [node.model_copy(deep=True) for node in nodes]
        self._notify()

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def cursor_node_id(self) -> str | None:
        return self._cursor

    # Writer-side operations

    def type_text(self, node_id: str, content: str) -> None:
        """Set a node's text as the writer would by typing, moving the cursor there."""
        node = self._nodes[self._index(node_id)]
        node.content = content
        self._cursor = node_id
        self._notify()

    def add_paragraph(self, node: DocumentNode, after_id: str | None = None) -> None:
        """Insert a writer-created node and place the cursor in it."""
        self._cursor = node.id
        self.insert_nodes([node], after_id)

    def delete_node(self, node_id: str) -> None:
        """Remove a node."""
        del self._nodes[self._index(node_id)]
        if self._cursor == node_id:
            self._cursor = self._nodes[-1].id if self._nodes else None
        self._notify()

    def move_node(self, node_id: str, new_index: int) -> None:
        """Drag a node to a new position."""
        node = self._nodes.pop(self._index(node_id))
        self._nodes.insert(new_index, node)
        self._notify()

    def _index(self, node_id: str) -> int:
        for index, node in enumerate(self._nodes):
            if node.id == node_id:
                return index
        raise NotFoundError(f"Document node not found: {node_id}", context={"node_id": node_id})

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
