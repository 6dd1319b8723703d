"""
Editor-facing collaborators: the editable document surface and input debouncing.
"""

from notecoach.core.editor.debounce import DebounceTimer
from notecoach.core.editor.document import EditableDocument, InMemoryDocument

__all__ = [
    "DebounceTimer",
    "EditableDocument",
    "InMemoryDocument",
]
