"""NoteCoach: block-structured note capture with an embedding-aware writing coach."""

__version__ = "0.1.0"
