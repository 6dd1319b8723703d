"""Utility modules for NoteCoach."""

from notecoach.utils.exceptions import (
    ConfigurationError,
    EmbeddingError,
    LLMError,
    NotFoundError,
    NoteCoachError,
    ProviderError,
    ValidationError,
)
from notecoach.utils.id_generator import (
    generate_block_id,
    generate_interaction_id,
    generate_note_id,
)
from notecoach.utils.logger import get_logger, setup_logging

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # ID Generators
    "generate_note_id",
    "generate_block_id",
    "generate_interaction_id",
    # Exceptions
    "NoteCoachError",
    "ProviderError",
    "EmbeddingError",
    "LLMError",
    "ValidationError",
    "NotFoundError",
    "ConfigurationError",
]
