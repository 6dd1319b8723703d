"""
Custom exception hierarchy for NoteCoach.

All exceptions inherit from NoteCoachError for easy catching.
Provider failures (embedding or completion) share the ProviderError base
so the coaching cycle can recover from either with a single handler.
"""


class NoteCoachError(Exception):
    """
    Base exception for all NoteCoach errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize NoteCoach error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ProviderError(NoteCoachError):
    """
    External provider errors.
    Raised when an embedding or completion call fails (transport, API, empty reply).
    """

    pass


class EmbeddingError(ProviderError):
    """
    Embedding generation errors.
    Raised when embedding generation fails.
    """

    pass


class LLMError(ProviderError):
    """
    Completion errors.
    Raised when LLM operations fail (API errors, timeouts, etc.).
    """

    pass


class ValidationError(NoteCoachError):
    """
    Validation errors.
    Raised when input validation fails or data is invalid.
    """

    pass


class NotFoundError(NoteCoachError):
    """
    Resource not found errors.
    Raised when a requested note or block doesn't exist.
    """

    pass


class ConfigurationError(NoteCoachError):
    """
    Configuration errors.
    Raised when configuration is invalid or missing required values.
    """

    pass
