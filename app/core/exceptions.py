"""Custom exceptions for the application."""


class AuthenticationError(Exception):
    """Raised when the caller's API key is missing or invalid."""

    pass


class InvalidRequestError(Exception):
    """Raised when caller input is malformed or incomplete."""

    pass


class EmbeddingError(Exception):
    """Raised when embedding generation fails."""

    pass


class DatabaseError(Exception):
    """Raised when database operations fail."""

    pass
