# Overview: Error taxonomy shared by services and routes.

"""
Domain errors carry the HTTP status and a machine-readable kind so routes
can turn them into the standard JSON envelope without guessing.
"""


class TillbookError(Exception):
    """Base class for expected, caller-visible failures."""

    status_code = 500
    kind = "internal_error"

    def __init__(self, message: str, *, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(TillbookError, ValueError):
    """400-level input problem."""

    status_code = 400
    kind = "validation_error"


class NotFoundError(TillbookError, LookupError):
    """Referenced entity does not exist."""

    status_code = 404
    kind = "not_found"


class ConflictError(TillbookError):
    """409-level uniqueness violation (e.g., duplicate tender name)."""

    status_code = 409
    kind = "conflict"


class InvalidStateError(TillbookError):
    """Illegal state transition (closing a closed till, refunding a held sale)."""

    status_code = 409
    kind = "invalid_state"


class InternalError(TillbookError):
    """Store or unexpected failure. Message is suppressed in production."""
