"""Domain exceptions mapped to HTTP responses by the global error handler."""

from __future__ import annotations


class CareLinkError(Exception):
    """Base class for errors that carry a public status code and message."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(CareLinkError):
    status_code = 401
    default_message = "Unauthorized"


class NotFound(CareLinkError):
    """Entity absent, or present but owned by someone else."""

    status_code = 404
    default_message = "Not found"


class AlreadyRegistered(CareLinkError):
    status_code = 400
    default_message = "You have already registered an orphanage"


class InvalidTransition(CareLinkError):
    status_code = 409
    default_message = "Invalid status transition"


class ValidationFailed(CareLinkError):
    """Schema violation with a field-keyed error map."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: dict[str, str], message: str | None = None) -> None:
        self.errors = errors
        super().__init__(message)


class PersistenceError(CareLinkError):
    """A write that should have touched a row did not. Never retried."""

    status_code = 500
    default_message = "Internal server error"
