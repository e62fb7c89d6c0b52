"""Application error taxonomy.

Every error carries the HTTP status it maps to and a message that is safe to
show to the caller. Anything more detailed stays in the server log.
"""

from typing import Any


class AppError(Exception):
    """Base class for errors surfaced through the API."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, errors: list[dict[str, Any]] | None = None) -> None:
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Response body. Server-side faults only ever show their generic message."""
        message = self.default_message if self.status_code >= 500 else self.message
        body: dict[str, Any] = {"message": message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ConfigurationError(AppError):
    """Required configuration (e.g. the signing secret) is missing."""

    status_code = 500
    default_message = "Internal server error"


class ValidationError(AppError):
    """Malformed or incomplete input."""

    status_code = 400
    default_message = "Validation failed"


class InvalidOrExpiredTokenError(AppError):
    """A reset or session token failed verification, for whatever reason."""

    status_code = 400
    default_message = "Invalid or expired token. Please request a new reset link."


class UnauthorizedError(AppError):
    status_code = 401
    default_message = "Unauthorized"


class ConflictError(AppError):
    status_code = 409
    default_message = "Resource already exists"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class StoreError(AppError):
    """The database failed underneath us."""

    status_code = 500
    default_message = "Internal server error"
