"""Application error taxonomy.

Each error carries the HTTP status it maps to and a short ``error`` title.
The global handlers in ``filmscape.main`` render them as the JSON envelope
``{"error": ..., "message": ...}``.
"""


class AppError(Exception):
    """Base class for errors raised by request handlers and services."""

    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(self, message: str, error: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if error is not None:
            self.error = error


class InvalidInputError(AppError):
    """Malformed or out-of-range input."""

    status_code = 400
    error = "Validation Error"


class PermissionDeniedError(AppError):
    """The requester may not act on this resource."""

    status_code = 403
    error = "Access denied"


class ResourceNotFoundError(AppError):
    """The requested entity does not exist."""

    status_code = 404
    error = "Not found"


class ConflictError(AppError):
    """The entity already exists."""

    status_code = 409
    error = "Conflict"
