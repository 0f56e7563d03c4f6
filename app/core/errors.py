"""Application error taxonomy.

Every failure the service reports to a caller is one of these. The HTTP layer
maps them onto status codes in ``app.main``; page routes turn
``RedirectRequired`` into a redirect instead of an error body.
"""
from typing import Optional


class AppError(Exception):
    """Base class for errors with a user-facing message and HTTP status."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class Unauthorized(AppError):
    """No authenticated identity (or no profile behind it)."""
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(AppError):
    """Identity present but the permission check failed."""
    status_code = 403
    default_message = "Forbidden"

    def __init__(self, message: Optional[str] = None, permission: Optional[str] = None):
        self.permission = permission
        super().__init__(message)


class SelfActionForbidden(Forbidden):
    """An admin tried to change their own role or permissions."""
    default_message = "You cannot modify your own account"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class InvalidInput(AppError):
    status_code = 400
    default_message = "Invalid input"


class InvalidTransition(InvalidInput):
    """Requested order status change is not allowed from the current state."""
    status_code = 409
    default_message = "Invalid status transition"


class ConcurrentModification(AppError):
    """The record changed between read and conditional write."""
    status_code = 409
    default_message = "The record was modified by another request"


class ExternalServiceFailure(AppError):
    """Storage, payment provider or email provider call failed."""
    status_code = 502
    default_message = "External service failure"


class SignatureInvalid(AppError):
    """Webhook authenticity check failed."""
    status_code = 400
    default_message = "Webhook signature verification failed"


class RedirectRequired(AppError):
    """Raised by page guards; rendered as a redirect, never as an error body."""
    status_code = 307
    default_message = "Redirect"

    def __init__(self, location: str):
        self.location = location
        super().__init__(f"Redirect to {location}")
