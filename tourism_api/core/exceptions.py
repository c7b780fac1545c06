"""
Application error taxonomy.

Services raise these; ``exception_handlers`` turns them into the JSON error
envelope ``{"isOk": false, "message": ..., **extra}``.
"""
from typing import Any, Dict, List, Optional


class APIError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code = 500
    default_message = "internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        extra: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra or {}
        super().__init__(self.message)


class ValidationError(APIError):
    """Malformed or missing input."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[str]] = None):
        self.errors = list(errors or [])
        extra = {"errors": self.errors} if self.errors else None
        super().__init__(message, extra=extra)


class AuthenticationError(APIError):
    status_code = 401
    default_message = "Invalid credentials"


class NotFoundError(APIError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(APIError):
    """Uniqueness violation, blocked-by-bookings, or an illegal state change."""

    status_code = 409
    default_message = "Conflict with existing data"


class ActiveBookingsError(ConflictError):
    """Destructive operation refused while active bookings exist."""

    status_code = 400

    def __init__(self, message: str, active_bookings: Optional[int] = None):
        extra = {"activeBookings": active_bookings} if active_bookings is not None else None
        super().__init__(message, extra=extra)


class InternalError(APIError):
    """Anything not mapped to a more specific error; details stay in the log."""

    status_code = 500
    default_message = "internal server error"
