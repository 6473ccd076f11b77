"""
Typed errors raised by services.

Each error carries the HTTP status the API layer maps it to and a short
``kind`` so clients can tell an overlapping-dates rejection apart from a
plain validation failure even though both are 400s.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for business-rule failures raised by services."""

    status_code = 400
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    status_code = 400
    kind = "validation_error"


class ConflictError(ValidationError):
    """Requested dates overlap an existing active booking."""

    kind = "conflict"


class InvalidTransitionError(ValidationError):
    kind = "invalid_transition"

    def __init__(self, current: str, requested: str, message: str | None = None):
        super().__init__(message or f"Cannot transition from {current} to {requested}")
        self.current = current
        self.requested = requested


class NotFoundError(DomainError):
    status_code = 404
    kind = "not_found"


class ForbiddenError(DomainError):
    status_code = 403
    kind = "forbidden"


class UnauthorizedError(DomainError):
    status_code = 401
    kind = "unauthorized"
