"""Typed API errors.

Every failure surfaced to a client is one of these kinds, rendered by the
global error handler as ``{"success": false, "error": {"code", "message"}}``.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Stable error codes returned to clients."""

    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    VALIDATION = "VALIDATION_ERROR"
    INTERNAL = "INTERNAL_ERROR"


ERROR_KIND_TO_STATUS: dict[ErrorKind, int] = {
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.VALIDATION: 422,
    ErrorKind.INTERNAL: 500,
}


class ForumError(Exception):
    """Base exception for all domain errors.

    Attributes:
        kind: The error kind
        message: Human-readable message, safe to show to the caller
        status_code: HTTP status code derived from the kind
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        self.status_code = ERROR_KIND_TO_STATUS[self.kind]
        super().__init__(self.message)


class UnauthenticatedError(ForumError):
    """Missing, invalid, expired or revoked credential."""

    kind = ErrorKind.UNAUTHENTICATED
    default_message = "unauthorized"


class ForbiddenError(ForumError):
    """Authenticated, but not allowed to act on this resource."""

    kind = ErrorKind.FORBIDDEN
    default_message = "forbidden"


class NotFoundError(ForumError):
    kind = ErrorKind.NOT_FOUND
    default_message = "not found"


class ConflictError(ForumError):
    """Uniqueness violation."""

    kind = ErrorKind.CONFLICT
    default_message = "already exists"


class ValidationError(ForumError):
    kind = ErrorKind.VALIDATION
    default_message = "invalid request"


class InternalError(ForumError):
    """Storage or infrastructure failure. The message never carries driver detail."""

    kind = ErrorKind.INTERNAL
    default_message = "internal error"
