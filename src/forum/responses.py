"""Response envelope helpers.

- Success: ``{"success": true, "data": ...}``
- Error: ``{"success": false, "error": {"code": "...", "message": "..."}}``
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from forum.errors import ErrorKind

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    data: T


class MessageResponse(BaseModel):
    message: str


def error_response(kind: ErrorKind, message: str) -> dict[str, Any]:
    """Build the error envelope."""
    return {"success": False, "error": {"code": kind.value, "message": message}}
