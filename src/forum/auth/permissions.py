"""Ownership checks gating mutation of posts, comments and notifications.

Callers load the resource first (NotFound if absent) and only then check
ownership (Forbidden), so a non-owner can tell an existing resource from a
missing one.
"""

from __future__ import annotations

from forum.errors import ForbiddenError


def can_mutate(actor_id: int, owner_id: int) -> bool:
    """True iff the acting user owns the resource."""
    return actor_id == owner_id


def ensure_can_mutate(actor_id: int, owner_id: int, message: str = "forbidden") -> None:
    """Raise ForbiddenError unless ``actor_id`` owns the resource."""
    if not can_mutate(actor_id, owner_id):
        raise ForbiddenError(message)
