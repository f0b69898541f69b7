"""Notification ledger.

A notification is addressed to ``owner_id`` and was caused by ``actor_id``.
It starts unread (``status`` False) and can be toggled between read and
unread any number of times. Marking is idempotent. There is no
deduplication: the same event recorded twice yields two rows.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import func, select, update

from forum.db.models import Notification
from forum.errors import NotFoundError, ValidationError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

COMPONENT_TYPES = {"post", "comment"}


async def create_notification(
    db: AsyncSession,
    owner_id: int,
    actor_id: int,
    component_type: str,
    component_id: int,
    notification_type: str,
) -> Notification:
    """Record an unread notification for ``owner_id``."""
    if component_type not in COMPONENT_TYPES:
        msg = f"invalid component type: {component_type}"
        raise ValidationError(msg)
    if not notification_type:
        msg = "notification type is required"
        raise ValidationError(msg)

    notification = Notification(
        owner_id=owner_id,
        actor_id=actor_id,
        component_type=component_type,
        component_id=component_id,
        notification_type=notification_type,
        status=False,
        created_at=datetime.now(timezone.utc),
    )
    db.add(notification)
    await db.flush()
    logger.info(
        "notification_created",
        notification_id=notification.id,
        owner_id=owner_id,
        actor_id=actor_id,
        component_type=component_type,
        notification_type=notification_type,
    )
    return notification


async def get_notification(db: AsyncSession, notification_id: int) -> Notification | None:
    result = await db.execute(select(Notification).where(Notification.id == notification_id))
    return result.scalar_one_or_none()


async def _set_status(db: AsyncSession, notification_id: int, *, read: bool) -> None:
    result = await db.execute(
        update(Notification).where(Notification.id == notification_id).values(status=read)
    )
    if not result.rowcount:
        msg = "notification not found"
        raise NotFoundError(msg)
    await db.flush()


async def mark_read(db: AsyncSession, notification_id: int) -> None:
    """Set a notification to read. Raises NotFoundError if it does not exist."""
    await _set_status(db, notification_id, read=True)


async def mark_unread(db: AsyncSession, notification_id: int) -> None:
    """Set a notification back to unread. Raises NotFoundError if it does not exist."""
    await _set_status(db, notification_id, read=False)


async def list_notifications(
    db: AsyncSession,
    owner_id: int,
    status: bool | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[Notification]:
    """Notifications addressed to ``owner_id``, newest first, optionally filtered by read status."""
    query = select(Notification).where(Notification.owner_id == owner_id)
    if status is not None:
        query = query.where(Notification.status.is_(status))
    result = await db.execute(query.order_by(Notification.id.desc()).limit(limit).offset(offset))
    return list(result.scalars().all())


async def count_unread(db: AsyncSession, owner_id: int) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(Notification)
        .where(Notification.owner_id == owner_id, Notification.status.is_(False))
    )
    return result.scalar_one()
