"""Notification API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from forum.auth.dependencies import get_current_user_id
from forum.auth.permissions import ensure_can_mutate
from forum.database import get_session
from forum.dependencies import Page, ResourceId, get_page
from forum.errors import NotFoundError
from forum.notifications.schemas import NotificationListResponse, NotificationResponse
from forum.notifications.service import (
    count_unread,
    get_notification,
    list_notifications,
    mark_read,
    mark_unread,
)
from forum.responses import Envelope

router = APIRouter(prefix="/notifications", tags=["Notifications"])


async def _list(db: AsyncSession, user_id: int, status: bool | None, page: Page) -> NotificationListResponse:
    notifications = await list_notifications(db, user_id, status=status, limit=page.limit, offset=page.offset)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        unread_count=await count_unread(db, user_id),
    )


@router.get("", response_model=Envelope[NotificationListResponse])
async def all_notifications(
    page: Page = Depends(get_page),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[NotificationListResponse]:
    """List the caller's notifications, newest first."""
    return Envelope(data=await _list(db, user_id, None, page))


@router.get("/read", response_model=Envelope[NotificationListResponse])
async def read_notifications(
    page: Page = Depends(get_page),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[NotificationListResponse]:
    return Envelope(data=await _list(db, user_id, True, page))


@router.get("/unread", response_model=Envelope[NotificationListResponse])
async def unread_notifications(
    page: Page = Depends(get_page),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[NotificationListResponse]:
    return Envelope(data=await _list(db, user_id, False, page))


async def _toggle(db: AsyncSession, user_id: int, notification_id: int, *, read: bool) -> NotificationResponse:
    notification = await get_notification(db, notification_id)
    if notification is None:
        msg = "notification not found"
        raise NotFoundError(msg)
    ensure_can_mutate(user_id, notification.owner_id, "cannot modify this notification")

    if read:
        await mark_read(db, notification_id)
    else:
        await mark_unread(db, notification_id)
    await db.commit()
    await db.refresh(notification)
    return NotificationResponse.model_validate(notification)


@router.put("/{notification_id}/read", response_model=Envelope[NotificationResponse])
async def mark_notification_read(
    notification_id: ResourceId,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[NotificationResponse]:
    """Mark one of the caller's notifications as read."""
    return Envelope(data=await _toggle(db, user_id, notification_id, read=True))


@router.put("/{notification_id}/unread", response_model=Envelope[NotificationResponse])
async def mark_notification_unread(
    notification_id: ResourceId,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[NotificationResponse]:
    """Mark one of the caller's notifications as unread."""
    return Envelope(data=await _toggle(db, user_id, notification_id, read=False))
