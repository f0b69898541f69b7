"""User profile management."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError

from forum.auth.service import get_user_by_id, get_user_by_username
from forum.db.models import User
from forum.errors import ConflictError, NotFoundError, ValidationError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


async def get_account(db: AsyncSession, user_id: int) -> User:
    """Fetch a user or raise NotFoundError."""
    user = await get_user_by_id(db, user_id)
    if user is None:
        msg = "user not found"
        raise NotFoundError(msg)
    return user


async def update_username(db: AsyncSession, user_id: int, username: str) -> User:
    """
    Rename a user.

    Raises:
        ValidationError: If the new username is blank.
        ConflictError: If another user already has it.
    """
    username = username.strip()
    if not username:
        msg = "username is required"
        raise ValidationError(msg)

    user = await get_account(db, user_id)
    if user.username == username:
        return user
    if await get_user_by_username(db, username) is not None:
        msg = "username already exists"
        raise ConflictError(msg)

    user.username = username
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        msg = "username already exists"
        raise ConflictError(msg) from e
    logger.info("username_updated", user_id=user_id)
    return user


async def set_profile_picture(db: AsyncSession, user_id: int, picture: str) -> User:
    """Point the user's profile picture at an uploaded object."""
    if not picture.strip():
        msg = "profile picture is required"
        raise ValidationError(msg)
    user = await get_account(db, user_id)
    user.profile_picture = picture.strip()
    await db.flush()
    logger.info("profile_picture_updated", user_id=user_id)
    return user


async def delete_profile_picture(db: AsyncSession, user_id: int) -> User:
    user = await get_account(db, user_id)
    user.profile_picture = None
    await db.flush()
    logger.info("profile_picture_deleted", user_id=user_id)
    return user


async def delete_account(db: AsyncSession, user_id: int) -> None:
    """Delete a user along with everything they own (tokens, posts, comments, reactions, notifications)."""
    result = await db.execute(delete(User).where(User.id == user_id))
    if not result.rowcount:
        msg = "user not found"
        raise NotFoundError(msg)
    await db.flush()
    logger.info("user_deleted", user_id=user_id)
