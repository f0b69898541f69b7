"""Categories and category memberships (subscriptions)."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from forum.db.base import dialect_insert
from forum.db.models import Category, Membership
from forum.errors import ConflictError, NotFoundError, ValidationError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


async def list_categories(db: AsyncSession) -> list[Category]:
    result = await db.execute(select(Category).order_by(Category.id))
    return list(result.scalars().all())


async def get_category(db: AsyncSession, category_id: int) -> Category:
    """Fetch a category by ID. Raises NotFoundError if absent."""
    result = await db.execute(select(Category).where(Category.id == category_id))
    category = result.scalar_one_or_none()
    if category is None:
        msg = "category not found"
        raise NotFoundError(msg)
    return category


async def get_category_by_name(db: AsyncSession, name: str) -> Category | None:
    result = await db.execute(select(Category).where(Category.name == name))
    return result.scalar_one_or_none()


async def create_category(db: AsyncSession, name: str) -> Category:
    """
    Create a category.

    Raises:
        ValidationError: If the name is blank.
        ConflictError: If a category with this name already exists.
    """
    name = name.strip()
    if not name:
        msg = "category name is required"
        raise ValidationError(msg)
    if await get_category_by_name(db, name) is not None:
        msg = "category already exists"
        raise ConflictError(msg)

    category = Category(name=name)
    db.add(category)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        msg = "category already exists"
        raise ConflictError(msg) from e
    logger.info("category_created", category_id=category.id, name=name)
    return category


# ---------------------------------------------------------------------------
# Memberships
# ---------------------------------------------------------------------------


async def subscribe(db: AsyncSession, user_id: int, category_name: str) -> Membership:
    """
    Subscribe a user to a category by name.

    Subscribing twice is a no-op that returns the existing membership.

    Raises:
        ValidationError: If the name is blank.
        NotFoundError: If no category has this name.
    """
    if not category_name.strip():
        msg = "category is required"
        raise ValidationError(msg)
    category = await get_category_by_name(db, category_name.strip())
    if category is None:
        msg = "category not found"
        raise NotFoundError(msg)

    stmt = (
        dialect_insert(db, Membership)
        .values(category_id=category.id, user_id=user_id, joined_date=datetime.now(timezone.utc))
        .on_conflict_do_nothing(index_elements=[Membership.category_id, Membership.user_id])
    )
    await db.execute(stmt)
    result = await db.execute(
        select(Membership).where(Membership.category_id == category.id, Membership.user_id == user_id)
    )
    membership = result.scalar_one()
    logger.info("category_subscribed", user_id=user_id, category_id=category.id)
    return membership


async def unsubscribe(db: AsyncSession, user_id: int, category_id: int) -> None:
    """Remove a membership. Raises NotFoundError if the user is not subscribed."""
    result = await db.execute(
        delete(Membership).where(Membership.category_id == category_id, Membership.user_id == user_id)
    )
    if not result.rowcount:
        msg = "membership not found"
        raise NotFoundError(msg)
    await db.flush()
    logger.info("category_unsubscribed", user_id=user_id, category_id=category_id)


async def list_user_memberships(db: AsyncSession, user_id: int) -> list[Membership]:
    """The user's memberships, most recently joined first."""
    result = await db.execute(
        select(Membership).where(Membership.user_id == user_id).order_by(Membership.id.desc())
    )
    return list(result.scalars().all())
