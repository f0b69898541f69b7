"""Post business logic."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import delete, select

from forum.auth.permissions import ensure_can_mutate
from forum.categories.service import get_category
from forum.db.models import Post
from forum.errors import NotFoundError, ValidationError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


async def create_post(
    db: AsyncSession,
    owner_id: int,
    category_id: int,
    headline: str,
    text: str | None = None,
    image: str | None = None,
) -> Post:
    """
    Create a post in a category.

    Raises:
        NotFoundError: If the category does not exist.
        ValidationError: If the headline is blank.
    """
    await get_category(db, category_id)
    if not headline or not headline.strip():
        msg = "headline is required"
        raise ValidationError(msg)

    now = datetime.now(timezone.utc)
    post = Post(
        owner_id=owner_id,
        category_id=category_id,
        headline=headline.strip(),
        text=text,
        image=image,
        created_at=now,
        updated_at=now,
        edited=False,
    )
    db.add(post)
    await db.flush()
    logger.info("post_created", post_id=post.id, owner_id=owner_id, category_id=category_id)
    return post


async def get_post(db: AsyncSession, post_id: int) -> Post:
    """Fetch a post by ID. Raises NotFoundError if absent."""
    result = await db.execute(select(Post).where(Post.id == post_id))
    post = result.scalar_one_or_none()
    if post is None:
        msg = "post not found"
        raise NotFoundError(msg)
    return post


async def list_posts_by_category(db: AsyncSession, category_id: int, limit: int = 100, offset: int = 0) -> list[Post]:
    result = await db.execute(
        select(Post).where(Post.category_id == category_id).order_by(Post.id.desc()).limit(limit).offset(offset)
    )
    return list(result.scalars().all())


async def list_posts_by_owner(db: AsyncSession, owner_id: int, limit: int = 100, offset: int = 0) -> list[Post]:
    result = await db.execute(
        select(Post).where(Post.owner_id == owner_id).order_by(Post.id.desc()).limit(limit).offset(offset)
    )
    return list(result.scalars().all())


async def list_posts_by_owner_and_category(
    db: AsyncSession,
    owner_id: int,
    category_id: int,
    limit: int = 100,
    offset: int = 0,
) -> list[Post]:
    result = await db.execute(
        select(Post)
        .where(Post.owner_id == owner_id, Post.category_id == category_id)
        .order_by(Post.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all())


async def update_post(
    db: AsyncSession,
    actor_id: int,
    post_id: int,
    *,
    headline: str | None = None,
    text: str | None = None,
    image: str | None = None,
) -> Post:
    """
    Edit a post. Fields left as None keep their current value.

    Raises:
        NotFoundError: If the post does not exist.
        ForbiddenError: If ``actor_id`` does not own the post.
        ValidationError: If ``headline`` is given but blank, or nothing is given.
    """
    post = await get_post(db, post_id)
    ensure_can_mutate(actor_id, post.owner_id, "you cannot update this post")

    if headline is None and text is None and image is None:
        msg = "nothing to update"
        raise ValidationError(msg)
    if headline is not None:
        if not headline.strip():
            msg = "headline is required"
            raise ValidationError(msg)
        post.headline = headline.strip()
    if text is not None:
        post.text = text
    if image is not None:
        post.image = image
    post.edited = True
    post.updated_at = datetime.now(timezone.utc)
    await db.flush()
    logger.info("post_updated", post_id=post.id, owner_id=actor_id)
    return post


async def delete_post(db: AsyncSession, actor_id: int, post_id: int) -> None:
    """Delete a post with its comments and reactions. Owner only."""
    post = await get_post(db, post_id)
    ensure_can_mutate(actor_id, post.owner_id, "you cannot delete this post")
    await db.execute(delete(Post).where(Post.id == post_id))
    await db.flush()
    logger.info("post_deleted", post_id=post_id, owner_id=actor_id)
