"""Comment and reply business logic.

A reply is a comment with ``parent_comment_id`` set; it always belongs to
the same post as its parent.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import delete, select

from forum.auth.permissions import ensure_can_mutate
from forum.db.models import Comment, Post
from forum.errors import NotFoundError, ValidationError
from forum.posts.service import get_post

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

TEXT_REQUIRED = "text is required"


async def _add_comment(
    db: AsyncSession,
    owner_id: int,
    post_id: int,
    text: str,
    image: str | None,
    parent_comment_id: int | None,
) -> Comment:
    now = datetime.now(timezone.utc)
    comment = Comment(
        post_id=post_id,
        owner_id=owner_id,
        parent_comment_id=parent_comment_id,
        text=text,
        image=image,
        created_at=now,
        updated_at=now,
        edited=False,
    )
    db.add(comment)
    await db.flush()
    # Load the owner relationship for response building
    await db.refresh(comment, attribute_names=["owner"])
    logger.info(
        "comment_created",
        comment_id=comment.id,
        post_id=post_id,
        owner_id=owner_id,
        parent_comment_id=parent_comment_id,
    )
    return comment


async def create_comment(
    db: AsyncSession,
    owner_id: int,
    post_id: int,
    text: str,
    image: str | None = None,
) -> Comment:
    """
    Comment on a post.

    Raises:
        NotFoundError: If the post does not exist.
        ValidationError: If the text is blank.
    """
    await get_post(db, post_id)
    if not text or not text.strip():
        raise ValidationError(TEXT_REQUIRED)
    return await _add_comment(db, owner_id, post_id, text, image, None)


async def reply_to_comment(
    db: AsyncSession,
    owner_id: int,
    parent_comment_id: int,
    text: str,
    image: str | None = None,
) -> Comment:
    """Reply to a comment. The reply inherits the parent's post."""
    parent = await get_comment(db, parent_comment_id)
    if not text or not text.strip():
        raise ValidationError(TEXT_REQUIRED)
    return await _add_comment(db, owner_id, parent.post_id, text, image, parent.id)


async def get_comment(db: AsyncSession, comment_id: int) -> Comment:
    """Fetch a comment by ID. Raises NotFoundError if absent."""
    result = await db.execute(select(Comment).where(Comment.id == comment_id))
    comment = result.scalar_one_or_none()
    if comment is None:
        msg = "comment not found"
        raise NotFoundError(msg)
    return comment


async def list_comments_by_post(db: AsyncSession, post_id: int, limit: int = 100, offset: int = 0) -> list[Comment]:
    """Top-level comments on a post, oldest first."""
    result = await db.execute(
        select(Comment)
        .where(Comment.post_id == post_id, Comment.parent_comment_id.is_(None))
        .order_by(Comment.id)
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all())


async def list_replies(db: AsyncSession, comment_id: int, limit: int = 100, offset: int = 0) -> list[Comment]:
    """Direct replies to a comment, oldest first."""
    result = await db.execute(
        select(Comment)
        .where(Comment.parent_comment_id == comment_id)
        .order_by(Comment.id)
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all())


async def list_comments_by_owner(db: AsyncSession, owner_id: int, limit: int = 100, offset: int = 0) -> list[Comment]:
    result = await db.execute(
        select(Comment).where(Comment.owner_id == owner_id).order_by(Comment.id.desc()).limit(limit).offset(offset)
    )
    return list(result.scalars().all())


async def list_comments_by_owner_and_category(
    db: AsyncSession,
    owner_id: int,
    category_id: int,
    limit: int = 100,
    offset: int = 0,
) -> list[Comment]:
    """The user's comments on posts in a category, newest first."""
    result = await db.execute(
        select(Comment)
        .join(Post, Post.id == Comment.post_id)
        .where(Comment.owner_id == owner_id, Post.category_id == category_id)
        .order_by(Comment.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all())


async def update_comment(
    db: AsyncSession,
    actor_id: int,
    comment_id: int,
    *,
    text: str | None = None,
    image: str | None = None,
) -> Comment:
    """
    Edit a comment. Owner only.

    Raises:
        NotFoundError: If the comment does not exist.
        ForbiddenError: If ``actor_id`` does not own the comment.
        ValidationError: If neither text nor image is given, or text is blank.
    """
    comment = await get_comment(db, comment_id)
    ensure_can_mutate(actor_id, comment.owner_id, "you cannot update this comment")

    if text is None and image is None:
        raise ValidationError(TEXT_REQUIRED)
    if text is not None:
        if not text.strip():
            raise ValidationError(TEXT_REQUIRED)
        comment.text = text
    if image is not None:
        comment.image = image
    comment.edited = True
    comment.updated_at = datetime.now(timezone.utc)
    await db.flush()
    logger.info("comment_updated", comment_id=comment.id, owner_id=actor_id)
    return comment


async def delete_comment(db: AsyncSession, actor_id: int, comment_id: int) -> None:
    """Delete a comment. Owner only. Replies are kept and detached from it."""
    comment = await get_comment(db, comment_id)
    ensure_can_mutate(actor_id, comment.owner_id, "you cannot delete this comment")
    await db.execute(delete(Comment).where(Comment.id == comment_id))
    await db.flush()
    logger.info("comment_deleted", comment_id=comment_id, owner_id=actor_id)
