"""Reaction ledger: at most one reaction per (user, post) and per (user, comment).

A second reaction from the same user on the same target replaces the
reaction type of the existing row. The replacement is a single
``INSERT ... ON CONFLICT DO UPDATE`` so concurrent writers cannot create a
duplicate, and the row keeps its original id.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import delete, func, select

from forum.db.base import dialect_insert
from forum.db.models import CommentReaction, Reaction, ReactionType
from forum.errors import NotFoundError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


# ---------------------------------------------------------------------------
# Reaction types
# ---------------------------------------------------------------------------


async def list_reaction_types(db: AsyncSession) -> list[ReactionType]:
    result = await db.execute(select(ReactionType).order_by(ReactionType.id))
    return list(result.scalars().all())


async def get_reaction_type(db: AsyncSession, reaction_type_id: int) -> ReactionType | None:
    result = await db.execute(select(ReactionType).where(ReactionType.id == reaction_type_id))
    return result.scalar_one_or_none()


async def seed_reaction_types(db: AsyncSession, names: list[str]) -> int:
    """Insert default reaction types that are missing. Idempotent. Returns count inserted."""
    if not names:
        return 0
    stmt = (
        dialect_insert(db, ReactionType)
        .values([{"name": name} for name in names])
        .on_conflict_do_nothing(index_elements=[ReactionType.name])
    )
    result = await db.execute(stmt)
    await db.commit()
    inserted = result.rowcount or 0
    if inserted:
        logger.info("reaction_types_seeded", count=inserted)
    return inserted


# ---------------------------------------------------------------------------
# Post reactions
# ---------------------------------------------------------------------------


async def upsert_post_reaction(
    db: AsyncSession,
    actor_id: int,
    post_id: int,
    reaction_type_id: int,
) -> Reaction:
    """Set ``actor_id``'s reaction on a post, replacing any previous reaction type."""
    stmt = dialect_insert(db, Reaction).values(
        post_id=post_id,
        owner_id=actor_id,
        reaction_type_id=reaction_type_id,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[Reaction.post_id, Reaction.owner_id],
        set_={"reaction_type_id": stmt.excluded.reaction_type_id},
    ).returning(Reaction.id)
    reaction_id = (await db.execute(stmt)).scalar_one()

    # The identity map may hold a stale copy from an earlier read in this session
    result = await db.execute(
        select(Reaction).where(Reaction.id == reaction_id).execution_options(populate_existing=True)
    )
    reaction = result.scalar_one()
    logger.info(
        "reaction_upserted", target="post", target_id=post_id, actor_id=actor_id, reaction_type_id=reaction_type_id
    )
    return reaction


async def get_post_reaction(db: AsyncSession, actor_id: int, post_id: int) -> Reaction | None:
    """The actor's reaction on a post, or None if they have not reacted."""
    result = await db.execute(
        select(Reaction).where(Reaction.owner_id == actor_id, Reaction.post_id == post_id)
    )
    return result.scalar_one_or_none()


async def count_post_reactions(db: AsyncSession, post_id: int) -> int:
    """Total reactions on a post regardless of type."""
    result = await db.execute(
        select(func.count()).select_from(Reaction).where(Reaction.post_id == post_id)
    )
    return result.scalar_one()


async def remove_post_reaction(db: AsyncSession, actor_id: int, post_id: int) -> None:
    """Delete the actor's reaction on a post.

    Raises:
        NotFoundError: If the actor has not reacted to the post.
    """
    result = await db.execute(
        delete(Reaction).where(Reaction.owner_id == actor_id, Reaction.post_id == post_id)
    )
    if not result.rowcount:
        msg = "reaction not found"
        raise NotFoundError(msg)
    await db.flush()


# ---------------------------------------------------------------------------
# Comment reactions
# ---------------------------------------------------------------------------


async def upsert_comment_reaction(
    db: AsyncSession,
    actor_id: int,
    comment_id: int,
    reaction_type_id: int,
) -> CommentReaction:
    """Set ``actor_id``'s reaction on a comment, replacing any previous reaction type."""
    stmt = dialect_insert(db, CommentReaction).values(
        comment_id=comment_id,
        owner_id=actor_id,
        reaction_type_id=reaction_type_id,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[CommentReaction.comment_id, CommentReaction.owner_id],
        set_={"reaction_type_id": stmt.excluded.reaction_type_id},
    ).returning(CommentReaction.id)
    reaction_id = (await db.execute(stmt)).scalar_one()

    result = await db.execute(
        select(CommentReaction)
        .where(CommentReaction.id == reaction_id)
        .execution_options(populate_existing=True)
    )
    reaction = result.scalar_one()
    logger.info(
        "reaction_upserted",
        target="comment",
        target_id=comment_id,
        actor_id=actor_id,
        reaction_type_id=reaction_type_id,
    )
    return reaction


async def get_comment_reaction(db: AsyncSession, actor_id: int, comment_id: int) -> CommentReaction | None:
    result = await db.execute(
        select(CommentReaction).where(
            CommentReaction.owner_id == actor_id, CommentReaction.comment_id == comment_id
        )
    )
    return result.scalar_one_or_none()


async def count_comment_reactions(db: AsyncSession, comment_id: int) -> int:
    result = await db.execute(
        select(func.count()).select_from(CommentReaction).where(CommentReaction.comment_id == comment_id)
    )
    return result.scalar_one()


async def remove_comment_reaction(db: AsyncSession, actor_id: int, comment_id: int) -> None:
    """Delete the actor's reaction on a comment.

    Raises:
        NotFoundError: If the actor has not reacted to the comment.
    """
    result = await db.execute(
        delete(CommentReaction).where(
            CommentReaction.owner_id == actor_id, CommentReaction.comment_id == comment_id
        )
    )
    if not result.rowcount:
        msg = "reaction not found"
        raise NotFoundError(msg)
    await db.flush()


async def require_reaction_type(db: AsyncSession, reaction_type_id: int) -> ReactionType:
    """Fetch a reaction type or raise NotFoundError."""
    reaction_type = await get_reaction_type(db, reaction_type_id)
    if reaction_type is None:
        msg = "reaction type not found"
        raise NotFoundError(msg)
    return reaction_type
