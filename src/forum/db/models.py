"""ORM models for the forum schema.

Primary key columns keep their table-specific names (``user_id``,
``post_id``, ...) while the mapped attribute is always ``id``.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    false,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from forum.db.base import Base, BigIntPK


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Users & tokens
# ---------------------------------------------------------------------------


class User(Base):
    """Maps to the 'users' table."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column("user_id", BigIntPK, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(150), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column("password", String(255), nullable=False)
    profile_picture: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now()
    )


class Token(Base):
    """Issued bearer token. A token is live only while its row exists and is unexpired."""

    __tablename__ = "tokens"
    __table_args__ = (Index("idx_tokens_user", "user_id"),)

    id: Mapped[int] = mapped_column("token_id", BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    token: Mapped[str] = mapped_column(String(512), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


# ---------------------------------------------------------------------------
# Categories & memberships
# ---------------------------------------------------------------------------


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column("category_id", BigIntPK, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column("category", String(150), unique=True, nullable=False)


class Membership(Base):
    """User subscription to a category."""

    __tablename__ = "memberships"
    __table_args__ = (UniqueConstraint("category_id", "user_id", name="memberships_unique_user_category"),)

    id: Mapped[int] = mapped_column("membership_id", BigIntPK, primary_key=True, autoincrement=True)
    category_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("categories.category_id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    joined_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now()
    )

    category: Mapped[Category] = relationship("Category", lazy="joined")


# ---------------------------------------------------------------------------
# Posts & comments
# ---------------------------------------------------------------------------


class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (
        Index("idx_posts_owner", "owner_id"),
        Index("idx_posts_category", "category_id"),
    )

    id: Mapped[int] = mapped_column("post_id", BigIntPK, primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    category_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("categories.category_id", ondelete="CASCADE"), nullable=False
    )
    headline: Mapped[str] = mapped_column(String(255), nullable=False)
    text: Mapped[str | None] = mapped_column(Text, nullable=True)
    image: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now()
    )
    edited: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())


class Comment(Base):
    """Comment on a post. Replies carry ``parent_comment_id`` and the parent's ``post_id``."""

    __tablename__ = "comments"
    __table_args__ = (
        Index("idx_comments_post", "post_id"),
        Index("idx_comments_owner", "owner_id"),
        Index("idx_comments_parent", "parent_comment_id"),
    )

    id: Mapped[int] = mapped_column("comment_id", BigIntPK, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("posts.post_id", ondelete="CASCADE"), nullable=False
    )
    owner_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    parent_comment_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("comments.comment_id", ondelete="SET NULL"), nullable=True
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now()
    )
    edited: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())

    owner: Mapped[User] = relationship("User", lazy="joined")


# ---------------------------------------------------------------------------
# Reactions
# ---------------------------------------------------------------------------


class ReactionType(Base):
    __tablename__ = "reaction_types"

    id: Mapped[int] = mapped_column("reaction_type_id", BigIntPK, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    image: Mapped[str | None] = mapped_column(String(255), nullable=True)


class Reaction(Base):
    """At most one reaction per (post, owner)."""

    __tablename__ = "reactions"
    __table_args__ = (UniqueConstraint("post_id", "owner_id", name="reactions_unique_owner_post"),)

    id: Mapped[int] = mapped_column("reaction_id", BigIntPK, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("posts.post_id", ondelete="CASCADE"), nullable=False
    )
    owner_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    reaction_type_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("reaction_types.reaction_type_id", ondelete="RESTRICT"), nullable=False
    )


class CommentReaction(Base):
    """At most one reaction per (comment, owner)."""

    __tablename__ = "comment_reactions"
    __table_args__ = (
        UniqueConstraint("comment_id", "owner_id", name="comment_reactions_unique_owner_comment"),
    )

    id: Mapped[int] = mapped_column("comment_reaction_id", BigIntPK, primary_key=True, autoincrement=True)
    comment_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("comments.comment_id", ondelete="CASCADE"), nullable=False
    )
    owner_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    reaction_type_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("reaction_types.reaction_type_id", ondelete="RESTRICT"), nullable=False
    )


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


class Notification(Base):
    """Event addressed to ``owner_id``, triggered by ``actor_id``. ``status`` is True once read."""

    __tablename__ = "notifications"
    __table_args__ = (Index("idx_notifications_owner", "owner_id"),)

    id: Mapped[int] = mapped_column("notification_id", BigIntPK, primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    actor_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    component_type: Mapped[str] = mapped_column(String(50), nullable=False)
    component_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    notification_type: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now()
    )
