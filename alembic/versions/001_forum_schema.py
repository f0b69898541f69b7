"""Forum schema: users, tokens, categories, posts, comments, reactions, notifications.

Revision ID: 001_forum_schema
Revises: None
Create Date: 2026-10-17
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "001_forum_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

DEFAULT_REACTION_TYPES = ("like", "love", "haha", "wow", "sad", "angry")


def _pk(name: str) -> sa.Column:
    return sa.Column(name, sa.BigInteger(), sa.Identity(), primary_key=True)


def _fk(name: str, target: str, ondelete: str, *, nullable: bool = False) -> sa.Column:
    return sa.Column(name, sa.BigInteger(), sa.ForeignKey(target, ondelete=ondelete), nullable=nullable)


def _timestamp(name: str) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    """Create all forum tables."""
    # --- Accounts ---
    op.create_table(
        "users",
        _pk("user_id"),
        sa.Column("username", sa.String(150), nullable=False, unique=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("profile_picture", sa.String(255), nullable=True),
        _timestamp("created_at"),
    )
    op.create_table(
        "tokens",
        _pk("token_id"),
        _fk("user_id", "users.user_id", "CASCADE"),
        sa.Column("token", sa.String(512), nullable=False, unique=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_tokens_user", "tokens", ["user_id"])

    # --- Categories ---
    op.create_table(
        "categories",
        _pk("category_id"),
        sa.Column("category", sa.String(150), nullable=False, unique=True),
    )
    op.create_table(
        "memberships",
        _pk("membership_id"),
        _fk("category_id", "categories.category_id", "CASCADE"),
        _fk("user_id", "users.user_id", "CASCADE"),
        _timestamp("joined_date"),
        sa.UniqueConstraint("category_id", "user_id", name="memberships_unique_user_category"),
    )

    # --- Content ---
    op.create_table(
        "posts",
        _pk("post_id"),
        _fk("owner_id", "users.user_id", "CASCADE"),
        _fk("category_id", "categories.category_id", "CASCADE"),
        sa.Column("headline", sa.String(255), nullable=False),
        sa.Column("text", sa.Text(), nullable=True),
        sa.Column("image", sa.String(255), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.Column("edited", sa.Boolean(), server_default=sa.false(), nullable=False),
    )
    op.create_index("idx_posts_owner", "posts", ["owner_id"])
    op.create_index("idx_posts_category", "posts", ["category_id"])

    op.create_table(
        "comments",
        _pk("comment_id"),
        _fk("post_id", "posts.post_id", "CASCADE"),
        _fk("owner_id", "users.user_id", "CASCADE"),
        _fk("parent_comment_id", "comments.comment_id", "SET NULL", nullable=True),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("image", sa.String(255), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.Column("edited", sa.Boolean(), server_default=sa.false(), nullable=False),
    )
    op.create_index("idx_comments_post", "comments", ["post_id"])
    op.create_index("idx_comments_owner", "comments", ["owner_id"])
    op.create_index("idx_comments_parent", "comments", ["parent_comment_id"])

    # --- Reactions ---
    reaction_types = op.create_table(
        "reaction_types",
        _pk("reaction_type_id"),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("image", sa.String(255), nullable=True),
    )
    op.bulk_insert(reaction_types, [{"name": name} for name in DEFAULT_REACTION_TYPES])

    op.create_table(
        "reactions",
        _pk("reaction_id"),
        _fk("post_id", "posts.post_id", "CASCADE"),
        _fk("owner_id", "users.user_id", "CASCADE"),
        _fk("reaction_type_id", "reaction_types.reaction_type_id", "RESTRICT"),
        sa.UniqueConstraint("post_id", "owner_id", name="reactions_unique_owner_post"),
    )
    op.create_table(
        "comment_reactions",
        _pk("comment_reaction_id"),
        _fk("comment_id", "comments.comment_id", "CASCADE"),
        _fk("owner_id", "users.user_id", "CASCADE"),
        _fk("reaction_type_id", "reaction_types.reaction_type_id", "RESTRICT"),
        sa.UniqueConstraint("comment_id", "owner_id", name="comment_reactions_unique_owner_comment"),
    )

    # --- Notifications ---
    op.create_table(
        "notifications",
        _pk("notification_id"),
        _fk("owner_id", "users.user_id", "CASCADE"),
        _fk("actor_id", "users.user_id", "CASCADE"),
        sa.Column("component_type", sa.String(50), nullable=False),
        sa.Column("component_id", sa.BigInteger(), nullable=False),
        sa.Column("notification_type", sa.String(50), nullable=False),
        sa.Column("status", sa.Boolean(), server_default=sa.false(), nullable=False),
        _timestamp("created_at"),
    )
    op.create_index("idx_notifications_owner", "notifications", ["owner_id"])


def downgrade() -> None:
    """Drop all forum tables."""
    op.drop_table("notifications")
    op.drop_table("comment_reactions")
    op.drop_table("reactions")
    op.drop_table("reaction_types")
    op.drop_table("comments")
    op.drop_table("posts")
    op.drop_table("memberships")
    op.drop_table("categories")
    op.drop_table("tokens")
    op.drop_table("users")
