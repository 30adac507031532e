"""Initial schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Creates initial database tables:
- stories: Bedtime stories and their moderation state
- parent_settings: PIN hash, reading preferences and admin flag
- bookmarks: Per-user story bookmarks
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

story_status = sa.Enum(
    "draft",
    "pending_review",
    "published",
    "rejected",
    name="story_status",
)


def upgrade() -> None:
    """Create all initial tables."""
    op.create_table(
        "stories",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("summary", sa.Text(), nullable=False),
        sa.Column("image_url", sa.String(length=2048), nullable=False),
        sa.Column("voiceover_url", sa.String(length=2048), nullable=True),
        sa.Column("status", story_status, nullable=False, server_default="draft"),
        sa.Column("approved_by", sa.String(length=128), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_stories_user_id", "stories", ["user_id"])
    op.create_index("ix_stories_status", "stories", ["status"])
    op.create_index("ix_stories_created_at", "stories", ["created_at"])

    op.create_table(
        "parent_settings",
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("pin_hash", sa.String(length=255), nullable=False),
        sa.Column("reading_time_limit", sa.Integer(), nullable=False),
        sa.Column("fullscreen_lock_enabled", sa.Boolean(), nullable=False),
        sa.Column("theme", sa.String(length=10), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.CheckConstraint(
            "reading_time_limit BETWEEN 10 AND 60",
            name="ck_parent_settings_reading_time_limit",
        ),
        sa.CheckConstraint("theme IN ('day', 'night')", name="ck_parent_settings_theme"),
        sa.PrimaryKeyConstraint("user_id"),
    )

    op.create_table(
        "bookmarks",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("story_id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["story_id"], ["stories.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "story_id", name="uq_bookmarks_user_story"),
    )
    op.create_index("ix_bookmarks_user_id", "bookmarks", ["user_id"])
    op.create_index("ix_bookmarks_story_id", "bookmarks", ["story_id"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("bookmarks")
    op.drop_table("parent_settings")
    op.drop_index("ix_stories_created_at", table_name="stories")
    op.drop_index("ix_stories_status", table_name="stories")
    op.drop_index("ix_stories_user_id", table_name="stories")
    op.drop_table("stories")
    story_status.drop(op.get_bind(), checkfirst=True)
