"""Story model.

SQLAlchemy model for bedtime stories and their moderation state.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import Enum

from sqlalchemy import DateTime, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


def new_id() -> str:
    """Generate a string primary key."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


class StoryStatus(str, Enum):
    """Moderation state of a story."""

    DRAFT = "draft"
    PENDING_REVIEW = "pending_review"
    PUBLISHED = "published"
    # Reserved: rejection currently returns a story to DRAFT
    REJECTED = "rejected"


class Story(Base):
    """Story model - a bedtime story authored by a parent.

    ``approved_by`` and ``reviewed_at`` are only ever written by the
    moderation service on admin creation or admin review.
    """

    __tablename__ = "stories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(128), index=True)

    title: Mapped[str] = mapped_column(String(200))
    content: Mapped[str] = mapped_column(Text)
    summary: Mapped[str] = mapped_column(Text)
    image_url: Mapped[str] = mapped_column(String(2048))
    voiceover_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    status: Mapped[StoryStatus] = mapped_column(
        SQLEnum(
            StoryStatus,
            name="story_status",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=StoryStatus.DRAFT,
        index=True,
    )
    approved_by: Mapped[str | None] = mapped_column(String(128), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        index=True,
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Story(id={self.id}, title='{self.title}', status={self.status})>"
