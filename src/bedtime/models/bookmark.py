"""Bookmark model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base
from .story import new_id, utcnow


class Bookmark(Base):
    """A user's bookmark on a story."""

    __tablename__ = "bookmarks"
    __table_args__ = (
        UniqueConstraint("user_id", "story_id", name="uq_bookmarks_user_story"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(128), index=True)
    story_id: Mapped[str] = mapped_column(
        ForeignKey("stories.id", ondelete="CASCADE"),
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
    )

    def __repr__(self) -> str:
        return f"<Bookmark(user_id='{self.user_id}', story_id='{self.story_id}')>"
