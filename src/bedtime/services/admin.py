"""Admin reporting service and the operator-only admin flag path.

Provides:
- Platform statistics for the admin dashboard
- Per-user overview (settings plus story counts)
- ``set_admin_flag``, the only code path that writes ``is_admin``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bedtime.models.bookmark import Bookmark
from bedtime.models.parent_settings import ParentSettings
from bedtime.models.story import Story, StoryStatus

logger = logging.getLogger(__name__)


@dataclass
class PlatformStats:
    """Aggregate counts for the admin dashboard."""

    total_users: int
    total_stories: int
    total_bookmarks: int
    average_stories_per_user: str
    recent_stories_count: int
    pending_review_count: int


@dataclass
class UserOverview:
    """One row of the admin user table."""

    user_id: str
    reading_time_limit: int
    fullscreen_lock_enabled: bool
    theme: str
    is_admin: bool
    story_count: int


class AdminFlagError(Exception):
    """The admin flag cannot be changed for this user."""
    pass


class AdminService:
    """Read-only reporting queries for admins."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _count(self, query) -> int:
        result = await self.db.execute(query)
        return result.scalar() or 0

    async def get_stats(self, recent_days: int = 7) -> PlatformStats:
        """Compute platform statistics.

        Users are counted by parent settings rows; stories created in the
        last ``recent_days`` days count as recent.
        """
        since = datetime.now(UTC) - timedelta(days=recent_days)

        total_users = await self._count(select(func.count()).select_from(ParentSettings))
        total_stories = await self._count(select(func.count()).select_from(Story))
        total_bookmarks = await self._count(select(func.count()).select_from(Bookmark))
        recent = await self._count(
            select(func.count()).select_from(Story).where(Story.created_at >= since)
        )
        pending = await self._count(
            select(func.count())
            .select_from(Story)
            .where(Story.status == StoryStatus.PENDING_REVIEW)
        )

        average = total_stories / total_users if total_users else 0.0
        return PlatformStats(
            total_users=total_users,
            total_stories=total_stories,
            total_bookmarks=total_bookmarks,
            average_stories_per_user=f"{average:.1f}",
            recent_stories_count=recent,
            pending_review_count=pending,
        )

    async def list_users(self) -> list[UserOverview]:
        """List every user with settings, with their story counts."""
        story_counts = (
            select(Story.user_id, func.count(Story.id).label("story_count"))
            .group_by(Story.user_id)
            .subquery()
        )
        result = await self.db.execute(
            select(ParentSettings, func.coalesce(story_counts.c.story_count, 0))
            .outerjoin(story_counts, story_counts.c.user_id == ParentSettings.user_id)
            .order_by(ParentSettings.user_id)
        )
        return [
            UserOverview(
                user_id=settings.user_id,
                reading_time_limit=settings.reading_time_limit,
                fullscreen_lock_enabled=settings.fullscreen_lock_enabled,
                theme=settings.theme,
                is_admin=settings.is_admin,
                story_count=count,
            )
            for settings, count in result.all()
        ]


async def set_admin_flag(db: AsyncSession, user_id: str, is_admin: bool) -> ParentSettings:
    """Grant or revoke admin rights.

    Not exposed through the HTTP API; called by ``scripts/grant_admin.py``.

    Raises:
        AdminFlagError: If the user has no parent settings yet
    """
    settings = await db.get(ParentSettings, user_id)
    if settings is None:
        raise AdminFlagError(
            f"User {user_id} has no parent settings; they must sign in and save settings first"
        )
    settings.is_admin = is_admin
    await db.flush()
    logger.warning(f"Admin flag for {user_id} set to {is_admin}")
    return settings
