"""Bookmark service."""

from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from bedtime.models.bookmark import Bookmark
from bedtime.models.story import Story, StoryStatus

logger = logging.getLogger(__name__)


class BookmarkError(Exception):
    """Base exception for bookmark errors."""
    pass


class BookmarkStoryNotFoundError(BookmarkError):
    """Bookmarked story does not exist."""

    def __init__(self, story_id: str):
        self.story_id = story_id
        super().__init__(f"Story '{story_id}' not found")


class BookmarkService:
    """Service for a user's story bookmarks."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_story_ids(self, user_id: str) -> list[str]:
        """Bookmarked story ids, newest bookmark first."""
        result = await self.db.execute(
            select(Bookmark.story_id)
            .where(Bookmark.user_id == user_id)
            .order_by(Bookmark.created_at.desc())
        )
        return list(result.scalars().all())

    async def add(
        self,
        user_id: str,
        story_id: str,
        viewer_is_admin: bool = False,
    ) -> Bookmark:
        """Bookmark a story. Bookmarking it again returns the existing row.

        Only stories the caller may read can be bookmarked: published ones,
        their own, or any story for an admin.

        Raises:
            BookmarkStoryNotFoundError: If the story is missing or not visible
        """
        story = await self.db.get(Story, story_id)
        if story is None or not (
            story.status == StoryStatus.PUBLISHED
            or story.user_id == user_id
            or viewer_is_admin
        ):
            raise BookmarkStoryNotFoundError(story_id)

        existing = await self.db.execute(
            select(Bookmark).where(
                Bookmark.user_id == user_id,
                Bookmark.story_id == story_id,
            )
        )
        bookmark = existing.scalar_one_or_none()
        if bookmark is not None:
            return bookmark

        bookmark = Bookmark(user_id=user_id, story_id=story_id)
        self.db.add(bookmark)
        await self.db.flush()
        logger.debug(f"Bookmark {bookmark.id} added for {user_id}")
        return bookmark

    async def remove(self, user_id: str, story_id: str) -> bool:
        """Remove a bookmark. Returns whether one existed."""
        result = await self.db.execute(
            delete(Bookmark).where(
                Bookmark.user_id == user_id,
                Bookmark.story_id == story_id,
            )
        )
        return result.rowcount > 0
