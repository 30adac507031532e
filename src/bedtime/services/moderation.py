"""Story moderation service.

Owns the story lifecycle:

    (new) --create--> draft --submit--> pending_review --approve--> published
                        ^                     |
                        +------reject---------+

Admins creating a story skip review and publish immediately. Every status
change is issued as a single conditional UPDATE guarded on the expected
current status, so two racing transitions cannot both succeed.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bedtime.core.config import get_settings
from bedtime.models.bookmark import Bookmark
from bedtime.models.story import Story, StoryStatus

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "content", "summary", "image_url")
EDITABLE_FIELDS = (*REQUIRED_FIELDS, "voiceover_url")
MAX_LENGTHS = {
    "title": 200,
    "summary": 1000,
    "image_url": 2048,
    "voiceover_url": 2048,
}


class StoryServiceError(Exception):
    """Base exception for story service errors."""
    pass


class StoryNotFoundError(StoryServiceError):
    """Story does not exist or is not visible to the caller."""

    def __init__(self, story_id: str):
        self.story_id = story_id
        super().__init__(f"Story '{story_id}' not found")


class InvalidStateError(StoryServiceError):
    """Action attempted from the wrong workflow state."""

    def __init__(self, story_id: str, current: StoryStatus, expected: StoryStatus):
        self.story_id = story_id
        self.current = current
        self.expected = expected
        super().__init__(
            f"Story '{story_id}' is {current.value}; "
            f"this action requires status {expected.value}"
        )


class StoryValidationError(StoryServiceError):
    """Story payload is missing fields or malformed."""
    pass


class ReviewAction(str, Enum):
    """Admin review decisions."""

    APPROVE = "approve"
    REJECT = "reject"

    @property
    def past_tense(self) -> str:
        return {"approve": "approved", "reject": "rejected"}[self.value]


def _clean_fields(fields: dict[str, Any], *, require_all: bool) -> dict[str, Any]:
    """Trim and validate story content fields."""
    cleaned: dict[str, Any] = {}
    for name in EDITABLE_FIELDS:
        if name not in fields:
            if require_all and name in REQUIRED_FIELDS:
                raise StoryValidationError(f"Missing required field: {name}")
            continue

        value = fields[name]
        if value is None:
            if name in REQUIRED_FIELDS:
                raise StoryValidationError(f"Missing required field: {name}")
            cleaned[name] = None
            continue
        if not isinstance(value, str):
            raise StoryValidationError(f"Field {name} must be a string")

        value = value.strip()
        if not value:
            if name in REQUIRED_FIELDS:
                raise StoryValidationError(f"Field {name} must not be blank")
            cleaned[name] = None
            continue

        limit = MAX_LENGTHS.get(name)
        if limit is not None and len(value) > limit:
            raise StoryValidationError(f"Field {name} exceeds {limit} characters")
        cleaned[name] = value
    return cleaned


class StoryModerationService:
    """Service for creating, editing and reviewing stories."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # Authoring
    # =========================================================================

    async def create_story(
        self,
        owner_id: str,
        *,
        is_admin: bool = False,
        **fields: Any,
    ) -> Story:
        """Create a story owned by ``owner_id``.

        Args:
            owner_id: Caller id of the author
            is_admin: Whether the author is an admin (publishes immediately)
            **fields: title, content, summary, image_url, voiceover_url

        Returns:
            The created story

        Raises:
            StoryValidationError: If required fields are missing or malformed
        """
        cleaned = _clean_fields(fields, require_all=True)
        now = datetime.now(UTC)

        story = Story(
            user_id=owner_id,
            status=StoryStatus.PUBLISHED if is_admin else StoryStatus.DRAFT,
            created_at=now,
            **cleaned,
        )
        if is_admin:
            story.approved_by = owner_id
            story.reviewed_at = now

        self.db.add(story)
        await self.db.flush()

        logger.info(f"Story {story.id} created by {owner_id} as {story.status.value}")
        return story

    async def edit_story(self, story_id: str, owner_id: str, **changes: Any) -> Story:
        """Replace content fields on one of the caller's drafts.

        Raises:
            StoryValidationError: If no editable field is supplied or a value is bad
            StoryNotFoundError: If the story is missing or owned by someone else
            InvalidStateError: If the story is not a draft
        """
        cleaned = _clean_fields(changes, require_all=False)
        if not cleaned:
            raise StoryValidationError("No editable fields supplied")

        story = await self._transition(
            story_id,
            expected=StoryStatus.DRAFT,
            values=cleaned,
            owner_id=owner_id,
        )
        logger.info(f"Story {story_id} edited by {owner_id}")
        return story

    async def submit_story(self, story_id: str, owner_id: str) -> Story:
        """Move one of the caller's drafts to pending_review.

        Raises:
            StoryNotFoundError: If the story is missing or owned by someone else
            InvalidStateError: If the story is not a draft
        """
        story = await self._transition(
            story_id,
            expected=StoryStatus.DRAFT,
            values={"status": StoryStatus.PENDING_REVIEW},
            owner_id=owner_id,
        )
        logger.info(f"Story {story_id} submitted for review by {owner_id}")
        return story

    # =========================================================================
    # Review
    # =========================================================================

    async def review_story(
        self,
        story_id: str,
        reviewer_id: str,
        action: ReviewAction | str,
        rejection_reason: str | None = None,
    ) -> Story:
        """Approve or reject a pending story.

        The caller must already be authorized as an admin.

        Raises:
            StoryValidationError: If the action is unknown
            StoryNotFoundError: If the story does not exist
            InvalidStateError: If the story is not pending review
        """
        try:
            action = ReviewAction(action)
        except ValueError:
            raise StoryValidationError(
                f"Unknown review action: {action}. Use 'approve' or 'reject'"
            ) from None

        values: dict[str, Any] = {
            "approved_by": reviewer_id,
            "reviewed_at": datetime.now(UTC),
        }
        if action is ReviewAction.APPROVE:
            values["status"] = StoryStatus.PUBLISHED
            values["rejection_reason"] = None
        else:
            reason = (rejection_reason or "").strip()
            values["status"] = StoryStatus.DRAFT
            values["rejection_reason"] = reason or get_settings().default_rejection_reason

        story = await self._transition(
            story_id,
            expected=StoryStatus.PENDING_REVIEW,
            values=values,
        )
        logger.info(f"Story {story_id} {action.past_tense} by {reviewer_id}")
        return story

    # =========================================================================
    # Queries
    # =========================================================================

    async def list_published(self, limit: int | None = None) -> list[Story]:
        """Public feed, newest first."""
        return await self._list(Story.status == StoryStatus.PUBLISHED, limit=limit)

    async def list_for_owner(self, owner_id: str) -> list[Story]:
        """All of a user's stories regardless of status, newest first."""
        return await self._list(Story.user_id == owner_id)

    async def list_pending(self) -> list[Story]:
        """Stories awaiting admin review, newest first."""
        return await self._list(Story.status == StoryStatus.PENDING_REVIEW)

    async def list_all(self) -> list[Story]:
        """Every story, newest first."""
        return await self._list()

    async def get_story(
        self,
        story_id: str,
        viewer_id: str | None = None,
        viewer_is_admin: bool = False,
    ) -> Story:
        """Get a story visible to the viewer.

        Published stories are public; anything else is visible only to its
        owner and to admins.

        Raises:
            StoryNotFoundError: If missing or not visible
        """
        story = await self.db.get(Story, story_id)
        if story is None:
            raise StoryNotFoundError(story_id)
        if story.status == StoryStatus.PUBLISHED or viewer_is_admin:
            return story
        if viewer_id is not None and story.user_id == viewer_id:
            return story
        raise StoryNotFoundError(story_id)

    async def delete_story(self, story_id: str, actor_id: str) -> None:
        """Delete a story and every bookmark pointing at it.

        Raises:
            StoryNotFoundError: If the story does not exist
        """
        await self.db.execute(delete(Bookmark).where(Bookmark.story_id == story_id))
        result = await self.db.execute(delete(Story).where(Story.id == story_id))
        if result.rowcount == 0:
            raise StoryNotFoundError(story_id)
        logger.info(f"Story {story_id} deleted by {actor_id}")

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _list(self, *criteria: Any, limit: int | None = None) -> list[Story]:
        query = select(Story).where(*criteria).order_by(Story.created_at.desc())
        if limit is not None:
            query = query.limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def _transition(
        self,
        story_id: str,
        *,
        expected: StoryStatus,
        values: dict[str, Any],
        owner_id: str | None = None,
    ) -> Story:
        """Apply ``values`` only if the story is currently in ``expected``.

        When nothing matched, re-read the row to report why.
        """
        stmt = update(Story).where(Story.id == story_id, Story.status == expected)
        if owner_id is not None:
            stmt = stmt.where(Story.user_id == owner_id)
        result = await self.db.execute(
            stmt.values(**values).execution_options(synchronize_session=False)
        )

        story = await self.db.get(Story, story_id, populate_existing=True)
        if result.rowcount == 1 and story is not None:
            return story

        if story is None or (owner_id is not None and story.user_id != owner_id):
            raise StoryNotFoundError(story_id)
        raise InvalidStateError(story_id, story.status, expected)
