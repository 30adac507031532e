"""Stories router for the public feed and story authoring.

Endpoints for reading published stories and for parents to create, edit
and submit their own stories for review.
"""

from datetime import datetime

from fastapi import APIRouter, status
from pydantic import Field, field_serializer

from bedtime.api.deps import CurrentUserId, DBSession, OptionalUserId
from bedtime.api.schemas import CamelModel, as_utc
from bedtime.core.config import get_settings
from bedtime.models.story import Story, StoryStatus
from bedtime.services.moderation import StoryModerationService
from bedtime.services.parent_settings import ParentSettingsService

router = APIRouter()


# =============================================================================
# Schemas
# =============================================================================


class StoryCreateRequest(CamelModel):
    """Request to create a new story."""

    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    summary: str = Field(..., min_length=1, max_length=1000)
    image_url: str = Field(..., min_length=1, max_length=2048)
    voiceover_url: str | None = Field(None, max_length=2048)


class StoryUpdateRequest(CamelModel):
    """Partial edit of a draft's content fields."""

    title: str | None = Field(None, min_length=1, max_length=200)
    content: str | None = Field(None, min_length=1)
    summary: str | None = Field(None, min_length=1, max_length=1000)
    image_url: str | None = Field(None, min_length=1, max_length=2048)
    voiceover_url: str | None = Field(None, max_length=2048)


class StoryResponse(CamelModel):
    """Story information response."""

    id: str
    user_id: str
    title: str
    content: str
    summary: str
    image_url: str
    voiceover_url: str | None
    status: StoryStatus
    approved_by: str | None
    rejection_reason: str | None
    created_at: datetime
    reviewed_at: datetime | None

    @field_serializer("created_at", "reviewed_at")
    def serialize_timestamps(self, value: datetime | None) -> datetime | None:
        return as_utc(value)


# =============================================================================
# Endpoints
# =============================================================================


@router.get("", response_model=list[StoryResponse])
async def list_published_stories(db: DBSession) -> list[Story]:
    """List published stories, newest first."""
    return await StoryModerationService(db).list_published()


@router.get("/preview", response_model=list[StoryResponse])
async def preview_stories(db: DBSession) -> list[Story]:
    """Newest few published stories for the signed-out landing page."""
    limit = get_settings().story_preview_limit
    return await StoryModerationService(db).list_published(limit=limit)


@router.get("/my-submissions", response_model=list[StoryResponse])
async def list_my_submissions(user_id: CurrentUserId, db: DBSession) -> list[Story]:
    """List the caller's own stories in every status."""
    return await StoryModerationService(db).list_for_owner(user_id)


@router.get("/{story_id}", response_model=StoryResponse)
async def get_story(story_id: str, user_id: OptionalUserId, db: DBSession) -> Story:
    """Get one story.

    Published stories are public. Drafts and pending stories are only
    visible to their author and to admins.
    """
    is_admin = user_id is not None and await ParentSettingsService(db).is_admin(user_id)
    return await StoryModerationService(db).get_story(
        story_id,
        viewer_id=user_id,
        viewer_is_admin=is_admin,
    )


@router.post("", response_model=StoryResponse, status_code=status.HTTP_201_CREATED)
async def create_story(
    request: StoryCreateRequest,
    user_id: CurrentUserId,
    db: DBSession,
) -> Story:
    """Create a new story.

    Stories start as drafts; stories written by admins are published
    immediately.
    """
    is_admin = await ParentSettingsService(db).is_admin(user_id)
    story = await StoryModerationService(db).create_story(
        user_id,
        is_admin=is_admin,
        **request.model_dump(),
    )
    await db.commit()
    return story


@router.patch("/{story_id}", response_model=StoryResponse)
async def edit_story(
    story_id: str,
    request: StoryUpdateRequest,
    user_id: CurrentUserId,
    db: DBSession,
) -> Story:
    """Edit one of the caller's drafts."""
    story = await StoryModerationService(db).edit_story(
        story_id,
        user_id,
        **request.model_dump(exclude_unset=True),
    )
    await db.commit()
    return story


@router.post("/{story_id}/submit", response_model=StoryResponse)
async def submit_story(story_id: str, user_id: CurrentUserId, db: DBSession) -> Story:
    """Submit one of the caller's drafts for admin review."""
    story = await StoryModerationService(db).submit_story(story_id, user_id)
    await db.commit()
    return story
