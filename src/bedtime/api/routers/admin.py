"""Admin endpoints.

Provides endpoints for admins:
- Reviewing pending stories (approve / reject)
- Platform statistics and user overview
- Listing and deleting any story

Every route except ``/check`` requires the caller's persisted admin flag.
"""

from typing import Literal

from fastapi import APIRouter
from pydantic import Field

from bedtime.api.deps import AdminUserId, CurrentUserId, DBSession
from bedtime.api.routers.stories import StoryResponse
from bedtime.api.schemas import CamelModel, SuccessResponse
from bedtime.core.config import get_settings
from bedtime.models.story import Story
from bedtime.services.admin import AdminService, PlatformStats, UserOverview
from bedtime.services.moderation import StoryModerationService
from bedtime.services.parent_settings import ParentSettingsService

router = APIRouter()


# =============================================================================
# Schemas
# =============================================================================


class AdminCheckResponse(CamelModel):
    is_admin: bool


class ReviewStoryRequest(CamelModel):
    """Admin decision on a pending story."""

    action: Literal["approve", "reject"]
    rejection_reason: str | None = Field(None, max_length=2000)


class AdminStatsResponse(CamelModel):
    """Dashboard statistics."""

    total_users: int
    total_stories: int
    total_bookmarks: int
    average_stories_per_user: str
    recent_stories_count: int
    pending_review_count: int


class AdminUserResponse(CamelModel):
    """User row in the admin table."""

    user_id: str
    reading_time_limit: int
    fullscreen_lock_enabled: bool
    theme: str
    is_admin: bool
    story_count: int


# =============================================================================
# Endpoints
# =============================================================================


@router.get("/check", response_model=AdminCheckResponse)
async def check_admin(user_id: CurrentUserId, db: DBSession) -> AdminCheckResponse:
    """Tell the client whether the caller is an admin."""
    return AdminCheckResponse(is_admin=await ParentSettingsService(db).is_admin(user_id))


@router.get("/pending-stories", response_model=list[StoryResponse])
async def list_pending_stories(admin_id: AdminUserId, db: DBSession) -> list[Story]:
    """List stories awaiting review, newest first."""
    return await StoryModerationService(db).list_pending()


@router.post("/review-story/{story_id}", response_model=StoryResponse)
async def review_story(
    story_id: str,
    request: ReviewStoryRequest,
    admin_id: AdminUserId,
    db: DBSession,
) -> Story:
    """Approve (publish) or reject (return to draft) a pending story."""
    story = await StoryModerationService(db).review_story(
        story_id,
        admin_id,
        request.action,
        request.rejection_reason,
    )
    await db.commit()
    return story


@router.get("/stats", response_model=AdminStatsResponse)
async def get_stats(admin_id: AdminUserId, db: DBSession) -> PlatformStats:
    """Platform statistics for the dashboard."""
    return await AdminService(db).get_stats(recent_days=get_settings().recent_stories_days)


@router.get("/stories", response_model=list[StoryResponse])
async def list_all_stories(admin_id: AdminUserId, db: DBSession) -> list[Story]:
    """Every story in every status, newest first."""
    return await StoryModerationService(db).list_all()


@router.get("/users", response_model=list[AdminUserResponse])
async def list_users(admin_id: AdminUserId, db: DBSession) -> list[UserOverview]:
    """Users with settings, with their story counts."""
    return await AdminService(db).list_users()


@router.delete("/stories/{story_id}", response_model=SuccessResponse)
async def delete_story(story_id: str, admin_id: AdminUserId, db: DBSession) -> SuccessResponse:
    """Delete a story and its bookmarks."""
    await StoryModerationService(db).delete_story(story_id, admin_id)
    await db.commit()
    return SuccessResponse()
