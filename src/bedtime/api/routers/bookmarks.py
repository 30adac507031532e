"""Bookmark endpoints."""

from fastapi import APIRouter
from pydantic import Field

from bedtime.api.deps import CurrentUserId, DBSession
from bedtime.api.schemas import CamelModel, SuccessResponse
from bedtime.services.bookmarks import BookmarkService
from bedtime.services.parent_settings import ParentSettingsService

router = APIRouter()


class BookmarkCreateRequest(CamelModel):
    """Bookmark a story."""

    story_id: str = Field(..., min_length=1)


@router.get("", response_model=list[str])
async def list_bookmarks(user_id: CurrentUserId, db: DBSession) -> list[str]:
    """List the ids of the caller's bookmarked stories."""
    return await BookmarkService(db).list_story_ids(user_id)


@router.post("", response_model=SuccessResponse)
async def add_bookmark(
    request: BookmarkCreateRequest,
    user_id: CurrentUserId,
    db: DBSession,
) -> SuccessResponse:
    """Bookmark a story the caller can read. Repeating the call is harmless."""
    is_admin = await ParentSettingsService(db).is_admin(user_id)
    await BookmarkService(db).add(user_id, request.story_id, viewer_is_admin=is_admin)
    await db.commit()
    return SuccessResponse()


@router.delete("/{story_id}", response_model=SuccessResponse)
async def remove_bookmark(story_id: str, user_id: CurrentUserId, db: DBSession) -> SuccessResponse:
    """Remove a bookmark if it exists."""
    await BookmarkService(db).remove(user_id, story_id)
    await db.commit()
    return SuccessResponse()
