"""Parent settings and child-mode PIN endpoints."""

from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from bedtime.api.deps import CurrentUserId, DBSession
from bedtime.api.schemas import CamelModel
from bedtime.models.parent_settings import MAX_READING_TIME, MIN_READING_TIME, ParentSettings, Theme
from bedtime.services.parent_settings import (
    ParentSettingsService,
    SettingsNotFoundError,
    SettingsValidationError,
)

router = APIRouter()


# =============================================================================
# Schemas
# =============================================================================


class ParentSettingsRequest(CamelModel):
    """Create or update parent settings.

    Only these fields are accepted; anything else in the body, such as
    ``isAdmin``, is discarded.
    """

    pin: str | None = Field(None, pattern=r"^[0-9]{4}$")
    reading_time_limit: int | None = Field(None, ge=MIN_READING_TIME, le=MAX_READING_TIME)
    fullscreen_lock_enabled: bool | None = None
    theme: Theme | None = None


class ParentSettingsResponse(CamelModel):
    """Parent settings as returned to the owner. The PIN hash is never sent."""

    user_id: str
    reading_time_limit: int
    fullscreen_lock_enabled: bool
    theme: Theme
    is_admin: bool
    has_pin: bool


class VerifyPinRequest(BaseModel):
    """PIN check for leaving child mode."""

    pin: Any = None


class VerifyPinResponse(BaseModel):
    valid: bool


def _to_response(settings: ParentSettings) -> ParentSettingsResponse:
    return ParentSettingsResponse(
        user_id=settings.user_id,
        reading_time_limit=settings.reading_time_limit,
        fullscreen_lock_enabled=settings.fullscreen_lock_enabled,
        theme=Theme(settings.theme),
        is_admin=settings.is_admin,
        has_pin=bool(settings.pin_hash),
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.get("/parent-settings", response_model=ParentSettingsResponse)
async def get_parent_settings(user_id: CurrentUserId, db: DBSession) -> ParentSettingsResponse:
    """Get the caller's settings."""
    settings = await ParentSettingsService(db).get_settings(user_id)
    return _to_response(settings)


@router.post("/parent-settings", response_model=ParentSettingsResponse)
async def save_parent_settings(
    request: ParentSettingsRequest,
    user_id: CurrentUserId,
    db: DBSession,
) -> ParentSettingsResponse:
    """Create or update the caller's settings.

    The PIN is required the first time and optional afterwards.
    """
    payload = request.model_dump(exclude_none=True)
    if "theme" in payload:
        payload["theme"] = payload["theme"].value
    settings = await ParentSettingsService(db).save_settings(user_id, payload)
    await db.commit()
    return _to_response(settings)


@router.post("/verify-pin", response_model=VerifyPinResponse)
async def verify_pin(
    request: VerifyPinRequest,
    user_id: CurrentUserId,
    db: DBSession,
) -> VerifyPinResponse | JSONResponse:
    """Check the child-mode exit PIN."""
    # Failures keep this endpoint's {valid, error} body instead of the shared error shape
    try:
        valid = await ParentSettingsService(db).check_pin(user_id, request.pin)
    except SettingsValidationError:
        return JSONResponse(
            status_code=400,
            content={"valid": False, "error": "Invalid PIN format"},
        )
    except SettingsNotFoundError:
        return JSONResponse(
            status_code=404,
            content={"valid": False, "error": "Settings not found"},
        )
    return VerifyPinResponse(valid=valid)
