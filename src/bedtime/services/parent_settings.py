"""Parent settings service.

Stores child-mode preferences and the PIN hash, and checks PINs for the
child-mode exit gate. Only the fields in ``UPDATABLE_FIELDS`` can be set
through this service; the admin flag is managed in
``bedtime.services.admin``.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from bedtime.core.security import hash_pin, is_valid_pin, verify_pin
from bedtime.models.parent_settings import (
    MAX_READING_TIME,
    MIN_READING_TIME,
    ParentSettings,
    Theme,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset(
    {"pin", "reading_time_limit", "fullscreen_lock_enabled", "theme"}
)


class ParentSettingsError(Exception):
    """Base exception for parent settings errors."""
    pass


class SettingsNotFoundError(ParentSettingsError):
    """The caller has not saved settings yet."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__("Settings not found")


class SettingsValidationError(ParentSettingsError):
    """Settings payload is malformed."""
    pass


def _validate(values: dict[str, Any]) -> None:
    if "pin" in values and not is_valid_pin(values["pin"]):
        raise SettingsValidationError("PIN must be exactly 4 digits")

    if "reading_time_limit" in values:
        limit = values["reading_time_limit"]
        if (
            isinstance(limit, bool)
            or not isinstance(limit, int)
            or not MIN_READING_TIME <= limit <= MAX_READING_TIME
        ):
            raise SettingsValidationError(
                f"Reading time limit must be between {MIN_READING_TIME} "
                f"and {MAX_READING_TIME} minutes"
            )

    if "fullscreen_lock_enabled" in values and not isinstance(
        values["fullscreen_lock_enabled"], bool
    ):
        raise SettingsValidationError("fullscreenLockEnabled must be a boolean")

    if "theme" in values:
        try:
            Theme(values["theme"])
        except ValueError:
            raise SettingsValidationError("Theme must be 'day' or 'night'") from None


class ParentSettingsService:
    """Service for reading and saving parent settings."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_settings(self, user_id: str) -> ParentSettings:
        """Get a user's settings.

        Raises:
            SettingsNotFoundError: If the user has no settings row
        """
        settings = await self.db.get(ParentSettings, user_id)
        if settings is None:
            raise SettingsNotFoundError(user_id)
        return settings

    async def is_admin(self, user_id: str) -> bool:
        """Resolve the durable admin flag for a user."""
        settings = await self.db.get(ParentSettings, user_id)
        return settings is not None and settings.is_admin

    async def save_settings(self, user_id: str, payload: dict[str, Any]) -> ParentSettings:
        """Create or update a user's settings from an untrusted payload.

        Keys outside ``UPDATABLE_FIELDS`` are dropped before anything is
        written, so the payload cannot touch ``is_admin`` or ``pin_hash``.
        A new row requires every updatable field; an update may omit any
        of them, including the PIN.

        Raises:
            SettingsValidationError: If a value is malformed or required fields are missing
        """
        values = {
            key: value
            for key, value in payload.items()
            if key in UPDATABLE_FIELDS and value is not None
        }
        _validate(values)

        settings = await self.db.get(ParentSettings, user_id)
        if settings is None:
            missing = sorted(UPDATABLE_FIELDS - values.keys())
            if missing:
                raise SettingsValidationError(
                    f"Missing required fields: {', '.join(missing)}"
                )
            settings = ParentSettings(user_id=user_id, is_admin=False)
            self.db.add(settings)
            logger.info(f"Parent settings created for {user_id}")
        else:
            logger.info(f"Parent settings updated for {user_id}")

        if "pin" in values:
            settings.pin_hash = hash_pin(values["pin"])
        if "reading_time_limit" in values:
            settings.reading_time_limit = values["reading_time_limit"]
        if "fullscreen_lock_enabled" in values:
            settings.fullscreen_lock_enabled = values["fullscreen_lock_enabled"]
        if "theme" in values:
            settings.theme = Theme(values["theme"]).value

        await self.db.flush()
        return settings

    async def check_pin(self, user_id: str, pin: Any) -> bool:
        """Verify a PIN against the user's stored hash.

        Raises:
            SettingsValidationError: If the PIN is not four digits
            SettingsNotFoundError: If the user has no settings row
        """
        if not is_valid_pin(pin):
            raise SettingsValidationError("Invalid PIN format")
        settings = await self.get_settings(user_id)
        valid = verify_pin(pin, settings.pin_hash)
        if not valid:
            logger.info(f"PIN check failed for {user_id}")
        return valid
