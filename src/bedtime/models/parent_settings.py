"""Parent settings model.

One row per user with the child-mode PIN hash, reading preferences and
the server-controlled admin flag.
"""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Boolean, CheckConstraint, Integer, String, false
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base

MIN_READING_TIME = 10
MAX_READING_TIME = 60


class Theme(str, Enum):
    """Reader colour theme."""

    DAY = "day"
    NIGHT = "night"


class ParentSettings(Base):
    """Parent settings model keyed by user id.

    ``is_admin`` is never written from request payloads; see
    ``bedtime.services.admin.set_admin_flag``.
    """

    __tablename__ = "parent_settings"
    __table_args__ = (
        CheckConstraint(
            f"reading_time_limit BETWEEN {MIN_READING_TIME} AND {MAX_READING_TIME}",
            name="ck_parent_settings_reading_time_limit",
        ),
        CheckConstraint("theme IN ('day', 'night')", name="ck_parent_settings_theme"),
    )

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    pin_hash: Mapped[str] = mapped_column(String(255))
    reading_time_limit: Mapped[int] = mapped_column(Integer)
    fullscreen_lock_enabled: Mapped[bool] = mapped_column(Boolean)
    theme: Mapped[str] = mapped_column(String(10), default=Theme.DAY.value)
    is_admin: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        server_default=false(),
    )

    def __repr__(self) -> str:
        return f"<ParentSettings(user_id='{self.user_id}', is_admin={self.is_admin})>"
