"""Database models for Bedtime Stories.

SQLAlchemy models for:
- Stories and their moderation state
- Parent settings (PIN, reading preferences, admin flag)
- Bookmarks

All models use async SQLAlchemy (asyncpg for PostgreSQL, aiosqlite for SQLite).
"""

from .bookmark import Bookmark
from .database import (
    Base,
    close_db,
    create_all,
    get_engine,
    get_session,
    init_db,
    session_scope,
)
from .parent_settings import MAX_READING_TIME, MIN_READING_TIME, ParentSettings, Theme
from .story import Story, StoryStatus

__all__ = [
    # Database
    "Base",
    "init_db",
    "get_session",
    "session_scope",
    "get_engine",
    "create_all",
    "close_db",
    # Story models
    "Story",
    "StoryStatus",
    # Settings
    "ParentSettings",
    "Theme",
    "MIN_READING_TIME",
    "MAX_READING_TIME",
    # Bookmarks
    "Bookmark",
]
