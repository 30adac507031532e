"""Business services for Bedtime Stories.

Services take an ``AsyncSession`` and hold the rules; routers only
translate HTTP to service calls.

Services:
- moderation: story lifecycle (create, edit, submit, review, listings)
- parent_settings: PIN and reading preferences
- bookmarks: per-user story bookmarks
- admin: dashboard statistics and the operator-only admin flag
"""

from .admin import AdminFlagError, AdminService, PlatformStats, UserOverview, set_admin_flag
from .bookmarks import BookmarkError, BookmarkService, BookmarkStoryNotFoundError
from .moderation import (
    InvalidStateError,
    ReviewAction,
    StoryModerationService,
    StoryNotFoundError,
    StoryServiceError,
    StoryValidationError,
)
from .parent_settings import (
    UPDATABLE_FIELDS,
    ParentSettingsError,
    ParentSettingsService,
    SettingsNotFoundError,
    SettingsValidationError,
)

__all__ = [
    # Moderation
    "StoryModerationService",
    "ReviewAction",
    "StoryServiceError",
    "StoryNotFoundError",
    "InvalidStateError",
    "StoryValidationError",
    # Parent settings
    "ParentSettingsService",
    "UPDATABLE_FIELDS",
    "ParentSettingsError",
    "SettingsNotFoundError",
    "SettingsValidationError",
    # Bookmarks
    "BookmarkService",
    "BookmarkError",
    "BookmarkStoryNotFoundError",
    # Admin
    "AdminService",
    "AdminFlagError",
    "PlatformStats",
    "UserOverview",
    "set_admin_flag",
]
