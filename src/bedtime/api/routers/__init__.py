"""API routers for different endpoint groups.

Routers:
- health: Health check and monitoring endpoints
- stories: Public feed and story authoring
- parent_settings: Parent settings and child-mode PIN check
- bookmarks: Story bookmarks
- admin: Story review and platform management
"""

from .admin import router as admin_router
from .bookmarks import router as bookmarks_router
from .health import router as health_router
from .parent_settings import router as parent_settings_router
from .stories import router as stories_router

__all__ = [
    "admin_router",
    "bookmarks_router",
    "health_router",
    "parent_settings_router",
    "stories_router",
]
