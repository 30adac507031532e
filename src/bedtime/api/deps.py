"""FastAPI dependencies for dependency injection.

Provides reusable dependencies for authentication, admin authorization
and database sessions.
"""

import logging
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from bedtime.api.exceptions import ForbiddenError, UnauthorizedError
from bedtime.core.security import decode_access_token
from bedtime.models.database import get_session
from bedtime.services.parent_settings import ParentSettingsService

logger = logging.getLogger(__name__)

# Security scheme
security = HTTPBearer(auto_error=False)

# Database session dependency
DBSession = Annotated[AsyncSession, Depends(get_session)]


def _caller_id_from_token(token: str) -> str:
    payload = decode_access_token(token)
    if payload is None:
        raise UnauthorizedError("Invalid or expired token")

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise UnauthorizedError("Invalid token payload")
    return user_id


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str:
    """Resolve the caller id from the bearer token.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        The caller id (``sub`` claim)

    Raises:
        UnauthorizedError: If the token is missing or invalid
    """
    if credentials is None:
        raise UnauthorizedError("Unauthorized")
    return _caller_id_from_token(credentials.credentials)


async def get_current_user_id_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str | None:
    """Get the caller id if a valid token is present, None otherwise."""
    if credentials is None:
        return None
    payload = decode_access_token(credentials.credentials)
    if payload is None:
        return None
    user_id = payload.get("sub")
    return user_id if isinstance(user_id, str) and user_id else None


async def require_admin(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: DBSession,
) -> str:
    """Require the caller to hold the persisted admin flag.

    Args:
        user_id: Authenticated caller id
        db: Database session

    Returns:
        The admin's caller id

    Raises:
        ForbiddenError: If the caller is not an admin
    """
    if not await ParentSettingsService(db).is_admin(user_id):
        logger.warning(f"Admin access refused for {user_id}")
        raise ForbiddenError("Admin access required")
    return user_id


# Type aliases for dependency injection
CurrentUserId = Annotated[str, Depends(get_current_user_id)]
OptionalUserId = Annotated[str | None, Depends(get_current_user_id_optional)]
AdminUserId = Annotated[str, Depends(require_admin)]
