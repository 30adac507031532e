"""Exception handlers for Bedtime Stories API."""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from bedtime.services.bookmarks import BookmarkError, BookmarkStoryNotFoundError
from bedtime.services.moderation import (
    InvalidStateError as StoryStateError,
    StoryNotFoundError,
    StoryServiceError,
)
from bedtime.services.parent_settings import (
    ParentSettingsError,
    SettingsNotFoundError,
)

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base API error."""

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.headers = headers
        super().__init__(message)


class BadRequestError(APIError):
    """Malformed input."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, status_code=400, details=details)


class NotFoundError(APIError):
    """Resource not found."""

    def __init__(self, resource: str, resource_id: str | None = None):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} '{resource_id}' not found"
        super().__init__(message, status_code=404)


class UnauthorizedError(APIError):
    """Authentication required."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            message,
            status_code=401,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenError(APIError):
    """Access denied."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(message, status_code=403)


class InvalidStateError(APIError):
    """Workflow action attempted from the wrong state."""

    def __init__(self, message: str, status: str, expected: str):
        super().__init__(
            message,
            status_code=400,
            details={"status": status, "expected": expected},
        )


def to_api_error(exc: Exception) -> APIError:
    """Map a service-layer exception to its HTTP error."""
    if isinstance(exc, StoryStateError):
        return InvalidStateError(str(exc), exc.current.value, exc.expected.value)
    if isinstance(exc, StoryNotFoundError):
        return NotFoundError("Story", exc.story_id)
    if isinstance(exc, BookmarkStoryNotFoundError):
        return NotFoundError("Story", exc.story_id)
    if isinstance(exc, SettingsNotFoundError):
        return NotFoundError("Settings")
    # Validation failures and anything unclassified
    return BadRequestError(str(exc))


def _error_response(exc: APIError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.message,
            "details": exc.details,
        },
        headers=exc.headers,
    )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return _error_response(exc)


async def service_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle exceptions raised by the service layer."""
    return _error_response(to_api_error(exc))


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request payload validation errors."""
    return JSONResponse(
        status_code=400,
        content={
            "error": "Validation error",
            "details": {"errors": jsonable_encoder(exc.errors())},
        },
    )


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle persistence failures without leaking internals."""
    logger.exception(f"Database error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "details": {},
        },
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception("Unexpected error", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "details": {},
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers."""
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(StoryServiceError, service_error_handler)
    app.add_exception_handler(ParentSettingsError, service_error_handler)
    app.add_exception_handler(BookmarkError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)
