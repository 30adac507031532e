"""FastAPI application entry point.

Main application configuration, middleware, and startup lifecycle.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from bedtime.core.config import configure_logging, get_settings
from bedtime.models.database import close_db, create_all, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    Startup:
    - Initialize database connection pool
    - Create tables when configured to (SQLite / local development)

    Shutdown:
    - Close database connections
    """
    settings = get_settings()

    logger.info("Initializing database connection...")
    init_db(
        settings.async_database_url,
        echo=settings.database_echo,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.create_tables_on_startup:
        await create_all()
        logger.info("Database tables created")
    logger.info("Database initialized")

    yield

    logger.info("Shutting down...")
    await close_db()
    logger.info("Database connections closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Bedtime Stories API",
        description="Parent-authored bedtime stories with admin review and a PIN-locked child mode",
        version=settings.app_version,
        docs_url="/api/docs" if not settings.is_production else None,
        redoc_url="/api/redoc" if not settings.is_production else None,
        openapi_url="/api/openapi.json" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add compression for responses > 1KB
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    from bedtime.api.routers import admin, bookmarks, health, parent_settings, stories

    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(stories.router, prefix="/api/stories", tags=["stories"])
    app.include_router(parent_settings.router, prefix="/api", tags=["parent-settings"])
    app.include_router(bookmarks.router, prefix="/api/bookmarks", tags=["bookmarks"])
    app.include_router(admin.router, prefix="/api/admin", tags=["admin"])

    from bedtime.api.exceptions import register_exception_handlers
    register_exception_handlers(app)

    return app


# Application instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "bedtime.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        workers=settings.workers if settings.is_production else 1,
    )
