"""Application lifecycle management.

This module handles application startup and shutdown events, ensuring the
shared confirmation service is constructed once and released on shutdown.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.core.config.settings import settings
from src.core.logging import logger
from src.infrastructure.dependency_injection.confirmation_dependencies import (
    build_confirmation_service,
    build_notifier,
)


def create_lifespan_manager():
    """Create the application lifespan manager.

    Returns:
        AsyncContextManager: The lifespan manager for the FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager that handles startup and shutdown events.

        Builds the confirmation service (token store and rate limiter) and the
        notifier, and attaches them to ``app.state`` for request handlers.

        Args:
            app (FastAPI): The FastAPI application instance
        """
        # Startup
        app.state.confirmation_service = build_confirmation_service()
        app.state.confirmation_notifier = build_notifier()
        logger.info("application_startup", env=settings.APP_ENV, version=settings.VERSION)

        yield

        # Shutdown
        stats = app.state.confirmation_service.get_stats()
        logger.info(
            "application_shutdown",
            env=settings.APP_ENV,
            pending_tokens=stats.total_tokens,
            tracked_windows=stats.tracked_windows,
        )
        del app.state.confirmation_service
        del app.state.confirmation_notifier

    return lifespan
