"""
Application lifecycle management using the FastAPI lifespan pattern.

Startup checks the database and reports how notifications will be
delivered; shutdown releases the connection pool.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from fashop.config.settings import Settings, get_settings
from fashop.database import check_database_connection, dispose_engine

logger = logging.getLogger(__name__)


class LifecycleManager:
    """Handles startup initialization and graceful shutdown."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._initialized = False

    async def startup(self) -> None:
        if self._initialized:
            logger.warning("Lifecycle already initialized, skipping startup")
            return

        logger.info("Starting application lifecycle...")
        self._verify_configurations()

        if await check_database_connection():
            logger.info("Database connectivity verified")
        else:
            logger.error("Database is not reachable; requests touching it will fail")

        self._initialized = True
        logger.info("Application lifecycle startup completed")

    async def shutdown(self) -> None:
        if not self._initialized:
            logger.warning("Lifecycle not initialized, skipping shutdown")
            return

        logger.info("Stopping application lifecycle...")
        await dispose_engine()
        self._initialized = False
        logger.info("Application lifecycle shutdown completed")

    def _verify_configurations(self) -> None:
        """Warn about configuration that changes runtime behaviour."""
        settings = self._settings
        if not settings.SMS_ENABLED:
            logger.warning("SMS_ENABLED=false - suppliers will not be notified")
        elif not settings.sms_configured:
            logger.warning("SMS_API_URL/SMS_API_KEY not configured - SMS delivery is simulated")

        if not settings.ADMIN_API_TOKEN:
            if settings.is_development:
                logger.warning("ADMIN_API_TOKEN not configured - admin routes are open (development)")
            else:
                logger.error("ADMIN_API_TOKEN not configured - admin routes are closed")


_lifecycle_manager: LifecycleManager | None = None


def get_lifecycle_manager() -> LifecycleManager:
    """Get or create the global lifecycle manager instance."""
    global _lifecycle_manager
    if _lifecycle_manager is None:
        _lifecycle_manager = LifecycleManager()
    return _lifecycle_manager


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Usage:
        app = FastAPI(lifespan=lifespan)
    """
    lifecycle = get_lifecycle_manager()
    await lifecycle.startup()
    yield
    await lifecycle.shutdown()
