"""
Application entry point.

Configuration, middleware and lifecycle are delegated to the app factory.
"""

import logging

import sentry_sdk

from fashop.config.settings import get_settings
from fashop.core.app_factory import create_app
from fashop.core.shared.logger import configure_logging

settings = get_settings()
configure_logging(settings)

logger = logging.getLogger(__name__)

if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        release=f"fashop@{settings.VERSION}",
        traces_sample_rate=1.0 if settings.is_development else 0.1,
    )
    logger.info("Sentry error tracking enabled")

app = create_app()

if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting application in {settings.ENVIRONMENT} mode")
    uvicorn.run(
        "fashop.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
