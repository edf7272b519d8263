"""
Application lifespan handler.
Manages startup and shutdown events for the FastAPI application.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from menu_api.models import Base
from shared.config.logging import menu_api_logger as logger, setup_logging
from shared.config.settings import settings
from shared.infrastructure.db import engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and shutdown.
    """
    setup_logging()

    locale_errors = settings.validate_locales()
    if locale_errors:
        for error in locale_errors:
            logger.error("Configuration error", error=error)
        raise RuntimeError(f"Locale configuration errors: {'; '.join(locale_errors)}")

    logger.info(
        "Starting Menu API",
        port=settings.api_port,
        env=settings.environment,
        locales=settings.supported_locale_list,
    )

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    yield

    logger.info("Shutting down Menu API")
    engine.dispose()
