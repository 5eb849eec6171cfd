"""FastAPI application for the chat event relay."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config import get_settings
from app.core.app_state import state
from app.infra.logging_config import LoggingConfig, get_logger
from app.routers import system, webhooks

logger = get_logger("main")


def create_app(testing: bool = False) -> FastAPI:
    """
    Build the application.

    With ``testing=True`` the chat client is not created; tests inject one
    through ``app.dependency_overrides``.
    """
    settings = get_settings()
    LoggingConfig(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting %s (%s)", settings.app_name, settings.environment)
        if not testing:
            await state.start(settings)
        yield
        logger.info("Shutting down %s", settings.app_name)
        await state.stop()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.include_router(webhooks.router)
    app.include_router(system.router)
    return app


app = create_app()
