from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI

from sortviz.api import router as api_router
from sortviz.api.routes.sessions import registry
from sortviz.core.config.settings import settings
from sortviz.core.logging.setup import configure_logging

log = structlog.get_logger()


def create_app() -> FastAPI:
    """
    Application factory.

    This function is the single place where the FastAPI app
    is created and configured.
    """
    configure_logging(level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info(
            "app.startup",
            environment=settings.env,
            playback_driver=settings.playback_driver,
            tick_interval_ms=settings.tick_interval_ms,
        )
        yield
        # cancel every pending playback timer before the loop goes away
        registry.close_all()
        log.info("app.shutdown")

    app = FastAPI(
        title="SortViz",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(api_router, prefix="/api")

    return app


# ASGI entrypoint
app = create_app()
