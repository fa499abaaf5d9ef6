"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from commentrelay.activity_store import (
    ActivityExistsError,
    ActivityNotFoundError,
    ActivityStoreError,
)
from commentrelay.api.dependencies import (
    close_activity_store,
    close_relay,
    init_activity_store,
    init_relay,
)
from commentrelay.api.models import APIResponse
from commentrelay.api.routes import activities, comments
from commentrelay.config import RelayConfig
from commentrelay.logging import setup_logging
from commentrelay.relay import CommentRelay
from commentrelay.tracker import TrackerClient

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    config: RelayConfig = (
        app.state.config if hasattr(app.state, "config") else RelayConfig.from_env()
    )
    config.validate()

    # Startup
    if app.state.configure_logging:
        setup_logging()
    tracker = TrackerClient(
        base_url=config.tracker_url,
        api_token=config.tracker_token,
        email=config.tracker_email,
        timeout=config.http_timeout,
    )
    try:
        store = init_activity_store(config.db_path)
        relay = CommentRelay.from_config(config, store, tracker)
        init_relay(relay)
        relay.start()
        logger.info(
            "Relay started against %s with %d worker(s)", config.tracker_url, config.workers
        )

        yield
        # Shutdown
        relay.stop()
    finally:
        close_relay()
        tracker.close()
        close_activity_store()


def create_app(
    config: RelayConfig | None = None, configure_logging: bool = True
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Relay settings; read from the environment at startup when omitted.
        configure_logging: Attach the rotating log file handler on startup.
    """
    app = FastAPI(
        title="Comment Relay API",
        description="Relays source activity records into tracker issue comments",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    if config is not None:
        app.state.config = config
    app.state.configure_logging = configure_logging

    # Exception handlers
    @app.exception_handler(ActivityNotFoundError)
    async def activity_not_found_handler(
        _request: Request, _exc: ActivityNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=APIResponse[None](data=None, error="Activity not found").model_dump(),
        )

    @app.exception_handler(ActivityExistsError)
    async def activity_exists_handler(
        _request: Request, _exc: ActivityExistsError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=APIResponse[None](
                data=None, error="Activity with this id already exists"
            ).model_dump(),
        )

    @app.exception_handler(ActivityStoreError)
    async def activity_store_error_handler(
        _request: Request, _exc: ActivityStoreError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=APIResponse[None](data=None, error="Internal server error").model_dump(),
        )

    # Include routers
    app.include_router(activities.router, prefix="/api/v1")
    app.include_router(comments.router, prefix="/api/v1")

    return app


# Default app instance
app = create_app()
