"""
FastAPI application for the love.js game server.

This module creates and configures the FastAPI application with the save
API, the player/game routes and the cross-origin isolation headers.
"""
from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Dict, Optional
import logging

from lovejs_server.api.routes import (
    LOAD_BAD_REQUEST_MESSAGE,
    SAVE_BAD_REQUEST_MESSAGE,
    create_routes,
    error_response,
)
from lovejs_server.api.static import add_isolation_headers, create_static_routes, mount_player
from lovejs_server.config.settings import LoveServerConfig
from lovejs_server.save_store import SaveStore

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def check_assets(config: LoveServerConfig) -> None:
    """Log where assets are served from and warn about anything missing."""
    paths = config.paths
    logger.info(f"Serving LÖVE game player from: {paths.player_path}")
    logger.info(f"Game file expected at: {paths.game_path}")
    logger.info(f"Saves stored in: {paths.saves_path}")

    if not paths.player_path.is_dir() or not (paths.player_path / "index.html").is_file():
        logger.warning(f"The directory {paths.player_path} or its index.html does not exist yet.")
    if not paths.game_path.is_file():
        logger.warning(f"The game file {paths.game_path} does not exist yet.")


def create_app(config: Optional[LoveServerConfig] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Configuration object, uses defaults if not provided

    Returns:
        Configured FastAPI application
    """
    config = config or LoveServerConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifecycle."""
        check_assets(config)
        yield
        logger.info("Shutting down love.js game server")

    app = FastAPI(
        title="love.js Game Server",
        description="Serves a love.js game and stores its save data",
        version="1.0.0",
        lifespan=lifespan
    )

    # Creates the saves directory
    store = SaveStore(config.paths.saves_path)
    app.state.config = config
    app.state.save_store = store

    if config.player.cross_origin_isolation:
        add_isolation_headers(app)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        if not request.url.path.startswith(API_PREFIX):
            return await request_validation_exception_handler(request, exc)
        logger.debug(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
        if request.url.path.startswith(f"{API_PREFIX}/load"):
            return error_response(400, LOAD_BAD_REQUEST_MESSAGE)
        return error_response(400, SAVE_BAD_REQUEST_MESSAGE)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Internal server error"}
        )

    @app.get("/health")
    async def health_check() -> Dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "service": "lovejs-server"}

    app.include_router(create_routes(store), prefix=API_PREFIX)
    app.include_router(create_static_routes(config.paths, config.player))
    mount_player(app, config.paths)

    return app
