"""
Routes serving the love.js player and the packaged game.
"""

from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.responses import FileResponse, PlainTextResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from typing import Callable

from lovejs_server.config.settings import PathsConfig, PlayerConfig

PLAYER_MOUNT = "/lovejs_player"

ISOLATION_HEADERS = {
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Embedder-Policy": "require-corp",
}


def add_isolation_headers(app: FastAPI) -> None:
    """Send the COOP/COEP headers the threaded love.js build needs on every response."""

    @app.middleware("http")
    async def cross_origin_isolation(request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        for header, value in ISOLATION_HEADERS.items():
            response.headers[header] = value
        return response


def mount_player(app: FastAPI, paths: PathsConfig) -> bool:
    """
    Serve the player directory read-only under /lovejs_player.

    StaticFiles fails every request when its directory is missing, so
    nothing is mounted in that case and the paths fall through to 404.
    check_assets reports the missing directory at startup.

    Returns:
        True if the directory was mounted
    """
    if not paths.player_path.is_dir():
        return False

    app.mount(
        PLAYER_MOUNT,
        StaticFiles(directory=str(paths.player_path)),
        name="lovejs_player"
    )
    return True


def create_static_routes(paths: PathsConfig, player: PlayerConfig) -> APIRouter:
    """
    Create routes for the game archive and the player entry point.

    Args:
        paths: Filesystem layout
        player: Player options

    Returns:
        Configured APIRouter
    """
    router = APIRouter()

    def game_file_response(not_found_message: str) -> Response:
        game_path = paths.game_path
        if game_path.is_file():
            return FileResponse(game_path)
        return PlainTextResponse(not_found_message, status_code=404)

    @router.get("/game.love")
    async def game_archive():
        """Serve the packaged game."""
        return game_file_response("game.love not found on server.")

    @router.get("/games/game.love")
    async def game_archive_in_games():
        """Serve the packaged game for players that look under /games/."""
        return game_file_response("game.love not found in /games/.")

    @router.get("/")
    async def player_index():
        """Redirect to the player, pointing it at the game archive."""
        if (paths.player_path / "index.html").is_file():
            return RedirectResponse(
                url=f"{PLAYER_MOUNT}/index.html?g=../game.love&v={player.love_version}",
                status_code=302
            )
        return PlainTextResponse(
            "Love.js player not found. Please ensure player files are in lovejs_player directory.",
            status_code=404
        )

    return router
