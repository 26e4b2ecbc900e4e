"""
API routes for saving and loading game progress.

Provides the two endpoints the in-browser game talks to:
POST /api/save and GET /api/load.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
import logging

from lovejs_server.save_store import (
    BadRequestError,
    LoadStatus,
    SaveStore,
    StorageError,
    sanitize_id,
)

logger = logging.getLogger(__name__)

SAVE_BAD_REQUEST_MESSAGE = "Missing id or data in save request."
LOAD_BAD_REQUEST_MESSAGE = "Missing id in load request."


class SaveRequest(BaseModel):
    """Request model for a save."""
    id: Optional[str] = Field(default=None, description="Save slot identifier (e.g., 'run', 'profile1_meta')")
    data: Optional[str] = Field(default=None, description="Serialized game state, stored as-is")


class ApiResponse(BaseModel):
    """Envelope shared by every API response."""
    success: bool
    message: str


class LoadResponse(ApiResponse):
    """Response model for a load."""
    data: Optional[Dict[str, Any]] = None


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build a failure envelope with the given status code."""
    return JSONResponse(
        status_code=status_code,
        content=ApiResponse(success=False, message=message).model_dump()
    )


def create_routes(store: SaveStore) -> APIRouter:
    """
    Create API routes bound to a save store.

    Args:
        store: SaveStore instance

    Returns:
        Configured APIRouter
    """
    router = APIRouter()

    @router.post("/save", response_model=ApiResponse)
    async def save_game(request: SaveRequest):
        """Save game data for an id, replacing any previous save."""
        # data may be "" but must be present
        if not request.id or "data" not in request.model_fields_set:
            return error_response(400, SAVE_BAD_REQUEST_MESSAGE)

        try:
            record = await store.save_async(request.id, request.data)
        except BadRequestError:
            return error_response(400, SAVE_BAD_REQUEST_MESSAGE)
        except StorageError:
            safe_id = sanitize_id(request.id)
            return error_response(500, f"Failed to save game for id '{safe_id}'.")

        return ApiResponse(
            success=True,
            message=f"Game for id '{record.id}' saved successfully."
        )

    @router.get("/load", response_model=LoadResponse)
    async def load_game(id: Optional[str] = None):
        """Load game data for an id. A missing save is not an error."""
        if not id:
            return error_response(400, LOAD_BAD_REQUEST_MESSAGE)

        try:
            result = await store.load_async(id)
        except BadRequestError:
            return error_response(400, LOAD_BAD_REQUEST_MESSAGE)
        except StorageError:
            return error_response(500, f"Failed to load game for id '{sanitize_id(id)}'.")

        if result.status == LoadStatus.MISSING:
            return LoadResponse(
                success=True,
                data=None,
                message=f"No save file found for id '{result.save_id}'."
            )

        if result.status == LoadStatus.CORRUPT:
            return error_response(500, f"Failed to parse save data for id '{result.save_id}'.")

        return LoadResponse(
            success=True,
            data=result.record.to_dict(),
            message=f"Game for id '{result.save_id}' loaded successfully."
        )

    return router
