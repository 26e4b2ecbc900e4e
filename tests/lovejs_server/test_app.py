"""
Tests for the application factory and startup checks.
"""

import json
import logging

import pytest
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient
from starlette.requests import Request

from lovejs_server.app import check_assets, create_app


class TestCreateApp:
    """Test cases for create_app."""

    def test_creates_saves_directory(self, test_config):
        app = create_app(test_config)

        assert test_config.paths.saves_path.is_dir()
        assert app.state.save_store.saves_dir == test_config.paths.saves_path

    def test_warns_about_missing_assets(self, test_config, caplog):
        with caplog.at_level(logging.WARNING, logger="lovejs_server.app"):
            check_assets(test_config)

        assert "index.html does not exist yet" in caplog.text
        assert "game.love does not exist yet" in caplog.text

    def test_no_warnings_when_assets_present(self, make_client, test_config, caplog):
        make_client(with_player=True, game=b"love")

        with caplog.at_level(logging.WARNING, logger="lovejs_server.app"):
            check_assets(test_config)

        assert "does not exist yet" not in caplog.text

    def test_lifespan_runs_asset_check(self, test_config, caplog):
        with caplog.at_level(logging.INFO, logger="lovejs_server.app"):
            with TestClient(create_app(test_config)) as client:
                assert client.get("/health").status_code == 200

        assert "Serving LÖVE game player from" in caplog.text

    def test_missing_player_warned_once(self, test_config, caplog):
        """Test a missing player directory is reported only by the startup check."""
        with caplog.at_level(logging.WARNING):
            with TestClient(create_app(test_config)):
                pass

        player_warnings = [
            record for record in caplog.records
            if record.levelno == logging.WARNING and "lovejs_player" in record.getMessage()
        ]
        assert len(player_warnings) == 1


class TestValidationHandler:
    """Test cases for the malformed-request handler."""

    @staticmethod
    def make_request(path: str) -> Request:
        return Request({
            "type": "http",
            "method": "GET",
            "path": path,
            "headers": [],
            "query_string": b"",
        })

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path,message", [
        ("/api/load", "Missing id in load request."),
        ("/api/save", "Missing id or data in save request."),
    ])
    async def test_message_matches_endpoint(self, test_config, path, message):
        app = create_app(test_config)
        handler = app.exception_handlers[RequestValidationError]

        response = await handler(self.make_request(path), RequestValidationError([]))

        assert response.status_code == 400
        assert json.loads(response.body) == {"success": False, "message": message}
