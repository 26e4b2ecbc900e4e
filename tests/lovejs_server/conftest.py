"""
Shared pytest fixtures for lovejs-server tests.
"""
import pytest
from pathlib import Path
from fastapi.testclient import TestClient

from lovejs_server.app import create_app
from lovejs_server.config.settings import LoveServerConfig
from lovejs_server.save_store import SaveStore


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration rooted in a temp directory."""
    return create_test_config(tmp_path)


@pytest.fixture
def save_store(tmp_path):
    """Create a SaveStore writing to a temp saves directory."""
    return SaveStore(tmp_path / "saves")


@pytest.fixture
def client(test_config):
    """Create test client for the full application."""
    return TestClient(create_app(test_config))


def create_test_config(base_path: Path, **overrides) -> LoveServerConfig:
    """
    Create a test configuration with custom overrides.

    Args:
        base_path: Root for the player, game and saves paths
        **overrides: Additional config sections to merge in

    Returns:
        LoveServerConfig instance
    """
    config_dict = {
        "server": {
            "host": "127.0.0.1",
            "port": 0
        },
        "paths": {
            "root": str(base_path)
        }
    }

    # Apply overrides
    for key, value in overrides.items():
        if key in config_dict:
            config_dict[key].update(value)
        else:
            config_dict[key] = value

    return LoveServerConfig(**config_dict)


@pytest.fixture
def make_client(tmp_path):
    """
    Factory for clients over a temp root with optional player/game files.

    Args (of the returned callable):
        with_player: Create lovejs_player/index.html and player.js
        game: Bytes to write to game.love, or None to leave it missing
        **overrides: Config section overrides
    """
    def _make(with_player: bool = False, game: bytes = None, **overrides) -> TestClient:
        if with_player:
            player_dir = tmp_path / "lovejs_player"
            player_dir.mkdir(exist_ok=True)
            (player_dir / "index.html").write_text("<html><script src='player.js'></script></html>")
            (player_dir / "player.js").write_text("// love.js player")
        if game is not None:
            (tmp_path / "game.love").write_bytes(game)
        return TestClient(create_app(create_test_config(tmp_path, **overrides)))

    return _make
