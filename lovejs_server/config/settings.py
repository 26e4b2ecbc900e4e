"""
Configuration settings for the love.js game server.
"""
import os
from pathlib import Path
from typing import Mapping, Optional
from pydantic import BaseModel, Field


class ServerConfig(BaseModel):
    """HTTP listener configuration."""
    host: str = Field(default="0.0.0.0", description="API host")
    port: int = Field(default=3000, description="API port")
    log_level: str = Field(default="info", description="uvicorn log level")


class PathsConfig(BaseModel):
    """Filesystem layout served by the game server."""
    root: str = Field(
        default=".",
        description="Working root that relative paths resolve against"
    )
    player_directory: str = Field(
        default="lovejs_player",
        description="Directory holding the love.js player files"
    )
    game_file: str = Field(
        default="game.love",
        description="Packaged game archive"
    )
    saves_directory: str = Field(
        default="saves",
        description="Directory for save files"
    )

    def resolve(self, value: str) -> Path:
        """Resolve a configured path against the working root."""
        path = Path(value).expanduser()
        if path.is_absolute():
            return path
        return Path(self.root).expanduser() / path

    @property
    def player_path(self) -> Path:
        return self.resolve(self.player_directory)

    @property
    def game_path(self) -> Path:
        return self.resolve(self.game_file)

    @property
    def saves_path(self) -> Path:
        return self.resolve(self.saves_directory)


class PlayerConfig(BaseModel):
    """love.js player configuration."""
    love_version: str = Field(default="11.5", description="LÖVE runtime version requested from the player")
    cross_origin_isolation: bool = Field(
        default=True,
        description="Send COOP/COEP headers required by the threaded player"
    )


class LoveServerConfig(BaseModel):
    """Complete game server configuration."""
    server: ServerConfig = Field(default_factory=ServerConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    player: PlayerConfig = Field(default_factory=PlayerConfig)

    @classmethod
    def from_file(cls, path: str) -> "LoveServerConfig":
        """Load configuration from YAML file."""
        import yaml

        config_path = Path(path)
        if not config_path.exists():
            # Return default config
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f)

        return cls(**(data or {}))

    def save(self, path: str):
        """Save configuration to YAML file."""
        import yaml

        config_path = Path(path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, 'w') as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False)

    def apply_env(self, environ: Optional[Mapping[str, str]] = None) -> "LoveServerConfig":
        """
        Apply environment overrides.

        PORT overrides the listen port and LOVEJS_SERVER_ROOT the working root.

        Args:
            environ: Mapping to read from, defaults to os.environ

        Returns:
            self, for chaining
        """
        environ = os.environ if environ is None else environ

        port = environ.get("PORT")
        if port:
            self.server.port = int(port)

        root = environ.get("LOVEJS_SERVER_ROOT")
        if root:
            self.paths.root = root

        return self
