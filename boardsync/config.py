# boardsync — configuration
# Override the service URL, database path and board geometry via boardsync.yaml,
# environment variables, or CLI args.

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

CONFIG_PATH = Path.cwd() / "boardsync.yaml"


class ConfigError(Exception):
    """Raised when configuration is invalid or unreadable."""
    pass


@dataclass
class Config:
    """Runtime configuration for the board client and the persistence service."""

    # Persistence service (client side)
    server_url: str = "http://localhost:3000/"
    request_timeout: Optional[float] = None  # None = wait indefinitely
    max_workers: int = 4

    # Persistence service (server side)
    db_path: str = "~/.local/share/boardsync/board.db"
    host: str = "127.0.0.1"
    port: int = 3000

    log_level: str = "INFO"

    # Board geometry
    card_height: float = 60.0
    container_width: float = 240.0
    container_height: float = 600.0
    container_gap: float = 16.0
    board_margin: float = 16.0
    title_height: float = 40.0
    viewport_width: float = 1920.0
    viewport_height: float = 1080.0

    def resolve(self) -> "Config":
        """Apply environment overrides and expand ~ in paths."""
        url = os.environ.get("BOARDSYNC_SERVER_URL")
        if url:
            self.server_url = url
        db = os.environ.get("BOARDSYNC_DB")
        if db:
            self.db_path = db
        if not self.server_url.endswith("/"):
            self.server_url += "/"
        self.db_path = str(Path(self.db_path).expanduser())
        return self

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """
        Load config from YAML, falling back to defaults.

        A missing default file is fine; an explicit path that is missing or
        malformed raises ConfigError.
        """
        cfg_path = Path(path) if path else CONFIG_PATH
        if not cfg_path.exists():
            if path:
                raise ConfigError(f"Config file not found: {cfg_path}")
            return cls().resolve()

        try:
            with open(cfg_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {cfg_path}: {e}")
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping in {cfg_path}, got {type(data).__name__}")

        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known}).resolve()
