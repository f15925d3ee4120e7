"""Application configuration helpers."""

from __future__ import annotations

from functools import lru_cache
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_HOME = Path("~/.guild-hall")
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:5173"
DEFAULT_DAEMON_TIMEOUT = 30.0
SOCKET_FILENAME = "guild-hall.sock"


class AppConfig(BaseModel):
    """Runtime configuration loaded from environment variables."""

    model_config = ConfigDict(frozen=True)

    home: Path = Field(..., description="Guild Hall home directory (GUILD_HALL_HOME)")
    sessions_dir: Path = Field(..., description="Root directory for persisted sessions")
    daemon_socket_path: Path = Field(
        ...,
        description="Unix socket the daemon listens on",
    )
    daemon_url: Optional[str] = Field(
        default=None,
        description=(
            "TCP base URL for the daemon (GUILD_HALL_DAEMON_URL). "
            "When set, the socket path is ignored"
        ),
    )
    daemon_timeout: float = Field(
        default=DEFAULT_DAEMON_TIMEOUT,
        gt=0,
        description="Timeout in seconds for non-streaming daemon calls",
    )
    config_path: Path = Field(..., description="Project registry file (config.yaml)")
    guild_members_dir: Path = Field(..., description="Directory scanned for guild-member.json manifests")
    cors_origins: list[str] = Field(
        default_factory=lambda: DEFAULT_CORS_ORIGINS.split(","),
        description="Allowed CORS origins for the presentation layer",
    )

    @field_validator(
        "home",
        "sessions_dir",
        "daemon_socket_path",
        "config_path",
        "guild_members_dir",
        mode="before",
    )
    @classmethod
    def _normalize_path(cls, value: str | Path | None) -> Path:
        if value is None or value == "":
            raise ValueError("Path setting cannot be empty")
        path = value if isinstance(value, Path) else Path(value)
        return path.expanduser().resolve()

    @field_validator("daemon_url", mode="before")
    @classmethod
    def _normalize_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        cleaned = value.strip().rstrip("/")
        return cleaned or None


def _read_env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(key, default)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Load and cache application configuration."""
    home = Path(_read_env("GUILD_HALL_HOME") or DEFAULT_HOME).expanduser()

    sessions_dir = _read_env("SESSIONS_DIR") or str(home / "sessions")
    socket_path = _read_env("GUILD_HALL_DAEMON_SOCKET") or str(home / SOCKET_FILENAME)
    daemon_url = _read_env("GUILD_HALL_DAEMON_URL")
    config_path = _read_env("GUILD_HALL_CONFIG") or str(home / "config.yaml")
    guild_members_dir = _read_env("GUILD_MEMBERS_DIR") or str(home / "guild-members")

    timeout_str = _read_env("GUILD_HALL_DAEMON_TIMEOUT", str(DEFAULT_DAEMON_TIMEOUT))
    try:
        daemon_timeout = float(timeout_str)
    except ValueError:
        daemon_timeout = DEFAULT_DAEMON_TIMEOUT
    if daemon_timeout <= 0:
        daemon_timeout = DEFAULT_DAEMON_TIMEOUT

    cors_str = _read_env("GUILD_HALL_CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    cors_origins = [origin.strip() for origin in cors_str.split(",") if origin.strip()]

    config = AppConfig(
        home=home,
        sessions_dir=sessions_dir,
        daemon_socket_path=socket_path,
        daemon_url=daemon_url,
        daemon_timeout=daemon_timeout,
        config_path=config_path,
        guild_members_dir=guild_members_dir,
        cors_origins=cors_origins,
    )
    # Session storage writes below this root; make sure it exists.
    config.sessions_dir.mkdir(parents=True, exist_ok=True)
    return config


def reload_config() -> AppConfig:
    """Clear cached config (useful for tests) and reload."""
    get_config.cache_clear()
    return get_config()


__all__ = ["AppConfig", "get_config", "reload_config", "DEFAULT_HOME", "SOCKET_FILENAME"]
