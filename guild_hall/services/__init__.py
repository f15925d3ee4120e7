"""Service layer: session persistence, daemon access and read-only artifact views."""

from .config import AppConfig, get_config, reload_config
from .daemon_client import DaemonClient, DaemonUnavailable
from .errors import GuildHallError
from .session_storage import FileSessionStorage, SessionStorage
from .session_store import SessionStore

__all__ = [
    "AppConfig",
    "get_config",
    "reload_config",
    "DaemonClient",
    "DaemonUnavailable",
    "GuildHallError",
    "FileSessionStorage",
    "SessionStorage",
    "SessionStore",
]
