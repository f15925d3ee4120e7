"""HTTP API route handlers."""

from . import commissions, daemon, dashboard, meetings, roster, sessions

__all__ = ["commissions", "daemon", "dashboard", "meetings", "roster", "sessions"]
