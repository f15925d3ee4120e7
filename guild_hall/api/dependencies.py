"""Dependency providers for route handlers.

Every collaborator is built once in the application lifespan and stored on
``app.state``; the providers below hand them to routes through ``Depends``,
so tests can swap any of them by assigning a fake to ``app.state``.
"""

from __future__ import annotations

import json
from typing import Any, Dict

from fastapi import Request

from ..models.guild_member import GuildMember
from ..services.commission_gateway import CommissionGateway
from ..services.daemon_client import DaemonClient
from ..services.dashboard import DashboardAggregator
from ..services.errors import InvalidRequestError
from ..services.meeting_gateway import MeetingGateway
from ..services.session_store import SessionStore


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_daemon_client(request: Request) -> DaemonClient:
    return request.app.state.daemon_client


def get_commission_gateway(request: Request) -> CommissionGateway:
    return request.app.state.commission_gateway


def get_meeting_gateway(request: Request) -> MeetingGateway:
    return request.app.state.meeting_gateway


def get_dashboard(request: Request) -> DashboardAggregator:
    return request.app.state.dashboard


def get_roster(request: Request) -> Dict[str, GuildMember]:
    return request.app.state.roster


async def read_json_body(request: Request) -> Any:
    """Parse the request body as JSON; an empty body reads as ``{}``."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidRequestError("Invalid JSON") from e


__all__ = [
    "get_commission_gateway",
    "get_daemon_client",
    "get_dashboard",
    "get_meeting_gateway",
    "get_roster",
    "get_session_store",
    "read_json_body",
]
