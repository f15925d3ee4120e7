"""Daemon health passthrough. Never fails: an offline daemon is a status."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...services.daemon_client import DaemonClient
from ..dependencies import get_daemon_client

router = APIRouter(prefix="/api/daemon", tags=["daemon"])


@router.get("/health")
async def daemon_health(daemon: DaemonClient = Depends(get_daemon_client)) -> Dict[str, Any]:
    return await daemon.health()
