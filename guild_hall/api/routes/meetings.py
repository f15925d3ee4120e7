"""HTTP API routes for meetings.

Create, message and accept answer with the daemon's event stream; the rest
relay a single JSON document.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from ...services.meeting_gateway import MeetingGateway
from ..dependencies import get_meeting_gateway, read_json_body

router = APIRouter(prefix="/api/meetings", tags=["meetings"])


@router.post("")
async def create_meeting(
    payload: Any = Depends(read_json_body),
    gateway: MeetingGateway = Depends(get_meeting_gateway),
):
    """Start a meeting and stream the worker's first turn."""
    return await gateway.create(payload)


@router.post("/{meeting_id}/messages")
async def send_message(
    meeting_id: str,
    payload: Any = Depends(read_json_body),
    gateway: MeetingGateway = Depends(get_meeting_gateway),
):
    """Send a message and stream the worker's reply."""
    return await gateway.send_message(meeting_id, payload)


@router.post("/{meeting_id}/accept")
async def accept_meeting(
    meeting_id: str,
    payload: Any = Depends(read_json_body),
    gateway: MeetingGateway = Depends(get_meeting_gateway),
):
    """Accept a requested meeting and stream the opening turn."""
    return await gateway.accept(meeting_id, payload)


@router.post("/{meeting_id}/interrupt")
async def interrupt_meeting(
    meeting_id: str,
    gateway: MeetingGateway = Depends(get_meeting_gateway),
):
    return await gateway.interrupt(meeting_id)


@router.post("/{meeting_id}/defer")
async def defer_meeting(
    meeting_id: str,
    payload: Any = Depends(read_json_body),
    gateway: MeetingGateway = Depends(get_meeting_gateway),
):
    return await gateway.defer(meeting_id, payload)


@router.delete("/{meeting_id}")
async def delete_meeting(
    meeting_id: str,
    gateway: MeetingGateway = Depends(get_meeting_gateway),
):
    return await gateway.delete(meeting_id)
