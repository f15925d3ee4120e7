"""Meeting gateway: meeting requests forwarded to the daemon.

Starting a meeting, sending a message and accepting a deferred meeting each
run a live agent turn, so the daemon answers with an event stream. Those
streams are relayed byte for byte as they arrive and never inspected here.
Interrupt, defer and delete answer with a single JSON document.
"""

from __future__ import annotations

from typing import Any, Dict

from starlette.responses import Response

from .daemon_client import daemon_path
from .gateway import DaemonGateway, require_fields

CREATE_FIELDS = ("projectName", "workerName", "prompt")


class MeetingGateway(DaemonGateway):
    """Maps meeting operations onto the daemon's /meetings endpoints."""

    async def create(self, payload: Dict[str, Any]) -> Response:
        require_fields(payload, CREATE_FIELDS)
        body = {name: payload[name] for name in CREATE_FIELDS}
        return await self._forward_stream("/meetings", body)

    async def send_message(self, meeting_id: str, payload: Dict[str, Any]) -> Response:
        require_fields(payload, ("message",))
        return await self._forward_stream(
            daemon_path("meetings", meeting_id, "messages"),
            {"message": payload["message"]},
        )

    async def accept(self, meeting_id: str, payload: Any) -> Response:
        return await self._forward_stream(daemon_path("meetings", meeting_id, "accept"), payload)

    async def interrupt(self, meeting_id: str) -> Response:
        return await self._forward(daemon_path("meetings", meeting_id, "interrupt"), method="POST")

    async def defer(self, meeting_id: str, payload: Any) -> Response:
        return await self._forward(daemon_path("meetings", meeting_id, "defer"), method="POST", payload=payload)

    async def delete(self, meeting_id: str) -> Response:
        return await self._forward(daemon_path("meetings", meeting_id), method="DELETE")


__all__ = ["MeetingGateway"]
