"""Shared plumbing for the commission and meeting gateways.

Gateways validate inbound payloads, forward them to the daemon and relay the
daemon's answer. The one response they synthesize themselves is the 503 sent
when the daemon is unreachable.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

import httpx
from starlette.responses import JSONResponse, Response, StreamingResponse
from starlette.types import Receive, Scope, Send

from .daemon_client import DaemonClient, DaemonStream, DaemonUnavailable
from .errors import InvalidRequestError

logger = logging.getLogger(__name__)

DAEMON_OFFLINE_MESSAGE = "Daemon is not running"

EVENT_STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


class DaemonEventStreamResponse(StreamingResponse):
    """Relays a daemon event stream chunk by chunk.

    The upstream stream is closed however the response ends, including when
    the client disconnects midway.
    """

    def __init__(self, stream: DaemonStream) -> None:
        super().__init__(
            stream,
            status_code=stream.status_code,
            media_type="text/event-stream",
            headers=EVENT_STREAM_HEADERS,
        )
        self.daemon_stream = stream

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            await self.daemon_stream.aclose()


def daemon_offline_response() -> JSONResponse:
    return JSONResponse({"error": DAEMON_OFFLINE_MESSAGE}, status_code=503)


def require_fields(payload: Any, fields: Iterable[str]) -> Dict[str, Any]:
    """
    Check that ``payload`` is an object carrying each of ``fields`` as a non-empty string.

    Raises InvalidRequestError naming every required field when any is missing.
    """
    fields = list(fields)
    if not isinstance(payload, dict):
        raise InvalidRequestError(f"Missing required fields: {', '.join(fields)}")
    missing = [name for name in fields if not isinstance(payload.get(name), str) or not payload[name]]
    if missing:
        label = "field" if len(fields) == 1 else "fields"
        raise InvalidRequestError(f"Missing required {label}: {', '.join(fields)}")
    return payload


class DaemonGateway:
    """Base class: forwarding helpers around an injected DaemonClient."""

    def __init__(self, daemon: DaemonClient) -> None:
        self.daemon = daemon

    async def _forward(
        self,
        path: str,
        method: str = "GET",
        payload: Optional[Any] = None,
    ) -> Response:
        result = await self.daemon.call(path, method=method, json=payload)
        if isinstance(result, DaemonUnavailable):
            logger.info(f"Daemon unavailable for {method} {path}: {result.reason}")
            return daemon_offline_response()
        return self._relay(result)

    async def _forward_stream(self, path: str, payload: Optional[Any] = None) -> Response:
        result = await self.daemon.stream(path, json=payload)
        if isinstance(result, DaemonUnavailable):
            logger.info(f"Daemon unavailable for stream {path}: {result.reason}")
            return daemon_offline_response()
        if result.is_error:
            # An error answer is a plain document, not an event stream.
            body = await result.read()
            return Response(
                content=body,
                status_code=result.status_code,
                media_type=result.headers.get("content-type"),
            )
        return DaemonEventStreamResponse(result)

    @staticmethod
    def _relay(response: httpx.Response) -> Response:
        """Pass the daemon's status code and body through unchanged."""
        return Response(
            content=response.content,
            status_code=response.status_code,
            media_type=response.headers.get("content-type"),
        )


__all__ = [
    "DaemonGateway",
    "DaemonEventStreamResponse",
    "DAEMON_OFFLINE_MESSAGE",
    "EVENT_STREAM_HEADERS",
    "daemon_offline_response",
    "require_fields",
]
