"""Client for the Guild Hall daemon.

The daemon serves HTTP over a Unix domain socket (or, when configured, a TCP
address). Every call returns either the daemon's response, untouched, or a
``DaemonUnavailable`` value when the daemon could not be reached. Callers check
for that value explicitly instead of catching transport exceptions:

    result = await client.call("/commissions", method="POST", json=payload)
    if isinstance(result, DaemonUnavailable):
        ...  # 503
"""

from __future__ import annotations

import errno
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Literal, Optional, Union
from urllib.parse import quote

import anyio
import httpx

from .config import AppConfig

logger = logging.getLogger(__name__)

UnavailableReason = Literal["daemon_offline", "socket_not_found", "request_failed"]

# Host used in request URLs when talking over the socket; never resolved.
SOCKET_BASE_URL = "http://guild-hall-daemon"
CONNECT_TIMEOUT = 5.0


@dataclass(frozen=True)
class DaemonUnavailable:
    """The daemon could not be reached; no response was received."""

    reason: UnavailableReason
    message: str


class DaemonStream:
    """An in-flight streaming response from the daemon.

    Iterating yields raw byte chunks in the order the daemon sent them, as
    they arrive. The upstream connection is released when iteration finishes,
    fails or is cancelled, or when ``aclose()`` is called.
    """

    def __init__(self, response: httpx.Response) -> None:
        self._response = response
        self._closed = False

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self._response.headers

    @property
    def is_error(self) -> bool:
        return self._response.status_code >= 400

    async def __aiter__(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._response.aiter_raw():
                yield chunk
        finally:
            await self.aclose()

    async def read(self) -> bytes:
        """Read the remaining body at once. Meant for error responses only."""
        try:
            return await self._response.aread()
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        # Runs during cancellation too; the close itself must not be cancelled.
        with anyio.CancelScope(shield=True):
            await self._response.aclose()


def _classify(exc: Exception) -> DaemonUnavailable:
    """Map a transport failure onto a DaemonUnavailable reason."""
    cause: Optional[BaseException] = exc
    seen = set()
    while cause is not None and id(cause) not in seen:
        seen.add(id(cause))
        if isinstance(cause, FileNotFoundError) or getattr(cause, "errno", None) == errno.ENOENT:
            return DaemonUnavailable("socket_not_found", "Daemon socket not found")
        if isinstance(cause, ConnectionRefusedError) or getattr(cause, "errno", None) == errno.ECONNREFUSED:
            return DaemonUnavailable("daemon_offline", "Daemon is not running")
        cause = cause.__cause__ or cause.__context__

    if isinstance(exc, httpx.ConnectError):
        return DaemonUnavailable("daemon_offline", "Daemon is not running")
    return DaemonUnavailable("request_failed", str(exc) or exc.__class__.__name__)


def daemon_path(*segments: str) -> str:
    """Build a daemon path, percent-encoding each caller-supplied segment."""
    return "/" + "/".join(quote(segment, safe="") for segment in segments)


class DaemonClient:
    """HTTP access to the daemon with a single "unavailable" failure value."""

    def __init__(
        self,
        socket_path: Optional[Path] = None,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Args:
            socket_path: Unix socket of the daemon. Ignored when base_url or
                transport is given.
            base_url: TCP base URL of the daemon.
            timeout: Timeout for non-streaming calls, in seconds.
            transport: Explicit httpx transport (tests use httpx.MockTransport).
        """
        if transport is None and base_url is None:
            if socket_path is None:
                raise ValueError("DaemonClient needs a socket_path, base_url or transport")
            transport = httpx.AsyncHTTPTransport(uds=str(socket_path))

        self.socket_path = socket_path
        self.base_url = base_url or SOCKET_BASE_URL
        self._call_timeout = httpx.Timeout(timeout, connect=CONNECT_TIMEOUT)
        # Agent turns can stay silent for a long time; only bound the connect.
        self._stream_timeout = httpx.Timeout(None, connect=CONNECT_TIMEOUT)
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            transport=transport,
            timeout=self._call_timeout,
        )

    @classmethod
    def from_config(cls, config: AppConfig) -> "DaemonClient":
        if config.daemon_url:
            return cls(base_url=config.daemon_url, timeout=config.daemon_timeout)
        return cls(socket_path=config.daemon_socket_path, timeout=config.daemon_timeout)

    async def call(
        self,
        path: str,
        method: str = "GET",
        json: Optional[Any] = None,
    ) -> Union[httpx.Response, DaemonUnavailable]:
        """
        Send a request and return the daemon's response, whatever its status.

        Returns DaemonUnavailable if no response could be obtained.
        """
        headers = {"Content-Type": "application/json"} if json is not None else {}
        try:
            response = await self._client.request(method, path, json=json, headers=headers)
        except httpx.TransportError as e:
            unavailable = _classify(e)
            logger.debug(f"Daemon {method} {path} failed: {unavailable.reason} ({e!r})")
            return unavailable
        logger.debug(f"Daemon {method} {path} -> {response.status_code}")
        return response

    async def stream(
        self,
        path: str,
        json: Optional[Any] = None,
    ) -> Union[DaemonStream, DaemonUnavailable]:
        """
        POST to an event-stream endpoint.

        Resolves once the daemon has sent its response headers, so an offline
        daemon is reported before any stream is handed to the caller. The body
        is not read here.
        """
        headers = {"Accept": "text/event-stream"}
        if json is not None:
            headers["Content-Type"] = "application/json"
        request = self._client.build_request(
            "POST",
            path,
            json=json,
            headers=headers,
            timeout=self._stream_timeout,
        )
        try:
            response = await self._client.send(request, stream=True)
        except httpx.TransportError as e:
            unavailable = _classify(e)
            logger.debug(f"Daemon stream {path} failed: {unavailable.reason} ({e!r})")
            return unavailable
        logger.debug(f"Daemon stream {path} engaged with status {response.status_code}")
        return DaemonStream(response)

    async def health(self) -> Dict[str, Any]:
        """The daemon's health document, or ``{"status": "offline"}``."""
        result = await self.call("/health")
        if isinstance(result, DaemonUnavailable):
            return {"status": "offline"}
        try:
            data = result.json()
        except ValueError:
            logger.warning("Daemon health endpoint returned a non-JSON body")
            return {"status": "offline"}
        if not isinstance(data, dict):
            return {"status": "offline"}
        return data

    async def close(self) -> None:
        await self._client.aclose()


__all__ = [
    "DaemonClient",
    "DaemonStream",
    "DaemonUnavailable",
    "daemon_path",
]
