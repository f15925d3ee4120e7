"""Commission gateway: lifecycle requests forwarded to the daemon.

The daemon decides which status transitions are legal (for example whether a
commission can be dispatched from where it is). This layer only validates
the create payload and relays the daemon's answers.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from starlette.responses import Response

from .daemon_client import daemon_path
from .gateway import DaemonGateway, require_fields

logger = logging.getLogger(__name__)

CREATE_FIELDS = ("projectName", "workerName", "prompt")


class CommissionGateway(DaemonGateway):
    """Maps commission operations onto the daemon's /commissions endpoints."""

    async def create(self, payload: Dict[str, Any]) -> Response:
        require_fields(payload, CREATE_FIELDS)
        logger.debug(f"Creating commission for {payload['workerName']} in {payload['projectName']}")
        return await self._forward("/commissions", method="POST", payload=payload)

    async def update(self, commission_id: str, payload: Any) -> Response:
        return await self._forward(daemon_path("commissions", commission_id), method="PUT", payload=payload)

    async def delete(self, commission_id: str) -> Response:
        return await self._forward(daemon_path("commissions", commission_id), method="DELETE")

    async def dispatch(self, commission_id: str) -> Response:
        return await self._forward(daemon_path("commissions", commission_id, "dispatch"), method="POST")


__all__ = ["CommissionGateway", "CREATE_FIELDS"]
