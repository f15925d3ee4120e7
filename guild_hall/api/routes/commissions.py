"""HTTP API routes for commissions. Bodies and statuses come from the daemon."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from ...services.commission_gateway import CommissionGateway
from ..dependencies import get_commission_gateway, read_json_body

router = APIRouter(prefix="/api/commissions", tags=["commissions"])


@router.post("")
async def create_commission(
    payload: Any = Depends(read_json_body),
    gateway: CommissionGateway = Depends(get_commission_gateway),
):
    """Create a commission (projectName, workerName and prompt are required)."""
    return await gateway.create(payload)


@router.put("/{commission_id}")
async def update_commission(
    commission_id: str,
    payload: Any = Depends(read_json_body),
    gateway: CommissionGateway = Depends(get_commission_gateway),
):
    return await gateway.update(commission_id, payload)


@router.delete("/{commission_id}")
async def delete_commission(
    commission_id: str,
    gateway: CommissionGateway = Depends(get_commission_gateway),
):
    return await gateway.delete(commission_id)


@router.post("/{commission_id}/dispatch")
async def dispatch_commission(
    commission_id: str,
    gateway: CommissionGateway = Depends(get_commission_gateway),
):
    """Ask the daemon to dispatch a commission to its worker."""
    return await gateway.dispatch(commission_id)
