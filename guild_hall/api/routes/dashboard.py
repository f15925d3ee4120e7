"""Cross-project dashboard view."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...services.dashboard import DashboardAggregator
from ..dependencies import get_dashboard

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("")
async def get_dashboard_view(dashboard: DashboardAggregator = Depends(get_dashboard)) -> Dict[str, Any]:
    """Commissions and meeting requests of every registered project, sorted for display."""
    return dashboard.build()
