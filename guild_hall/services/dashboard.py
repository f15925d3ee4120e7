"""Cross-project dashboard: commissions and pending meeting requests.

Everything here works on metadata already written to disk by the daemon;
nothing touches the network.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from ..models.commission import CommissionMeta
from ..models.meeting import MeetingMeta
from ..models.project import ProjectConfig
from .lore import project_lore_path, scan_commissions, scan_meeting_requests
from .projects import load_projects

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = frozenset({"in_progress", "dispatched"})
PENDING_STATUSES = frozenset({"pending", "blocked"})


def commission_priority(status: str) -> int:
    """0 for running work, 1 for queued work, 2 for everything else."""
    normalized = status.lower().strip()
    if normalized in ACTIVE_STATUSES:
        return 0
    if normalized in PENDING_STATUSES:
        return 1
    return 2


def sort_commissions(commissions: Iterable[CommissionMeta]) -> List[CommissionMeta]:
    """
    Order commissions by status tier, then most recent date first.

    Both passes are stable, so commissions sharing a tier and a date keep
    their input order.
    """
    by_date = sorted(commissions, key=lambda c: c.date, reverse=True)
    return sorted(by_date, key=lambda c: commission_priority(c.status))


def sort_meeting_requests(meetings: Iterable[MeetingMeta]) -> List[MeetingMeta]:
    """
    Active requests first, then deferred ones by ``deferred_until`` ascending.

    Ties are broken by date, most recent first.
    """
    by_date = sorted(meetings, key=lambda m: m.date, reverse=True)
    return sorted(by_date, key=lambda m: (m.is_deferred, m.deferred_until))


class DashboardAggregator:
    """Builds the dashboard view across every registered project."""

    def __init__(
        self,
        projects: Optional[List[ProjectConfig]] = None,
        config_path: Optional[Path] = None,
    ) -> None:
        if projects is None and config_path is None:
            raise ValueError("DashboardAggregator needs projects or a config_path")
        self._projects = projects
        self.config_path = config_path

    def projects(self) -> List[ProjectConfig]:
        # Re-read on every build so newly registered projects show up.
        if self._projects is not None:
            return self._projects
        return load_projects(self.config_path)

    def build(self) -> Dict[str, Any]:
        commissions: List[CommissionMeta] = []
        requests: List[MeetingMeta] = []
        for project in self.projects():
            lore_path = project_lore_path(project.path)
            commissions.extend(scan_commissions(lore_path, project.name))
            requests.extend(scan_meeting_requests(lore_path, project.name))

        logger.debug(
            f"Dashboard built with {len(commissions)} commissions "
            f"and {len(requests)} meeting requests"
        )
        return {
            "commissions": [c.model_dump() for c in sort_commissions(commissions)],
            "meetingRequests": [m.model_dump() for m in sort_meeting_requests(requests)],
        }


__all__ = [
    "DashboardAggregator",
    "commission_priority",
    "sort_commissions",
    "sort_meeting_requests",
]
