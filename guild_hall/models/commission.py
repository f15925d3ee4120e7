"""Commission metadata mirrored from the daemon's .lore artifacts."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class ResourceOverrides(BaseModel):
    """Per-commission limits the worker runs under."""

    maxTurns: Optional[int] = None
    maxBudgetUsd: Optional[float] = None


class CommissionMeta(BaseModel):
    """Frontmatter of a commission artifact plus its location."""

    commissionId: str
    projectName: str
    title: str = ""
    status: str = Field("", description="pending | dispatched | in_progress | blocked | completed | failed | cancelled")
    worker: str = ""
    workerDisplayTitle: str = ""
    prompt: str = ""
    dependencies: List[str] = Field(default_factory=list, description="Artifact paths the commission references")
    linked_artifacts: List[str] = Field(default_factory=list)
    resource_overrides: ResourceOverrides = Field(default_factory=ResourceOverrides)
    current_progress: str = ""
    result_summary: str = ""
    date: str = Field("", description="YYYY-MM-DD creation date used for ordering")


__all__ = ["CommissionMeta", "ResourceOverrides"]
