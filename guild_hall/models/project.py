"""Project registry models (config.yaml)."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ProjectConfig(BaseModel):
    """A project registered with the guild."""

    name: str
    path: str
    description: Optional[str] = None
    repoUrl: Optional[str] = None
    meetingCap: Optional[int] = None


class ProjectRegistry(BaseModel):
    """Top-level shape of config.yaml."""

    projects: List[ProjectConfig] = Field(default_factory=list)
    settings: Optional[Dict[str, Any]] = None


__all__ = ["ProjectConfig", "ProjectRegistry"]
