"""Project registry loaded from config.yaml."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import yaml
from pydantic import ValidationError

from ..models.project import ProjectConfig, ProjectRegistry

logger = logging.getLogger(__name__)


class ProjectConfigError(Exception):
    """config.yaml exists but could not be parsed or validated."""

    def __init__(self, path: Path, issues: str):
        super().__init__(f"Invalid project config at {path}: {issues}")
        self.path = path
        self.issues = issues


def load_registry(config_path: Path) -> ProjectRegistry:
    """
    Read and validate config.yaml.

    A missing or empty file is an empty registry. Raises ProjectConfigError
    for invalid YAML or a document that fails validation.
    """
    try:
        raw = Path(config_path).read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug(f"No project config at {config_path}")
        return ProjectRegistry()

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ProjectConfigError(config_path, str(e)) from e
    if data is None:
        return ProjectRegistry()

    try:
        return ProjectRegistry.model_validate(data)
    except ValidationError as e:
        issues = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        )
        raise ProjectConfigError(config_path, issues) from e


def load_projects(config_path: Path) -> List[ProjectConfig]:
    return load_registry(config_path).projects


__all__ = ["ProjectConfigError", "load_projects", "load_registry"]
