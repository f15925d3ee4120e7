"""Guild member discovery from guild-member.json manifests."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List

from pydantic import ValidationError

from ..models.guild_member import GuildMember, GuildMemberManifest

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "guild-member.json"


def _subdirectories(directory: Path) -> List[Path]:
    """Sorted child directories; an unreadable directory is skipped with a warning."""
    try:
        return sorted(entry for entry in directory.iterdir() if entry.is_dir())
    except OSError as e:
        logger.warning(f"Cannot scan {directory} for guild members: {e}")
        return []


def _manifest_paths(directory: Path) -> List[Path]:
    """Manifests at ``<dir>/<member>/`` and one level deeper (``<dir>/<group>/<member>/``)."""
    paths: List[Path] = []
    for entry in _subdirectories(directory):
        manifest = entry / MANIFEST_FILENAME
        if manifest.is_file():
            paths.append(manifest)
            continue
        for nested in _subdirectories(entry):
            if (nested / MANIFEST_FILENAME).is_file():
                paths.append(nested / MANIFEST_FILENAME)
    return paths


def _error_member(plugin_dir: Path, message: str) -> GuildMember:
    return GuildMember(
        name=plugin_dir.name,
        displayName=plugin_dir.name,
        description="",
        version="",
        transport="http",
        mcp={"command": "", "args": []},
        status="error",
        error=message,
        pluginDir=str(plugin_dir),
    )


def _load_member(manifest_path: Path) -> GuildMember:
    plugin_dir = manifest_path.parent
    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Unreadable manifest {manifest_path}: {e}")
        return _error_member(plugin_dir, f"Invalid JSON: {e}")

    try:
        manifest = GuildMemberManifest.model_validate(data)
    except ValidationError as e:
        issues = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        logger.warning(f"Invalid manifest {manifest_path}: {issues}")
        return _error_member(plugin_dir, issues)

    return GuildMember(**manifest.model_dump(), pluginDir=str(plugin_dir))


def discover_guild_members(directory: Path) -> Dict[str, GuildMember]:
    """Roster keyed by member name. A missing directory yields an empty roster."""
    directory = Path(directory)
    if not directory.is_dir():
        logger.info(f"Guild members directory {directory} not found, roster is empty")
        return {}

    roster: Dict[str, GuildMember] = {}
    for manifest_path in _manifest_paths(directory):
        member = _load_member(manifest_path)
        if member.name in roster:
            logger.warning(f"Duplicate guild member {member.name} in {manifest_path.parent}, ignored")
            continue
        roster[member.name] = member

    logger.info(f"Discovered {len(roster)} guild member(s) in {directory}")
    return roster


__all__ = ["discover_guild_members", "MANIFEST_FILENAME"]
