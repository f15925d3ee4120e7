"""Read-only scanning of commission and meeting artifacts.

The daemon records commissions and meetings as Markdown files with YAML
frontmatter under ``<project>/.lore/commissions/`` and
``<project>/.lore/meetings/``. Mutations always go through the daemon.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List

import yaml

from ..models.commission import CommissionMeta, ResourceOverrides
from ..models.meeting import MEETING_REQUESTED, MeetingMeta

logger = logging.getLogger(__name__)

LORE_DIRNAME = ".lore"


class FrontmatterError(ValueError):
    """Frontmatter block present but not parseable as a YAML mapping."""


def project_lore_path(project_path: str | Path) -> Path:
    return Path(project_path).expanduser() / LORE_DIRNAME


def parse_frontmatter(raw: str) -> Dict[str, Any]:
    """
    Extract the YAML mapping between the leading ``---`` fences.

    Returns an empty dict when the document has no frontmatter.
    Raises FrontmatterError when the block is malformed.
    """
    lines = raw.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}
    for end, line in enumerate(lines[1:], start=1):
        if line.strip() == "---":
            break
    else:
        raise FrontmatterError("Unterminated frontmatter block")

    try:
        data = yaml.safe_load("\n".join(lines[1:end]))
    except yaml.YAMLError as e:
        raise FrontmatterError(str(e)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontmatterError("Frontmatter is not a mapping")
    return data


def _str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def _str_list(data: Dict[str, Any], key: str) -> List[str]:
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _format_date(value: Any) -> str:
    """YAML turns bare dates into date objects; render them as YYYY-MM-DD."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return value
    return ""


def _format_timestamp(value: Any) -> str:
    """Like _format_date, but a full datetime keeps its time of day."""
    if isinstance(value, datetime):
        return value.isoformat()
    return _format_date(value)


def _number(value: Any) -> Any:
    if isinstance(value, bool):
        return None
    return value if isinstance(value, (int, float)) else None


def _read_frontmatter(file_path: Path) -> Dict[str, Any]:
    raw = file_path.read_text(encoding="utf-8")
    try:
        return parse_frontmatter(raw)
    except FrontmatterError as e:
        logger.warning(f"Malformed frontmatter in {file_path}: {e}")
        return {}


def read_commission_meta(file_path: Path, project_name: str) -> CommissionMeta:
    """Parse one commission artifact. Missing or malformed fields fall back to defaults."""
    data = _read_frontmatter(file_path)
    overrides = data.get("resource_overrides")
    overrides = overrides if isinstance(overrides, dict) else {}
    return CommissionMeta(
        commissionId=file_path.stem,
        projectName=project_name,
        title=_str(data, "title"),
        status=_str(data, "status"),
        worker=_str(data, "worker"),
        workerDisplayTitle=_str(data, "workerDisplayTitle"),
        prompt=_str(data, "prompt"),
        dependencies=_str_list(data, "dependencies"),
        linked_artifacts=_str_list(data, "linked_artifacts"),
        resource_overrides=ResourceOverrides(
            maxTurns=_number(overrides.get("maxTurns")),
            maxBudgetUsd=_number(overrides.get("maxBudgetUsd")),
        ),
        current_progress=_str(data, "current_progress"),
        result_summary=_str(data, "result_summary"),
        date=_format_date(data.get("date")),
    )


def read_meeting_meta(file_path: Path, project_name: str) -> MeetingMeta:
    """Parse one meeting artifact. Missing or malformed fields fall back to defaults."""
    data = _read_frontmatter(file_path)
    return MeetingMeta(
        meetingId=file_path.stem,
        projectName=project_name,
        title=_str(data, "title"),
        status=_str(data, "status"),
        worker=_str(data, "worker"),
        workerDisplayTitle=_str(data, "workerDisplayTitle"),
        agenda=_str(data, "agenda"),
        date=_format_date(data.get("date")),
        deferred_until=_format_timestamp(data.get("deferred_until")),
        linked_artifacts=_str_list(data, "linked_artifacts"),
        notes_summary=_str(data, "notes_summary"),
    )


def _markdown_files(directory: Path) -> List[Path]:
    try:
        return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix == ".md")
    except FileNotFoundError:
        return []


def scan_commissions(lore_path: Path, project_name: str) -> List[CommissionMeta]:
    """All commissions under ``<lore>/commissions``; empty if the directory is missing."""
    commissions: List[CommissionMeta] = []
    for file_path in _markdown_files(lore_path / "commissions"):
        try:
            commissions.append(read_commission_meta(file_path, project_name))
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping unreadable commission {file_path}: {e}")
    return commissions


def scan_meetings(lore_path: Path, project_name: str) -> List[MeetingMeta]:
    """All meetings under ``<lore>/meetings``; empty if the directory is missing."""
    meetings: List[MeetingMeta] = []
    for file_path in _markdown_files(lore_path / "meetings"):
        try:
            meetings.append(read_meeting_meta(file_path, project_name))
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping unreadable meeting {file_path}: {e}")
    return meetings


def scan_meeting_requests(lore_path: Path, project_name: str) -> List[MeetingMeta]:
    """Meetings a worker has requested and the operator has not yet taken. Unsorted."""
    return [m for m in scan_meetings(lore_path, project_name) if m.status == MEETING_REQUESTED]


__all__ = [
    "FrontmatterError",
    "parse_frontmatter",
    "project_lore_path",
    "read_commission_meta",
    "read_meeting_meta",
    "scan_commissions",
    "scan_meetings",
    "scan_meeting_requests",
]
