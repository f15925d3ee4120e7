"""Storage backends for sessions.

A session is persisted as one directory per id:

    <root>/<id>/meta.json        metadata document
    <root>/<id>/messages.jsonl   append-only message log, one JSON object per line
    <root>/<id>/context.md       working-context template
    <root>/<id>/artifacts/       files produced during the session

``SessionStorage`` is the seam the store talks to, so store tests can run
against an in-memory implementation while ``FileSessionStorage`` covers disk.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

META_FILENAME = "meta.json"
MESSAGES_FILENAME = "messages.jsonl"
CONTEXT_FILENAME = "context.md"
ARTIFACTS_DIRNAME = "artifacts"

CONTEXT_TEMPLATE = """# Session Context

## Goal


## Decisions


## In Progress


## Resources

"""


@dataclass
class StoredSession:
    """Raw documents read back from storage, before schema validation."""

    metadata: Dict[str, Any]
    messages: List[Dict[str, Any]] = field(default_factory=list)


class SessionStorage(ABC):
    """Persistence operations the session store relies on.

    Identifiers reaching these methods have already been validated by the store.
    """

    @abstractmethod
    async def create(self, session_id: str, metadata: Dict[str, Any]) -> None:
        """Reserve ``session_id`` and write its initial documents.

        Raises FileExistsError if the id is already taken.
        """

    @abstractmethod
    async def exists(self, session_id: str) -> bool:
        ...

    @abstractmethod
    async def list_ids(self) -> List[str]:
        ...

    @abstractmethod
    async def read(self, session_id: str) -> Optional[StoredSession]:
        """Return the session's documents, or None if it is absent or unreadable."""

    @abstractmethod
    async def write_metadata(self, session_id: str, metadata: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    async def append(self, session_id: str, record: Dict[str, Any]) -> None:
        """Append one record to the end of the message log in a single write."""

    @abstractmethod
    async def delete(self, session_id: str) -> bool:
        """Remove everything stored for ``session_id``. Returns False if absent."""


def _parse_log(raw: str, session_id: str) -> List[Dict[str, Any]]:
    records: List[Dict[str, Any]] = []
    for line_no, line in enumerate(raw.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError:
            logger.warning(f"Skipping corrupt line {line_no} in {session_id}/{MESSAGES_FILENAME}")
            continue
        if isinstance(record, dict):
            records.append(record)
    return records


class FileSessionStorage(SessionStorage):
    """Sessions stored as directories under a root on the local filesystem."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _session_dir(self, session_id: str) -> Path:
        path = (self.root / session_id).resolve()
        # Every session directory is a direct child of the root.
        if path.parent != self.root.resolve():
            raise ValueError(f"Session path escapes storage root: {session_id}")
        return path

    async def create(self, session_id: str, metadata: Dict[str, Any]) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        session_dir = self._session_dir(session_id)
        # mkdir without exist_ok is the reservation: only one creator wins.
        session_dir.mkdir(parents=False, exist_ok=False)
        (session_dir / ARTIFACTS_DIRNAME).mkdir()
        (session_dir / CONTEXT_FILENAME).write_text(CONTEXT_TEMPLATE, encoding="utf-8")
        (session_dir / MESSAGES_FILENAME).write_text("", encoding="utf-8")
        self._write_json(session_dir / META_FILENAME, metadata)

    async def exists(self, session_id: str) -> bool:
        return (self._session_dir(session_id) / META_FILENAME).is_file()

    async def list_ids(self) -> List[str]:
        try:
            entries = sorted(self.root.iterdir())
        except FileNotFoundError:
            return []
        return [
            entry.name
            for entry in entries
            if entry.is_dir() and not entry.name.startswith(".")
        ]

    async def read(self, session_id: str) -> Optional[StoredSession]:
        session_dir = self._session_dir(session_id)
        try:
            meta_raw = (session_dir / META_FILENAME).read_text(encoding="utf-8")
        except (FileNotFoundError, NotADirectoryError):
            return None

        try:
            metadata = json.loads(meta_raw)
        except json.JSONDecodeError:
            logger.warning(f"Corrupt {META_FILENAME} in session {session_id}")
            return None
        if not isinstance(metadata, dict):
            logger.warning(f"Unexpected {META_FILENAME} shape in session {session_id}")
            return None

        try:
            log_raw = (session_dir / MESSAGES_FILENAME).read_text(encoding="utf-8")
        except FileNotFoundError:
            log_raw = ""

        return StoredSession(metadata=metadata, messages=_parse_log(log_raw, session_id))

    async def write_metadata(self, session_id: str, metadata: Dict[str, Any]) -> None:
        session_dir = self._session_dir(session_id)
        if not session_dir.is_dir():
            raise FileNotFoundError(f"Session directory missing: {session_id}")
        self._write_json(session_dir / META_FILENAME, metadata)

    async def append(self, session_id: str, record: Dict[str, Any]) -> None:
        line = json.dumps(record, ensure_ascii=False) + "\n"
        path = self._session_dir(session_id) / MESSAGES_FILENAME
        with open(path, "a", encoding="utf-8") as log:
            log.write(line)

    async def delete(self, session_id: str) -> bool:
        session_dir = self._session_dir(session_id)
        if not session_dir.is_dir():
            return False
        # Rename first so readers see the session disappear in one step.
        tombstone = self.root / f".{session_id}.deleted-{uuid.uuid4().hex[:8]}"
        try:
            os.replace(session_dir, tombstone)
        except FileNotFoundError:
            return False
        shutil.rmtree(tombstone, ignore_errors=True)
        return True

    @staticmethod
    def _write_json(path: Path, document: Dict[str, Any]) -> None:
        tmp_path = path.with_name(f"{path.name}.{uuid.uuid4().hex[:8]}.tmp")
        tmp_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        os.replace(tmp_path, path)


__all__ = [
    "SessionStorage",
    "FileSessionStorage",
    "StoredSession",
    "CONTEXT_TEMPLATE",
    "META_FILENAME",
    "MESSAGES_FILENAME",
]
