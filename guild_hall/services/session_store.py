"""Session store: durable CRUD over sessions plus an append-only message log."""

from __future__ import annotations

import asyncio
import logging
import re
import weakref
from datetime import datetime, timezone
from typing import Callable, List, Optional

from pydantic import ValidationError

from ..models.session import (
    SessionDetail,
    SessionMetadata,
    SessionMetadataUpdate,
    SessionStatus,
    StoredMessage,
)
from .errors import (
    InvalidRequestError,
    InvalidSessionIdError,
    SessionConflictError,
    SessionNotFoundError,
)
from .session_storage import SessionStorage

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")
MAX_SESSION_ID_LENGTH = 200
RUNNING_CONFLICT_MESSAGE = "Stop the running query before completing the session"
TERMINAL_CONFLICT_MESSAGE = "Session is {status}; its status can no longer change"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def slugify(text: str) -> str:
    """
    Convert a session name to a URL-friendly slug.

    Lowercases, replaces anything outside ``[a-z0-9-]`` with hyphens,
    collapses runs of hyphens and trims them from both ends.
    """
    slug = re.sub(r"[^a-z0-9-]", "-", text.lower())
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def validate_session_id(session_id: str) -> str:
    """Reject identifiers that could address anything outside the storage root."""
    if (
        not session_id
        or len(session_id) > MAX_SESSION_ID_LENGTH
        or ".." in session_id
        or not SESSION_ID_PATTERN.match(session_id)
    ):
        raise InvalidSessionIdError(session_id)
    return session_id


class SessionStore:
    """Create, read, update and delete sessions through a ``SessionStorage`` backend.

    Appends and metadata writes for one session are serialized with a
    per-session lock; operations on different sessions never wait on each other.
    """

    def __init__(self, storage: SessionStorage, clock: Clock = _utcnow) -> None:
        self.storage = storage
        self.clock = clock
        # Locks live only while an operation holds or awaits them.
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def _lock_for(self, session_id: str) -> asyncio.Lock:
        lock = self._locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_id] = lock
        return lock

    async def _generate_id(self, name: str, now: datetime) -> str:
        base_id = f"{now.astimezone(timezone.utc).strftime('%Y-%m-%d')}-{slugify(name) or 'session'}"
        base_id = base_id[:MAX_SESSION_ID_LENGTH - 8]
        if not await self.storage.exists(base_id):
            return base_id
        counter = 2
        while await self.storage.exists(f"{base_id}-{counter}"):
            counter += 1
        return f"{base_id}-{counter}"

    async def create_session(self, name: str, guild_members: List[str]) -> SessionMetadata:
        """
        Create a new idle session with an empty message log.

        The id is ``YYYY-MM-DD-<slug>``, suffixed with ``-2``, ``-3``... on
        collision. Reservation happens in storage, so two concurrent creators
        of the same name still end up with distinct ids.
        """
        now = self.clock()
        now_iso = _iso(now)

        while True:
            session_id = await self._generate_id(name, now)
            metadata = SessionMetadata(
                id=session_id,
                name=name,
                status=SessionStatus.IDLE,
                guild_members=list(guild_members),
                sdk_session_id=None,
                created_at=now_iso,
                last_activity_at=now_iso,
                message_count=0,
            )
            try:
                await self.storage.create(session_id, metadata.to_document())
            except FileExistsError:
                logger.debug(f"Session id {session_id} taken concurrently, retrying")
                continue
            break

        logger.info(f"Created session {session_id} with members {guild_members}")
        return metadata

    def _parse_metadata(self, session_id: str, document: dict) -> Optional[SessionMetadata]:
        try:
            return SessionMetadata.model_validate(document)
        except ValidationError as e:
            logger.warning(f"Invalid metadata in session {session_id}: {e.error_count()} error(s)")
            return None

    async def get_session(self, session_id: str) -> Optional[SessionDetail]:
        """Return metadata and messages, or None when the session does not exist."""
        validate_session_id(session_id)
        stored = await self.storage.read(session_id)
        if stored is None:
            return None

        metadata = self._parse_metadata(session_id, stored.metadata)
        if metadata is None:
            return None

        messages: List[StoredMessage] = []
        for record in stored.messages:
            try:
                messages.append(StoredMessage.model_validate(record))
            except ValidationError:
                logger.warning(f"Skipping invalid message record in session {session_id}")
        return SessionDetail(metadata=metadata, messages=messages)

    async def list_sessions(self) -> List[SessionMetadata]:
        """All readable sessions, most recently active first."""
        sessions: List[SessionMetadata] = []
        for session_id in await self.storage.list_ids():
            if not SESSION_ID_PATTERN.match(session_id):
                continue
            stored = await self.storage.read(session_id)
            if stored is None:
                continue
            metadata = self._parse_metadata(session_id, stored.metadata)
            if metadata is not None:
                sessions.append(metadata)

        sessions.sort(key=lambda m: m.last_activity_at, reverse=True)
        return sessions

    async def _require_metadata(self, session_id: str) -> SessionMetadata:
        stored = await self.storage.read(session_id)
        if stored is None:
            raise SessionNotFoundError(session_id)
        metadata = self._parse_metadata(session_id, stored.metadata)
        if metadata is None:
            raise SessionNotFoundError(session_id)
        return metadata

    async def append_message(self, session_id: str, message: StoredMessage) -> None:
        """
        Append one message to the session's log.

        Raises SessionNotFoundError if the session does not exist. The status
        is left untouched; messageCount and lastActivityAt follow the append.
        """
        validate_session_id(session_id)
        async with self._lock_for(session_id):
            metadata = await self._require_metadata(session_id)
            await self.storage.append(session_id, message.to_document())
            updated = metadata.model_copy(
                update={
                    "message_count": metadata.message_count + 1,
                    "last_activity_at": message.timestamp,
                }
            )
            await self.storage.write_metadata(session_id, updated.to_document())

    async def update_metadata(self, session_id: str, updates: SessionMetadataUpdate) -> SessionMetadata:
        """
        Merge ``updates`` into the stored metadata and persist the result.

        A completed or expired session keeps its status: changing it raises
        SessionConflictError.
        """
        validate_session_id(session_id)
        async with self._lock_for(session_id):
            existing = await self._require_metadata(session_id)
            changes_status = "status" in updates.model_fields_set and updates.status != existing.status
            if existing.status.is_terminal and changes_status:
                raise SessionConflictError(TERMINAL_CONFLICT_MESSAGE.format(status=existing.status.value))
            return await self._write_update(session_id, existing, updates)

    async def _write_update(
        self,
        session_id: str,
        existing: SessionMetadata,
        updates: SessionMetadataUpdate,
    ) -> SessionMetadata:
        changes = updates.model_dump(exclude_unset=True)
        try:
            merged = SessionMetadata.model_validate({**existing.model_dump(), **changes})
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
            raise InvalidRequestError(f"Invalid metadata update: {fields}") from e
        await self.storage.write_metadata(session_id, merged.to_document())
        return merged

    async def delete_session(self, session_id: str) -> None:
        """Remove all persisted state for ``session_id``."""
        validate_session_id(session_id)
        async with self._lock_for(session_id):
            deleted = await self.storage.delete(session_id)
        if not deleted:
            raise SessionNotFoundError(session_id)
        logger.info(f"Deleted session {session_id}")

    async def complete_session(self, session_id: str) -> SessionMetadata:
        """
        Mark a session completed.

        - running: conflict, the running query has to be stopped first
        - completed / expired: returned unchanged
        - idle / error: transitioned to completed
        """
        validate_session_id(session_id)
        async with self._lock_for(session_id):
            metadata = await self._require_metadata(session_id)
            if metadata.status == SessionStatus.RUNNING:
                raise SessionConflictError(RUNNING_CONFLICT_MESSAGE)
            if metadata.status.is_terminal:
                return metadata

            updated = await self._write_update(
                session_id,
                metadata,
                SessionMetadataUpdate(
                    status=SessionStatus.COMPLETED,
                    last_activity_at=_iso(self.clock()),
                ),
            )
        logger.info(f"Session {session_id} completed")
        return updated


__all__ = [
    "SessionStore",
    "slugify",
    "validate_session_id",
    "RUNNING_CONFLICT_MESSAGE",
    "TERMINAL_CONFLICT_MESSAGE",
]
