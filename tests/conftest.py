"""Shared fixtures: an in-memory session storage and a fixed clock."""

import copy
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from guild_hall.services.session_storage import SessionStorage, StoredSession
from guild_hall.services.session_store import SessionStore


class InMemorySessionStorage(SessionStorage):
    """Dict-backed storage with the same contract as the on-disk backend."""

    def __init__(self):
        self.metadata: Dict[str, Dict[str, Any]] = {}
        self.logs: Dict[str, List[Dict[str, Any]]] = {}
        self.touched: List[str] = []

    async def create(self, session_id: str, metadata: Dict[str, Any]) -> None:
        self.touched.append(session_id)
        if session_id in self.metadata:
            raise FileExistsError(session_id)
        self.metadata[session_id] = copy.deepcopy(metadata)
        self.logs[session_id] = []

    async def exists(self, session_id: str) -> bool:
        self.touched.append(session_id)
        return session_id in self.metadata

    async def list_ids(self) -> List[str]:
        return sorted(self.metadata)

    async def read(self, session_id: str) -> Optional[StoredSession]:
        self.touched.append(session_id)
        if session_id not in self.metadata:
            return None
        return StoredSession(
            metadata=copy.deepcopy(self.metadata[session_id]),
            messages=copy.deepcopy(self.logs[session_id]),
        )

    async def write_metadata(self, session_id: str, metadata: Dict[str, Any]) -> None:
        self.touched.append(session_id)
        if session_id not in self.metadata:
            raise FileNotFoundError(session_id)
        self.metadata[session_id] = copy.deepcopy(metadata)

    async def append(self, session_id: str, record: Dict[str, Any]) -> None:
        self.touched.append(session_id)
        self.logs[session_id].append(copy.deepcopy(record))

    async def delete(self, session_id: str) -> bool:
        self.touched.append(session_id)
        if session_id not in self.metadata:
            return False
        del self.metadata[session_id]
        del self.logs[session_id]
        return True


class FixedClock:
    """Clock returning a settable instant."""

    def __init__(self, moment: datetime):
        self.moment = moment

    def __call__(self) -> datetime:
        return self.moment

    def advance_to(self, moment: datetime) -> None:
        self.moment = moment


@pytest.fixture
def memory_storage():
    return InMemorySessionStorage()


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 3, 14, 9, 30, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(memory_storage, clock):
    return SessionStore(memory_storage, clock=clock)
