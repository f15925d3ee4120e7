"""HTTP API routes for client-local sessions."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Response

from ...models.session import (
    SessionCreate,
    SessionDetail,
    SessionMetadata,
    SessionMetadataUpdate,
    StoredMessage,
)
from ...services.errors import SessionNotFoundError
from ...services.session_store import SessionStore
from ..dependencies import get_session_store

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@router.get("", response_model=List[SessionMetadata])
async def list_sessions(store: SessionStore = Depends(get_session_store)):
    """List all sessions, most recently active first."""
    return await store.list_sessions()


@router.post("", response_model=SessionMetadata, status_code=201)
async def create_session(
    data: SessionCreate,
    store: SessionStore = Depends(get_session_store),
):
    """Create a new idle session."""
    return await store.create_session(data.name, data.guild_members)


@router.get("/{session_id}", response_model=SessionDetail)
async def get_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
):
    """Get a session's metadata and message log."""
    detail = await store.get_session(session_id)
    if detail is None:
        raise SessionNotFoundError(session_id)
    return detail


@router.patch("/{session_id}", response_model=SessionMetadata)
async def update_session(
    session_id: str,
    data: SessionMetadataUpdate,
    store: SessionStore = Depends(get_session_store),
):
    """Merge fields into a session's metadata."""
    return await store.update_metadata(session_id, data)


@router.post("/{session_id}/messages", status_code=204)
async def append_message(
    session_id: str,
    message: StoredMessage,
    store: SessionStore = Depends(get_session_store),
):
    """Append one message to the session's log."""
    await store.append_message(session_id, message)
    return Response(status_code=204)


@router.post("/{session_id}/complete", response_model=SessionMetadata)
async def complete_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
):
    """Mark a session completed. Rejected with 409 while a query is running."""
    return await store.complete_session(session_id)


# Registered last; the path converter also captures ids containing separators.
@router.delete("/{session_id:path}", status_code=204)
async def delete_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
):
    """Delete a session and everything stored for it."""
    await store.delete_session(session_id)
    return Response(status_code=204)
