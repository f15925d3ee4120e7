"""Session models: metadata document, stored messages and request payloads."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SessionStatus(str, Enum):
    """Lifecycle states of a client-local session."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    EXPIRED = "expired"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionStatus.COMPLETED, SessionStatus.EXPIRED)


class _CamelModel(BaseModel):
    """Serialized with camelCase keys, accepts either spelling on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class SessionMetadata(_CamelModel):
    """Contents of a session's meta.json."""

    id: str = Field(..., description="Session identifier (date-prefixed slug)")
    name: str = Field(..., description="Human label")
    status: SessionStatus = Field(SessionStatus.IDLE, description="idle | running | completed | expired | error")
    guild_members: List[str] = Field(default_factory=list, description="Participating worker identifiers")
    sdk_session_id: Optional[str] = Field(None, description="Agent SDK session bound to this session")
    created_at: str = Field(..., description="ISO-8601 creation timestamp")
    last_activity_at: str = Field(..., description="ISO-8601 timestamp of the last transition or append")
    message_count: int = Field(0, ge=0, description="Number of messages appended")


class StoredMessage(_CamelModel):
    """One line of messages.jsonl."""

    role: Literal["user", "assistant"]
    content: str
    timestamp: str
    tool_name: Optional[str] = None
    tool_input: Optional[Dict[str, Any]] = None
    tool_result: Optional[Any] = None

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SessionCreate(_CamelModel):
    """Request payload to create a session."""

    name: str = Field(..., min_length=1, description="Human label for the session")
    guild_members: List[str] = Field(..., description="Worker identifiers taking part")


class SessionMetadataUpdate(_CamelModel):
    """Partial metadata update. id and createdAt cannot be changed."""

    name: Optional[str] = None
    status: Optional[SessionStatus] = None
    guild_members: Optional[List[str]] = None
    sdk_session_id: Optional[str] = None
    last_activity_at: Optional[str] = None
    message_count: Optional[int] = Field(None, ge=0)


class SessionDetail(_CamelModel):
    """Response model for a single session: metadata plus its message log."""

    metadata: SessionMetadata
    messages: List[StoredMessage] = Field(default_factory=list)


__all__ = [
    "SessionStatus",
    "SessionMetadata",
    "StoredMessage",
    "SessionCreate",
    "SessionMetadataUpdate",
    "SessionDetail",
]
