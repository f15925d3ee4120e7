"""Pydantic models for data validation and serialization."""

from .commission import CommissionMeta, ResourceOverrides
from .guild_member import GuildMember, GuildMemberManifest, McpLaunch
from .meeting import MEETING_REQUESTED, MeetingMeta
from .project import ProjectConfig, ProjectRegistry
from .session import (
    SessionCreate,
    SessionDetail,
    SessionMetadata,
    SessionMetadataUpdate,
    SessionStatus,
    StoredMessage,
)

__all__ = [
    "CommissionMeta",
    "ResourceOverrides",
    "GuildMember",
    "GuildMemberManifest",
    "McpLaunch",
    "MeetingMeta",
    "MEETING_REQUESTED",
    "ProjectConfig",
    "ProjectRegistry",
    "SessionCreate",
    "SessionDetail",
    "SessionMetadata",
    "SessionMetadataUpdate",
    "SessionStatus",
    "StoredMessage",
]
