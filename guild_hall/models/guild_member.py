"""Guild member manifest (guild-member.json) and roster entries."""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class McpLaunch(BaseModel):
    """How to launch a guild member's MCP server."""

    command: str
    args: List[str]
    env: Optional[Dict[str, str]] = None


class GuildMemberManifest(BaseModel):
    """Validated contents of guild-member.json."""

    name: str
    displayName: str
    description: str
    version: str
    transport: Literal["http"]
    mcp: McpLaunch


class GuildMember(GuildMemberManifest):
    """Roster entry: a manifest plus discovery state."""

    status: Literal["disconnected", "connected", "error"] = "disconnected"
    tools: List[str] = Field(default_factory=list)
    error: Optional[str] = None
    pluginDir: str


__all__ = ["McpLaunch", "GuildMemberManifest", "GuildMember"]
