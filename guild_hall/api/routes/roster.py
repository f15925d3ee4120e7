"""Roster of discovered guild members."""

from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter, Depends

from ...models.guild_member import GuildMember
from ..dependencies import get_roster

router = APIRouter(prefix="/api/roster", tags=["roster"])


@router.get("", response_model=List[GuildMember])
async def list_roster(roster: Dict[str, GuildMember] = Depends(get_roster)):
    return list(roster.values())
