"""Meeting metadata mirrored from the daemon's .lore artifacts."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

MEETING_REQUESTED = "requested"


class MeetingMeta(BaseModel):
    """Frontmatter of a meeting artifact plus its location."""

    meetingId: str
    projectName: str
    title: str = ""
    status: str = ""
    worker: str = ""
    workerDisplayTitle: str = ""
    agenda: str = ""
    date: str = ""
    deferred_until: str = Field("", description="Empty unless the meeting request is snoozed")
    linked_artifacts: List[str] = Field(default_factory=list)
    notes_summary: str = ""

    @property
    def is_deferred(self) -> bool:
        return bool(self.deferred_until)


__all__ = ["MeetingMeta", "MEETING_REQUESTED"]
