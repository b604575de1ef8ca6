"""Heartbeat model for the Hackatime language server.

A heartbeat is one observation of coding activity on a file. Heartbeats are
built by the pipeline on every change/save notification and flow through:
Throttle → Queue → Delivery Worker → wakatime-cli
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


def now_millis() -> float:
    """Current epoch time in seconds, truncated to millisecond precision."""
    return int(time.time() * 1000) / 1000.0


class EventType(str, Enum):
    """Editor notifications that produce heartbeats."""

    DID_CHANGE = "TextDocumentDidChange"
    DID_SAVE = "TextDocumentDidSave"


class Heartbeat(BaseModel):
    """One timestamped activity event for a file."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    entity: str = Field(..., description="Normalized filesystem path of the file")
    entity_type: str = Field(default="file", description="Kind of entity, always a file")
    category: str = Field(default="coding", description="Activity category")
    time: float = Field(default_factory=now_millis, description="Epoch seconds with millisecond precision")
    plugin: str = Field(default="Zed", description="Name of the reporting editor plugin")
    lineno: int = Field(default=1, ge=1, description="1-based line number")
    cursorpos: int = Field(default=0, ge=0, description="0-based cursor column")
    lines_in_file: int = Field(default=1, ge=0, description="Total line count of the file")
    alternate_project: str = Field(default="", description="Project name override")
    project_folder: str = Field(default="", description="Project root folder")
    is_write: bool = Field(default=False, description="True when the event is a file save")
    is_unsaved_entity: bool = Field(default=False, description="True for virtual/unsaved documents")
    local_file: str = Field(default="", description="Local file to read instead of the entity")
    ai_line_changes: int = Field(default=0, ge=0, description="Lines changed by an assistant")
    human_line_changes: int = Field(default=0, ge=0, description="Lines changed by a human")

    def to_dict(self) -> Dict[str, Any]:
        """Convert heartbeat to a JSON-ready dictionary for the audit log."""
        data = self.model_dump()
        if not self.local_file:
            del data["local_file"]
        return data
