"""Narrative log schemas - chronological record of what the player is told."""

from __future__ import annotations
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field


class EventType(str, Enum):
    """Categories of narrative lines."""
    # Structure
    HEADER = "header"
    PHASE = "phase"
    INFO = "info"

    # Outcomes
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"

    # World
    RESOURCE = "resource"
    EXPEDITION = "expedition"
    SETTLER = "settler"
    BUILDING = "building"
    HOPE = "hope"


class LogEntry(BaseModel):
    """One line of narrative."""
    timestamp: datetime = Field(default_factory=datetime.now)
    day: int = 1
    message: str
    event_type: EventType = EventType.INFO

    def summary(self) -> str:
        return f"[Day {self.day}] {self.message}"


class NarrativeLog(BaseModel):
    """Container for the game's narrative history."""
    entries: list[LogEntry] = Field(default_factory=list)

    def add(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    def get_recent(self, count: int = 10) -> list[LogEntry]:
        """Get most recent entries."""
        return self.entries[-count:] if self.entries else []

    def get_by_day(self, day: int) -> list[LogEntry]:
        return [e for e in self.entries if e.day == day]

    def get_by_type(self, event_type: EventType) -> list[LogEntry]:
        return [e for e in self.entries if e.event_type == event_type]

    def summary(self, count: int = 10) -> str:
        recent = self.get_recent(count)
        if not recent:
            return "No events recorded."
        return "\n".join(e.summary() for e in recent)
