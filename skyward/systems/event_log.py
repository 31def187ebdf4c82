"""Event log system - the narrative sink every phase writes to."""

from __future__ import annotations
from typing import Callable

from skyward.models.events import EventType, LogEntry, NarrativeLog

Listener = Callable[[LogEntry], None]


class EventLog:
    """Appends narrative lines in call order and forwards them to listeners."""

    def __init__(self) -> None:
        self._log = NarrativeLog()
        self._listeners: list[Listener] = []
        self.day = 1

    def subscribe(self, listener: Listener) -> None:
        """Register a callback invoked for every new line."""
        self._listeners.append(listener)

    def log_event(self, message: str, event_type: EventType = EventType.INFO) -> LogEntry:
        entry = LogEntry(day=self.day, message=message, event_type=event_type)
        self._log.add(entry)
        for listener in self._listeners:
            listener(entry)
        return entry

    def get_recent(self, count: int = 10) -> list[LogEntry]:
        return self._log.get_recent(count)

    def get_by_day(self, day: int) -> list[LogEntry]:
        return self._log.get_by_day(day)

    def get_by_type(self, event_type: EventType) -> list[LogEntry]:
        return self._log.get_by_type(event_type)

    def messages(self) -> list[str]:
        """Plain text of every line, oldest first."""
        return [e.message for e in self._log.entries]

    def search(self, query: str) -> list[LogEntry]:
        """Search entries by message text."""
        query_lower = query.lower()
        return [e for e in self._log.entries if query_lower in e.message.lower()]

    def count(self) -> int:
        return len(self._log.entries)

    def summary(self, count: int = 10) -> str:
        return self._log.summary(count)

    def export(self) -> list[dict]:
        """Export all entries for serialization."""
        return [e.model_dump() for e in self._log.entries]
