"""Tests for the narrative sink."""

from skyward.models.events import EventType
from skyward.systems.event_log import EventLog


class TestEventLog:
    def test_keeps_call_order(self):
        log = EventLog()
        log.log_event("first")
        log.log_event("second", EventType.WARNING)
        assert log.messages() == ["first", "second"]
        assert log.count() == 2

    def test_listeners_see_every_line(self):
        log = EventLog()
        seen = []
        log.subscribe(lambda entry: seen.append(entry.message))
        log.log_event("hello")
        log.log_event("world")
        assert seen == ["hello", "world"]

    def test_entries_stamped_with_day(self):
        log = EventLog()
        log.log_event("day one")
        log.day = 2
        log.log_event("day two")
        assert [e.message for e in log.get_by_day(2)] == ["day two"]

    def test_filters(self):
        log = EventLog()
        log.log_event("Casey returned", EventType.EXPEDITION)
        log.log_event("Food ran out", EventType.DANGER)
        assert len(log.get_by_type(EventType.DANGER)) == 1
        assert log.search("casey")[0].event_type == EventType.EXPEDITION
        assert len(log.get_recent(1)) == 1

    def test_summary_and_export(self):
        log = EventLog()
        assert log.summary() == "No events recorded."
        log.log_event("Storm")
        assert log.summary() == "[Day 1] Storm"
        assert log.export()[0]["message"] == "Storm"
