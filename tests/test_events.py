"""Tests for the narrative event log."""

from heroville.core.events import EventKind, EventLog


class TestEventLog:
    """Tests for the bounded log."""

    def test_newest_first(self):
        log = EventLog()
        log.emit(EventKind.RESOURCES, "first")
        log.emit(EventKind.RESOURCES, "second")
        assert log.messages() == ["second", "first"]

    def test_bounded(self):
        """Old entries fall off past the limit."""
        log = EventLog(max_entries=3)
        for i in range(5):
            log.emit(EventKind.ROUND, f"round {i}")
        assert len(log) == 3
        assert log.messages() == ["round 4", "round 3", "round 2"]

    def test_drain_new(self):
        """Drained events are returned oldest first, once."""
        log = EventLog()
        log.tick = 7
        log.emit(EventKind.ENGAGE, "a", hero_id="h1")
        log.emit(EventKind.ROUND, "b")

        drained = log.drain_new()

        assert [e.message for e in drained] == ["a", "b"]
        assert drained[0].tick == 7
        assert drained[0].hero_id == "h1"
        assert log.drain_new() == []
        assert len(log) == 2

    def test_recent_limit(self):
        log = EventLog()
        for i in range(4):
            log.emit(EventKind.ROUND, str(i))
        assert [e.message for e in log.recent(2)] == ["3", "2"]

    def test_warn(self):
        log = EventLog()
        event = log.warn("Error: Hero x not found")
        assert event.kind == EventKind.WARNING
        assert event.to_dict()["kind"] == "warning"
