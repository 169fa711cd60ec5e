"""Tests for the append-only event log and its observers."""

import pytest

from coordinator.events import EventLog
from coordinator.models import EventType


def _log():
    return EventLog(clock=lambda: "2025-01-01T12:00:00Z")


class TestEventLog:
    def test_sequence_starts_at_one(self):
        log = _log()
        first = log.append(EventType.EMERGENCY_REPORTED, {"emergency_id": 1})
        second = log.append(EventType.EMERGENCY_REPORTED, {"emergency_id": 2})
        assert (first.seq, second.seq) == (1, 2)
        assert len(log) == 2

    def test_since_returns_newer_events(self):
        log = _log()
        for i in range(1, 4):
            log.append(EventType.RESOURCE_ADDED, {"resource_id": i})
        assert [e.seq for e in log.since(0)] == [1, 2, 3]
        assert [e.seq for e in log.since(2)] == [3]
        assert log.since(3) == []

    def test_since_result_does_not_expose_log(self):
        log = _log()
        log.append(EventType.RESOURCE_ADDED, {"resource_id": 1})
        log.since(0).clear()
        assert len(log) == 1

    def test_payload_is_copied(self):
        log = _log()
        payload = {"emergency_id": 1}
        event = log.append(EventType.EMERGENCY_REPORTED, payload)
        payload["emergency_id"] = 99
        assert event.payload["emergency_id"] == 1


class TestSubscribers:
    def test_subscriber_receives_events(self):
        log = _log()
        seen = []
        log.subscribe(seen.append)
        log.append(EventType.PERSONNEL_AUTHORIZED, {"identity": "d"})
        assert [e.event_type for e in seen] == [EventType.PERSONNEL_AUTHORIZED]

    def test_unsubscribe_stops_delivery(self):
        log = _log()
        seen = []
        log.subscribe(seen.append)
        log.unsubscribe(seen.append)
        log.append(EventType.PERSONNEL_AUTHORIZED, {"identity": "d"})
        assert seen == []

    def test_failing_subscriber_does_not_block_others(self, caplog):
        log = _log()
        seen = []

        def broken(event):
            raise RuntimeError("observer down")

        log.subscribe(broken)
        log.subscribe(seen.append)
        event = log.append(EventType.RESOURCE_ADDED, {"resource_id": 1})
        assert seen == [event]
        assert len(log) == 1
        assert "event subscriber failed" in caplog.text

    def test_read_events_cannot_rewrite_log(self):
        log = _log()
        log.append(EventType.EMERGENCY_REPORTED, {"emergency_id": 1})
        with pytest.raises(TypeError):
            log.since(0)[-1].payload["emergency_id"] = 999
        assert log.since(0)[-1].payload["emergency_id"] == 1

    def test_record_defers_notification_until_publish(self):
        log = _log()
        seen = []
        log.subscribe(seen.append)
        event = log.record(EventType.RESOURCE_ADDED, {"resource_id": 1})
        assert seen == []
        assert log.since(0) == [event]
        log.publish([event])
        assert seen == [event]
