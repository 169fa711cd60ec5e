"""Tests for coordinator models: Emergency, Responder, Resource, Event."""

import pytest

from coordinator.models import (
    DEFAULT_RATING,
    Emergency,
    EmergencyStatus,
    EmergencyType,
    Event,
    EventType,
    Resource,
    Responder,
    ResponderType,
)


class TestEmergency:
    def test_new_emergency_defaults(self):
        e = Emergency(
            emergency_id=1,
            reporter="caller",
            description="smoke",
            location="Park Road",
            emergency_type=EmergencyType.FIRE,
            priority=3,
            created_at="2025-01-01T12:00:00Z",
        )
        assert e.status == EmergencyStatus.REPORTED
        assert e.assigned_responders == []
        assert e.resources_allocated == 0

    def test_to_dict_uses_enum_names(self):
        e = Emergency(1, "caller", "smoke", "Park Road", EmergencyType.NATURAL_DISASTER, 2, "2025-01-01T12:00:00Z")
        d = e.to_dict()
        assert d["emergency_type"] == "NATURAL_DISASTER"
        assert d["status"] == "REPORTED"
        assert d["emergency_id"] == 1
        assert d["assigned_responders"] == []

    def test_to_dict_copies_responder_list(self):
        e = Emergency(1, "caller", "smoke", "Park Road", EmergencyType.FIRE, 2, "t", assigned_responders=["r1"])
        e.to_dict()["assigned_responders"].append("r2")
        assert e.assigned_responders == ["r1"]


class TestResponder:
    def test_unregistered_is_zero_value(self):
        r = Responder.unregistered("nobody")
        assert r.identity == "nobody"
        assert r.name == ""
        assert r.responder_type is None
        assert r.is_active is False
        assert r.is_available is False
        assert r.emergencies_handled == 0
        assert r.rating == 0

    def test_to_dict(self):
        r = Responder("medic-1", "Medic One", ResponderType.MEDICAL, "Station 4", True, True, 0, DEFAULT_RATING)
        d = r.to_dict()
        assert d["responder_type"] == "MEDICAL"
        assert d["rating"] == 100
        assert d["is_available"] is True

    def test_to_dict_unregistered_type_is_none(self):
        assert Responder.unregistered("x").to_dict()["responder_type"] is None


class TestResource:
    def test_initial_quantity_defaults_to_quantity(self):
        res = Resource(resource_id=1, name="Ambulance", quantity=2, location="Station 4")
        assert res.initial_quantity == 2
        assert res.allocated == 0
        assert res.is_available is True

    def test_allocated_tracks_consumption(self):
        res = Resource(resource_id=1, name="Ambulance", quantity=2, location="Station 4")
        res.quantity -= 1
        assert res.allocated == 1
        assert res.quantity + res.allocated == res.initial_quantity


class TestEvent:
    def test_is_immutable(self):
        ev = Event(seq=1, event_type=EventType.EMERGENCY_REPORTED, time="t", payload={"emergency_id": 1})
        with pytest.raises(AttributeError):
            ev.seq = 2

    def test_to_dict(self):
        ev = Event(seq=3, event_type=EventType.RESOURCE_ALLOCATED, time="t", payload={"quantity": 1})
        assert ev.to_dict() == {"seq": 3, "event_type": "ResourceAllocated", "time": "t", "payload": {"quantity": 1}}
