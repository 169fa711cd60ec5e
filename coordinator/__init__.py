"""Emergency coordinator state, authorization guards, and event log."""

from coordinator.models import Emergency, EmergencyStatus, EmergencyType, Event, EventType, Resource, Responder, ResponderType
from coordinator.engine import Coordinator
from coordinator.events import EventLog
from coordinator.config import Settings, load_settings

__all__ = [
    "Coordinator",
    "Emergency",
    "EmergencyStatus",
    "EmergencyType",
    "Event",
    "EventLog",
    "EventType",
    "Resource",
    "Responder",
    "ResponderType",
    "Settings",
    "load_settings",
]
