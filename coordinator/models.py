"""Coordinator state models: emergencies, responders, resources, events."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional


class EmergencyType(str, Enum):
    MEDICAL = "MEDICAL"
    FIRE = "FIRE"
    POLICE = "POLICE"
    NATURAL_DISASTER = "NATURAL_DISASTER"
    ACCIDENT = "ACCIDENT"


class EmergencyStatus(str, Enum):
    REPORTED = "REPORTED"
    ASSIGNED = "ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    CANCELLED = "CANCELLED"


class ResponderType(str, Enum):
    MEDICAL = "MEDICAL"
    FIRE_DEPARTMENT = "FIRE_DEPARTMENT"
    POLICE = "POLICE"
    RESCUE_TEAM = "RESCUE_TEAM"
    VOLUNTEER = "VOLUNTEER"


class EventType(str, Enum):
    EMERGENCY_REPORTED = "EmergencyReported"
    RESPONDER_ASSIGNED = "ResponderAssigned"
    STATUS_UPDATED = "StatusUpdated"
    RESOURCE_ALLOCATED = "ResourceAllocated"
    RESPONDER_REGISTERED = "ResponderRegistered"
    RESOURCE_ADDED = "ResourceAdded"
    PERSONNEL_AUTHORIZED = "PersonnelAuthorized"
    PERSONNEL_REVOKED = "PersonnelRevoked"


TERMINAL_STATUSES = frozenset({EmergencyStatus.RESOLVED, EmergencyStatus.CANCELLED})
ALLOCATABLE_STATUSES = frozenset({EmergencyStatus.ASSIGNED, EmergencyStatus.IN_PROGRESS})

DEFAULT_RATING = 100


@dataclass
class Emergency:
    emergency_id: int
    reporter: str
    description: str
    location: str
    emergency_type: EmergencyType
    priority: int  # 1 (low) - 5 (critical)
    created_at: str
    status: EmergencyStatus = EmergencyStatus.REPORTED
    assigned_responders: list = field(default_factory=list)  # responder identities, assignment order
    resources_allocated: int = 0

    def to_dict(self):
        return {
            "emergency_id": self.emergency_id,
            "reporter": self.reporter,
            "description": self.description,
            "location": self.location,
            "emergency_type": self.emergency_type.value,
            "status": self.status.value,
            "priority": self.priority,
            "created_at": self.created_at,
            "assigned_responders": list(self.assigned_responders),
            "resources_allocated": self.resources_allocated,
        }


@dataclass
class Responder:
    identity: str
    name: str
    responder_type: Optional[ResponderType]
    location: str
    is_active: bool = False
    is_available: bool = False
    emergencies_handled: int = 0
    rating: int = 0
    current_emergency: Optional[int] = None  # emergency this responder is tied up on

    @classmethod
    def unregistered(cls, identity: str) -> "Responder":
        """Zero-value record returned for identities that never registered."""
        return cls(identity=identity, name="", responder_type=None, location="")

    def to_dict(self):
        return {
            "identity": self.identity,
            "name": self.name,
            "responder_type": self.responder_type.value if self.responder_type else None,
            "location": self.location,
            "is_active": self.is_active,
            "is_available": self.is_available,
            "emergencies_handled": self.emergencies_handled,
            "rating": self.rating,
            "current_emergency": self.current_emergency,
        }


@dataclass
class Resource:
    resource_id: int
    name: str
    quantity: int  # remaining
    location: str
    initial_quantity: int = 0
    is_available: bool = True

    def __post_init__(self):
        if not self.initial_quantity:
            self.initial_quantity = self.quantity

    @property
    def allocated(self) -> int:
        return self.initial_quantity - self.quantity

    def to_dict(self):
        return {
            "resource_id": self.resource_id,
            "name": self.name,
            "quantity": self.quantity,
            "initial_quantity": self.initial_quantity,
            "location": self.location,
            "is_available": self.is_available,
        }


@dataclass(frozen=True)
class Event:
    """One entry of the append-only notification stream."""
    seq: int
    event_type: EventType
    time: str
    payload: Mapping = field(default_factory=dict)  # read-only view once logged

    def to_dict(self):
        return {
            "seq": self.seq,
            "event_type": self.event_type.value,
            "time": self.time,
            "payload": dict(self.payload),
        }
