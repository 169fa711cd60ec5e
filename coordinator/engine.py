"""
State-transition and access-control engine.
One Coordinator owns emergencies, responders, resources and the authorization set.
Every operation checks all of its preconditions before writing anything, under one lock,
so a call either commits completely or raises and leaves state untouched.
"""

import copy
import logging
import threading
from typing import Callable, Iterable, Optional

from coordinator.errors import (
    AlreadyRegistered,
    CoordinatorError,
    InsufficientResource,
    InvalidInput,
    InvalidState,
    NotAssigned,
    NotFound,
    ResponderUnavailable,
    Unauthorized,
)
from coordinator.events import EventLog, utc_now
from coordinator.models import (
    ALLOCATABLE_STATUSES,
    DEFAULT_RATING,
    TERMINAL_STATUSES,
    Emergency,
    EmergencyStatus,
    EmergencyType,
    Event,
    EventType,
    Resource,
    Responder,
    ResponderType,
)

logger = logging.getLogger("coordinator_api.engine")

MIN_PRIORITY = 1
MAX_PRIORITY = 5

# Forward path used by the strict policy; CANCELLED is reachable from any open status.
STRICT_TRANSITIONS = {
    EmergencyStatus.REPORTED: {EmergencyStatus.ASSIGNED},
    EmergencyStatus.ASSIGNED: {EmergencyStatus.IN_PROGRESS},
    EmergencyStatus.IN_PROGRESS: {EmergencyStatus.RESOLVED},
}


def _require_text(value, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput(f"{field_name} is required and cannot be empty")
    return value.strip()


def _optional_text(value, field_name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidInput(f"{field_name} must be text")
    return value.strip()


def _require_int(value, field_name: str, minimum: int, maximum: Optional[int] = None) -> int:
    # bool is an int subclass; True is not a quantity
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{field_name} must be an integer")
    if value < minimum or (maximum is not None and value > maximum):
        bounds = f"[{minimum}, {maximum}]" if maximum is not None else f">= {minimum}"
        raise InvalidInput(f"{field_name} must be {bounds}, got {value}")
    return value


def _coerce_enum(enum_cls, value, field_name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidInput(f"invalid {field_name}: {value!r}") from None


def is_allowed_transition(current: EmergencyStatus, new: EmergencyStatus) -> bool:
    """Strict lifecycle check."""
    if new == EmergencyStatus.CANCELLED:
        return current not in TERMINAL_STATUSES
    return new in STRICT_TRANSITIONS.get(current, set())


class Coordinator:
    def __init__(
        self,
        admin_id: str = "admin",
        status_policy: str = "permissive",
        clock: Optional[Callable[[], str]] = None,
        event_log: Optional[EventLog] = None,
    ):
        if status_policy not in ("permissive", "strict"):
            raise ValueError(f"unknown status policy: {status_policy!r}")
        self.admin_id = _require_text(admin_id, "admin_id")
        self.status_policy = status_policy
        self._clock = clock or utc_now
        self.event_log = event_log if event_log is not None else EventLog(clock=self._clock)
        self._lock = threading.RLock()
        self._emergencies: list[Emergency] = []  # index = id - 1
        self._resources: list[Resource] = []  # index = id - 1
        self._responders: dict[str, Responder] = {}
        self._authorized: set[str] = {self.admin_id}
        self._pending: list[Event] = []  # events of the transaction in progress

    @classmethod
    def from_settings(cls, settings) -> "Coordinator":
        return cls(admin_id=settings.admin_id, status_policy=settings.status_policy)

    # -------------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------------
    def is_authorized(self, identity: str) -> bool:
        with self._lock:
            return identity in self._authorized

    def _require_authorized(self, caller: str, operation: str) -> None:
        if caller not in self._authorized:
            raise Unauthorized(f"{caller!r} is not authorized to {operation}")

    def _require_admin(self, caller: str, operation: str) -> None:
        if caller != self.admin_id:
            raise Unauthorized(f"only the admin may {operation}")

    def _emergency(self, emergency_id) -> Emergency:
        if isinstance(emergency_id, bool) or not isinstance(emergency_id, int) or not 1 <= emergency_id <= len(self._emergencies):
            raise NotFound(f"emergency {emergency_id} not found")
        return self._emergencies[emergency_id - 1]

    def _resource(self, resource_id) -> Resource:
        if isinstance(resource_id, bool) or not isinstance(resource_id, int) or not 1 <= resource_id <= len(self._resources):
            raise NotFound(f"resource {resource_id} not found")
        return self._resources[resource_id - 1]

    def _run(self, operation: str, fn: Callable):
        """Run one transition under the lock; log rejections with their kind."""
        with self._lock:
            self._pending = []
            try:
                result = fn()
            except CoordinatorError as e:
                logger.warning("%s rejected: %s %s", operation, e.kind, e.message)
                raise
            committed, self._pending = self._pending, []
        # Observers run after the lock is released
        self.event_log.publish(committed)
        return result

    def _emit(self, event_type: EventType, **payload) -> Event:
        event = self.event_log.record(event_type, payload)
        self._pending.append(event)
        return event

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------
    def report_emergency(self, caller: str, description: str, location: str, emergency_type, priority: int) -> int:
        """Open to any caller. Returns the new emergency id."""
        def tx():
            desc = _require_text(description, "description")
            loc = _require_text(location, "location")
            etype = _coerce_enum(EmergencyType, emergency_type, "emergency type")
            prio = _require_int(priority, "priority", MIN_PRIORITY, MAX_PRIORITY)
            emergency = Emergency(
                emergency_id=len(self._emergencies) + 1,
                reporter=caller,
                description=desc,
                location=loc,
                emergency_type=etype,
                priority=prio,
                created_at=self._clock(),
            )
            self._emergencies.append(emergency)
            logger.info("emergency reported id=%d type=%s priority=%d reporter=%s",
                        emergency.emergency_id, etype.value, prio, caller)
            self._emit(EventType.EMERGENCY_REPORTED, emergency_id=emergency.emergency_id, reporter=caller,
                       emergency_type=etype.value, priority=prio)
            return emergency.emergency_id
        return self._run("report_emergency", tx)

    def assign_responders(self, caller: str, emergency_id: int, responder_ids: Iterable[str]) -> None:
        """Assign a batch of responders to a REPORTED emergency; all or none."""
        def tx():
            self._require_authorized(caller, "assign responders")
            emergency = self._emergency(emergency_id)
            if emergency.status != EmergencyStatus.REPORTED:
                raise InvalidState(f"emergency {emergency_id} is {emergency.status.value}, expected REPORTED")
            if isinstance(responder_ids, str):
                raise InvalidInput("responder_ids must be a list of identities")
            batch = list(responder_ids or [])
            if not batch:
                raise InvalidInput("responder_ids cannot be empty")
            if len(set(batch)) != len(batch):
                raise InvalidInput("responder_ids contains duplicates")
            for rid in batch:
                responder = self._responders.get(rid)
                if responder is None or not responder.is_active or not responder.is_available:
                    raise ResponderUnavailable(f"responder {rid!r} is not active and available")

            for rid in batch:
                self._responders[rid].is_available = False
                self._responders[rid].current_emergency = emergency_id
                emergency.assigned_responders.append(rid)
            old_status = emergency.status
            emergency.status = EmergencyStatus.ASSIGNED
            logger.info("responders assigned emergency_id=%d responders=%s by=%s", emergency_id, batch, caller)
            for rid in batch:
                self._emit(EventType.RESPONDER_ASSIGNED, emergency_id=emergency_id, responder=rid)
            self._emit(EventType.STATUS_UPDATED, emergency_id=emergency_id, old_status=old_status.value,
                       new_status=emergency.status.value, updated_by=caller)
        self._run("assign_responders", tx)

    def allocate_resources(self, caller: str, emergency_id: int, resource_id: int, quantity: int) -> None:
        def tx():
            self._require_authorized(caller, "allocate resources")
            qty = _require_int(quantity, "quantity", 1)
            emergency = self._emergency(emergency_id)
            if emergency.status not in ALLOCATABLE_STATUSES:
                raise InvalidState(f"emergency {emergency_id} is {emergency.status.value}; "
                                   "resources go to ASSIGNED or IN_PROGRESS emergencies")
            resource = self._resource(resource_id)
            if not resource.is_available or resource.quantity < qty:
                raise InsufficientResource(f"resource {resource_id} has {resource.quantity} left, requested {qty}")

            resource.quantity -= qty
            if resource.quantity == 0:
                resource.is_available = False
            emergency.resources_allocated += qty
            logger.info("resource allocated emergency_id=%d resource_id=%d quantity=%d remaining=%d",
                        emergency_id, resource_id, qty, resource.quantity)
            self._emit(EventType.RESOURCE_ALLOCATED, emergency_id=emergency_id, resource_id=resource_id,
                       quantity=qty, remaining=resource.quantity)
        self._run("allocate_resources", tx)

    def update_status(self, caller: str, emergency_id: int, new_status) -> None:
        """Status change by an active responder assigned to the emergency."""
        def tx():
            emergency = self._emergency(emergency_id)
            responder = self._responders.get(caller)
            if responder is None or not responder.is_active or caller not in emergency.assigned_responders:
                raise NotAssigned(f"{caller!r} is not an active responder assigned to emergency {emergency_id}")
            status = _coerce_enum(EmergencyStatus, new_status, "status")
            old_status = emergency.status
            if self.status_policy == "strict" and not is_allowed_transition(old_status, status):
                raise InvalidState(f"cannot move emergency {emergency_id} from {old_status.value} to {status.value}")

            emergency.status = status
            if status == EmergencyStatus.RESOLVED and old_status != EmergencyStatus.RESOLVED:
                for rid in emergency.assigned_responders:
                    released = self._responders[rid]
                    # Only responders still working this emergency go back to the pool
                    if released.current_emergency != emergency_id:
                        continue
                    released.is_available = True
                    released.current_emergency = None
                    released.emergencies_handled += 1
            logger.info("status updated emergency_id=%d %s -> %s by=%s",
                        emergency_id, old_status.value, status.value, caller)
            self._emit(EventType.STATUS_UPDATED, emergency_id=emergency_id, old_status=old_status.value,
                       new_status=status.value, updated_by=caller)
        self._run("update_status", tx)

    def register_responder(self, caller: str, identity: str, name: str, responder_type, location: str) -> None:
        def tx():
            self._require_authorized(caller, "register responders")
            ident = _require_text(identity, "identity")
            display = _require_text(name, "name")
            rtype = _coerce_enum(ResponderType, responder_type, "responder type")
            loc = _optional_text(location, "location")
            existing = self._responders.get(ident)
            if existing is not None and existing.is_active:
                raise AlreadyRegistered(f"responder {ident!r} is already registered")

            self._responders[ident] = Responder(
                identity=ident,
                name=display,
                responder_type=rtype,
                location=loc,
                is_active=True,
                is_available=True,
                emergencies_handled=0,
                rating=DEFAULT_RATING,
            )
            logger.info("responder registered identity=%s type=%s by=%s", ident, rtype.value, caller)
            self._emit(EventType.RESPONDER_REGISTERED, responder=ident, name=display, responder_type=rtype.value)
        self._run("register_responder", tx)

    def add_resource(self, caller: str, name: str, quantity: int, location: str) -> int:
        def tx():
            self._require_authorized(caller, "add resources")
            rname = _require_text(name, "name")
            qty = _require_int(quantity, "quantity", 1)
            loc = _optional_text(location, "location")
            resource = Resource(
                resource_id=len(self._resources) + 1,
                name=rname,
                quantity=qty,
                location=loc,
                initial_quantity=qty,
            )
            self._resources.append(resource)
            logger.info("resource added id=%d name=%s quantity=%d", resource.resource_id, rname, qty)
            self._emit(EventType.RESOURCE_ADDED, resource_id=resource.resource_id, name=rname, quantity=qty)
            return resource.resource_id
        return self._run("add_resource", tx)

    def authorize(self, caller: str, identity: str) -> None:
        """Admin only; idempotent."""
        def tx():
            self._require_admin(caller, "authorize personnel")
            ident = _require_text(identity, "identity")
            if ident in self._authorized:
                return
            self._authorized.add(ident)
            logger.info("personnel authorized identity=%s", ident)
            self._emit(EventType.PERSONNEL_AUTHORIZED, identity=ident)
        self._run("authorize", tx)

    def revoke(self, caller: str, identity: str) -> None:
        """Admin only; the admin itself stays authorized."""
        def tx():
            self._require_admin(caller, "revoke personnel")
            ident = _require_text(identity, "identity")
            if ident == self.admin_id:
                raise InvalidInput("the admin identity cannot be revoked")
            if ident not in self._authorized:
                return
            self._authorized.discard(ident)
            logger.info("personnel revoked identity=%s", ident)
            self._emit(EventType.PERSONNEL_REVOKED, identity=ident)
        self._run("revoke", tx)

    # -------------------------------------------------------------------------
    # Reads (copies; callers cannot reach live state)
    # -------------------------------------------------------------------------
    def get_emergency(self, emergency_id: int) -> Emergency:
        with self._lock:
            return copy.deepcopy(self._emergency(emergency_id))

    def get_responder(self, identity: str) -> Responder:
        with self._lock:
            responder = self._responders.get(identity)
            if responder is None:
                return Responder.unregistered(identity)
            return copy.deepcopy(responder)

    def get_assigned_responders(self, emergency_id: int) -> list[str]:
        with self._lock:
            return list(self._emergency(emergency_id).assigned_responders)

    def get_resource(self, resource_id: int) -> Resource:
        with self._lock:
            return copy.deepcopy(self._resource(resource_id))

    def list_emergencies(self, status=None) -> list[Emergency]:
        with self._lock:
            wanted = _coerce_enum(EmergencyStatus, status, "status") if status is not None else None
            return [copy.deepcopy(e) for e in self._emergencies if wanted is None or e.status == wanted]

    def list_responders(self, available_only: bool = False) -> list[Responder]:
        with self._lock:
            return [copy.deepcopy(r) for r in self._responders.values()
                    if not available_only or (r.is_active and r.is_available)]

    def list_resources(self) -> list[Resource]:
        with self._lock:
            return [copy.deepcopy(r) for r in self._resources]

    def authorized_personnel(self) -> list[str]:
        with self._lock:
            return sorted(self._authorized)

    def events(self, since: int = 0) -> list[Event]:
        return self.event_log.since(since)
