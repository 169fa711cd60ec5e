"""Append-only notification stream, kept apart from the entity tables."""

import logging
import threading
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Callable, Optional

from coordinator.models import Event, EventType

logger = logging.getLogger("coordinator_api.events")


def utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class EventLog:
    """Events are numbered from 1 and never removed or rewritten."""

    def __init__(self, clock: Optional[Callable[[], str]] = None):
        self._events: list[Event] = []
        self._subscribers: list[Callable[[Event], None]] = []
        self._lock = threading.Lock()
        self._clock = clock or utc_now

    def __len__(self):
        return len(self._events)

    def record(self, event_type: EventType, payload: dict) -> Event:
        """Append without notifying; pair with publish() once the caller has committed."""
        with self._lock:
            event = Event(
                seq=len(self._events) + 1,
                event_type=event_type,
                time=self._clock(),
                payload=MappingProxyType(dict(payload)),
            )
            self._events.append(event)
            return event

    def publish(self, events: list[Event]) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for event in events:
            for callback in subscribers:
                try:
                    callback(event)
                except Exception:
                    # Observers never undo a committed transition
                    logger.exception("event subscriber failed seq=%d type=%s", event.seq, event.event_type.value)

    def append(self, event_type: EventType, payload: dict) -> Event:
        event = self.record(event_type, payload)
        self.publish([event])
        return event

    def since(self, seq: int = 0) -> list[Event]:
        """Events with a sequence number greater than seq, oldest first."""
        with self._lock:
            return self._events[max(0, seq):]

    def subscribe(self, callback: Callable[[Event], None]) -> None:
        with self._lock:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[Event], None]) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)
