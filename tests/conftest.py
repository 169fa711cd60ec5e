"""Pytest fixtures for coordinator tests."""

import pytest

from coordinator.engine import Coordinator
from coordinator.models import EmergencyType, ResponderType

ADMIN = "admin"
DISPATCHER = "dispatcher"
OUTSIDER = "stranger"
FIXED_TIME = "2025-01-01T12:00:00Z"


@pytest.fixture
def coordinator():
    """Fresh coordinator with a fixed clock and one authorized dispatcher."""
    c = Coordinator(admin_id=ADMIN, clock=lambda: FIXED_TIME)
    c.authorize(ADMIN, DISPATCHER)
    return c


@pytest.fixture
def strict_coordinator():
    c = Coordinator(admin_id=ADMIN, status_policy="strict", clock=lambda: FIXED_TIME)
    c.authorize(ADMIN, DISPATCHER)
    return c


@pytest.fixture
def staffed(coordinator):
    """Coordinator with two medics, one firefighter, an ambulance pool and one reported emergency."""
    coordinator.register_responder(DISPATCHER, "medic-1", "Medic One", ResponderType.MEDICAL, "Station 4")
    coordinator.register_responder(DISPATCHER, "medic-2", "Medic Two", ResponderType.MEDICAL, "Station 4")
    coordinator.register_responder(DISPATCHER, "fire-1", "Engine 7", ResponderType.FIRE_DEPARTMENT, "Station 7")
    coordinator.add_resource(DISPATCHER, "Ambulance", 3, "Station 4")
    coordinator.report_emergency("caller", "collapsed in lobby", "1 High Street", EmergencyType.MEDICAL, 5)
    return coordinator

