"""
Seed a running coordinator with a demo response: responders, resources, emergencies,
one assignment and allocation, and a resolution.

Run with the API already running (python run_api.py). Optionally set COORDINATOR_API_URL
and COORDINATOR_ADMIN_ID in env.
Usage: python seed_demo.py
"""

import os

import httpx

API_URL = (os.environ.get("COORDINATOR_API_URL") or "http://localhost:8000").rstrip("/")
ADMIN_ID = os.environ.get("COORDINATOR_ADMIN_ID") or "admin"
DISPATCHER_ID = "dispatcher-1"

DEMO_RESPONDERS = [
    {"identity": "medic-1", "name": "Medic One", "responder_type": "MEDICAL", "location": "Station 4"},
    {"identity": "engine-7", "name": "Engine 7", "responder_type": "FIRE_DEPARTMENT", "location": "Station 7"},
    {"identity": "unit-12", "name": "Patrol 12", "responder_type": "POLICE", "location": "Precinct 2"},
]

DEMO_RESOURCES = [
    {"name": "Ambulance", "quantity": 2, "location": "Station 4"},
    {"name": "Water tanker", "quantity": 3, "location": "Station 7"},
]

DEMO_EMERGENCIES = [
    {"description": "Person collapsed in the main lobby", "location": "1 High Street", "emergency_type": "MEDICAL", "priority": 5},
    {"description": "Kitchen fire on the third floor", "location": "22 Park Road", "emergency_type": "FIRE", "priority": 4},
]


def _post(client: httpx.Client, path: str, caller: str, payload: dict | None = None) -> dict:
    r = client.post(f"{API_URL}{path}", json=payload or {}, headers={"X-Caller-Id": caller})
    if not r.is_success:
        print(f"  FAILED {path} {r.status_code} {r.text[:200]}")
        r.raise_for_status()
    return r.json()


def main():
    print(f"Seeding demo state via {API_URL}")
    client = httpx.Client(timeout=10.0)
    try:
        _post(client, "/personnel", ADMIN_ID, {"identity": DISPATCHER_ID})
        for responder in DEMO_RESPONDERS:
            _post(client, "/responders", DISPATCHER_ID, responder)
            print(f"  responder {responder['identity']} registered")
        resource_ids = [_post(client, "/resources", DISPATCHER_ID, res)["id"] for res in DEMO_RESOURCES]
        emergency_ids = [_post(client, "/emergencies", "caller-demo", em)["id"] for em in DEMO_EMERGENCIES]
        print(f"  resources={resource_ids} emergencies={emergency_ids}")

        medical = emergency_ids[0]
        _post(client, f"/emergencies/{medical}/assign", DISPATCHER_ID, {"responder_ids": ["medic-1"]})
        _post(client, f"/emergencies/{medical}/allocate", DISPATCHER_ID, {"resource_id": resource_ids[0], "quantity": 1})
        _post(client, f"/emergencies/{medical}/status", "medic-1", {"status": "IN_PROGRESS"})
        _post(client, f"/emergencies/{medical}/status", "medic-1", {"status": "RESOLVED"})
        print(f"  emergency {medical} assigned, supplied and resolved")

        fire = emergency_ids[1]
        _post(client, f"/emergencies/{fire}/assign", DISPATCHER_ID, {"responder_ids": ["engine-7", "unit-12"]})
        print(f"  emergency {fire} assigned")

        events = client.get(f"{API_URL}/events").json()["events"]
        print(f"Done. {len(events)} events recorded.")
    finally:
        client.close()


if __name__ == "__main__":
    main()
