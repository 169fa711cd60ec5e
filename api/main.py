"""
FastAPI backend: report emergencies, register responders and resources, assign and allocate,
serve state and the event stream. Caller identity comes from the X-Caller-Id header.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Header, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from coordinator.config import load_settings
from coordinator.engine import Coordinator
from coordinator.errors import CoordinatorError
from coordinator.models import EmergencyStatus, EmergencyType, ResponderType

settings = load_settings()

# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("coordinator_api")

# -----------------------------------------------------------------------------
# Store (in-memory; one coordinator per process)
# -----------------------------------------------------------------------------
coordinator = Coordinator.from_settings(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("coordinator ready admin_id=%s status_policy=%s", settings.admin_id, settings.status_policy)
    yield


app = FastAPI(title="Emergency Response Coordinator API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -----------------------------------------------------------------------------
# Error mapping
# -----------------------------------------------------------------------------
ERROR_STATUS = {
    "InvalidInput": 400,
    "Unauthorized": 403,
    "NotAssigned": 403,
    "NotFound": 404,
    "InvalidState": 409,
    "ResponderUnavailable": 409,
    "InsufficientResource": 409,
    "AlreadyRegistered": 409,
}

NO_CACHE_HEADERS = {"Cache-Control": "no-store, no-cache, must-revalidate", "Pragma": "no-cache"}


@app.exception_handler(CoordinatorError)
async def coordinator_error_handler(request: Request, exc: CoordinatorError):
    return JSONResponse(
        status_code=ERROR_STATUS.get(exc.kind, 400),
        content=exc.to_dict(),
        headers=NO_CACHE_HEADERS,
    )


# -----------------------------------------------------------------------------
# Request/response models
# -----------------------------------------------------------------------------
class ReportRequest(BaseModel):
    description: str
    location: str
    emergency_type: EmergencyType
    priority: int


class AssignRequest(BaseModel):
    responder_ids: list[str]


class AllocateRequest(BaseModel):
    resource_id: int
    quantity: int


class StatusRequest(BaseModel):
    status: EmergencyStatus


class RegisterResponderRequest(BaseModel):
    identity: str
    name: str
    responder_type: ResponderType
    location: str = ""


class AddResourceRequest(BaseModel):
    name: str
    quantity: int
    location: str = ""


class AuthorizeRequest(BaseModel):
    identity: str


class IdResponse(BaseModel):
    id: int


class Ack(BaseModel):
    ok: bool = True
    detail: Optional[str] = None


def _ack(detail: str) -> JSONResponse:
    return JSONResponse(content=Ack(detail=detail).model_dump(), headers=NO_CACHE_HEADERS)


def _ok(content) -> JSONResponse:
    return JSONResponse(content=content, headers=NO_CACHE_HEADERS)


# -----------------------------------------------------------------------------
# Routes: emergencies
# -----------------------------------------------------------------------------
@app.post("/emergencies", response_model=IdResponse)
def report_emergency(body: ReportRequest, x_caller_id: str = Header(...)):
    """Open reporting: any caller may report."""
    emergency_id = coordinator.report_emergency(
        x_caller_id, body.description, body.location, body.emergency_type, body.priority
    )
    return _ok(IdResponse(id=emergency_id).model_dump())


@app.get("/emergencies")
def list_emergencies(status: Optional[EmergencyStatus] = None):
    return _ok({"emergencies": [e.to_dict() for e in coordinator.list_emergencies(status)]})


@app.get("/emergencies/{emergency_id}")
def get_emergency(emergency_id: int):
    return _ok(coordinator.get_emergency(emergency_id).to_dict())


@app.get("/emergencies/{emergency_id}/responders")
def get_assigned_responders(emergency_id: int):
    return _ok({"emergency_id": emergency_id, "responders": coordinator.get_assigned_responders(emergency_id)})


@app.post("/emergencies/{emergency_id}/assign")
def assign_responders(emergency_id: int, body: AssignRequest, x_caller_id: str = Header(...)):
    coordinator.assign_responders(x_caller_id, emergency_id, body.responder_ids)
    return _ack(f"assigned {len(body.responder_ids)} responder(s)")


@app.post("/emergencies/{emergency_id}/allocate")
def allocate_resources(emergency_id: int, body: AllocateRequest, x_caller_id: str = Header(...)):
    coordinator.allocate_resources(x_caller_id, emergency_id, body.resource_id, body.quantity)
    return _ack(f"allocated {body.quantity} of resource {body.resource_id}")


@app.post("/emergencies/{emergency_id}/status")
def update_emergency_status(emergency_id: int, body: StatusRequest, x_caller_id: str = Header(...)):
    coordinator.update_status(x_caller_id, emergency_id, body.status)
    return _ack(f"status set to {body.status.value}")


# -----------------------------------------------------------------------------
# Routes: responders
# -----------------------------------------------------------------------------
@app.post("/responders")
def register_responder(body: RegisterResponderRequest, x_caller_id: str = Header(...)):
    coordinator.register_responder(x_caller_id, body.identity, body.name, body.responder_type, body.location)
    return _ack(f"registered {body.identity}")


@app.get("/responders")
def list_responders(available_only: bool = False):
    return _ok({"responders": [r.to_dict() for r in coordinator.list_responders(available_only)]})


@app.get("/responders/{identity}")
def get_responder(identity: str):
    """Unregistered identities return a zero-value record, not 404."""
    return _ok(coordinator.get_responder(identity).to_dict())


# -----------------------------------------------------------------------------
# Routes: resources
# -----------------------------------------------------------------------------
@app.post("/resources", response_model=IdResponse)
def add_resource(body: AddResourceRequest, x_caller_id: str = Header(...)):
    resource_id = coordinator.add_resource(x_caller_id, body.name, body.quantity, body.location)
    return _ok(IdResponse(id=resource_id).model_dump())


@app.get("/resources")
def list_resources():
    return _ok({"resources": [r.to_dict() for r in coordinator.list_resources()]})


@app.get("/resources/{resource_id}")
def get_resource(resource_id: int):
    return _ok(coordinator.get_resource(resource_id).to_dict())


# -----------------------------------------------------------------------------
# Routes: authorization
# -----------------------------------------------------------------------------
@app.post("/personnel")
def authorize_personnel(body: AuthorizeRequest, x_caller_id: str = Header(...)):
    coordinator.authorize(x_caller_id, body.identity)
    return _ack(f"authorized {body.identity}")


@app.delete("/personnel/{identity}")
def revoke_personnel(identity: str, x_caller_id: str = Header(...)):
    coordinator.revoke(x_caller_id, identity)
    return _ack(f"revoked {identity}")


@app.get("/personnel")
def list_personnel():
    return _ok({"admin": coordinator.admin_id, "authorized": coordinator.authorized_personnel()})


# -----------------------------------------------------------------------------
# Routes: events, health
# -----------------------------------------------------------------------------
@app.get("/events")
def list_events(since: int = 0):
    """Append-only notification stream; poll with the last seen seq."""
    return _ok({"events": [e.to_dict() for e in coordinator.events(since)]})


@app.get("/health")
def health():
    return _ok({
        "status": "ok",
        "status_policy": coordinator.status_policy,
        "emergencies": len(coordinator.list_emergencies()),
    })
