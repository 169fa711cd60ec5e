"""Typed failures raised by the coordinator. A raised error means nothing was written."""


class CoordinatorError(Exception):
    """Base class; `kind` is the stable error name surfaced to callers."""
    kind = "CoordinatorError"

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind)
        self.message = message or self.kind

    def to_dict(self):
        return {"error": self.kind, "detail": self.message}


class InvalidInput(CoordinatorError):
    kind = "InvalidInput"


class NotFound(CoordinatorError):
    kind = "NotFound"


class Unauthorized(CoordinatorError):
    kind = "Unauthorized"


class InvalidState(CoordinatorError):
    kind = "InvalidState"


class ResponderUnavailable(CoordinatorError):
    kind = "ResponderUnavailable"


class InsufficientResource(CoordinatorError):
    kind = "InsufficientResource"


class AlreadyRegistered(CoordinatorError):
    kind = "AlreadyRegistered"


class NotAssigned(CoordinatorError):
    kind = "NotAssigned"
