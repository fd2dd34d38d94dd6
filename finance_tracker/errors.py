# finance_tracker/errors.py
# Error taxonomy shared by services and mapped to HTTP status codes at the boundary

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation_error"
    UNAUTHENTICATED = "unauthenticated"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"


STATUS_CODES = {
    ErrorKind.VALIDATION: 422,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INTERNAL: 500,
}


class ServiceError(Exception):
    """Base class for failures a service reports to its caller.

    Each subclass carries a ``kind`` tag; only the HTTP layer turns the tag
    into a status code.
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind.value, "message": self.message}


class ValidationFailed(ServiceError):
    """Input rejected before any persistence access."""

    kind = ErrorKind.VALIDATION

    def __init__(self, errors: List[Dict[str, str]], message: str = "The given data was invalid."):
        super().__init__(message)
        self.errors = errors

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationFailed":
        return cls([{"field": field, "message": message}])

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["errors"] = self.errors
        return data


class Unauthenticated(ServiceError):
    kind = ErrorKind.UNAUTHENTICATED

    def __init__(self, message: str = "Unauthenticated"):
        super().__init__(message)


class NotFound(ServiceError):
    """Resource is missing or belongs to someone else; the two are not distinguished."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource: str = "Resource", message: Optional[str] = None):
        super().__init__(message or f"{resource} not found")


class Conflict(ServiceError):
    kind = ErrorKind.CONFLICT


class Internal(ServiceError):
    kind = ErrorKind.INTERNAL
