"""
Structured Errors

Every failure raised inside the server is an AnyDBError carrying an explicit
kind, so both transports can branch on the kind instead of parsing message text.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Categories of failure surfaced to callers"""
    VALIDATION = "validation"           # Bad or missing arguments, no network call made
    AUTH = "auth"                       # Missing credentials or backend rejected them
    TRANSPORT = "transport"             # Network failure or timeout
    UPSTREAM = "upstream"               # Backend answered with a non-2xx status
    UPLOAD = "upload"                   # One step of the file upload sequence failed
    UNKNOWN_OPERATION = "unknown_operation"


# Steps of the file upload sequence, in order
UPLOAD_STEP_NAMES = {
    1: "request upload URL",
    2: "upload file bytes",
    3: "complete upload",
}


class AnyDBError(Exception):
    """
    Error raised by the gateway client, validators and handlers.

    Attributes:
        kind: ErrorKind of the failure
        message: Human-readable message (backend message when one was returned)
        operation: Tool or gateway operation that failed
        status: HTTP status code from the backend, if any
        step: Upload step number (1-3) for UPLOAD errors
        details: Structured validation problems for VALIDATION errors
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        operation: Optional[str] = None,
        status: Optional[int] = None,
        step: Optional[int] = None,
        details: Optional[list[dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.operation = operation
        self.status = status
        self.step = step
        self.details = details or []

    def __str__(self) -> str:
        prefix = f"{self.operation} failed" if self.operation else "Request failed"
        if self.status is not None:
            prefix += f" (HTTP {self.status})"
        return f"{prefix}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "kind": self.kind.value,
            "message": self.message,
        }
        if self.operation:
            payload["operation"] = self.operation
        if self.status is not None:
            payload["status"] = self.status
        if self.step is not None:
            payload["step"] = self.step
        if self.details:
            payload["details"] = self.details
        return payload
