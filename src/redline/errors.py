"""Error types raised by the revision engine.

The persistence layer raises these; the controller catches them at its
boundary and turns them into :class:`~redline.application.results.RevisionResult`
values, so they never reach UI code as unhandled exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar


class ErrorCode:
    """Constants for machine-readable error codes."""

    NOT_FOUND = "not_found"
    NETWORK_ERROR = "network_error"
    HTTP_ERROR = "http_error"
    VALIDATION_ERROR = "validation_error"
    INVALID_TRANSITION = "invalid_transition"


class ErrorLocation:
    """Labels describing where an error was handled, used in log records."""

    API_REQUEST = "api_request"
    DOCUMENT_REVISIONS = "document_revisions"
    REVISION_PANEL = "revision_panel"


@dataclass
class RevisionError(Exception):
    """Base exception for revision engine failures.

    Attributes:
        error_code: Machine-readable error identifier.
        message: Human-readable error description.
        details: Additional structured error information.
    """

    error_code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    severity: ClassVar[str] = "error"

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = dict(self.details)
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


@dataclass
class NotFoundLocalError(RevisionError):
    """A section or revision id could not be resolved in local state."""

    error_code: str = field(default=ErrorCode.NOT_FOUND)
    message: str = field(default="The requested item was not found")
    details: dict[str, Any] = field(default_factory=dict)

    severity: ClassVar[str] = "warning"


@dataclass
class NetworkError(RevisionError):
    """The request never produced an HTTP response (DNS, connect, timeout)."""

    error_code: str = field(default=ErrorCode.NETWORK_ERROR)
    message: str = field(default="Network request failed")
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class HttpError(RevisionError):
    """The server answered with a non-2xx status."""

    error_code: str = field(default=ErrorCode.HTTP_ERROR)
    message: str = field(default="Request failed")
    details: dict[str, Any] = field(default_factory=dict)

    status: int = field(default=500)
    data: Any = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["status"] = self.status
        return result


@dataclass
class ValidationError(RevisionError):
    """The caller supplied input that cannot be acted on."""

    error_code: str = field(default=ErrorCode.VALIDATION_ERROR)
    message: str = field(default="Invalid input")
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class InvalidTransitionError(RevisionError):
    """A revision was asked to leave a terminal status."""

    error_code: str = field(default=ErrorCode.INVALID_TRANSITION)
    message: str = field(default="Invalid revision status transition")
    details: dict[str, Any] = field(default_factory=dict)


__all__ = [
    "ErrorCode",
    "ErrorLocation",
    "HttpError",
    "InvalidTransitionError",
    "NetworkError",
    "NotFoundLocalError",
    "RevisionError",
    "ValidationError",
]
