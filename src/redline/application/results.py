"""Result values returned by revision use cases.

Controller operations never raise for remote or local failures; they return
a :class:`RevisionResult` whose ``error_kind`` says which path was taken.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ..errors import HttpError, NetworkError, NotFoundLocalError, RevisionError

if TYPE_CHECKING:  # pragma: no cover
    from ..models.document_models import SectionRevision


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    NETWORK = "network"
    HTTP = "http"
    VALIDATION = "validation"
    IN_PROGRESS = "in_progress"


class SyncState(str, Enum):
    """Whether a local resolution has been confirmed by a server re-fetch."""

    TENTATIVE = "tentative"
    CONFIRMED = "confirmed"


def error_kind_for(exc: RevisionError) -> ErrorKind:
    if isinstance(exc, NetworkError):
        return ErrorKind.NETWORK
    if isinstance(exc, HttpError):
        return ErrorKind.HTTP
    if isinstance(exc, NotFoundLocalError):
        return ErrorKind.NOT_FOUND
    return ErrorKind.VALIDATION


@dataclass(slots=True, frozen=True)
class RevisionResult:
    """Outcome of a revision use case.

    Attributes:
        success: Whether the operation was applied.
        message: Human-readable status message, as sent to the notifier.
        revision: The affected revision, when one exists.
        error_kind: Failure category; None on success.
        sync_state: For applied operations, whether the server has confirmed.
    """

    success: bool
    message: str
    revision: SectionRevision | None = None
    error_kind: ErrorKind | None = None
    sync_state: SyncState | None = None

    @classmethod
    def ok(
        cls,
        message: str,
        revision: SectionRevision | None = None,
        sync_state: SyncState | None = SyncState.CONFIRMED,
    ) -> "RevisionResult":
        return cls(success=True, message=message, revision=revision, sync_state=sync_state)

    @classmethod
    def failed(cls, kind: ErrorKind, message: str) -> "RevisionResult":
        return cls(success=False, message=message, error_kind=kind)


__all__ = ["ErrorKind", "RevisionResult", "SyncState", "error_kind_for"]
