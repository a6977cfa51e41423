"""Application layer: revision use cases and their results."""

from __future__ import annotations

from .results import ErrorKind, RevisionResult, SyncState
from .revision_ops import (
    LoggingNotifier,
    ModeProvider,
    NotificationLevel,
    Notifier,
    RevisionController,
    RevisionPersistence,
    StaticModeProvider,
)

__all__ = [
    "ErrorKind",
    "LoggingNotifier",
    "ModeProvider",
    "NotificationLevel",
    "Notifier",
    "RevisionController",
    "RevisionPersistence",
    "RevisionResult",
    "StaticModeProvider",
    "SyncState",
]
