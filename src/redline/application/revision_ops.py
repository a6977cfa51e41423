"""Revision use cases.

The controller mediates between UI intent, the revision store and the
persistence adapter:

- Demo mode: every operation resolves against the store only.
- Networked mode: accept/reject call the server first, apply the store
  mutation only on success, then re-fetch the document's revisions to
  confirm the local state.

Every operation returns a :class:`RevisionResult` and reports its outcome
to the notifier exactly once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Protocol

from ..errors import ErrorLocation, RevisionError
from ..models.document_models import RevisionStatus, RiskCategory, RiskLevel, SectionRevision
from .results import ErrorKind, RevisionResult, SyncState, error_kind_for

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from ..domain.revision_store import RevisionStore

LOGGER = logging.getLogger(__name__)


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class Notifier(Protocol):
    """Receives one message per user-initiated operation outcome."""

    def notify(self, level: NotificationLevel, message: str) -> None:
        ...


class ModeProvider(Protocol):
    """Supplies the operating-mode flags, read once per operation."""

    @property
    def is_demo_mode(self) -> bool:
        ...

    @property
    def using_mock_data(self) -> bool:
        ...


class RevisionPersistence(Protocol):
    """Remote operations the controller depends on."""

    async def get_revisions_by_document(self, document_id: str) -> list[SectionRevision]:
        ...

    async def accept_revision(self, revision_id: str) -> dict[str, Any]:
        ...

    async def reject_revision(self, revision_id: str) -> dict[str, Any]:
        ...

    async def submit_revision(
        self,
        document_id: str,
        section_id: str,
        original_text: str,
        proposed_text: str,
        *,
        comment: str | None = None,
        risk_level: RiskLevel | str | None = None,
        risk_category: RiskCategory | str | None = None,
        ai_generated: bool = False,
    ) -> str | None:
        ...


@dataclass(slots=True)
class StaticModeProvider:
    """Mode flags fixed at construction, typically from settings."""

    is_demo_mode: bool = False
    using_mock_data: bool = False


class LoggingNotifier:
    """Notifier that writes outcomes to the log; used when no UI is attached."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or LOGGER

    def notify(self, level: NotificationLevel, message: str) -> None:
        if level is NotificationLevel.ERROR:
            self._logger.warning("%s", message)
        else:
            self._logger.info("%s", message)


_ACTIONS: dict[str, tuple[str, str]] = {
    "accept": ("accepted", "accept"),
    "reject": ("rejected", "reject"),
}


class RevisionController:
    """Orchestrates propose/accept/reject across demo and networked modes.

    Attributes:
        error: Message of the most recent failure, cleared when a new
            operation starts.
    """

    def __init__(
        self,
        store: RevisionStore,
        adapter: RevisionPersistence,
        *,
        mode: ModeProvider | None = None,
        notifier: Notifier | None = None,
        document_id: str | None = None,
    ) -> None:
        self._store = store
        self._adapter = adapter
        self._mode = mode or StaticModeProvider()
        self._notifier = notifier or LoggingNotifier()
        self._document_id = document_id
        self._processing: set[str] = set()
        self._sync_states: dict[str, SyncState] = {}
        self._is_loading = False
        self.error: str | None = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def store(self) -> RevisionStore:
        return self._store

    @property
    def document_id(self) -> str | None:
        """The explicit document id, falling back to the store's current document."""
        if self._document_id:
            return self._document_id
        document = self._store.current_document
        return document.id if document is not None else None

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def processing_revision_ids(self) -> frozenset[str]:
        return frozenset(self._processing)

    def is_processing(self, revision_id: str) -> bool:
        return revision_id in self._processing

    def sync_state(self, revision_id: str) -> SyncState | None:
        return self._sync_states.get(revision_id)

    @property
    def revisions(self) -> tuple[SectionRevision, ...]:
        return self._store.all_revisions()

    @property
    def pending_revisions(self) -> tuple[SectionRevision, ...]:
        return self._store.pending_revisions

    # ------------------------------------------------------------------
    # Use cases
    # ------------------------------------------------------------------

    async def load_revisions(self) -> RevisionResult:
        """Fetch the document's revisions and reconcile them into the store."""
        document_id = self.document_id
        if not document_id:
            LOGGER.debug("RevisionController.load_revisions: no document id")
            return RevisionResult.failed(ErrorKind.VALIDATION, "No document selected")

        self.error = None
        if self._is_demo():
            LOGGER.debug("RevisionController.load_revisions: demo mode, using local revisions")
            return RevisionResult.ok("Using local revisions")

        self._is_loading = True
        try:
            await self._refetch(document_id)
        except RevisionError as exc:
            return self._fail(exc, "Failed to fetch revisions", ErrorLocation.DOCUMENT_REVISIONS)
        finally:
            self._is_loading = False
        return RevisionResult.ok("Revisions loaded")

    async def accept_revision(self, revision_id: str) -> RevisionResult:
        return await self._resolve(revision_id, "accept")

    async def reject_revision(self, revision_id: str) -> RevisionResult:
        return await self._resolve(revision_id, "reject")

    async def propose_revision(
        self,
        section_id: str,
        proposed_text: str,
        comment: str | None = None,
        risk_level: RiskLevel | str | None = None,
        *,
        risk_category: RiskCategory | str | None = None,
        ai_generated: bool = False,
    ) -> RevisionResult:
        """Create a pending revision, submitting it to the server when networked."""
        self.error = None
        document_id = self.document_id
        if not document_id:
            return self._report_failure(ErrorKind.VALIDATION, "No document ID available")

        section = self._store.get_section(section_id)
        if section is None:
            return self._report_failure(ErrorKind.NOT_FOUND, f"Section {section_id} not found")

        demo = self._is_demo()
        server_id: str | None = None
        if not demo:
            try:
                server_id = await self._adapter.submit_revision(
                    document_id,
                    section_id,
                    section.text,
                    proposed_text,
                    comment=comment,
                    risk_level=risk_level,
                    risk_category=risk_category,
                    ai_generated=ai_generated,
                )
            except RevisionError as exc:
                return self._fail(exc, "Failed to propose revision", ErrorLocation.DOCUMENT_REVISIONS)

        try:
            revision = self._store.propose_revision(
                section_id,
                proposed_text,
                ai_generated,
                comment,
                risk_level,
                risk_category=risk_category,
                revision_id=server_id,
            )
        except RevisionError as exc:
            return self._fail(exc, "Failed to propose revision", ErrorLocation.DOCUMENT_REVISIONS)
        if revision is None:
            return self._report_failure(ErrorKind.NOT_FOUND, f"Section {section_id} not found")

        message = "Revision proposed" if demo else "Revision proposed successfully"
        self._notifier.notify(NotificationLevel.SUCCESS, message)
        return RevisionResult.ok(message, revision)

    # ------------------------------------------------------------------
    # Internal Helpers
    # ------------------------------------------------------------------

    async def _resolve(self, revision_id: str, action: str) -> RevisionResult:
        past, verb = _ACTIONS[action]
        self.error = None

        if not self.document_id:
            return self._report_failure(ErrorKind.VALIDATION, "No document selected")
        if not revision_id:
            return self._report_failure(ErrorKind.VALIDATION, "Revision id is required")
        if revision_id in self._processing:
            return self._report_failure(
                ErrorKind.IN_PROGRESS,
                f"Revision {revision_id} is already being processed",
            )
        if self._store.get_pending_revision(revision_id) is None:
            return self._report_failure(ErrorKind.NOT_FOUND, f"Revision {revision_id} not found")

        demo = self._is_demo()
        apply_locally: Callable[[str], SectionRevision | None]
        remote: Callable[[str], Awaitable[dict[str, Any]]]
        if action == "accept":
            apply_locally = self._store.accept_revision
            remote = self._adapter.accept_revision
        else:
            apply_locally = self._store.reject_revision
            remote = self._adapter.reject_revision

        self._processing.add(revision_id)
        try:
            if demo:
                revision = apply_locally(revision_id)
                self._sync_states[revision_id] = SyncState.CONFIRMED
                message = f"Revision {past}"
                self._notifier.notify(NotificationLevel.SUCCESS, message)
                return RevisionResult.ok(message, revision, SyncState.CONFIRMED)

            try:
                await remote(revision_id)
            except RevisionError as exc:
                return self._fail(exc, f"Failed to {verb} revision", ErrorLocation.REVISION_PANEL)

            revision = apply_locally(revision_id)
            if revision is None:
                # Resolved by a concurrent sync while the request was in flight.
                revision = self._store.get_revision(revision_id)
            if revision is None:
                LOGGER.warning(
                    "RevisionController: revision %s was %s remotely but is no longer in the store",
                    revision_id,
                    past,
                )
            self._sync_states[revision_id] = SyncState.TENTATIVE
            document_id = self.document_id
            if document_id:
                try:
                    await self._refetch(document_id)
                except RevisionError as exc:
                    LOGGER.warning(
                        "RevisionController: re-fetch after %s of %s failed: %s",
                        verb,
                        revision_id,
                        exc,
                    )

            state = self._sync_states[revision_id]
            message = f"Revision {past} successfully"
            if revision is None:
                message = f"Revision {past} on the server; it is no longer loaded locally"
            self._notifier.notify(NotificationLevel.SUCCESS, message)
            return RevisionResult.ok(message, revision, state)
        finally:
            self._processing.discard(revision_id)

    async def _refetch(self, document_id: str) -> None:
        remote_revisions = await self._adapter.get_revisions_by_document(document_id)
        self._store.sync_revisions(remote_revisions, document_id=document_id)
        resolved_remotely = {
            revision.id
            for revision in remote_revisions
            if revision.status is not RevisionStatus.PENDING
        }
        for revision_id, state in self._sync_states.items():
            if state is SyncState.TENTATIVE and revision_id in resolved_remotely:
                self._sync_states[revision_id] = SyncState.CONFIRMED

    def _is_demo(self) -> bool:
        return bool(self._mode.is_demo_mode or self._mode.using_mock_data)

    def _fail(self, exc: RevisionError, summary: str, location: str) -> RevisionResult:
        LOGGER.warning("RevisionController [%s]: %s: %s", location, summary, exc)
        message = f"{summary}: {exc.message}"
        return self._report_failure(error_kind_for(exc), message)

    def _report_failure(self, kind: ErrorKind, message: str) -> RevisionResult:
        self.error = message
        self._notifier.notify(NotificationLevel.ERROR, message)
        return RevisionResult.failed(kind, message)


__all__ = [
    "LoggingNotifier",
    "ModeProvider",
    "NotificationLevel",
    "Notifier",
    "RevisionController",
    "RevisionPersistence",
    "StaticModeProvider",
]
