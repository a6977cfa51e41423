"""Revision store domain manager.

Holds the one canonical copy of document and revision state for a session:
the current document, resolved revisions (history), pending revisions and
the highlighted section. Every mutation is synchronous and completes before
any event is published, so listeners never observe a half-applied change.

Lookups that miss (unknown section, unknown or already resolved revision)
are logged and ignored rather than raised. Mutators return the affected
revision, or None when nothing was applied.
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..events import (
    DocumentChanged,
    EventBus,
    RevisionAccepted,
    RevisionAudited,
    RevisionProposed,
    RevisionRejected,
    RevisionsSynced,
    SectionHighlighted,
    SectionUpdated,
)
from ..models.document_models import (
    DEFAULT_AUTHOR,
    Document,
    DocumentSection,
    RevisionStatus,
    RiskCategory,
    RiskLevel,
    SectionRevision,
)

LOGGER = logging.getLogger(__name__)


class RevisionStore:
    """Domain manager for document sections and their revisions.

    Events Emitted:
        - DocumentChanged: When the current document is replaced or cleared
        - SectionHighlighted: When the highlighted section changes
        - SectionUpdated: When a section's text changes
        - RevisionProposed: When a pending revision is added
        - RevisionAccepted / RevisionRejected: When a pending revision resolves
        - RevisionAudited: When a direct edit is recorded
        - RevisionsSynced: After a server list is reconciled
    """

    def __init__(self, event_bus: EventBus | None = None) -> None:
        self._bus = event_bus or EventBus()
        self._document: Document | None = None
        self._history: list[SectionRevision] = []
        self._pending: list[SectionRevision] = []
        self._highlighted_section: str | None = None
        self._revision_session: str | None = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def event_bus(self) -> EventBus:
        return self._bus

    @property
    def current_document(self) -> Document | None:
        return self._document

    @property
    def highlighted_section(self) -> str | None:
        return self._highlighted_section

    @property
    def active_revision_session(self) -> str | None:
        return self._revision_session

    @property
    def pending_revisions(self) -> tuple[SectionRevision, ...]:
        """Pending revisions in proposal order."""
        return tuple(self._pending)

    @property
    def revisions(self) -> tuple[SectionRevision, ...]:
        """Resolved revisions in resolution order."""
        return tuple(self._history)

    def all_revisions(self) -> tuple[SectionRevision, ...]:
        """Return history followed by pending revisions."""
        return tuple(self._history) + tuple(self._pending)

    def get_revision(self, revision_id: str) -> SectionRevision | None:
        for revision in self._pending:
            if revision.id == revision_id:
                return revision
        for revision in self._history:
            if revision.id == revision_id:
                return revision
        return None

    def get_pending_revision(self, revision_id: str) -> SectionRevision | None:
        for revision in self._pending:
            if revision.id == revision_id:
                return revision
        return None

    def get_section(self, section_id: str) -> DocumentSection | None:
        if self._document is None:
            return None
        return self._document.find_section(section_id)

    def revisions_for_document(self, document_id: str) -> tuple[SectionRevision, ...]:
        return tuple(
            revision for revision in self.all_revisions() if revision.document_id == document_id
        )

    # ------------------------------------------------------------------
    # Document lifecycle
    # ------------------------------------------------------------------

    def set_current_document(self, document: Document | None) -> None:
        """Replace the current document wholesale.

        The highlight is always cleared. Pending revisions are dropped when
        the document identity changes; history is kept.
        """
        previous_id = self._document.id if self._document is not None else None
        new_id = document.id if document is not None else None

        self._document = document
        self._highlighted_section = None
        dropped = 0
        if previous_id != new_id and self._pending:
            dropped = len(self._pending)
            self._pending = []

        LOGGER.debug(
            "RevisionStore.set_current_document: document_id=%s, previous=%s, dropped_pending=%d",
            new_id,
            previous_id,
            dropped,
        )
        self._bus.publish(DocumentChanged(document_id=new_id, previous_document_id=previous_id))

    def clear_document(self) -> None:
        """Drop the document, every revision, the revision session and the highlight."""
        previous_id = self._document.id if self._document is not None else None
        self._document = None
        self._history = []
        self._pending = []
        self._highlighted_section = None
        self._revision_session = None
        LOGGER.debug("RevisionStore.clear_document: previous=%s", previous_id)
        self._bus.publish(DocumentChanged(document_id=None, previous_document_id=previous_id))

    def set_highlighted_section(self, section_id: str | None) -> None:
        self._highlighted_section = section_id
        self._bus.publish(SectionHighlighted(section_id=section_id))

    def start_revision_session(self, session_id: str) -> None:
        """Attribute subsequent proposals to ``session_id``."""
        LOGGER.debug("RevisionStore.start_revision_session: %s", session_id)
        self._revision_session = session_id

    def end_revision_session(self) -> None:
        LOGGER.debug("RevisionStore.end_revision_session: %s", self._revision_session)
        self._revision_session = None

    # ------------------------------------------------------------------
    # Section mutation
    # ------------------------------------------------------------------

    def update_document_section(
        self,
        section_id: str,
        new_text: str,
        record_audit: bool = False,
    ) -> SectionRevision | None:
        """Replace a section's text.

        Args:
            section_id: The section to update.
            new_text: The new authoritative text.
            record_audit: Append an already-accepted revision capturing the
                pre-update text before applying the change.

        Returns:
            The audit revision when ``record_audit`` is set and the section
            exists, otherwise None.
        """
        section = self.get_section(section_id)
        if section is None or self._document is None:
            LOGGER.warning(
                "RevisionStore.update_document_section: section not found, section_id=%s",
                section_id,
            )
            return None

        audit: SectionRevision | None = None
        if record_audit:
            audit = SectionRevision(
                section_id=section_id,
                original_text=section.text,
                proposed_text=new_text,
                document_id=self._document.id,
                ai_generated=False,
                status=RevisionStatus.ACCEPTED,
                created_by=self._revision_session or DEFAULT_AUTHOR,
            )
            self._history.append(audit)

        previous_text = section.text
        section.text = new_text

        LOGGER.debug(
            "RevisionStore.update_document_section: section_id=%s, audit=%s",
            section_id,
            audit.id if audit is not None else None,
        )
        if audit is not None:
            self._bus.publish(RevisionAudited(revision_id=audit.id, section_id=section_id))
        self._bus.publish(SectionUpdated(
            document_id=self._document.id,
            section_id=section_id,
            previous_text=previous_text,
            text=new_text,
        ))
        return audit

    # ------------------------------------------------------------------
    # Revision lifecycle
    # ------------------------------------------------------------------

    def propose_revision(
        self,
        section_id: str,
        proposed_text: str,
        ai_generated: bool = False,
        comment: str | None = None,
        risk_level: RiskLevel | str | None = None,
        *,
        risk_category: RiskCategory | str | None = None,
        revision_id: str | None = None,
    ) -> SectionRevision | None:
        """Add a pending revision against the section's current text.

        The proposed section becomes the highlighted section.

        Returns:
            The new revision, or None if the section does not exist.
        """
        section = self.get_section(section_id)
        if section is None or self._document is None:
            LOGGER.warning(
                "RevisionStore.propose_revision: section not found, section_id=%s",
                section_id,
            )
            return None

        revision = SectionRevision(
            section_id=section_id,
            original_text=section.text,
            proposed_text=proposed_text,
            id=revision_id,
            document_id=self._document.id,
            comment=comment,
            risk_level=risk_level,
            risk_category=risk_category,
            ai_generated=ai_generated,
            created_by=self._revision_session or DEFAULT_AUTHOR,
        )
        self._pending.append(revision)
        self._highlighted_section = section_id

        LOGGER.debug(
            "RevisionStore.propose_revision: revision_id=%s, section_id=%s, ai=%s",
            revision.id,
            section_id,
            ai_generated,
        )
        self._bus.publish(RevisionProposed(
            revision_id=revision.id,
            section_id=section_id,
            ai_generated=revision.ai_generated,
        ))
        self._bus.publish(SectionHighlighted(section_id=section_id))
        return revision

    def accept_revision(self, revision_id: str) -> SectionRevision | None:
        """Apply a pending revision's text and move it to history."""
        revision = self.get_pending_revision(revision_id)
        if revision is None:
            LOGGER.warning(
                "RevisionStore.accept_revision: pending revision not found, revision_id=%s",
                revision_id,
            )
            return None

        self.update_document_section(revision.section_id, revision.proposed_text)
        self._resolve(revision, RevisionStatus.ACCEPTED)
        self._bus.publish(RevisionAccepted(revision_id=revision.id, section_id=revision.section_id))
        return revision

    def reject_revision(self, revision_id: str) -> SectionRevision | None:
        """Move a pending revision to history without touching the document."""
        revision = self.get_pending_revision(revision_id)
        if revision is None:
            LOGGER.warning(
                "RevisionStore.reject_revision: pending revision not found, revision_id=%s",
                revision_id,
            )
            return None

        self._resolve(revision, RevisionStatus.REJECTED)
        self._bus.publish(RevisionRejected(revision_id=revision.id, section_id=revision.section_id))
        return revision

    def sync_revisions(
        self,
        revisions: Iterable[SectionRevision],
        *,
        document_id: str | None = None,
    ) -> None:
        """Reconcile a server revision list into local state.

        Revisions are matched by id. Local resolved revisions never revert.
        A server-resolved revision still pending locally goes through
        :meth:`accept_revision` or :meth:`reject_revision`. Unknown
        revisions are added; local revisions missing from the list are kept.
        """
        added = 0
        resolved = 0
        for incoming in revisions:
            local = self.get_revision(incoming.id)
            if local is None:
                if incoming.is_pending:
                    self._pending.append(incoming)
                else:
                    self._history.append(incoming)
                added += 1
                continue
            if not local.is_pending or incoming.is_pending:
                continue
            if incoming.status is RevisionStatus.ACCEPTED:
                self.accept_revision(local.id)
            else:
                self.reject_revision(local.id)
            resolved += 1

        LOGGER.debug(
            "RevisionStore.sync_revisions: document_id=%s, added=%d, resolved=%d",
            document_id,
            added,
            resolved,
        )
        self._bus.publish(RevisionsSynced(document_id=document_id, added=added, resolved=resolved))

    # ------------------------------------------------------------------
    # Internal Helpers
    # ------------------------------------------------------------------

    def _resolve(self, revision: SectionRevision, status: RevisionStatus) -> None:
        revision.resolve(status)
        self._pending = [item for item in self._pending if item.id != revision.id]
        self._history.append(revision)
        LOGGER.debug(
            "RevisionStore: revision_id=%s -> %s",
            revision.id,
            status.value,
        )


__all__ = ["RevisionStore"]
