"""Read-only view model for the revision panel.

Derives tab/category filtered lists, per-section groups and counts from the
revision store. The only state it owns is the panel's selection (active tab
and category filter); everything else is recomputed on access.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Literal

from ..models.document_models import RevisionStatus, SectionRevision, parse_timestamp

if TYPE_CHECKING:  # pragma: no cover
    from ..application.revision_ops import RevisionController
    from ..domain.revision_store import RevisionStore


PanelTab = Literal["pending", "history"]
CategoryFilter = Literal["all", "ai", "user"]
StatusFilter = Literal["all", "pending", "accepted", "rejected"]

_TABS: tuple[str, ...] = ("pending", "history")
_FILTERS: tuple[str, ...] = ("all", "ai", "user")
_STATUS_FILTERS: tuple[str, ...] = ("all", "pending", "accepted", "rejected")


@dataclass(slots=True)
class RevisionGroup:
    """Revisions for one section, in the order they appear in the filtered list."""

    section_id: str
    section_title: str | None = None
    revisions: list[SectionRevision] = field(default_factory=list)


class PanelViewModel:
    """Derived views over the revision store for the revision panel."""

    def __init__(
        self,
        store: RevisionStore,
        controller: RevisionController | None = None,
        *,
        only_ai: bool = False,
        scope_to_document: bool = False,
    ) -> None:
        self._store = store
        self._controller = controller
        self._only_ai = only_ai
        self._scope_to_document = scope_to_document
        self._active_tab: PanelTab = "pending"
        self._filter: CategoryFilter = "all"
        self._status_filter: StatusFilter = "all"

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    @property
    def active_tab(self) -> PanelTab:
        return self._active_tab

    @property
    def filter(self) -> CategoryFilter:
        return self._filter

    def handle_tab_change(self, tab: PanelTab) -> None:
        if tab not in _TABS:
            raise ValueError(f"Unknown panel tab: {tab!r}")
        self._active_tab = tab

    def handle_filter_change(self, filter_option: CategoryFilter) -> None:
        if filter_option not in _FILTERS:
            raise ValueError(f"Unknown revision filter: {filter_option!r}")
        self._filter = filter_option

    @property
    def status_filter(self) -> StatusFilter:
        return self._status_filter

    def handle_status_filter_change(self, status: StatusFilter) -> None:
        """Narrow the active tab to one status; ``all`` removes the narrowing."""
        if status not in _STATUS_FILTERS:
            raise ValueError(f"Unknown status filter: {status!r}")
        self._status_filter = status

    @property
    def highlighted_section(self) -> str | None:
        return self._store.highlighted_section

    def handle_revision_click(self, section_id: str | None) -> None:
        """Highlight the section a clicked revision belongs to."""
        if section_id:
            self._store.set_highlighted_section(section_id)

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def revisions(self) -> tuple[SectionRevision, ...]:
        """The full collection the panel derives from."""
        revisions = self._store.all_revisions()
        if self._scope_to_document:
            document = self._store.current_document
            if document is None:
                return ()
            revisions = tuple(item for item in revisions if item.document_id == document.id)
        return revisions

    @property
    def filtered_revisions(self) -> list[SectionRevision]:
        """Revisions for the active tab and filter, newest first."""
        result = list(self.revisions)

        if self._active_tab == "pending":
            result = [rev for rev in result if rev.status is RevisionStatus.PENDING]
        else:
            result = [rev for rev in result if rev.status is not RevisionStatus.PENDING]

        if self._status_filter != "all":
            wanted = RevisionStatus(self._status_filter)
            result = [rev for rev in result if rev.status is wanted]

        if self._filter == "ai":
            result = [rev for rev in result if rev.ai_generated]
        elif self._filter == "user":
            result = [rev for rev in result if not rev.ai_generated]

        if self._only_ai:
            result = [rev for rev in result if rev.ai_generated]

        result.sort(key=lambda rev: rev.created_at, reverse=True)
        return result

    @property
    def revision_groups(self) -> list[RevisionGroup]:
        groups: dict[str, RevisionGroup] = {}
        for revision in self.filtered_revisions:
            group = groups.get(revision.section_id)
            if group is None:
                section = self._store.get_section(revision.section_id)
                group = RevisionGroup(
                    section_id=revision.section_id,
                    section_title=section.title if section is not None else None,
                )
                groups[revision.section_id] = group
            group.revisions.append(revision)
        return list(groups.values())

    @property
    def pending_count(self) -> int:
        return self._count(RevisionStatus.PENDING)

    @property
    def accepted_count(self) -> int:
        return self._count(RevisionStatus.ACCEPTED)

    @property
    def rejected_count(self) -> int:
        return self._count(RevisionStatus.REJECTED)

    # ------------------------------------------------------------------
    # Controller passthroughs
    # ------------------------------------------------------------------

    def is_processing(self, revision_id: str | None) -> bool:
        """Whether the accept/reject controls for a revision should be disabled."""
        if self._controller is None or not revision_id:
            return False
        return self._controller.is_processing(revision_id)

    @property
    def is_loading(self) -> bool:
        return self._controller.is_loading if self._controller is not None else False

    @property
    def error(self) -> str | None:
        return self._controller.error if self._controller is not None else None

    @staticmethod
    def format_date(value: datetime | str | None) -> str:
        """Format a timestamp as e.g. ``Mar 4, 02:15 PM``."""
        if not value:
            return ""
        moment = parse_timestamp(value)
        return f"{moment.strftime('%b')} {moment.day}, {moment.strftime('%I:%M %p')}"

    def _count(self, status: RevisionStatus) -> int:
        return sum(1 for revision in self.revisions if revision.status is status)


__all__ = ["CategoryFilter", "PanelTab", "PanelViewModel", "RevisionGroup", "StatusFilter"]
