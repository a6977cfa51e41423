"""Per-section editing view over the revision store.

Mirrors the current document's sections with two pieces of local-only
state per section: staged proposed text and a direct-editing flag. Staging
never touches the document; only ``accept_edit`` and ``save_edit`` write
through to the store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..events import DocumentChanged, SectionUpdated

if TYPE_CHECKING:  # pragma: no cover
    from .revision_store import RevisionStore

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class EditableSection:
    """A section as presented to the editor, with staged edit state."""

    section_id: str
    text: str
    title: str | None = None
    page_number: int = 1
    is_editing: bool = False
    proposed_text: str | None = None


class SectionEditor:
    """Local editing state for the sections of the current document."""

    def __init__(self, store: RevisionStore) -> None:
        self._store = store
        self._sections: dict[str, EditableSection] = {}
        self._store.event_bus.subscribe(DocumentChanged, self._on_document_changed)
        self._store.event_bus.subscribe(SectionUpdated, self._on_section_updated)
        self.refresh()

    @property
    def sections(self) -> tuple[EditableSection, ...]:
        return tuple(self._sections.values())

    @property
    def has_document(self) -> bool:
        return self._store.current_document is not None

    @property
    def highlighted_section(self) -> str | None:
        return self._store.highlighted_section

    def set_highlighted_section(self, section_id: str | None) -> None:
        self._store.set_highlighted_section(section_id)

    def get(self, section_id: str) -> EditableSection | None:
        return self._sections.get(section_id)

    def refresh(self) -> None:
        """Rebuild the view from the store, discarding staged state."""
        document = self._store.current_document
        if document is None or not document.sections:
            LOGGER.debug("SectionEditor.refresh: no document sections")
            self._sections = {}
            return
        self._sections = {
            section.id: EditableSection(
                section_id=section.id,
                text=section.text or "",
                title=section.title,
                page_number=section.page_number,
            )
            for section in document.sections
        }
        LOGGER.debug("SectionEditor.refresh: %d section(s)", len(self._sections))

    # ------------------------------------------------------------------
    # Proposed edits
    # ------------------------------------------------------------------

    def propose_edit(self, section_id: str, new_text: str) -> bool:
        """Stage ``new_text`` for a section without changing the document."""
        section = self._sections.get(section_id)
        if section is None:
            LOGGER.warning("SectionEditor.propose_edit: unknown section_id=%s", section_id)
            return False
        section.proposed_text = new_text
        return True

    def accept_edit(self, section_id: str) -> bool:
        """Write staged text through to the store.

        Returns:
            False, without calling the store, when nothing is staged.
        """
        section = self._sections.get(section_id)
        if section is None or not section.proposed_text:
            LOGGER.debug("SectionEditor.accept_edit: no proposed text for %s", section_id)
            return False
        proposed = section.proposed_text
        self._store.update_document_section(section_id, proposed)
        section.text = proposed
        section.proposed_text = None
        return True

    def reject_edit(self, section_id: str) -> bool:
        section = self._sections.get(section_id)
        if section is None:
            return False
        section.proposed_text = None
        return True

    # ------------------------------------------------------------------
    # Direct edits
    # ------------------------------------------------------------------

    def start_editing(self, section_id: str) -> bool:
        section = self._sections.get(section_id)
        if section is None:
            return False
        section.is_editing = True
        return True

    def save_edit(self, section_id: str, new_text: str) -> bool:
        """Apply a direct edit, recorded as an already-accepted revision."""
        section = self._sections.get(section_id)
        if section is None:
            LOGGER.warning("SectionEditor.save_edit: unknown section_id=%s", section_id)
            return False
        self._store.update_document_section(section_id, new_text, record_audit=True)
        section.text = new_text
        section.is_editing = False
        return True

    def cancel_editing(self, section_id: str) -> bool:
        section = self._sections.get(section_id)
        if section is None:
            return False
        section.is_editing = False
        return True

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_document_changed(self, event: DocumentChanged) -> None:
        self.refresh()

    def _on_section_updated(self, event: SectionUpdated) -> None:
        section = self._sections.get(event.section_id)
        if section is not None:
            section.text = event.text


__all__ = ["EditableSection", "SectionEditor"]
