"""Domain layer for revision state.

Domain Managers:
    - RevisionStore: Current document, pending revisions and history
    - SectionEditor: Per-section editing state driven by store events

Both receive the store or event bus through their constructor and never
perform I/O.
"""

from __future__ import annotations

from .revision_store import RevisionStore
from .section_editing import EditableSection, SectionEditor

__all__ = ["EditableSection", "RevisionStore", "SectionEditor"]
