"""Document and revision data model."""

from __future__ import annotations

from .document_models import (
    Document,
    DocumentSection,
    ParsedContent,
    RevisionStatus,
    RiskCategory,
    RiskLevel,
    SectionRevision,
)

__all__ = [
    "Document",
    "DocumentSection",
    "ParsedContent",
    "RevisionStatus",
    "RiskCategory",
    "RiskLevel",
    "SectionRevision",
]
