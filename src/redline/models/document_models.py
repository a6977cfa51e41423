"""Dataclasses representing documents, sections and section revisions.

These are the value types shared by the store, the controller and the
persistence adapter. Wire payloads use camelCase keys; ``to_payload`` and
``from_payload`` translate between the two shapes.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping

from ..errors import InvalidTransitionError, ValidationError

DEFAULT_AUTHOR = "current-user"
_FLAG_STRINGS = {"true": True, "false": False}


def _utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""

    return datetime.now(timezone.utc)


def new_revision_id() -> str:
    """Return a locally generated revision identifier."""

    return f"rev-{uuid.uuid4().hex[:12]}"


def parse_timestamp(value: Any) -> datetime:
    """Coerce an ISO string, epoch millis or datetime into an aware datetime."""

    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if isinstance(value, str) and value:
        text = value[:-1] + "+00:00" if value.endswith("Z") else value
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValidationError(message=f"Invalid timestamp: {value!r}") from exc
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return _utcnow()


class RevisionStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not RevisionStatus.PENDING


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskCategory(str, Enum):
    LEGAL = "legal"
    FINANCIAL = "financial"
    CLARITY = "clarity"
    RESTRICTIVE = "restrictive"
    OTHER = "other"


def parse_flag(value: Any, *, field_name: str = "value") -> bool:
    """Read a wire boolean; accepts real bools and the strings ``true``/``false``."""

    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _FLAG_STRINGS:
        return _FLAG_STRINGS[value.strip().lower()]
    raise ValidationError(message=f"Invalid boolean for {field_name}: {value!r}")


def optional_enum(enum_type: type[Enum], value: Any) -> Any:
    if value is None or value == "":
        return None
    try:
        return enum_type(value)
    except ValueError as exc:
        raise ValidationError(message=f"Invalid {enum_type.__name__}: {value!r}") from exc


@dataclass(slots=True)
class DocumentSection:
    """A discrete, independently revisable block of document text."""

    id: str
    text: str = ""
    title: str | None = None
    page_number: int = 1
    position: dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "pageNumber": self.page_number,
            "position": dict(self.position),
        }
        if self.title is not None:
            payload["title"] = self.title
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "DocumentSection":
        return cls(
            id=str(payload["id"]),
            text=str(payload.get("text") or ""),
            title=payload.get("title"),
            page_number=int(payload.get("pageNumber") or 1),
            position=dict(payload.get("position") or {}),
        )


@dataclass(slots=True)
class ParsedContent:
    sections: list[DocumentSection] = field(default_factory=list)


@dataclass(slots=True)
class Document:
    """A loaded document and its parsed sections."""

    id: str
    name: str = ""
    parsed_content: ParsedContent | None = None

    @property
    def sections(self) -> list[DocumentSection]:
        """Return the parsed sections, or an empty list when unparsed."""

        if self.parsed_content is None:
            return []
        return self.parsed_content.sections

    def find_section(self, section_id: str) -> DocumentSection | None:
        for section in self.sections:
            if section.id == section_id:
                return section
        return None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"id": self.id, "name": self.name}
        if self.parsed_content is not None:
            payload["parsedContent"] = {
                "sections": [section.to_payload() for section in self.sections]
            }
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Document":
        parsed = payload.get("parsedContent")
        parsed_content = None
        if isinstance(parsed, Mapping):
            parsed_content = ParsedContent(
                sections=[DocumentSection.from_payload(item) for item in parsed.get("sections") or ()]
            )
        return cls(
            id=str(payload["id"]),
            name=str(payload.get("name") or ""),
            parsed_content=parsed_content,
        )


@dataclass(slots=True, init=False)
class SectionRevision:
    """A proposed change to one section's text.

    ``original_text`` is captured once at construction and exposed read-only.
    ``status`` only moves through :meth:`resolve`, which permits a single
    transition out of ``pending``.
    """

    id: str
    section_id: str
    proposed_text: str
    document_id: str | None
    comment: str | None
    risk_level: RiskLevel | None
    risk_category: RiskCategory | None
    ai_generated: bool
    created_at: datetime
    created_by: str
    _original_text: str
    _status: RevisionStatus

    def __init__(
        self,
        section_id: str,
        original_text: str,
        proposed_text: str,
        *,
        id: str | None = None,
        document_id: str | None = None,
        comment: str | None = None,
        risk_level: RiskLevel | str | None = None,
        risk_category: RiskCategory | str | None = None,
        ai_generated: bool = False,
        status: RevisionStatus | str = RevisionStatus.PENDING,
        created_at: datetime | None = None,
        created_by: str = DEFAULT_AUTHOR,
    ) -> None:
        self.id = id or new_revision_id()
        self.section_id = section_id
        self.proposed_text = proposed_text
        self.document_id = document_id
        self.comment = comment
        self.risk_level = optional_enum(RiskLevel, risk_level)
        self.risk_category = optional_enum(RiskCategory, risk_category)
        self.ai_generated = bool(ai_generated)
        self.created_at = created_at or _utcnow()
        self.created_by = created_by
        self._original_text = original_text
        self._status = RevisionStatus(status)

    def __repr__(self) -> str:
        return (
            f"SectionRevision(id={self.id!r}, section_id={self.section_id!r}, "
            f"status={self._status.value!r}, ai_generated={self.ai_generated})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SectionRevision):
            return NotImplemented
        return self.to_payload() == other.to_payload()

    @property
    def original_text(self) -> str:
        return self._original_text

    @property
    def status(self) -> RevisionStatus:
        return self._status

    @property
    def is_pending(self) -> bool:
        return self._status is RevisionStatus.PENDING

    def resolve(self, status: RevisionStatus) -> None:
        """Move a pending revision to ``accepted`` or ``rejected``.

        Raises:
            InvalidTransitionError: If the revision is already resolved or
                ``status`` is not terminal.
        """

        target = RevisionStatus(status)
        if not target.is_terminal:
            raise InvalidTransitionError(
                message=f"Revision {self.id} cannot move back to pending",
                details={"revision_id": self.id, "status": self._status.value},
            )
        if self._status.is_terminal:
            raise InvalidTransitionError(
                message=f"Revision {self.id} is already {self._status.value}",
                details={"revision_id": self.id, "status": self._status.value},
            )
        self._status = target

    def to_payload(self) -> dict[str, Any]:
        """Return the camelCase wire representation."""

        payload: dict[str, Any] = {
            "id": self.id,
            "sectionId": self.section_id,
            "originalText": self._original_text,
            "proposedText": self.proposed_text,
            "aiGenerated": self.ai_generated,
            "status": self._status.value,
            "createdAt": self.created_at.isoformat(),
            "createdBy": self.created_by,
        }
        if self.document_id is not None:
            payload["documentId"] = self.document_id
        if self.comment is not None:
            payload["comment"] = self.comment
        if self.risk_level is not None:
            payload["riskLevel"] = self.risk_level.value
        if self.risk_category is not None:
            payload["riskCategory"] = self.risk_category.value
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SectionRevision":
        """Build a revision from a server payload.

        Raises:
            ValidationError: If required keys are missing or values are invalid.
        """

        if not isinstance(payload, Mapping):
            raise ValidationError(
                message="Revision payload must be an object",
                details={"payload_type": type(payload).__name__},
            )
        try:
            section_id = payload["sectionId"]
        except KeyError as exc:
            raise ValidationError(message="Revision payload is missing sectionId") from exc
        status = payload.get("status") or RevisionStatus.PENDING.value
        try:
            status = RevisionStatus(status)
        except ValueError as exc:
            raise ValidationError(message=f"Invalid revision status: {status!r}") from exc
        revision_id = payload.get("id")
        return cls(
            section_id=str(section_id),
            original_text=str(payload.get("originalText") or ""),
            proposed_text=str(payload.get("proposedText") or ""),
            id=str(revision_id) if revision_id is not None else None,
            document_id=payload.get("documentId"),
            comment=payload.get("comment"),
            risk_level=payload.get("riskLevel"),
            risk_category=payload.get("riskCategory"),
            ai_generated=parse_flag(payload.get("aiGenerated"), field_name="aiGenerated"),
            status=status,
            created_at=parse_timestamp(payload.get("createdAt")),
            created_by=str(payload.get("createdBy") or DEFAULT_AUTHOR),
        )


__all__ = [
    "DEFAULT_AUTHOR",
    "Document",
    "DocumentSection",
    "ParsedContent",
    "RevisionStatus",
    "RiskCategory",
    "RiskLevel",
    "SectionRevision",
    "new_revision_id",
    "optional_enum",
    "parse_flag",
    "parse_timestamp",
]
