"""Shared test helpers and stub classes.

Import from here instead of duplicating these classes in individual test files:

    from tests.helpers import FakeAdapter, RecordingNotifier, make_document
"""

from __future__ import annotations

from typing import Any

import httpx

from redline.application.revision_ops import NotificationLevel
from redline.models.document_models import Document, DocumentSection, ParsedContent, SectionRevision


def make_document(document_id: str = "doc-1", **texts: str) -> Document:
    """Build a document whose sections are given as ``section_id="text"`` keywords."""

    if not texts:
        texts = {"s1": "A", "s2": "Second clause."}
    sections = [
        DocumentSection(id=section_id, text=text, title=f"Title {section_id}")
        for section_id, text in texts.items()
    ]
    return Document(id=document_id, name=f"{document_id}.pdf", parsed_content=ParsedContent(sections=sections))


def json_response(status_code: int, payload: Any) -> httpx.Response:
    return httpx.Response(status_code, json=payload)


class RecordingNotifier:
    """Notifier stub that keeps every message it receives."""

    def __init__(self) -> None:
        self.messages: list[tuple[NotificationLevel, str]] = []

    def notify(self, level: NotificationLevel, message: str) -> None:
        self.messages.append((level, message))

    @property
    def errors(self) -> list[str]:
        return [message for level, message in self.messages if level is NotificationLevel.ERROR]

    @property
    def successes(self) -> list[str]:
        return [message for level, message in self.messages if level is NotificationLevel.SUCCESS]


class FakeAdapter:
    """In-memory stand-in for the revision adapter that records every call.

    Set ``failures[name]`` to an exception to make that call raise; ``name`` is
    one of ``get``, ``accept``, ``reject`` or ``submit``.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.remote_revisions: list[SectionRevision] = []
        self.failures: dict[str, Exception] = {}
        self.submitted_id: str | None = "rev-server-1"

    async def get_revisions_by_document(self, document_id: str) -> list[SectionRevision]:
        self.calls.append(("get", document_id))
        self._maybe_fail("get")
        return list(self.remote_revisions)

    async def accept_revision(self, revision_id: str) -> dict[str, Any]:
        self.calls.append(("accept", revision_id))
        self._maybe_fail("accept")
        return {"id": revision_id, "status": "accepted"}

    async def reject_revision(self, revision_id: str) -> dict[str, Any]:
        self.calls.append(("reject", revision_id))
        self._maybe_fail("reject")
        return {"id": revision_id, "status": "rejected"}

    async def submit_revision(
        self,
        document_id: str,
        section_id: str,
        original_text: str,
        proposed_text: str,
        **kwargs: Any,
    ) -> str | None:
        self.calls.append(("submit", (document_id, section_id, original_text, proposed_text, kwargs)))
        self._maybe_fail("submit")
        return self.submitted_id

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def _maybe_fail(self, name: str) -> None:
        failure = self.failures.get(name)
        if failure is not None:
            raise failure
