"""Persistence adapter for the remote revision API.

Translates controller intent into HTTP calls and returns model objects. It
never touches the revision store; applying results is the controller's job.
Revision calls do not retry; a failed accept or reject is reported once and
left for the user to repeat.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping
from urllib.parse import quote

from ..errors import ValidationError
from ..models.document_models import RiskCategory, RiskLevel, SectionRevision, optional_enum
from .api_client import ApiClient

LOGGER = logging.getLogger(__name__)


def _segment(value: str) -> str:
    if not value:
        raise ValidationError(message="Identifier must not be empty")
    return quote(str(value), safe="")


class RevisionAdapter:
    """HTTP boundary for fetching and resolving section revisions."""

    __slots__ = ("_api",)

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    async def get_revisions_by_document(self, document_id: str) -> list[SectionRevision]:
        """Fetch every revision recorded for ``document_id``.

        Accepts either a bare JSON array or an object with a ``revisions``
        array.
        """
        data = await self._api.get(f"/api/documents/{_segment(document_id)}/revisions")
        if isinstance(data, Mapping):
            data = data.get("revisions")
        if not isinstance(data, list):
            raise ValidationError(
                message="Unexpected revisions payload",
                details={"document_id": document_id},
            )
        revisions = [SectionRevision.from_payload(item) for item in data]
        LOGGER.debug("Fetched %d revision(s) for document %s", len(revisions), document_id)
        return revisions

    async def accept_revision(self, revision_id: str) -> dict[str, Any]:
        return await self._resolve(revision_id, "accept")

    async def reject_revision(self, revision_id: str) -> dict[str, Any]:
        return await self._resolve(revision_id, "reject")

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
        """Submit a proposed change.

        Returns:
            The server-assigned revision id when the response carries one.
        """
        change: dict[str, Any] = {
            "sectionId": section_id,
            "originalText": original_text,
            "proposedText": proposed_text,
            "aiGenerated": ai_generated,
        }
        if comment is not None:
            change["comment"] = comment
        if risk_level:
            change["riskLevel"] = optional_enum(RiskLevel, risk_level).value
        if risk_category:
            change["riskCategory"] = optional_enum(RiskCategory, risk_category).value

        data = await self._api.post(
            "/api/contracts/revisions",
            {"documentId": document_id, "changes": [change]},
        )
        return _extract_revision_id(data)

    async def _resolve(self, revision_id: str, action: str) -> dict[str, Any]:
        data = await self._api.post(f"/api/revisions/{_segment(revision_id)}/{action}")
        LOGGER.debug("Revision %s %s acknowledged: %s", revision_id, action, data)
        if isinstance(data, Mapping):
            return dict(data)
        return {"id": revision_id}


def _extract_revision_id(data: Any) -> str | None:
    if not isinstance(data, Mapping):
        return None
    if data.get("id"):
        return str(data["id"])
    for key in ("revision", "revisions"):
        nested = data.get(key)
        if isinstance(nested, list) and nested:
            nested = nested[0]
        if isinstance(nested, Mapping) and nested.get("id"):
            return str(nested["id"])
    return None


__all__ = ["RevisionAdapter"]
