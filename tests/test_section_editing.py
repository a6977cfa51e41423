"""Tests for the SectionEditor view over the revision store."""

from __future__ import annotations

from unittest.mock import patch

from redline.domain.revision_store import RevisionStore
from redline.domain.section_editing import SectionEditor
from redline.models.document_models import RevisionStatus

from tests.helpers import make_document


def _text(store: RevisionStore, section_id: str) -> str:
    section = store.get_section(section_id)
    assert section is not None
    return section.text


class TestProposedEdits:
    def test_propose_then_reject_leaves_text_unchanged(self, store: RevisionStore) -> None:
        editor = SectionEditor(store)

        assert editor.propose_edit("s1", "X")
        assert editor.reject_edit("s1")

        section = editor.get("s1")
        assert section is not None
        assert section.text == "A"
        assert section.proposed_text is None
        assert _text(store, "s1") == "A"

    def test_accept_without_proposal_does_not_touch_store(self, store: RevisionStore) -> None:
        editor = SectionEditor(store)

        with patch.object(store, "update_document_section") as update:
            assert editor.accept_edit("s1") is False

        update.assert_not_called()
        assert _text(store, "s1") == "A"

    def test_accept_writes_staged_text_through(self, store: RevisionStore) -> None:
        editor = SectionEditor(store)
        editor.propose_edit("s1", "X")

        assert editor.accept_edit("s1")

        section = editor.get("s1")
        assert section is not None and section.text == "X" and section.proposed_text is None
        assert _text(store, "s1") == "X"
        assert store.revisions == ()

    def test_unknown_section(self, store: RevisionStore) -> None:
        editor = SectionEditor(store)

        assert editor.propose_edit("missing", "X") is False
        assert editor.reject_edit("missing") is False
        assert editor.start_editing("missing") is False
        assert editor.save_edit("missing", "X") is False


class TestDirectEdits:
    def test_save_edit_records_audit(self, store: RevisionStore) -> None:
        editor = SectionEditor(store)
        editor.start_editing("s1")

        assert editor.save_edit("s1", "Y")

        section = editor.get("s1")
        assert section is not None and section.is_editing is False and section.text == "Y"
        assert len(store.revisions) == 1
        audit = store.revisions[0]
        assert audit.status is RevisionStatus.ACCEPTED
        assert audit.original_text == "A"
        assert audit.proposed_text == "Y"

    def test_cancel_editing(self, store: RevisionStore) -> None:
        editor = SectionEditor(store)
        editor.start_editing("s1")

        assert editor.cancel_editing("s1")

        section = editor.get("s1")
        assert section is not None and section.is_editing is False
        assert _text(store, "s1") == "A"


class TestStoreEvents:
    def test_refreshes_on_document_change(self, store: RevisionStore) -> None:
        editor = SectionEditor(store)
        editor.propose_edit("s1", "X")

        store.set_current_document(make_document("doc-2", intro="Hello"))

        assert [section.section_id for section in editor.sections] == ["intro"]

    def test_tracks_accepted_revisions(self, store: RevisionStore) -> None:
        editor = SectionEditor(store)
        revision = store.propose_revision("s1", "B")
        assert revision is not None

        store.accept_revision(revision.id)

        section = editor.get("s1")
        assert section is not None and section.text == "B"

    def test_empty_without_document(self) -> None:
        editor = SectionEditor(RevisionStore())

        assert editor.sections == ()
        assert editor.has_document is False

    def test_highlight_passthrough(self, store: RevisionStore) -> None:
        editor = SectionEditor(store)

        editor.set_highlighted_section("s2")

        assert editor.highlighted_section == "s2"
        assert store.highlighted_section == "s2"
