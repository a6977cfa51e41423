"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from redline.domain.revision_store import RevisionStore
from redline.events import EventBus
from redline.models.document_models import Document
from tests.helpers import FakeAdapter, RecordingNotifier, make_document


@pytest.fixture
def document() -> Document:
    return make_document()


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def store(event_bus: EventBus, document: Document) -> RevisionStore:
    revision_store = RevisionStore(event_bus)
    revision_store.set_current_document(document)
    return revision_store


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def adapter() -> FakeAdapter:
    return FakeAdapter()
