"""Event bus and revision events.

The store publishes an event after every mutation so that view models and
other listeners can re-derive their state without polling.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar
from weakref import WeakMethod

logger = logging.getLogger(__name__)

E = TypeVar("E", bound="Event")

Handler = Callable[[E], None]


@dataclass(slots=True)
class Event:
    """Base class for all events published on the bus."""

    pass


# =============================================================================
# Document Events
# =============================================================================


@dataclass(slots=True)
class DocumentChanged(Event):
    """Emitted when the current document is replaced or cleared.

    Attributes:
        document_id: The new document's id, or None when cleared.
        previous_document_id: The replaced document's id, if any.
    """

    document_id: str | None
    previous_document_id: str | None = None


@dataclass(slots=True)
class SectionUpdated(Event):
    """Emitted when a section's authoritative text changes."""

    document_id: str
    section_id: str
    previous_text: str
    text: str


@dataclass(slots=True)
class SectionHighlighted(Event):
    section_id: str | None


# =============================================================================
# Revision Events
# =============================================================================


@dataclass(slots=True)
class RevisionProposed(Event):
    """Emitted when a new pending revision is added to the store.

    Attributes:
        revision_id: The id of the new revision.
        section_id: The section the revision targets.
        ai_generated: Whether the proposal came from an automated suggestion.
    """

    revision_id: str
    section_id: str
    ai_generated: bool


@dataclass(slots=True)
class RevisionAccepted(Event):
    revision_id: str
    section_id: str


@dataclass(slots=True)
class RevisionRejected(Event):
    revision_id: str
    section_id: str


@dataclass(slots=True)
class RevisionAudited(Event):
    """Emitted when a direct edit is recorded as an already-accepted revision."""

    revision_id: str
    section_id: str


@dataclass(slots=True)
class RevisionsSynced(Event):
    """Emitted after a server revision list has been reconciled into the store.

    Attributes:
        document_id: The document the list belongs to.
        added: Number of revisions that were unknown locally.
        resolved: Number of local pending revisions resolved by the server.
    """

    document_id: str | None
    added: int
    resolved: int


class EventBus(Generic[E]):
    """A typed publish-subscribe event bus.

    Bound-method handlers are held through :class:`weakref.WeakMethod` so a
    view model that goes away stops receiving events without unsubscribing.
    Plain functions are held strongly.

    Thread Safety:
        Not thread-safe. Publish from the event loop thread only.
    """

    __slots__ = ("_handlers",)

    def __init__(self) -> None:
        self._handlers: defaultdict[type[Event], list[_HandlerRef]] = defaultdict(list)

    def subscribe(self, event_type: type[E], handler: Handler[E]) -> None:
        """Register ``handler`` for events of exactly ``event_type``."""
        self._handlers[event_type].append(_HandlerRef.create(handler))
        logger.debug(
            "Subscribed handler %s to event type %s",
            _handler_name(handler),
            event_type.__name__,
        )

    def unsubscribe(self, event_type: type[E], handler: Handler[E]) -> None:
        """Remove the first registration of ``handler``; unknown handlers are ignored."""
        handlers = self._handlers.get(event_type)
        if handlers is None:
            return
        for index, handler_ref in enumerate(handlers):
            if handler_ref.matches(handler):
                handlers.pop(index)
                return

    def publish(self, event: E) -> None:
        """Invoke every live handler for ``event`` in registration order.

        A handler that raises is logged and does not stop the remaining
        handlers.
        """
        event_type = type(event)
        handlers = self._handlers.get(event_type)
        if not handlers:
            logger.debug("No handlers for event type %s", event_type.__name__)
            return

        logger.debug("Publishing %s to %d handler(s)", event_type.__name__, len(handlers))
        dead: list[_HandlerRef] = []
        for handler_ref in list(handlers):
            handler = handler_ref.resolve()
            if handler is None:
                dead.append(handler_ref)
                continue
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Handler %s raised exception for event %s",
                    _handler_name(handler),
                    event_type.__name__,
                )

        if dead:
            handlers[:] = [ref for ref in handlers if ref not in dead]

    def clear(self) -> None:
        self._handlers.clear()

    def handler_count(self, event_type: type[E] | None = None) -> int:
        if event_type is not None:
            return len(self._handlers.get(event_type, []))
        return sum(len(handlers) for handlers in self._handlers.values())


class _HandlerRef:
    """Weak reference for bound methods, strong reference for everything else."""

    __slots__ = ("_ref", "_is_weak")

    def __init__(self, handler_ref: Any, is_weak: bool) -> None:
        self._ref = handler_ref
        self._is_weak = is_weak

    @classmethod
    def create(cls, handler: Handler) -> _HandlerRef:
        if hasattr(handler, "__self__") and hasattr(handler, "__func__"):
            try:
                return cls(WeakMethod(handler), is_weak=True)
            except TypeError:
                pass
        return cls(handler, is_weak=False)

    def resolve(self) -> Handler | None:
        if self._is_weak:
            return self._ref()
        return self._ref

    def matches(self, handler: Handler) -> bool:
        resolved = self.resolve()
        if resolved is None:
            return False
        return resolved == handler


def _handler_name(handler: Handler) -> str:
    if hasattr(handler, "__self__") and hasattr(handler, "__func__"):
        return f"{type(handler.__self__).__name__}.{handler.__func__.__name__}"
    return getattr(handler, "__name__", repr(handler))


__all__ = [
    "Event",
    "EventBus",
    "Handler",
    "DocumentChanged",
    "SectionUpdated",
    "SectionHighlighted",
    "RevisionProposed",
    "RevisionAccepted",
    "RevisionRejected",
    "RevisionAudited",
    "RevisionsSynced",
]
