"""Unit tests for :mod:`redline.events`."""

from __future__ import annotations

import gc
from dataclasses import dataclass

from redline.events import Event, EventBus, RevisionProposed


@dataclass(slots=True)
class SampleEvent(Event):
    message: str
    value: int = 0


@dataclass(slots=True)
class AnotherEvent(Event):
    data: str


class _Listener:
    def __init__(self) -> None:
        self.received: list[SampleEvent] = []

    def on_sample(self, event: SampleEvent) -> None:
        self.received.append(event)


class TestEventBus:
    def test_publish_reaches_handlers_in_order(self) -> None:
        bus: EventBus[Event] = EventBus()
        calls: list[str] = []

        bus.subscribe(SampleEvent, lambda e: calls.append(f"first:{e.message}"))
        bus.subscribe(SampleEvent, lambda e: calls.append(f"second:{e.message}"))
        bus.publish(SampleEvent(message="hi"))

        assert calls == ["first:hi", "second:hi"]

    def test_event_types_are_isolated(self) -> None:
        bus: EventBus[Event] = EventBus()
        received: list[Event] = []

        bus.subscribe(AnotherEvent, received.append)
        bus.publish(SampleEvent(message="ignored"))

        assert received == []

    def test_unsubscribe_removes_handler(self) -> None:
        bus: EventBus[Event] = EventBus()
        received: list[Event] = []

        def handler(event: SampleEvent) -> None:
            received.append(event)

        bus.subscribe(SampleEvent, handler)
        bus.unsubscribe(SampleEvent, handler)
        bus.unsubscribe(AnotherEvent, handler)
        bus.publish(SampleEvent(message="x"))

        assert received == []
        assert bus.handler_count() == 0

    def test_failing_handler_does_not_stop_others(self) -> None:
        bus: EventBus[Event] = EventBus()
        received: list[Event] = []

        def broken(event: SampleEvent) -> None:
            raise RuntimeError("boom")

        bus.subscribe(SampleEvent, broken)
        bus.subscribe(SampleEvent, received.append)
        bus.publish(SampleEvent(message="x"))

        assert len(received) == 1

    def test_bound_methods_are_held_weakly(self) -> None:
        bus: EventBus[Event] = EventBus()
        listener = _Listener()
        bus.subscribe(SampleEvent, listener.on_sample)

        bus.publish(SampleEvent(message="alive"))
        assert len(listener.received) == 1

        del listener
        gc.collect()
        bus.publish(SampleEvent(message="gone"))

        assert bus.handler_count(SampleEvent) == 0

    def test_clear(self) -> None:
        bus: EventBus[Event] = EventBus()
        bus.subscribe(RevisionProposed, lambda e: None)

        bus.clear()

        assert bus.handler_count() == 0
