"""Unit tests for :mod:`pantry.ui.events`."""

from __future__ import annotations

import gc
import logging

import pytest

from pantry.ui.events import (
    EditModeChanged,
    Event,
    EventBus,
    ItemAdded,
    ItemRemoved,
    ListCleared,
    NoticePosted,
)


class TestEvents:
    """Tests for the event value objects."""

    def test_events_use_slots(self) -> None:
        event = ItemAdded(text="milk")
        assert hasattr(event, "__slots__")
        assert isinstance(event, Event)

    def test_events_compare_by_value(self) -> None:
        assert ItemRemoved(text="milk") == ItemRemoved(text="milk")
        assert ItemRemoved(text="milk") != ItemRemoved(text="eggs")

    def test_defaults(self) -> None:
        assert ListCleared().removed == 0
        assert EditModeChanged(editing=False).target is None
        notice = NoticePosted(message="Please input an item")
        assert notice.level == "warning"
        assert notice.error_code is None


class TestSubscription:
    """Tests for subscribe and unsubscribe."""

    def test_subscribe_tracks_counts_per_type(self) -> None:
        bus: EventBus[Event] = EventBus()

        bus.subscribe(ItemAdded, lambda e: None)
        bus.subscribe(ItemAdded, lambda e: None)
        bus.subscribe(ItemRemoved, lambda e: None)

        assert bus.handler_count(ItemAdded) == 2
        assert bus.handler_count(ItemRemoved) == 1
        assert bus.handler_count() == 3

    def test_unsubscribe_removes_one_registration(self) -> None:
        bus: EventBus[Event] = EventBus()
        received: list[str] = []

        def handler(event: ItemAdded) -> None:
            received.append(event.text)

        bus.subscribe(ItemAdded, handler)
        bus.subscribe(ItemAdded, handler)
        bus.unsubscribe(ItemAdded, handler)
        bus.publish(ItemAdded(text="milk"))

        assert received == ["milk"]

    def test_unsubscribe_unknown_handler_is_safe(self) -> None:
        bus: EventBus[Event] = EventBus()

        def handler(event: ItemAdded) -> None:
            pass

        bus.subscribe(ItemAdded, handler)
        bus.unsubscribe(ItemRemoved, handler)  # type: ignore[arg-type]
        bus.unsubscribe(ListCleared, handler)  # type: ignore[arg-type]

        assert bus.handler_count(ItemAdded) == 1

    def test_clear_removes_everything(self) -> None:
        bus: EventBus[Event] = EventBus()
        bus.subscribe(ItemAdded, lambda e: None)
        bus.subscribe(ListCleared, lambda e: None)

        bus.clear()

        assert bus.handler_count() == 0


class TestPublish:
    """Tests for event delivery."""

    def test_handlers_run_in_subscription_order(self) -> None:
        bus: EventBus[Event] = EventBus()
        order: list[str] = []

        bus.subscribe(ItemAdded, lambda e: order.append("first"))
        bus.subscribe(ItemAdded, lambda e: order.append("second"))
        bus.publish(ItemAdded(text="milk"))

        assert order == ["first", "second"]

    def test_only_exact_type_is_delivered(self) -> None:
        bus: EventBus[Event] = EventBus()
        added: list[Event] = []

        bus.subscribe(ItemAdded, added.append)
        bus.publish(ItemRemoved(text="milk"))

        assert added == []

    def test_publish_without_handlers_is_safe(self) -> None:
        EventBus().publish(ListCleared(removed=3))

    def test_failing_handler_is_logged_and_isolated(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        bus: EventBus[Event] = EventBus()
        received: list[str] = []

        def broken(event: ItemAdded) -> None:
            raise ValueError("boom")

        bus.subscribe(ItemAdded, broken)
        bus.subscribe(ItemAdded, lambda e: received.append(e.text))

        with caplog.at_level(logging.ERROR, logger="pantry.ui.events"):
            bus.publish(ItemAdded(text="milk"))

        assert received == ["milk"]
        assert "broken" in caplog.text


class TestWeakReferences:
    """Bound methods do not keep their owner alive."""

    def test_dead_subscriber_is_dropped(self) -> None:
        bus: EventBus[Event] = EventBus()
        received: list[str] = []

        class Window:
            def on_added(self, event: ItemAdded) -> None:
                received.append(event.text)

        window = Window()
        bus.subscribe(ItemAdded, window.on_added)
        bus.publish(ItemAdded(text="milk"))

        del window
        gc.collect()
        bus.publish(ItemAdded(text="eggs"))

        assert received == ["milk"]
        assert bus.handler_count(ItemAdded) == 0

    def test_bound_method_can_unsubscribe(self) -> None:
        bus: EventBus[Event] = EventBus()

        class Window:
            def on_added(self, event: ItemAdded) -> None:
                pass

        window = Window()
        bus.subscribe(ItemAdded, window.on_added)
        bus.unsubscribe(ItemAdded, window.on_added)

        assert bus.handler_count(ItemAdded) == 0

    def test_plain_functions_are_held_strongly(self) -> None:
        bus: EventBus[Event] = EventBus()
        received: list[str] = []

        def handler(event: ItemAdded) -> None:
            received.append(event.text)

        bus.subscribe(ItemAdded, handler)
        gc.collect()
        bus.publish(ItemAdded(text="milk"))

        assert received == ["milk"]
