"""Tests for the typed event bus."""

import logging

import pytest

from slideplay.player.interaction.events import (
    ButtonPayload,
    ChangeKind,
    EmptyPayload,
    EventBus,
    EventType,
    LocalChange,
)
from slideplay.shared.exceptions import InvalidArgumentError


class TestEventBus:
    """Test EventBus."""

    def test_subscribe_and_emit(self, event_bus):
        received = []
        event_bus.subscribe(EventType.CLICK, received.append)

        event = event_bus.emit(EventType.CLICK, ButtonPayload(0), source="viewport")

        assert received == [event]
        assert event.payload.button == 0
        assert event.source == "viewport"

    def test_priority_order(self, event_bus):
        order = []
        event_bus.subscribe(EventType.DRAG_START, lambda e: order.append("low"), priority=0)
        event_bus.subscribe(EventType.DRAG_START, lambda e: order.append("high"), priority=10)

        event_bus.emit(EventType.DRAG_START)

        assert order == ["high", "low"]

    def test_empty_payload_filled_in(self, event_bus):
        event = event_bus.emit(EventType.USER_CHANGE_STATE)
        assert isinstance(event.payload, EmptyPayload)

    def test_payload_type_checked(self, event_bus):
        with pytest.raises(InvalidArgumentError):
            event_bus.emit(EventType.CLICK, {"button": 0})

    def test_unknown_event_type_rejected(self, event_bus):
        with pytest.raises(InvalidArgumentError):
            event_bus.subscribe("click", lambda e: None)

    def test_handler_errors_are_isolated(self, event_bus, caplog):
        received = []

        def broken(event):
            raise RuntimeError("handler failure")

        event_bus.subscribe(EventType.LOCAL_CHANGE, broken, priority=1)
        event_bus.subscribe(EventType.LOCAL_CHANGE, received.append)

        with caplog.at_level(logging.ERROR):
            event_bus.emit(EventType.LOCAL_CHANGE, LocalChange(ChangeKind.PAUSE, True))

        assert len(received) == 1
        assert "handler failure" in caplog.text

    def test_unsubscribe(self, event_bus):
        received = []
        event_bus.subscribe(EventType.CLICK, received.append)

        assert event_bus.unsubscribe(EventType.CLICK, received.append)
        assert not event_bus.unsubscribe(EventType.CLICK, received.append)

        event_bus.emit(EventType.CLICK, ButtonPayload(2))
        assert received == []

    def test_unsubscribe_during_emit(self, event_bus):
        calls = []

        def once(event):
            calls.append("once")
            event_bus.unsubscribe(EventType.CLICK, once)

        event_bus.subscribe(EventType.CLICK, once)
        event_bus.subscribe(EventType.CLICK, lambda e: calls.append("always"))

        event_bus.emit(EventType.CLICK, ButtonPayload(0))
        event_bus.emit(EventType.CLICK, ButtonPayload(0))

        assert calls == ["once", "always", "always"]

    def test_history(self, event_bus):
        event_bus.emit(EventType.CLICK, ButtonPayload(0))
        event_bus.emit(EventType.DRAG_START)
        event_bus.emit(EventType.CLICK, ButtonPayload(2))

        clicks = event_bus.get_history(EventType.CLICK)
        assert [e.payload.button for e in clicks] == [0, 2]
        assert len(event_bus.get_history(limit=1)) == 1

    def test_history_is_bounded(self, event_bus):
        for _ in range(150):
            event_bus.emit(EventType.DRAG_START)
        assert len(event_bus.get_history()) == 100

    def test_clear_subscribers(self, event_bus):
        event_bus.subscribe(EventType.CLICK, lambda e: None)
        event_bus.subscribe(EventType.DRAG_END, lambda e: None)

        event_bus.clear_subscribers(EventType.CLICK)
        assert not event_bus.has_subscribers(EventType.CLICK)
        assert event_bus.has_subscribers(EventType.DRAG_END)

        event_bus.clear_subscribers()
        assert not event_bus.has_subscribers(EventType.DRAG_END)
