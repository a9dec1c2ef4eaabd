"""
Event bus system for decoupling the viewport, player and UI controller.

Each event type has a fixed payload dataclass; ``emit`` checks the payload
against the type so subscribers can rely on its fields.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from slideplay.shared.exceptions import InvalidArgumentError


logger = logging.getLogger(__name__)


class EventType(Enum):
    """Outbound event types of the playback core."""

    # Pointer gestures (source: viewport / ui)
    MOUSE_DOWN = auto()
    CLICK = auto()
    DRAG_START = auto()
    DRAG_END = auto()
    USER_CHANGE_STATE = auto()

    # Semantic operations, mirrored by presenter consoles and remotes
    LOCAL_CHANGE = auto()

    # Player state
    STATE_CHANGE = auto()
    FRAME_CHANGE = auto()
    BLANK_SCREEN_CHANGE = auto()


class ChangeKind(Enum):
    """Kinds of semantic operation reported by LOCAL_CHANGE."""

    MOVE_TO_FRAME = "moveToFrame"
    JUMP_TO_FRAME = "jumpToFrame"
    PREVIEW_FRAME = "previewFrame"
    INTERACTIVE = "interactive"
    PAUSE = "pause"
    BLANK_SCREEN = "blankScreen"


# =============================================================================
# Payloads
# =============================================================================


@dataclass(frozen=True)
class ButtonPayload:
    """Mouse button index (0 left, 1 middle, 2 right)."""

    button: int


@dataclass(frozen=True)
class EmptyPayload:
    """Payload of events that carry no data."""


@dataclass(frozen=True)
class DragEndPayload:
    changed_state: bool


@dataclass(frozen=True)
class LocalChange:
    """A semantic operation triggered by local user input."""

    change: ChangeKind
    value: Any = None


@dataclass(frozen=True)
class StateChangePayload:
    state: str
    playing: bool


@dataclass(frozen=True)
class FrameChangePayload:
    index: int
    frame_id: str
    previous_index: int | None


@dataclass(frozen=True)
class BlankScreenPayload:
    visible: bool


PAYLOAD_TYPES: dict[EventType, type] = {
    EventType.MOUSE_DOWN: ButtonPayload,
    EventType.CLICK: ButtonPayload,
    EventType.DRAG_START: EmptyPayload,
    EventType.DRAG_END: DragEndPayload,
    EventType.USER_CHANGE_STATE: EmptyPayload,
    EventType.LOCAL_CHANGE: LocalChange,
    EventType.STATE_CHANGE: StateChangePayload,
    EventType.FRAME_CHANGE: FrameChangePayload,
    EventType.BLANK_SCREEN_CHANGE: BlankScreenPayload,
}


@dataclass
class Event:
    """Event data container."""

    type: EventType
    payload: Any
    source: str | None = None


class EventBus:
    """
    Simple event bus for pub/sub pattern.

    Allows components to emit events and subscribe to them without
    direct coupling. Handler failures are logged and never reach the
    emitter.
    """

    def __init__(self, name: str = "default"):
        """
        Initialize event bus.

        Parameters
        ----------
        name : str
            Name of this event bus instance
        """
        self.name = name
        self._subscribers: dict[EventType, list[tuple[int, Callable[[Event], None]]]] = {}
        self._event_history: list[Event] = []
        self._max_history = 100
        logger.debug(f"Created EventBus: {name}")

    def subscribe(
        self,
        event_type: EventType,
        callback: Callable[[Event], None],
        priority: int = 0,
    ) -> None:
        """
        Subscribe to an event type.

        Parameters
        ----------
        event_type : EventType
            Event type to subscribe to
        callback : Callable[[Event], None]
            Function to call when event is emitted
        priority : int
            Priority for callback execution (higher = earlier)
        """
        if not isinstance(event_type, EventType):
            raise InvalidArgumentError("Unknown event type", argument="event_type", value=event_type)

        callbacks = self._subscribers.setdefault(event_type, [])

        # Insert by priority (higher priority first)
        inserted = False
        for i, (existing_priority, _) in enumerate(callbacks):
            if priority > existing_priority:
                callbacks.insert(i, (priority, callback))
                inserted = True
                break

        if not inserted:
            callbacks.append((priority, callback))

        logger.debug(
            f"[{self.name}] Subscribed to {event_type.name}: "
            f"{getattr(callback, '__name__', repr(callback))} (priority={priority})"
        )

    def unsubscribe(self, event_type: EventType, callback: Callable[[Event], None]) -> bool:
        """
        Unsubscribe from an event type.

        Returns
        -------
        bool
            True if callback was found and removed
        """
        callbacks = self._subscribers.get(event_type)
        if not callbacks:
            return False

        for i, (_, cb) in enumerate(callbacks):
            if cb == callback:
                del callbacks[i]
                logger.debug(f"[{self.name}] Unsubscribed from {event_type.name}")
                return True

        return False

    def emit(self, event_type: EventType, payload: Any = None, source: str | None = None) -> Event:
        """
        Emit an event.

        Parameters
        ----------
        event_type : EventType
            Type of event to emit
        payload : Any
            Instance of the payload class registered for ``event_type``;
            may be omitted for events with an empty payload
        source : str | None
            Component emitting the event

        Returns
        -------
        Event
            The emitted event

        Raises
        ------
        InvalidArgumentError
            If the payload does not match the event type
        """
        expected = PAYLOAD_TYPES[event_type]
        if payload is None and expected is EmptyPayload:
            payload = EmptyPayload()
        if not isinstance(payload, expected):
            raise InvalidArgumentError(
                f"{event_type.name} expects a {expected.__name__} payload",
                argument="payload",
                value=payload,
            )

        event = Event(type=event_type, payload=payload, source=source)

        self._event_history.append(event)
        if len(self._event_history) > self._max_history:
            self._event_history.pop(0)

        # Snapshot: handlers may subscribe/unsubscribe while being called
        subscribers = list(self._subscribers.get(event_type, ()))
        if not subscribers:
            logger.debug(f"[{self.name}] Emitted {event_type.name} from {source or 'unknown'} (no subscribers)")
            return event

        logger.debug(
            f"[{self.name}] Emitting {event_type.name} from {source or 'unknown'} "
            f"to {len(subscribers)} subscribers"
        )
        for _, callback in subscribers:
            try:
                callback(event)
            except Exception as e:
                logger.error(
                    f"[{self.name}] Error in event handler "
                    f"{getattr(callback, '__name__', repr(callback))} for {event_type.name}: {e}",
                    exc_info=True,
                )
        return event

    def clear_subscribers(self, event_type: EventType | None = None) -> None:
        """Clear subscribers of one event type, or of all types when None."""
        if event_type is None:
            self._subscribers.clear()
            logger.debug(f"[{self.name}] Cleared all subscribers")
        elif event_type in self._subscribers:
            del self._subscribers[event_type]
            logger.debug(f"[{self.name}] Cleared subscribers for {event_type.name}")

    def get_history(self, event_type: EventType | None = None, limit: int | None = None) -> list[Event]:
        """
        Get event history.

        Parameters
        ----------
        event_type : EventType | None
            If provided, filter by event type
        limit : int | None
            Maximum number of events to return

        Returns
        -------
        list[Event]
            Event history (most recent last)
        """
        history = self._event_history

        if event_type is not None:
            history = [e for e in history if e.type == event_type]

        if limit is not None:
            history = history[-limit:]

        return list(history)

    def has_subscribers(self, event_type: EventType) -> bool:
        """Check if an event type has any subscribers."""
        return bool(self._subscribers.get(event_type))


__all__ = [
    "BlankScreenPayload",
    "ButtonPayload",
    "ChangeKind",
    "DragEndPayload",
    "EmptyPayload",
    "Event",
    "EventBus",
    "EventType",
    "FrameChangePayload",
    "LocalChange",
    "PAYLOAD_TYPES",
    "StateChangePayload",
]
