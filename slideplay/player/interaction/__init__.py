"""Events, playback state machine and gesture recognition."""

from .controller import UIController
from .events import ChangeKind, Event, EventBus, EventType, LocalChange
from .input import KeyEvent, Modifiers, PointerEvent, WheelEvent
from .playback import HistoryEntry, Player, PlayerState


__all__ = [
    "ChangeKind",
    "Event",
    "EventBus",
    "EventType",
    "HistoryEntry",
    "KeyEvent",
    "LocalChange",
    "Modifiers",
    "Player",
    "PlayerState",
    "PointerEvent",
    "UIController",
    "WheelEvent",
]
