"""
Raw input events delivered by the host window.

Pointer coordinates are client coordinates (host window pixels); the UI
controller converts them to viewport-relative device pixels.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Modifiers:
    """Modifier keys held during an input event."""

    shift: bool = False
    ctrl: bool = False
    alt: bool = False
    meta: bool = False

    @property
    def any_command(self) -> bool:
        """True if Alt, Ctrl or Meta is held (Shift excluded)."""
        return self.alt or self.ctrl or self.meta


NO_MODIFIERS = Modifiers()


@dataclass
class InputEvent:
    """Base class carrying the host's default-handling flags."""

    default_prevented: bool = field(default=False, init=False)
    propagation_stopped: bool = field(default=False, init=False)

    def prevent_default(self) -> None:
        self.default_prevented = True

    def stop_propagation(self) -> None:
        self.propagation_stopped = True

    @property
    def consumed(self) -> bool:
        return self.default_prevented and self.propagation_stopped


@dataclass
class PointerEvent(InputEvent):
    """Mouse button or motion event."""

    client_x: float = 0.0
    client_y: float = 0.0
    button: int = 0
    modifiers: Modifiers = NO_MODIFIERS


@dataclass
class WheelEvent(InputEvent):
    """
    Mouse wheel event.

    Hosts report one of three conventions: ``wheel_delta`` (positive away
    from the user), ``detail`` (positive toward the user), or ``delta_y``
    (positive toward the user).
    """

    client_x: float = 0.0
    client_y: float = 0.0
    delta_y: float = 0.0
    wheel_delta: float | None = None
    detail: float | None = None
    modifiers: Modifiers = NO_MODIFIERS

    @property
    def normalized_delta(self) -> float:
        """Delta with positive values meaning "zoom in"."""
        if self.wheel_delta:
            return self.wheel_delta
        if self.detail:
            return -self.detail
        return -self.delta_y


@dataclass
class KeyEvent(InputEvent):
    """
    Keyboard event.

    ``key`` is the key name for key-down events ("Home", "ArrowLeft",
    "PageDown", "Enter", " ", ...) and the typed character for key-press
    events ("+", "r", ".", ...).
    """

    key: str = ""
    modifiers: Modifiers = NO_MODIFIERS


__all__ = ["InputEvent", "KeyEvent", "Modifiers", "NO_MODIFIERS", "PointerEvent", "WheelEvent"]
