"""
Drag gesture state.

The recognizer holds a single value of type ``GestureState``:

    Idle -> PendingDrag (button down) -> Dragging (threshold crossed) -> Idle

Transitions are pure functions returning a new state; the controller
applies the returned deltas to the viewport. Positions are client
coordinates; distances and angles are measured from the viewport center.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Union

from slideplay.shared.math import polar_from_center


class DragMode(Enum):
    """What a confirmed drag manipulates."""

    TRANSLATE = "translate"
    SCALE = "scale"
    ROTATE = "rotate"
    CLIP = "clip"


@dataclass(frozen=True)
class Idle:
    """No button held."""


@dataclass(frozen=True)
class PendingDrag:
    """Drag button held, displacement still under the threshold."""

    start_x: float
    start_y: float
    button: int = 0


@dataclass(frozen=True)
class Dragging:
    """Confirmed drag."""

    start_x: float
    start_y: float
    prev_x: float  # Pointer position at the previous move
    prev_y: float
    translate_x_prev: float  # Last applied translate position (axis-constrained)
    translate_y_prev: float
    translate_x_start: float
    translate_y_start: float
    rotate_start: float  # Pointer angle around the viewport center at confirmation
    rotate_prev: float
    zoom_prev: float  # Pointer distance to the viewport center
    changed_state: bool = False


GestureState = Union[Idle, PendingDrag, Dragging]

IDLE = Idle()


def begin_drag(x: float, y: float, button: int = 0) -> PendingDrag:
    return PendingDrag(start_x=x, start_y=y, button=button)


def exceeds_threshold(state: PendingDrag, x: float, y: float, threshold_px: float) -> bool:
    """True once either axis moved strictly more than ``threshold_px``."""
    return abs(x - state.start_x) > threshold_px or abs(y - state.start_y) > threshold_px


def confirm_drag(state: PendingDrag, x: float, y: float, center_x: float, center_y: float) -> Dragging:
    """
    Turn a pending drag into a confirmed one at pointer position (x, y).

    Every "previous" reference starts at the confirmation point, so the
    first mode update after confirmation produces a zero delta.
    """
    distance, angle = polar_from_center(x, y, center_x, center_y)
    return Dragging(
        start_x=state.start_x,
        start_y=state.start_y,
        prev_x=state.start_x,
        prev_y=state.start_y,
        translate_x_prev=x,
        translate_y_prev=y,
        translate_x_start=x,
        translate_y_start=y,
        rotate_start=angle,
        rotate_prev=angle,
        zoom_prev=distance,
    )


def resolve_mode(base_mode: str, alt: bool, shift: bool) -> DragMode:
    """Drag mode for one move, from the viewport's base mode and modifiers."""
    if base_mode == DragMode.TRANSLATE.value:
        if alt:
            return DragMode.SCALE
        if shift:
            return DragMode.ROTATE
    return DragMode(base_mode)


def translate_step(state: Dragging, x: float, y: float, constrain: bool) -> tuple[tuple[float, float], Dragging]:
    """
    Translation delta for a move to (x, y).

    With ``constrain``, motion is locked to the axis with the larger
    displacement since confirmation.
    """
    if constrain:
        if abs(x - state.translate_x_start) >= abs(y - state.translate_y_start):
            y = state.translate_y_start
        else:
            x = state.translate_x_start
    delta = (x - state.translate_x_prev, y - state.translate_y_prev)
    return delta, replace(state, translate_x_prev=x, translate_y_prev=y, changed_state=True)


def rotate_step(
    state: Dragging,
    x: float,
    y: float,
    center_x: float,
    center_y: float,
    snap_deg: float | None = None,
) -> tuple[float, Dragging]:
    """
    Rotation to apply for a move to (x, y), in degrees.

    With ``snap_deg``, the pointer angle is rounded to the nearest multiple
    of ``snap_deg`` before the delta is taken.
    """
    _, angle = polar_from_center(x, y, center_x, center_y)
    if snap_deg:
        angle = snap_deg * round(angle / snap_deg)
    delta = state.rotate_prev - angle
    return delta, replace(state, rotate_prev=angle, changed_state=True)


def scale_step(state: Dragging, x: float, y: float, center_x: float, center_y: float) -> tuple[float | None, Dragging]:
    """
    Zoom factor for a move to (x, y): ratio of the pointer distances to the
    viewport center. None when the previous distance was zero.
    """
    distance, _ = polar_from_center(x, y, center_x, center_y)
    factor = distance / state.zoom_prev if state.zoom_prev != 0 else None
    # A pointer exactly on the center yields no usable factor
    if factor == 0:
        factor = None
    return factor, replace(state, zoom_prev=distance, changed_state=factor is not None or state.changed_state)


def moved(state: Dragging, x: float, y: float) -> Dragging:
    """Record (x, y) as the previous pointer position."""
    return replace(state, prev_x=x, prev_y=y)


def mark_changed(state: Dragging) -> Dragging:
    return replace(state, changed_state=True)


__all__ = [
    "DragMode",
    "Dragging",
    "GestureState",
    "IDLE",
    "Idle",
    "PendingDrag",
    "begin_drag",
    "confirm_drag",
    "exceeds_threshold",
    "mark_changed",
    "moved",
    "resolve_mode",
    "rotate_step",
    "scale_step",
    "translate_step",
]
