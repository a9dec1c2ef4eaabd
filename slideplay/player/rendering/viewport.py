"""
Viewport: owner of the camera state of every layer.

DESIGN: single writer
=====================

The camera state is mutated either by direct manipulation (translate,
zoom, rotate, clip editing) or by a transition started with
``animate_to``. The two never run together: any direct manipulation
first cancels the running transition, adopting the interpolated pose at
the cancel instant, and a new transition starts from the current pose.

Coordinates passed to the operations are device pixels relative to the
viewport's top-left corner.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

from slideplay.domain.camera import CameraState, ClipRect
from slideplay.domain.presentation import Presentation
from slideplay.domain.timing import TimingFunction
from slideplay.infrastructure.scheduler import Scheduler
from slideplay.player.rendering.animator import CameraAnimator, CameraStates
from slideplay.player.rendering.surface import LayerTransform, NullSurface, RenderSurface
from slideplay.shared.exceptions import InvalidArgumentError


logger = logging.getLogger(__name__)

DRAG_MODES = ("translate", "clip")

# Distance from a clip edge, in pixels, within which a drag resizes that edge
DEFAULT_CLIP_BORDER_PX = 5.0


@dataclass(frozen=True)
class ClipMode:
    """Which parts of the clip rectangle a drag edits."""

    left: bool = False
    right: bool = False
    top: bool = False
    bottom: bool = False
    move: bool = False
    create: bool = False

    @property
    def cursor(self) -> str:
        """CSS cursor name matching the mode."""
        if self.move:
            return "move"
        if self.create:
            return "crosshair"
        if (self.left and self.top) or (self.right and self.bottom):
            return "nwse-resize"
        if (self.right and self.top) or (self.left and self.bottom):
            return "nesw-resize"
        if self.left or self.right:
            return "ew-resize"
        if self.top or self.bottom:
            return "ns-resize"
        return "default"


class Viewport:
    """
    Camera model and animation driver for one presentation view.

    Attributes
    ----------
    x, y : float
        Position of the viewport in the host window (client coordinates)
    width, height : float
        Size in device pixels
    selected_layers : list[str]
        Layers affected by direct manipulation
    drag_mode : str
        Base drag mode, "translate" or "clip"
    user_modified : bool
        True once direct manipulation moved away from the last transition target
    """

    def __init__(
        self,
        presentation: Presentation,
        scheduler: Scheduler,
        surface: RenderSurface | None = None,
        width: float = 800.0,
        height: float = 600.0,
        x: float = 0.0,
        y: float = 0.0,
        clip_border_px: float = DEFAULT_CLIP_BORDER_PX,
    ):
        self.presentation = presentation
        self.scheduler = scheduler
        self.surface: RenderSurface = surface if surface is not None else NullSurface()
        self.x = float(x)
        self.y = float(y)
        self.width = float(width)
        self.height = float(height)
        self.clip_border_px = float(clip_border_px)

        self._states: CameraStates = {layer: CameraState() for layer in presentation.layers}
        self.selected_layers: list[str] = list(presentation.layers)
        self._drag_mode = "translate"
        self._clip_edit: tuple[float, float, ClipMode] | None = None
        self.user_modified = False

        self.animator = CameraAnimator(scheduler, name="viewport")
        self._on_complete: Callable[[bool], None] | None = None

        logger.debug(f"Viewport initialized ({self.width:.0f}x{self.height:.0f}, {len(self._states)} layers)")

    # =========================================================================
    # State access
    # =========================================================================

    @property
    def layers(self) -> list[str]:
        return list(self._states)

    @property
    def active_layer(self) -> str | None:
        """Layer whose clip rectangle is edited (first selected layer)."""
        return self.selected_layers[0] if self.selected_layers else None

    @property
    def drag_mode(self) -> str:
        return self._drag_mode

    @drag_mode.setter
    def drag_mode(self, mode: str) -> None:
        if mode not in DRAG_MODES:
            raise InvalidArgumentError("Unknown drag mode", argument="drag_mode", value=mode)
        self._drag_mode = mode

    @property
    def is_animating(self) -> bool:
        return self.animator.running

    @property
    def bounds(self) -> ClipRect:
        return ClipRect(0.0, 0.0, self.width, self.height)

    def camera_state(self, layer: str) -> CameraState:
        return self._states[layer]

    def camera_states(self) -> CameraStates:
        return dict(self._states)

    def select_layers(self, layers: Iterable[str]) -> None:
        """Restrict direct manipulation to ``layers``."""
        layers = list(layers)
        unknown = [layer for layer in layers if layer not in self._states]
        if unknown:
            raise InvalidArgumentError("Unknown layers", argument="layers", value=unknown)
        self.selected_layers = layers

    def resize(self, width: float, height: float, x: float | None = None, y: float | None = None) -> None:
        """Host window resize notification."""
        self.width = float(width)
        self.height = float(height)
        if x is not None:
            self.x = float(x)
        if y is not None:
            self.y = float(y)
        logger.debug(f"Viewport resized to {self.width:.0f}x{self.height:.0f}")
        self.repaint()

    # =========================================================================
    # Direct manipulation
    # =========================================================================

    def _interrupt(self) -> None:
        """Cancel the running transition, keeping its current interpolated pose."""
        sampled = self.animator.cancel()
        if sampled is None:
            return
        self._states.update(sampled)
        callback, self._on_complete = self._on_complete, None
        logger.debug("Transition interrupted by a new camera owner")
        if callback is not None:
            callback(False)

    def _update_selected(self, update: Callable[[CameraState], CameraState]) -> None:
        for layer in self.selected_layers:
            self._states[layer] = update(self._states[layer])
        self.user_modified = True
        self.repaint()

    def translate(self, dx: float, dy: float) -> None:
        """Pan the selected layers by a device-pixel delta."""
        if dx == 0 and dy == 0:
            return
        self._interrupt()
        self._update_selected(lambda state: state.translated(dx, dy))

    def zoom(self, factor: float, cx: float, cy: float) -> None:
        """
        Scale the selected layers about a device point.

        Parameters
        ----------
        factor : float
            Multiplier, above 1 to zoom in, below 1 to zoom out
        cx, cy : float
            Device point that stays fixed on screen

        Raises
        ------
        InvalidArgumentError
            If ``factor`` is zero, negative or not finite
        """
        if not (isinstance(factor, (int, float)) and math.isfinite(factor) and factor > 0):
            raise InvalidArgumentError("Zoom factor must be positive", argument="factor", value=factor)
        if factor == 1:
            return
        self._interrupt()
        fx = cx - self.width / 2.0
        fy = cy - self.height / 2.0
        self._update_selected(lambda state: state.zoomed(factor, fx, fy))

    def rotate(self, angle: float) -> None:
        """Rotate the selected layers about the viewport center (degrees)."""
        if angle == 0:
            return
        self._interrupt()
        self._update_selected(lambda state: state.rotated(angle))

    # =========================================================================
    # Clip editing
    # =========================================================================

    def _compute_clip_mode(self, x: float, y: float) -> ClipMode:
        layer = self.active_layer
        rect = self._states[layer].clip if layer is not None else None
        if rect is None:
            return ClipMode(create=True)

        border = self.clip_border_px
        in_row = rect.y0 - border <= y <= rect.y1 + border
        in_column = rect.x0 - border <= x <= rect.x1 + border

        left = right = top = bottom = False
        if in_row:
            d_left, d_right = abs(x - rect.x0), abs(x - rect.x1)
            if min(d_left, d_right) <= border:
                left = d_left <= d_right
                right = not left
        if in_column:
            d_top, d_bottom = abs(y - rect.y0), abs(y - rect.y1)
            if min(d_top, d_bottom) <= border:
                top = d_top <= d_bottom
                bottom = not top

        if left or right or top or bottom:
            return ClipMode(left=left, right=right, top=top, bottom=bottom)
        if rect.contains(x, y):
            return ClipMode(move=True)
        return ClipMode(create=True)

    def update_clip_mode(self, x: float, y: float) -> ClipMode:
        """Choose the clip edit mode for a drag starting at (x, y)."""
        mode = self._compute_clip_mode(x, y)
        self._clip_edit = (x, y, mode)
        return mode

    def clip_cursor(self, x: float, y: float) -> str:
        """Cursor to show while hovering (x, y) in clip drag mode."""
        if self._drag_mode != "clip":
            return "default"
        return self._compute_clip_mode(x, y).cursor

    def clip_by_mode(
        self,
        start_x: float,
        start_y: float,
        cur_x: float,
        cur_y: float,
        dx: float,
        dy: float,
    ) -> ClipRect | None:
        """
        Edit the active layer's clip rectangle during a drag.

        The edit mode (edge, corner, move, or new rectangle) is chosen once
        from the drag start point. ``(cur_x, cur_y)`` is the previous pointer
        position and ``(dx, dy)`` the displacement since then.

        Returns
        -------
        ClipRect | None
            The new clip rectangle, or None when no layer is selected
        """
        layer = self.active_layer
        if layer is None:
            return None

        if self._clip_edit is None or self._clip_edit[:2] != (start_x, start_y):
            self.update_clip_mode(start_x, start_y)
        mode = self._clip_edit[2]

        self._interrupt()
        rect = self._states[layer].clip

        if mode.create or rect is None:
            new_rect = ClipRect.from_points(start_x, start_y, cur_x + dx, cur_y + dy)
        elif mode.move:
            new_rect = ClipRect(rect.x0 + dx, rect.y0 + dy, rect.x1 + dx, rect.y1 + dy)
        else:
            x0, y0, x1, y1 = rect.as_tuple()
            if mode.left:
                x0 = min(x0 + dx, x1)
            if mode.right:
                x1 = max(x1 + dx, x0)
            if mode.top:
                y0 = min(y0 + dy, y1)
            if mode.bottom:
                y1 = max(y1 + dy, y0)
            new_rect = ClipRect(x0, y0, x1, y1)

        self._states[layer] = self._states[layer].with_clip(new_rect)
        self.user_modified = True
        self.repaint()
        return new_rect

    # =========================================================================
    # Transitions
    # =========================================================================

    def animate_to(
        self,
        targets: Mapping[str, CameraState],
        duration_ms: float,
        timing_function: TimingFunction = TimingFunction.LINEAR,
        on_complete: Callable[[bool], None] | None = None,
    ) -> None:
        """
        Start a transition from the current pose to ``targets``.

        Layers missing from ``targets`` keep their current state. A running
        transition is superseded; its completion callback receives False.

        Parameters
        ----------
        targets : Mapping[str, CameraState]
            Target camera state per layer
        duration_ms : float
            Transition length; 0 applies the targets immediately
        timing_function : TimingFunction
            Easing curve
        on_complete : Callable[[bool], None] | None
            Called with True when the targets are reached, False if the
            transition is interrupted
        """
        unknown = [layer for layer in targets if layer not in self._states]
        if unknown:
            raise InvalidArgumentError("Unknown layers", argument="targets", value=unknown)

        self._interrupt()
        self.user_modified = False

        if duration_ms <= 0:
            self._states.update(targets)
            self.repaint()
            if on_complete is not None:
                on_complete(True)
            return

        self._on_complete = on_complete
        self.animator.start(
            start_states={layer: self._states[layer] for layer in targets},
            target_states=dict(targets),
            duration_ms=duration_ms,
            timing=TimingFunction.from_name(timing_function),
            on_step=self._on_animation_step,
            on_done=self._on_animation_done,
            bounds=self.bounds,
        )

    def _on_animation_step(self, states: CameraStates) -> None:
        self._states.update(states)
        self.repaint()

    def _on_animation_done(self) -> None:
        callback, self._on_complete = self._on_complete, None
        if callback is not None:
            callback(True)

    # =========================================================================
    # Rendering
    # =========================================================================

    def layer_transforms(self) -> dict[str, LayerTransform]:
        """Render transform of every layer from the current state."""
        return {
            layer: LayerTransform(layer, state.matrix(self.width, self.height), state.clip)
            for layer, state in self._states.items()
        }

    def repaint(self) -> dict[str, LayerTransform]:
        """Publish the current layer transforms to the surface."""
        transforms = self.layer_transforms()
        self.surface.render(transforms)
        return transforms


__all__ = ["ClipMode", "DEFAULT_CLIP_BORDER_PX", "DRAG_MODES", "Viewport"]
