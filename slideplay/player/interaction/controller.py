"""
UI controller: turns raw pointer, wheel and keyboard input into player and
viewport operations.

Gestures
========

- Drag with the drag button: translate (default), scale (Alt), rotate
  (Shift), or clip editing when the viewport's drag mode is "clip" (edit mode
  only). Ctrl snaps rotation and constrains translation to one axis.
- Button release below the drag threshold: click (next / previous frame).
- Wheel: zoom about the pointer, or rotate with Shift. A burst of wheel
  events produces a single USER_CHANGE_STATE once the wheel has been idle
  for ``wheel_timeout_ms``.

Every semantic operation emits LOCAL_CHANGE before it reaches the player or
the viewport, so presenter consoles can mirror navigation.
"""

from __future__ import annotations

import logging

from slideplay.domain.presentation import Frame
from slideplay.infrastructure.scheduler import TimerHandle
from slideplay.player.config.settings import InteractionSettings
from slideplay.player.interaction import gestures
from slideplay.player.interaction.events import (
    ButtonPayload,
    ChangeKind,
    DragEndPayload,
    Event,
    EventBus,
    EventType,
    LocalChange,
)
from slideplay.player.interaction.gestures import DragMode, Dragging, GestureState, Idle, PendingDrag
from slideplay.player.interaction.input import KeyEvent, PointerEvent, WheelEvent
from slideplay.player.interaction.playback import FrameRef, Player
from slideplay.shared.exceptions import FrameNotFoundError, InvalidArgumentError


logger = logging.getLogger(__name__)

CONTEXT_MENU_BUTTON = 2

FIRST_FRAME_KEYS = frozenset({"Home"})
LAST_FRAME_KEYS = frozenset({"End"})
PREVIOUS_FRAME_KEYS = frozenset({"ArrowUp", "PageUp", "ArrowLeft"})
NEXT_FRAME_KEYS = frozenset({"ArrowDown", "PageDown", "ArrowRight", "Enter", " ", "Spacebar"})


class UIController:
    """
    Gesture recognizer and semantic command layer for one player.

    Attributes
    ----------
    gesture : GestureState
        Current drag recognizer state
    cursor : str
        Cursor for the last hovered position (clip editing feedback)
    """

    def __init__(
        self,
        player: Player,
        event_bus: EventBus,
        settings: InteractionSettings | None = None,
        edit_mode: bool = False,
    ):
        """
        Initialize the controller.

        Parameters
        ----------
        player : Player
            Player to drive; its viewport and presentation are used too
        event_bus : EventBus
            Bus for gesture and LOCAL_CHANGE events
        settings : InteractionSettings | None
            Gesture constants (defaults when None)
        edit_mode : bool
            Authoring mode: capability flags are bypassed, navigation
            bindings and auto-advance are disabled
        """
        self.player = player
        self.viewport = player.viewport
        self.presentation = player.presentation
        self.event_bus = event_bus
        self.settings = settings if settings is not None else InteractionSettings()
        self.edit_mode = edit_mode

        self.gesture: GestureState = gestures.IDLE
        self.cursor = "default"
        self._wheel_timer: TimerHandle | None = None

        if edit_mode:
            player.set_auto_advance(False)
        else:
            event_bus.subscribe(EventType.CLICK, self._on_click_event)
            if self.presentation.enable_mouse_translation:
                event_bus.subscribe(EventType.DRAG_START, self._on_drag_start_event)
            event_bus.subscribe(EventType.USER_CHANGE_STATE, self._on_user_change_state_event)

        logger.debug(f"UIController initialized (edit_mode={edit_mode})")

    def _allowed(self, capability: str) -> bool:
        return self.edit_mode or getattr(self.presentation, capability)

    def _local(self, x: float, y: float) -> tuple[float, float]:
        """Client coordinates to viewport-relative coordinates."""
        return x - self.viewport.x, y - self.viewport.y

    def _center(self) -> tuple[float, float]:
        """Viewport center in client coordinates."""
        return self.viewport.x + self.viewport.width / 2.0, self.viewport.y + self.viewport.height / 2.0

    def _emit_local_change(self, change: ChangeKind, value=None) -> None:
        self.event_bus.emit(EventType.LOCAL_CHANGE, LocalChange(change=change, value=value), source="ui")

    # =========================================================================
    # Pointer
    # =========================================================================

    def on_mouse_down(self, evt: PointerEvent) -> None:
        evt.stop_propagation()
        evt.prevent_default()

        # Release of the previous drag was never delivered
        if isinstance(self.gesture, Dragging):
            self._end_drag(self.gesture)
            self.gesture = gestures.IDLE

        if evt.button == self.settings.drag_button:
            self.gesture = gestures.begin_drag(evt.client_x, evt.client_y, evt.button)
            self.viewport.update_clip_mode(*self._local(evt.client_x, evt.client_y))

        self.event_bus.emit(EventType.MOUSE_DOWN, ButtonPayload(evt.button), source="viewport")

    def on_mouse_move(self, evt: PointerEvent) -> None:
        """Hover feedback when idle, drag recognition while the drag button is held."""
        if isinstance(self.gesture, Idle):
            if self.edit_mode:
                self.cursor = self.viewport.clip_cursor(*self._local(evt.client_x, evt.client_y))
            return
        self._on_drag(evt)

    def _on_drag(self, evt: PointerEvent) -> None:
        evt.stop_propagation()
        x, y = evt.client_x, evt.client_y
        state = self.gesture

        if isinstance(state, PendingDrag):
            if not gestures.exceeds_threshold(state, x, y, self.settings.drag_threshold_px):
                return
            state = gestures.confirm_drag(state, x, y, *self._center())
            self.gesture = state
            self.player.set_dragging(True)
            logger.debug(f"Drag confirmed at ({x:.0f}, {y:.0f})")
            self.event_bus.emit(EventType.DRAG_START, source="viewport")

        if not isinstance(state, Dragging):
            return

        mods = evt.modifiers
        base_mode = self.viewport.drag_mode
        # Clip editing belongs to the authoring tool
        if base_mode == DragMode.CLIP.value and not self.edit_mode:
            base_mode = DragMode.TRANSLATE.value
        mode = gestures.resolve_mode(base_mode, alt=mods.alt, shift=mods.shift)

        if mode is DragMode.SCALE:
            if self._allowed("enable_mouse_zoom"):
                factor, state = gestures.scale_step(state, x, y, *self._center())
                if factor is not None:
                    self.zoom_default(factor)

        elif mode is DragMode.ROTATE:
            if self._allowed("enable_mouse_rotation"):
                snap = self.settings.snap_angle_deg if mods.ctrl else None
                angle, state = gestures.rotate_step(state, x, y, *self._center(), snap_deg=snap)
                self.rotate(angle)

        elif mode is DragMode.CLIP:
            start_x, start_y = self._local(state.start_x, state.start_y)
            prev_x, prev_y = self._local(state.prev_x, state.prev_y)
            self.viewport.clip_by_mode(start_x, start_y, prev_x, prev_y, x - state.prev_x, y - state.prev_y)
            state = gestures.mark_changed(state)

        elif self._allowed("enable_mouse_translation"):
            (dx, dy), state = gestures.translate_step(state, x, y, constrain=mods.ctrl)
            self.translate(dx, dy)

        self.gesture = gestures.moved(state, x, y)

    def on_mouse_up(self, evt: PointerEvent) -> None:
        """
        End a drag, or report a click when the drag threshold was never crossed.

        Releases with no gesture in progress are ignored; a non-drag button
        released during a gesture reports a click for that button.
        """
        state = self.gesture
        if isinstance(state, Idle):
            return

        evt.stop_propagation()
        evt.prevent_default()

        if evt.button != self.settings.drag_button:
            self.event_bus.emit(EventType.CLICK, ButtonPayload(evt.button), source="viewport")
            return

        self.gesture = gestures.IDLE
        if isinstance(state, Dragging):
            self._end_drag(state)
        else:
            self.event_bus.emit(EventType.CLICK, ButtonPayload(evt.button), source="viewport")

    def _end_drag(self, state: Dragging) -> None:
        self.event_bus.emit(EventType.DRAG_END, DragEndPayload(state.changed_state), source="viewport")
        if state.changed_state:
            self.event_bus.emit(EventType.USER_CHANGE_STATE, source="viewport")
        self.player.set_dragging(False)

    def on_context_menu(self, evt: PointerEvent) -> None:
        evt.stop_propagation()
        evt.prevent_default()
        self.event_bus.emit(EventType.CLICK, ButtonPayload(CONTEXT_MENU_BUTTON), source="viewport")

    def on_click(self, button: int) -> None:
        """Left click moves to the next frame, right click to the previous one."""
        if not self.presentation.enable_mouse_navigation:
            return
        if button == 0:
            self.move_to_next()
        elif button == CONTEXT_MENU_BUTTON:
            self.move_to_previous()

    # =========================================================================
    # Wheel
    # =========================================================================

    def on_wheel(self, evt: WheelEvent) -> None:
        evt.stop_propagation()
        evt.prevent_default()

        delta = evt.normalized_delta
        if delta == 0:
            return

        changed = False
        if evt.modifiers.shift:
            if self._allowed("enable_mouse_rotation"):
                self.rotate(self.settings.rotate_step_deg if delta > 0 else -self.settings.rotate_step_deg)
                changed = True
        elif self._allowed("enable_mouse_zoom"):
            factor = self.settings.scale_factor if delta > 0 else 1.0 / self.settings.scale_factor
            self.zoom(factor, *self._local(evt.client_x, evt.client_y))
            changed = True

        if changed:
            if self._wheel_timer is not None:
                self._wheel_timer.cancel()
            self._wheel_timer = self.player.scheduler.call_later(
                self.settings.wheel_timeout_ms, self._on_wheel_timeout, name="wheel-gesture"
            )

    def _on_wheel_timeout(self) -> None:
        self._wheel_timer = None
        logger.debug("Wheel gesture ended")
        self.event_bus.emit(EventType.USER_CHANGE_STATE, source="viewport")

    # =========================================================================
    # Keyboard
    # =========================================================================

    def on_key_down(self, evt: KeyEvent) -> bool:
        """
        Handle navigation keys.

        Returns
        -------
        bool
            True if the key was recognized (the event is then consumed)
        """
        if self.edit_mode or evt.modifiers.any_command:
            return False

        actions = self._navigation_actions(evt.key)
        if actions is None:
            return False

        if self.presentation.enable_keyboard_navigation:
            move, jump = actions
            if evt.modifiers.shift:
                jump()
            else:
                move()

        evt.stop_propagation()
        evt.prevent_default()
        return True

    def _navigation_actions(self, key: str):
        """(move, jump) operations bound to a navigation key, or None."""
        if key in FIRST_FRAME_KEYS:
            return self.move_to_first, self.jump_to_first
        if key in LAST_FRAME_KEYS:
            return self.move_to_last, self.jump_to_last
        if key in PREVIOUS_FRAME_KEYS:
            return self.move_to_previous, self.jump_to_previous
        if key in NEXT_FRAME_KEYS:
            return self.move_to_next, self.jump_to_next
        return None

    def on_key_press(self, evt: KeyEvent) -> bool:
        """
        Handle character keys: "+", "-", "R", "r", "P", "p", ".".

        Returns
        -------
        bool
            True if the character was recognized (the event is then consumed)
        """
        if self.edit_mode or evt.modifiers.any_command:
            return False

        char = evt.key
        if char == "+":
            if self.presentation.enable_keyboard_zoom:
                self.zoom_default(self.settings.scale_factor)
        elif char == "-":
            if self.presentation.enable_keyboard_zoom:
                self.zoom_default(1.0 / self.settings.scale_factor)
        elif char == "R":
            if self.presentation.enable_keyboard_rotation:
                self.rotate(-self.settings.rotate_step_deg)
        elif char == "r":
            if self.presentation.enable_keyboard_rotation:
                self.rotate(self.settings.rotate_step_deg)
        elif char in ("P", "p"):
            self.toggle_pause()
        elif char == ".":
            if self.presentation.enable_keyboard_navigation:
                self.toggle_blank_screen()
        else:
            return False

        evt.stop_propagation()
        evt.prevent_default()
        return True

    # =========================================================================
    # Bus subscriptions (non-edit mode)
    # =========================================================================

    def _on_click_event(self, event: Event) -> None:
        self.on_click(event.payload.button)

    def _on_drag_start_event(self, event: Event) -> None:
        self.player.pause()

    def _on_user_change_state_event(self, event: Event) -> None:
        self.player.pause()

    # =========================================================================
    # Frame navigation
    # =========================================================================

    def _resolve(self, ref: FrameRef) -> Frame | None:
        try:
            return self.player.find_frame(ref)
        except FrameNotFoundError as e:
            logger.warning(f"Ignoring navigation: {e}")
            return None

    def move_to_frame(self, ref: FrameRef) -> None:
        frame = self._resolve(ref)
        if frame is None:
            return
        self._emit_local_change(ChangeKind.MOVE_TO_FRAME, frame)
        self.player.move_to_frame(frame)

    def jump_to_frame(self, ref: FrameRef) -> None:
        frame = self._resolve(ref)
        if frame is None:
            return
        self._emit_local_change(ChangeKind.JUMP_TO_FRAME, frame)
        self.player.jump_to_frame(frame)

    def preview_frame(self, ref: FrameRef) -> None:
        frame = self._resolve(ref)
        if frame is None:
            return
        self._emit_local_change(ChangeKind.PREVIEW_FRAME, frame)
        self.player.preview_frame(frame)

    def move_to_first(self) -> None:
        self.move_to_frame(0)

    def move_to_last(self) -> None:
        self.move_to_frame(self.presentation.last_index)

    def move_to_next(self) -> None:
        """Animate to the next frame; nothing happens at the last frame."""
        if self.player.current_frame_index >= self.presentation.last_index:
            logger.debug("No next frame")
            return
        self._emit_local_change(ChangeKind.MOVE_TO_FRAME, self.player.next_frame)
        self.player.move_to_next()

    def move_to_previous(self) -> None:
        """Animate back to the last frame not reached by auto-advance."""
        frame = self.player.last_non_auto_transition_frame()
        if frame is None:
            logger.debug("No previous frame")
            return
        self._emit_local_change(ChangeKind.MOVE_TO_FRAME, frame)
        self.player.move_to_previous()

    def jump_to_first(self) -> None:
        self.jump_to_frame(0)

    def jump_to_last(self) -> None:
        self.jump_to_frame(self.presentation.last_index)

    def jump_to_next(self) -> None:
        frame = self.player.next_frame
        if frame is not None:
            self.jump_to_frame(frame)

    def jump_to_previous(self) -> None:
        frame = self.player.previous_frame
        if frame is not None:
            self.jump_to_frame(frame)

    # =========================================================================
    # Camera manipulation
    # =========================================================================

    def translate(self, dx: float, dy: float) -> None:
        self._emit_local_change(ChangeKind.INTERACTIVE)
        self.viewport.translate(dx, dy)

    def rotate(self, angle: float) -> None:
        """Rotate by ``angle`` degrees about the viewport center; pauses playback."""
        self.player.pause()
        self._emit_local_change(ChangeKind.INTERACTIVE)
        self.viewport.rotate(angle)

    def zoom(self, factor: float, x: float, y: float) -> None:
        """
        Zoom by ``factor`` about viewport point (x, y); pauses playback.

        An invalid factor is logged and ignored.
        """
        self.player.pause()
        self._emit_local_change(ChangeKind.INTERACTIVE)
        try:
            self.viewport.zoom(factor, x, y)
        except InvalidArgumentError as e:
            logger.warning(f"Zoom rejected: {e}")

    def zoom_default(self, factor: float) -> None:
        """Zoom about the viewport center."""
        self.zoom(factor, self.viewport.width / 2.0, self.viewport.height / 2.0)

    # =========================================================================
    # Play state
    # =========================================================================

    def toggle_pause(self) -> None:
        pausing = self.player.playing
        self._emit_local_change(ChangeKind.PAUSE, pausing)
        if pausing:
            self.player.pause()
            return
        try:
            self.player.play_from_frame(self.player.current_frame_index)
        except FrameNotFoundError as e:
            logger.warning(f"Cannot resume playback: {e}")

    def toggle_blank_screen(self) -> None:
        visible = not self.player.blank_screen_visible
        self._emit_local_change(ChangeKind.BLANK_SCREEN, visible)
        if visible:
            self.player.enable_blank_screen()
        else:
            self.player.disable_blank_screen()


__all__ = ["UIController"]
