"""Tests for the UI controller: gestures, wheel, keyboard and semantic commands."""

import logging

import pytest

from slideplay.domain.camera import ClipRect
from slideplay.domain.presentation import Frame, Presentation
from slideplay.player.interaction.controller import UIController
from slideplay.player.interaction.events import ChangeKind, EventBus, EventType
from slideplay.player.interaction.input import KeyEvent, Modifiers, PointerEvent, WheelEvent
from slideplay.player.interaction.playback import Player, PlayerState
from slideplay.player.rendering.viewport import Viewport


SHIFT = Modifiers(shift=True)
CTRL = Modifiers(ctrl=True)
ALT = Modifiers(alt=True)


def build_controller(scheduler, edit_mode=False, **capabilities):
    """Controller on its own bus for a three-frame presentation."""
    presentation = Presentation(frames=[Frame(frame_id=name) for name in ("a", "b", "c")], **capabilities)
    event_bus = EventBus(name="gated")
    viewport = Viewport(presentation, scheduler)
    player = Player(viewport, presentation, scheduler, event_bus)
    return UIController(player, event_bus, edit_mode=edit_mode)


def drag(controller, points, modifiers=Modifiers()):
    """Press at the first point, move through the rest, release at the last."""
    (x, y), rest = points[0], points[1:]
    controller.on_mouse_down(PointerEvent(client_x=x, client_y=y))
    for x, y in rest:
        controller.on_mouse_move(PointerEvent(client_x=x, client_y=y, modifiers=modifiers))
    controller.on_mouse_up(PointerEvent(client_x=x, client_y=y))


class TestClickAndDrag:
    """Test click versus drag recognition."""

    def test_click_moves_to_next(self, controller, player, recorder):
        player.play_from_frame(0)

        drag(controller, [(100.0, 100.0), (103.0, 104.0)])

        assert recorder.count(EventType.CLICK) == 1
        assert recorder.count(EventType.DRAG_START) == 0
        assert player.current_frame_index == 1

    def test_threshold_is_strict(self, controller, player, recorder):
        player.play_from_frame(0)

        drag(controller, [(100.0, 100.0), (105.0, 95.0)])

        assert recorder.count(EventType.DRAG_START) == 0
        assert recorder.count(EventType.CLICK) == 1

    def test_mouse_down_is_consumed(self, controller, recorder):
        evt = PointerEvent(client_x=10.0, client_y=10.0)
        controller.on_mouse_down(evt)

        assert evt.consumed
        assert [p.button for p in recorder.of(EventType.MOUSE_DOWN)] == [0]

    def test_release_without_press_is_ignored(self, controller, recorder):
        evt = PointerEvent(client_x=10.0, client_y=10.0)
        controller.on_mouse_up(evt)

        assert recorder.events == []
        assert not evt.consumed

    def test_other_button_release_reports_click(self, controller, recorder):
        controller.on_mouse_down(PointerEvent(client_x=10.0, client_y=10.0))
        controller.on_mouse_up(PointerEvent(client_x=10.0, client_y=10.0, button=1))

        assert [p.button for p in recorder.of(EventType.CLICK)] == [1]

    def test_context_menu_moves_to_previous(self, controller, player):
        player.play_from_frame(2)

        evt = PointerEvent(button=2)
        controller.on_context_menu(evt)

        assert evt.consumed
        assert player.current_frame_index == 1

    def test_translate_drag(self, controller, player, viewport, recorder):
        player.play_from_frame(0)

        # Confirmation at (110, 100) is the reference; only later motion moves the camera
        drag(controller, [(100.0, 100.0), (110.0, 100.0), (130.0, 100.0)])

        state = viewport.camera_state("default")
        assert (state.translate_x, state.translate_y) == (20.0, 0.0)
        assert player.state is PlayerState.PAUSED
        assert recorder.count(EventType.CLICK) == 0
        assert [p.changed_state for p in recorder.of(EventType.DRAG_END)] == [True]
        assert recorder.count(EventType.USER_CHANGE_STATE) == 1

    def test_drag_end_order(self, controller, recorder):
        drag(controller, [(100.0, 100.0), (110.0, 100.0), (130.0, 100.0)])

        gesture_types = [t for t in recorder.types() if t in (EventType.DRAG_END, EventType.USER_CHANGE_STATE)]
        assert gesture_types == [EventType.DRAG_END, EventType.USER_CHANGE_STATE]

    def test_press_after_lost_release_ends_drag(self, controller, player, recorder, run_for):
        player.play_from_frame(0)
        controller.on_mouse_down(PointerEvent(client_x=100.0, client_y=100.0))
        controller.on_mouse_move(PointerEvent(client_x=130.0, client_y=100.0))

        # No mouse up for the drag; the next press starts a fresh gesture
        controller.on_mouse_down(PointerEvent(client_x=130.0, client_y=100.0))
        assert [p.changed_state for p in recorder.of(EventType.DRAG_END)] == [True]

        controller.on_mouse_up(PointerEvent(client_x=130.0, client_y=100.0))
        assert player.current_frame_index == 1
        assert player.playing

        run_for(3000.0)
        assert player.current_frame_index == 2

    def test_constrained_translate(self, controller, viewport):
        drag(controller, [(100.0, 100.0), (110.0, 100.0), (130.0, 104.0)], modifiers=CTRL)

        state = viewport.camera_state("default")
        assert (state.translate_x, state.translate_y) == (20.0, 0.0)

    def test_rotate_drag(self, controller, viewport):
        # Angles are measured around the viewport center (400, 300)
        drag(controller, [(500.0, 300.0), (510.0, 300.0), (400.0, 400.0)], modifiers=SHIFT)

        assert viewport.camera_state("default").rotation == pytest.approx(270.0)

    def test_rotate_drag_snaps(self, controller, viewport):
        drag(controller, [(500.0, 300.0), (510.0, 300.0), (500.0, 310.0)], modifiers=Modifiers(shift=True, ctrl=True))

        assert viewport.camera_state("default").rotation == pytest.approx(350.0)

    def test_scale_drag(self, controller, viewport):
        drag(controller, [(500.0, 300.0), (510.0, 300.0), (620.0, 300.0)], modifiers=ALT)

        assert viewport.camera_state("default").scale == pytest.approx(2.0)

    def test_clip_drag(self, scheduler):
        controller = build_controller(scheduler, edit_mode=True)
        changes = []
        controller.event_bus.subscribe(EventType.USER_CHANGE_STATE, changes.append)
        controller.viewport.drag_mode = "clip"

        drag(controller, [(10.0, 10.0), (20.0, 20.0), (40.0, 30.0)])

        assert controller.viewport.camera_state("default").clip == ClipRect(10.0, 10.0, 40.0, 30.0)
        assert len(changes) == 1

    def test_clip_mode_translates_outside_edit_mode(self, controller, viewport):
        viewport.drag_mode = "clip"

        drag(controller, [(10.0, 10.0), (20.0, 10.0), (40.0, 10.0)])

        state = viewport.camera_state("default")
        assert state.clip is None
        assert state.translate_x == 20.0

    def test_hover_cursor(self, scheduler):
        controller = build_controller(scheduler, edit_mode=True)
        controller.on_mouse_move(PointerEvent(client_x=10.0, client_y=10.0))
        assert controller.cursor == "default"

        controller.viewport.drag_mode = "clip"
        controller.on_mouse_move(PointerEvent(client_x=10.0, client_y=10.0))
        assert controller.cursor == "crosshair"

    def test_no_clip_cursor_outside_edit_mode(self, controller, viewport):
        viewport.drag_mode = "clip"
        controller.on_mouse_move(PointerEvent(client_x=10.0, client_y=10.0))
        assert controller.cursor == "default"

    def test_translation_disabled(self, scheduler):
        controller = build_controller(scheduler, enable_mouse_translation=False)
        controller.player.play_from_frame(0)

        drag(controller, [(100.0, 100.0), (110.0, 100.0), (130.0, 100.0)])

        assert controller.viewport.camera_state("default").translate_x == 0.0
        assert controller.player.playing


class TestWheel:
    """Test wheel zoom and rotation."""

    def test_wheel_burst_is_one_change(self, controller, player, viewport, recorder, run_for):
        player.play_from_frame(0)
        for _ in range(5):
            controller.on_wheel(WheelEvent(client_x=400.0, client_y=300.0, delta_y=-1.0))

        assert viewport.camera_state("default").scale == pytest.approx(1.05**5)
        assert player.state is PlayerState.PAUSED

        run_for(150.0)
        assert recorder.count(EventType.USER_CHANGE_STATE) == 0

        run_for(50.0)
        assert recorder.count(EventType.USER_CHANGE_STATE) == 1

        run_for(1000.0)
        assert recorder.count(EventType.USER_CHANGE_STATE) == 1

    def test_wheel_out(self, controller, viewport):
        controller.on_wheel(WheelEvent(client_x=400.0, client_y=300.0, delta_y=3.0))
        assert viewport.camera_state("default").scale == pytest.approx(1.0 / 1.05)

    def test_legacy_wheel_delta(self, controller, viewport):
        controller.on_wheel(WheelEvent(client_x=400.0, client_y=300.0, wheel_delta=120.0))
        assert viewport.camera_state("default").scale == pytest.approx(1.05)

    def test_shift_wheel_rotates(self, controller, viewport):
        controller.on_wheel(WheelEvent(delta_y=-1.0, modifiers=SHIFT))
        assert viewport.camera_state("default").rotation == pytest.approx(5.0)

    def test_zero_delta_ignored(self, controller, scheduler):
        evt = WheelEvent(delta_y=0.0)
        controller.on_wheel(evt)

        assert evt.consumed
        assert not scheduler.has_pending

    def test_zoom_disabled(self, scheduler, run_for):
        controller = build_controller(scheduler, enable_mouse_zoom=False)
        changes = []
        controller.event_bus.subscribe(EventType.USER_CHANGE_STATE, changes.append)

        controller.on_wheel(WheelEvent(client_x=400.0, client_y=300.0, delta_y=-1.0))
        run_for(500.0)

        assert controller.viewport.camera_state("default").scale == 1.0
        assert changes == []

    def test_edit_mode_bypasses_capabilities(self, scheduler):
        controller = build_controller(scheduler, edit_mode=True, enable_mouse_zoom=False)

        controller.on_wheel(WheelEvent(client_x=400.0, client_y=300.0, delta_y=-1.0))

        assert controller.viewport.camera_state("default").scale == pytest.approx(1.05)


class TestKeyboard:
    """Test key bindings."""

    def test_arrow_right_moves(self, controller, player):
        player.play_from_frame(0)

        evt = KeyEvent(key="ArrowRight")
        assert controller.on_key_down(evt)

        assert evt.consumed
        assert player.current_frame_index == 1
        assert player.state is PlayerState.TRANSITIONING

    def test_shift_jumps(self, controller, player):
        player.play_from_frame(0)

        assert controller.on_key_down(KeyEvent(key="End", modifiers=SHIFT))

        assert player.current_frame_index == 3
        assert player.state is PlayerState.PLAYING

    def test_home_moves_to_first(self, controller, player):
        player.play_from_frame(3)
        controller.on_key_down(KeyEvent(key="Home"))
        assert player.current_frame_index == 0

    def test_command_modifiers_pass_through(self, controller, player):
        player.play_from_frame(0)

        evt = KeyEvent(key="ArrowRight", modifiers=CTRL)
        assert not controller.on_key_down(evt)

        assert not evt.consumed
        assert player.current_frame_index == 0

    def test_unknown_key_not_consumed(self, controller):
        evt = KeyEvent(key="q")
        assert not controller.on_key_down(evt)
        assert not evt.consumed

    def test_disabled_navigation_still_consumes(self, scheduler):
        controller = build_controller(scheduler, enable_keyboard_navigation=False)
        controller.player.play_from_frame(0)

        assert controller.on_key_down(KeyEvent(key="ArrowRight"))
        assert controller.player.current_frame_index == 0

    def test_edit_mode_ignores_keys(self, scheduler):
        controller = build_controller(scheduler, edit_mode=True)
        controller.player.play_from_frame(0)

        assert not controller.on_key_down(KeyEvent(key="ArrowRight"))
        assert not controller.on_key_press(KeyEvent(key="+"))
        assert controller.player.current_frame_index == 0
        assert not controller.player.auto_advance_enabled

    def test_plus_zooms(self, controller, viewport):
        assert controller.on_key_press(KeyEvent(key="+"))
        assert viewport.camera_state("default").scale == pytest.approx(1.05)

    def test_rotate_keys(self, controller, viewport):
        controller.on_key_press(KeyEvent(key="r"))
        controller.on_key_press(KeyEvent(key="r"))
        controller.on_key_press(KeyEvent(key="R"))
        assert viewport.camera_state("default").rotation == pytest.approx(5.0)

    def test_pause_toggle(self, controller, player, recorder):
        player.play_from_frame(1)

        controller.on_key_press(KeyEvent(key="p"))
        assert player.state is PlayerState.PAUSED
        assert not player.timeout_pending

        controller.on_key_press(KeyEvent(key="P"))
        assert player.playing
        assert player.timeout_pending

        pauses = [p.value for p in recorder.of(EventType.LOCAL_CHANGE) if p.change is ChangeKind.PAUSE]
        assert pauses == [True, False]

    def test_blank_screen_toggle(self, controller, player, recorder):
        assert controller.on_key_press(KeyEvent(key="."))

        assert not player.blank_screen_visible
        changes = [p for p in recorder.of(EventType.LOCAL_CHANGE) if p.change is ChangeKind.BLANK_SCREEN]
        assert [p.value for p in changes] == [False]

    def test_unknown_character(self, controller):
        assert not controller.on_key_press(KeyEvent(key="z"))


class TestCommands:
    """Test semantic commands and LOCAL_CHANGE publication."""

    def test_local_change_precedes_frame_change(self, controller, player, recorder):
        player.play_from_frame(0)
        recorder.clear()

        controller.move_to_frame("outro")

        assert recorder.types()[:2] == [EventType.LOCAL_CHANGE, EventType.FRAME_CHANGE]
        change = recorder.of(EventType.LOCAL_CHANGE)[0]
        assert change.change is ChangeKind.MOVE_TO_FRAME
        assert change.value.frame_id == "outro"

    def test_unknown_frame_is_ignored(self, controller, player, recorder, caplog):
        player.play_from_frame(0)
        recorder.clear()

        with caplog.at_level(logging.WARNING):
            controller.move_to_frame("nope")

        assert recorder.events == []
        assert "Ignoring navigation" in caplog.text

    def test_move_to_next_at_last_frame(self, controller, player, recorder):
        player.play_from_frame(3)
        recorder.clear()

        controller.move_to_next()

        assert recorder.events == []

    def test_preview_frame(self, controller, player, recorder):
        player.play_from_frame(0)
        controller.preview_frame(2)

        changes = recorder.of(EventType.LOCAL_CHANGE)
        assert [c.change for c in changes] == [ChangeKind.PREVIEW_FRAME]
        assert player.history == []

    def test_jump_to_next(self, controller, player):
        player.play_from_frame(0)
        controller.jump_to_next()
        assert player.current_frame_index == 1
        assert player.state is PlayerState.PLAYING

    def test_translate_emits_interactive(self, controller, recorder):
        controller.translate(5.0, 5.0)
        assert [c.change for c in recorder.of(EventType.LOCAL_CHANGE)] == [ChangeKind.INTERACTIVE]

    def test_invalid_zoom_is_swallowed(self, controller, viewport, caplog):
        with caplog.at_level(logging.WARNING):
            controller.zoom(0.0, 10.0, 10.0)

        assert viewport.camera_state("default").scale == 1.0
        assert "Zoom rejected" in caplog.text
