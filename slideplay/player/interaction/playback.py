"""
Player: presentation-level playback state machine.

States
======

- IDLE: nothing played yet
- PLAYING: a frame is shown, auto-advance armed if the frame has a timeout
- PAUSED: auto-advance disabled
- TRANSITIONING: a frame-to-frame animation is running; it ends in PLAYING
  or PAUSED depending on whether playback was paused meanwhile

Every transition and timer callback carries an epoch. A completion or
timeout whose epoch is no longer current belongs to superseded work and is
ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from functools import partial

from slideplay.domain.presentation import Frame, Presentation
from slideplay.domain.timing import TimingFunction
from slideplay.infrastructure.scheduler import Scheduler, TimerHandle
from slideplay.player.config.settings import PlaybackSettings
from slideplay.player.interaction.events import (
    BlankScreenPayload,
    EventBus,
    EventType,
    FrameChangePayload,
    StateChangePayload,
)
from slideplay.player.rendering.viewport import Viewport


logger = logging.getLogger(__name__)

FrameRef = Frame | int | str


class PlayerState(Enum):
    """Playback states."""

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    TRANSITIONING = "transitioning"


@dataclass(frozen=True)
class HistoryEntry:
    """A frame that was left, and whether it had been reached by auto-advance."""

    index: int
    arrived_by_timeout: bool


class Player:
    """
    Playback controller for a presentation.

    Handles:
    - Play/Pause state
    - Animated and instant navigation between frames
    - Auto-advance timer (no loop at the last frame)
    - Navigation history for "previous"
    - Blank screen cover
    """

    def __init__(
        self,
        viewport: Viewport,
        presentation: Presentation,
        scheduler: Scheduler,
        event_bus: EventBus,
        settings: PlaybackSettings | None = None,
    ):
        """
        Initialize the player.

        Parameters
        ----------
        viewport : Viewport
            Viewport animated toward each frame's camera states
        presentation : Presentation
            The presentation to play (read-only)
        scheduler : Scheduler
            Scheduler for the auto-advance timer
        event_bus : EventBus
            Event bus for state, frame and blank screen events
        settings : PlaybackSettings | None
            Playback settings (defaults when None)
        """
        self.viewport = viewport
        self.presentation = presentation
        self.scheduler = scheduler
        self.event_bus = event_bus
        self.settings = settings if settings is not None else PlaybackSettings()

        self.current_frame_index = 0
        self.playing = False
        self.transitioning = False
        self.blank_screen_visible = self.settings.start_with_blank_screen
        self.auto_advance_enabled = True

        self._started = False
        self._arrived_by_timeout = False
        self._history: list[HistoryEntry] = []

        self._timer: TimerHandle | None = None
        self._timer_epoch = 0
        self._transition_epoch = 0

        self._dragging = False
        self._timeout_deferred = False

        logger.debug(f"Player initialized with {len(presentation)} frames")

    # =========================================================================
    # State
    # =========================================================================

    @property
    def state(self) -> PlayerState:
        if self.transitioning:
            return PlayerState.TRANSITIONING
        if self.playing:
            return PlayerState.PLAYING
        if self._started:
            return PlayerState.PAUSED
        return PlayerState.IDLE

    @property
    def current_frame(self) -> Frame | None:
        if 0 <= self.current_frame_index < len(self.presentation):
            return self.presentation.frames[self.current_frame_index]
        return None

    @property
    def next_frame(self) -> Frame | None:
        """Frame after the current one, clamped to the last frame."""
        if not len(self.presentation):
            return None
        return self.presentation.frames[min(self.current_frame_index + 1, self.presentation.last_index)]

    @property
    def previous_frame(self) -> Frame | None:
        """Frame before the current one, clamped to the first frame."""
        if not len(self.presentation):
            return None
        return self.presentation.frames[max(self.current_frame_index - 1, 0)]

    @property
    def history(self) -> list[HistoryEntry]:
        return list(self._history)

    @property
    def timeout_pending(self) -> bool:
        return self._timer is not None and self._timer.active

    def find_frame(self, ref: FrameRef) -> Frame:
        """
        Resolve a frame by object, index, or id.

        Raises
        ------
        FrameNotFoundError
            If nothing matches; callers treat this as a no-op navigation
        """
        return self.presentation.find_frame(ref)

    def _emit_state(self) -> None:
        self.event_bus.emit(
            EventType.STATE_CHANGE,
            StateChangePayload(state=self.state.value, playing=self.playing),
            source="player",
        )

    def _emit_frame(self, previous_index: int | None) -> None:
        frame = self.current_frame
        self.event_bus.emit(
            EventType.FRAME_CHANGE,
            FrameChangePayload(index=self.current_frame_index, frame_id=frame.frame_id, previous_index=previous_index),
            source="player",
        )

    # =========================================================================
    # Navigation
    # =========================================================================

    def play_from_frame(self, ref: FrameRef) -> None:
        """Show ``ref`` without animation and start playing from it."""
        frame = self.find_frame(ref)
        self._cancel_timeout()

        previous_index = self.current_frame_index if self._started else None
        self.current_frame_index = frame.index
        self._arrived_by_timeout = False
        self.playing = True
        self._started = True
        self.transitioning = False
        self._transition_epoch += 1

        self.viewport.animate_to(self.presentation.camera_states_for(frame), 0)

        logger.info(f"Playing from frame {frame.index} ('{frame.frame_id}')")
        self._emit_frame(previous_index)
        self._emit_state()
        self._arm_timeout()

    def move_to_frame(self, ref: FrameRef) -> None:
        """Animate to ``ref`` using its transition duration and timing function."""
        frame = self.find_frame(ref)
        self._navigate(frame, frame.duration_ms, frame.timing_function)

    def jump_to_frame(self, ref: FrameRef) -> None:
        """Go to ``ref`` instantly; history and auto-advance behave as for a move."""
        frame = self.find_frame(ref)
        self._navigate(frame, 0, frame.timing_function)

    def preview_frame(self, ref: FrameRef) -> None:
        """Animate to ``ref`` without touching history or play state."""
        frame = self.find_frame(ref)
        self._navigate(frame, frame.duration_ms, frame.timing_function, record_history=False, resume=False)

    def move_to_next(self, by_timeout: bool = False) -> bool:
        """
        Animate to the next frame.

        Returns
        -------
        bool
            False (and nothing changes) at the last frame
        """
        if self.current_frame_index >= self.presentation.last_index:
            logger.debug("Already at the last frame, not moving")
            return False
        frame = self.presentation.frames[self.current_frame_index + 1]
        self._navigate(frame, frame.duration_ms, frame.timing_function, by_timeout=by_timeout)
        return True

    def move_to_previous(self) -> bool:
        """
        Animate back to the last frame that was not reached by auto-advance.

        Returns
        -------
        bool
            False (and nothing changes) when there is nowhere to go back to
        """
        target = self._previous_target()
        if target is None:
            logger.debug("Already at the first frame, not moving")
            return False

        frame, position = target
        if position >= 0:
            del self._history[position:]
        self._navigate(frame, frame.duration_ms, frame.timing_function, record_history=False)
        return True

    def last_non_auto_transition_frame(self) -> Frame | None:
        """Frame ``move_to_previous`` would go to (None when there is none)."""
        target = self._previous_target()
        return target[0] if target is not None else None

    def _previous_target(self) -> tuple[Frame, int] | None:
        for position in range(len(self._history) - 1, -1, -1):
            entry = self._history[position]
            if entry.arrived_by_timeout:
                continue
            if 0 <= entry.index < len(self.presentation):
                return self.presentation.frames[entry.index], position

        if self.current_frame_index > 0:
            return self.presentation.frames[self.current_frame_index - 1], -1
        return None

    def _navigate(
        self,
        frame: Frame,
        duration_ms: float,
        timing: TimingFunction,
        *,
        by_timeout: bool = False,
        record_history: bool = True,
        resume: bool = True,
    ) -> None:
        self._cancel_timeout()

        if record_history and self._started:
            self._history.append(HistoryEntry(self.current_frame_index, self._arrived_by_timeout))
            if len(self._history) > self.settings.history_limit:
                del self._history[0]

        previous_index = self.current_frame_index if self._started else None
        self.current_frame_index = frame.index
        self._arrived_by_timeout = by_timeout
        if resume:
            self.playing = True
        self._started = True

        self._transition_epoch += 1
        epoch = self._transition_epoch
        self.transitioning = duration_ms > 0

        logger.debug(
            f"Navigating to frame {frame.index} ('{frame.frame_id}') "
            f"in {duration_ms:.0f} ms{' (auto)' if by_timeout else ''}"
        )
        self._emit_frame(previous_index)
        self._emit_state()

        self.viewport.animate_to(
            self.presentation.camera_states_for(frame),
            duration_ms,
            timing,
            on_complete=partial(self._on_transition_complete, epoch),
        )

    def _on_transition_complete(self, epoch: int, completed: bool) -> None:
        if epoch != self._transition_epoch:
            logger.debug(f"Ignoring completion of superseded transition {epoch}")
            return

        was_transitioning = self.transitioning
        self.transitioning = False
        if was_transitioning:
            self._emit_state()

        # No-op unless playing
        if completed:
            self._arm_timeout()

    # =========================================================================
    # Play / pause
    # =========================================================================

    def pause(self) -> None:
        """Stop auto-advance; a running transition still finishes."""
        self._cancel_timeout()
        self._timeout_deferred = False
        if self.playing:
            self.playing = False
            logger.info("Playback paused")
            self._emit_state()

    def set_auto_advance(self, enabled: bool) -> None:
        """Allow or forbid timeout-driven navigation (forbidden in edit mode)."""
        self.auto_advance_enabled = enabled
        if not enabled:
            self._cancel_timeout()

    def set_dragging(self, active: bool) -> None:
        """Defer auto-advance while a drag gesture is in progress."""
        self._dragging = active
        if not active and self._timeout_deferred:
            self._timeout_deferred = False
            self._arm_timeout()

    # =========================================================================
    # Blank screen
    # =========================================================================

    def enable_blank_screen(self) -> None:
        self._set_blank_screen(True)

    def disable_blank_screen(self) -> None:
        self._set_blank_screen(False)

    def _set_blank_screen(self, visible: bool) -> None:
        if self.blank_screen_visible == visible:
            return
        self.blank_screen_visible = visible
        self.event_bus.emit(EventType.BLANK_SCREEN_CHANGE, BlankScreenPayload(visible=visible), source="player")

    # =========================================================================
    # Auto-advance timer
    # =========================================================================

    def _arm_timeout(self) -> None:
        self._cancel_timeout()
        frame = self.current_frame
        if frame is None or not (self.playing and self.auto_advance_enabled and frame.timeout_enabled):
            return

        epoch = self._timer_epoch
        self._timer = self.scheduler.call_later(
            frame.timeout_ms, partial(self._on_timeout, epoch), name="auto-advance"
        )
        logger.debug(f"Auto-advance armed for frame {frame.index} ({frame.timeout_seconds:g} s)")

    def _cancel_timeout(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._timer_epoch += 1

    def _on_timeout(self, epoch: int) -> None:
        if epoch != self._timer_epoch:
            logger.debug("Ignoring stale auto-advance timeout")
            return
        self._timer = None

        if not self.playing:
            return
        if self._dragging:
            logger.debug("Auto-advance deferred until the drag ends")
            self._timeout_deferred = True
            return
        if not self.move_to_next(by_timeout=True):
            logger.info("Last frame reached, auto-advance stops")


__all__ = ["FrameRef", "HistoryEntry", "Player", "PlayerState"]
