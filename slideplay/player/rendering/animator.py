"""
Camera animation driver.

Interpolates every layer's camera state from a start pose to a target pose
over a duration, one step per scheduler frame. Each step callback carries
the epoch of the transition that requested it; a callback whose epoch is
no longer current belongs to a cancelled or superseded transition and is
dropped.

Cancellation samples the interpolation at the cancel time so that the
next owner of the camera (a new transition or direct manipulation) starts
from what is currently on screen.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial

from slideplay.domain.camera import CameraState, ClipRect
from slideplay.domain.timing import TimingFunction
from slideplay.infrastructure.scheduler import Scheduler, TimerHandle


logger = logging.getLogger(__name__)

CameraStates = dict[str, CameraState]


@dataclass
class _Transition:
    start_states: CameraStates
    target_states: CameraStates
    start_time: float
    duration_ms: float
    timing: TimingFunction
    bounds: ClipRect | None
    on_step: Callable[[CameraStates], None]
    on_done: Callable[[], None]


class CameraAnimator:
    """Drives one camera transition at a time."""

    def __init__(self, scheduler: Scheduler, name: str = "camera"):
        """
        Initialize the animator.

        Parameters
        ----------
        scheduler : Scheduler
            Scheduler providing frame callbacks and the current time
        name : str
            Name used in log messages
        """
        self.scheduler = scheduler
        self.name = name
        self._epoch = 0
        self._transition: _Transition | None = None
        self._frame_handle: TimerHandle | None = None

    @property
    def running(self) -> bool:
        return self._transition is not None

    @property
    def epoch(self) -> int:
        return self._epoch

    def start(
        self,
        start_states: CameraStates,
        target_states: CameraStates,
        duration_ms: float,
        timing: TimingFunction,
        on_step: Callable[[CameraStates], None],
        on_done: Callable[[], None],
        bounds: ClipRect | None = None,
    ) -> int:
        """
        Begin a transition, superseding any running one.

        Returns
        -------
        int
            Epoch of the new transition
        """
        if self._transition is not None:
            self.cancel()

        self._epoch += 1
        self._transition = _Transition(
            start_states=dict(start_states),
            target_states=dict(target_states),
            start_time=self.scheduler.now(),
            duration_ms=float(duration_ms),
            timing=timing,
            bounds=bounds,
            on_step=on_step,
            on_done=on_done,
        )
        self._request_step()
        logger.debug(
            f"[{self.name}] Transition {self._epoch} started "
            f"({duration_ms:.0f} ms, {timing.value}, {len(target_states)} layers)"
        )
        return self._epoch

    def _request_step(self) -> None:
        self._frame_handle = self.scheduler.request_frame(
            partial(self._step, self._epoch), name=f"{self.name}-step"
        )

    def progress(self, now: float | None = None) -> float:
        """Elapsed fraction of the running transition in [0, 1]."""
        transition = self._transition
        if transition is None:
            return 1.0
        if now is None:
            now = self.scheduler.now()
        if transition.duration_ms <= 0:
            return 1.0
        return min(1.0, max(0.0, (now - transition.start_time) / transition.duration_ms))

    def sample(self, now: float | None = None) -> CameraStates | None:
        """Interpolated states of the running transition at ``now`` (None when idle)."""
        transition = self._transition
        if transition is None:
            return None

        eased = transition.timing.apply(self.progress(now))
        states: CameraStates = {}
        for layer, target in transition.target_states.items():
            start = transition.start_states.get(layer, target)
            states[layer] = start.interpolate(target, eased, transition.bounds)
        return states

    def _step(self, epoch: int, now: float) -> None:
        if epoch != self._epoch or self._transition is None:
            logger.debug(f"[{self.name}] Dropping stale step of transition {epoch}")
            return

        transition = self._transition
        states = self.sample(now)
        transition.on_step(states)

        if self.progress(now) >= 1.0:
            self._transition = None
            self._frame_handle = None
            logger.debug(f"[{self.name}] Transition {epoch} completed")
            transition.on_done()
        else:
            self._request_step()

    def cancel(self) -> CameraStates | None:
        """
        Stop the running transition.

        Returns
        -------
        CameraStates | None
            States sampled at cancel time, or None if nothing was running
        """
        if self._transition is None:
            return None

        states = self.sample()
        if self._frame_handle is not None:
            self._frame_handle.cancel()
            self._frame_handle = None
        self._transition = None
        self._epoch += 1
        logger.debug(f"[{self.name}] Transition cancelled")
        return states


__all__ = ["CameraAnimator", "CameraStates"]
