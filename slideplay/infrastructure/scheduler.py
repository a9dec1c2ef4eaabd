"""Single-threaded scheduler for timers and per-frame callbacks.

All playback work (input handling, timer expiry, animation steps) runs on
one logical thread. The scheduler owns the two kinds of suspension points:

- one-shot timers (``call_later``): auto-advance, wheel-gesture debounce
- frame callbacks (``request_frame``): animation steps, run once on the
  next tick with the tick's timestamp

Time is read from a clock object so that hosts can drive playback from a
real monotonic clock (``run``) or from simulated time (``advance``).

Example
-------
>>> clock = ManualClock()
>>> scheduler = Scheduler(clock)
>>> fired = []
>>> handle = scheduler.call_later(200.0, lambda: fired.append("wheel"))
>>> scheduler.advance(250.0)
>>> fired
['wheel']
"""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol


logger = logging.getLogger(__name__)

DEFAULT_FRAME_INTERVAL_MS = 1000.0 / 60.0

# Timer heap size above which cancelled entries are purged
COMPACT_THRESHOLD = 64


class Clock(Protocol):
    """Source of the current time in milliseconds."""

    def now(self) -> float: ...


class MonotonicClock:
    """Wall clock based on ``time.perf_counter``."""

    def __init__(self) -> None:
        self._origin = time.perf_counter()

    def now(self) -> float:
        return (time.perf_counter() - self._origin) * 1000.0


class ManualClock:
    """Clock that only moves when told to (simulation and tests)."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now = float(start_ms)

    def now(self) -> float:
        return self._now

    def advance(self, delta_ms: float) -> None:
        if delta_ms < 0:
            raise ValueError(f"Cannot move a clock backwards (delta={delta_ms})")
        self._now += delta_ms


@dataclass(eq=False)
class TimerHandle:
    """Cancellable handle of a scheduled callback."""

    deadline: float
    callback: Callable[..., None]
    name: str = "timer"
    cancelled: bool = False
    fired: bool = False
    _seq: int = field(default=0, repr=False)

    def cancel(self) -> None:
        """Drop the callback; a no-op once it has fired."""
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)


class Scheduler:
    """
    Cooperative one-thread scheduler.

    Each ``tick`` first fires the timers whose deadline has passed (in
    deadline order), then runs the frame callbacks requested before the
    tick started. Callback exceptions are logged and do not stop the tick.
    """

    def __init__(self, clock: Clock | None = None, name: str = "scheduler"):
        """
        Initialize the scheduler.

        Parameters
        ----------
        clock : Clock | None
            Time source; defaults to a MonotonicClock
        name : str
            Name used in log messages
        """
        self.clock = clock if clock is not None else MonotonicClock()
        self.name = name
        self._timers: list[tuple[float, int, TimerHandle]] = []
        self._frames: list[TimerHandle] = []
        self._seq = itertools.count()
        self._stop_event = threading.Event()
        logger.debug(f"Scheduler '{name}' created with {type(self.clock).__name__}")

    def now(self) -> float:
        return self.clock.now()

    # =========================================================================
    # Scheduling
    # =========================================================================

    def call_later(self, delay_ms: float, callback: Callable[[], None], name: str = "timer") -> TimerHandle:
        """Schedule ``callback`` to run once after ``delay_ms``."""
        seq = next(self._seq)
        handle = TimerHandle(self.now() + max(0.0, delay_ms), callback, name=name, _seq=seq)
        heapq.heappush(self._timers, (handle.deadline, seq, handle))
        if len(self._timers) > COMPACT_THRESHOLD:
            self._compact()
        return handle

    def _compact(self) -> None:
        """Drop cancelled timers once they make up most of the heap."""
        live = [entry for entry in self._timers if entry[2].active]
        if len(live) * 2 > len(self._timers):
            return
        heapq.heapify(live)
        logger.debug(f"[{self.name}] Purged {len(self._timers) - len(live)} cancelled timers")
        self._timers = live

    def request_frame(self, callback: Callable[[float], None], name: str = "frame") -> TimerHandle:
        """Schedule ``callback(now_ms)`` to run on the next tick."""
        handle = TimerHandle(self.now(), callback, name=name, _seq=next(self._seq))
        self._frames.append(handle)
        return handle

    @property
    def has_pending(self) -> bool:
        """True if any uncancelled timer or frame callback is waiting."""
        return any(h.active for _, _, h in self._timers) or any(h.active for h in self._frames)

    def pending_timers(self) -> list[TimerHandle]:
        return sorted((h for _, _, h in self._timers if h.active), key=lambda h: (h.deadline, h._seq))

    # =========================================================================
    # Execution
    # =========================================================================

    def tick(self) -> int:
        """
        Run everything that is due now.

        Returns
        -------
        int
            Number of callbacks executed
        """
        now = self.now()
        horizon = next(self._seq)
        executed = 0

        while self._timers and self._timers[0][0] <= now and self._timers[0][1] < horizon:
            _, _, handle = heapq.heappop(self._timers)
            if not handle.active:
                continue
            handle.fired = True
            executed += self._invoke(handle)

        frames, self._frames = self._frames, []
        for handle in frames:
            if not handle.active:
                continue
            handle.fired = True
            executed += self._invoke(handle, now)

        return executed

    def _invoke(self, handle: TimerHandle, *args) -> int:
        try:
            handle.callback(*args)
        except Exception as e:
            logger.error(f"[{self.name}] Error in scheduled callback '{handle.name}': {e}", exc_info=True)
        return 1

    def advance(self, delta_ms: float, frame_interval_ms: float = DEFAULT_FRAME_INTERVAL_MS) -> None:
        """
        Move a manual clock forward, ticking once per frame interval.

        The last step lands exactly on ``now + delta_ms``.

        Raises
        ------
        TypeError
            If the clock cannot be advanced
        """
        advance = getattr(self.clock, "advance", None)
        if advance is None:
            raise TypeError(f"{type(self.clock).__name__} cannot be advanced manually")

        remaining = float(delta_ms)
        if remaining <= 0:
            self.tick()
            return

        while remaining > 1e-9:
            step = min(frame_interval_ms, remaining)
            advance(step)
            remaining -= step
            self.tick()

    def run(
        self,
        frame_interval_ms: float = DEFAULT_FRAME_INTERVAL_MS,
        until_idle: bool = True,
        timeout_s: float | None = None,
    ) -> None:
        """
        Run the tick loop in real time.

        This method blocks until ``stop`` is called, the queue drains (when
        ``until_idle``), or ``timeout_s`` elapses.
        """
        logger.info(f"[{self.name}] Starting scheduler loop")
        self._stop_event.clear()
        started = time.perf_counter()

        while not self._stop_event.is_set():
            try:
                self.tick()
                if until_idle and not self.has_pending:
                    logger.info(f"[{self.name}] Nothing left to run")
                    break
                if timeout_s is not None and time.perf_counter() - started >= timeout_s:
                    logger.info(f"[{self.name}] Loop timeout reached")
                    break
                time.sleep(frame_interval_ms / 1000.0)
            except KeyboardInterrupt:
                logger.info(f"[{self.name}] Scheduler loop interrupted")
                break

    def stop(self) -> None:
        """Stop a running ``run`` loop."""
        self._stop_event.set()
        logger.info(f"[{self.name}] Scheduler loop stopped")


__all__ = [
    "COMPACT_THRESHOLD",
    "Clock",
    "DEFAULT_FRAME_INTERVAL_MS",
    "ManualClock",
    "MonotonicClock",
    "Scheduler",
    "TimerHandle",
]
