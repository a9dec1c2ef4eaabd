"""Tests for the single-threaded scheduler."""

import logging

import pytest

from slideplay.infrastructure.scheduler import COMPACT_THRESHOLD, ManualClock, MonotonicClock, Scheduler


class TestTimers:
    """Test call_later."""

    def test_fires_at_deadline(self, scheduler):
        fired = []
        scheduler.call_later(200.0, lambda: fired.append("a"))

        scheduler.advance(199.0, frame_interval_ms=199.0)
        assert fired == []

        scheduler.advance(1.0)
        assert fired == ["a"]

    def test_deadline_order(self, scheduler):
        fired = []
        scheduler.call_later(30.0, lambda: fired.append("late"))
        scheduler.call_later(10.0, lambda: fired.append("early"))
        scheduler.call_later(10.0, lambda: fired.append("early-2"))

        scheduler.advance(50.0, frame_interval_ms=50.0)

        assert fired == ["early", "early-2", "late"]

    def test_cancel(self, scheduler):
        fired = []
        handle = scheduler.call_later(10.0, lambda: fired.append("x"))
        handle.cancel()

        scheduler.advance(20.0)

        assert fired == []
        assert not handle.active
        assert not scheduler.has_pending

    def test_timer_created_during_tick_waits(self, scheduler):
        fired = []

        def chain():
            fired.append("first")
            scheduler.call_later(0.0, lambda: fired.append("second"))

        scheduler.call_later(0.0, chain)
        scheduler.tick()
        assert fired == ["first"]

        scheduler.tick()
        assert fired == ["first", "second"]

    def test_callback_errors_are_logged(self, scheduler, caplog):
        fired = []

        def broken():
            raise RuntimeError("boom")

        scheduler.call_later(0.0, broken, name="broken")
        scheduler.call_later(0.0, lambda: fired.append("ok"))

        with caplog.at_level(logging.ERROR):
            scheduler.tick()

        assert fired == ["ok"]
        assert "broken" in caplog.text

    def test_cancelled_timers_are_purged(self, scheduler):
        fired = []
        for _ in range(500):
            scheduler.call_later(60_000.0, lambda: fired.append("stale")).cancel()
        scheduler.call_later(10.0, lambda: fired.append("live"))

        assert len(scheduler._timers) <= COMPACT_THRESHOLD + 1
        assert [h.name for h in scheduler.pending_timers()] == ["timer"]

        scheduler.advance(60_000.0, frame_interval_ms=1000.0)
        assert fired == ["live"]

    def test_pending_timers_sorted(self, scheduler):
        scheduler.call_later(50.0, lambda: None, name="b")
        scheduler.call_later(5.0, lambda: None, name="a")
        assert [h.name for h in scheduler.pending_timers()] == ["a", "b"]


class TestFrames:
    """Test request_frame."""

    def test_runs_once_with_tick_time(self, scheduler, clock):
        stamps = []
        scheduler.request_frame(stamps.append)

        clock.advance(16.0)
        scheduler.tick()
        scheduler.tick()

        assert stamps == [16.0]

    def test_frame_requested_during_tick_runs_next_tick(self, scheduler):
        calls = []

        def step(now):
            calls.append(now)
            if len(calls) < 3:
                scheduler.request_frame(step)

        scheduler.request_frame(step)
        scheduler.advance(100.0, frame_interval_ms=25.0)

        assert calls == [25.0, 50.0, 75.0]


class TestAdvance:
    """Test simulated time."""

    def test_lands_exactly_on_target(self, scheduler, clock):
        scheduler.advance(100.0, frame_interval_ms=30.0)
        assert clock.now() == pytest.approx(100.0)

    def test_requires_manual_clock(self):
        scheduler = Scheduler(MonotonicClock())
        with pytest.raises(TypeError):
            scheduler.advance(10.0)

    def test_clock_cannot_go_backwards(self):
        with pytest.raises(ValueError):
            ManualClock().advance(-1.0)


class TestRun:
    """Test the real-time loop."""

    def test_returns_when_idle(self):
        scheduler = Scheduler()
        fired = []
        scheduler.call_later(5.0, lambda: fired.append(True))

        scheduler.run(frame_interval_ms=1.0, until_idle=True, timeout_s=2.0)

        assert fired == [True]
        assert not scheduler.has_pending
