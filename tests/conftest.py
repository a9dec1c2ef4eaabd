"""Pytest configuration and shared fixtures."""

import shutil
import tempfile
from pathlib import Path

import pytest

from slideplay.domain.camera import CameraState
from slideplay.domain.presentation import Frame, Presentation
from slideplay.domain.timing import TimingFunction
from slideplay.infrastructure.scheduler import ManualClock, Scheduler
from slideplay.player.interaction.controller import UIController
from slideplay.player.interaction.events import EventBus, EventType
from slideplay.player.interaction.playback import Player
from slideplay.player.rendering.surface import RecordingSurface
from slideplay.player.rendering.viewport import Viewport


# Integral step keeps the manual clock exact at transition end times
STEP_MS = 50.0


class EventRecorder:
    """Collects every event emitted on a bus."""

    def __init__(self, event_bus: EventBus):
        self.events = []
        for event_type in EventType:
            event_bus.subscribe(event_type, self.events.append)

    def of(self, event_type: EventType) -> list:
        return [e.payload for e in self.events if e.type == event_type]

    def count(self, event_type: EventType) -> int:
        return len(self.of(event_type))

    def types(self) -> list[EventType]:
        return [e.type for e in self.events]

    def clear(self) -> None:
        self.events.clear()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler(clock):
    return Scheduler(clock, name="test")


@pytest.fixture
def run_for(scheduler):
    """Advance simulated time by ``ms`` in exact steps."""

    def _run(ms: float) -> None:
        scheduler.advance(ms, frame_interval_ms=STEP_MS)

    return _run


@pytest.fixture
def event_bus():
    return EventBus(name="test")


@pytest.fixture
def recorder(event_bus):
    return EventRecorder(event_bus)


@pytest.fixture
def presentation():
    """
    Four frames on one layer:

    - intro: identity camera
    - detail: panned, auto-advances after 2 s
    - zoom: scaled x2, 500 ms transition
    - outro: rotated 90 degrees
    """
    frames = [
        Frame(
            frame_id="intro",
            title="Introduction",
            camera_states={"default": CameraState()},
            timing_function=TimingFunction.LINEAR,
        ),
        Frame(
            frame_id="detail",
            title="Detail",
            camera_states={"default": CameraState(translate_x=-200.0)},
            timing_function=TimingFunction.LINEAR,
            timeout_enabled=True,
            timeout_seconds=2.0,
        ),
        Frame(
            frame_id="zoom",
            title="Zoom",
            camera_states={"default": CameraState(scale=2.0)},
            duration_ms=500.0,
            timing_function=TimingFunction.LINEAR,
            show_in_frame_list=False,
        ),
        Frame(
            frame_id="outro",
            title="Conclusion",
            camera_states={"default": CameraState(rotation=90.0)},
            timing_function=TimingFunction.LINEAR,
        ),
    ]
    return Presentation(frames=frames, title="Demo")


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def viewport(presentation, scheduler, surface):
    return Viewport(presentation, scheduler, surface=surface, width=800.0, height=600.0)


@pytest.fixture
def player(viewport, presentation, scheduler, event_bus):
    return Player(viewport, presentation, scheduler, event_bus)


@pytest.fixture
def controller(player, event_bus):
    return UIController(player, event_bus)
