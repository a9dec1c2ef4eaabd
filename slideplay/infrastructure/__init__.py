"""Infrastructure: scheduling and presentation document I/O."""

from .presentation_io import load_presentation, save_presentation
from .scheduler import ManualClock, MonotonicClock, Scheduler, TimerHandle


__all__ = [
    "ManualClock",
    "MonotonicClock",
    "Scheduler",
    "TimerHandle",
    "load_presentation",
    "save_presentation",
]
