"""
Domain entities for presentation playback.

Pure data and pure math: no scheduling, no events, no I/O.
"""

from .camera import CameraState, ClipRect
from .presentation import DEFAULT_LAYER, Frame, Presentation
from .timing import CubicBezier, TimingFunction


__all__ = [
    "CameraState",
    "ClipRect",
    "CubicBezier",
    "DEFAULT_LAYER",
    "Frame",
    "Presentation",
    "TimingFunction",
]
