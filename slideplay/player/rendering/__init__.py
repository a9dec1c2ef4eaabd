"""Camera model, animation driver, and render surface interface."""

from .animator import CameraAnimator
from .surface import LayerTransform, LoggingSurface, NullSurface, RecordingSurface, RenderSurface
from .viewport import ClipMode, Viewport


__all__ = [
    "CameraAnimator",
    "ClipMode",
    "LayerTransform",
    "LoggingSurface",
    "NullSurface",
    "RecordingSurface",
    "RenderSurface",
    "Viewport",
]
