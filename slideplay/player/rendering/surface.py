"""
Render surface interface.

The viewport never rasterizes anything: it publishes one affine transform
(and optional clip rectangle) per layer to a host surface, which applies
them to the SVG document.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import numpy as np

from slideplay.domain.camera import ClipRect


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayerTransform:
    """
    Render transform of one layer.

    Attributes
    ----------
    layer : str
        Layer id
    matrix : np.ndarray
        (3, 3) affine matrix, document -> device pixels
    clip : ClipRect | None
        Clip rectangle in device pixels, None when unclipped
    """

    layer: str
    matrix: np.ndarray
    clip: ClipRect | None = None

    def to_svg(self) -> str:
        """SVG ``transform`` attribute value: ``matrix(a,b,c,d,e,f)``."""
        m = self.matrix
        values = (m[0, 0], m[1, 0], m[0, 1], m[1, 1], m[0, 2], m[1, 2])
        # + 0.0 turns -0.0 into 0.0
        return "matrix(" + ",".join(f"{float(v) + 0.0:.6g}" for v in values) + ")"

    def apply(self, x: float, y: float) -> tuple[float, float]:
        """Map a document point to device pixels."""
        p = self.matrix @ np.array([x, y, 1.0], dtype=np.float64)
        return float(p[0]), float(p[1])


class RenderSurface(Protocol):
    """Host-side consumer of layer transforms."""

    def render(self, transforms: dict[str, LayerTransform]) -> None: ...


class NullSurface:
    """Surface that discards everything (headless playback)."""

    def render(self, transforms: dict[str, LayerTransform]) -> None:
        pass


class RecordingSurface:
    """Surface that keeps the last published transforms."""

    def __init__(self) -> None:
        self.last: dict[str, LayerTransform] = {}
        self.render_count = 0

    def render(self, transforms: dict[str, LayerTransform]) -> None:
        self.last = dict(transforms)
        self.render_count += 1


class LoggingSurface(RecordingSurface):
    """Recording surface that logs each layer's SVG transform at debug level."""

    def render(self, transforms: dict[str, LayerTransform]) -> None:
        super().render(transforms)
        for layer, transform in transforms.items():
            clip = transform.clip.as_tuple() if transform.clip else None
            logger.debug(f"Layer '{layer}': transform={transform.to_svg()} clip={clip}")


__all__ = ["LayerTransform", "LoggingSurface", "NullSurface", "RecordingSurface", "RenderSurface"]
