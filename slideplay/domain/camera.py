"""
Camera state for one presentation layer.

Design principle: store what is natural for a 2D presentation camera.
- translation (document units), scale, rotation (degrees) are primary
- the 3x3 document-to-device matrix is derived on demand
- rotation is always normalized to [0, 360)

SCREEN MAPPING:
    device = C + scale * R(rotation) * (doc + translate)

    where C is the viewport center. Rotation therefore always pivots about
    the viewport center, and the document point shown at the center is
    ``-translate``.

Clip rectangles are expressed in device pixels relative to the viewport's
top-left corner.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace

import numpy as np

from slideplay.shared.exceptions import InvalidArgumentError
from slideplay.shared.math import normalize_angle, rotation_matrix, shortest_angle_delta


@dataclass(frozen=True)
class ClipRect:
    """
    Axis-aligned clip rectangle in viewport device pixels.

    A zero-area rectangle is legal and means the layer is fully clipped.

    Attributes
    ----------
    x0, y0 : float
        Top-left corner
    x1, y1 : float
        Bottom-right corner
    """

    x0: float
    y0: float
    x1: float
    y1: float

    def __post_init__(self):
        """Validate edge ordering."""
        if self.x0 > self.x1:
            raise InvalidArgumentError("Clip rectangle has x0 > x1", argument="clip", value=self)
        if self.y0 > self.y1:
            raise InvalidArgumentError("Clip rectangle has y0 > y1", argument="clip", value=self)

    @classmethod
    def from_points(cls, xa: float, ya: float, xb: float, yb: float) -> ClipRect:
        """Build a rectangle from two arbitrary corners."""
        return cls(min(xa, xb), min(ya, yb), max(xa, xb), max(ya, yb))

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0

    @property
    def is_empty(self) -> bool:
        """True when the rectangle has zero area."""
        return self.width == 0 or self.height == 0

    def contains(self, x: float, y: float) -> bool:
        return self.x0 <= x <= self.x1 and self.y0 <= y <= self.y1

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.x0, self.y0, self.x1, self.y1)

    def lerp(self, other: ClipRect, t: float) -> ClipRect:
        """Interpolate each edge linearly."""
        a = np.asarray(self.as_tuple(), dtype=np.float64)
        b = np.asarray(other.as_tuple(), dtype=np.float64)
        x0, y0, x1, y1 = (a + (b - a) * t).tolist()
        # Guard against rounding flipping a degenerate rect
        return ClipRect(x0, y0, max(x0, x1), max(y0, y1))


@dataclass(frozen=True)
class CameraState:
    """
    Immutable camera pose of one layer.

    Attributes
    ----------
    translate_x, translate_y : float
        Document-space offset applied before scaling and rotation
    scale : float
        Zoom factor, strictly positive
    rotation : float
        Rotation in degrees, normalized to [0, 360)
    clip : ClipRect | None
        Optional clip rectangle in device pixels
    """

    translate_x: float = 0.0
    translate_y: float = 0.0
    scale: float = 1.0
    rotation: float = 0.0
    clip: ClipRect | None = field(default=None)

    def __post_init__(self):
        """Validate and normalize inputs."""
        if not (math.isfinite(self.scale) and self.scale > 0):
            raise InvalidArgumentError("Camera scale must be positive", argument="scale", value=self.scale)
        object.__setattr__(self, "rotation", normalize_angle(self.rotation))

    # =========================================================================
    # Pure transforms
    # =========================================================================

    def translated(self, dx: float, dy: float) -> CameraState:
        """
        Shift by a device-pixel delta.

        The delta is converted to document units by undoing the current
        rotation and scale, so content follows the pointer exactly.
        """
        doc = rotation_matrix(-self.rotation) @ np.array([dx, dy], dtype=np.float64) / self.scale
        return replace(
            self,
            translate_x=self.translate_x + float(doc[0]),
            translate_y=self.translate_y + float(doc[1]),
        )

    def zoomed(self, factor: float, fx: float, fy: float) -> CameraState:
        """
        Multiply scale by ``factor`` keeping a device point fixed.

        Parameters
        ----------
        factor : float
            Scale multiplier, strictly positive
        fx, fy : float
            Focus point relative to the viewport center, in device pixels
        """
        if not (math.isfinite(factor) and factor > 0):
            raise InvalidArgumentError("Zoom factor must be positive", argument="factor", value=factor)

        new_scale = self.scale * factor
        offset = rotation_matrix(-self.rotation) @ np.array([fx, fy], dtype=np.float64)
        shift = offset * (1.0 / new_scale - 1.0 / self.scale)
        return replace(
            self,
            scale=new_scale,
            translate_x=self.translate_x + float(shift[0]),
            translate_y=self.translate_y + float(shift[1]),
        )

    def rotated(self, angle: float) -> CameraState:
        """Add ``angle`` degrees about the viewport center."""
        return replace(self, rotation=normalize_angle(self.rotation + angle))

    def with_clip(self, clip: ClipRect | None) -> CameraState:
        return replace(self, clip=clip)

    def interpolate(
        self,
        target: CameraState,
        t: float,
        bounds: ClipRect | None = None,
    ) -> CameraState:
        """
        Interpolate toward ``target`` at eased progress ``t``.

        - translation: linear
        - scale: geometric (linear in log space)
        - rotation: shorter angular path
        - clip: each edge linear; a missing clip is read as ``bounds``

        At ``t >= 1`` the exact target is returned, at ``t <= 0`` self.
        """
        if t >= 1.0:
            return target
        if t <= 0.0:
            return self

        log_scale = math.log(self.scale) + (math.log(target.scale) - math.log(self.scale)) * t
        rotation = self.rotation + shortest_angle_delta(self.rotation, target.rotation) * t

        clip: ClipRect | None
        if self.clip is None and target.clip is None:
            clip = None
        else:
            start_clip = self.clip or bounds
            end_clip = target.clip or bounds
            if start_clip is None or end_clip is None:
                clip = target.clip
            else:
                clip = start_clip.lerp(end_clip, t)

        return CameraState(
            translate_x=self.translate_x + (target.translate_x - self.translate_x) * t,
            translate_y=self.translate_y + (target.translate_y - self.translate_y) * t,
            scale=math.exp(log_scale),
            rotation=rotation,
            clip=clip,
        )

    # =========================================================================
    # Render transform
    # =========================================================================

    def matrix(self, width: float, height: float) -> np.ndarray:
        """3x3 affine matrix mapping document coordinates to device pixels."""
        linear = self.scale * rotation_matrix(self.rotation)
        offset = linear @ np.array([self.translate_x, self.translate_y], dtype=np.float64)

        m = np.eye(3, dtype=np.float64)
        m[:2, :2] = linear
        m[0, 2] = width / 2.0 + offset[0]
        m[1, 2] = height / 2.0 + offset[1]
        return m

    def to_dict(self) -> dict[str, object]:
        """Convert to a storable dictionary."""
        return {
            "translate_x": self.translate_x,
            "translate_y": self.translate_y,
            "scale": self.scale,
            "rotation": self.rotation,
            "clip": list(self.clip.as_tuple()) if self.clip else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> CameraState:
        """Build from a storable dictionary (missing keys take defaults)."""
        clip = data.get("clip")
        return cls(
            translate_x=float(data.get("translate_x", 0.0)),
            translate_y=float(data.get("translate_y", 0.0)),
            scale=float(data.get("scale", 1.0)),
            rotation=float(data.get("rotation", 0.0)),
            clip=ClipRect(*[float(v) for v in clip]) if clip is not None else None,
        )


__all__ = ["CameraState", "ClipRect"]
