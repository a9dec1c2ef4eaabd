"""Angle and 2D rotation helpers shared by the camera model and the gesture recognizer."""

from __future__ import annotations

import math

import numpy as np


def normalize_angle(angle: float) -> float:
    """
    Normalize an angle in degrees to [0, 360).

    Example:
        >>> normalize_angle(-90.0)
        270.0
        >>> normalize_angle(720.0)
        0.0
    """
    result = float(angle) % 360.0
    # -1e-17 % 360 rounds to 360.0
    if result >= 360.0:
        result = 0.0
    return result


def shortest_angle_delta(start: float, end: float) -> float:
    """Signed difference ``end - start`` along the shorter arc, in (-180, 180]."""
    delta = (end - start) % 360.0
    if delta > 180.0:
        delta -= 360.0
    return delta


def rotation_matrix(angle_deg: float) -> np.ndarray:
    """2x2 counter-clockwise rotation matrix (y axis pointing down: clockwise on screen)."""
    rad = math.radians(angle_deg)
    c, s = math.cos(rad), math.sin(rad)
    return np.array([[c, -s], [s, c]], dtype=np.float64)


def polar_from_center(x: float, y: float, cx: float, cy: float) -> tuple[float, float]:
    """
    Distance and angle (degrees) of a point relative to a center.

    Returns
    -------
    tuple[float, float]
        ``(distance, angle_deg)`` where the angle is ``atan2(dy, dx)``
    """
    dx = x - cx
    dy = y - cy
    return math.hypot(dx, dy), math.degrees(math.atan2(dy, dx))
