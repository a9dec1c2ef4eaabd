"""Timing functions for frame transitions.

A timing function maps normalized elapsed time ``t`` in [0, 1] to eased
progress in [0, 1]. The set is closed and mirrors the CSS timing keywords
used when a presentation is authored, so that playback matches the editor
preview exactly.

Example
-------
>>> TimingFunction.LINEAR.apply(0.25)
0.25
>>> TimingFunction.STEP_MIDDLE.apply(0.5)
1.0
>>> TimingFunction.from_name("ease-in-out") is TimingFunction.EASE_IN_OUT
True
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from slideplay.shared.exceptions import InvalidArgumentError


_NEWTON_ITERATIONS = 8
_NEWTON_EPSILON = 1e-7
_BISECTION_ITERATIONS = 64


@dataclass(frozen=True)
class CubicBezier:
    """
    CSS ``cubic-bezier(x1, y1, x2, y2)`` easing curve.

    The curve runs from (0, 0) to (1, 1). Solving for the curve parameter
    that produces a given x uses Newton-Raphson, with bisection as fallback
    when the derivative is too flat.
    """

    x1: float
    y1: float
    x2: float
    y2: float

    def _coefficients(self, p1: float, p2: float) -> tuple[float, float, float]:
        c = 3.0 * p1
        b = 3.0 * (p2 - p1) - c
        a = 1.0 - c - b
        return a, b, c

    def _sample(self, coeffs: tuple[float, float, float], s: float) -> float:
        a, b, c = coeffs
        return ((a * s + b) * s + c) * s

    def _solve_parameter(self, x: float) -> float:
        ax, bx, cx = coeffs = self._coefficients(self.x1, self.x2)

        s = x
        for _ in range(_NEWTON_ITERATIONS):
            error = self._sample(coeffs, s) - x
            if abs(error) < _NEWTON_EPSILON:
                return s
            derivative = (3.0 * ax * s + 2.0 * bx) * s + cx
            if abs(derivative) < 1e-6:
                break
            s -= error / derivative

        lo, hi = 0.0, 1.0
        s = x
        for _ in range(_BISECTION_ITERATIONS):
            value = self._sample(coeffs, s)
            if abs(value - x) < _NEWTON_EPSILON:
                return s
            if value < x:
                lo = s
            else:
                hi = s
            s = (lo + hi) / 2.0
        return s

    def __call__(self, t: float) -> float:
        if t <= 0.0:
            return 0.0
        if t >= 1.0:
            return 1.0
        s = self._solve_parameter(t)
        return self._sample(self._coefficients(self.y1, self.y2), s)


_EASE = CubicBezier(0.25, 0.1, 0.25, 1.0)
_EASE_IN = CubicBezier(0.42, 0.0, 1.0, 1.0)
_EASE_OUT = CubicBezier(0.0, 0.0, 0.58, 1.0)
_EASE_IN_OUT = CubicBezier(0.42, 0.0, 0.58, 1.0)


class TimingFunction(Enum):
    """Available transition timing functions (values are the authored names)."""

    LINEAR = "linear"
    EASE = "ease"
    EASE_IN = "ease-in"
    EASE_OUT = "ease-out"
    EASE_IN_OUT = "ease-in-out"
    STEP_START = "step-start"
    STEP_END = "step-end"
    STEP_MIDDLE = "step-middle"

    @classmethod
    def from_name(cls, name: str | TimingFunction) -> TimingFunction:
        """
        Resolve a timing function from its authored name.

        Accepts the CSS spelling (``"ease-in-out"``) as well as the
        snake/camel variants found in older documents (``"ease_in_out"``,
        ``"easeInOut"``).

        Raises
        ------
        InvalidArgumentError
            If the name is not one of the supported timing functions
        """
        if isinstance(name, TimingFunction):
            return name

        key = str(name).strip()
        for candidate in (key, key.lower(), key.replace("_", "-").lower()):
            try:
                return cls(candidate)
            except ValueError:
                pass

        # easeInOut -> ease-in-out
        dashed = "".join(f"-{ch.lower()}" if ch.isupper() else ch for ch in key)
        try:
            return cls(dashed)
        except ValueError:
            raise InvalidArgumentError(
                "Unknown timing function", argument="timing_function", value=name
            ) from None

    def apply(self, t: float) -> float:
        """Map elapsed fraction ``t`` to eased progress (``t`` is clamped to [0, 1])."""
        t = min(1.0, max(0.0, float(t)))

        if self is TimingFunction.LINEAR:
            return t
        if self is TimingFunction.STEP_START:
            return 1.0
        if self is TimingFunction.STEP_MIDDLE:
            return 1.0 if t >= 0.5 else 0.0
        if self is TimingFunction.STEP_END:
            return 1.0 if t >= 1.0 else 0.0
        return _CURVES[self](t)


_CURVES = {
    TimingFunction.EASE: _EASE,
    TimingFunction.EASE_IN: _EASE_IN,
    TimingFunction.EASE_OUT: _EASE_OUT,
    TimingFunction.EASE_IN_OUT: _EASE_IN_OUT,
}


__all__ = ["CubicBezier", "TimingFunction"]
