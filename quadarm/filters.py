"""Scalar signal shaping: first-order low-pass filter, ramp generator and 1-D Bezier curve."""

from __future__ import annotations

from collections.abc import Iterable

# The cut-off to coefficient conversion uses this approximation of 2*pi.
_TWO_PI = 2 * 3.1415


def _smoothing_factor(fc: float, ts: float) -> float:
    return ts / (ts + 1.0 / (_TWO_PI * fc))


class LowPassFilter:
    """First-order low-pass filter with cut-off frequency ``fc`` and sample time ``ts``.

    Without parameters the smoothing factor is zero, so the filter holds its
    first input forever.
    """

    def __init__(self, fc: float | None = None, ts: float | None = None) -> None:
        self.alpha = 0.0
        self._previous = 0.0
        self._initialised = False
        if (fc is None) != (ts is None):
            raise ValueError("fc and ts must be given together")
        if fc is not None and ts is not None:
            self.set_params(fc, ts)

    def set_params(self, fc: float, ts: float) -> None:
        """Recompute the smoothing factor from a cut-off frequency and sample time."""
        self.alpha = _smoothing_factor(fc, ts)

    def filter(self, value: float) -> float:
        """Feed one sample and return the filtered output."""
        if self._initialised:
            result = (1.0 - self.alpha) * self._previous + self.alpha * value
        else:
            result = value
            self._initialised = True
        self._previous = result
        return result


class RampTrajectory:
    """Constant-slope ramp from the current output towards a target value."""

    def __init__(self, dt: float) -> None:
        self.dt = dt
        self.y = 0.0
        self.y_des = 0.0
        self._y_old = 0.0
        self._slope = 0.0

    def set_target(self, y_des: float, time_to_reach: float) -> None:
        """Aim at ``y_des``, arriving after ``time_to_reach`` seconds (at least 1 ms)."""
        self.y_des = y_des
        time_to_reach = max(time_to_reach, 0.001)
        self._slope = (y_des - self._y_old) / time_to_reach

    def set_target_step(self, y_des: float, delta_y: float) -> None:
        """Aim at ``y_des``, moving ``delta_y`` per step."""
        self.y_des = y_des
        self._slope = delta_y / self.dt

    def step(self) -> float:
        """Advance one sample, snapping onto the target when close enough."""
        increment = self._slope * self.dt
        y = self._y_old + increment
        if abs(self.y_des - y) < abs(1.5 * increment):
            y = self.y_des
        self.y = y
        self._y_old = y
        return y

    def reached(self) -> bool:
        """True when the output is within one step of the target."""
        return abs(self.y_des - self.y) < abs(self._slope * self.dt)

    def reset(self, y_out: float) -> None:
        """Force the current output to ``y_out``."""
        self.y = y_out
        self._y_old = y_out


def factorial(num: int) -> float:
    """Factorial as a float; negative arguments are treated as zero."""
    result = 1.0
    for factor in range(2, max(num, 0) + 1):
        result *= factor
    return result


def nchoosek(n: int, k: int) -> float:
    """Binomial coefficient computed from factorials."""
    return factorial(n) / (factorial(n - k) * factorial(k))


class Bezier1D:
    """Scalar Bezier curve defined by its control points."""

    def __init__(self, points: Iterable[float] = ()) -> None:
        self.points = [float(p) for p in points]

    def evaluate(self, s: float) -> float:
        """Value of the curve at parameter ``s`` in [0, 1]."""
        degree = len(self.points) - 1
        return sum(
            nchoosek(degree, i) * (1.0 - s) ** (degree - i) * s**i * point
            for i, point in enumerate(self.points)
        )