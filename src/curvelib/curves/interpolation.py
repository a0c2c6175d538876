"""
Interpolation methods for yield curves.

Provides:
- LinearInterpolator: Linear interpolation on zero rates
- LogLinearInterpolator: Linear interpolation on r*t (log discount factors)
- CubicSplineInterpolator: Natural cubic spline on zero rates
- Extrapolation: FLAT or LINEAR policy applied beyond the first/last node

All interpolators work with year fractions as x-coordinates and continuously
compounded zero rates as node values. Every scheme here is linear in the node
values, so an interpolated value is a weighted sum of the nodes and
weights(t) is the exact sensitivity of the value at t to each node.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Union
import numpy as np


class Extrapolation(Enum):
    """Extrapolation policy beyond the node range."""
    FLAT = "flat"
    LINEAR = "linear"

    @classmethod
    def from_string(cls, s: Union[str, "Extrapolation"]) -> "Extrapolation":
        """Parse extrapolation policy from string representation."""
        if isinstance(s, cls):
            return s
        key = s.lower().strip()
        for member in cls:
            if member.value == key:
                return member
        raise ValueError(f"Unknown extrapolation: {s}")


class Interpolator(ABC):
    """
    Abstract base class for curve interpolation.

    Subclasses provide the weights inside the node range and the weights of
    the boundary slopes; extrapolation is handled here.
    """

    name = "abstract"

    def __init__(
        self,
        left: Extrapolation = Extrapolation.FLAT,
        right: Extrapolation = Extrapolation.FLAT
    ):
        self.left = Extrapolation.from_string(left)
        self.right = Extrapolation.from_string(right)
        self.times: Optional[np.ndarray] = None
        self.values: Optional[np.ndarray] = None

    def fit(self, times: np.ndarray, values: np.ndarray) -> None:
        """
        Fit the interpolator to data points.

        Args:
            times: Array of year fractions (strictly increasing)
            values: Array of node values (zero rates)
        """
        times = np.asarray(times, dtype=np.float64)
        values = np.asarray(values, dtype=np.float64)
        if times.ndim != 1 or times.shape != values.shape:
            raise ValueError("Times and values must be 1-d arrays of the same length")
        if len(times) == 0:
            raise ValueError("Need at least 1 point for interpolation")
        if np.any(np.diff(times) <= 0):
            raise ValueError("Node times must be strictly increasing")

        self.times = times
        self.values = values
        self._prepare()

    def _prepare(self) -> None:
        """Hook for schemes that precompute node-only quantities."""

    def interpolate(self, t: float) -> float:
        """Interpolate at a single point."""
        if self.values is None:
            raise RuntimeError("Interpolator not fitted")
        return float(self.weights(t) @ self.values)

    def __call__(self, t: float) -> float:
        """Convenience method to call interpolate."""
        return self.interpolate(t)

    def weights(self, t: float) -> np.ndarray:
        """
        Sensitivity of the interpolated value at t to each node value.

        Args:
            t: Year fraction

        Returns:
            Array of length n (number of nodes)
        """
        if self.times is None:
            raise RuntimeError("Interpolator not fitted")

        n = len(self.times)
        if n == 1:
            return np.ones(1)

        if t < self.times[0]:
            w = self._unit(0)
            if self.left == Extrapolation.LINEAR:
                w = w + (t - self.times[0]) * self._slope_weights(left=True)
            return w

        if t > self.times[-1]:
            w = self._unit(n - 1)
            if self.right == Extrapolation.LINEAR:
                w = w + (t - self.times[-1]) * self._slope_weights(left=False)
            return w

        return self._interior_weights(t)

    def _unit(self, i: int) -> np.ndarray:
        w = np.zeros(len(self.times))
        w[i] = 1.0
        return w

    def _bracket(self, t: float) -> int:
        """Index i of the interval [t_i, t_{i+1}] containing t."""
        idx = np.searchsorted(self.times, t, side='right') - 1
        return int(max(0, min(idx, len(self.times) - 2)))

    @abstractmethod
    def _interior_weights(self, t: float) -> np.ndarray:
        """Weights for t inside [t_0, t_{n-1}] (at least 2 nodes)."""

    @abstractmethod
    def _slope_weights(self, left: bool) -> np.ndarray:
        """Weights of the first derivative at the first (left) or last node."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(left={self.left.value}, right={self.right.value})"


class LinearInterpolator(Interpolator):
    """
    Linear interpolation.

    At most two non-zero weights: the nodes bracketing t.
    """

    name = "linear"

    def _interior_weights(self, t: float) -> np.ndarray:
        idx = self._bracket(t)
        t0, t1 = self.times[idx], self.times[idx + 1]
        w = (t - t0) / (t1 - t0)

        weights = np.zeros(len(self.times))
        weights[idx] = 1.0 - w
        weights[idx + 1] = w
        return weights

    def _slope_weights(self, left: bool) -> np.ndarray:
        weights = np.zeros(len(self.times))
        i = 0 if left else len(self.times) - 2
        h = self.times[i + 1] - self.times[i]
        weights[i] = -1.0 / h
        weights[i + 1] = 1.0 / h
        return weights


class LogLinearInterpolator(Interpolator):
    """
    Log-linear interpolation on discount factors.

    Interpolates r*t linearly between nodes, which corresponds to piecewise
    constant forward rates. Flat extrapolation holds the boundary zero rate;
    linear extrapolation on the right continues the last forward rate. Left of
    the first node the zero rate is always held (DF(0) = 1 anchors the
    segment), whatever the left policy.
    """

    name = "log_linear"

    def weights(self, t: float) -> np.ndarray:
        if self.times is None:
            raise RuntimeError("Interpolator not fitted")

        n = len(self.times)
        if n == 1 or t <= self.times[0]:
            return self._unit(0)

        if t > self.times[-1]:
            if self.right == Extrapolation.FLAT:
                return self._unit(n - 1)
            rt = self._unit(n - 1) * self.times[-1] + (t - self.times[-1]) * self._slope_weights(left=False)
            return rt / t

        return self._interior_weights(t)

    def _interior_weights(self, t: float) -> np.ndarray:
        idx = self._bracket(t)
        t0, t1 = self.times[idx], self.times[idx + 1]
        w = (t - t0) / (t1 - t0)

        weights = np.zeros(len(self.times))
        weights[idx] = (1.0 - w) * t0 / t
        weights[idx + 1] = w * t1 / t
        return weights

    def _slope_weights(self, left: bool) -> np.ndarray:
        # Slope of r*t, i.e. the forward rate of the boundary segment
        weights = np.zeros(len(self.times))
        i = 0 if left else len(self.times) - 2
        h = self.times[i + 1] - self.times[i]
        weights[i] = -self.times[i] / h
        weights[i + 1] = self.times[i + 1] / h
        return weights


class CubicSplineInterpolator(Interpolator):
    """
    Cubic spline interpolation.

    Uses natural cubic splines (second derivative = 0 at boundaries). The
    second derivatives M solve A M = B y, so M = (A^-1 B) y is linear in the
    node values and the sensitivity matrix A^-1 B is computed once per fit.
    """

    name = "cubic_spline"

    def __init__(
        self,
        left: Extrapolation = Extrapolation.FLAT,
        right: Extrapolation = Extrapolation.FLAT
    ):
        super().__init__(left, right)
        self.m_sensitivity: Optional[np.ndarray] = None

    def _prepare(self) -> None:
        n = len(self.times)
        h = np.diff(self.times)

        A = np.zeros((n, n))
        B = np.zeros((n, n))
        A[0, 0] = 1.0
        A[n - 1, n - 1] = 1.0

        for i in range(1, n - 1):
            A[i, i - 1] = h[i - 1]
            A[i, i] = 2 * (h[i - 1] + h[i])
            A[i, i + 1] = h[i]
            B[i, i - 1] = 6.0 / h[i - 1]
            B[i, i] = -6.0 / h[i - 1] - 6.0 / h[i]
            B[i, i + 1] = 6.0 / h[i]

        self.m_sensitivity = np.linalg.solve(A, B)

    def second_derivative_weights(self, i: int) -> np.ndarray:
        """Sensitivity of the spline second derivative at node i to the node values."""
        return self.m_sensitivity[i]

    def _interior_weights(self, t: float) -> np.ndarray:
        idx = self._bracket(t)
        t0, t1 = self.times[idx], self.times[idx + 1]
        h = t1 - t0
        a = (t1 - t) / h
        b = (t - t0) / h

        weights = (h * h / 6.0) * (
            (a ** 3 - a) * self.m_sensitivity[idx]
            + (b ** 3 - b) * self.m_sensitivity[idx + 1]
        )
        weights[idx] += a
        weights[idx + 1] += b
        return weights

    def _slope_weights(self, left: bool) -> np.ndarray:
        n = len(self.times)
        M = self.m_sensitivity
        if left:
            h = self.times[1] - self.times[0]
            weights = -h * (M[1] + 2 * M[0]) / 6.0
            weights[0] -= 1.0 / h
            weights[1] += 1.0 / h
        else:
            h = self.times[-1] - self.times[-2]
            weights = h * (2 * M[n - 1] + M[n - 2]) / 6.0
            weights[n - 2] -= 1.0 / h
            weights[n - 1] += 1.0 / h
        return weights


def create_interpolator(
    method: str,
    left: Union[str, Extrapolation] = Extrapolation.FLAT,
    right: Union[str, Extrapolation] = Extrapolation.FLAT
) -> Interpolator:
    """
    Factory function to create an interpolator by name.

    Args:
        method: One of "linear", "log_linear", "cubic_spline"
        left: Extrapolation before the first node
        right: Extrapolation after the last node

    Returns:
        Interpolator instance (not fitted)
    """
    key = method.lower().replace("-", "_").replace(" ", "_")

    if key in ("linear", "lin"):
        return LinearInterpolator(left, right)
    elif key in ("cubic_spline", "cubic", "spline", "natural_cubic"):
        return CubicSplineInterpolator(left, right)
    elif key in ("log_linear", "loglinear"):
        return LogLinearInterpolator(left, right)
    else:
        raise ValueError(f"Unknown interpolation method: {method}")


__all__ = [
    "Extrapolation",
    "Interpolator",
    "LinearInterpolator",
    "CubicSplineInterpolator",
    "LogLinearInterpolator",
    "create_interpolator",
]
