"""
Yield curve representation and operations.

The InterpolatedCurve class provides:
- Zero rate z(t) (continuously compounded, interpolated on the node values)
- Discount factor P(0,t) = exp(-z(t) t)
- Simple forward rate over an accrual period
- Sensitivities of all the above to the curve parameters (node zero rates)

Curves are immutable: calibration and bumping build new instances.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np
import pandas as pd

from .interpolation import Extrapolation, Interpolator, create_interpolator


class InterpolatedCurve:
    """
    Yield curve interpolated on node zero rates.

    Attributes:
        name: Curve identifier (key in providers and Jacobian bundles)
        times: Node times as year fractions (read-only)
        parameters: Node continuously compounded zero rates (read-only)
        interpolation: Name of the interpolation scheme
        left / right: Extrapolation policies

    Conventions:
        - Times are year fractions (ACT/365) from the valuation date
        - Discount factor at t=0 is 1.0
    """

    def __init__(
        self,
        name: str,
        times: Sequence[float],
        parameters: Sequence[float],
        interpolation: str = "linear",
        left: Union[str, Extrapolation] = Extrapolation.FLAT,
        right: Union[str, Extrapolation] = Extrapolation.FLAT
    ):
        times = np.array(times, dtype=np.float64)
        parameters = np.array(parameters, dtype=np.float64)
        if times.shape != parameters.shape:
            raise ValueError(
                f"Curve {name}: {len(times)} node times for {len(parameters)} parameters"
            )
        if np.any(times < 0):
            raise ValueError(f"Curve {name}: node times must be non-negative")

        self.name = name
        self.interpolation = interpolation
        self._interpolator: Interpolator = create_interpolator(interpolation, left, right)
        self._interpolator.fit(times, parameters)

        times.setflags(write=False)
        parameters.setflags(write=False)
        self.times = times
        self.parameters = parameters

    @property
    def left(self) -> Extrapolation:
        return self._interpolator.left

    @property
    def right(self) -> Extrapolation:
        return self._interpolator.right

    @property
    def n_parameters(self) -> int:
        """Number of parameters (fixed for the life of the curve)."""
        return len(self.parameters)

    def zero_rate(self, t: float) -> float:
        """Continuously compounded zero rate z(t)."""
        return self._interpolator.interpolate(t)

    def discount_factor(self, t: float) -> float:
        """Discount factor P(0,t) = exp(-z(t) t)."""
        return float(np.exp(-self.zero_rate(t) * t))

    def forward_rate(self, start: float, end: float, accrual_factor: Optional[float] = None) -> float:
        """
        Simple forward rate over [start, end].

        Args:
            start: Period start time
            end: Period end time
            accrual_factor: Accrual of the period (defaults to end - start)

        Returns:
            (P(start)/P(end) - 1) / accrual_factor
        """
        if accrual_factor is None:
            accrual_factor = end - start
        if accrual_factor <= 0:
            raise ValueError("Accrual factor must be positive")
        return (self.discount_factor(start) / self.discount_factor(end) - 1.0) / accrual_factor

    def parameter_sensitivity(self, t: float) -> np.ndarray:
        """Sensitivity of z(t) to each parameter (the interpolation weights)."""
        return self._interpolator.weights(t)

    def discount_factor_parameter_sensitivity(self, t: float) -> np.ndarray:
        """Sensitivity of P(0,t) to each parameter: -t P(0,t) dz(t)/dp."""
        return -t * self.discount_factor(t) * self.parameter_sensitivity(t)

    def forward_rate_parameter_sensitivity(
        self,
        start: float,
        end: float,
        accrual_factor: Optional[float] = None
    ) -> np.ndarray:
        """Sensitivity of the simple forward rate over [start, end] to each parameter."""
        if accrual_factor is None:
            accrual_factor = end - start
        ratio = self.discount_factor(start) / self.discount_factor(end)
        return (ratio / accrual_factor) * (
            end * self.parameter_sensitivity(end) - start * self.parameter_sensitivity(start)
        )

    def with_parameters(self, parameters: Sequence[float]) -> "InterpolatedCurve":
        """New curve with the same nodes and interpolation and new parameters."""
        return InterpolatedCurve(
            self.name, self.times, parameters, self.interpolation, self.left, self.right
        )

    def bump_parameter(self, index: int, shift: float) -> "InterpolatedCurve":
        """
        Create a new curve with a single parameter shifted.

        Args:
            index: Index of node to bump (0-based)
            shift: Additive shift of the zero rate (decimal)
        """
        if index < 0 or index >= self.n_parameters:
            raise IndexError(f"Invalid node index: {index}")
        params = self.parameters.copy()
        params[index] += shift
        return self.with_parameters(params)

    def bump_parallel(self, shift: float) -> "InterpolatedCurve":
        """Create a new curve with every parameter shifted by the same amount."""
        return self.with_parameters(self.parameters + shift)

    def to_frame(self) -> pd.DataFrame:
        """Node table: time, zero rate and discount factor."""
        return pd.DataFrame({
            "time": self.times,
            "zero_rate": self.parameters,
            "discount_factor": np.exp(-self.parameters * self.times),
        })

    def __repr__(self) -> str:
        return (f"InterpolatedCurve(name={self.name}, nodes={self.n_parameters}, "
                f"method={self.interpolation})")


@dataclass(frozen=True)
class CurveGenerator:
    """
    Builds curves from (times, parameters) with a fixed interpolation setup.

    Attributes:
        interpolation: Interpolation scheme name
        left: Extrapolation before the first node
        right: Extrapolation after the last node
    """
    interpolation: str = "linear"
    left: Extrapolation = Extrapolation.FLAT
    right: Extrapolation = Extrapolation.FLAT

    def generate(self, name: str, times: Sequence[float], parameters: Sequence[float]) -> InterpolatedCurve:
        return InterpolatedCurve(name, times, parameters, self.interpolation, self.left, self.right)


def create_flat_curve(
    name: str,
    rate: float,
    times: Optional[Sequence[float]] = None,
    interpolation: str = "linear"
) -> InterpolatedCurve:
    """
    Create a flat yield curve.

    Args:
        name: Curve name
        rate: Flat continuously compounded rate
        times: Node times (defaults to a standard grid out to 30Y)
        interpolation: Interpolation scheme

    Returns:
        Flat curve
    """
    if times is None:
        times = [0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 20.0, 30.0]
    return InterpolatedCurve(name, times, np.full(len(times), rate), interpolation)


__all__ = [
    "InterpolatedCurve",
    "CurveGenerator",
    "create_flat_curve",
]
