"""
Curves package - interpolated yield curves.

Provides:
- InterpolatedCurve: immutable curve on node zero rates with parameter sensitivities
- CurveGenerator: interpolation setup used to build curves during calibration
- Interpolators (linear, log-linear, natural cubic spline) and extrapolation policies
"""

from .curve import InterpolatedCurve, CurveGenerator, create_flat_curve
from .interpolation import (
    Extrapolation,
    Interpolator,
    LinearInterpolator,
    CubicSplineInterpolator,
    LogLinearInterpolator,
    create_interpolator,
)

__all__ = [
    "InterpolatedCurve",
    "CurveGenerator",
    "create_flat_curve",
    "Extrapolation",
    "Interpolator",
    "LinearInterpolator",
    "CubicSplineInterpolator",
    "LogLinearInterpolator",
    "create_interpolator",
]
