"""
Exception hierarchy for curve construction and risk.

Provides:
- UnboundCurrency / UnboundIndex: provider lookup failures
- CalibrationError and its subclasses raised by calibration units and blocks

None of these are handled inside the library; they propagate to the caller.
"""

from typing import Optional

import numpy as np


class CurveLibError(Exception):
    """Base class for all library errors."""


class UnboundCurrency(CurveLibError, LookupError):
    """No discounting curve is bound to the requested currency."""

    def __init__(self, currency):
        self.currency = currency
        super().__init__(f"No discounting curve bound to currency {currency}")


class UnboundIndex(CurveLibError, LookupError):
    """No forward curve is bound to the requested index."""

    def __init__(self, index):
        self.index = index
        super().__init__(f"No forward curve bound to index {index}")


class CalibrationError(CurveLibError):
    """Base class for calibration failures. Fatal to the whole block."""


class UnderOrOverDetermined(CalibrationError, ValueError):
    """Node count of a unit does not match its instrument count, or is zero."""

    def __init__(self, n_parameters: int, n_instruments: int, unit: Optional[str] = None):
        self.n_parameters = n_parameters
        self.n_instruments = n_instruments
        self.unit = unit
        where = f" in unit {unit}" if unit else ""
        super().__init__(
            f"Calibration{where} is under- or over-determined: "
            f"{n_parameters} parameters for {n_instruments} instruments"
        )


class MaxStepsExceeded(CalibrationError):
    """
    Newton iteration did not converge within the configured step cap.

    Attributes:
        steps: Number of steps performed
        residuals: Residual vector at the last iterate
        parameters: Parameter vector at the last iterate
    """

    def __init__(self, steps: int, residuals: np.ndarray, parameters: np.ndarray):
        self.steps = steps
        self.residuals = np.array(residuals, dtype=np.float64)
        self.parameters = np.array(parameters, dtype=np.float64)
        max_res = float(np.max(np.abs(self.residuals))) if self.residuals.size else 0.0
        super().__init__(
            f"Calibration did not converge after {steps} steps "
            f"(max |residual| = {max_res:.3e})"
        )


class SingularJacobian(CalibrationError):
    """The residual Jacobian cannot be inverted at the current iterate."""

    def __init__(self, message: str, condition: Optional[float] = None):
        self.condition = condition
        super().__init__(message)


__all__ = [
    "CurveLibError",
    "UnboundCurrency",
    "UnboundIndex",
    "CalibrationError",
    "UnderOrOverDetermined",
    "MaxStepsExceeded",
    "SingularJacobian",
]
