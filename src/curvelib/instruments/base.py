"""
Instrument contracts.

Provides:
- Instrument: anything with a present value and a backward-sweep curve sensitivity
- CalibrationInstrument: an Instrument quoted by a market rate, usable as a
  calibration target

Every sensitivity method performs one manual reverse-mode sweep: starting
from a bar of 1 on the output, it walks the closed-form pricing formula
backward to the discount factors and forward rates used, and reports them as
point sensitivities (see curvelib.sensitivity).
"""

from abc import ABC, abstractmethod

from ..provider import CurveProvider
from ..sensitivity import CurveSensitivity


class Instrument(ABC):
    """Abstract base for priced instruments. Times are curve times (years)."""

    @abstractmethod
    def present_value(self, provider: CurveProvider) -> float:
        """Present value in the instrument currency."""
        pass

    @abstractmethod
    def present_value_curve_sensitivity(self, provider: CurveProvider) -> CurveSensitivity:
        """Point sensitivities of the present value."""
        pass

    @property
    @abstractmethod
    def maturity_time(self) -> float:
        """Last time at which the instrument depends on a curve."""
        pass


class CalibrationInstrument(Instrument):
    """
    Instrument struck at a market quote.

    Subclasses are frozen dataclasses with a `quote_id` field and expose the
    rate they are struck at through `quote`.
    """

    @property
    @abstractmethod
    def quote(self) -> float:
        """Market rate the instrument is struck at."""
        pass

    @abstractmethod
    def with_quote(self, quote: float) -> "CalibrationInstrument":
        """Copy of the instrument struck at another quote."""
        pass

    @abstractmethod
    def par_rate(self, provider: CurveProvider) -> float:
        """Quote at which the present value is zero."""
        pass

    @abstractmethod
    def par_rate_curve_sensitivity(self, provider: CurveProvider) -> CurveSensitivity:
        """Point sensitivities of the par rate."""
        pass

    @abstractmethod
    def present_value_quote_sensitivity(self, provider: CurveProvider) -> float:
        """Derivative of the present value with respect to the quote."""
        pass

    def initial_guess(self) -> float:
        """Starting value of the curve node tied to this instrument."""
        if self.quote is None:
            return 0.01
        return float(self.quote)


__all__ = [
    "Instrument",
    "CalibrationInstrument",
]
