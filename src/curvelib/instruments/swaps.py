"""
Fixed-vs-floating swaps.

A FixedCouponSwap holds a fixed leg of CouponFixed and a floating leg of
CouponIbor or CouponOIS. Signs live in the coupon notionals: a payer swap
has negative fixed notionals and positive floating notionals.

    PVBP = sum_i N_i * af_i * DF(t_i)        (fixed leg, per unit of rate)
    par  = -PV_float / PVBP
"""

from dataclasses import dataclass, replace
from typing import Tuple

from ..provider import CurveProvider
from ..sensitivity import CurveSensitivity
from .base import CalibrationInstrument, Instrument
from .payments import CouponFixed


def _leg_present_value(leg, provider: CurveProvider) -> float:
    return sum(coupon.present_value(provider) for coupon in leg)


def _leg_curve_sensitivity(leg, provider: CurveProvider) -> CurveSensitivity:
    result = CurveSensitivity()
    for coupon in leg:
        result = result + coupon.present_value_curve_sensitivity(provider)
    return result


@dataclass(frozen=True)
class FixedCouponSwap(CalibrationInstrument):
    """
    Swap of a fixed leg against a floating leg.

    Attributes:
        fixed_leg: Fixed coupons (all struck at the same rate)
        floating_leg: Ibor or OIS coupons
        quote_id: Market quote identifier
    """
    fixed_leg: Tuple[CouponFixed, ...]
    floating_leg: Tuple[Instrument, ...]
    quote_id: str = ""

    def __post_init__(self):
        if not self.fixed_leg or not self.floating_leg:
            raise ValueError("Swap legs must not be empty")

    @property
    def quote(self) -> float:
        return self.fixed_leg[0].rate

    @property
    def maturity_time(self) -> float:
        return max(c.maturity_time for c in self.fixed_leg + self.floating_leg)

    def with_quote(self, quote: float) -> "FixedCouponSwap":
        return replace(self, fixed_leg=tuple(c.with_rate(quote) for c in self.fixed_leg))

    def _annuity_leg(self):
        return tuple(c.with_rate(1.0) for c in self.fixed_leg)

    def pvbp(self, provider: CurveProvider) -> float:
        """Present value of the fixed leg for a rate of 1."""
        return _leg_present_value(self._annuity_leg(), provider)

    def present_value(self, provider: CurveProvider) -> float:
        return _leg_present_value(self.fixed_leg, provider) + _leg_present_value(self.floating_leg, provider)

    def present_value_curve_sensitivity(self, provider: CurveProvider) -> CurveSensitivity:
        return (_leg_curve_sensitivity(self.fixed_leg, provider)
                + _leg_curve_sensitivity(self.floating_leg, provider))

    def present_value_quote_sensitivity(self, provider: CurveProvider) -> float:
        return self.pvbp(provider)

    def par_rate(self, provider: CurveProvider) -> float:
        return -_leg_present_value(self.floating_leg, provider) / self.pvbp(provider)

    def par_rate_curve_sensitivity(self, provider: CurveProvider) -> CurveSensitivity:
        pv_float = _leg_present_value(self.floating_leg, provider)
        pvbp = self.pvbp(provider)
        # Backward sweep
        pv_float_bar = -1.0 / pvbp
        pvbp_bar = pv_float / (pvbp * pvbp)
        return (_leg_curve_sensitivity(self.floating_leg, provider).multiplied_by(pv_float_bar)
                + _leg_curve_sensitivity(self._annuity_leg(), provider).multiplied_by(pvbp_bar))


__all__ = [
    "FixedCouponSwap",
]
