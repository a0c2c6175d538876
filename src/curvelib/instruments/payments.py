"""
Coupons and money-market calibration instruments.

Provides:
- CouponFixed: N * af * r paid at the payment time
- CouponIbor: N * af * (F + spread), F the index forward over the fixing period
- CouponOIS: compounded overnight coupon, with an accrued notional for
  fixings already known
- CashDeposit: deposit of N at start repaid with simple interest at end
- IborFixingDeposit: fixing of the index against the quoted rate
- ForwardRateAgreement: FRA settled at the start of the fixing period

PV conventions (DF = discount factor on the currency curve, F = forward on
the index curve):

    CouponOIS:   PV = (N_acc * (1 + af * F) - N) * DF(t_pay)
    CashDeposit: PV = -N * DF(start) + N * (1 + af * r) * DF(end)
    FRA:         PV = N * paf * (F - K) / (1 + paf * F) * DF(t_pay)
"""

from dataclasses import dataclass, replace
from typing import Optional

from ..indices import Currency, IborIndex, OvernightIndex
from ..provider import CurveProvider
from ..sensitivity import CurveSensitivity, ForwardSensitivity
from .base import CalibrationInstrument, Instrument


def _discounting_point(provider: CurveProvider, currency: Currency, t: float, df_bar: float) -> CurveSensitivity:
    """Point sensitivity of a value using DF(t) with adjoint df_bar: d/dz(t) = -t DF(t) df_bar."""
    name = provider.curve_name(currency)
    df = provider.discount_factor(currency, t)
    return CurveSensitivity.of_discounting(name, t, -t * df * df_bar)


def _forward_point(provider: CurveProvider, index, start: float, end: float, af: float,
                   forward_bar: float) -> CurveSensitivity:
    name = provider.curve_name(index)
    return CurveSensitivity.of_forward(name, ForwardSensitivity(start, end, af, forward_bar))


# Coupons

@dataclass(frozen=True)
class CouponFixed(Instrument):
    """Fixed coupon N * af * rate paid at payment_time."""
    currency: Currency
    payment_time: float
    accrual_factor: float
    notional: float
    rate: float

    @property
    def maturity_time(self) -> float:
        return self.payment_time

    def with_rate(self, rate: float) -> "CouponFixed":
        return replace(self, rate=rate)

    def present_value(self, provider: CurveProvider) -> float:
        df = provider.discount_factor(self.currency, self.payment_time)
        return self.notional * self.accrual_factor * self.rate * df

    def present_value_curve_sensitivity(self, provider: CurveProvider) -> CurveSensitivity:
        df_bar = self.notional * self.accrual_factor * self.rate
        return _discounting_point(provider, self.currency, self.payment_time, df_bar)


@dataclass(frozen=True)
class CouponIbor(Instrument):
    """Floating coupon N * af * (F + spread) on a term index."""
    currency: Currency
    payment_time: float
    accrual_factor: float
    notional: float
    index: IborIndex
    fixing_start: float
    fixing_end: float
    fixing_accrual_factor: float
    spread: float = 0.0

    @property
    def maturity_time(self) -> float:
        return max(self.payment_time, self.fixing_end)

    def present_value(self, provider: CurveProvider) -> float:
        forward = provider.forward_rate(self.index, self.fixing_start, self.fixing_end,
                                        self.fixing_accrual_factor)
        df = provider.discount_factor(self.currency, self.payment_time)
        return self.notional * self.accrual_factor * (forward + self.spread) * df

    def present_value_curve_sensitivity(self, provider: CurveProvider) -> CurveSensitivity:
        forward = provider.forward_rate(self.index, self.fixing_start, self.fixing_end,
                                        self.fixing_accrual_factor)
        df = provider.discount_factor(self.currency, self.payment_time)
        # Backward sweep
        df_bar = self.notional * self.accrual_factor * (forward + self.spread)
        forward_bar = self.notional * self.accrual_factor * df
        return (
            _discounting_point(provider, self.currency, self.payment_time, df_bar)
            + _forward_point(provider, self.index, self.fixing_start, self.fixing_end,
                             self.fixing_accrual_factor, forward_bar)
        )


@dataclass(frozen=True)
class CouponOIS(Instrument):
    """
    Overnight indexed coupon.

    Pays N_acc * prod(1 + delta_i * ON_i) - N at payment_time, where the
    product over the fixing period is replaced by 1 + af * F (F the forward
    over the remaining fixing period) and N_acc is the notional accrued with
    the fixings already published (equal to N when none are).
    """
    currency: Currency
    payment_time: float
    notional: float
    index: OvernightIndex
    fixing_start: float
    fixing_end: float
    fixing_accrual_factor: float
    notional_accrued: Optional[float] = None

    @property
    def maturity_time(self) -> float:
        return max(self.payment_time, self.fixing_end)

    @property
    def accrued(self) -> float:
        return self.notional if self.notional_accrued is None else self.notional_accrued

    def present_value(self, provider: CurveProvider) -> float:
        forward = provider.forward_rate(self.index, self.fixing_start, self.fixing_end,
                                        self.fixing_accrual_factor)
        ratio = 1.0 + self.fixing_accrual_factor * forward
        df = provider.discount_factor(self.currency, self.payment_time)
        return (self.accrued * ratio - self.notional) * df

    def present_value_curve_sensitivity(self, provider: CurveProvider) -> CurveSensitivity:
        forward = provider.forward_rate(self.index, self.fixing_start, self.fixing_end,
                                        self.fixing_accrual_factor)
        ratio = 1.0 + self.fixing_accrual_factor * forward
        df = provider.discount_factor(self.currency, self.payment_time)
        # Backward sweep
        ratio_bar = self.accrued * df
        forward_bar = self.fixing_accrual_factor * ratio_bar
        df_bar = self.accrued * ratio - self.notional
        return (
            _discounting_point(provider, self.currency, self.payment_time, df_bar)
            + _forward_point(provider, self.index, self.fixing_start, self.fixing_end,
                             self.fixing_accrual_factor, forward_bar)
        )

    def par_rate(self, provider: CurveProvider) -> float:
        """Forward of the overnight index over the remaining fixing period."""
        return provider.forward_rate(self.index, self.fixing_start, self.fixing_end,
                                     self.fixing_accrual_factor)

    def par_rate_curve_sensitivity(self, provider: CurveProvider) -> CurveSensitivity:
        return _forward_point(provider, self.index, self.fixing_start, self.fixing_end,
                              self.fixing_accrual_factor, 1.0)


# Calibration instruments

@dataclass(frozen=True)
class CashDeposit(CalibrationInstrument):
    """
    Cash deposit.

    The depositor pays N at start_time and receives N * (1 + af * rate) at
    end_time. Par rate: (DF(start) / DF(end) - 1) / af.
    """
    currency: Currency
    start_time: float
    end_time: float
    accrual_factor: float
    notional: float
    rate: float
    quote_id: str = ""

    @property
    def quote(self) -> float:
        return self.rate

    @property
    def maturity_time(self) -> float:
        return self.end_time

    def with_quote(self, quote: float) -> "CashDeposit":
        return replace(self, rate=quote)

    def present_value(self, provider: CurveProvider) -> float:
        df_start = provider.discount_factor(self.currency, self.start_time)
        df_end = provider.discount_factor(self.currency, self.end_time)
        return self.notional * (-df_start + (1.0 + self.accrual_factor * self.rate) * df_end)

    def present_value_curve_sensitivity(self, provider: CurveProvider) -> CurveSensitivity:
        return (
            _discounting_point(provider, self.currency, self.start_time, -self.notional)
            + _discounting_point(provider, self.currency, self.end_time,
                                 self.notional * (1.0 + self.accrual_factor * self.rate))
        )

    def present_value_quote_sensitivity(self, provider: CurveProvider) -> float:
        return self.notional * self.accrual_factor * provider.discount_factor(self.currency, self.end_time)

    def par_rate(self, provider: CurveProvider) -> float:
        df_start = provider.discount_factor(self.currency, self.start_time)
        df_end = provider.discount_factor(self.currency, self.end_time)
        return (df_start / df_end - 1.0) / self.accrual_factor

    def par_rate_curve_sensitivity(self, provider: CurveProvider) -> CurveSensitivity:
        df_start = provider.discount_factor(self.currency, self.start_time)
        df_end = provider.discount_factor(self.currency, self.end_time)
        # Backward sweep
        df_start_bar = 1.0 / (self.accrual_factor * df_end)
        df_end_bar = -df_start / (self.accrual_factor * df_end * df_end)
        return (
            _discounting_point(provider, self.currency, self.start_time, df_start_bar)
            + _discounting_point(provider, self.currency, self.end_time, df_end_bar)
        )


@dataclass(frozen=True)
class IborFixingDeposit(CalibrationInstrument):
    """
    Fixing of a term index against a quoted rate.

    PV = N * af * (F - rate) * DF(t_pay); the par rate is the forward F.
    """
    currency: Currency
    index: IborIndex
    payment_time: float
    accrual_factor: float
    fixing_start: float
    fixing_end: float
    fixing_accrual_factor: float
    notional: float
    rate: float
    quote_id: str = ""

    @property
    def quote(self) -> float:
        return self.rate

    @property
    def maturity_time(self) -> float:
        return max(self.payment_time, self.fixing_end)

    def with_quote(self, quote: float) -> "IborFixingDeposit":
        return replace(self, rate=quote)

    def _forward(self, provider: CurveProvider) -> float:
        return provider.forward_rate(self.index, self.fixing_start, self.fixing_end,
                                     self.fixing_accrual_factor)

    def present_value(self, provider: CurveProvider) -> float:
        df = provider.discount_factor(self.currency, self.payment_time)
        return self.notional * self.accrual_factor * (self._forward(provider) - self.rate) * df

    def present_value_curve_sensitivity(self, provider: CurveProvider) -> CurveSensitivity:
        df = provider.discount_factor(self.currency, self.payment_time)
        df_bar = self.notional * self.accrual_factor * (self._forward(provider) - self.rate)
        forward_bar = self.notional * self.accrual_factor * df
        return (
            _discounting_point(provider, self.currency, self.payment_time, df_bar)
            + _forward_point(provider, self.index, self.fixing_start, self.fixing_end,
                             self.fixing_accrual_factor, forward_bar)
        )

    def present_value_quote_sensitivity(self, provider: CurveProvider) -> float:
        df = provider.discount_factor(self.currency, self.payment_time)
        return -self.notional * self.accrual_factor * df

    def par_rate(self, provider: CurveProvider) -> float:
        return self._forward(provider)

    def par_rate_curve_sensitivity(self, provider: CurveProvider) -> CurveSensitivity:
        return _forward_point(provider, self.index, self.fixing_start, self.fixing_end,
                              self.fixing_accrual_factor, 1.0)


@dataclass(frozen=True)
class ForwardRateAgreement(CalibrationInstrument):
    """
    Forward rate agreement, settled at payment_time (start of the period).

    PV = N * paf * (F - K) / (1 + paf * F) * DF(t_pay); the par rate is F.
    """
    currency: Currency
    index: IborIndex
    payment_time: float
    payment_accrual_factor: float
    fixing_start: float
    fixing_end: float
    fixing_accrual_factor: float
    notional: float
    rate: float
    quote_id: str = ""

    @property
    def quote(self) -> float:
        return self.rate

    @property
    def maturity_time(self) -> float:
        return max(self.payment_time, self.fixing_end)

    def with_quote(self, quote: float) -> "ForwardRateAgreement":
        return replace(self, rate=quote)

    def _forward(self, provider: CurveProvider) -> float:
        return provider.forward_rate(self.index, self.fixing_start, self.fixing_end,
                                     self.fixing_accrual_factor)

    def present_value(self, provider: CurveProvider) -> float:
        forward = self._forward(provider)
        df = provider.discount_factor(self.currency, self.payment_time)
        paf = self.payment_accrual_factor
        return self.notional * paf * (forward - self.rate) / (1.0 + paf * forward) * df

    def present_value_curve_sensitivity(self, provider: CurveProvider) -> CurveSensitivity:
        forward = self._forward(provider)
        df = provider.discount_factor(self.currency, self.payment_time)
        paf = self.payment_accrual_factor
        discount = 1.0 + paf * forward
        # Backward sweep
        df_bar = self.notional * paf * (forward - self.rate) / discount
        forward_bar = self.notional * paf * df * (1.0 + paf * self.rate) / (discount * discount)
        return (
            _discounting_point(provider, self.currency, self.payment_time, df_bar)
            + _forward_point(provider, self.index, self.fixing_start, self.fixing_end,
                             self.fixing_accrual_factor, forward_bar)
        )

    def present_value_quote_sensitivity(self, provider: CurveProvider) -> float:
        forward = self._forward(provider)
        df = provider.discount_factor(self.currency, self.payment_time)
        paf = self.payment_accrual_factor
        return -self.notional * paf * df / (1.0 + paf * forward)

    def par_rate(self, provider: CurveProvider) -> float:
        return self._forward(provider)

    def par_rate_curve_sensitivity(self, provider: CurveProvider) -> CurveSensitivity:
        return _forward_point(provider, self.index, self.fixing_start, self.fixing_end,
                              self.fixing_accrual_factor, 1.0)


__all__ = [
    "CouponFixed",
    "CouponIbor",
    "CouponOIS",
    "CashDeposit",
    "IborFixingDeposit",
    "ForwardRateAgreement",
]
