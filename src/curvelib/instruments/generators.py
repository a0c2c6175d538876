"""
Instrument generators.

A generator holds the conventions of a market instrument type and builds
the instrument from a valuation date, a tenor and a quote:

- DepositONGenerator: overnight deposit; the tenor is the start lag ("0D", "1D")
- IborDepositGenerator: index fixing deposit; the tenor is the forward start from spot
- FRAGenerator: FRA on an index; the tenor is the forward start from spot ("6M" = 6x9 on 3M)
- OISSwapGenerator: fixed vs overnight swap; the tenor is the swap length from spot
  (or from a past effective date, with the published overnight fixings)
- FixedIborSwapGenerator: fixed vs term-index swap; the tenor is the swap length from spot

Dates become curve times via ACT/365 from the valuation date.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from typing import FrozenSet, Mapping, Optional

from ..conventions import (
    BusinessDayConvention,
    Conventions,
    DayCount,
    add_business_days,
    adjust_business_day,
    year_fraction
)
from ..dates import DateUtils, generate_leg_schedule, time_from
from ..indices import Currency, IborIndex, OvernightIndex
from .base import CalibrationInstrument
from .payments import CashDeposit, CouponFixed, CouponIbor, CouponOIS, ForwardRateAgreement, IborFixingDeposit
from .swaps import FixedCouponSwap


class InstrumentGenerator(ABC):
    """Builds calibration instruments of one market type."""

    name: str

    @abstractmethod
    def generate(
        self,
        valuation_date: date,
        tenor: str,
        quote: float,
        notional: float = 1.0,
        quote_id: Optional[str] = None
    ) -> CalibrationInstrument:
        """
        Build an instrument.

        Args:
            valuation_date: Curve valuation date (time 0)
            tenor: Tenor string, meaning depends on the generator
            quote: Market rate (decimal)
            notional: Notional amount
            quote_id: Market quote identifier (defaults to "<name> <tenor>")
        """
        pass

    def _quote_id(self, tenor: str, quote_id: Optional[str]) -> str:
        return quote_id if quote_id is not None else f"{self.name} {tenor}"


@dataclass(frozen=True)
class DepositONGenerator(InstrumentGenerator):
    """Overnight cash deposit starting `tenor` business days after valuation."""
    name: str
    currency: Currency
    day_count: DayCount = DayCount.ACT_360
    holidays: FrozenSet[date] = field(default_factory=frozenset)

    def generate(self, valuation_date, tenor, quote, notional=1.0, quote_id=None):
        lag, unit = DateUtils.parse_tenor(tenor)
        if unit != 'D':
            raise ValueError(f"Overnight deposit start lag must be in days, got {tenor}")
        start = add_business_days(valuation_date, lag, self.holidays)
        end = add_business_days(start, 1, self.holidays)
        return CashDeposit(
            currency=self.currency,
            start_time=time_from(valuation_date, start),
            end_time=time_from(valuation_date, end),
            accrual_factor=year_fraction(start, end, self.day_count),
            notional=notional,
            rate=quote,
            quote_id=self._quote_id(tenor, quote_id),
        )


def _index_period(valuation_date: date, index: IborIndex, tenor: str, holidays):
    """(start, end) of the index period starting `tenor` after spot."""
    convention = BusinessDayConvention.MODIFIED_FOLLOWING
    spot = add_business_days(valuation_date, index.spot_lag, holidays)
    start = adjust_business_day(DateUtils.add_tenor(spot, tenor, holidays), convention, holidays)
    end = adjust_business_day(DateUtils.add_tenor(start, index.tenor, holidays), convention, holidays)
    return start, end


@dataclass(frozen=True)
class IborDepositGenerator(InstrumentGenerator):
    """Deposit fixing the index over its own tenor, starting `tenor` after spot."""
    name: str
    currency: Currency
    index: IborIndex
    holidays: FrozenSet[date] = field(default_factory=frozenset)

    def generate(self, valuation_date, tenor, quote, notional=1.0, quote_id=None):
        start, end = _index_period(valuation_date, self.index, tenor, self.holidays)
        af = year_fraction(start, end, self.index.day_count)
        return IborFixingDeposit(
            currency=self.currency,
            index=self.index,
            payment_time=time_from(valuation_date, end),
            accrual_factor=af,
            fixing_start=time_from(valuation_date, start),
            fixing_end=time_from(valuation_date, end),
            fixing_accrual_factor=af,
            notional=notional,
            rate=quote,
            quote_id=self._quote_id(tenor, quote_id),
        )


@dataclass(frozen=True)
class FRAGenerator(InstrumentGenerator):
    """FRA on the index period starting `tenor` after spot, settled at period start."""
    name: str
    currency: Currency
    index: IborIndex
    holidays: FrozenSet[date] = field(default_factory=frozenset)

    def generate(self, valuation_date, tenor, quote, notional=1.0, quote_id=None):
        start, end = _index_period(valuation_date, self.index, tenor, self.holidays)
        af = year_fraction(start, end, self.index.day_count)
        return ForwardRateAgreement(
            currency=self.currency,
            index=self.index,
            payment_time=time_from(valuation_date, start),
            payment_accrual_factor=af,
            fixing_start=time_from(valuation_date, start),
            fixing_end=time_from(valuation_date, end),
            fixing_accrual_factor=af,
            notional=notional,
            rate=quote,
            quote_id=self._quote_id(tenor, quote_id),
        )


def _fixed_leg(valuation_date, currency, effective, maturity, conventions, notional, rate, holidays):
    schedule = generate_leg_schedule(effective, maturity, conventions, holidays)
    return tuple(
        CouponFixed(
            currency=currency,
            payment_time=time_from(valuation_date, pay),
            accrual_factor=yf,
            notional=notional,
            rate=rate,
        )
        for pay, yf in zip(schedule.payment_dates, schedule.year_fractions)
    )


@dataclass(frozen=True)
class OISSwapGenerator(InstrumentGenerator):
    """
    Fixed vs overnight swap starting at spot.

    Both legs share the schedule of `conventions`; each floating period is
    one compounded overnight coupon. A swap that started before the
    valuation date (`effective_date`) compounds the published `fixings` of
    its first period into the accrued notional of the first coupon.
    """
    name: str
    currency: Currency
    index: OvernightIndex
    conventions: Conventions = field(default_factory=Conventions.usd_ois)
    holidays: FrozenSet[date] = field(default_factory=frozenset)
    payer: bool = True

    def generate(self, valuation_date, tenor, quote, notional=1.0, quote_id=None,
                 effective_date=None, fixings=None):
        if effective_date is None:
            effective_date = add_business_days(valuation_date, self.conventions.settlement_days, self.holidays)
        maturity = DateUtils.add_tenor(effective_date, tenor, self.holidays)
        sign = -1.0 if self.payer else 1.0

        schedule = generate_leg_schedule(effective_date, maturity, self.conventions, self.holidays)
        if schedule.payment_dates[0] <= valuation_date:
            raise ValueError(f"Swap starting {effective_date} has periods paid before {valuation_date}")

        fixed = _fixed_leg(valuation_date, self.currency, effective_date, maturity, self.conventions,
                           sign * notional, quote, self.holidays)

        floating = []
        for pay, start, end in zip(schedule.payment_dates, schedule.accrual_starts, schedule.accrual_ends):
            notional_accrued = None
            if start < valuation_date:
                notional_accrued = -sign * notional * self.compounded_fixings(start, valuation_date, fixings)
                start = valuation_date
            floating.append(CouponOIS(
                currency=self.currency,
                payment_time=time_from(valuation_date, pay),
                notional=-sign * notional,
                index=self.index,
                fixing_start=time_from(valuation_date, start),
                fixing_end=time_from(valuation_date, end),
                fixing_accrual_factor=year_fraction(start, end, self.index.day_count),
                notional_accrued=notional_accrued,
            ))
        return FixedCouponSwap(fixed, tuple(floating), self._quote_id(tenor, quote_id))

    def compounded_fixings(self, start: date, end: date, fixings: Optional[Mapping[date, float]]) -> float:
        """
        Growth factor prod(1 + delta_i * ON_i) of the overnight fixings published from start to end.

        Raises:
            ValueError: If a business day in [start, end) has no fixing
        """
        fixings = fixings or {}
        factor = 1.0
        day = adjust_business_day(start, BusinessDayConvention.FOLLOWING, self.holidays)
        while day < end:
            next_day = min(add_business_days(day, 1, self.holidays), end)
            if day not in fixings:
                raise ValueError(f"Missing {self.index.name} fixing on {day}")
            factor *= 1.0 + year_fraction(day, next_day, self.index.day_count) * fixings[day]
            day = next_day
        return factor


@dataclass(frozen=True)
class FixedIborSwapGenerator(InstrumentGenerator):
    """Fixed vs term-index swap starting at spot (e.g. USD semi-annual vs Libor 3M)."""
    name: str
    currency: Currency
    index: IborIndex
    fixed_conventions: Conventions = field(default_factory=Conventions.usd_swap_fixed)
    floating_conventions: Conventions = field(default_factory=Conventions.usd_libor_3m)
    holidays: FrozenSet[date] = field(default_factory=frozenset)
    payer: bool = True

    def generate(self, valuation_date, tenor, quote, notional=1.0, quote_id=None):
        spot = add_business_days(valuation_date, self.index.spot_lag, self.holidays)
        maturity = DateUtils.add_tenor(spot, tenor, self.holidays)
        sign = -1.0 if self.payer else 1.0

        fixed = _fixed_leg(valuation_date, self.currency, spot, maturity, self.fixed_conventions,
                           sign * notional, quote, self.holidays)

        schedule = generate_leg_schedule(spot, maturity, self.floating_conventions, self.holidays)
        floating = tuple(
            CouponIbor(
                currency=self.currency,
                payment_time=time_from(valuation_date, pay),
                accrual_factor=yf,
                notional=-sign * notional,
                index=self.index,
                fixing_start=time_from(valuation_date, start),
                fixing_end=time_from(valuation_date, end),
                fixing_accrual_factor=year_fraction(start, end, self.index.day_count),
            )
            for pay, start, end, yf in zip(schedule.payment_dates, schedule.accrual_starts,
                                           schedule.accrual_ends, schedule.year_fractions)
        )
        return FixedCouponSwap(fixed, floating, self._quote_id(tenor, quote_id))


__all__ = [
    "InstrumentGenerator",
    "DepositONGenerator",
    "IborDepositGenerator",
    "FRAGenerator",
    "OISSwapGenerator",
    "FixedIborSwapGenerator",
]
