"""
Date utilities for rates calculations.

Provides:
- Tenor parsing and date arithmetic
- Coupon schedule generation for swap legs
- Conversion of dates to curve times (ACT/365 from the valuation date)
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, Tuple
import re

from .conventions import (
    BusinessDayConvention,
    Conventions,
    DayCount,
    adjust_business_day,
    is_business_day,
    year_fraction
)

# Day count of the curve time axis
TIME_DAY_COUNT = DayCount.ACT_365


class DateUtils:
    """Utility class for date manipulation in rates contexts."""

    # Tenor regex pattern: number + unit (D/W/M/Y)
    TENOR_PATTERN = re.compile(r'^(\d+)([DWMY])$', re.IGNORECASE)

    @staticmethod
    def parse_tenor(tenor: str) -> Tuple[int, str]:
        """
        Parse a tenor string into (amount, unit).

        Args:
            tenor: Tenor string like "0D", "3M", "2Y"

        Returns:
            Tuple of (amount, unit) where unit is D/W/M/Y

        Raises:
            ValueError: If tenor format is invalid
        """
        match = DateUtils.TENOR_PATTERN.match(tenor.upper().strip())
        if not match:
            raise ValueError(f"Invalid tenor format: {tenor}. Expected format like '3M', '2Y'")

        return int(match.group(1)), match.group(2).upper()

    @staticmethod
    def add_tenor(start: date, tenor: str, holidays: Optional[set] = None) -> date:
        """
        Add a tenor to a date (unadjusted, except day tenors count business days).

        Args:
            start: Starting date
            tenor: Tenor string (e.g., "1D", "3M", "2Y")
            holidays: Optional holiday calendar

        Returns:
            End date
        """
        amount, unit = DateUtils.parse_tenor(tenor)

        if unit == 'D':
            result = start
            days_added = 0
            while days_added < amount:
                result += timedelta(days=1)
                if is_business_day(result, holidays):
                    days_added += 1
            return result

        if unit == 'W':
            return start + timedelta(weeks=amount)

        if unit == 'M':
            return _add_months(start, amount)

        return _add_months(start, 12 * amount)

    @staticmethod
    def tenor_to_years(tenor: str) -> float:
        """Convert tenor to approximate year fraction."""
        amount, unit = DateUtils.parse_tenor(tenor)

        if unit == 'D':
            return amount / 365.0
        elif unit == 'W':
            return amount * 7 / 365.0
        elif unit == 'M':
            return amount / 12.0
        return float(amount)

    @staticmethod
    def generate_schedule(
        start: date,
        end: date,
        frequency: int,
        convention: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING,
        holidays: Optional[set] = None
    ) -> List[date]:
        """
        Generate a payment schedule between start and end dates.

        Dates are rolled backward from the end date, so any stub is at the front.

        Args:
            start: Schedule start (accrual start)
            end: Schedule end (maturity)
            frequency: Payments per year (1=annual, 2=semi, 4=quarterly, 12=monthly)
            convention: Business day adjustment
            holidays: Holiday calendar

        Returns:
            List of payment dates (adjusted for business days)
        """
        if frequency <= 0 or 12 % frequency != 0:
            raise ValueError(f"Unsupported payment frequency: {frequency}")

        months_per_period = 12 // frequency

        unadjusted = [end]
        n = 1
        while True:
            prev_date = _add_months(end, -months_per_period * n)
            # Drop a stub shorter than a week
            if prev_date <= start + timedelta(days=7):
                break
            unadjusted.insert(0, prev_date)
            n += 1

        return [adjust_business_day(d, convention, holidays) for d in unadjusted]


@dataclass
class ScheduleInfo:
    """Container for schedule with accrual information."""
    payment_dates: List[date]
    accrual_starts: List[date]
    accrual_ends: List[date]
    year_fractions: List[float]
    day_count: DayCount

    def __len__(self) -> int:
        return len(self.payment_dates)


def generate_leg_schedule(
    effective: date,
    maturity: date,
    conventions: Conventions,
    holidays: Optional[set] = None
) -> ScheduleInfo:
    """
    Generate a swap leg schedule with accrual periods.

    Args:
        effective: Leg effective (first accrual start) date
        maturity: Unadjusted leg maturity
        conventions: Leg conventions (frequency, day count, roll)
        holidays: Holiday calendar

    Returns:
        ScheduleInfo with payment dates and accrual fractions
    """
    payment_dates = DateUtils.generate_schedule(
        effective, maturity, conventions.payment_frequency,
        conventions.business_day, holidays
    )

    accrual_starts = []
    accrual_ends = []
    yfs = []

    prev = effective
    for pmt_date in payment_dates:
        accrual_starts.append(prev)
        accrual_ends.append(pmt_date)
        yfs.append(year_fraction(prev, pmt_date, conventions.day_count))
        prev = pmt_date

    return ScheduleInfo(
        payment_dates=payment_dates,
        accrual_starts=accrual_starts,
        accrual_ends=accrual_ends,
        year_fractions=yfs,
        day_count=conventions.day_count
    )


def time_from(valuation_date: date, d: date) -> float:
    """Curve time of a date: ACT/365 year fraction from the valuation date."""
    return year_fraction(valuation_date, d, TIME_DAY_COUNT)


def _add_months(d: date, months: int) -> date:
    """Add calendar months, clamping the day to the end of the target month."""
    year = d.year + (d.month + months - 1) // 12
    month = (d.month + months - 1) % 12 + 1
    day = min(d.day, _days_in_month(year, month))
    return date(year, month, day)


def _days_in_month(year: int, month: int) -> int:
    """Return number of days in a month."""
    if month in (1, 3, 5, 7, 8, 10, 12):
        return 31
    elif month in (4, 6, 9, 11):
        return 30
    elif month == 2:
        if (year % 4 == 0 and year % 100 != 0) or (year % 400 == 0):
            return 29
        return 28
    raise ValueError(f"Invalid month: {month}")


__all__ = [
    "DateUtils",
    "ScheduleInfo",
    "TIME_DAY_COUNT",
    "generate_leg_schedule",
    "time_from",
]
