"""
Day count conventions and business day adjustments for rates instruments.

Supported Day Counts:
- ACT/360: Actual days / 360 (money markets, OIS, Libor)
- ACT/365: Actual days / 365 (curve time axis)
- ACT/ACT: Actual days / actual days in year
- 30/360: 30 days per month / 360 (fixed swap legs)

Business Day Conventions:
- Modified Following: Move to next business day, unless it falls in next month (then previous)
- Following: Move to next business day
- Preceding: Move to previous business day
"""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Optional
import calendar


class DayCount(Enum):
    """Day count convention enumeration."""
    ACT_360 = "ACT/360"
    ACT_365 = "ACT/365"
    ACT_ACT = "ACT/ACT"
    THIRTY_360 = "30/360"

    @classmethod
    def from_string(cls, s: str) -> "DayCount":
        """Parse day count from string representation."""
        mapping = {
            "ACT/360": cls.ACT_360,
            "ACT360": cls.ACT_360,
            "ACT/365": cls.ACT_365,
            "ACT365": cls.ACT_365,
            "ACT/ACT": cls.ACT_ACT,
            "ACTACT": cls.ACT_ACT,
            "30/360": cls.THIRTY_360,
            "30360": cls.THIRTY_360,
        }
        key = s.upper().replace(" ", "")
        if key in mapping:
            return mapping[key]
        raise ValueError(f"Unknown day count convention: {s}")


class BusinessDayConvention(Enum):
    """Business day adjustment convention."""
    MODIFIED_FOLLOWING = "ModifiedFollowing"
    FOLLOWING = "Following"
    PRECEDING = "Preceding"
    UNADJUSTED = "Unadjusted"

    @classmethod
    def from_string(cls, s: str) -> "BusinessDayConvention":
        """Parse business day convention from string representation."""
        key = s.upper().replace(" ", "").replace("_", "")
        for member in cls:
            if member.value.upper() == key or member.name.replace("_", "") == key:
                return member
        raise ValueError(f"Unknown business day convention: {s}")


@dataclass(frozen=True)
class Conventions:
    """
    Container for leg conventions used by instrument generators.

    Attributes:
        day_count: Day count convention for accrual
        business_day: Business day adjustment rule
        payment_frequency: Number of payments per year (1=annual, 2=semi, 4=quarterly)
        settlement_days: Business days from trade date to spot
    """
    day_count: DayCount = DayCount.ACT_360
    business_day: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING
    payment_frequency: int = 1
    settlement_days: int = 2

    @property
    def period_months(self) -> int:
        """Length of one accrual period in months."""
        return 12 // self.payment_frequency

    @classmethod
    def usd_ois(cls) -> "Conventions":
        """USD OIS conventions (annual ACT/360, T+2)."""
        return cls(
            day_count=DayCount.ACT_360,
            business_day=BusinessDayConvention.MODIFIED_FOLLOWING,
            payment_frequency=1,
            settlement_days=2,
        )

    @classmethod
    def usd_swap_fixed(cls) -> "Conventions":
        """USD IRS fixed leg conventions (semi-annual 30/360)."""
        return cls(
            day_count=DayCount.THIRTY_360,
            business_day=BusinessDayConvention.MODIFIED_FOLLOWING,
            payment_frequency=2,
            settlement_days=2,
        )

    @classmethod
    def usd_libor_3m(cls) -> "Conventions":
        """USD Libor 3M floating leg conventions (quarterly ACT/360)."""
        return cls(
            day_count=DayCount.ACT_360,
            business_day=BusinessDayConvention.MODIFIED_FOLLOWING,
            payment_frequency=4,
            settlement_days=2,
        )


def year_fraction(start: date, end: date, day_count: DayCount) -> float:
    """
    Calculate year fraction between two dates using specified day count convention.

    Args:
        start: Start date
        end: End date
        day_count: Day count convention

    Returns:
        Year fraction as float (0.0 when end is not after start)
    """
    if start >= end:
        return 0.0

    actual_days = (end - start).days

    if day_count == DayCount.ACT_360:
        return actual_days / 360.0

    elif day_count == DayCount.ACT_365:
        return actual_days / 365.0

    elif day_count == DayCount.ACT_ACT:
        # ISDA ACT/ACT: split by year boundaries
        total = 0.0
        current = start
        while current < end:
            next_year = date(current.year + 1, 1, 1)
            period_end = min(next_year, end)
            days_in_year = 366 if calendar.isleap(current.year) else 365
            total += (period_end - current).days / days_in_year
            current = period_end
        return total

    elif day_count == DayCount.THIRTY_360:
        # 30/360 US convention
        d1 = min(start.day, 30)
        d2 = min(end.day, 30) if d1 == 30 else end.day
        return (360 * (end.year - start.year) + 30 * (end.month - start.month) + (d2 - d1)) / 360.0

    else:
        raise ValueError(f"Unknown day count: {day_count}")


def is_business_day(d: date, holidays: Optional[set] = None) -> bool:
    """
    Check if a date is a business day.

    Uses weekend-only calendar by default (Saturday/Sunday are non-business days).

    Args:
        d: Date to check
        holidays: Optional set of holiday dates

    Returns:
        True if business day, False otherwise
    """
    if d.weekday() >= 5:
        return False
    if holidays and d in holidays:
        return False
    return True


def adjust_business_day(
    d: date,
    convention: BusinessDayConvention,
    holidays: Optional[set] = None
) -> date:
    """
    Adjust a date according to business day convention.

    Args:
        d: Date to adjust
        convention: Business day adjustment rule
        holidays: Optional set of holiday dates

    Returns:
        Adjusted date
    """
    if convention == BusinessDayConvention.UNADJUSTED or is_business_day(d, holidays):
        return d

    if convention == BusinessDayConvention.PRECEDING:
        adjusted = d
        while not is_business_day(adjusted, holidays):
            adjusted -= timedelta(days=1)
        return adjusted

    adjusted = d
    while not is_business_day(adjusted, holidays):
        adjusted += timedelta(days=1)

    if convention == BusinessDayConvention.MODIFIED_FOLLOWING and adjusted.month != d.month:
        # Crossed into next month, go preceding instead
        adjusted = d
        while not is_business_day(adjusted, holidays):
            adjusted -= timedelta(days=1)

    return adjusted


def add_business_days(d: date, n: int, holidays: Optional[set] = None) -> date:
    """Move forward n business days (n = 0 adjusts to following)."""
    result = adjust_business_day(d, BusinessDayConvention.FOLLOWING, holidays)
    added = 0
    while added < n:
        result += timedelta(days=1)
        if is_business_day(result, holidays):
            added += 1
    return result


__all__ = [
    "DayCount",
    "BusinessDayConvention",
    "Conventions",
    "year_fraction",
    "is_business_day",
    "adjust_business_day",
    "add_business_days",
]
