"""
Unit tests for conventions module.
"""

from datetime import date
import pytest

from curvelib.conventions import (
    DayCount,
    BusinessDayConvention,
    year_fraction,
    Conventions,
    adjust_business_day,
    add_business_days,
    is_business_day,
)


class TestDayCount:
    """Tests for day count conventions."""

    def test_act_360(self):
        """Test ACT/360 day count."""
        start = date(2024, 1, 15)
        end = date(2024, 4, 15)  # 91 days

        yf = year_fraction(start, end, DayCount.ACT_360)
        assert abs(yf - 91 / 360) < 1e-10

    def test_act_365(self):
        """Test ACT/365 day count."""
        start = date(2024, 1, 15)
        end = date(2024, 4, 15)

        yf = year_fraction(start, end, DayCount.ACT_365)
        assert abs(yf - 91 / 365) < 1e-10

    def test_act_act_across_year_end(self):
        """ACT/ACT splits the period at the year boundary."""
        start = date(2023, 12, 1)
        end = date(2024, 2, 1)

        yf = year_fraction(start, end, DayCount.ACT_ACT)
        expected = 31 / 365 + 31 / 366
        assert abs(yf - expected) < 1e-12

    def test_thirty_360(self):
        """Test 30/360 day count."""
        yf = year_fraction(date(2024, 1, 15), date(2024, 4, 15), DayCount.THIRTY_360)
        assert abs(yf - 90 / 360) < 1e-10

    def test_thirty_360_month_end(self):
        """31st of the month counts as the 30th."""
        yf = year_fraction(date(2024, 1, 31), date(2024, 3, 31), DayCount.THIRTY_360)
        assert abs(yf - 60 / 360) < 1e-10

    def test_year_fraction_same_date(self):
        """Test year fraction for same date returns 0."""
        d = date(2024, 1, 15)
        assert year_fraction(d, d, DayCount.ACT_360) == 0.0

    def test_from_string(self):
        """Day counts parse from common spellings."""
        assert DayCount.from_string("act/360") == DayCount.ACT_360
        assert DayCount.from_string("30/360") == DayCount.THIRTY_360
        with pytest.raises(ValueError):
            DayCount.from_string("BUS/252")


class TestBusinessDays:
    """Tests for business day adjustment."""

    def test_weekend_is_not_business_day(self):
        """Saturday and Sunday are holidays by default."""
        assert not is_business_day(date(2024, 6, 1))  # Saturday
        assert is_business_day(date(2024, 6, 3))

    def test_following(self):
        """Following rolls to Monday."""
        adjusted = adjust_business_day(date(2024, 6, 1), BusinessDayConvention.FOLLOWING)
        assert adjusted == date(2024, 6, 3)

    def test_preceding(self):
        """Preceding rolls back to Friday."""
        adjusted = adjust_business_day(date(2024, 6, 1), BusinessDayConvention.PRECEDING)
        assert adjusted == date(2024, 5, 31)

    def test_modified_following_stays_in_month(self):
        """Modified following rolls back when following crosses the month end."""
        adjusted = adjust_business_day(date(2024, 8, 31), BusinessDayConvention.MODIFIED_FOLLOWING)
        assert adjusted == date(2024, 8, 30)

    def test_holidays(self):
        """Holidays are skipped."""
        holidays = {date(2024, 7, 4)}
        adjusted = adjust_business_day(date(2024, 7, 4), BusinessDayConvention.FOLLOWING, holidays)
        assert adjusted == date(2024, 7, 5)

    def test_add_business_days(self):
        """Spot lag skips the weekend."""
        assert add_business_days(date(2011, 9, 28), 2) == date(2011, 9, 30)
        assert add_business_days(date(2011, 9, 29), 2) == date(2011, 10, 3)
        assert add_business_days(date(2011, 9, 28), 0) == date(2011, 9, 28)

    def test_business_day_convention_from_string(self):
        """Conventions parse from names and values."""
        assert (BusinessDayConvention.from_string("modified_following")
                == BusinessDayConvention.MODIFIED_FOLLOWING)
        assert BusinessDayConvention.from_string("Following") == BusinessDayConvention.FOLLOWING


class TestConventions:
    """Tests for convention presets."""

    def test_usd_ois_preset(self):
        """Test USD OIS conventions."""
        conv = Conventions.usd_ois()
        assert conv.day_count == DayCount.ACT_360
        assert conv.business_day == BusinessDayConvention.MODIFIED_FOLLOWING
        assert conv.settlement_days == 2
        assert conv.period_months == 12

    def test_usd_swap_presets(self):
        """Fixed leg is semi-annual 30/360, Libor leg quarterly ACT/360."""
        fixed = Conventions.usd_swap_fixed()
        floating = Conventions.usd_libor_3m()
        assert fixed.day_count == DayCount.THIRTY_360
        assert fixed.period_months == 6
        assert floating.period_months == 3
