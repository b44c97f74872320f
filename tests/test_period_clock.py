"""Tests for PeriodClock and the 0-11 / 1-12 month conversion."""

import pytest
from datetime import date

from cashflow.core import InvalidPeriod, PeriodClock, from_internal, to_internal
from cashflow.models.finance import Period


class TestConversion:
    """Tests for the explicit internal/boundary conversion."""

    def test_to_internal(self):
        """Test January at the boundary is month index 0."""
        assert to_internal(Period(month=1, year=2024)) == (0, 2024)
        assert to_internal(Period(month=12, year=2024)) == (11, 2024)

    def test_from_internal(self):
        """Test month index 11 is December at the boundary."""
        assert from_internal(11, 2024) == Period(month=12, year=2024)
        assert from_internal(0, 2024) == Period(month=1, year=2024)

    def test_conversion_both_directions(self):
        """Test every month survives the trip through the internal form."""
        for month in range(1, 13):
            period = Period(month=month, year=2030)
            assert from_internal(*to_internal(period)) == period

    @pytest.mark.parametrize("month_index", [-1, 12])
    def test_from_internal_rejects_bad_index(self, month_index):
        """Test internal months must be 0-11."""
        with pytest.raises(InvalidPeriod):
            from_internal(month_index, 2024)

    def test_to_internal_rejects_unvalidated_period(self):
        """Test a period built without validation still fails fast."""
        with pytest.raises(InvalidPeriod):
            to_internal(Period.model_construct(month=13, year=2024))


class TestPeriodClock:
    """Tests for PeriodClock navigation."""

    def test_current(self):
        """Test current() reports the boundary period."""
        clock = PeriodClock(5, 2024)
        assert clock.current() == Period(month=6, year=2024)
        assert clock.month_index == 5

    def test_next_simple(self):
        """Test next() within a year."""
        clock = PeriodClock(0, 2024)
        assert clock.next() == Period(month=2, year=2024)

    def test_previous_simple(self):
        """Test previous() within a year."""
        clock = PeriodClock(5, 2024)
        assert clock.previous() == Period(month=5, year=2024)

    def test_next_wraps_december(self):
        """Test next() at December moves to January of the next year."""
        clock = PeriodClock(11, 2024)
        assert clock.next() == Period(month=1, year=2025)
        assert (clock.month_index, clock.year) == (0, 2025)

    def test_previous_wraps_january(self):
        """Test previous() at January moves to December of the prior year."""
        clock = PeriodClock(0, 2024)
        assert clock.previous() == Period(month=12, year=2023)
        assert (clock.month_index, clock.year) == (11, 2023)

    def test_round_trip(self):
        """Test 24 steps forward then back return to the start."""
        clock = PeriodClock(3, 2024)
        for _ in range(24):
            clock.next()
        assert clock.current() == Period(month=4, year=2026)
        for _ in range(24):
            clock.previous()
        assert clock.current() == Period(month=4, year=2024)

    @pytest.mark.parametrize("month_index", [-1, 12])
    def test_rejects_bad_month(self, month_index):
        """Test construction outside 0-11 fails."""
        with pytest.raises(InvalidPeriod):
            PeriodClock(month_index, 2024)

    def test_from_period(self):
        """Test building a clock from a boundary period."""
        clock = PeriodClock.from_period(Period(month=12, year=2024))
        assert clock.month_index == 11

    def test_today(self):
        """Test the default clock follows the given date."""
        clock = PeriodClock.today(date(2024, 3, 15))
        assert clock.current() == Period(month=3, year=2024)
