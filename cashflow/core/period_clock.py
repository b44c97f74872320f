"""
Period Clock

The viewing cursor. Internally months run 0-11 so that wrap-around is
plain arithmetic; at the boundary they are 1-12 (see Period).
"""

from datetime import date
from typing import Optional

from cashflow.core.errors import InvalidPeriod
from cashflow.models.finance import Period


def to_internal(period: Period) -> tuple[int, int]:
    """Convert a boundary period (1-12) to (month_index 0-11, year)."""
    if not 1 <= period.month <= 12:
        raise InvalidPeriod(f"Month must be 1-12, got {period.month}")
    return period.month - 1, period.year


def from_internal(month_index: int, year: int) -> Period:
    """Convert (month_index 0-11, year) to a boundary period (1-12)."""
    if not 0 <= month_index <= 11:
        raise InvalidPeriod(f"Month index must be 0-11, got {month_index}")
    return Period(month=month_index + 1, year=year)


class PeriodClock:
    """
    Represents and advances a (month, year) viewing cursor.

    previous() at January wraps to December of the prior year and
    next() at December wraps to January of the following year.
    """

    def __init__(self, month_index: int, year: int):
        if not 0 <= month_index <= 11:
            raise InvalidPeriod(f"Month index must be 0-11, got {month_index}")
        self._month = month_index
        self._year = year

    @classmethod
    def from_period(cls, period: Period) -> "PeriodClock":
        return cls(*to_internal(period))

    @classmethod
    def today(cls, today: Optional[date] = None) -> "PeriodClock":
        """
        Clock positioned on the current calendar month.

        Only used for the initial default selection.
        """
        today = today or date.today()
        return cls(today.month - 1, today.year)

    @property
    def month_index(self) -> int:
        return self._month

    @property
    def year(self) -> int:
        return self._year

    def current(self) -> Period:
        return from_internal(self._month, self._year)

    def previous(self) -> Period:
        if self._month == 0:
            self._month = 11
            self._year -= 1
        else:
            self._month -= 1
        return self.current()

    def next(self) -> Period:
        if self._month == 11:
            self._month = 0
            self._year += 1
        else:
            self._month += 1
        return self.current()

    def __repr__(self) -> str:
        return f"PeriodClock(month_index={self._month}, year={self._year})"
