"""
Boundary Validation

Raw user input (typed amounts, installment counts, months) is parsed and
checked here before anything reaches the billing engine.

Amounts are typed the Brazilian way as often as not ("1.234,56",
"R$ 12,50"), so both comma and dot decimal separators are accepted.

IMPORTANT: Validation NEVER silently fixes issues. Anything that cannot be
read unambiguously raises, and the caller shows the message to the user.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional, Union
from uuid import UUID

from cashflow.config import get_settings
from cashflow.config.settings import AppSettings
from cashflow.core.errors import (
    InvalidAmount,
    InvalidPeriod,
    InvalidPurchase,
    NonPositiveAdjustment,
)
from cashflow.core.period_clock import PeriodClock
from cashflow.models.finance import (
    Expense,
    InstallmentPurchase,
    Period,
    to_cents,
)


Numeric = Union[str, int, float, Decimal]

_THOUSANDS_GROUPED = re.compile(r"^\d{1,3}(\.\d{3})+,\d+$")


def parse_amount(raw: Numeric, symbol: str = "R$") -> Decimal:
    """
    Parse a currency amount and quantize it to cents.

    Accepts numbers, "12.50", "12,50", "1.234,56" and an optional
    leading currency symbol.

    Raises:
        InvalidAmount: If the value is empty or not a finite number
    """
    if isinstance(raw, bool):
        raise InvalidAmount(f"Not an amount: {raw!r}")

    if isinstance(raw, (int, Decimal)):
        value = Decimal(raw)
    elif isinstance(raw, float):
        value = Decimal(str(raw))
    else:
        text = str(raw).strip()
        if symbol and text.startswith(symbol):
            text = text[len(symbol):].strip()
        if not text:
            raise InvalidAmount("Amount is empty")

        if _THOUSANDS_GROUPED.match(text):
            text = text.replace(".", "").replace(",", ".")
        elif "," in text:
            if text.count(",") > 1 or "." in text:
                raise InvalidAmount(f"Ambiguous amount: {raw!r}")
            text = text.replace(",", ".")

        try:
            value = Decimal(text)
        except InvalidOperation:
            raise InvalidAmount(f"Not an amount: {raw!r}")

    if not value.is_finite():
        raise InvalidAmount(f"Not an amount: {raw!r}")

    try:
        return to_cents(value)
    except InvalidOperation:
        # more digits than the decimal context can hold at cent precision
        raise InvalidAmount(f"Amount is too large: {raw!r}")


def parse_installments(raw: Union[str, int]) -> int:
    """
    Parse an installment count.

    Raises:
        InvalidPurchase: If the value is not a whole number >= 1
    """
    if isinstance(raw, bool):
        raise InvalidPurchase(f"Not an installment count: {raw!r}")
    if isinstance(raw, int):
        count = raw
    else:
        text = str(raw).strip().lower().rstrip("x")
        if not text.isdecimal():
            raise InvalidPurchase(f"Not an installment count: {raw!r}")
        count = int(text)

    if count < 1:
        raise InvalidPurchase("A purchase needs at least one installment")
    return count


def validate_period(month: int, year: int) -> Period:
    """
    Build a boundary period (month 1-12).

    Raises:
        InvalidPeriod: If month is outside 1-12
    """
    if not isinstance(month, int) or isinstance(month, bool) or not 1 <= month <= 12:
        raise InvalidPeriod(f"Month must be 1-12, got {month!r}")
    if not isinstance(year, int) or isinstance(year, bool):
        raise InvalidPeriod(f"Year must be an integer, got {year!r}")
    return Period(month=month, year=year)


class InputValidator:
    """
    Turns raw input into validated records.

    Limits (largest amount, most installments) come from AppSettings.
    """

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    def amount(self, raw: Numeric, field: str = "amount") -> Decimal:
        """Parse a strictly positive amount within the configured maximum."""
        value = parse_amount(raw, self._settings.currency_symbol)
        if value <= 0:
            raise InvalidAmount(f"{field} must be greater than zero")
        if value > self._settings.max_amount:
            raise InvalidAmount(
                f"{field} {value} exceeds the maximum of {self._settings.max_amount}"
            )
        return value

    def extra_value(self, raw: Numeric) -> Decimal:
        """
        Parse a manual charge for a bill.

        Raises:
            InvalidAmount: If unparseable or above the configured maximum
            NonPositiveAdjustment: If zero or negative
        """
        value = parse_amount(raw, self._settings.currency_symbol)
        if value <= 0:
            raise NonPositiveAdjustment(f"Extra value must be positive, got {value}")
        return self.amount(value, field="Extra value")

    def salary(self, raw: Numeric) -> Decimal:
        """Salary may be zero (not set yet) but never negative."""
        value = parse_amount(raw, self._settings.currency_symbol)
        if value < 0:
            raise InvalidAmount("Salary cannot be negative")
        return value

    def build_purchase(
        self,
        account_id: UUID,
        description: str,
        total_value: Numeric,
        total_installments: Union[str, int],
        period: Period,
        current_installment: Union[str, int] = 1,
    ) -> InstallmentPurchase:
        """
        Validate and build an installment purchase.

        `current_installment` is the installment that falls in `period`.
        Purchases entered part way through are stored with the start period
        that installment implies, so the index is still derived per query.

        Raises:
            InvalidPurchase: If the description, value or installment counts are invalid
        """
        description = (description or "").strip()
        if not description:
            raise InvalidPurchase("Purchase description is required")

        try:
            value = self.amount(total_value, field="Total value")
        except InvalidAmount as e:
            raise InvalidPurchase(str(e)) from e

        count = parse_installments(total_installments)
        if count > self._settings.max_installments:
            raise InvalidPurchase(
                f"At most {self._settings.max_installments} installments are allowed"
            )

        current = parse_installments(current_installment)
        if current > count:
            raise InvalidPurchase(
                f"Current installment {current} is past the last one ({count})"
            )

        clock = PeriodClock.from_period(period)
        for _ in range(current - 1):
            clock.previous()

        return InstallmentPurchase(
            account_id=account_id,
            description=description,
            total_value=value,
            total_installments=count,
            start_period=clock.current(),
        )

    def build_expense(
        self,
        description: str,
        value: Numeric,
        period: Period,
    ) -> Expense:
        """
        Validate and build a standalone expense.

        Raises:
            InvalidAmount: If the value is invalid or the description is empty
        """
        description = (description or "").strip()
        if not description:
            raise InvalidAmount("Expense description is required")
        return Expense(
            description=description,
            value=self.amount(value, field="Expense value"),
            period=period,
        )
