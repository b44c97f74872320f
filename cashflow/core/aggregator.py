"""
Account Aggregator

Rolls per-account summaries and the period's standalone expenses into
portfolio totals:

    total_due   = sum(monthly_due) + sum(expense values)
    pending_due = sum(monthly_due of unpaid accounts)
    total_debt  = sum(remaining_debt)
    balance     = salary - total_due

Inputs arrive already quantized to cents, so plain Decimal addition is
exact and the totals do not depend on iteration order.
"""

from decimal import Decimal
from typing import Iterable

from cashflow.core.errors import InvalidPeriod
from cashflow.models.finance import (
    AccountSummary,
    Expense,
    Period,
    PortfolioSummary,
    to_cents,
)


ZERO = Decimal("0")


class AccountAggregator:
    """Computes portfolio totals for one viewing period."""

    def aggregate(
        self,
        period: Period,
        accounts: Iterable[AccountSummary],
        expenses: Iterable[Expense],
        salary: Decimal,
    ) -> PortfolioSummary:
        accounts = list(accounts)
        expenses = [e for e in expenses if e.period == period]

        for summary in accounts:
            if summary.period != period:
                raise InvalidPeriod(
                    f"Summary for {summary.period} mixed into totals for {period}"
                )

        bills_total = self.total_bills(accounts)
        expenses_total = sum((to_cents(e.value) for e in expenses), ZERO)
        total_due = bills_total + expenses_total
        salary = to_cents(salary)

        return PortfolioSummary(
            period=period,
            salary=salary,
            total_due=total_due,
            pending_due=self.pending_due(accounts),
            total_debt=self.total_debt(accounts),
            balance=salary - total_due,
            bills_total=bills_total,
            expenses_total=expenses_total,
            paid_count=sum(1 for a in accounts if a.is_paid),
            account_count=len(accounts),
            accounts=accounts,
        )

    def total_bills(self, accounts: Iterable[AccountSummary]) -> Decimal:
        return sum((to_cents(a.monthly_due) for a in accounts), ZERO)

    def pending_due(self, accounts: Iterable[AccountSummary]) -> Decimal:
        return sum((to_cents(a.monthly_due) for a in accounts if not a.is_paid), ZERO)

    def total_debt(self, accounts: Iterable[AccountSummary]) -> Decimal:
        return sum((to_cents(a.remaining_debt) for a in accounts), ZERO)
