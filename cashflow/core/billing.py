"""
Billing Engine

DESIGN DECISION: Billing is a pure derivation. Every figure is recomputed
from (purchases, bill state, viewed period) on each call; nothing is cached
and nothing is read from the wall clock.

For a purchase P viewed in period V:

    months_elapsed     = (V.year - P.start.year) * 12 + (V.month - P.start.month)
    installment_index  = months_elapsed + 1
    active             iff 1 <= installment_index <= P.total_installments
    installment_value  = P.total_value / P.total_installments
    remaining_debt     = installment_value * (total - index + 1)   (active only)

The total is divided equally; any rounding remainder is NOT moved onto the
last installment.

Extra value from the bill state is added to the monthly due but never to
the remaining debt. Manual charges do not amortize.
"""

from decimal import Decimal
from typing import Iterable, Optional

from cashflow.core.errors import InvalidPeriod, InvalidPurchase
from cashflow.models.finance import (
    Account,
    AccountSummary,
    BillPeriodState,
    InstallmentPurchase,
    Period,
    PurchaseStatus,
    to_cents,
)


ZERO = Decimal("0")


def _check_period(period: Period) -> None:
    if not 1 <= period.month <= 12:
        raise InvalidPeriod(f"Month must be 1-12, got {period.month}")


def _check_purchase(purchase: InstallmentPurchase) -> None:
    # Models already enforce these; reaching here means a caller bypassed validation.
    if purchase.total_installments < 1:
        raise InvalidPurchase(
            f"Purchase {purchase.id} has {purchase.total_installments} installments"
        )
    if purchase.total_value <= 0:
        raise InvalidPurchase(
            f"Purchase {purchase.id} has non-positive value {purchase.total_value}"
        )
    _check_period(purchase.start_period)


class BillingEngine:
    """
    Derives activity, dues and remaining debt for a viewing period.

    Stateless: one instance can be shared by any number of sessions.
    """

    # -------------------------------------------------------------------------
    # Per purchase
    # -------------------------------------------------------------------------

    def installment_index(self, purchase: InstallmentPurchase, period: Period) -> int:
        """1-based installment number of `purchase` in `period`.

        Values below 1 mean the purchase has not started yet; values above
        `total_installments` mean it is finished.
        """
        _check_purchase(purchase)
        _check_period(period)
        return period.ordinal - purchase.start_period.ordinal + 1

    def is_active(self, purchase: InstallmentPurchase, period: Period) -> bool:
        index = self.installment_index(purchase, period)
        return 1 <= index <= purchase.total_installments

    def installment_value(self, purchase: InstallmentPurchase) -> Decimal:
        _check_purchase(purchase)
        return Decimal(purchase.total_value) / purchase.total_installments

    def remaining_installments(self, purchase: InstallmentPurchase, period: Period) -> int:
        """Installments still due including the current one; 0 when inactive."""
        index = self.installment_index(purchase, period)
        if not 1 <= index <= purchase.total_installments:
            return 0
        return purchase.total_installments - index + 1

    def purchase_due(self, purchase: InstallmentPurchase, period: Period) -> Decimal:
        if not self.is_active(purchase, period):
            return ZERO
        return self.installment_value(purchase)

    def purchase_debt(self, purchase: InstallmentPurchase, period: Period) -> Decimal:
        remaining = self.remaining_installments(purchase, period)
        if remaining == 0:
            return ZERO
        return self.installment_value(purchase) * remaining

    def purchase_status(self, purchase: InstallmentPurchase, period: Period) -> PurchaseStatus:
        index = self.installment_index(purchase, period)
        return PurchaseStatus(
            purchase_id=purchase.id,
            description=purchase.description,
            period=period,
            current_installment_index=index,
            total_installments=purchase.total_installments,
            is_active=1 <= index <= purchase.total_installments,
            installment_value=to_cents(self.installment_value(purchase)),
            remaining_installments=self.remaining_installments(purchase, period),
            remaining_debt=to_cents(self.purchase_debt(purchase, period)),
        )

    # -------------------------------------------------------------------------
    # Per account
    # -------------------------------------------------------------------------

    def monthly_due(
        self,
        purchases: Iterable[InstallmentPurchase],
        state: Optional[BillPeriodState],
        period: Period,
    ) -> Decimal:
        """Installments due in `period` plus the manual extra value."""
        due = sum((self.purchase_due(p, period) for p in purchases), ZERO)
        return due + self._extra_value(state, period)

    def remaining_debt(
        self,
        purchases: Iterable[InstallmentPurchase],
        period: Period,
    ) -> Decimal:
        return sum((self.purchase_debt(p, period) for p in purchases), ZERO)

    def is_paid(self, state: Optional[BillPeriodState]) -> bool:
        return state.is_paid if state is not None else False

    def account_summary(
        self,
        account: Account,
        purchases: Iterable[InstallmentPurchase],
        state: Optional[BillPeriodState],
        period: Period,
    ) -> AccountSummary:
        """
        Build the derived view of one account for `period`.

        Purchases belonging to other accounts are ignored.
        """
        owned = [p for p in purchases if p.account_id == account.id]
        return AccountSummary(
            account_id=account.id,
            account_name=account.name,
            period=period,
            monthly_due=to_cents(self.monthly_due(owned, state, period)),
            remaining_debt=to_cents(self.remaining_debt(owned, period)),
            extra_value=to_cents(self._extra_value(state, period)),
            is_paid=self.is_paid(state),
            purchases=[
                self.purchase_status(p, period)
                for p in owned
                if self.is_active(p, period)
            ],
        )

    def _extra_value(self, state: Optional[BillPeriodState], period: Period) -> Decimal:
        if state is None:
            return ZERO
        if state.period != period:
            raise InvalidPeriod(
                f"Bill state for {state.period} used while viewing {period}"
            )
        return Decimal(state.extra_value)
