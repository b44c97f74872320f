"""
Installment Ledger

Holds raw installment purchases exactly as recorded. Nothing derived
(current installment, dues, debt) is kept here; see BillingEngine.
"""

from typing import Iterable, Iterator, Optional
from uuid import UUID

from cashflow.models.finance import InstallmentPurchase


class InstallmentLedger:
    """In-memory collection of installment purchases keyed by id."""

    def __init__(self, purchases: Iterable[InstallmentPurchase] = ()):
        self._purchases: dict[UUID, InstallmentPurchase] = {}
        for purchase in purchases:
            self.add(purchase)

    def add(self, purchase: InstallmentPurchase) -> None:
        self._purchases[purchase.id] = purchase

    def remove(self, purchase_id: UUID) -> bool:
        """Delete a purchase. Returns False if it was not in the ledger."""
        return self._purchases.pop(purchase_id, None) is not None

    def get(self, purchase_id: UUID) -> Optional[InstallmentPurchase]:
        return self._purchases.get(purchase_id)

    def for_account(self, account_id: UUID) -> list[InstallmentPurchase]:
        return [p for p in self._purchases.values() if p.account_id == account_id]

    def for_accounts(self, account_ids: Iterable[UUID]) -> list[InstallmentPurchase]:
        wanted = set(account_ids)
        return [p for p in self._purchases.values() if p.account_id in wanted]

    def __iter__(self) -> Iterator[InstallmentPurchase]:
        return iter(list(self._purchases.values()))

    def __len__(self) -> int:
        return len(self._purchases)

    def __contains__(self, purchase_id: object) -> bool:
        return purchase_id in self._purchases
