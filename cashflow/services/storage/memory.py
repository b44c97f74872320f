"""
In-Memory Storage Implementation

Keeps every record in process memory. Used by tests and as the default
backend when nothing else is configured; the data lives as long as the
storage object does.

Records are copied on the way in and out so callers cannot mutate stored
rows behind the store's back. Bill states in particular are replaced as a
whole on save (last write wins).
"""

from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

from cashflow.models.audit import AuditEvent
from cashflow.models.finance import (
    Account,
    BillPeriodState,
    Expense,
    InstallmentPurchase,
    Period,
)
from cashflow.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    FinanceStorageInterface,
    NotFoundError,
)


class InMemoryFinanceStorage(FinanceStorageInterface):
    """Dictionary-backed implementation of FinanceStorageInterface."""

    def __init__(self, salary: Decimal = Decimal("0")):
        self._accounts: dict[UUID, Account] = {}
        self._installments: dict[UUID, InstallmentPurchase] = {}
        self._bill_states: dict[tuple[UUID, Period], BillPeriodState] = {}
        self._expenses: dict[UUID, Expense] = {}
        self._salary = Decimal(salary)

    async def list_accounts(self) -> list[Account]:
        return [a.model_copy() for a in self._accounts.values()]

    async def add_account(self, account: Account) -> Account:
        if account.id in self._accounts:
            raise DuplicateError(f"Account already exists: {account.id}")
        self._accounts[account.id] = account.model_copy()
        return account

    async def list_installments(
        self,
        account_ids: Iterable[UUID],
    ) -> list[InstallmentPurchase]:
        wanted = set(account_ids)
        return [p for p in self._installments.values() if p.account_id in wanted]

    async def add_installment(self, purchase: InstallmentPurchase) -> InstallmentPurchase:
        if purchase.account_id not in self._accounts:
            raise NotFoundError(f"Account not found: {purchase.account_id}")
        if purchase.id in self._installments:
            raise DuplicateError(f"Purchase already exists: {purchase.id}")
        self._installments[purchase.id] = purchase
        return purchase

    async def delete_installment(self, purchase_id: UUID) -> bool:
        return self._installments.pop(purchase_id, None) is not None

    async def get_bill_state(
        self,
        account_id: UUID,
        period: Period,
    ) -> Optional[BillPeriodState]:
        state = self._bill_states.get((account_id, period))
        return state.model_copy() if state else None

    async def list_bill_states(self, period: Period) -> list[BillPeriodState]:
        return [
            state.model_copy()
            for (_, state_period), state in self._bill_states.items()
            if state_period == period
        ]

    async def save_bill_state(self, state: BillPeriodState) -> BillPeriodState:
        if state.account_id not in self._accounts:
            raise NotFoundError(f"Account not found: {state.account_id}")
        self._bill_states[state.key] = state.model_copy()
        return state

    async def get_salary(self) -> Decimal:
        return self._salary

    async def set_salary(self, salary: Decimal) -> None:
        self._salary = Decimal(salary)

    async def list_expenses(self, period: Period) -> list[Expense]:
        matching = [e for e in self._expenses.values() if e.period == period]
        # dicts keep insertion order; newest first
        return list(reversed(matching))

    async def add_expense(self, expense: Expense) -> Expense:
        if expense.id in self._expenses:
            raise DuplicateError(f"Expense already exists: {expense.id}")
        self._expenses[expense.id] = expense
        return expense

    async def delete_expense(self, expense_id: UUID) -> bool:
        return self._expenses.pop(expense_id, None) is not None


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
