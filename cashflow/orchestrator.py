"""
Main Orchestrator for Cashflow

This module ties together all the components and defines the per-user
session flow:
1. Navigate the viewed period (previous / next / go to)
2. Read: fetch a snapshot -> derive account bills -> aggregate totals
3. Write: validate input -> mutate records -> persist -> audit

DESIGN DECISION: The orchestrator enforces the boundaries:
- Raw input is validated before it reaches the billing core
- Nothing derived is cached; every read recomputes from a fresh snapshot
- Storage failures reach the user as a generic retrieval/update failure
- Every change is audited
"""

from decimal import Decimal
from typing import Optional, Union
from uuid import UUID

import structlog

from cashflow.audit import AuditLogger, configure_logging
from cashflow.core import (
    AccountAggregator,
    BillingEngine,
    BillStateStore,
    CashflowError,
    InstallmentLedger,
    PeriodClock,
    RetrievalFailed,
    UpdateFailed,
)
from cashflow.models.finance import (
    AccountSummary,
    BillPeriodState,
    Expense,
    InstallmentPurchase,
    Period,
    PortfolioSummary,
)
from cashflow.services.storage import (
    AuditStorageInterface,
    FinanceStorageInterface,
    InMemoryFinanceStorage,
    NotFoundError,
    StorageError,
)
from cashflow.validation import InputValidator, validate_period


logger = structlog.get_logger(__name__)

Numeric = Union[str, int, float, Decimal]


class CashflowSession:
    """
    One user's view of their cash flow.

    Holds only the viewed period. Records live in storage and are
    re-read for every summary.
    """

    def __init__(
        self,
        storage: FinanceStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        clock: Optional[PeriodClock] = None,
        engine: Optional[BillingEngine] = None,
        aggregator: Optional[AccountAggregator] = None,
        validator: Optional[InputValidator] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._clock = clock or PeriodClock.today()
        self._engine = engine or BillingEngine()
        self._aggregator = aggregator or AccountAggregator()
        self._validator = validator or InputValidator()

    # -------------------------------------------------------------------------
    # Period navigation
    # -------------------------------------------------------------------------

    @property
    def period(self) -> Period:
        return self._clock.current()

    async def previous_period(self) -> Period:
        period = self._clock.previous()
        await self._audit_logger.log_period_changed(period)
        return period

    async def next_period(self) -> Period:
        period = self._clock.next()
        await self._audit_logger.log_period_changed(period)
        return period

    async def go_to(self, month: int, year: int) -> Period:
        """
        Jump to a period given as (month 1-12, year).

        Raises:
            InvalidPeriod: If month is outside 1-12
        """
        self._clock = PeriodClock.from_period(validate_period(month, year))
        period = self._clock.current()
        await self._audit_logger.log_period_changed(period)
        return period

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def summary(self) -> PortfolioSummary:
        """
        Compute portfolio totals for the viewed period.

        Raises:
            RetrievalFailed: If records could not be fetched
        """
        period = self.period
        try:
            accounts = await self._storage.list_accounts()
            ledger = InstallmentLedger(
                await self._storage.list_installments([a.id for a in accounts])
            )
            bill_states = BillStateStore(await self._storage.list_bill_states(period))
            expenses = await self._storage.list_expenses(period)
            salary = await self._storage.get_salary()
        except StorageError as e:
            await self._storage_failed("summary", e, period)
            raise RetrievalFailed() from e

        account_summaries = [
            self._engine.account_summary(
                account,
                ledger.for_account(account.id),
                bill_states.get(account.id, period),
                period,
            )
            for account in accounts
        ]
        summary = self._aggregator.aggregate(period, account_summaries, expenses, salary)

        logger.debug(
            "summary_computed",
            period=str(period),
            accounts=summary.account_count,
            purchases=len(ledger),
            active_purchases=sum(a.active_count for a in summary.accounts),
        )
        await self._audit_logger.log_summary(summary)
        return summary

    async def account_summary(self, account_id: UUID) -> AccountSummary:
        """
        Derived bill for one account in the viewed period.

        Raises:
            RetrievalFailed: If records could not be fetched or the account is unknown
        """
        period = self.period
        try:
            accounts = {a.id: a for a in await self._storage.list_accounts()}
            if account_id not in accounts:
                raise NotFoundError(f"Account not found: {account_id}")
            purchases = await self._storage.list_installments([account_id])
            state = await self._storage.get_bill_state(account_id, period)
        except StorageError as e:
            await self._storage_failed("account_summary", e, period)
            raise RetrievalFailed() from e

        return self._engine.account_summary(accounts[account_id], purchases, state, period)

    async def expenses(self) -> list[Expense]:
        """Standalone expenses of the viewed period, newest first."""
        period = self.period
        try:
            return await self._storage.list_expenses(period)
        except StorageError as e:
            await self._storage_failed("list_expenses", e, period)
            raise RetrievalFailed() from e

    # -------------------------------------------------------------------------
    # Bill state
    # -------------------------------------------------------------------------

    async def toggle_bill_paid(self, account_id: UUID) -> BillPeriodState:
        """
        Flip the paid flag of an account's bill for the viewed period.

        Raises:
            RetrievalFailed / UpdateFailed: On storage failure
        """
        period = self.period
        store = await self._load_state(account_id, period)
        state = store.toggle_paid(account_id, period)
        await self._save_state(state, "toggle_bill_paid")
        await self._audit_logger.log_bill_paid_toggled(account_id, period, state.is_paid)
        return state

    async def add_extra_value(self, account_id: UUID, amount: Numeric) -> BillPeriodState:
        """
        Add a manual charge to an account's bill for the viewed period.

        Raises:
            InvalidAmount: If the amount cannot be parsed or exceeds the maximum
            NonPositiveAdjustment: If the amount is zero or negative
            RetrievalFailed / UpdateFailed: On storage failure
        """
        period = self.period
        try:
            value = self._validator.extra_value(amount)
        except CashflowError as e:
            await self._audit_logger.log_validation_failed("extra_value", str(e), period)
            raise

        store = await self._load_state(account_id, period)
        state = store.add_extra_value(account_id, period, value)
        await self._save_state(state, "add_extra_value")
        await self._audit_logger.log_extra_value_added(account_id, period, value, state.extra_value)
        return state

    # -------------------------------------------------------------------------
    # Installment purchases
    # -------------------------------------------------------------------------

    async def add_purchase(
        self,
        account_id: UUID,
        description: str,
        total_value: Numeric,
        total_installments: Union[str, int],
        current_installment: Union[str, int] = 1,
    ) -> InstallmentPurchase:
        """
        Record a purchase whose `current_installment` falls in the viewed period.

        The default of 1 starts the purchase in the viewed period.

        Raises:
            InvalidPurchase: If the value or installment count is invalid
            UpdateFailed: On storage failure
        """
        period = self.period
        try:
            purchase = self._validator.build_purchase(
                account_id=account_id,
                description=description,
                total_value=total_value,
                total_installments=total_installments,
                period=period,
                current_installment=current_installment,
            )
        except CashflowError as e:
            await self._audit_logger.log_validation_failed("purchase", str(e), period)
            raise

        try:
            await self._storage.add_installment(purchase)
        except StorageError as e:
            await self._storage_failed("add_purchase", e, period)
            raise UpdateFailed() from e

        await self._audit_logger.log_purchase_added(
            purchase_id=purchase.id,
            account_id=account_id,
            total_value=purchase.total_value,
            total_installments=purchase.total_installments,
            period=purchase.start_period,
        )
        return purchase

    async def delete_purchase(self, purchase_id: UUID) -> bool:
        try:
            deleted = await self._storage.delete_installment(purchase_id)
        except StorageError as e:
            await self._storage_failed("delete_purchase", e)
            raise UpdateFailed() from e
        if deleted:
            await self._audit_logger.log_purchase_deleted(purchase_id)
        return deleted

    # -------------------------------------------------------------------------
    # Expenses and salary
    # -------------------------------------------------------------------------

    async def add_expense(self, description: str, value: Numeric) -> Expense:
        """
        Record a standalone expense in the viewed period.

        Raises:
            InvalidAmount: If the description is empty or the value invalid
            UpdateFailed: On storage failure
        """
        period = self.period
        try:
            expense = self._validator.build_expense(description, value, period)
        except CashflowError as e:
            await self._audit_logger.log_validation_failed("expense", str(e), period)
            raise

        try:
            await self._storage.add_expense(expense)
        except StorageError as e:
            await self._storage_failed("add_expense", e, period)
            raise UpdateFailed() from e

        await self._audit_logger.log_expense_added(expense.id, expense.value, period)
        return expense

    async def delete_expense(self, expense_id: UUID) -> bool:
        try:
            deleted = await self._storage.delete_expense(expense_id)
        except StorageError as e:
            await self._storage_failed("delete_expense", e)
            raise UpdateFailed() from e
        if deleted:
            await self._audit_logger.log_expense_deleted(expense_id)
        return deleted

    async def set_salary(self, value: Numeric) -> Decimal:
        try:
            salary = self._validator.salary(value)
        except CashflowError as e:
            await self._audit_logger.log_validation_failed("salary", str(e))
            raise

        try:
            await self._storage.set_salary(salary)
        except StorageError as e:
            await self._storage_failed("set_salary", e)
            raise UpdateFailed() from e

        await self._audit_logger.log_salary_updated(salary)
        return salary

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _load_state(self, account_id: UUID, period: Period) -> BillStateStore:
        try:
            existing = await self._storage.get_bill_state(account_id, period)
        except StorageError as e:
            await self._storage_failed("get_bill_state", e, period)
            raise RetrievalFailed() from e
        return BillStateStore([existing] if existing else [])

    async def _save_state(self, state: BillPeriodState, operation: str) -> None:
        try:
            await self._storage.save_bill_state(state)
        except StorageError as e:
            await self._storage_failed(operation, e, state.period)
            raise UpdateFailed() from e

    async def _storage_failed(
        self,
        operation: str,
        error: Exception,
        period: Optional[Period] = None,
    ) -> None:
        logger.error("storage_failed", operation=operation, error=str(error))
        await self._audit_logger.log_storage_error(operation, str(error), period)


def create_session(
    storage: Optional[FinanceStorageInterface] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
    clock: Optional[PeriodClock] = None,
) -> CashflowSession:
    """
    Factory function to create a ready-to-use session.

    Args:
        storage: Records backend. Defaults to in-memory storage.
        audit_storage: Where audit events are persisted.
                       If None, audit events are only logged locally.
        clock: Initial viewing period. Defaults to the current month.
    """
    configure_logging()
    return CashflowSession(
        storage=storage or InMemoryFinanceStorage(),
        audit_logger=AuditLogger(audit_storage),
        clock=clock,
    )
