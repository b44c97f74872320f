"""
Abstract Storage Interface

DESIGN DECISION: The billing core never talks to a database. It is handed
consistent snapshots of raw records by an implementation of this interface.
This allows us to:
1. Swap the backend without touching the billing logic
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

Methods are async because real backends do network I/O. Retry policy, if
any, belongs to the implementation.
"""

from abc import ABC, abstractmethod
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


class FinanceStorageInterface(ABC):
    """
    Abstract interface for the records the billing core consumes.

    Any storage implementation must implement these methods.
    """

    # Accounts

    @abstractmethod
    async def list_accounts(self) -> list[Account]:
        """List all accounts in creation order."""
        pass

    @abstractmethod
    async def add_account(self, account: Account) -> Account:
        """
        Save a new account.

        Raises:
            DuplicateError: If an account with the same id exists
        """
        pass

    # Installment purchases

    @abstractmethod
    async def list_installments(
        self,
        account_ids: Iterable[UUID],
    ) -> list[InstallmentPurchase]:
        """
        List every purchase owned by the given accounts.

        Not filtered by period; the billing engine applies the
        activity window.
        """
        pass

    @abstractmethod
    async def add_installment(self, purchase: InstallmentPurchase) -> InstallmentPurchase:
        """
        Save a new installment purchase.

        Raises:
            NotFoundError: If the owning account does not exist
            DuplicateError: If a purchase with the same id exists
        """
        pass

    @abstractmethod
    async def delete_installment(self, purchase_id: UUID) -> bool:
        """
        Delete a purchase.

        Returns:
            True if deleted, False if it did not exist
        """
        pass

    # Bill state

    @abstractmethod
    async def get_bill_state(
        self,
        account_id: UUID,
        period: Period,
    ) -> Optional[BillPeriodState]:
        """Get the bill state for (account, period), or None if never created."""
        pass

    @abstractmethod
    async def list_bill_states(self, period: Period) -> list[BillPeriodState]:
        """Get every bill state recorded for a period."""
        pass

    @abstractmethod
    async def save_bill_state(self, state: BillPeriodState) -> BillPeriodState:
        """
        Insert or replace the bill state for its (account, period) key.

        Last write wins.
        """
        pass

    # Profile

    @abstractmethod
    async def get_salary(self) -> Decimal:
        """Get the user's salary (0 when never set)."""
        pass

    @abstractmethod
    async def set_salary(self, salary: Decimal) -> None:
        pass

    # Expenses

    @abstractmethod
    async def list_expenses(self, period: Period) -> list[Expense]:
        """List standalone expenses for one period, newest first."""
        pass

    @abstractmethod
    async def add_expense(self, expense: Expense) -> Expense:
        pass

    @abstractmethod
    async def delete_expense(self, expense_id: UUID) -> bool:
        """
        Delete an expense.

        Returns:
            True if deleted, False if it did not exist
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events (newest first).
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
