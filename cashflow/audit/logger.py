"""
Audit Logger

DESIGN DECISION: Every change to the user's records, and every failed
attempt, is logged. This provides:
1. Complete traceability of bill state (who marked what as paid, and when)
2. Debugging capability when a total looks wrong
3. A history the user can review

The audit logger:
- Is async so it can share the storage backend's event loop
- Gracefully handles storage failures (a failed audit write never blocks a change)
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

import structlog

from cashflow.config import get_settings
from cashflow.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from cashflow.models.finance import Period, PortfolioSummary
from cashflow.services.storage import AuditStorageInterface


def configure_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> None:
    """
    Configure structlog for local logging.

    Defaults come from LoggingSettings.
    """
    settings = get_settings().logging
    level = level or settings.level
    json_output = settings.json_output if json_output is None else json_output

    logging.basicConfig(format="%(message)s", level=getattr(logging, level))
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence and user visibility), when configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_purchase_added(
        self,
        purchase_id: UUID,
        account_id: UUID,
        total_value: Decimal,
        total_installments: int,
        period: Period,
    ) -> None:
        await self.log(AuditEventBuilder.purchase_added(
            purchase_id=purchase_id,
            account_id=account_id,
            total_value=total_value,
            total_installments=total_installments,
            period=period,
        ))

    async def log_purchase_deleted(self, purchase_id: UUID) -> None:
        await self.log(AuditEventBuilder.purchase_deleted(purchase_id))

    async def log_expense_added(self, expense_id: UUID, value: Decimal, period: Period) -> None:
        await self.log(AuditEventBuilder.expense_added(expense_id, value, period))

    async def log_expense_deleted(self, expense_id: UUID) -> None:
        await self.log(AuditEventBuilder.expense_deleted(expense_id))

    async def log_bill_paid_toggled(
        self,
        account_id: UUID,
        period: Period,
        is_paid: bool,
    ) -> None:
        await self.log(AuditEventBuilder.bill_paid_toggled(account_id, period, is_paid))

    async def log_extra_value_added(
        self,
        account_id: UUID,
        period: Period,
        amount: Decimal,
        extra_value: Decimal,
    ) -> None:
        await self.log(AuditEventBuilder.extra_value_added(
            account_id=account_id,
            period=period,
            amount=amount,
            extra_value=extra_value,
        ))

    async def log_salary_updated(self, salary: Decimal) -> None:
        await self.log(AuditEventBuilder.salary_updated(salary))

    async def log_summary(self, summary: PortfolioSummary) -> None:
        await self.log(AuditEventBuilder.summary_computed(
            period=summary.period,
            total_due=summary.total_due,
            pending_due=summary.pending_due,
            total_debt=summary.total_debt,
            balance=summary.balance,
        ))

    async def log_period_changed(self, period: Period) -> None:
        await self.log(AuditEventBuilder.period_changed(period))

    async def log_validation_failed(
        self,
        field: str,
        error_message: str,
        period: Optional[Period] = None,
    ) -> None:
        await self.log(AuditEventBuilder.validation_failed(field, error_message, period))

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        period: Optional[Period] = None,
    ) -> None:
        await self.log(AuditEventBuilder.storage_error(operation, error_message, period))
