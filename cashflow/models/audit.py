"""
Audit Models for Cashflow

Every change the user makes (and every failed attempt) is recorded as an
audit event. Summaries are recorded too, so a reported total can be traced
back to the period and figures it was computed from.

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from cashflow.models.finance import Period


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Installments
    PURCHASE_ADDED = "purchase_added"
    PURCHASE_DELETED = "purchase_deleted"

    # Standalone expenses
    EXPENSE_ADDED = "expense_added"
    EXPENSE_DELETED = "expense_deleted"

    # Bill state
    BILL_PAID_TOGGLED = "bill_paid_toggled"
    EXTRA_VALUE_ADDED = "extra_value_added"

    # Profile
    SALARY_UPDATED = "salary_updated"

    # Reads
    SUMMARY_COMPUTED = "summary_computed"
    PERIOD_CHANGED = "period_changed"

    # Failures
    VALIDATION_FAILED = "validation_failed"
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What the event is about
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'purchase', 'bill', 'expense')"
    )
    entity_id: Optional[UUID] = None
    period: Optional[Period] = None

    description: str = Field(
        ...,
        max_length=500,
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    is_user_action: bool = False

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "period": str(self.period) if self.period else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_row(self) -> list[str]:
        """
        Flatten to a list of strings for tabular storage.

        Columns: [event_id, timestamp, event_type, severity, entity_type,
        entity_id, period, description, details_json, error_message,
        is_user_action]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_type or "",
            str(self.entity_id) if self.entity_id else "",
            str(self.period) if self.period else "",
            self.description,
            json.dumps(self.details, default=str) if self.details else "",
            self.error_message or "",
            str(self.is_user_action),
        ]


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.purchase_added(purchase_id, account_id, ...)
        event = AuditEventBuilder.bill_paid_toggled(account_id, period, True)
    """

    @staticmethod
    def purchase_added(
        purchase_id: UUID,
        account_id: UUID,
        total_value: Decimal,
        total_installments: int,
        period: Period,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PURCHASE_ADDED,
            entity_type="purchase",
            entity_id=purchase_id,
            period=period,
            description=f"Purchase added: {total_value} in {total_installments}x",
            details={
                "account_id": str(account_id),
                "total_value": str(total_value),
                "total_installments": total_installments,
            },
            is_user_action=True,
        )

    @staticmethod
    def purchase_deleted(purchase_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PURCHASE_DELETED,
            entity_type="purchase",
            entity_id=purchase_id,
            description="Purchase deleted",
            is_user_action=True,
        )

    @staticmethod
    def expense_added(expense_id: UUID, value: Decimal, period: Period) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            period=period,
            description=f"Expense added: {value}",
            details={"value": str(value)},
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(expense_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=expense_id,
            description="Expense deleted",
            is_user_action=True,
        )

    @staticmethod
    def bill_paid_toggled(account_id: UUID, period: Period, is_paid: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BILL_PAID_TOGGLED,
            entity_type="bill",
            entity_id=account_id,
            period=period,
            description=f"Bill marked as {'paid' if is_paid else 'pending'}",
            details={"is_paid": is_paid},
            is_user_action=True,
        )

    @staticmethod
    def extra_value_added(
        account_id: UUID,
        period: Period,
        amount: Decimal,
        extra_value: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTRA_VALUE_ADDED,
            entity_type="bill",
            entity_id=account_id,
            period=period,
            description=f"Extra value added to bill: {amount}",
            details={
                "amount": str(amount),
                "extra_value": str(extra_value),
            },
            is_user_action=True,
        )

    @staticmethod
    def salary_updated(salary: Decimal) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SALARY_UPDATED,
            entity_type="profile",
            description="Salary updated",
            details={"salary": str(salary)},
            is_user_action=True,
        )

    @staticmethod
    def summary_computed(
        period: Period,
        total_due: Decimal,
        pending_due: Decimal,
        total_debt: Decimal,
        balance: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUMMARY_COMPUTED,
            severity=AuditSeverity.DEBUG,
            entity_type="summary",
            period=period,
            description=f"Summary computed for {period}",
            details={
                "total_due": str(total_due),
                "pending_due": str(pending_due),
                "total_debt": str(total_debt),
                "balance": str(balance),
            },
        )

    @staticmethod
    def period_changed(period: Period) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERIOD_CHANGED,
            severity=AuditSeverity.DEBUG,
            period=period,
            description=f"Viewing {period}",
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(
        field: str,
        error_message: str,
        period: Optional[Period] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            period=period,
            description=f"Rejected input for {field}",
            details={"field": field},
            error_message=error_message,
            is_user_action=True,
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        period: Optional[Period] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            period=period,
            description=f"Storage error during {operation}",
            details={"operation": operation},
            error_message=error_message,
        )
