"""
Data Models Package

This package contains all Pydantic models used in Cashflow.
Records from storage and values returned to callers conform to these schemas.
"""

from cashflow.models.finance import (
    CENT,
    Account,
    AccountSummary,
    BillPeriodState,
    Expense,
    InstallmentPurchase,
    Period,
    PortfolioSummary,
    PurchaseStatus,
    to_cents,
)
from cashflow.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Finance models
    "CENT",
    "Account",
    "AccountSummary",
    "BillPeriodState",
    "Expense",
    "InstallmentPurchase",
    "Period",
    "PortfolioSummary",
    "PurchaseStatus",
    "to_cents",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
