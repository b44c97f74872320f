"""
Billing Core

Pure period arithmetic and aggregation. No I/O happens in this package.
"""

from cashflow.core.aggregator import AccountAggregator
from cashflow.core.bill_state import BillStateStore
from cashflow.core.billing import BillingEngine
from cashflow.core.errors import (
    CashflowError,
    InvalidAmount,
    InvalidPeriod,
    InvalidPurchase,
    NonPositiveAdjustment,
    RetrievalFailed,
    UpdateFailed,
)
from cashflow.core.ledger import InstallmentLedger
from cashflow.core.period_clock import PeriodClock, from_internal, to_internal

__all__ = [
    # Components
    "AccountAggregator",
    "BillStateStore",
    "BillingEngine",
    "InstallmentLedger",
    "PeriodClock",
    "from_internal",
    "to_internal",
    # Errors
    "CashflowError",
    "InvalidAmount",
    "InvalidPeriod",
    "InvalidPurchase",
    "NonPositiveAdjustment",
    "RetrievalFailed",
    "UpdateFailed",
]
