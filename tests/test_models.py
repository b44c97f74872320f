"""
Tests for Cashflow

Test strategy:
1. Unit tests for individual components (models, engine, stores)
2. Session tests against in-memory storage
3. No real I/O in tests
"""

import pytest
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from cashflow.models.finance import (
    Account,
    BillPeriodState,
    Expense,
    InstallmentPurchase,
    Period,
    PortfolioSummary,
    to_cents,
)
from cashflow.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestFinanceModels:
    """Tests for the record models."""

    def test_period_creation(self):
        """Test Period model creation."""
        period = Period(month=3, year=2024)
        assert period.month == 3
        assert str(period) == "2024-03"

    @pytest.mark.parametrize("month", [0, 13, -1])
    def test_period_rejects_month_out_of_range(self, month):
        """Test boundary months must be 1-12."""
        with pytest.raises(ValidationError):
            Period(month=month, year=2024)

    def test_period_is_hashable_and_comparable(self):
        """Test periods can key dictionaries."""
        states = {Period(month=1, year=2024): "a"}
        assert states[Period(month=1, year=2024)] == "a"
        assert Period(month=1, year=2024) != Period(month=1, year=2025)

    def test_period_ordinal_spans_years(self):
        """Test ordinal difference counts months across a year boundary."""
        assert Period(month=1, year=2025).ordinal - Period(month=12, year=2024).ordinal == 1

    def test_account_strips_whitespace(self):
        """Test that whitespace is stripped from the account name."""
        account = Account(name="  Nubank  ")
        assert account.name == "Nubank"

    def test_purchase_creation(self):
        """Test InstallmentPurchase model creation."""
        purchase = InstallmentPurchase(
            account_id=uuid4(),
            description="Notebook",
            total_value=Decimal("1200.00"),
            total_installments=12,
            start_period=Period(month=1, year=2024),
        )
        assert purchase.total_installments == 12
        assert purchase.start_period.year == 2024

    def test_purchase_is_immutable(self):
        """Test purchases cannot be edited after creation."""
        purchase = InstallmentPurchase(
            account_id=uuid4(),
            total_value=Decimal("100"),
            total_installments=1,
            start_period=Period(month=1, year=2024),
        )
        with pytest.raises(ValidationError):
            purchase.total_installments = 2

    def test_purchase_rejects_zero_installments(self):
        """Test that a purchase needs at least one installment."""
        with pytest.raises(ValidationError):
            InstallmentPurchase(
                account_id=uuid4(),
                total_value=Decimal("100"),
                total_installments=0,
                start_period=Period(month=1, year=2024),
            )

    def test_purchase_rejects_non_positive_value(self):
        """Test that total value must be positive."""
        with pytest.raises(ValidationError):
            InstallmentPurchase(
                account_id=uuid4(),
                total_value=Decimal("0"),
                total_installments=3,
                start_period=Period(month=1, year=2024),
            )

    def test_bill_state_defaults(self):
        """Test a new bill state is unpaid with no extra value."""
        state = BillPeriodState(account_id=uuid4(), period=Period(month=5, year=2024))
        assert state.is_paid is False
        assert state.extra_value == Decimal("0")

    def test_bill_state_rejects_negative_extra(self):
        """Test extra value cannot be negative."""
        with pytest.raises(ValidationError):
            BillPeriodState(
                account_id=uuid4(),
                period=Period(month=5, year=2024),
                extra_value=Decimal("-1"),
            )

    def test_expense_rejects_empty_description(self):
        """Test that an expense needs a description."""
        with pytest.raises(ValidationError):
            Expense(description="   ", value=Decimal("10"), period=Period(month=1, year=2024))

    def test_to_cents_rounds_half_up(self):
        """Test currency quantization."""
        assert to_cents(Decimal("0.005")) == Decimal("0.01")
        assert to_cents(Decimal("333.3333")) == Decimal("333.33")

    def test_portfolio_paid_label(self):
        """Test the 'n/N paid' counter."""
        summary = PortfolioSummary(
            period=Period(month=1, year=2024),
            salary=Decimal("0"),
            total_due=Decimal("0"),
            pending_due=Decimal("0"),
            total_debt=Decimal("0"),
            balance=Decimal("0"),
            bills_total=Decimal("0"),
            expenses_total=Decimal("0"),
            paid_count=2,
            account_count=4,
        )
        assert summary.paid_label == "2/4 paid"


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            description="Expense added",
        )
        assert event.event_type == AuditEventType.EXPENSE_ADDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.BILL_PAID_TOGGLED,
            description="Bill marked as paid",
            period=Period(month=3, year=2024),
            details={"is_paid": True},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "bill_paid_toggled"
        assert log_dict["period"] == "2024-03"
        assert log_dict["details"]["is_paid"] is True

    def test_audit_event_to_row(self):
        """Test conversion to a storage row."""
        event = AuditEvent(
            event_type=AuditEventType.SALARY_UPDATED,
            description="Salary updated",
            is_user_action=True,
        )
        row = event.to_row()
        assert len(row) == 11  # Expected number of columns
        assert row[2] == "salary_updated"
        assert row[10] == "True"

    def test_audit_event_builder_extra_value_added(self):
        """Test AuditEventBuilder.extra_value_added."""
        account_id = uuid4()
        event = AuditEventBuilder.extra_value_added(
            account_id=account_id,
            period=Period(month=3, year=2024),
            amount=Decimal("20"),
            extra_value=Decimal("70"),
        )
        assert event.event_type == AuditEventType.EXTRA_VALUE_ADDED
        assert event.entity_id == account_id
        assert event.details["extra_value"] == "70"
        assert event.is_user_action is True

    def test_audit_event_builder_storage_error(self):
        """Test AuditEventBuilder.storage_error."""
        event = AuditEventBuilder.storage_error("summary", "backend down")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "backend down"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
