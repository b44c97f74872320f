"""Tests for BillStateStore and InstallmentLedger."""

import pytest
from decimal import Decimal
from uuid import uuid4

from cashflow.core import BillStateStore, InstallmentLedger, NonPositiveAdjustment
from cashflow.models.finance import BillPeriodState, InstallmentPurchase, Period


MARCH = Period(month=3, year=2024)


class TestBillStateStore:
    """Tests for the per-(account, period) paid flag and extra value."""

    def test_no_state_by_default(self):
        """Test nothing exists before the first mutation."""
        store = BillStateStore()
        assert store.get(uuid4(), MARCH) is None
        assert len(store) == 0

    def test_add_extra_value_creates_then_accumulates(self):
        """Test first call creates {paid: False, extra: 50}, second adds 20."""
        store = BillStateStore()
        card_a = uuid4()

        state = store.add_extra_value(card_a, MARCH, Decimal("50"))
        assert state.is_paid is False
        assert state.extra_value == Decimal("50")

        state = store.add_extra_value(card_a, MARCH, Decimal("20"))
        assert state.extra_value == Decimal("70")
        assert len(store) == 1

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5")])
    def test_add_extra_value_rejects_non_positive(self, amount):
        """Test zero and negative amounts are rejected and nothing is created."""
        store = BillStateStore()
        card_a = uuid4()
        with pytest.raises(NonPositiveAdjustment):
            store.add_extra_value(card_a, MARCH, amount)
        assert store.get(card_a, MARCH) is None

    def test_toggle_creates_paid_row(self):
        """Test the first toggle creates a paid row with no extra value."""
        store = BillStateStore()
        card_a = uuid4()
        state = store.toggle_paid(card_a, MARCH)
        assert state.is_paid is True
        assert state.extra_value == Decimal("0")

    def test_toggle_twice_restores_flag(self):
        """Test toggling twice returns the flag to its original value."""
        store = BillStateStore()
        card_a = uuid4()
        store.add_extra_value(card_a, MARCH, Decimal("10"))
        original = store.get(card_a, MARCH).is_paid

        store.toggle_paid(card_a, MARCH)
        store.toggle_paid(card_a, MARCH)
        assert store.get(card_a, MARCH).is_paid == original
        assert store.get(card_a, MARCH).extra_value == Decimal("10")

    def test_toggle_keeps_extra_value(self):
        """Test the paid flag and extra value are independent."""
        store = BillStateStore()
        card_a = uuid4()
        store.add_extra_value(card_a, MARCH, Decimal("30"))
        state = store.toggle_paid(card_a, MARCH)
        assert state.is_paid is True
        assert state.extra_value == Decimal("30")

    def test_periods_and_accounts_are_independent(self):
        """Test state is scoped to one (account, period)."""
        store = BillStateStore()
        card_a, card_b = uuid4(), uuid4()
        april = Period(month=4, year=2024)

        store.toggle_paid(card_a, MARCH)
        assert store.get(card_a, april) is None
        assert store.get(card_b, MARCH) is None

    def test_load_seeds_existing_rows(self):
        """Test seeding from storage then mutating in place."""
        card_a = uuid4()
        existing = BillPeriodState(account_id=card_a, period=MARCH, extra_value=Decimal("5"))
        store = BillStateStore([existing])
        store.add_extra_value(card_a, MARCH, Decimal("5"))
        assert store.get(card_a, MARCH).extra_value == Decimal("10")
        assert list(store.states()) == [store.get(card_a, MARCH)]


class TestInstallmentLedger:
    """Tests for the raw purchase ledger."""

    def make_purchase(self, account_id):
        return InstallmentPurchase(
            account_id=account_id,
            total_value=Decimal("100"),
            total_installments=2,
            start_period=MARCH,
        )

    def test_add_and_filter_by_account(self):
        """Test purchases are grouped by owning account."""
        card_a, card_b = uuid4(), uuid4()
        ledger = InstallmentLedger()
        p1, p2, p3 = self.make_purchase(card_a), self.make_purchase(card_a), self.make_purchase(card_b)
        for p in (p1, p2, p3):
            ledger.add(p)

        assert len(ledger) == 3
        assert ledger.for_account(card_a) == [p1, p2]
        assert ledger.for_accounts([card_b]) == [p3]

    def test_remove(self):
        """Test explicit deletion."""
        ledger = InstallmentLedger()
        purchase = self.make_purchase(uuid4())
        ledger.add(purchase)
        assert purchase.id in ledger
        assert ledger.remove(purchase.id) is True
        assert ledger.remove(purchase.id) is False
        assert ledger.get(purchase.id) is None
