"""
Bill State Store

Manual per-(account, period) state: the paid flag and the cumulative
extra value. Independent of installments.

Each key moves UNCREATED -> EXISTS on its first toggle or extra value and
stays EXISTS; later calls mutate the same row in place.
"""

from decimal import Decimal
from typing import Iterable, Iterator, Optional
from uuid import UUID

from cashflow.core.errors import NonPositiveAdjustment
from cashflow.models.finance import BillPeriodState, Period


class BillStateStore:
    """
    Holds BillPeriodState rows, at most one per (account, period).
    """

    def __init__(self, states: Iterable[BillPeriodState] = ()):
        self._states: dict[tuple[UUID, Period], BillPeriodState] = {}
        self.load(states)

    def load(self, states: Iterable[BillPeriodState]) -> None:
        """Seed from a storage snapshot. A later row for the same key wins."""
        for state in states:
            self._states[state.key] = state

    def get(self, account_id: UUID, period: Period) -> Optional[BillPeriodState]:
        return self._states.get((account_id, period))

    def toggle_paid(self, account_id: UUID, period: Period) -> BillPeriodState:
        """
        Flip the paid flag.

        If no row exists yet one is created with extra_value=0 and
        the flipped flag (i.e. paid).
        """
        state = self.get(account_id, period)
        if state is None:
            state = BillPeriodState(
                account_id=account_id,
                period=period,
                is_paid=True,
                extra_value=Decimal("0"),
            )
            self._states[state.key] = state
        else:
            state.is_paid = not state.is_paid
        return state

    def add_extra_value(
        self,
        account_id: UUID,
        period: Period,
        amount: Decimal,
    ) -> BillPeriodState:
        """
        Add a manual charge to the period's bill.

        Cumulative: the amount is added to any existing extra value,
        never written over it.

        Raises:
            NonPositiveAdjustment: If amount <= 0
        """
        amount = Decimal(amount)
        if amount <= 0:
            raise NonPositiveAdjustment(f"Extra value must be positive, got {amount}")

        state = self.get(account_id, period)
        if state is None:
            state = BillPeriodState(
                account_id=account_id,
                period=period,
                is_paid=False,
                extra_value=amount,
            )
            self._states[state.key] = state
        else:
            state.extra_value = state.extra_value + amount
        return state

    def states(self) -> Iterator[BillPeriodState]:
        return iter(list(self._states.values()))

    def __len__(self) -> int:
        return len(self._states)
