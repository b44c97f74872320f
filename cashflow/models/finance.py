"""
Core Data Models for Cashflow

These models define the schemas for the raw records supplied by storage
and the derived views returned by the billing engine.

DESIGN DECISION: Only immutable facts are stored. An installment purchase
keeps its start period, installment count and total value; which
installment is "current" is always derived from the viewed period.
"""

from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
)


CENT = Decimal("0.01")


def to_cents(value: Decimal) -> Decimal:
    """Quantize a currency value to two fraction digits."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


# =============================================================================
# PERIODS
# =============================================================================

class Period(BaseModel):
    """
    A billing period as transmitted across the boundary.

    Months are 1-12 here. PeriodClock converts to 0-11 internally.
    """
    model_config = ConfigDict(frozen=True)

    month: int = Field(
        ...,
        ge=1,
        le=12,
        description="Calendar month (1-12)"
    )
    year: int = Field(
        ...,
        description="Calendar year"
    )

    @property
    def ordinal(self) -> int:
        """Months since year 0; differences give elapsed months."""
        return self.year * 12 + (self.month - 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


# =============================================================================
# RAW RECORDS
# =============================================================================

class Account(BaseModel):
    """A credit card account that owns installment purchases."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name, e.g. the issuing bank"
    )


class InstallmentPurchase(BaseModel):
    """
    A purchase split into equal dues over consecutive billing periods.

    Immutable after creation. Deleted explicitly by the user.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    account_id: UUID = Field(
        ...,
        description="Owning account"
    )
    description: str = Field(
        default="",
        max_length=200,
    )
    total_value: Decimal = Field(
        ...,
        gt=0,
        description="Total purchase value"
    )
    total_installments: int = Field(
        ...,
        ge=1,
        description="Number of monthly installments"
    )
    start_period: Period = Field(
        ...,
        description="Period of the first installment"
    )


class BillPeriodState(BaseModel):
    """
    Manual per-period state of an account's bill.

    Keyed by (account_id, period). Created on first mutation and
    mutated in place afterwards; never deleted by normal flow.
    """

    account_id: UUID
    period: Period
    is_paid: bool = False
    extra_value: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Cumulative manual charges for this period"
    )

    @property
    def key(self) -> tuple[UUID, Period]:
        return (self.account_id, self.period)


class Expense(BaseModel):
    """A standalone expense scoped to one period."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    description: str = Field(
        ...,
        min_length=1,
        max_length=200,
    )
    value: Decimal = Field(
        ...,
        gt=0,
    )
    period: Period


# =============================================================================
# DERIVED VIEWS
# =============================================================================

class PurchaseStatus(BaseModel):
    """Where a purchase stands in a given viewing period."""

    purchase_id: UUID
    description: str
    period: Period
    current_installment_index: int = Field(
        ...,
        description="1-based; may fall outside 1..total when inactive"
    )
    total_installments: int
    is_active: bool
    installment_value: Decimal
    remaining_installments: int = Field(ge=0)
    remaining_debt: Decimal

    @property
    def label(self) -> str:
        """Short 'n/N' label as shown on a bill line."""
        return f"{self.current_installment_index}/{self.total_installments}"


class AccountSummary(BaseModel):
    """Derived values for one account in one period."""

    account_id: UUID
    account_name: str = ""
    period: Period
    monthly_due: Decimal = Decimal("0")
    remaining_debt: Decimal = Decimal("0")
    extra_value: Decimal = Decimal("0")
    is_paid: bool = False
    purchases: list[PurchaseStatus] = Field(
        default_factory=list,
        description="Active purchases only"
    )

    @property
    def active_count(self) -> int:
        return len(self.purchases)


class PortfolioSummary(BaseModel):
    """
    Portfolio-level totals for one period.

    All currency fields are quantized to cents.
    """

    period: Period
    salary: Decimal
    total_due: Decimal
    pending_due: Decimal
    total_debt: Decimal
    balance: Decimal
    bills_total: Decimal
    expenses_total: Decimal
    paid_count: int = Field(ge=0)
    account_count: int = Field(ge=0)
    accounts: list[AccountSummary] = Field(default_factory=list)

    @property
    def paid_label(self) -> str:
        """'2/4 paid' style counter."""
        return f"{self.paid_count}/{self.account_count} paid"
