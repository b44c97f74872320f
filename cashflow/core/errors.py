"""
Domain Errors

Raised at the boundary before bad data reaches the billing engine.
The engine itself re-checks its inputs and raises the same errors,
so a malformed record fails loudly instead of being clamped.
"""


class CashflowError(Exception):
    """Base exception for cashflow operations."""
    pass


class InvalidPeriod(CashflowError):
    """Month outside 0-11 (internal) or 1-12 (boundary)."""
    pass


class InvalidPurchase(CashflowError):
    """Installment purchase with no installments or a non-positive value."""
    pass


class NonPositiveAdjustment(CashflowError):
    """Extra value added to a bill must be greater than zero."""
    pass


class InvalidAmount(CashflowError):
    """A currency amount could not be parsed or is out of range."""
    pass


class RetrievalFailed(CashflowError):
    """Records could not be fetched from storage."""

    def __init__(self, message: str = "Could not load your data. Please try again."):
        super().__init__(message)


class UpdateFailed(CashflowError):
    """A change could not be written to storage."""

    def __init__(self, message: str = "Could not save your change. Please try again."):
        super().__init__(message)
