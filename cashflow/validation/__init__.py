"""Boundary validation package."""

from cashflow.validation.validator import (
    InputValidator,
    parse_amount,
    parse_installments,
    validate_period,
)

__all__ = [
    "InputValidator",
    "parse_amount",
    "parse_installments",
    "validate_period",
]
