"""
Cashflow - Source Package

Monthly cash-flow tracking: salary, standalone expenses and credit-card
bills built from installment purchases.

DESIGN PRINCIPLES:
1. Store facts, derive everything else per query
2. Fail early, fail visibly
3. No silent corrections
4. Every change must be auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Cashflow Team"
