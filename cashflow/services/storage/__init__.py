"""
Storage Services Package

Provides abstract interfaces and an in-memory implementation for the
records the billing core consumes.
"""

from cashflow.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    DuplicateError,
    FinanceStorageInterface,
    NotFoundError,
    StorageError,
)
from cashflow.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryFinanceStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "FinanceStorageInterface",
    # Exceptions
    "ConnectionError",
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryFinanceStorage",
]
