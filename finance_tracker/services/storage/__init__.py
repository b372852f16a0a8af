"""
Storage Services Package

Provides the abstract storage interface and its concrete implementation.
Currently implements SQLite as the backend, but designed to be swappable.
"""

from finance_tracker.services.storage.interface import (
    ConnectionError,
    DuplicateError,
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
)
from finance_tracker.services.storage.sqlite import (
    SQLiteClient,
    SQLiteLedgerStorage,
)

__all__ = [
    # Interfaces
    "LedgerStorageInterface",
    # Exceptions
    "ConnectionError",
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # SQLite implementation
    "SQLiteClient",
    "SQLiteLedgerStorage",
]
