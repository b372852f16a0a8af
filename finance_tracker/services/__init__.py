"""Services package."""

from finance_tracker.services.catalog import CatalogService
from finance_tracker.services.storage import (
    ConnectionError,
    DuplicateError,
    LedgerStorageInterface,
    NotFoundError,
    SQLiteClient,
    SQLiteLedgerStorage,
    StorageError,
)

__all__ = [
    # Catalog CRUD
    "CatalogService",
    # Storage services
    "ConnectionError",
    "DuplicateError",
    "LedgerStorageInterface",
    "NotFoundError",
    "SQLiteClient",
    "SQLiteLedgerStorage",
    "StorageError",
]
