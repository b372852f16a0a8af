"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap SQLite for another database later
2. Keep business logic decoupled from storage implementation

The interface is intentionally small - we're not building a full ORM.
Every record type (Account, Expense, Income, Debt, Category,
Subscription) goes through the same five operations plus an atomic
numeric increment and a transaction scope.
"""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import AsyncContextManager, Optional, TypeVar

from finance_tracker.models.ledger import LedgerModel


RecordT = TypeVar("RecordT", bound=LedgerModel)


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger storage operations.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def transaction(self) -> AsyncContextManager[None]:
        """
        Open a transaction scope.

        Every write made inside the scope commits together when the scope
        exits normally, and is rolled back if it exits with an exception.
        Scopes nest: an inner scope joins the outermost one.

        Usage:
            async with storage.transaction():
                await storage.increment(Account, 1, "balance", Decimal("-20"))
                await storage.create(expense)
        """

    @abstractmethod
    async def find_by_id(self, model: type[RecordT], record_id: int) -> Optional[RecordT]:
        """
        Retrieve a record by its ID.

        Args:
            model: Record type to look up
            record_id: The record's identifier

        Returns:
            The record if found, None otherwise
        """

    @abstractmethod
    async def find_many(
        self,
        model: type[RecordT],
        *,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        account_id: Optional[int] = None,
        active_only: bool = False,
    ) -> list[RecordT]:
        """
        List records with optional filters.

        Filters that don't apply to the record type (e.g. a date range on
        accounts) raise ValueError.

        Args:
            model: Record type to list
            date_from: Only records dated on or after this day
            date_to: Only records dated on or before this day
            account_id: Only records linked to this account
            active_only: Only active records (debts)

        Returns:
            List of matching records in the type's natural order
        """

    @abstractmethod
    async def create(self, record: RecordT) -> RecordT:
        """
        Insert a new record.

        Returns:
            The stored record with its assigned id

        Raises:
            DuplicateError: If a uniqueness constraint is violated
            NotFoundError: If a referenced record doesn't exist
            StorageError: If the insert fails
        """

    @abstractmethod
    async def update(self, record: RecordT) -> RecordT:
        """
        Replace an existing record (matched by id).

        Returns:
            The stored record with a refreshed updated_at

        Raises:
            NotFoundError: If the record doesn't exist
            StorageError: If the update fails
        """

    @abstractmethod
    async def delete(self, model: type[RecordT], record_id: int) -> bool:
        """
        Delete a record by ID.

        Returns:
            True if a record was deleted, False if none matched
        """

    @abstractmethod
    async def increment(
        self,
        model: type[RecordT],
        record_id: int,
        field: str,
        delta: Decimal,
    ) -> RecordT:
        """
        Atomically add delta (may be negative) to a numeric field.

        Returns:
            The record after the increment

        Raises:
            NotFoundError: If the record doesn't exist
        """

    @abstractmethod
    async def count(self, model: type[RecordT]) -> int:
        """Number of stored records of a type."""

    @abstractmethod
    async def close(self) -> None:
        """Release any connection held by the backend."""


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""

    def __init__(self, entity: str, record_id: Optional[int] = None, message: Optional[str] = None):
        self.entity = entity
        self.record_id = record_id
        super().__init__(message or f"{entity} not found")


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
