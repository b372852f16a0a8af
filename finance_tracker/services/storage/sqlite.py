"""
SQLite Storage Implementation

DESIGN DECISION: SQLite is the storage backend because ledger operations
need a real transaction: a balance adjustment and the income/expense
write that caused it must commit together or not at all.

TRADEOFFS:
- One connection per process; writes are serialized by SQLite itself
- Decimals are stored as TEXT so no precision is lost on the way
  through the database
- Dates and timestamps are stored as ISO-8601 TEXT, which sorts correctly

The implementation follows the abstract interface, so another backend
can be swapped in without changing business logic.
"""

import sqlite3
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, AsyncIterator, Optional

import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from finance_tracker.config import DatabaseSettings, get_settings
from finance_tracker.models.ledger import (
    Account,
    Category,
    Debt,
    Expense,
    Income,
    LedgerModel,
    Subscription,
    utcnow,
)
from finance_tracker.services.storage.interface import (
    ConnectionError,
    DuplicateError,
    LedgerStorageInterface,
    NotFoundError,
    RecordT,
    StorageError,
)


logger = structlog.get_logger(__name__)


SCHEMA = """
CREATE TABLE IF NOT EXISTS accounts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    type TEXT NOT NULL,
    balance TEXT NOT NULL DEFAULT '0',
    credit_limit TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS expenses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    amount TEXT NOT NULL,
    category TEXT NOT NULL,
    date TEXT NOT NULL,
    description TEXT NOT NULL,
    account_id INTEGER REFERENCES accounts(id) ON DELETE SET NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS incomes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    amount TEXT NOT NULL,
    source TEXT NOT NULL,
    date TEXT NOT NULL,
    description TEXT NOT NULL,
    notes TEXT,
    account_id INTEGER REFERENCES accounts(id) ON DELETE SET NULL,
    state TEXT,
    filing_status TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS debts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    type TEXT NOT NULL,
    lender TEXT NOT NULL,
    account_number TEXT,
    total_amount TEXT NOT NULL,
    current_balance TEXT NOT NULL,
    interest_rate TEXT,
    minimum_payment TEXT,
    due_date TEXT,
    description TEXT,
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS categories (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE COLLATE NOCASE
);

CREATE TABLE IF NOT EXISTS subscriptions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    provider TEXT,
    price_cents INTEGER NOT NULL,
    currency TEXT NOT NULL DEFAULT 'USD',
    billing_cycle TEXT NOT NULL,
    next_payment_date TEXT,
    website_url TEXT,
    notes TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_expenses_date ON expenses(date);
CREATE INDEX IF NOT EXISTS idx_expenses_account ON expenses(account_id);
CREATE INDEX IF NOT EXISTS idx_incomes_date ON incomes(date);
CREATE INDEX IF NOT EXISTS idx_incomes_account ON incomes(account_id);
"""


@dataclass(frozen=True)
class _Table:
    """Column mapping for one record type."""

    name: str
    columns: tuple[str, ...]
    order_by: str
    date_column: Optional[str] = None
    has_account: bool = False
    has_active: bool = False


TABLES: dict[type[LedgerModel], _Table] = {
    Account: _Table(
        name="accounts",
        columns=("name", "type", "balance", "credit_limit", "created_at", "updated_at"),
        order_by="created_at DESC, id DESC",
    ),
    Expense: _Table(
        name="expenses",
        columns=(
            "amount", "category", "date", "description", "account_id",
            "created_at", "updated_at",
        ),
        order_by="date DESC, id DESC",
        date_column="date",
        has_account=True,
    ),
    Income: _Table(
        name="incomes",
        columns=(
            "amount", "source", "date", "description", "notes", "account_id",
            "state", "filing_status", "created_at", "updated_at",
        ),
        order_by="date DESC, id DESC",
        date_column="date",
        has_account=True,
    ),
    Debt: _Table(
        name="debts",
        columns=(
            "type", "lender", "account_number", "total_amount", "current_balance",
            "interest_rate", "minimum_payment", "due_date", "description",
            "is_active", "created_at", "updated_at",
        ),
        order_by="created_at DESC, id DESC",
        has_active=True,
    ),
    Category: _Table(
        name="categories",
        columns=("name",),
        order_by="name COLLATE NOCASE ASC",
    ),
    Subscription: _Table(
        name="subscriptions",
        columns=(
            "name", "provider", "price_cents", "currency", "billing_cycle",
            "next_payment_date", "website_url", "notes", "created_at", "updated_at",
        ),
        order_by="next_payment_date IS NULL, next_payment_date ASC, id ASC",
    ),
}


def _table_for(model: type[LedgerModel]) -> _Table:
    try:
        return TABLES[model]
    except KeyError:
        raise StorageError(f"No table mapped for {model.__name__}") from None


def _to_db(value: Any) -> Any:
    """Convert a model value to something sqlite3 can bind."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, bool):
        return int(value)
    return value


class SQLiteClient:
    """
    Low-level SQLite connection wrapper.

    Owns the single connection, creates the schema on first connect,
    and implements the transaction scope shared by every storage class.
    """

    def __init__(self, settings: Optional[DatabaseSettings] = None):
        self._settings = settings or get_settings().database
        self._conn: Optional[sqlite3.Connection] = None
        self._depth = 0

    @retry(
        retry=retry_if_exception_type(sqlite3.OperationalError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        reraise=True,
    )
    def _open(self) -> sqlite3.Connection:
        if self._settings.is_memory:
            target = ":memory:"
        else:
            path = self._settings.resolved_path
            path.parent.mkdir(parents=True, exist_ok=True)
            target = str(path)

        # isolation_level=None: autocommit unless inside an explicit BEGIN
        conn = sqlite3.connect(
            target,
            timeout=self._settings.timeout_seconds,
            isolation_level=None,
            check_same_thread=False,
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        conn.executescript(SCHEMA)
        return conn

    def connect(self) -> sqlite3.Connection:
        """Return the open connection, opening it (with retries) on first use."""
        if self._conn is None:
            try:
                self._conn = self._open()
            except sqlite3.Error as e:
                raise ConnectionError(
                    f"Failed to open database at {self._settings.path}: {e}"
                ) from e
            except OSError as e:
                raise ConnectionError(
                    f"Cannot create database directory for {self._settings.path}: {e}"
                ) from e
            logger.info("database_connected", path=self._settings.path)
        return self._conn

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Transaction scope; nested scopes join the outermost one."""
        conn = self.connect()

        if self._depth:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        conn.execute("BEGIN IMMEDIATE")
        self._depth = 1
        try:
            yield
        except BaseException:
            conn.execute("ROLLBACK")
            raise
        else:
            conn.execute("COMMIT")
        finally:
            self._depth = 0

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None


class SQLiteLedgerStorage(LedgerStorageInterface):
    """
    SQLite implementation of ledger storage.

    Each record type maps to one table (see TABLES). Rows are converted
    back into models with model_validate, so stored data is re-validated
    on every read.
    """

    def __init__(self, client: Optional[SQLiteClient] = None):
        self._client = client or SQLiteClient()

    def transaction(self):
        return self._client.transaction()

    def _row_to_record(self, model: type[RecordT], row: sqlite3.Row) -> RecordT:
        """Convert a table row to a model."""
        return model.model_validate(dict(row))

    def _record_to_values(self, record: LedgerModel, table: _Table) -> list[Any]:
        """Convert a model to column values in table order."""
        data = record.model_dump()
        return [_to_db(data.get(column)) for column in table.columns]

    def _integrity_error(self, model: type[LedgerModel], error: sqlite3.IntegrityError) -> StorageError:
        message = str(error)
        if "UNIQUE" in message:
            return DuplicateError(f"{model.__name__} already exists")
        if "FOREIGN KEY" in message:
            return NotFoundError("Account", message="Account not found")
        return StorageError(f"Failed to save {model.__name__.lower()}: {message}")

    async def find_by_id(self, model: type[RecordT], record_id: int) -> Optional[RecordT]:
        """Retrieve a record by its ID."""
        table = _table_for(model)
        try:
            row = self._client.connect().execute(
                f"SELECT * FROM {table.name} WHERE id = ?",
                (record_id,),
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to get {model.__name__.lower()}: {e}") from e
        return self._row_to_record(model, row) if row else None

    async def find_many(
        self,
        model: type[RecordT],
        *,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        account_id: Optional[int] = None,
        active_only: bool = False,
    ) -> list[RecordT]:
        """List records with optional filters."""
        table = _table_for(model)
        clauses: list[str] = []
        params: list[Any] = []

        if date_from is not None or date_to is not None:
            if table.date_column is None:
                raise ValueError(f"{model.__name__} records have no date to filter on")
            if date_from is not None:
                clauses.append(f"{table.date_column} >= ?")
                params.append(date_from.isoformat())
            if date_to is not None:
                clauses.append(f"{table.date_column} <= ?")
                params.append(date_to.isoformat())

        if account_id is not None:
            if not table.has_account:
                raise ValueError(f"{model.__name__} records are not linked to accounts")
            clauses.append("account_id = ?")
            params.append(account_id)

        if active_only:
            if not table.has_active:
                raise ValueError(f"{model.__name__} records have no active flag")
            clauses.append("is_active = 1")

        query = f"SELECT * FROM {table.name}"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += f" ORDER BY {table.order_by}"

        try:
            rows = self._client.connect().execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to list {table.name}: {e}") from e
        return [self._row_to_record(model, row) for row in rows]

    async def create(self, record: RecordT) -> RecordT:
        """Insert a record and return it with its new id."""
        model = type(record)
        table = _table_for(model)
        columns = ", ".join(table.columns)
        placeholders = ", ".join("?" for _ in table.columns)

        try:
            cursor = self._client.connect().execute(
                f"INSERT INTO {table.name} ({columns}) VALUES ({placeholders})",
                self._record_to_values(record, table),
            )
        except sqlite3.IntegrityError as e:
            raise self._integrity_error(model, e) from e
        except sqlite3.Error as e:
            raise StorageError(f"Failed to save {model.__name__.lower()}: {e}") from e

        created = await self.find_by_id(model, cursor.lastrowid)
        if created is None:
            raise StorageError(f"{model.__name__} vanished after insert")
        return created

    async def update(self, record: RecordT) -> RecordT:
        """Replace an existing record."""
        model = type(record)
        table = _table_for(model)
        if record.id is None:
            raise NotFoundError(model.__name__)

        if "updated_at" in table.columns:
            record = record.model_copy(update={"updated_at": utcnow()})

        assignments = ", ".join(f"{column} = ?" for column in table.columns)
        try:
            cursor = self._client.connect().execute(
                f"UPDATE {table.name} SET {assignments} WHERE id = ?",
                [*self._record_to_values(record, table), record.id],
            )
        except sqlite3.IntegrityError as e:
            raise self._integrity_error(model, e) from e
        except sqlite3.Error as e:
            raise StorageError(f"Failed to update {model.__name__.lower()}: {e}") from e

        if cursor.rowcount == 0:
            raise NotFoundError(model.__name__, record.id)

        updated = await self.find_by_id(model, record.id)
        if updated is None:
            raise NotFoundError(model.__name__, record.id)
        return updated

    async def delete(self, model: type[RecordT], record_id: int) -> bool:
        """Delete a record by ID."""
        table = _table_for(model)
        try:
            cursor = self._client.connect().execute(
                f"DELETE FROM {table.name} WHERE id = ?",
                (record_id,),
            )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to delete {model.__name__.lower()}: {e}") from e
        return cursor.rowcount > 0

    async def increment(
        self,
        model: type[RecordT],
        record_id: int,
        field: str,
        delta: Decimal,
    ) -> RecordT:
        """Add delta to a numeric column inside a transaction scope."""
        table = _table_for(model)
        if field not in table.columns:
            raise ValueError(f"{model.__name__} has no column '{field}'")

        async with self._client.transaction():
            conn = self._client.connect()
            try:
                row = conn.execute(
                    f"SELECT {field} FROM {table.name} WHERE id = ?",
                    (record_id,),
                ).fetchone()
                if row is None:
                    raise NotFoundError(model.__name__, record_id)

                new_value = Decimal(row[field] or "0") + delta
                assignments = f"{field} = ?"
                params: list[Any] = [str(new_value)]
                if "updated_at" in table.columns:
                    assignments += ", updated_at = ?"
                    params.append(utcnow().isoformat())
                conn.execute(
                    f"UPDATE {table.name} SET {assignments} WHERE id = ?",
                    [*params, record_id],
                )
            except sqlite3.Error as e:
                raise StorageError(f"Failed to adjust {model.__name__.lower()} {field}: {e}") from e

            updated = await self.find_by_id(model, record_id)

        if updated is None:
            raise NotFoundError(model.__name__, record_id)
        return updated

    async def count(self, model: type[RecordT]) -> int:
        table = _table_for(model)
        try:
            row = self._client.connect().execute(f"SELECT COUNT(*) FROM {table.name}").fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to count {table.name}: {e}") from e
        return int(row[0])

    async def close(self) -> None:
        self._client.close()
