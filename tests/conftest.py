"""Shared fixtures: a throwaway SQLite database per test and everything built on it."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from finance_tracker.api import create_app
from finance_tracker.audit import AuditLogger
from finance_tracker.config import DatabaseSettings
from finance_tracker.ledger import LedgerService
from finance_tracker.models.ledger import AccountInput, AccountType
from finance_tracker.orchestrator import create_app_components
from finance_tracker.services import SQLiteClient, SQLiteLedgerStorage


class RecordingAuditLogger(AuditLogger):
    """Audit logger that keeps every event for assertions."""

    def __init__(self):
        super().__init__()
        self.events = []

    async def log(self, event) -> bool:
        self.events.append(event)
        return await super().log(event)

    def of_type(self, event_type):
        return [event for event in self.events if event.event_type == event_type]


@pytest.fixture
def db_settings(tmp_path):
    return DatabaseSettings(path=str(tmp_path / "ledger.db"))


@pytest.fixture
def sqlite_client(db_settings):
    client = SQLiteClient(db_settings)
    yield client
    client.close()


@pytest.fixture
def storage(sqlite_client):
    return SQLiteLedgerStorage(sqlite_client)


@pytest.fixture
def audit_logger():
    return RecordingAuditLogger()


@pytest.fixture
def ledger(storage, audit_logger):
    return LedgerService(storage, audit_logger)


@pytest.fixture
def make_account(ledger):
    """Factory for accounts with an opening balance."""
    async def _make(name="Checking", balance="1000.00", account_type=AccountType.BANK_ACCOUNT):
        return await ledger.create_account(
            AccountInput(name=name, type=account_type, balance=Decimal(balance))
        )
    return _make


@pytest.fixture
def components(storage):
    return create_app_components(storage=storage)


@pytest.fixture
def client(components):
    with TestClient(create_app(components=components)) as test_client:
        yield test_client
