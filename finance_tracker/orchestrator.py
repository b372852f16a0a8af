"""
Main Orchestrator for Finance Tracker

Ties the components together:
1. Storage (SQLite behind the abstract interface)
2. Ledger service (accounts, incomes, expenses, balance bookkeeping)
3. Catalog services (debts, categories, subscriptions)
4. Tax calculator
5. Report builder

DESIGN DECISION: Components are built once here and shared by every
request. Nothing else constructs storage, so there is exactly one
connection and one ledger lock per process.
"""

from dataclasses import dataclass
from typing import Optional

import structlog

from finance_tracker.audit import AuditLogger
from finance_tracker.config import Settings, get_settings
from finance_tracker.ledger import LedgerService
from finance_tracker.models.ledger import Category, Debt, Subscription
from finance_tracker.queries import ReportBuilder
from finance_tracker.services import (
    CatalogService,
    LedgerStorageInterface,
    SQLiteClient,
    SQLiteLedgerStorage,
)
from finance_tracker.tax import TaxCalculator


logger = structlog.get_logger(__name__)


@dataclass
class AppComponents:
    """Everything a request handler needs, wired to one storage backend."""

    storage: LedgerStorageInterface
    audit_logger: AuditLogger
    ledger: LedgerService
    debts: CatalogService[Debt]
    categories: CatalogService[Category]
    subscriptions: CatalogService[Subscription]
    tax: TaxCalculator
    reports: ReportBuilder

    async def close(self) -> None:
        await self.storage.close()


def create_app_components(
    settings: Optional[Settings] = None,
    storage: Optional[LedgerStorageInterface] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use; defaults to get_settings()
        storage: Storage backend to use instead of the configured
                SQLite database (tests pass their own)

    Returns:
        AppComponents sharing one storage and one audit logger
    """
    settings = settings or get_settings()

    if storage is None:
        database = settings.database
        storage = SQLiteLedgerStorage(SQLiteClient(database))
        logger.info("storage_configured", backend="sqlite", path=database.path)

    audit_logger = AuditLogger()

    return AppComponents(
        storage=storage,
        audit_logger=audit_logger,
        ledger=LedgerService(storage, audit_logger),
        debts=CatalogService(storage, Debt),
        categories=CatalogService(storage, Category),
        subscriptions=CatalogService(storage, Subscription),
        tax=TaxCalculator(
            strict_jurisdictions=settings.tax.strict_jurisdictions,
            audit_logger=audit_logger,
        ),
        reports=ReportBuilder(
            storage,
            upcoming_window_days=settings.app.upcoming_payment_window_days,
        ),
    )
