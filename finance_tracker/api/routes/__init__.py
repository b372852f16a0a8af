"""API routers, one module per resource."""

from finance_tracker.api.routes.accounts import router as accounts_router
from finance_tracker.api.routes.catalog import (
    categories_router,
    debts_router,
    subscriptions_router,
)
from finance_tracker.api.routes.expenses import router as expenses_router
from finance_tracker.api.routes.incomes import router as incomes_router
from finance_tracker.api.routes.reports import router as reports_router
from finance_tracker.api.routes.tax import router as tax_router

ROUTERS = (
    accounts_router,
    expenses_router,
    incomes_router,
    debts_router,
    categories_router,
    subscriptions_router,
    tax_router,
    reports_router,
)

__all__ = ["ROUTERS"]
