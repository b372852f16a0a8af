"""
Ledger Package

Balance planning rules and the service that applies them.
"""

from finance_tracker.ledger.balance import (
    BalanceAdjustment,
    has_sufficient_funds,
    plan_expense_create,
    plan_expense_delete,
    plan_expense_update,
    plan_income_create,
    plan_income_delete,
    plan_income_update,
)
from finance_tracker.ledger.service import (
    InsufficientFundsError,
    LedgerError,
    LedgerService,
)

__all__ = [
    "BalanceAdjustment",
    "has_sufficient_funds",
    "plan_expense_create",
    "plan_expense_delete",
    "plan_expense_update",
    "plan_income_create",
    "plan_income_delete",
    "plan_income_update",
    "InsufficientFundsError",
    "LedgerError",
    "LedgerService",
]
