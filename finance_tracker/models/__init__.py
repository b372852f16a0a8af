"""
Data Models Package

This package contains all Pydantic models used in the Finance Tracker.
All data flowing through the system must conform to these schemas.
"""

from finance_tracker.models.ledger import (
    Account,
    AccountInput,
    AccountType,
    AccountUpdate,
    BillingCycle,
    Category,
    Debt,
    Expense,
    ExpenseInput,
    Income,
    IncomeInput,
    LedgerModel,
    MoneyAmount,
    Subscription,
    utcnow,
)
from finance_tracker.models.tax import (
    BracketCalculation,
    BracketDetail,
    FederalBreakdown,
    FilingStatus,
    StateBreakdown,
    StateCode,
    TaxBracket,
    TaxBreakdown,
    TaxCalculationRequest,
    TaxCalculationResult,
)
from finance_tracker.models.report import (
    DashboardSummary,
    ReportLine,
    ReportType,
    SubscriptionSummary,
    TransactionReport,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "Account",
    "AccountInput",
    "AccountType",
    "AccountUpdate",
    "BillingCycle",
    "Category",
    "Debt",
    "Expense",
    "ExpenseInput",
    "Income",
    "IncomeInput",
    "LedgerModel",
    "MoneyAmount",
    "Subscription",
    "utcnow",
    # Tax models
    "BracketCalculation",
    "BracketDetail",
    "FederalBreakdown",
    "FilingStatus",
    "StateBreakdown",
    "StateCode",
    "TaxBracket",
    "TaxBreakdown",
    "TaxCalculationRequest",
    "TaxCalculationResult",
    # Report models
    "DashboardSummary",
    "ReportLine",
    "ReportType",
    "SubscriptionSummary",
    "TransactionReport",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
