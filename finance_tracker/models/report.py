"""
Report Models

Read-only views over stored records: the transaction report for a date
range, the dashboard summary and the subscription cost summary.
"""

from datetime import date as Date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from finance_tracker.models.ledger import MoneyAmount, Subscription


class ReportType(str, Enum):
    """Which ledger a transaction report covers."""
    INCOMES = "incomes"
    EXPENSES = "expenses"


class _ReportModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReportLine(_ReportModel):
    """
    One transaction in a report.

    category holds the expense category, or the income source for
    income reports.
    """

    id: int
    amount: MoneyAmount
    description: str
    date: Date
    category: str
    account: str = Field(
        default="Unknown Account",
        description="Linked account name"
    )


class TransactionReport(_ReportModel):
    report_type: ReportType
    start_date: Date
    end_date: Date
    transactions: list[ReportLine] = Field(default_factory=list)
    total: MoneyAmount = Decimal("0")
    count: int = Field(default=0, ge=0)


class DashboardSummary(_ReportModel):
    """Headline numbers for the dashboard."""

    total_expenses: MoneyAmount
    total_income: MoneyAmount
    total_assets: MoneyAmount = Field(
        ...,
        description="Sum of all account balances"
    )
    total_debt: MoneyAmount = Field(
        ...,
        description="Sum of current balances of active debts"
    )
    total_categories: int
    total_accounts: int


class SubscriptionSummary(_ReportModel):
    monthly_total: MoneyAmount
    subscription_count: int
    upcoming: list[Subscription] = Field(
        default_factory=list,
        description="Subscriptions whose next payment falls inside the window"
    )
    window_days: int
