"""
Report Builder

DESIGN DECISION: Reports are read-only and DETERMINISTIC.
Every number comes from stored records; nothing is estimated except the
subscription monthly cost, whose per-cycle factors are fixed.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional, Union

from finance_tracker.models.ledger import (
    Account,
    Category,
    Debt,
    Expense,
    Income,
    Subscription,
)
from finance_tracker.models.report import (
    DashboardSummary,
    ReportLine,
    ReportType,
    SubscriptionSummary,
    TransactionReport,
)
from finance_tracker.services.storage import LedgerStorageInterface


UNKNOWN_ACCOUNT = "Unknown Account"
DEFAULT_UPCOMING_WINDOW_DAYS = 7


class ReportParameterError(Exception):
    """Missing or inconsistent report parameters."""
    pass


class ReportBuilder:
    """
    Builds reports from ledger storage.

    GUARANTEES:
    - Date ranges are inclusive on both ends
    - Lines are ordered newest date first
    - Unlinked transactions report their account as "Unknown Account"
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        upcoming_window_days: int = DEFAULT_UPCOMING_WINDOW_DAYS,
    ):
        self._storage = storage
        self._window_days = upcoming_window_days

    async def transaction_report(
        self,
        report_type: Union[ReportType, str, None],
        start_date: Optional[date],
        end_date: Optional[date],
    ) -> TransactionReport:
        """
        List incomes or expenses dated within [start_date, end_date].

        Raises:
            ReportParameterError: Type or a date is missing, the type is
                unknown, or the range is reversed
        """
        if not report_type or start_date is None or end_date is None:
            raise ReportParameterError("Missing required parameters: type, startDate, endDate")
        try:
            kind = ReportType(report_type)
        except ValueError:
            raise ReportParameterError('Invalid type. Must be "incomes" or "expenses"') from None
        if start_date > end_date:
            raise ReportParameterError("startDate must not be after endDate")

        account_names = await self._account_names()

        if kind == ReportType.INCOMES:
            incomes = await self._storage.find_many(Income, date_from=start_date, date_to=end_date)
            lines = [self._line(income, income.source, account_names) for income in incomes]
        else:
            expenses = await self._storage.find_many(Expense, date_from=start_date, date_to=end_date)
            lines = [self._line(expense, expense.category, account_names) for expense in expenses]

        return TransactionReport(
            report_type=kind,
            start_date=start_date,
            end_date=end_date,
            transactions=lines,
            total=sum((line.amount for line in lines), Decimal("0")),
            count=len(lines),
        )

    async def dashboard_summary(self) -> DashboardSummary:
        accounts = await self._storage.find_many(Account)
        expenses = await self._storage.find_many(Expense)
        incomes = await self._storage.find_many(Income)
        debts = await self._storage.find_many(Debt, active_only=True)

        return DashboardSummary(
            total_expenses=sum((e.amount for e in expenses), Decimal("0")),
            total_income=sum((i.amount for i in incomes), Decimal("0")),
            total_assets=sum((a.balance for a in accounts), Decimal("0")),
            total_debt=sum((d.current_balance for d in debts), Decimal("0")),
            total_categories=await self._storage.count(Category),
            total_accounts=len(accounts),
        )

    async def subscription_summary(self, today: Optional[date] = None) -> SubscriptionSummary:
        """
        Estimated monthly spend on subscriptions and the payments due soon.

        A payment is upcoming if it falls after today and no more than
        window_days ahead. Payments dated today are not counted.
        """
        today = today or date.today()
        horizon = today + timedelta(days=self._window_days)
        subscriptions = await self._storage.find_many(Subscription)

        upcoming = [
            sub for sub in subscriptions
            if sub.next_payment_date is not None and today < sub.next_payment_date <= horizon
        ]

        return SubscriptionSummary(
            monthly_total=sum((sub.monthly_cost for sub in subscriptions), Decimal("0")),
            subscription_count=len(subscriptions),
            upcoming=upcoming,
            window_days=self._window_days,
        )

    async def _account_names(self) -> dict[int, str]:
        return {account.id: account.name for account in await self._storage.find_many(Account)}

    @staticmethod
    def _line(record: Union[Income, Expense], category: str, account_names: dict[int, str]) -> ReportLine:
        return ReportLine(
            id=record.id,
            amount=record.amount,
            description=record.description,
            date=record.date,
            category=category,
            account=account_names.get(record.account_id, UNKNOWN_ACCOUNT),
        )
