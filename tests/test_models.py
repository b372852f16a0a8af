"""
Tests for Finance Tracker

Test strategy:
1. Unit tests for individual components (models, planning rules, tax math)
2. Integration tests for services against a temporary SQLite database
3. API tests through FastAPI's TestClient
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from finance_tracker.config import (
    AppSettings,
    DatabaseSettings,
    TaxSettings,
    get_settings,
    validate_all_settings,
)
from finance_tracker.models.ledger import (
    Account,
    AccountInput,
    AccountType,
    BillingCycle,
    Debt,
    Expense,
    ExpenseInput,
    IncomeInput,
    Subscription,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestLedgerModels:
    """Tests for account and transaction models."""

    def test_account_defaults(self):
        """Test Account defaults to a zero balance with timestamps."""
        account = Account(name="Checking", type=AccountType.BANK_ACCOUNT)
        assert account.balance == Decimal("0")
        assert account.id is None
        assert account.created_at.tzinfo is not None

    def test_account_strips_whitespace(self):
        """Test that whitespace is stripped from names."""
        account = AccountInput(name="  Checking  ", type="Bank Account")
        assert account.name == "Checking"

    def test_credit_limit_requires_credit_card(self):
        """Test that a credit limit on a non-card account is rejected."""
        with pytest.raises(ValueError):
            AccountInput(name="Cash", type=AccountType.CASH, credit_limit=Decimal("100"))
        card = AccountInput(name="Visa", type=AccountType.CREDIT_CARD, credit_limit=Decimal("100"))
        assert card.credit_limit == Decimal("100")

    def test_expense_rejects_non_positive_amount(self):
        """Test that zero and negative amounts are rejected."""
        for amount in (Decimal("0"), Decimal("-1")):
            with pytest.raises(ValueError):
                ExpenseInput(amount=amount, category="Food", date=date(2024, 1, 1), description="x")

    def test_expense_accepts_camel_case(self):
        """Test that wire-format keys populate snake_case fields."""
        expense = Expense.model_validate({
            "amount": "12.50",
            "category": "Food",
            "date": "2024-01-01",
            "description": "Lunch",
            "accountId": 3,
        })
        assert expense.account_id == 3
        assert expense.amount == Decimal("12.50")

    def test_expense_json_uses_camel_case_numbers(self):
        """Test that JSON output is camelCase with numeric amounts."""
        expense = Expense(amount=Decimal("12.50"), category="Food", date=date(2024, 1, 1),
                          description="Lunch", account_id=3)
        data = expense.model_dump(mode="json", by_alias=True)
        assert data["accountId"] == 3
        assert data["amount"] == 12.5
        assert data["date"] == "2024-01-01"

    def test_python_dump_keeps_decimal(self):
        """Test that python-mode dumps keep exact Decimals for storage."""
        expense = Expense(amount=Decimal("0.10"), category="Food", date=date(2024, 1, 1), description="x")
        assert expense.model_dump()["amount"] == Decimal("0.10")

    def test_income_state_normalized(self):
        """Test that state codes are upper-cased and validated."""
        base = {"amount": Decimal("1"), "source": "Job", "date": date(2024, 1, 1), "description": "Pay"}
        assert IncomeInput(**base, state=" ca ").state == "CA"
        assert IncomeInput(**base, state="").state is None
        with pytest.raises(ValueError):
            IncomeInput(**base, state="California")

    def test_income_filing_status(self):
        """Test that filing status must be a known value."""
        base = {"amount": Decimal("1"), "source": "Job", "date": date(2024, 1, 1), "description": "Pay"}
        assert IncomeInput(**base, filing_status="head_of_household").filing_status.value == "head_of_household"
        with pytest.raises(ValueError):
            IncomeInput(**base, filing_status="widowed")


class TestCatalogModels:
    """Tests for debts and subscriptions."""

    def test_debt_progress(self):
        """Test derived paid-off amount and progress."""
        debt = Debt(type="Car Loan", lender="Bank", total_amount=Decimal("1000"),
                    current_balance=Decimal("250"))
        assert debt.paid_off_amount == Decimal("750")
        assert debt.progress == 0.75

    def test_subscription_currency_uppercased(self):
        sub = Subscription(name="Music", price_cents=999, currency="eur")
        assert sub.currency == "EUR"

    @pytest.mark.parametrize(
        "cycle, expected",
        [
            (BillingCycle.MONTHLY, Decimal("12")),
            (BillingCycle.YEARLY, Decimal("1")),
            (BillingCycle.QUARTERLY, Decimal("4")),
            (BillingCycle.WEEKLY, Decimal("51.96")),
            (BillingCycle.DAILY, Decimal("360")),
        ],
    )
    def test_subscription_monthly_cost(self, cycle, expected):
        """Test the monthly estimate for each billing cycle."""
        sub = Subscription(name="Plan", price_cents=1200, billing_cycle=cycle)
        assert sub.monthly_cost == expected

    def test_subscription_price_must_be_positive(self):
        with pytest.raises(ValueError):
            Subscription(name="Free", price_cents=0)


class TestAuditModels:
    """Tests for audit event models."""

    def test_audit_event_creation(self):
        """Test AuditEvent creation."""
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_CREATED,
            description="Expense created",
        )
        assert event.event_type == AuditEventType.EXPENSE_CREATED
        assert event.severity == AuditSeverity.INFO
        assert event.event_id is not None

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description="Test error",
            error_message="Something went wrong",
        )
        log_dict = event.to_log_dict()

        assert log_dict["event_type"] == "system_error"
        assert log_dict["severity"] == "error"
        assert log_dict["error_message"] == "Something went wrong"
        assert log_dict["correlation_id"] is None

    def test_audit_event_builder_transaction_recorded(self):
        """Test that kind and action select the event type."""
        correlation_id = uuid4()
        event = AuditEventBuilder.transaction_recorded(
            kind="income",
            transaction_id=7,
            action="deleted",
            amount=Decimal("300"),
            account_id=2,
            correlation_id=correlation_id,
        )

        assert event.event_type == AuditEventType.INCOME_DELETED
        assert event.entity_id == 7
        assert event.correlation_id == correlation_id
        assert event.details == {"amount": "300", "account_id": 2}

    def test_audit_event_builder_balance_adjusted(self):
        event = AuditEventBuilder.balance_adjusted(
            account_id=1,
            delta=Decimal("-200"),
            new_balance=Decimal("800.00"),
            reason="expense_charged",
            correlation_id=uuid4(),
        )
        assert event.event_type == AuditEventType.BALANCE_ADJUSTED
        assert "-200" in event.description
        assert event.details["new_balance"] == "800.00"

    def test_rejection_is_a_warning(self):
        event = AuditEventBuilder.transaction_rejected(
            kind="expense",
            reason="Insufficient account balance",
            details={},
            correlation_id=uuid4(),
        )
        assert event.severity == AuditSeverity.WARNING
        assert event.error_message == "Insufficient account balance"


class TestSettings:
    """Tests for environment-driven configuration."""

    def test_database_defaults(self, monkeypatch):
        monkeypatch.delenv("FINANCE_DB_PATH", raising=False)
        settings = DatabaseSettings()
        assert settings.path == "finance_tracker.db"
        assert settings.is_memory is False

    def test_database_path_from_env(self, monkeypatch):
        monkeypatch.setenv("FINANCE_DB_PATH", ":memory:")
        assert DatabaseSettings().is_memory is True

    def test_empty_database_path_rejected(self):
        with pytest.raises(ValueError):
            DatabaseSettings(path="   ")

    def test_strict_jurisdictions_from_env(self, monkeypatch):
        monkeypatch.setenv("FINANCE_TAX_STRICT_JURISDICTIONS", "true")
        assert TaxSettings().strict_jurisdictions is True

    def test_log_level_normalized(self):
        assert AppSettings(log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValueError):
            AppSettings(log_level="verbose")

    def test_validate_all_settings_reports_broken_section(self, monkeypatch):
        """Test that a bad section is reported instead of raised."""
        monkeypatch.setenv("LOG_LEVEL", "verbose")
        get_settings.cache_clear()
        try:
            results = validate_all_settings()
        finally:
            get_settings.cache_clear()

        assert results["database"] is True
        assert results["tax"] is True
        assert results["app"] is False
        assert "app_error" in results


class TestEnums:
    """Tests for the fixed value sets."""

    def test_account_types(self):
        assert {t.value for t in AccountType} == {
            "Cash", "Bank Account", "Credit Card", "Investment", "Savings", "Other",
        }

    def test_billing_cycles(self):
        assert {c.value for c in BillingCycle} == {"daily", "weekly", "monthly", "quarterly", "yearly"}
