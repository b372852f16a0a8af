"""
Core Data Models for Finance Tracker

These models define the strict schemas for every record the tracker
stores and every payload the API accepts:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable for storage and logging

DESIGN DECISION: Field names are snake_case in Python and camelCase on
the wire (accountId, creditLimit, ...). Both spellings are accepted on
input. Monetary amounts are Decimal in Python and plain JSON numbers
on the wire.
"""

from datetime import date as Date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from finance_tracker.models.tax import FilingStatus


MoneyAmount = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


def utcnow() -> datetime:
    """Current time in UTC (timezone-aware)."""
    return datetime.now(timezone.utc)


class LedgerModel(BaseModel):
    """Base for every stored record: camelCase aliases, stripped strings."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class AccountType(str, Enum):
    """Kinds of account a user can hold money in."""
    CASH = "Cash"
    BANK_ACCOUNT = "Bank Account"
    CREDIT_CARD = "Credit Card"
    INVESTMENT = "Investment"
    SAVINGS = "Savings"
    OTHER = "Other"


class BillingCycle(str, Enum):
    """How often a subscription charges."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    def to_monthly(self, amount: Decimal) -> Decimal:
        """Estimated monthly cost of paying amount once per cycle."""
        multiplier, divisor = _MONTHLY_FACTORS[self]
        return amount * multiplier / divisor


_MONTHLY_FACTORS = {
    BillingCycle.DAILY: (Decimal("30"), 1),
    BillingCycle.WEEKLY: (Decimal("4.33"), 1),
    BillingCycle.MONTHLY: (Decimal("1"), 1),
    BillingCycle.QUARTERLY: (Decimal("1"), 3),
    BillingCycle.YEARLY: (Decimal("1"), 12),
}


# =============================================================================
# ACCOUNTS
# =============================================================================

class AccountInput(LedgerModel):
    """Fields a client supplies when opening an account."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name, e.g. 'Checking'"
    )
    type: AccountType = Field(
        ...,
        description="Account type"
    )
    balance: MoneyAmount = Field(
        default=Decimal("0"),
        description="Opening balance (may be negative)"
    )
    credit_limit: Optional[MoneyAmount] = Field(
        default=None,
        ge=0,
        description="Credit limit, Credit Card accounts only"
    )

    @model_validator(mode="after")
    def validate_credit_limit(self):
        if self.credit_limit is not None and self.type != AccountType.CREDIT_CARD:
            raise ValueError("Credit limit only applies to Credit Card accounts")
        return self


class Account(AccountInput):
    """
    A named store of money with a running balance.

    CRITICAL: balance is cached state. It is only changed by the ledger
    service (income/expense create, update, delete) or by an explicit
    account update. It is never recomputed on read.
    """

    id: Optional[int] = Field(
        default=None,
        description="Storage-assigned identifier"
    )
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class AccountUpdate(LedgerModel):
    """Partial account change. Only fields present in the payload are applied."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    type: Optional[AccountType] = None
    balance: Optional[MoneyAmount] = None
    credit_limit: Optional[MoneyAmount] = Field(default=None, ge=0)


# =============================================================================
# LEDGER TRANSACTIONS
# =============================================================================

class ExpenseInput(LedgerModel):
    """
    Fields a client supplies for an expense.

    On update, leaving accountId out keeps the current link; sending
    accountId: null removes it.
    """

    amount: MoneyAmount = Field(
        ...,
        gt=0,
        description="Amount spent (positive)"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Category name (free text)"
    )
    date: Date = Field(
        ...,
        description="Calendar day of the expense"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=500
    )
    account_id: Optional[int] = Field(
        default=None,
        gt=0,
        description="Account the expense was paid from"
    )


class Expense(ExpenseInput):
    """
    Money spent.

    If account_id is set, the linked account's balance has already been
    decremented by amount.
    """

    id: Optional[int] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class IncomeInput(LedgerModel):
    """Fields a client supplies for an income. accountId behaves as for expenses."""

    amount: MoneyAmount = Field(
        ...,
        gt=0,
        description="Amount received (positive)"
    )
    source: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Where the money came from, e.g. 'Salary'"
    )
    date: Date
    description: str = Field(
        ...,
        min_length=1,
        max_length=500
    )
    notes: Optional[str] = Field(
        default=None,
        max_length=1000
    )
    account_id: Optional[int] = Field(
        default=None,
        gt=0,
        description="Account the money was deposited into"
    )
    state: Optional[str] = Field(
        default=None,
        description="Two-letter US state code"
    )
    filing_status: Optional[FilingStatus] = None

    @field_validator("state")
    @classmethod
    def normalize_state(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        code = v.strip().upper()
        if len(code) != 2 or not code.isalpha():
            raise ValueError(f"State must be a two-letter code, got '{v}'")
        return code


class Income(IncomeInput):
    """
    Money received.

    If account_id is set, the linked account's balance has already been
    incremented by amount. state and filing_status are kept for the tax
    calculator only; they never affect balances.
    """

    id: Optional[int] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


# =============================================================================
# CATALOG RECORDS
# =============================================================================

class Debt(LedgerModel):
    """A loan or card balance the user is paying down. Not linked to accounts."""

    id: Optional[int] = None
    type: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Kind of debt, e.g. 'Car Loan'"
    )
    lender: str = Field(..., min_length=1, max_length=100)
    account_number: Optional[str] = Field(
        default=None,
        max_length=20,
        description="Last digits of the lender's account number"
    )
    total_amount: MoneyAmount = Field(
        ...,
        gt=0,
        description="Original amount borrowed"
    )
    current_balance: MoneyAmount = Field(
        ...,
        ge=0,
        description="Amount still owed"
    )
    interest_rate: Optional[Decimal] = Field(
        default=None,
        ge=0,
        le=100,
        description="Annual interest rate in percent"
    )
    minimum_payment: Optional[MoneyAmount] = Field(default=None, ge=0)
    due_date: Optional[Date] = None
    description: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @computed_field
    @property
    def paid_off_amount(self) -> MoneyAmount:
        return self.total_amount - self.current_balance

    @computed_field
    @property
    def progress(self) -> float:
        """Fraction of the original amount already repaid (0-1)."""
        if self.total_amount <= 0:
            return 0.0
        return float(max(Decimal("0"), self.paid_off_amount) / self.total_amount)


class Category(LedgerModel):
    """An expense category name. Names are unique."""

    id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=100)


class Subscription(LedgerModel):
    """
    A recurring charge.

    Price is stored in integer cents, unlike every other amount.
    """

    id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=100)
    provider: Optional[str] = Field(default=None, max_length=100)
    price_cents: int = Field(
        ...,
        gt=0,
        description="Price per billing cycle in cents"
    )
    currency: str = Field(
        default="USD",
        min_length=3,
        max_length=3
    )
    billing_cycle: BillingCycle = BillingCycle.MONTHLY
    next_payment_date: Optional[Date] = None
    website_url: Optional[str] = Field(default=None, max_length=500)
    notes: Optional[str] = Field(default=None, max_length=1000)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()

    @computed_field
    @property
    def monthly_cost(self) -> MoneyAmount:
        """Estimated cost per month in currency units (not cents)."""
        return self.billing_cycle.to_monthly(Decimal(self.price_cents) / Decimal("100"))
