"""
Balance Planning Rules

Pure functions that decide how account balances move when an income or
expense is created, changed or removed. They never touch storage; the
ledger service applies the returned adjustments inside one transaction.

Sign convention:
- Expense linked to an account: balance -= amount
- Income linked to an account:  balance += amount

Adjustments are returned in the order they must be applied. A refund to
the old account always precedes the charge to the new one, so re-charging
the same account sees the refunded balance.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class BalanceAdjustment:
    """One signed change to one account's balance."""

    account_id: int
    delta: Decimal
    reason: str
    # Charge must not exceed the balance at the moment it is applied
    requires_funds: bool = False

    @property
    def required_amount(self) -> Decimal:
        return -self.delta if self.requires_funds else Decimal("0")


def has_sufficient_funds(balance: Decimal, amount: Decimal) -> bool:
    """An expense may spend the balance down to exactly zero, never below."""
    return balance >= amount


# =============================================================================
# EXPENSES
# =============================================================================

def plan_expense_create(amount: Decimal, account_id: Optional[int]) -> list[BalanceAdjustment]:
    if account_id is None:
        return []
    return [BalanceAdjustment(account_id, -amount, "expense_charged", requires_funds=True)]


def plan_expense_update(
    old_amount: Decimal,
    old_account_id: Optional[int],
    new_amount: Decimal,
    new_account_id: Optional[int],
) -> list[BalanceAdjustment]:
    """
    Refund the old charge, then charge the new one.

    Nothing moves when both the account and the amount are unchanged.
    """
    if old_account_id == new_account_id and old_amount == new_amount:
        return []

    adjustments = []
    if old_account_id is not None:
        adjustments.append(BalanceAdjustment(old_account_id, old_amount, "expense_refunded"))
    if new_account_id is not None:
        adjustments.append(
            BalanceAdjustment(new_account_id, -new_amount, "expense_charged", requires_funds=True)
        )
    return adjustments


def plan_expense_delete(amount: Decimal, account_id: Optional[int]) -> list[BalanceAdjustment]:
    if account_id is None:
        return []
    return [BalanceAdjustment(account_id, amount, "expense_refunded")]


# =============================================================================
# INCOMES
# =============================================================================

def plan_income_create(amount: Decimal, account_id: Optional[int]) -> list[BalanceAdjustment]:
    if account_id is None:
        return []
    return [BalanceAdjustment(account_id, amount, "income_deposited")]


def plan_income_update(
    old_amount: Decimal,
    old_account_id: Optional[int],
    new_amount: Decimal,
    new_account_id: Optional[int],
) -> list[BalanceAdjustment]:
    """
    Move an income between accounts, or correct its amount in place.

    Reversals are never funds-checked: they may drive a balance negative.
    """
    if old_account_id != new_account_id:
        adjustments = []
        if old_account_id is not None:
            adjustments.append(BalanceAdjustment(old_account_id, -old_amount, "income_reversed"))
        if new_account_id is not None:
            adjustments.append(BalanceAdjustment(new_account_id, new_amount, "income_deposited"))
        return adjustments

    if old_account_id is not None and old_amount != new_amount:
        return [BalanceAdjustment(old_account_id, new_amount - old_amount, "income_corrected")]

    return []


def plan_income_delete(amount: Decimal, account_id: Optional[int]) -> list[BalanceAdjustment]:
    if account_id is None:
        return []
    return [BalanceAdjustment(account_id, -amount, "income_reversed")]

