"""
Ledger Service

Keeps every account's cached balance consistent with the incomes and
expenses that point at it.

DESIGN DECISION: Each ledger operation is one unit of work:
1. Plan the balance adjustments (pure rules in ledger.balance)
2. Open a storage transaction
3. Apply each adjustment, checking funds where the rule requires it
4. Write the income/expense record
5. Commit, then emit audit events

Any failure inside step 2-4 rolls back every write of the operation. An
asyncio.Lock serializes ledger operations so two requests can't interleave
read-modify-write cycles on the same balance.
"""

import asyncio
from datetime import date
from decimal import Decimal
from typing import Optional, Union
from uuid import UUID

from finance_tracker.audit import AuditLogger, create_correlation_id
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
from finance_tracker.models.ledger import (
    Account,
    AccountInput,
    AccountUpdate,
    Expense,
    ExpenseInput,
    Income,
    IncomeInput,
)
from finance_tracker.services.storage import LedgerStorageInterface, NotFoundError


class LedgerError(Exception):
    """Base exception for ledger rule violations."""
    pass


class InsufficientFundsError(LedgerError):
    """An expense would take an account's balance below zero."""

    def __init__(self, account_id: int, requested: Decimal, available: Decimal):
        self.account_id = account_id
        self.requested = requested
        self.available = available
        super().__init__("Insufficient account balance")


Transaction = Union[Expense, Income]
AppliedAdjustment = tuple[BalanceAdjustment, Account]


class LedgerService:
    """
    Account, income and expense operations with balance bookkeeping.

    Usage:
        ledger = LedgerService(storage)
        account = await ledger.create_account(AccountInput(name="Checking", type="Bank Account", balance=1000))
        await ledger.create_expense(ExpenseInput(amount=200, ..., account_id=account.id))
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._audit = audit_logger or AuditLogger()
        self._lock = asyncio.Lock()

    # =========================================================================
    # ACCOUNTS
    # =========================================================================

    async def create_account(self, payload: AccountInput) -> Account:
        account = await self._storage.create(Account.model_validate(payload.model_dump()))
        await self._audit.log_account_changed(
            account.id, "created", account.name, account.balance, create_correlation_id()
        )
        return account

    async def get_account(self, account_id: int) -> Account:
        return await self._require(Account, account_id)

    async def list_accounts(self) -> list[Account]:
        return await self._storage.find_many(Account)

    async def update_account(self, account_id: int, changes: AccountUpdate) -> Account:
        """
        Apply a partial change. Setting balance here is a manual correction,
        not a ledger movement, so no funds rules apply.
        """
        async with self._lock, self._storage.transaction():
            current = await self._require(Account, account_id)
            merged = {**current.model_dump(), **changes.model_dump(exclude_unset=True)}
            # Re-validate so the credit-limit rule sees the merged type
            account = await self._storage.update(Account.model_validate(merged))

        await self._audit.log_account_changed(
            account.id, "updated", account.name, account.balance, create_correlation_id()
        )
        return account

    async def delete_account(self, account_id: int) -> Account:
        """Delete an account. Linked incomes and expenses become unlinked."""
        async with self._lock, self._storage.transaction():
            account = await self._require(Account, account_id)
            await self._storage.delete(Account, account_id)

        await self._audit.log_account_changed(
            account.id, "deleted", account.name, account.balance, create_correlation_id()
        )
        return account

    # =========================================================================
    # EXPENSES
    # =========================================================================

    async def get_expense(self, expense_id: int) -> Expense:
        return await self._require(Expense, expense_id)

    async def list_expenses(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        account_id: Optional[int] = None,
    ) -> list[Expense]:
        return await self._storage.find_many(
            Expense, date_from=date_from, date_to=date_to, account_id=account_id
        )

    async def create_expense(self, payload: ExpenseInput) -> Expense:
        """
        Record an expense, charging the linked account if there is one.

        Raises:
            NotFoundError: Linked account doesn't exist
            InsufficientFundsError: Account balance is below the amount
        """
        correlation_id = create_correlation_id()
        adjustments = plan_expense_create(payload.amount, payload.account_id)

        try:
            async with self._lock, self._storage.transaction():
                applied = await self._apply(adjustments)
                expense = await self._storage.create(Expense.model_validate(payload.model_dump()))
        except (NotFoundError, LedgerError) as e:
            await self._log_rejected("expense", e, payload.amount, payload.account_id, correlation_id)
            raise

        await self._log_committed("expense", expense, "created", applied, correlation_id)
        return expense

    async def update_expense(self, expense_id: int, payload: ExpenseInput) -> Expense:
        """
        Replace an expense's fields, moving money between accounts as needed.

        The old charge is refunded before the new one is checked, so
        raising the amount on the same account only needs the difference
        to be available.
        """
        correlation_id = create_correlation_id()
        new_account_id = payload.account_id

        try:
            async with self._lock, self._storage.transaction():
                current = await self._require(Expense, expense_id)
                new_account_id = self._resolve_account_id(payload, current)
                adjustments = plan_expense_update(
                    current.amount, current.account_id, payload.amount, new_account_id
                )
                applied = await self._apply(adjustments)
                expense = await self._storage.update(
                    current.model_copy(update={**payload.model_dump(), "account_id": new_account_id})
                )
        except (NotFoundError, LedgerError) as e:
            await self._log_rejected(
                "expense", e, payload.amount, new_account_id, correlation_id, expense_id
            )
            raise

        await self._log_committed("expense", expense, "updated", applied, correlation_id)
        return expense

    async def delete_expense(self, expense_id: int) -> Expense:
        """Delete an expense and refund its linked account."""
        correlation_id = create_correlation_id()

        async with self._lock, self._storage.transaction():
            expense = await self._require(Expense, expense_id)
            applied = await self._apply(plan_expense_delete(expense.amount, expense.account_id))
            await self._storage.delete(Expense, expense_id)

        await self._log_committed("expense", expense, "deleted", applied, correlation_id)
        return expense

    # =========================================================================
    # INCOMES
    # =========================================================================

    async def get_income(self, income_id: int) -> Income:
        return await self._require(Income, income_id)

    async def list_incomes(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        account_id: Optional[int] = None,
    ) -> list[Income]:
        return await self._storage.find_many(
            Income, date_from=date_from, date_to=date_to, account_id=account_id
        )

    async def create_income(self, payload: IncomeInput) -> Income:
        """Record an income, depositing it into the linked account if there is one."""
        correlation_id = create_correlation_id()
        adjustments = plan_income_create(payload.amount, payload.account_id)

        try:
            async with self._lock, self._storage.transaction():
                applied = await self._apply(adjustments)
                income = await self._storage.create(Income.model_validate(payload.model_dump()))
        except (NotFoundError, LedgerError) as e:
            await self._log_rejected("income", e, payload.amount, payload.account_id, correlation_id)
            raise

        await self._log_committed("income", income, "created", applied, correlation_id)
        return income

    async def update_income(self, income_id: int, payload: IncomeInput) -> Income:
        correlation_id = create_correlation_id()
        new_account_id = payload.account_id

        try:
            async with self._lock, self._storage.transaction():
                current = await self._require(Income, income_id)
                new_account_id = self._resolve_account_id(payload, current)
                adjustments = plan_income_update(
                    current.amount, current.account_id, payload.amount, new_account_id
                )
                applied = await self._apply(adjustments)
                income = await self._storage.update(
                    current.model_copy(update={**payload.model_dump(), "account_id": new_account_id})
                )
        except (NotFoundError, LedgerError) as e:
            await self._log_rejected(
                "income", e, payload.amount, new_account_id, correlation_id, income_id
            )
            raise

        await self._log_committed("income", income, "updated", applied, correlation_id)
        return income

    async def delete_income(self, income_id: int) -> Income:
        """Delete an income and take its amount back out of the linked account."""
        correlation_id = create_correlation_id()

        async with self._lock, self._storage.transaction():
            income = await self._require(Income, income_id)
            applied = await self._apply(plan_income_delete(income.amount, income.account_id))
            await self._storage.delete(Income, income_id)

        await self._log_committed("income", income, "deleted", applied, correlation_id)
        return income

    # =========================================================================
    # INTERNALS
    # =========================================================================

    async def _require(self, model, record_id: int):
        record = await self._storage.find_by_id(model, record_id)
        if record is None:
            raise NotFoundError(model.__name__, record_id)
        return record

    @staticmethod
    def _resolve_account_id(
        payload: Union[ExpenseInput, IncomeInput],
        current: Transaction,
    ) -> Optional[int]:
        # Omitted keeps the link, explicit null removes it
        if "account_id" in payload.model_fields_set:
            return payload.account_id
        return current.account_id

    async def _apply(self, adjustments: list[BalanceAdjustment]) -> list[AppliedAdjustment]:
        """
        Apply adjustments in order. Must run inside a storage transaction.

        Each account is re-read right before its adjustment, so a charge
        following a refund to the same account sees the refunded balance.
        """
        applied = []
        for adjustment in adjustments:
            account = await self._storage.find_by_id(Account, adjustment.account_id)
            if account is None:
                raise NotFoundError("Account", adjustment.account_id)

            if adjustment.requires_funds and not has_sufficient_funds(
                account.balance, adjustment.required_amount
            ):
                raise InsufficientFundsError(
                    adjustment.account_id, adjustment.required_amount, account.balance
                )

            updated = await self._storage.increment(
                Account, adjustment.account_id, "balance", adjustment.delta
            )
            applied.append((adjustment, updated))
        return applied

    async def _log_committed(
        self,
        kind: str,
        record: Transaction,
        action: str,
        applied: list[AppliedAdjustment],
        correlation_id: UUID,
    ) -> None:
        await self._audit.log_transaction_recorded(
            kind=kind,
            transaction_id=record.id,
            action=action,
            amount=record.amount,
            account_id=record.account_id,
            correlation_id=correlation_id,
        )
        for adjustment, account in applied:
            await self._audit.log_balance_adjusted(
                account_id=adjustment.account_id,
                delta=adjustment.delta,
                new_balance=account.balance,
                reason=adjustment.reason,
                correlation_id=correlation_id,
            )

    async def _log_rejected(
        self,
        kind: str,
        error: Exception,
        amount: Decimal,
        account_id: Optional[int],
        correlation_id: UUID,
        transaction_id: Optional[int] = None,
    ) -> None:
        details = {"amount": str(amount), "account_id": account_id}
        if isinstance(error, InsufficientFundsError):
            details["available"] = str(error.available)
        await self._audit.log_transaction_rejected(
            kind=kind,
            reason=str(error),
            details=details,
            correlation_id=correlation_id,
            transaction_id=transaction_id,
        )
