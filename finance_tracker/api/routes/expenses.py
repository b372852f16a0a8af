"""
Expense routes.

Every write goes through the ledger service, which charges, refunds or
re-charges the linked account in the same transaction as the expense.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from finance_tracker.api.dependencies import get_components
from finance_tracker.models.ledger import Expense, ExpenseInput
from finance_tracker.orchestrator import AppComponents


router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.get("", response_model=list[Expense])
async def list_expenses(
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    account_id: Optional[int] = Query(default=None, alias="accountId"),
    components: AppComponents = Depends(get_components),
):
    return await components.ledger.list_expenses(
        date_from=start_date, date_to=end_date, account_id=account_id
    )


@router.post("", response_model=Expense, status_code=status.HTTP_201_CREATED)
async def create_expense(payload: ExpenseInput, components: AppComponents = Depends(get_components)):
    return await components.ledger.create_expense(payload)


@router.get("/{expense_id}", response_model=Expense)
async def get_expense(expense_id: int, components: AppComponents = Depends(get_components)):
    return await components.ledger.get_expense(expense_id)


@router.put("/{expense_id}", response_model=Expense)
async def update_expense(
    expense_id: int,
    payload: ExpenseInput,
    components: AppComponents = Depends(get_components),
):
    return await components.ledger.update_expense(expense_id, payload)


@router.delete("/{expense_id}")
async def delete_expense(expense_id: int, components: AppComponents = Depends(get_components)):
    await components.ledger.delete_expense(expense_id)
    return {"message": "Expense deleted successfully"}
