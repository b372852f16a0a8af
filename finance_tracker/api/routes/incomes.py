"""Income routes. Mirror the expense routes with the balance sign inverted."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from finance_tracker.api.dependencies import get_components
from finance_tracker.models.ledger import Income, IncomeInput
from finance_tracker.orchestrator import AppComponents


router = APIRouter(prefix="/incomes", tags=["incomes"])


@router.get("", response_model=list[Income])
async def list_incomes(
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    account_id: Optional[int] = Query(default=None, alias="accountId"),
    components: AppComponents = Depends(get_components),
):
    return await components.ledger.list_incomes(
        date_from=start_date, date_to=end_date, account_id=account_id
    )


@router.post("", response_model=Income, status_code=status.HTTP_201_CREATED)
async def create_income(payload: IncomeInput, components: AppComponents = Depends(get_components)):
    return await components.ledger.create_income(payload)


@router.get("/{income_id}", response_model=Income)
async def get_income(income_id: int, components: AppComponents = Depends(get_components)):
    return await components.ledger.get_income(income_id)


@router.put("/{income_id}", response_model=Income)
async def update_income(
    income_id: int,
    payload: IncomeInput,
    components: AppComponents = Depends(get_components),
):
    return await components.ledger.update_income(income_id, payload)


@router.delete("/{income_id}")
async def delete_income(income_id: int, components: AppComponents = Depends(get_components)):
    await components.ledger.delete_income(income_id)
    return {"message": "Income deleted successfully"}
