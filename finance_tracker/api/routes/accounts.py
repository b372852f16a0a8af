"""Account routes. Balances change here only through manual correction."""

from fastapi import APIRouter, Depends, status

from finance_tracker.api.dependencies import get_components
from finance_tracker.models.ledger import Account, AccountInput, AccountUpdate
from finance_tracker.orchestrator import AppComponents


router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.get("", response_model=list[Account])
async def list_accounts(components: AppComponents = Depends(get_components)):
    return await components.ledger.list_accounts()


@router.post("", response_model=Account, status_code=status.HTTP_201_CREATED)
async def create_account(payload: AccountInput, components: AppComponents = Depends(get_components)):
    return await components.ledger.create_account(payload)


@router.get("/{account_id}", response_model=Account)
async def get_account(account_id: int, components: AppComponents = Depends(get_components)):
    return await components.ledger.get_account(account_id)


@router.put("/{account_id}", response_model=Account)
async def update_account(
    account_id: int,
    payload: AccountUpdate,
    components: AppComponents = Depends(get_components),
):
    return await components.ledger.update_account(account_id, payload)


@router.delete("/{account_id}")
async def delete_account(account_id: int, components: AppComponents = Depends(get_components)):
    await components.ledger.delete_account(account_id)
    return {"message": "Account deleted successfully"}
