"""Tax calculation route."""

from fastapi import APIRouter, Depends

from finance_tracker.api.dependencies import get_components
from finance_tracker.models.tax import TaxCalculationRequest, TaxCalculationResult
from finance_tracker.orchestrator import AppComponents


router = APIRouter(prefix="/tax", tags=["tax"])


@router.post("/calculate", response_model=TaxCalculationResult)
async def calculate_tax(
    payload: TaxCalculationRequest,
    components: AppComponents = Depends(get_components),
):
    return await components.tax.calculate(
        income=payload.income,
        state=payload.state,
        filing_status=payload.filing_status,
    )
