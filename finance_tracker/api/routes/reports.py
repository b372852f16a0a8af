"""Report and dashboard routes (read-only)."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from finance_tracker.api.dependencies import get_components
from finance_tracker.models.report import DashboardSummary, TransactionReport
from finance_tracker.orchestrator import AppComponents


router = APIRouter(tags=["reports"])


@router.get("/reports", response_model=TransactionReport)
async def transaction_report(
    report_type: Optional[str] = Query(default=None, alias="type"),
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    components: AppComponents = Depends(get_components),
):
    return await components.reports.transaction_report(report_type, start_date, end_date)


@router.get("/dashboard", response_model=DashboardSummary)
async def dashboard(components: AppComponents = Depends(get_components)):
    return await components.reports.dashboard_summary()
