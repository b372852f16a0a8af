"""
Catalog routes: debts, categories and subscriptions.

These records carry no balance rules, so one set of CRUD handlers is
generated per record type.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from finance_tracker.api.dependencies import get_components
from finance_tracker.models.ledger import Category, Debt, LedgerModel, Subscription
from finance_tracker.models.report import SubscriptionSummary
from finance_tracker.orchestrator import AppComponents
from finance_tracker.services import CatalogService


def add_catalog_routes(
    router: APIRouter,
    model: type[LedgerModel],
    service_name: str,
    active_filter: bool = False,
) -> APIRouter:
    """Register list/create/get/update/delete for one record type on router."""
    entity = model.__name__

    def get_service(components: AppComponents = Depends(get_components)) -> CatalogService:
        return getattr(components, service_name)

    if active_filter:
        @router.get("", response_model=list[model])
        async def list_records(
            active_only: bool = Query(default=False, alias="activeOnly"),
            catalog: CatalogService = Depends(get_service),
        ):
            return await catalog.list_all(active_only=active_only)
    else:
        @router.get("", response_model=list[model])
        async def list_records(catalog: CatalogService = Depends(get_service)):
            return await catalog.list_all()

    @router.post("", response_model=model, status_code=status.HTTP_201_CREATED)
    async def create_record(payload: model, catalog: CatalogService = Depends(get_service)):
        return await catalog.create(payload)

    @router.get("/{record_id}", response_model=model)
    async def get_record(record_id: int, catalog: CatalogService = Depends(get_service)):
        return await catalog.get(record_id)

    @router.put("/{record_id}", response_model=model)
    async def update_record(
        record_id: int,
        payload: model,
        catalog: CatalogService = Depends(get_service),
    ):
        return await catalog.update(record_id, payload)

    @router.delete("/{record_id}")
    async def delete_record(record_id: int, catalog: CatalogService = Depends(get_service)):
        await catalog.delete(record_id)
        return {"message": f"{entity} deleted successfully"}

    return router


debts_router = add_catalog_routes(
    APIRouter(prefix="/debts", tags=["debts"]), Debt, "debts", active_filter=True
)

categories_router = add_catalog_routes(
    APIRouter(prefix="/categories", tags=["categories"]), Category, "categories"
)

subscriptions_router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


# Registered before the generic routes so "/summary" isn't read as an id
@subscriptions_router.get("/summary", response_model=SubscriptionSummary)
async def subscription_summary(
    today: Optional[date] = Query(default=None),
    components: AppComponents = Depends(get_components),
):
    return await components.reports.subscription_summary(today=today)


add_catalog_routes(subscriptions_router, Subscription, "subscriptions")
