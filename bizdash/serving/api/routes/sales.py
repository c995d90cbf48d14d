"""
Sales API Endpoints

Sales listing with resolved names and totals, and CRUD over the sales
collection. Writes check that the referenced product and customer exist.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
import structlog

from bizdash.analytics.service import ReportingService
from bizdash.config import Settings
from bizdash.database.store import RecordStore
from bizdash.domain.money import round_money
from bizdash.domain.records import Sale, SaleIn, SaleUpdate
from bizdash.serving.api.dependencies import (
    get_app_settings,
    get_record_store,
    get_reporting_service,
)
from bizdash.serving.api.schemas import CamelModel

router = APIRouter()
logger = structlog.get_logger(__name__)


class SaleLineResponse(CamelModel):
    """Sale with product and customer resolved"""
    sale_id: str
    product_id: str
    product_name: str
    customer_id: str
    customer_name: str
    amount: int
    date: datetime
    total: float
    resolved: bool


async def _require_references(
    store: RecordStore,
    settings: Settings,
    product_id: Optional[str],
    customer_id: Optional[str],
) -> None:
    if product_id is not None:
        if not await store.get_by_id(settings.store.products_collection, product_id):
            raise HTTPException(status_code=404, detail=f"Product '{product_id}' not found")
    if customer_id is not None:
        if not await store.get_by_id(settings.store.customers_collection, customer_id):
            raise HTTPException(status_code=404, detail=f"Customer '{customer_id}' not found")


@router.get("", response_model=List[SaleLineResponse])
async def list_sales(
    search: Optional[str] = Query(None, description="Matches product or customer name"),
    service: ReportingService = Depends(get_reporting_service),
    settings: Settings = Depends(get_app_settings),
) -> List[SaleLineResponse]:
    """
    List sales with product and customer names and line totals.

    Sales whose product or customer no longer exists are listed with
    placeholder names and ``resolved`` set to false.
    """
    lines = await service.sales_listing(search)
    digits = settings.analytics.round_digits

    return [
        SaleLineResponse(
            sale_id=line.sale_id,
            product_id=line.product_id,
            product_name=line.product_name,
            customer_id=line.customer_id,
            customer_name=line.customer_name,
            amount=line.amount,
            date=line.date,
            total=round_money(line.total, digits),
            resolved=line.resolved,
        )
        for line in lines
    ]


@router.post("", response_model=Sale, status_code=status.HTTP_201_CREATED)
async def create_sale(
    payload: SaleIn,
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_app_settings),
) -> Sale:
    """Register a sale of an existing product to an existing customer."""
    await _require_references(store, settings, payload.product_id, payload.customer_id)

    document = payload.to_document()
    sale_id = await store.add(settings.store.sales_collection, document)

    logger.info(
        "Sale registered",
        sale_id=sale_id,
        product_id=payload.product_id,
        amount=payload.amount,
    )
    return Sale.model_validate({**document, "id": sale_id})


@router.get("/{sale_id}", response_model=Sale)
async def get_sale(
    sale_id: str,
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_app_settings),
) -> Sale:
    record = await store.get_by_id(settings.store.sales_collection, sale_id)
    if not record:
        raise HTTPException(status_code=404, detail="Sale not found")
    return Sale.model_validate(record)


@router.put("/{sale_id}", response_model=Sale)
async def update_sale(
    sale_id: str,
    payload: SaleUpdate,
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_app_settings),
) -> Sale:
    """Update the submitted fields of a sale; changed references must exist."""
    await _require_references(store, settings, payload.product_id, payload.customer_id)

    record = await store.update(
        settings.store.sales_collection, sale_id, payload.to_document(partial=True)
    )
    return Sale.model_validate(record)


@router.delete("/{sale_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_sale(
    sale_id: str,
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    await store.delete(settings.store.sales_collection, sale_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
