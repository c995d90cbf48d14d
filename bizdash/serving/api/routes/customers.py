"""
Customers API Endpoints

CRUD over the customers collection, plus each customer's purchases.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
import structlog

from bizdash.analytics.aggregation import filter_customers
from bizdash.analytics.service import ReportingService
from bizdash.config import Settings
from bizdash.database.store import RecordStore
from bizdash.domain.records import Customer, CustomerIn, CustomerUpdate, parse_records
from bizdash.serving.api.dependencies import (
    get_app_settings,
    get_record_store,
    get_reporting_service,
)
from bizdash.serving.api.routes.purchases import CustomerPurchasesResponse

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.get("", response_model=List[Customer])
async def list_customers(
    search: Optional[str] = Query(None, description="Matches name, email, phone or address"),
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_app_settings),
) -> List[Customer]:
    """List customers, optionally filtered by a search term."""
    documents = await store.list_all(settings.store.customers_collection)
    customers, malformed = parse_records(Customer, documents)
    customers = filter_customers(customers, search)

    logger.info("Customers listed", count=len(customers), malformed=malformed, search=search)
    return customers


@router.post("", response_model=Customer, status_code=status.HTTP_201_CREATED)
async def create_customer(
    payload: CustomerIn,
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_app_settings),
) -> Customer:
    document = payload.to_document()
    customer_id = await store.add(settings.store.customers_collection, document)
    return Customer.model_validate({**document, "id": customer_id})


@router.get("/{customer_id}", response_model=Customer)
async def get_customer(
    customer_id: str,
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_app_settings),
) -> Customer:
    record = await store.get_by_id(settings.store.customers_collection, customer_id)
    if not record:
        raise HTTPException(status_code=404, detail="Customer not found")
    return Customer.model_validate(record)


@router.put("/{customer_id}", response_model=Customer)
async def update_customer(
    customer_id: str,
    payload: CustomerUpdate,
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_app_settings),
) -> Customer:
    """Update the submitted fields of a customer."""
    record = await store.update(
        settings.store.customers_collection, customer_id, payload.to_document(partial=True)
    )
    return Customer.model_validate(record)


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(
    customer_id: str,
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """
    Delete a customer.

    Their sales are kept and still count toward the monthly series.
    """
    await store.delete(settings.store.customers_collection, customer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{customer_id}/purchases", response_model=CustomerPurchasesResponse)
async def get_customer_purchases(
    customer_id: str,
    service: ReportingService = Depends(get_reporting_service),
    settings: Settings = Depends(get_app_settings),
) -> CustomerPurchasesResponse:
    """
    Purchases of one customer with total spent.

    Resolved from the sales collection alone, so the history of a deleted
    customer is still available.
    """
    report = await service.customer_purchases(customer_id)
    return CustomerPurchasesResponse.from_report(report, settings.analytics.round_digits)
