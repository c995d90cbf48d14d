"""
Purchases API Endpoints

Per-customer purchase history with total spent.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse

from bizdash.analytics.reports import CustomerPurchases
from bizdash.analytics.service import ReportingService
from bizdash.config import Settings
from bizdash.domain.money import round_money
from bizdash.serving.api.dependencies import get_app_settings, get_reporting_service
from bizdash.serving.api.schemas import CamelModel, SkippedResponse

router = APIRouter()

CUSTOMER_SELECTION_URL = "/api/v1/customers"


class PurchaseResponse(CamelModel):
    """One purchase line"""
    sale_id: str
    product_id: str
    product_name: str
    date: datetime
    amount: int
    price: float
    line_total: float


class CustomerPurchasesResponse(CamelModel):
    """Purchases of one customer"""
    customer_id: str
    purchases: List[PurchaseResponse]
    total_spent: float
    skipped: SkippedResponse

    @classmethod
    def from_report(cls, report: CustomerPurchases, digits: int) -> "CustomerPurchasesResponse":
        return cls(
            customer_id=report.customer_id,
            purchases=[
                PurchaseResponse(
                    sale_id=p.sale_id,
                    product_id=p.product_id,
                    product_name=p.product_name,
                    date=p.date,
                    amount=p.amount,
                    price=round_money(p.price, digits),
                    line_total=round_money(p.line_total, digits),
                )
                for p in report.purchases
            ],
            total_spent=round_money(report.total_spent, digits),
            skipped=SkippedResponse.from_skipped(report.skipped),
        )


@router.get("", response_model=CustomerPurchasesResponse)
async def get_purchases(
    customer_id: Optional[str] = Query(None, alias="customerId"),
    service: ReportingService = Depends(get_reporting_service),
    settings: Settings = Depends(get_app_settings),
):
    """
    Purchases of the customer given by ``customerId``.

    Without a customer id there is nothing to aggregate: the caller is sent
    to the customer listing to pick one.
    """
    if not customer_id:
        return RedirectResponse(url=CUSTOMER_SELECTION_URL, status_code=307)

    report = await service.customer_purchases(customer_id)
    return CustomerPurchasesResponse.from_report(report, settings.analytics.round_digits)
