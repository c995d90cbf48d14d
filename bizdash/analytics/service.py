"""
Reporting Service

Fetches collections from the record store and hands them to the aggregation
engine. Independent collection reads run concurrently, and aggregation only
starts once every read it depends on has completed.
"""

import asyncio
from typing import Dict, List, Optional, Tuple, Type

import structlog

from bizdash.analytics.aggregation import (
    MissingCustomerError,
    build_category_breakdown,
    build_monthly_series,
    build_sales_listing,
    resolve_customer_purchases,
)
from bizdash.analytics.integrity import IntegrityReport, check_integrity
from bizdash.analytics.reports import (
    CategoryCount,
    CustomerPurchases,
    DashboardReport,
    MonthlySeries,
    SaleLine,
)
from bizdash.analytics.resolution import ReferencePolicy
from bizdash.config import Settings, get_settings
from bizdash.database.store import RecordStore
from bizdash.domain.records import Customer, Product, RecordT, Sale, parse_records

logger = structlog.get_logger(__name__)


class ReportingService:
    """
    Async façade over the aggregation engine.

    Example:
        service = ReportingService(store)
        report = await service.dashboard()
    """

    def __init__(
        self,
        store: RecordStore,
        settings: Optional[Settings] = None,
        policy: Optional[ReferencePolicy] = None,
    ):
        settings = settings or get_settings()
        self.store = store
        self.collections = settings.store
        self.policy = policy or ReferencePolicy(settings.analytics.reference_policy)

    async def _fetch(self, collection: str, model: Type[RecordT]) -> Tuple[List[RecordT], int]:
        documents = await self.store.list_all(collection)
        return parse_records(model, documents)

    async def _fetch_products(self) -> Tuple[List[Product], int]:
        return await self._fetch(self.collections.products_collection, Product)

    async def _fetch_sales(self) -> Tuple[List[Sale], int]:
        return await self._fetch(self.collections.sales_collection, Sale)

    async def _fetch_customers(self) -> Tuple[List[Customer], int]:
        return await self._fetch(self.collections.customers_collection, Customer)

    async def monthly_series(self) -> MonthlySeries:
        """Units and profit per month over all sales"""
        (sales, bad_sales), (products, _) = await asyncio.gather(
            self._fetch_sales(),
            self._fetch_products(),
        )
        series = build_monthly_series(sales, products, self.policy)
        series.skipped.malformed += bad_sales
        return series

    async def category_breakdown(self) -> List[CategoryCount]:
        """Product counts per category"""
        products, _ = await self._fetch_products()
        return build_category_breakdown(products)

    async def dashboard(self) -> DashboardReport:
        """Monthly series and category breakdown from a single fetch"""
        (sales, bad_sales), (products, _) = await asyncio.gather(
            self._fetch_sales(),
            self._fetch_products(),
        )
        monthly = build_monthly_series(sales, products, self.policy)
        monthly.skipped.malformed += bad_sales

        report = DashboardReport(
            monthly=monthly,
            categories=build_category_breakdown(products),
        )
        logger.info(
            "Dashboard built",
            months=len(monthly),
            categories=len(report.categories),
            skipped=monthly.skipped.total,
        )
        return report

    async def customer_purchases(self, customer_id: Optional[str]) -> CustomerPurchases:
        """
        A customer's purchases and total spent.

        Sales are queried by customer id, then every referenced product is
        fetched in one batch lookup.

        Raises:
            MissingCustomerError: if ``customer_id`` is empty
        """
        if not customer_id:
            raise MissingCustomerError()

        documents = await self.store.query_by_field(
            self.collections.sales_collection, "customerId", customer_id
        )
        sales, bad_sales = parse_records(Sale, documents)

        product_docs = await self.store.get_many(
            self.collections.products_collection,
            {sale.product_id for sale in sales},
        )
        products, _ = parse_records(Product, product_docs.values())

        result = resolve_customer_purchases(customer_id, sales, products, self.policy)
        result.skipped.malformed += bad_sales

        logger.info(
            "Customer purchases resolved",
            customer_id=customer_id,
            purchases=len(result.purchases),
            skipped=result.skipped.total,
        )
        return result

    async def sales_listing(self, search: Optional[str] = None) -> List[SaleLine]:
        """All sales with names and totals resolved, optionally filtered"""
        (sales, _), (products, _), (customers, _) = await asyncio.gather(
            self._fetch_sales(),
            self._fetch_products(),
            self._fetch_customers(),
        )
        return build_sales_listing(sales, products, customers, search)

    async def integrity_report(self) -> IntegrityReport:
        """Referential and price integrity over all collections"""
        (sales, bad_sales), (products, bad_products), (customers, bad_customers) = await asyncio.gather(
            self._fetch_sales(),
            self._fetch_products(),
            self._fetch_customers(),
        )
        malformed: Dict[str, int] = {
            self.collections.sales_collection: bad_sales,
            self.collections.products_collection: bad_products,
            self.collections.customers_collection: bad_customers,
        }
        return check_integrity(sales, products, customers, malformed)
