"""
Aggregation Engine

Pure functions turning already-fetched Sale/Product/Customer collections into
the dashboard views:

- monthly units/profit series
- product category breakdown
- per-customer purchases with total spent
- resolved sales listing

No I/O happens here; see ``service.py`` for fetching.
"""

import math
from typing import List, Optional, Sequence, TypeVar

import polars as pl
import structlog

from bizdash.analytics.reports import (
    CategoryCount,
    CustomerPurchase,
    CustomerPurchases,
    MonthlyBucket,
    MonthlySeries,
    SaleLine,
    SkippedRecords,
)
from bizdash.analytics.resolution import (
    ReferencePolicy,
    apply_policy,
    index_by_id,
    resolve_products,
)
from bizdash.domain.money import line_total
from bizdash.domain.records import Customer, Product, Sale

logger = structlog.get_logger(__name__)

T = TypeVar("T", Product, Customer)

UNKNOWN_PRODUCT = "Unknown product"
UNKNOWN_CUSTOMER = "Unknown customer"

_MONTHLY_SCHEMA = {
    "year": pl.Int32,
    "month": pl.Int32,
    "units": pl.Int64,
    "line_total": pl.Float64,
}


class MissingCustomerError(ValueError):
    """A purchase report was requested without a customer id"""

    def __init__(self):
        super().__init__("customer id is required to resolve purchases")


def build_monthly_series(
    sales: Sequence[Sale],
    products: Sequence[Product],
    policy: ReferencePolicy = ReferencePolicy.SKIP,
) -> MonthlySeries:
    """
    Build units sold and profit per calendar month.

    Buckets are keyed by (year, month) and ordered chronologically. Sales
    whose product does not resolve are left out and counted; a product
    without a valid price still contributes units but no profit.

    Args:
        sales: All sales
        products: All products
        policy: What to do with sales referencing missing products

    Returns:
        MonthlySeries with one bucket per month that has a contributing sale
    """
    resolutions = resolve_products(sales, index_by_id(products))
    found = apply_policy(resolutions, policy, "products")
    skipped = SkippedRecords(missing_product=len(resolutions) - len(found))

    rows = {name: [] for name in _MONTHLY_SCHEMA}
    for resolution in found:
        sale, product = resolution.sale, resolution.target
        if product.has_valid_price:
            value = line_total(sale.amount, product.price)
        else:
            skipped.invalid_price += 1
            value = 0.0

        rows["year"].append(sale.date.year)
        rows["month"].append(sale.date.month)
        rows["units"].append(sale.amount)
        rows["line_total"].append(value)

    frame = pl.DataFrame(rows, schema=_MONTHLY_SCHEMA)
    grouped = (
        frame.group_by(["year", "month"])
        .agg([
            pl.col("units").sum().alias("units_sold"),
            pl.col("line_total").sum().alias("profit"),
        ])
        .sort(["year", "month"])
    )

    buckets = [
        MonthlyBucket(
            year=row["year"],
            month=row["month"],
            units_sold=int(row["units_sold"]),
            profit=float(row["profit"]),
        )
        for row in grouped.iter_rows(named=True)
    ]

    logger.debug(
        "Monthly series built",
        sales=len(sales),
        buckets=len(buckets),
        skipped=skipped.total,
    )
    return MonthlySeries(buckets=buckets, skipped=skipped)


def build_category_breakdown(products: Sequence[Product]) -> List[CategoryCount]:
    """
    Count product listings per category.

    Categories are compared exactly (case-sensitive, no trimming); products
    without a category count under ``""``. The result is sorted by category
    so equal inputs in any order give equal outputs.
    """
    frame = pl.DataFrame(
        {"category": [p.category for p in products]},
        schema={"category": pl.Utf8},
    )
    counts = (
        frame.group_by("category")
        .agg(pl.len().alias("count"))
        .sort("category")
    )

    return [
        CategoryCount(category=row["category"], count=int(row["count"]))
        for row in counts.iter_rows(named=True)
    ]


def resolve_customer_purchases(
    customer_id: Optional[str],
    sales: Sequence[Sale],
    products: Sequence[Product],
    policy: ReferencePolicy = ReferencePolicy.SKIP,
) -> CustomerPurchases:
    """
    Resolve a customer's purchases and their total.

    Purchases keep the order of ``sales`` (the store's natural order). A
    sale whose product is missing, or whose product has no valid price,
    produces no entry and adds nothing to the total; both are counted in
    ``skipped``.

    Raises:
        MissingCustomerError: if ``customer_id`` is empty
        ReferentialIntegrityError: under STRICT policy with missing products
    """
    if not customer_id:
        raise MissingCustomerError()

    own_sales = [s for s in sales if s.customer_id == customer_id]
    resolutions = resolve_products(own_sales, index_by_id(products))
    found = apply_policy(resolutions, policy, "products")
    skipped = SkippedRecords(missing_product=len(resolutions) - len(found))

    purchases: List[CustomerPurchase] = []
    for resolution in found:
        sale, product = resolution.sale, resolution.target
        if not product.has_valid_price:
            skipped.invalid_price += 1
            continue

        purchases.append(
            CustomerPurchase(
                sale_id=sale.id,
                product_id=product.id,
                product_name=product.name,
                date=sale.date,
                amount=sale.amount,
                price=product.price,
                line_total=line_total(sale.amount, product.price),
            )
        )

    return CustomerPurchases(
        customer_id=customer_id,
        purchases=purchases,
        total_spent=math.fsum(p.line_total for p in purchases),
        skipped=skipped,
    )


def build_sales_listing(
    sales: Sequence[Sale],
    products: Sequence[Product],
    customers: Sequence[Customer],
    search: Optional[str] = None,
) -> List[SaleLine]:
    """
    List sales with product/customer names and totals resolved.

    Unresolved references are shown with placeholder names and a zero
    total rather than hidden. ``search`` keeps sales whose product or
    customer name contains it, ignoring case.
    """
    products_by_id = index_by_id(products)
    customers_by_id = index_by_id(customers)
    needle = search.strip().lower() if search else ""

    lines: List[SaleLine] = []
    for sale in sales:
        product = products_by_id.get(sale.product_id)
        customer = customers_by_id.get(sale.customer_id)
        product_name = product.name if product else UNKNOWN_PRODUCT
        customer_name = customer.name if customer else UNKNOWN_CUSTOMER

        if needle and needle not in product_name.lower() and needle not in customer_name.lower():
            continue

        priced = product is not None and product.has_valid_price
        lines.append(
            SaleLine(
                sale_id=sale.id,
                product_id=sale.product_id,
                product_name=product_name,
                customer_id=sale.customer_id,
                customer_name=customer_name,
                amount=sale.amount,
                date=sale.date,
                total=line_total(sale.amount, product.price) if priced else 0.0,
                resolved=product is not None and customer is not None,
            )
        )

    return lines


def filter_by_name(records: Sequence[T], search: Optional[str]) -> List[T]:
    """Keep records whose ``name`` contains ``search``, ignoring case"""
    needle = search.strip().lower() if search else ""
    if not needle:
        return list(records)
    return [r for r in records if needle in r.name.lower()]


def filter_customers(customers: Sequence[Customer], search: Optional[str]) -> List[Customer]:
    """Keep customers whose name, email, phone or address contains ``search``, ignoring case"""
    needle = search.strip().lower() if search else ""
    if not needle:
        return list(customers)
    return [
        c for c in customers
        if any(needle in value.lower() for value in (c.name, c.email, c.phone, c.address))
    ]
