"""
Unit Tests - Aggregation Engine
"""
import random
from datetime import datetime

import pytest

from bizdash.analytics.aggregation import (
    UNKNOWN_CUSTOMER,
    UNKNOWN_PRODUCT,
    MissingCustomerError,
    build_category_breakdown,
    build_monthly_series,
    build_sales_listing,
    filter_by_name,
    filter_customers,
    resolve_customer_purchases,
)
from bizdash.analytics.reports import CategoryCount, format_month_label
from bizdash.analytics.resolution import ReferencePolicy, ReferentialIntegrityError
from bizdash.domain.records import Product, Sale


def make_sale(sale_id, product_id, amount, date, customer_id="c1"):
    return Sale(id=sale_id, product_id=product_id, customer_id=customer_id, amount=amount, date=date)


class TestMonthlySeries:
    """Tests for build_monthly_series"""

    def test_buckets(self, sales, products):
        series = build_monthly_series(sales, products)

        assert [b.period for b in series] == ["2024-12", "2025-01", "2025-02", "2025-03"]
        assert [b.units_sold for b in series] == [1, 2, 2, 4]
        assert [b.profit for b in series] == pytest.approx([25.0, 50.0, 44.9, 0.0])

    def test_skipped_counts(self, sales, products):
        series = build_monthly_series(sales, products)

        assert series.skipped.missing_product == 1
        assert series.skipped.invalid_price == 1
        assert series.skipped.total == 2

    def test_units_equal_resolved_amounts(self, sales, products):
        series = build_monthly_series(sales, products)
        product_ids = {p.id for p in products}

        expected = sum(s.amount for s in sales if s.product_id in product_ids)
        assert series.total_units == expected
        assert sum(b.units_sold for b in series) == expected

    def test_chronological_regardless_of_input_order(self):
        products = [Product(id="p1", name="Mouse", price=10.0)]
        sales = [
            make_sale("s1", "p1", 1, datetime(2025, 7, 3)),
            make_sale("s2", "p1", 1, datetime(2025, 1, 9)),
            make_sale("s3", "p1", 1, datetime(2025, 3, 30)),
        ]

        series = build_monthly_series(sales, products)

        assert [b.label for b in series] == ["Jan 2025", "Mar 2025", "Jul 2025"]

    def test_same_month_different_years_are_separate(self):
        products = [Product(id="p1", name="Mouse", price=10.0)]
        sales = [
            make_sale("s1", "p1", 1, datetime(2025, 1, 5)),
            make_sale("s2", "p1", 3, datetime(2024, 1, 5)),
        ]

        series = build_monthly_series(sales, products)

        assert [(b.year, b.month, b.units_sold) for b in series] == [(2024, 1, 3), (2025, 1, 1)]

    def test_missing_product_contributes_nothing(self):
        products = [Product(id="p1", name="Mouse", price=10.0)]
        sales = [
            make_sale("s1", "p1", 2, datetime(2025, 5, 1)),
            make_sale("s2", "deleted", 100, datetime(2025, 5, 2)),
        ]

        series = build_monthly_series(sales, products)

        assert len(series) == 1
        assert series[0].units_sold == 2
        assert series[0].profit == pytest.approx(20.0)

    def test_strict_policy_fails_on_missing_product(self, sales, products):
        with pytest.raises(ReferentialIntegrityError) as exc_info:
            build_monthly_series(sales, products, ReferencePolicy.STRICT)

        assert exc_info.value.collection == "products"
        assert exc_info.value.missing_ids == ["ghost"]

    def test_empty_inputs(self):
        series = build_monthly_series([], [])

        assert len(series) == 0
        assert series.total_units == 0
        assert series.total_profit == 0

    def test_sales_without_products(self, sales):
        series = build_monthly_series(sales, [])

        assert len(series) == 0
        assert series.skipped.missing_product == len(sales)


class TestCategoryBreakdown:
    """Tests for build_category_breakdown"""

    def test_counts(self, products):
        assert build_category_breakdown(products) == [
            CategoryCount(category="electronics", count=2),
            CategoryCount(category="home", count=1),
        ]

    def test_order_independent(self, products):
        shuffled = list(products)
        random.Random(7).shuffle(shuffled)
        shuffled.reverse()

        assert build_category_breakdown(shuffled) == build_category_breakdown(products)

    def test_exact_matching(self):
        products = [
            Product(id="1", category="Books"),
            Product(id="2", category="books"),
            Product(id="3", category="books"),
            Product(id="4"),
        ]

        counts = {c.category: c.count for c in build_category_breakdown(products)}

        assert counts == {"": 1, "Books": 1, "books": 2}

    def test_empty(self):
        assert build_category_breakdown([]) == []


class TestCustomerPurchases:
    """Tests for resolve_customer_purchases"""

    def test_total_is_sum_of_lines(self):
        products = [Product(id="a", name="A", price=10.0), Product(id="b", name="B", price=5.0)]
        sales = [
            make_sale("s1", "a", 3, datetime(2025, 1, 1)),
            make_sale("s2", "b", 2, datetime(2025, 1, 2)),
        ]

        result = resolve_customer_purchases("c1", sales, products)

        assert result.total_spent == pytest.approx(40.0)
        assert result.total_spent == pytest.approx(sum(p.amount * p.price for p in result.purchases))

    def test_keeps_store_order_and_skips(self, sales, products):
        result = resolve_customer_purchases("c1", sales, products)

        assert [p.sale_id for p in result.purchases] == ["s1", "s2"]
        assert [p.line_total for p in result.purchases] == pytest.approx([50.0, 19.9])
        assert result.total_spent == pytest.approx(69.9)
        assert result.skipped.missing_product == 1

    def test_invalid_price_excluded(self, sales, products):
        result = resolve_customer_purchases("c2", sales, products)

        assert [p.sale_id for p in result.purchases] == ["s3"]
        assert result.total_spent == pytest.approx(25.0)
        assert result.skipped.invalid_price == 1

    def test_unknown_customer_id_still_resolves(self, sales, products):
        result = resolve_customer_purchases("gone-customer", sales, products)

        assert [p.sale_id for p in result.purchases] == ["s6"]

    def test_no_purchases(self, sales, products):
        result = resolve_customer_purchases("nobody", sales, products)

        assert result.purchases == []
        assert result.total_spent == 0

    @pytest.mark.parametrize("customer_id", [None, ""])
    def test_customer_required(self, customer_id, sales, products):
        with pytest.raises(MissingCustomerError):
            resolve_customer_purchases(customer_id, sales, products)


class TestSalesListing:
    """Tests for build_sales_listing"""

    def test_placeholders_for_missing_references(self, sales, products, customers):
        lines = {line.sale_id: line for line in build_sales_listing(sales, products, customers)}

        assert len(lines) == 6
        assert lines["s5"].product_name == UNKNOWN_PRODUCT
        assert lines["s5"].total == 0.0
        assert not lines["s5"].resolved
        assert lines["s6"].customer_name == UNKNOWN_CUSTOMER
        assert lines["s6"].total == pytest.approx(25.0)
        assert lines["s1"].resolved
        assert lines["s4"].total == 0.0

    def test_search_matches_customer_name(self, sales, products, customers):
        lines = build_sales_listing(sales, products, customers, search="ANA")

        assert [line.sale_id for line in lines] == ["s1", "s2", "s5"]

    def test_search_matches_product_name(self, sales, products, customers):
        lines = build_sales_listing(sales, products, customers, search="lamp")

        assert [line.sale_id for line in lines] == ["s2"]


def test_filter_by_name(products):
    assert [p.id for p in filter_by_name(products, " mouse ")] == ["p1"]
    assert len(filter_by_name(products, None)) == 3
    assert filter_by_name(products, "zzz") == []



def test_filter_customers_matches_contact_fields(customers):
    assert [c.id for c in filter_customers(customers, "BRUNO@")] == ["c2"]
    assert [c.id for c in filter_customers(customers, "0101")] == ["c1"]
    assert [c.id for c in filter_customers(customers, "rua")] == ["c1"]
    assert [c.id for c in filter_customers(customers, "example.com")] == ["c1", "c2"]
    assert len(filter_customers(customers, "  ")) == 2

def test_format_month_label():
    assert format_month_label(2025, 1) == "Jan 2025"
    assert format_month_label(2025, 12, with_year=False) == "Dec"
