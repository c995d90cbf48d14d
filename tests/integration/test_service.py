"""
Integration Tests - Reporting Service
"""
import pytest

from bizdash.analytics.aggregation import MissingCustomerError
from bizdash.analytics.integrity import IntegrityStatus
from bizdash.analytics.resolution import ReferencePolicy, ReferentialIntegrityError
from bizdash.analytics.service import ReportingService


@pytest.fixture
def service(seeded_store, test_settings) -> ReportingService:
    return ReportingService(seeded_store, test_settings)


async def test_monthly_series(service):
    series = await service.monthly_series()

    assert [b.label for b in series] == ["Dec 2024", "Jan 2025", "Feb 2025", "Mar 2025"]
    assert series.total_units == 9
    assert series.total_profit == pytest.approx(119.9)


async def test_malformed_sales_are_counted(service, seeded_store):
    await seeded_store.add(
        "sales", {"productId": "p1", "customerId": "c1", "amount": 0, "date": "2025-01-01"}
    )

    series = await service.monthly_series()

    assert series.skipped.malformed == 1
    assert series.total_units == 9


async def test_dashboard(service):
    report = await service.dashboard()

    assert len(report.monthly) == 4
    assert [(c.category, c.count) for c in report.categories] == [("electronics", 2), ("home", 1)]


async def test_customer_purchases(service):
    result = await service.customer_purchases("c1")

    assert [p.product_name for p in result.purchases] == ["Wireless Mouse", "Desk Lamp"]
    assert result.total_spent == pytest.approx(69.9)
    assert result.skipped.missing_product == 1


async def test_customer_purchases_requires_id(service):
    with pytest.raises(MissingCustomerError):
        await service.customer_purchases("")


async def test_strict_policy(seeded_store, test_settings):
    service = ReportingService(seeded_store, test_settings, policy=ReferencePolicy.STRICT)

    with pytest.raises(ReferentialIntegrityError):
        await service.monthly_series()

    result = await service.customer_purchases("c2")
    assert result.total_spent == pytest.approx(25.0)


async def test_policy_from_settings(seeded_store, test_settings):
    test_settings.analytics.reference_policy = "strict"

    service = ReportingService(seeded_store, test_settings)

    assert service.policy is ReferencePolicy.STRICT


async def test_views_reflect_writes(service, seeded_store):
    before = await service.monthly_series()
    await seeded_store.add(
        "sales", {"productId": "p1", "customerId": "c2", "amount": 3, "date": "2025-01-20"}
    )

    after = await service.monthly_series()

    assert after.total_units == before.total_units + 3


async def test_sales_listing(service):
    lines = await service.sales_listing("bruno")

    assert [line.sale_id for line in lines] == ["s3", "s4"]


async def test_integrity_report(service):
    report = await service.integrity_report()

    assert report.status == IntegrityStatus.ISSUES
    assert {c.name for c in report.checks if not c.passed} == {
        "sale_product_reference",
        "sale_customer_reference",
        "product_price_valid",
    }
