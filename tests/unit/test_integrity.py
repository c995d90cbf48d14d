"""
Unit Tests - Data Integrity Checks
"""
from bizdash.analytics.integrity import IntegrityStatus, check_integrity


def test_reports_every_gap(sales, products, customers):
    report = check_integrity(sales, products, customers)
    checks = {c.name: c for c in report.checks}

    assert report.status == IntegrityStatus.ISSUES
    assert checks["sale_product_reference"].record_ids == ["s5"]
    assert checks["sale_customer_reference"].record_ids == ["s6"]
    assert checks["product_price_valid"].record_ids == ["p3"]
    assert checks["product_price_valid"].total_records == 3
    assert report.failed_checks == 3
    assert report.passed_checks == 0


def test_clean_collections(sales, products, customers):
    good_sales = [s for s in sales if s.id in {"s1", "s2", "s3"}]
    good_products = [p for p in products if p.has_valid_price]

    report = check_integrity(good_sales, good_products, customers, {"sales": 0})

    assert report.status == IntegrityStatus.CLEAN
    assert report.failed_checks == 0
    assert [c.name for c in report.checks][-1] == "sales_well_formed"


def test_malformed_documents_fail_their_check(products, customers):
    report = check_integrity([], products[:2], customers, {"sales": 2, "customers": 0})
    checks = {c.name: c for c in report.checks}

    assert not checks["sales_well_formed"].passed
    assert checks["sales_well_formed"].failed_records == 2
    assert checks["customers_well_formed"].passed
    assert report.status == IntegrityStatus.ISSUES


def test_empty_collections_are_clean():
    report = check_integrity([], [], [])

    assert report.status == IntegrityStatus.CLEAN
    assert len(report.checks) == 3
