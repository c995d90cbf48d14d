"""
Data Integrity Checks

Aggregates silently leave out sales with dangling references and products
with unusable prices. This module makes those gaps visible: each check
reports how many records fail it and which ones.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Sequence

import structlog

from bizdash.analytics.resolution import index_by_id, resolve_customers, resolve_products
from bizdash.domain.records import Customer, Product, Sale

logger = structlog.get_logger(__name__)


class IntegrityStatus(str, Enum):
    """Overall integrity status"""
    CLEAN = "clean"
    ISSUES = "issues"


@dataclass
class IntegrityCheck:
    """Single integrity check result"""
    name: str
    passed: bool
    message: str
    failed_records: int = 0
    total_records: int = 0
    record_ids: List[str] = field(default_factory=list)


@dataclass
class IntegrityReport:
    """All integrity checks over the current collections"""
    status: IntegrityStatus
    checks: List[IntegrityCheck] = field(default_factory=list)
    checked_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def passed_checks(self) -> int:
        return sum(1 for c in self.checks if c.passed)

    @property
    def failed_checks(self) -> int:
        return sum(1 for c in self.checks if not c.passed)


def _check(name: str, subject: str, failed_ids: List[str], total: int) -> IntegrityCheck:
    passed = not failed_ids
    return IntegrityCheck(
        name=name,
        passed=passed,
        message=f"{len(failed_ids)} of {total} {subject}" if not passed else f"All {total} records ok",
        failed_records=len(failed_ids),
        total_records=total,
        record_ids=failed_ids,
    )


def check_integrity(
    sales: Sequence[Sale],
    products: Sequence[Product],
    customers: Sequence[Customer],
    malformed: Optional[Dict[str, int]] = None,
) -> IntegrityReport:
    """
    Run all integrity checks.

    Args:
        sales: All sales
        products: All products
        customers: All customers
        malformed: Per-collection count of documents that failed validation

    Returns:
        IntegrityReport; status is ISSUES when any check fails
    """
    product_refs = resolve_products(sales, index_by_id(products))
    customer_refs = resolve_customers(sales, index_by_id(customers))

    checks = [
        _check(
            "sale_product_reference",
            "sales reference a missing product",
            [r.sale.id for r in product_refs if not r.found],
            len(sales),
        ),
        _check(
            "sale_customer_reference",
            "sales reference a missing customer",
            [r.sale.id for r in customer_refs if not r.found],
            len(sales),
        ),
        _check(
            "product_price_valid",
            "products have an unparseable or negative price",
            [p.id for p in products if not p.has_valid_price],
            len(products),
        ),
    ]

    for collection, count in sorted((malformed or {}).items()):
        checks.append(
            IntegrityCheck(
                name=f"{collection}_well_formed",
                passed=count == 0,
                message=f"{count} malformed documents" if count else "All documents valid",
                failed_records=count,
            )
        )

    status = IntegrityStatus.CLEAN if all(c.passed for c in checks) else IntegrityStatus.ISSUES
    report = IntegrityReport(status=status, checks=checks)

    logger.info(
        "Integrity check completed",
        status=status.value,
        passed=report.passed_checks,
        failed=report.failed_checks,
    )
    return report
