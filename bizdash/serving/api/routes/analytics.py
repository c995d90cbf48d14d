"""
Analytics API Endpoints

Dashboard views derived from the current collections: monthly units and
profit, category breakdown, and an integrity report of what the aggregates
had to leave out. Nothing here is cached; every call reads fresh data.
"""

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends
import structlog

from bizdash.analytics.integrity import IntegrityReport
from bizdash.analytics.reports import CategoryCount, MonthlySeries
from bizdash.analytics.service import ReportingService
from bizdash.config import Settings
from bizdash.domain.money import round_money
from bizdash.serving.api.dependencies import get_app_settings, get_reporting_service
from bizdash.serving.api.schemas import CamelModel, SkippedResponse

router = APIRouter()
logger = structlog.get_logger(__name__)


class MonthlyBucketResponse(CamelModel):
    """Units and profit for one month"""
    period: str
    month: str
    units_sold: int
    profit: float


class MonthlySeriesResponse(CamelModel):
    """Monthly buckets in chronological order"""
    months: List[MonthlyBucketResponse]
    total_units: int
    total_profit: float
    skipped: SkippedResponse

    @classmethod
    def from_series(cls, series: MonthlySeries, digits: int) -> "MonthlySeriesResponse":
        return cls(
            months=[
                MonthlyBucketResponse(
                    period=b.period,
                    month=b.label,
                    units_sold=b.units_sold,
                    profit=round_money(b.profit, digits),
                )
                for b in series
            ],
            total_units=series.total_units,
            total_profit=round_money(series.total_profit, digits),
            skipped=SkippedResponse.from_skipped(series.skipped),
        )


class CategoryCountResponse(CamelModel):
    category: str
    count: int


def _categories(categories: List[CategoryCount]) -> List[CategoryCountResponse]:
    return [CategoryCountResponse(category=c.category, count=c.count) for c in categories]


class DashboardResponse(CamelModel):
    """Everything the dashboard charts need"""
    monthly: MonthlySeriesResponse
    categories: List[CategoryCountResponse]
    generated_at: datetime


class IntegrityCheckResponse(CamelModel):
    name: str
    passed: bool
    message: str
    failed_records: int
    total_records: int
    record_ids: List[str]


class IntegrityReportResponse(CamelModel):
    """Integrity checks over all collections"""
    status: str
    passed_checks: int
    failed_checks: int
    checks: List[IntegrityCheckResponse]
    checked_at: datetime

    @classmethod
    def from_report(cls, report: IntegrityReport) -> "IntegrityReportResponse":
        return cls(
            status=report.status.value,
            passed_checks=report.passed_checks,
            failed_checks=report.failed_checks,
            checks=[
                IntegrityCheckResponse(
                    name=c.name,
                    passed=c.passed,
                    message=c.message,
                    failed_records=c.failed_records,
                    total_records=c.total_records,
                    record_ids=c.record_ids,
                )
                for c in report.checks
            ],
            checked_at=report.checked_at,
        )


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    service: ReportingService = Depends(get_reporting_service),
    settings: Settings = Depends(get_app_settings),
) -> DashboardResponse:
    """
    Monthly series and category breakdown in one response.

    Both views are built from a single read of sales and products.
    """
    report = await service.dashboard()
    return DashboardResponse(
        monthly=MonthlySeriesResponse.from_series(report.monthly, settings.analytics.round_digits),
        categories=_categories(report.categories),
        generated_at=report.generated_at,
    )


@router.get("/sales/monthly", response_model=MonthlySeriesResponse)
async def get_monthly_sales(
    service: ReportingService = Depends(get_reporting_service),
    settings: Settings = Depends(get_app_settings),
) -> MonthlySeriesResponse:
    """Units sold and profit per calendar month."""
    series = await service.monthly_series()
    return MonthlySeriesResponse.from_series(series, settings.analytics.round_digits)


@router.get("/products/categories", response_model=List[CategoryCountResponse])
async def get_product_categories(
    service: ReportingService = Depends(get_reporting_service),
) -> List[CategoryCountResponse]:
    """Number of products per category, sorted by category."""
    return _categories(await service.category_breakdown())


@router.get("/integrity", response_model=IntegrityReportResponse)
async def get_integrity_report(
    service: ReportingService = Depends(get_reporting_service),
) -> IntegrityReportResponse:
    """Dangling references, unusable prices and malformed documents."""
    report = await service.integrity_report()
    return IntegrityReportResponse.from_report(report)
