"""
Analytics Module
"""
from .aggregation import (
    MissingCustomerError,
    build_category_breakdown,
    build_monthly_series,
    build_sales_listing,
    resolve_customer_purchases,
)
from .integrity import IntegrityReport, check_integrity
from .reports import (
    CategoryCount,
    CustomerPurchase,
    CustomerPurchases,
    DashboardReport,
    MonthlyBucket,
    MonthlySeries,
    SaleLine,
    SkippedRecords,
)
from .resolution import ReferencePolicy, ReferentialIntegrityError
from .service import ReportingService

__all__ = [
    "MissingCustomerError",
    "build_category_breakdown",
    "build_monthly_series",
    "build_sales_listing",
    "resolve_customer_purchases",
    "IntegrityReport",
    "check_integrity",
    "CategoryCount",
    "CustomerPurchase",
    "CustomerPurchases",
    "DashboardReport",
    "MonthlyBucket",
    "MonthlySeries",
    "SaleLine",
    "SkippedRecords",
    "ReferencePolicy",
    "ReferentialIntegrityError",
    "ReportingService",
]
