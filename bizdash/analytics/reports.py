"""
Report Types

Derived views produced by the aggregation engine. They are rebuilt on every
request and never stored.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, List

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def format_month_label(year: int, month: int, with_year: bool = True) -> str:
    """Display label for a (year, month) bucket key, e.g. 'Mar 2025'"""
    label = MONTH_ABBREVIATIONS[month - 1]
    return f"{label} {year}" if with_year else label


@dataclass
class SkippedRecords:
    """Records left out of an aggregate, by reason"""
    missing_product: int = 0
    missing_customer: int = 0
    invalid_price: int = 0
    malformed: int = 0

    @property
    def total(self) -> int:
        return self.missing_product + self.missing_customer + self.invalid_price + self.malformed


@dataclass
class MonthlyBucket:
    """Units and profit for one calendar month"""
    year: int
    month: int  # 1-12
    units_sold: int
    profit: float

    @property
    def period(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def label(self) -> str:
        return format_month_label(self.year, self.month)


@dataclass
class MonthlySeries:
    """Chronologically ordered monthly buckets"""
    buckets: List[MonthlyBucket] = field(default_factory=list)
    skipped: SkippedRecords = field(default_factory=SkippedRecords)

    def __iter__(self) -> Iterator[MonthlyBucket]:
        return iter(self.buckets)

    def __len__(self) -> int:
        return len(self.buckets)

    def __getitem__(self, index: int) -> MonthlyBucket:
        return self.buckets[index]

    @property
    def total_units(self) -> int:
        return sum(b.units_sold for b in self.buckets)

    @property
    def total_profit(self) -> float:
        return sum(b.profit for b in self.buckets)


@dataclass(frozen=True)
class CategoryCount:
    """Number of product listings carrying a category"""
    category: str
    count: int


@dataclass
class CustomerPurchase:
    """One resolved sale of a customer"""
    sale_id: str
    product_id: str
    product_name: str
    date: datetime
    amount: int
    price: float
    line_total: float


@dataclass
class CustomerPurchases:
    """A customer's purchases in store order and their running total"""
    customer_id: str
    purchases: List[CustomerPurchase] = field(default_factory=list)
    total_spent: float = 0.0
    skipped: SkippedRecords = field(default_factory=SkippedRecords)


@dataclass
class SaleLine:
    """A sale with its product and customer names resolved for listing"""
    sale_id: str
    product_id: str
    product_name: str
    customer_id: str
    customer_name: str
    amount: int
    date: datetime
    total: float
    resolved: bool


@dataclass
class DashboardReport:
    """Everything the dashboard charts need in one pass"""
    monthly: MonthlySeries
    categories: List[CategoryCount]
    generated_at: datetime = field(default_factory=datetime.utcnow)
