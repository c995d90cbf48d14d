"""
Reference Resolution

Sales point at products and customers by id. Resolution reports, per sale,
whether the referenced record was found; what to do about the missing ones
is decided by a ``ReferencePolicy`` chosen by the caller.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Generic, Iterable, List, Optional, Sequence, TypeVar

import structlog

from bizdash.domain.records import Sale

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class ReferencePolicy(str, Enum):
    """What to do with sales whose references do not resolve"""
    SKIP = "skip"  # aggregate the rest, report the count
    STRICT = "strict"  # fail the whole aggregation


class ReferentialIntegrityError(Exception):
    """Raised under STRICT policy when references are dangling"""

    def __init__(self, collection: str, missing_ids: Sequence[str]):
        self.collection = collection
        self.missing_ids = list(missing_ids)
        super().__init__(
            f"{len(self.missing_ids)} sale(s) reference missing {collection}: "
            f"{', '.join(sorted(set(self.missing_ids)))}"
        )


@dataclass(frozen=True)
class Resolution(Generic[T]):
    """A sale together with the record it references, if found"""
    sale: Sale
    target_id: str
    target: Optional[T]

    @property
    def found(self) -> bool:
        return self.target is not None


def index_by_id(records: Iterable[T]) -> Dict[str, T]:
    """Map records by their ``id`` attribute; later duplicates win"""
    return {record.id: record for record in records}


def resolve_products(sales: Iterable[Sale], products_by_id: Dict[str, T]) -> List[Resolution[T]]:
    """Resolve each sale's product; order follows ``sales``"""
    return [
        Resolution(sale=sale, target_id=sale.product_id, target=products_by_id.get(sale.product_id))
        for sale in sales
    ]


def resolve_customers(sales: Iterable[Sale], customers_by_id: Dict[str, T]) -> List[Resolution[T]]:
    """Resolve each sale's customer; order follows ``sales``"""
    return [
        Resolution(sale=sale, target_id=sale.customer_id, target=customers_by_id.get(sale.customer_id))
        for sale in sales
    ]


def apply_policy(
    resolutions: List[Resolution[T]],
    policy: ReferencePolicy,
    collection: str,
) -> List[Resolution[T]]:
    """
    Keep the found resolutions according to ``policy``.

    Raises:
        ReferentialIntegrityError: under STRICT when anything is missing
    """
    found = [r for r in resolutions if r.found]
    missing = [r.target_id for r in resolutions if not r.found]

    if missing:
        if policy == ReferencePolicy.STRICT:
            raise ReferentialIntegrityError(collection, missing)
        logger.info(
            "Sales with unresolved references skipped",
            collection=collection,
            skipped=len(missing),
        )

    return found
