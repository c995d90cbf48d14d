"""
Shared API Response Models

Responses use camelCase keys, matching the stored document field names.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from bizdash.analytics.reports import SkippedRecords


class CamelModel(BaseModel):
    """Response model serialized with camelCase keys"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SkippedResponse(CamelModel):
    """Records left out of an aggregate"""
    missing_product: int
    missing_customer: int
    invalid_price: int
    malformed: int
    total: int

    @classmethod
    def from_skipped(cls, skipped: SkippedRecords) -> "SkippedResponse":
        return cls(
            missing_product=skipped.missing_product,
            missing_customer=skipped.missing_customer,
            invalid_price=skipped.invalid_price,
            malformed=skipped.malformed,
            total=skipped.total,
        )
