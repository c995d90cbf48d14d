"""
Domain Records

Pydantic models for the three stored record types and their write payloads.

Read models (``Product``, ``Customer``, ``Sale``) are lenient: the store is
schema-less and older documents use other field names or types. Write models
(``ProductIn``, ``CustomerIn``, ``SaleIn``) are strict and produce the
canonical document shape.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type, TypeVar

import structlog
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from bizdash.domain.money import normalize_price

logger = structlog.get_logger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def _coerce_timestamp(value: Any) -> Any:
    """Accept date-only strings, date objects and {seconds, nanoseconds} dicts"""
    if isinstance(value, dict) and "seconds" in value:
        seconds = value["seconds"]
        nanos = value.get("nanoseconds", 0)
        if not isinstance(seconds, (int, float)) or not isinstance(nanos, (int, float)):
            raise ValueError("timestamp seconds/nanoseconds must be numbers")
        return datetime.fromtimestamp(seconds + nanos / 1_000_000_000, tz=timezone.utc)
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, datetime.min.time())
    if isinstance(value, str) and len(value) == 10:
        return datetime.combine(date.fromisoformat(value), datetime.min.time())
    return value


def _blank_if_none(value: Any) -> Any:
    return "" if value is None else value


# =============================================================================
# STORED RECORDS
# =============================================================================

class Product(BaseModel):
    """Product as read from the store"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str = ""
    price: Optional[float] = None
    category: str = ""
    brand: str = ""
    stock: int = Field(default=0, validation_alias=AliasChoices("stock", "amount"))

    @field_validator("price", mode="before")
    @classmethod
    def normalize(cls, v: Any) -> Optional[float]:
        return normalize_price(v)

    @field_validator("name", "category", "brand", mode="before")
    @classmethod
    def blank_strings(cls, v: Any) -> Any:
        return _blank_if_none(v)

    @property
    def has_valid_price(self) -> bool:
        return self.price is not None


class Customer(BaseModel):
    """Customer as read from the store"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = Field(default="", validation_alias=AliasChoices("address", "endereco"))

    @field_validator("name", "email", "phone", "address", mode="before")
    @classmethod
    def blank_strings(cls, v: Any) -> Any:
        return _blank_if_none(v)


class Sale(BaseModel):
    """Sale as read from the store; its value is amount x product price"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    product_id: str = Field(alias="productId")
    customer_id: str = Field(alias="customerId")
    amount: int = Field(gt=0)
    date: datetime

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> Any:
        return _coerce_timestamp(v)


def parse_records(
    model: Type[RecordT],
    documents: Iterable[Dict[str, Any]],
) -> Tuple[List[RecordT], int]:
    """
    Validate raw documents into records, skipping malformed ones.

    Returns:
        Tuple of (records in input order, number of malformed documents)
    """
    records: List[RecordT] = []
    malformed = 0

    for doc in documents:
        try:
            records.append(model.model_validate(doc))
        except ValidationError as e:
            malformed += 1
            logger.warning(
                "Skipping malformed record",
                model=model.__name__,
                record_id=doc.get("id"),
                errors=e.error_count(),
            )

    return records, malformed


# =============================================================================
# WRITE PAYLOADS
# =============================================================================

class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    def to_document(self, partial: bool = False) -> Dict[str, Any]:
        """Canonical stored shape (camelCase keys, JSON-safe values)"""
        return self.model_dump(by_alias=True, mode="json", exclude_unset=partial, exclude_none=partial)


class _PartialPayload(_Payload):
    """Update payload: omitted fields stay as stored, explicit nulls are refused"""

    @model_validator(mode="before")
    @classmethod
    def reject_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            nulls = sorted(key for key, value in data.items() if value is None)
            if nulls:
                raise ValueError(f"fields cannot be null: {', '.join(nulls)}")
        return data


def _required_price(v: Any) -> Any:
    if v is None:
        return v
    price = normalize_price(v)
    if price is None:
        raise ValueError("price must be a non-negative number")
    return price


class ProductIn(_Payload):
    """Create a product"""
    name: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    category: str = ""
    brand: str = ""
    stock: int = Field(0, ge=0)

    @field_validator("price", mode="before")
    @classmethod
    def parse_price(cls, v: Any) -> Any:
        return _required_price(v)


class ProductUpdate(_PartialPayload):
    """Partial product update"""
    name: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    category: Optional[str] = None
    brand: Optional[str] = None
    stock: Optional[int] = Field(None, ge=0)

    @field_validator("price", mode="before")
    @classmethod
    def parse_price(cls, v: Any) -> Any:
        return _required_price(v)


class CustomerIn(_Payload):
    """Create a customer"""
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = ""
    address: str = ""


class CustomerUpdate(_PartialPayload):
    """Partial customer update"""
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class SaleIn(_Payload):
    """Register a sale"""
    product_id: str = Field(..., alias="productId", min_length=1)
    customer_id: str = Field(..., alias="customerId", min_length=1)
    amount: int = Field(..., gt=0)
    date: datetime

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> Any:
        return _coerce_timestamp(v)


class SaleUpdate(_PartialPayload):
    """Partial sale update"""
    product_id: Optional[str] = Field(None, alias="productId", min_length=1)
    customer_id: Optional[str] = Field(None, alias="customerId", min_length=1)
    amount: Optional[int] = Field(None, gt=0)
    date: Optional[datetime] = None

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> Any:
        return _coerce_timestamp(v)
