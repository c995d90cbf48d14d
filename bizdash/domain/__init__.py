"""
Domain Module
"""
from .money import normalize_price, line_total, round_money
from .records import (
    Product,
    Customer,
    Sale,
    ProductIn,
    ProductUpdate,
    CustomerIn,
    CustomerUpdate,
    SaleIn,
    SaleUpdate,
    parse_records,
)

__all__ = [
    "normalize_price",
    "line_total",
    "round_money",
    "Product",
    "Customer",
    "Sale",
    "ProductIn",
    "ProductUpdate",
    "CustomerIn",
    "CustomerUpdate",
    "SaleIn",
    "SaleUpdate",
    "parse_records",
]
