"""
Unit Tests - Domain Records
"""
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from bizdash.domain.records import (
    Customer,
    CustomerIn,
    CustomerUpdate,
    Product,
    ProductIn,
    ProductUpdate,
    Sale,
    SaleIn,
    SaleUpdate,
    parse_records,
)


class TestProduct:
    """Tests for the lenient Product read model"""

    def test_string_price_normalized(self):
        product = Product.model_validate({"id": "p1", "name": "Lamp", "price": "19,99"})
        assert product.price == pytest.approx(19.99)
        assert product.has_valid_price

    def test_garbage_price_is_invalid_not_an_error(self):
        product = Product.model_validate({"id": "p1", "name": "Lamp", "price": "n/a"})
        assert product.price is None
        assert not product.has_valid_price

    def test_legacy_stock_field(self):
        product = Product.model_validate({"id": "p1", "amount": 7})
        assert product.stock == 7

    def test_missing_optional_fields(self):
        product = Product.model_validate({"id": "p1", "category": None})
        assert product.name == ""
        assert product.category == ""
        assert product.price is None


class TestCustomer:
    """Tests for the Customer read model"""

    def test_legacy_address_field(self):
        customer = Customer.model_validate({"id": "c1", "name": "Ana", "endereco": "Rua A"})
        assert customer.address == "Rua A"

    def test_stored_email_is_not_revalidated(self):
        customer = Customer.model_validate({"id": "c1", "email": "not-an-email"})
        assert customer.email == "not-an-email"


class TestSale:
    """Tests for the Sale read model"""

    def test_date_only_string(self):
        sale = Sale.model_validate(
            {"id": "s1", "productId": "p1", "customerId": "c1", "amount": 1, "date": "2025-03-10"}
        )
        assert sale.date == datetime(2025, 3, 10)
        assert sale.product_id == "p1"
        assert sale.customer_id == "c1"

    def test_timestamp_dict(self):
        sale = Sale.model_validate(
            {
                "id": "s1",
                "productId": "p1",
                "customerId": "c1",
                "amount": 1,
                "date": {"seconds": 1739188800, "nanoseconds": 500_000_000},
            }
        )
        assert sale.date == datetime(2025, 2, 10, 12, 0, 0, 500_000, tzinfo=timezone.utc)

    @pytest.mark.parametrize("amount", [0, -1])
    def test_amount_must_be_positive(self, amount):
        with pytest.raises(ValidationError):
            Sale.model_validate(
                {"id": "s1", "productId": "p1", "customerId": "c1", "amount": amount, "date": "2025-01-01"}
            )

    def test_bad_timestamp_dict(self):
        with pytest.raises(ValidationError):
            Sale.model_validate(
                {"id": "s1", "productId": "p1", "customerId": "c1", "amount": 1, "date": {"seconds": "x"}}
            )


def test_parse_records_skips_malformed():
    documents = [
        {"id": "s1", "productId": "p1", "customerId": "c1", "amount": 1, "date": "2025-01-01"},
        {"id": "s2", "productId": "p1", "amount": 1, "date": "2025-01-01"},
        {"id": "s3", "productId": "p2", "customerId": "c1", "amount": 2, "date": "2025-01-02"},
    ]

    sales, malformed = parse_records(Sale, documents)

    assert [s.id for s in sales] == ["s1", "s3"]
    assert malformed == 1


class TestPayloads:
    """Tests for write payloads"""

    def test_product_in_document(self):
        payload = ProductIn(name="Mouse", price="29,90", category="electronics")
        assert payload.to_document() == {
            "name": "Mouse",
            "price": 29.9,
            "category": "electronics",
            "brand": "",
            "stock": 0,
        }

    def test_product_in_rejects_bad_price(self):
        with pytest.raises(ValidationError):
            ProductIn(name="Mouse", price="free")

    def test_product_in_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            ProductIn(name="Mouse", price=1, colour="red")

    def test_partial_update_only_sends_set_fields(self):
        assert ProductUpdate(price="5,00").to_document(partial=True) == {"price": 5.0}

    def test_customer_in_validates_email(self):
        with pytest.raises(ValidationError):
            CustomerIn(name="Ana", email="nope")

    def test_sale_in_uses_stored_field_names(self):
        payload = SaleIn.model_validate(
            {"productId": "p1", "customerId": "c1", "amount": 2, "date": "2025-01-15"}
        )
        assert payload.to_document() == {
            "productId": "p1",
            "customerId": "c1",
            "amount": 2,
            "date": "2025-01-15T00:00:00",
        }

    @pytest.mark.parametrize(
        "model,payload",
        [
            (ProductUpdate, {"stock": None}),
            (ProductUpdate, {"price": None}),
            (ProductUpdate, {"name": "Mouse", "category": None}),
            (CustomerUpdate, {"email": None}),
            (SaleUpdate, {"amount": None}),
        ],
    )
    def test_partial_update_rejects_null(self, model, payload):
        with pytest.raises(ValidationError):
            model.model_validate(payload)

    def test_sale_update_partial(self):
        update = SaleUpdate.model_validate({"amount": 3})
        assert update.to_document(partial=True) == {"amount": 3}
        assert update.product_id is None
