"""
Products API Endpoints

CRUD over the products collection.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
import structlog

from bizdash.analytics.aggregation import filter_by_name
from bizdash.config import Settings
from bizdash.database.store import RecordStore
from bizdash.domain.records import Product, ProductIn, ProductUpdate, parse_records
from bizdash.serving.api.dependencies import get_app_settings, get_record_store

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.get("", response_model=List[Product])
async def list_products(
    search: Optional[str] = Query(None, description="Case-insensitive name filter"),
    category: Optional[str] = None,
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_app_settings),
) -> List[Product]:
    """List products, optionally filtered by name and exact category."""
    documents = await store.list_all(settings.store.products_collection)
    products, malformed = parse_records(Product, documents)

    if category is not None:
        products = [p for p in products if p.category == category]
    products = filter_by_name(products, search)

    logger.info("Products listed", count=len(products), malformed=malformed, search=search)
    return products


@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductIn,
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_app_settings),
) -> Product:
    """Create a product."""
    document = payload.to_document()
    product_id = await store.add(settings.store.products_collection, document)
    return Product.model_validate({**document, "id": product_id})


@router.get("/{product_id}", response_model=Product)
async def get_product(
    product_id: str,
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_app_settings),
) -> Product:
    """Get product details."""
    record = await store.get_by_id(settings.store.products_collection, product_id)
    if not record:
        raise HTTPException(status_code=404, detail="Product not found")
    return Product.model_validate(record)


@router.put("/{product_id}", response_model=Product)
async def update_product(
    product_id: str,
    payload: ProductUpdate,
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_app_settings),
) -> Product:
    """Update the submitted fields of a product."""
    record = await store.update(
        settings.store.products_collection, product_id, payload.to_document(partial=True)
    )
    return Product.model_validate(record)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str,
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """
    Delete a product.

    Sales referencing it are kept; they show up as referential gaps.
    """
    await store.delete(settings.store.products_collection, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
