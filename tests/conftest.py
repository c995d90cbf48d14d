"""
Test Suite Configuration
"""
from typing import Any, AsyncGenerator, Dict, List

import pytest
from httpx import ASGITransport, AsyncClient

from bizdash.config import Settings, get_settings
from bizdash.config.settings import DatabaseSettings
from bizdash.database import connection
from bizdash.database.connection import build_engine, build_session_factory, create_tables
from bizdash.database.store import SqlRecordStore
from bizdash.domain.records import Customer, Product, Sale, parse_records

# 2025-02-10T12:00:00Z
FEB_10_NOON = 1739188800

PRODUCT_DOCS: Dict[str, Dict[str, Any]] = {
    "p1": {"name": "Wireless Mouse", "price": 25.0, "category": "electronics", "brand": "Acme", "stock": 10},
    "p2": {"name": "Desk Lamp", "price": "19,90", "category": "home", "brand": "Globex", "amount": 3},
    "p3": {"name": "Broken Price", "price": "abc", "category": "electronics", "brand": "Acme"},
}

CUSTOMER_DOCS: Dict[str, Dict[str, Any]] = {
    "c1": {"name": "Ana Souza", "email": "ana@example.com", "phone": "555-0101", "endereco": "Rua A, 10"},
    "c2": {"name": "Bruno Lima", "email": "bruno@example.com", "phone": "555-0102", "address": "Main St 5"},
}

SALE_DOCS: Dict[str, Dict[str, Any]] = {
    "s1": {"productId": "p1", "customerId": "c1", "amount": 2, "date": "2025-01-15"},
    "s2": {"productId": "p2", "customerId": "c1", "amount": 1, "date": {"seconds": FEB_10_NOON, "nanoseconds": 0}},
    "s3": {"productId": "p1", "customerId": "c2", "amount": 1, "date": "2025-02-20T10:00:00"},
    "s4": {"productId": "p3", "customerId": "c2", "amount": 4, "date": "2025-03-01"},
    "s5": {"productId": "ghost", "customerId": "c1", "amount": 5, "date": "2025-03-05"},
    "s6": {"productId": "p1", "customerId": "gone-customer", "amount": 1, "date": "2024-12-31"},
}


def _with_ids(docs: Dict[str, Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [{**doc, "id": doc_id} for doc_id, doc in docs.items()]


@pytest.fixture
def products() -> List[Product]:
    return parse_records(Product, _with_ids(PRODUCT_DOCS))[0]


@pytest.fixture
def customers() -> List[Customer]:
    return parse_records(Customer, _with_ids(CUSTOMER_DOCS))[0]


@pytest.fixture
def sales() -> List[Sale]:
    return parse_records(Sale, _with_ids(SALE_DOCS))[0]


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite file"""
    return Settings(
        app_env="testing",
        debug=True,
        database=DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"),
    )


@pytest.fixture
async def test_engine(test_settings):
    """Create test database engine with the documents table"""
    engine = build_engine(test_settings.database.url)
    await create_tables(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def store(test_engine) -> SqlRecordStore:
    return SqlRecordStore(build_session_factory(test_engine))


async def _seed(store: SqlRecordStore, settings: Settings) -> None:
    collections = settings.store
    for docs, collection in (
        (PRODUCT_DOCS, collections.products_collection),
        (CUSTOMER_DOCS, collections.customers_collection),
        (SALE_DOCS, collections.sales_collection),
    ):
        for doc_id, doc in docs.items():
            await store.add(collection, doc, record_id=doc_id)


@pytest.fixture
async def seeded_store(store, test_settings) -> SqlRecordStore:
    await _seed(store, test_settings)
    return store


@pytest.fixture
async def client(monkeypatch, test_settings) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTP client over the full application.

    The global engine is initialized from the environment the same way the
    application lifespan does it.
    """
    from bizdash.serving.api import create_api_app

    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setenv("DATABASE_URL", test_settings.database.url)
    get_settings.cache_clear()

    await connection.init_database()
    app = create_api_app(with_lifespan=False)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    await connection.close_database()
    get_settings.cache_clear()


@pytest.fixture
async def seeded_client(client, test_settings) -> AsyncClient:
    await _seed(SqlRecordStore(connection.get_session_factory()), test_settings)
    return client
