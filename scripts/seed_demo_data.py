"""
Demo Data Seeder

Fills the record store with Faker-generated products, customers and sales
so the dashboard has something to show. A share of the documents is written
in the older shapes the store still contains in the wild (string prices with
decimal commas, ``amount`` for stock, ``endereco`` for the address, and
timestamp dicts for sale dates).

Usage:
    python scripts/seed_demo_data.py --products 50 --customers 200 --sales 2000
"""

import argparse
import asyncio
import random
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

import structlog
from faker import Faker

from bizdash.config import get_settings
from bizdash.config.logging import configure_logging
from bizdash.database.connection import close_database, get_session_factory, init_database
from bizdash.database.store import SqlRecordStore

logger = structlog.get_logger(__name__)

CATEGORIES = ["electronics", "clothing", "home", "sports", "beauty", "books"]
BRANDS = ["Acme", "Globex", "Initech", "Umbrella", "Stark", "Wayne"]


def _legacy_price(price: float) -> str:
    return f"R$ {price:.2f}".replace(".", ",")


def make_product(fake: Faker, legacy: bool) -> Dict[str, Any]:
    price = round(random.uniform(5, 2500), 2)
    stock = random.randint(0, 500)
    doc = {
        "name": f"{fake.word().title()} {fake.word().title()}",
        "category": random.choice(CATEGORIES),
        "brand": random.choice(BRANDS),
    }
    if legacy:
        doc.update(price=_legacy_price(price), amount=stock)
    else:
        doc.update(price=price, stock=stock)
    return doc


def make_customer(fake: Faker, legacy: bool) -> Dict[str, Any]:
    address_key = "endereco" if legacy else "address"
    return {
        "name": fake.name(),
        "email": fake.email(),
        "phone": fake.phone_number(),
        address_key: fake.address().replace("\n", ", "),
    }


def make_sale(product_id: str, customer_id: str, when: datetime, legacy: bool) -> Dict[str, Any]:
    if legacy:
        date: Any = {"seconds": int(when.timestamp()), "nanoseconds": 0}
    else:
        date = when.isoformat()
    return {
        "productId": product_id,
        "customerId": customer_id,
        "amount": random.randint(1, 5),
        "date": date,
    }


async def seed(n_products: int, n_customers: int, n_sales: int, months: int, legacy_share: float) -> None:
    settings = get_settings()
    collections = settings.store

    await init_database()
    store = SqlRecordStore(get_session_factory())
    fake = Faker()

    def legacy() -> bool:
        return random.random() < legacy_share

    try:
        product_ids: List[str] = []
        for _ in range(n_products):
            product_ids.append(await store.add(collections.products_collection, make_product(fake, legacy())))
        logger.info("Products seeded", count=len(product_ids))

        customer_ids: List[str] = []
        for _ in range(n_customers):
            customer_ids.append(await store.add(collections.customers_collection, make_customer(fake, legacy())))
        logger.info("Customers seeded", count=len(customer_ids))

        now = datetime.now(timezone.utc)
        start = now - timedelta(days=30 * months)
        span = (now - start).total_seconds()
        for _ in range(n_sales):
            when = start + timedelta(seconds=random.uniform(0, span))
            await store.add(
                collections.sales_collection,
                make_sale(random.choice(product_ids), random.choice(customer_ids), when, legacy()),
            )
        logger.info("Sales seeded", count=n_sales, months=months)
    finally:
        await close_database()


def main():
    parser = argparse.ArgumentParser(description="Seed the record store with demo data")
    parser.add_argument("--products", type=int, default=50)
    parser.add_argument("--customers", type=int, default=200)
    parser.add_argument("--sales", type=int, default=2000)
    parser.add_argument("--months", type=int, default=12, help="How far back sales go")
    parser.add_argument("--legacy-share", type=float, default=0.2, help="Share of old-shape documents")
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    if args.products < 1 or args.customers < 1:
        parser.error("need at least one product and one customer")

    random.seed(args.seed)
    Faker.seed(args.seed)
    configure_logging()

    asyncio.run(seed(args.products, args.customers, args.sales, args.months, args.legacy_share))


if __name__ == "__main__":
    main()
