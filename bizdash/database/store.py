"""
Record Store Client

Thin interface over the document store: named collections of schema-less
JSON documents. Records are returned as plain dicts with their ``id`` merged
in, in the store's natural (insertion) order.
"""

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Iterable, List, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bizdash.database.connection import session_scope
from bizdash.database.models import Document, new_document_id

logger = structlog.get_logger(__name__)

Record = Dict[str, Any]


class StoreError(Exception):
    """Connectivity or permission failure while talking to the store"""

    def __init__(self, operation: str, collection: str, reason: str):
        self.operation = operation
        self.collection = collection
        self.reason = reason
        super().__init__(f"{operation} on '{collection}' failed: {reason}")


class RecordNotFoundError(Exception):
    """No document with the given id in the collection"""

    def __init__(self, collection: str, record_id: str):
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"No record '{record_id}' in '{collection}'")


class RecordStore(ABC):
    """Read/write interface over named collections"""

    @abstractmethod
    async def list_all(self, collection: str) -> List[Record]:
        """All records of a collection"""

    @abstractmethod
    async def get_by_id(self, collection: str, record_id: str) -> Optional[Record]:
        """One record, or None when it does not exist"""

    @abstractmethod
    async def get_many(self, collection: str, record_ids: Iterable[str]) -> Dict[str, Record]:
        """Batch lookup; missing ids are absent from the result"""

    @abstractmethod
    async def query_by_field(self, collection: str, field: str, value: Any) -> List[Record]:
        """Records whose top-level ``field`` equals ``value``"""

    @abstractmethod
    async def add(self, collection: str, data: Record, record_id: Optional[str] = None) -> str:
        """Insert a record and return its id"""

    @abstractmethod
    async def update(self, collection: str, record_id: str, data: Record) -> Record:
        """Merge ``data`` into an existing record and return the result"""

    @abstractmethod
    async def delete(self, collection: str, record_id: str) -> None:
        """Remove a record"""


def _field_clause(field: str, value: Any):
    element = Document.data[field]
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return element.as_boolean() == value
    if isinstance(value, int):
        return element.as_integer() == value
    if isinstance(value, float):
        return element.as_float() == value
    return element.as_string() == str(value)


def _body(data: Record) -> Record:
    return {k: v for k, v in data.items() if k != "id"}


class SqlRecordStore(RecordStore):
    """
    Record store backed by the ``documents`` table.

    Example:
        store = SqlRecordStore(get_session_factory())
        product_id = await store.add("products", {"name": "Mouse", "price": 29.9})
        products = await store.list_all("products")
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self, operation: str, collection: str) -> AsyncGenerator[AsyncSession, None]:
        try:
            async with session_scope(self._session_factory) as session:
                yield session
        except SQLAlchemyError as e:
            logger.error(
                "Record store operation failed",
                operation=operation,
                collection=collection,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise StoreError(operation, collection, type(e).__name__) from e

    async def _load(self, session: AsyncSession, collection: str, record_id: str) -> Optional[Document]:
        result = await session.execute(
            select(Document).where(
                Document.collection == collection,
                Document.doc_id == record_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_all(self, collection: str) -> List[Record]:
        async with self._session("list_all", collection) as session:
            result = await session.execute(
                select(Document)
                .where(Document.collection == collection)
                .order_by(Document.seq)
            )
            records = [doc.to_record() for doc in result.scalars().all()]

        logger.debug("Collection listed", collection=collection, count=len(records))
        return records

    async def get_by_id(self, collection: str, record_id: str) -> Optional[Record]:
        async with self._session("get_by_id", collection) as session:
            doc = await self._load(session, collection, record_id)
            return doc.to_record() if doc else None

    async def get_many(self, collection: str, record_ids: Iterable[str]) -> Dict[str, Record]:
        ids = sorted({str(i) for i in record_ids if i})
        if not ids:
            return {}

        async with self._session("get_many", collection) as session:
            result = await session.execute(
                select(Document).where(
                    Document.collection == collection,
                    Document.doc_id.in_(ids),
                )
            )
            found = {doc.doc_id: doc.to_record() for doc in result.scalars().all()}

        logger.debug(
            "Batch lookup completed",
            collection=collection,
            requested=len(ids),
            found=len(found),
        )
        return found

    async def query_by_field(self, collection: str, field: str, value: Any) -> List[Record]:
        async with self._session("query_by_field", collection) as session:
            result = await session.execute(
                select(Document)
                .where(
                    Document.collection == collection,
                    _field_clause(field, value),
                )
                .order_by(Document.seq)
            )
            return [doc.to_record() for doc in result.scalars().all()]

    async def add(self, collection: str, data: Record, record_id: Optional[str] = None) -> str:
        doc = Document(
            collection=collection,
            doc_id=record_id or new_document_id(),
            data=_body(data),
        )
        async with self._session("add", collection) as session:
            session.add(doc)

        logger.info("Record added", collection=collection, record_id=doc.doc_id)
        return doc.doc_id

    async def update(self, collection: str, record_id: str, data: Record) -> Record:
        async with self._session("update", collection) as session:
            doc = await self._load(session, collection, record_id)
            if doc is None:
                raise RecordNotFoundError(collection, record_id)
            # Reassign so the JSON column is flagged dirty
            doc.data = {**(doc.data or {}), **_body(data)}
            record = doc.to_record()

        logger.info("Record updated", collection=collection, record_id=record_id)
        return record

    async def delete(self, collection: str, record_id: str) -> None:
        async with self._session("delete", collection) as session:
            doc = await self._load(session, collection, record_id)
            if doc is None:
                raise RecordNotFoundError(collection, record_id)
            await session.delete(doc)

        logger.info("Record deleted", collection=collection, record_id=record_id)
