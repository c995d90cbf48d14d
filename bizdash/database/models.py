"""
Database Models - Document Table

The record store keeps schema-less documents, one row per document, grouped
by collection name. Field presence and typing inside ``data`` are conventions
of the callers, never enforced here.
"""

from datetime import datetime
from typing import Any, Dict
import uuid

from sqlalchemy import (
    JSON,
    DateTime,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


def new_document_id() -> str:
    """Generate an opaque document identifier"""
    return uuid.uuid4().hex


class Document(Base):
    """
    Document Table

    Stores one JSON document per row. ``doc_id`` is unique within its
    collection; the same id may appear in different collections.
    """
    __tablename__ = "documents"

    # Insertion order is the store's natural return order
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    collection: Mapped[str] = mapped_column(String(100), nullable=False)
    doc_id: Mapped[str] = mapped_column(String(64), nullable=False, default=new_document_id)
    data: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint("collection", "doc_id", name="uq_documents_collection_doc"),
        Index("ix_documents_collection_seq", "collection", "seq"),
    )

    def to_record(self) -> Dict[str, Any]:
        """Return the document body with its id merged in"""
        record = dict(self.data or {})
        record["id"] = self.doc_id
        return record
