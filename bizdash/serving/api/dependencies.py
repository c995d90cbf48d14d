"""
FastAPI Dependencies

Route handlers receive the record store and reporting service through
these providers, so tests can swap the store via ``dependency_overrides``.
"""

from fastapi import Depends

from bizdash.analytics.service import ReportingService
from bizdash.config import Settings, get_settings
from bizdash.database.connection import get_session_factory
from bizdash.database.store import RecordStore, SqlRecordStore


def get_record_store() -> RecordStore:
    """Record store bound to the application's session factory"""
    return SqlRecordStore(get_session_factory())


def get_app_settings() -> Settings:
    return get_settings()


def get_reporting_service(
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_app_settings),
) -> ReportingService:
    return ReportingService(store, settings)
