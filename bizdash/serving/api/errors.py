"""
API Error Handlers

Translate store and aggregation errors into consistent JSON responses.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
import structlog

from bizdash.analytics.aggregation import MissingCustomerError
from bizdash.analytics.resolution import ReferentialIntegrityError
from bizdash.database.store import RecordNotFoundError, StoreError

logger = structlog.get_logger(__name__)


async def handle_store_error(request: Request, exc: StoreError) -> JSONResponse:
    """Store unreachable or refused: generic message, details only in logs"""
    logger.error(
        "Record store failure",
        path=request.url.path,
        operation=exc.operation,
        collection=exc.collection,
        reason=exc.reason,
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "detail": "Record store unavailable, please try again later",
            "error_code": "STORE_UNAVAILABLE",
            "path": str(request.url.path),
        },
    )


async def handle_not_found(request: Request, exc: RecordNotFoundError) -> JSONResponse:
    """Missing record"""
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "detail": str(exc),
            "error_code": "NOT_FOUND",
            "path": str(request.url.path),
        },
    )


async def handle_referential_integrity(
    request: Request, exc: ReferentialIntegrityError
) -> JSONResponse:
    """Strict reference policy rejected the aggregation"""
    logger.warning(
        "Aggregation rejected by reference policy",
        path=request.url.path,
        collection=exc.collection,
        missing=len(exc.missing_ids),
    )
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "detail": str(exc),
            "error_code": "REFERENTIAL_INTEGRITY",
            "missing_ids": sorted(set(exc.missing_ids)),
            "path": str(request.url.path),
        },
    )


async def handle_missing_customer(request: Request, exc: MissingCustomerError) -> JSONResponse:
    """Purchase report requested without a customer"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": str(exc),
            "error_code": "CUSTOMER_REQUIRED",
            "path": str(request.url.path),
        },
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app"""
    app.add_exception_handler(StoreError, handle_store_error)
    app.add_exception_handler(RecordNotFoundError, handle_not_found)
    app.add_exception_handler(ReferentialIntegrityError, handle_referential_integrity)
    app.add_exception_handler(MissingCustomerError, handle_missing_customer)
