"""
FastAPI Application Factory

Creates and configures the API application: middleware, error handlers
and routers.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
import structlog

from bizdash.config import Settings, get_settings
from bizdash.serving.api.errors import register_exception_handlers
from bizdash.serving.api.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from bizdash.serving.api.routes import (
    analytics_router,
    customers_router,
    health_router,
    products_router,
    purchases_router,
    sales_router,
)

logger = structlog.get_logger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    from bizdash.config.logging import configure_logging
    from bizdash.database.connection import close_database, init_database

    configure_logging()
    logger.info("Starting Business Dashboard API")

    await init_database()

    yield

    logger.info("Shutting down...")
    await close_database()


def create_api_app(settings: Optional[Settings] = None, with_lifespan: bool = True) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Settings to use instead of the cached ones
        with_lifespan: Initialize the database on startup

    Returns:
        Configured FastAPI app instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Business Dashboard API",
        description="Products, customers, sales and dashboard analytics",
        version=settings.version,
        debug=settings.debug,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan if with_lifespan else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    register_exception_handlers(app)

    app.include_router(health_router, prefix=API_PREFIX, tags=["Health"])
    app.include_router(products_router, prefix=f"{API_PREFIX}/products", tags=["Products"])
    app.include_router(customers_router, prefix=f"{API_PREFIX}/customers", tags=["Customers"])
    app.include_router(sales_router, prefix=f"{API_PREFIX}/sales", tags=["Sales"])
    app.include_router(purchases_router, prefix=f"{API_PREFIX}/purchases", tags=["Purchases"])
    app.include_router(analytics_router, prefix=f"{API_PREFIX}/analytics", tags=["Analytics"])

    @app.get(f"{API_PREFIX}/info")
    async def api_info():
        """API information endpoint."""
        return {
            "name": "Business Dashboard API",
            "version": settings.version,
            "environment": settings.app_env,
            "documentation": "/docs",
        }

    return app
