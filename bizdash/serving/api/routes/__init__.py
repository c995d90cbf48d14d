"""
API Routes Module
"""
from .health import router as health_router
from .products import router as products_router
from .customers import router as customers_router
from .sales import router as sales_router
from .purchases import router as purchases_router
from .analytics import router as analytics_router

__all__ = [
    "health_router",
    "products_router",
    "customers_router",
    "sales_router",
    "purchases_router",
    "analytics_router",
]
