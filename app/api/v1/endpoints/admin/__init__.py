"""Back-office API. Every route declares the permission it needs."""
from fastapi import APIRouter

from . import admins, analytics, catering, categories, customers, dashboard, orders, products, settings

router = APIRouter()
router.include_router(dashboard.router, prefix="/dashboard")
router.include_router(orders.router, prefix="/orders")
router.include_router(products.router, prefix="/products")
router.include_router(categories.router, prefix="/categories")
router.include_router(catering.router, prefix="/catering")
router.include_router(customers.router, prefix="/customers")
router.include_router(admins.router, prefix="/admins")
router.include_router(analytics.router, prefix="/analytics")
router.include_router(settings.router, prefix="/settings")
