"""Main API router."""
from fastapi import APIRouter
from app.api.v1.endpoints import (
    analytics,
    checkout,
    shop,
    user_orders,
    webhooks,
)
from app.api.v1.endpoints import admin

# Create main router
api_router = APIRouter()

api_router.include_router(
    checkout.router,
    prefix="/checkout",
    tags=["Checkout"]
)

api_router.include_router(
    webhooks.router,
    prefix="/webhooks",
    tags=["Webhooks"]
)

api_router.include_router(
    user_orders.router,
    prefix="/user/orders",
    tags=["Customer Orders"]
)

api_router.include_router(
    shop.router,
    prefix="/shop",
    tags=["Storefront"]
)

api_router.include_router(
    analytics.router,
    prefix="/analytics",
    tags=["Analytics"]
)

api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["Back Office"]
)
