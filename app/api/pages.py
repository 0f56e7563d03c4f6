"""
Page routes.

Each returns the data its storefront or back-office page renders. Access is
checked twice: by ``AccessGuardMiddleware`` before routing, and again here
with ``page_guard`` so a page stays protected even if the path map drifts.
"""
from typing import Any, Optional
from fastapi import APIRouter, Depends, Query

from app.core.dependencies import (
    get_analytics_service,
    get_catalog_service,
    get_catering_service,
    get_order_service,
    get_profile_service,
    get_settings_service,
    page_guard,
)
from app.core.permissions import Permission, Requirement
from app.core.supabase_auth import Identity
from app.services.analytics_service import AnalyticsService
from app.services.business.catalog_service import CatalogService
from app.services.business.catering_service import CateringService
from app.services.business.order_service import OrderService
from app.services.business.profile_service import ProfileService
from app.services.business.settings_service import SettingsService

router = APIRouter()


def _viewer(identity: Identity) -> dict:
    profile = identity.profile
    return {
        "id": identity.user_id,
        "email": identity.email,
        "full_name": profile.full_name if profile else None,
        "role": profile.role if profile else None,
        "permissions": profile.permissions if profile else None,
        "is_super_admin": bool(profile and profile.is_super_admin),
    }


@router.get("/admin")
async def admin_home_page(
    identity: Identity = Depends(page_guard(Requirement.admin())),
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> Any:
    return {"page": "admin", "viewer": _viewer(identity), "stats": await analytics.dashboard_stats(identity)}


@router.get("/admin/orders")
def admin_orders_page(
    status: Optional[str] = None,
    identity: Identity = Depends(page_guard(Requirement.permission(Permission.ORDERS))),
    order_service: OrderService = Depends(get_order_service),
) -> Any:
    return {"page": "admin/orders", "viewer": _viewer(identity), "orders": order_service.list_orders(status)}


@router.get("/admin/products")
def admin_products_page(
    identity: Identity = Depends(page_guard(Requirement.permission(Permission.PRODUCTS))),
    catalog: CatalogService = Depends(get_catalog_service),
) -> Any:
    return {
        "page": "admin/products",
        "viewer": _viewer(identity),
        "products": catalog.list_products(),
        "categories": [category.to_supabase_dict() for category in catalog.list_categories()],
    }


@router.get("/admin/categories")
def admin_categories_page(
    identity: Identity = Depends(page_guard(Requirement.permission(Permission.CATEGORIES))),
    catalog: CatalogService = Depends(get_catalog_service),
) -> Any:
    return {
        "page": "admin/categories",
        "viewer": _viewer(identity),
        "categories": [category.to_supabase_dict() for category in catalog.list_categories()],
    }


@router.get("/admin/customers")
def admin_customers_page(
    identity: Identity = Depends(page_guard(Requirement.permission(Permission.CUSTOMERS))),
    profiles: ProfileService = Depends(get_profile_service),
) -> Any:
    return {"page": "admin/customers", "viewer": _viewer(identity), "customers": profiles.list_customers()}


@router.get("/admin/catering")
def admin_catering_page(
    identity: Identity = Depends(page_guard(Requirement.permission(Permission.CATERING))),
    catering: CateringService = Depends(get_catering_service),
) -> Any:
    return {
        "page": "admin/catering",
        "viewer": _viewer(identity),
        "bookings": [booking.to_supabase_dict() for booking in catering.list_bookings()],
    }


@router.get("/admin/settings")
def admin_settings_page(
    identity: Identity = Depends(page_guard(Requirement.permission(Permission.SETTINGS))),
    shop_settings: SettingsService = Depends(get_settings_service),
) -> Any:
    return {"page": "admin/settings", "viewer": _viewer(identity), "settings": shop_settings.get_all()}


@router.get("/admin/analytics")
def admin_analytics_page(
    days: int = Query(7, ge=1, le=365),
    identity: Identity = Depends(page_guard(Requirement.permission(Permission.ANALYTICS))),
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> Any:
    return {"page": "admin/analytics", "viewer": _viewer(identity), "analytics": analytics.analytics(days)}


@router.get("/admin/admins")
def admin_admins_page(
    identity: Identity = Depends(page_guard(Requirement.super_admin())),
    profiles: ProfileService = Depends(get_profile_service),
) -> Any:
    return {
        "page": "admin/admins",
        "viewer": _viewer(identity),
        "admins": [profile.to_supabase_dict() for profile in profiles.list_admins()],
    }


@router.get("/orders")
def my_orders_page(
    identity: Identity = Depends(page_guard(Requirement.authenticated())),
    order_service: OrderService = Depends(get_order_service),
) -> Any:
    orders = order_service.list_user_orders(identity.user_id)
    return {"page": "orders", "viewer": _viewer(identity), "orders": [o.to_supabase_dict() for o in orders]}


@router.get("/checkout/success")
def checkout_success_page(
    session_id: Optional[str] = None,
    identity: Identity = Depends(page_guard(Requirement.authenticated())),
    order_service: OrderService = Depends(get_order_service),
) -> Any:
    order = order_service.get_order_by_session(identity.user_id, session_id).to_supabase_dict() if session_id else None
    return {"page": "checkout/success", "viewer": _viewer(identity), "order": order}
