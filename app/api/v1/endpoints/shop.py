"""Public storefront endpoints."""
from datetime import datetime
from typing import Any, Optional
from zoneinfo import ZoneInfo
from fastapi import APIRouter, Depends, status

from app.config.settings import settings
from app.core.dependencies import (
    get_catalog_service,
    get_catering_service,
    get_identity_optional,
    get_settings_service,
)
from app.core.supabase_auth import Identity
from app.schemas.catering import CateringBookingCreate
from app.services.business.catalog_service import CatalogService
from app.services.business.catering_service import CateringService
from app.services.business.settings_service import SettingsService

router = APIRouter()


@router.get("/products")
def list_shop_products(catalog: CatalogService = Depends(get_catalog_service)) -> Any:
    """In-stock products with their category, newest first."""
    return catalog.list_products(in_stock_only=True)


@router.get("/categories")
def list_shop_categories(catalog: CatalogService = Depends(get_catalog_service)) -> Any:
    return [category.to_supabase_dict() for category in catalog.list_categories(order_by="title")]


@router.get("/status")
def get_shop_status(shop_settings: SettingsService = Depends(get_settings_service)) -> Any:
    """Open/closed state, today's holiday and the next opening time."""
    return shop_settings.shop_status(datetime.now(ZoneInfo(settings.SHOP_TIMEZONE)))


@router.get("/banners")
def list_shop_banners(shop_settings: SettingsService = Depends(get_settings_service)) -> Any:
    return shop_settings.get_banners()


@router.post("/catering", status_code=status.HTTP_201_CREATED)
def create_catering_booking(
    booking: CateringBookingCreate,
    identity: Optional[Identity] = Depends(get_identity_optional),
    catering: CateringService = Depends(get_catering_service),
) -> Any:
    """Submit a catering request. Signing in is optional; the booking is linked when it is."""
    created = catering.create_booking(
        booking.model_dump(mode="json"),
        user_id=identity.user_id if identity else None,
    )
    return created.to_supabase_dict()
