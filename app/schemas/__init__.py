"""
Pydantic models for request validation:
- base: shared configuration
- checkout: cart and delivery address
- order: admin order updates
- admin: roles, permissions and customer details
- catalog: products and categories
- catering: booking requests and admin updates
- shop_settings: shop info, opening hours, holidays, banners, page views
"""

from app.schemas.base import BaseSchema, CamelSchema
from app.schemas.checkout import CartItem, CheckoutRequest, DeliveryAddress
from app.schemas.order import OrderStatusUpdate
from app.schemas.admin import CustomerDetailsUpdate, PermissionsUpdate, RoleUpdate
from app.schemas.catalog import CategoryCreate, CategoryUpdate, ProductCreate, ProductUpdate, StockUpdate
from app.schemas.catering import CateringBookingCreate, CateringBookingUpdate
from app.schemas.shop_settings import Banner, DaySchedule, Holiday, OpeningHours, PageViewCreate, ShopInfo

__all__ = [
    "BaseSchema",
    "CamelSchema",
    "CartItem",
    "CheckoutRequest",
    "DeliveryAddress",
    "OrderStatusUpdate",
    "CustomerDetailsUpdate",
    "PermissionsUpdate",
    "RoleUpdate",
    "CategoryCreate",
    "CategoryUpdate",
    "ProductCreate",
    "ProductUpdate",
    "StockUpdate",
    "CateringBookingCreate",
    "CateringBookingUpdate",
    "Banner",
    "DaySchedule",
    "Holiday",
    "OpeningHours",
    "PageViewCreate",
    "ShopInfo",
]
