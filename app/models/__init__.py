"""
Database models package.

This file makes it easy to import all models at once.
"""

from .base import SupabaseModel
from .profile import UserProfile, UserRole
from .order import Order, OrderStatus
from .catering import CateringBooking, CateringStatus
from .catalog import Category, Product
from .shop_settings import SettingKey, ShopSetting

__all__ = [
    "SupabaseModel",
    "UserProfile",
    "UserRole",
    "Order",
    "OrderStatus",
    "CateringBooking",
    "CateringStatus",
    "Category",
    "Product",
    "SettingKey",
    "ShopSetting",
]
