"""Thin data-access wrappers over Supabase tables."""
from .order_store import OrderStore
from .profile_store import ProfileStore
from .shop_settings_store import ShopSettingsStore

__all__ = ["OrderStore", "ProfileStore", "ShopSettingsStore"]
