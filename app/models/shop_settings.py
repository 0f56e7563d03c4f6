"""Shop settings rows (``shop_settings`` table, one JSON value per key)."""
from enum import Enum
from app.models.base import SupabaseModel


class SettingKey(str, Enum):
    SHOP_INFO = "shop_info"
    OPENING_HOURS = "opening_hours"
    HOLIDAYS = "holidays"
    BANNERS = "banners"


WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


class ShopSetting(SupabaseModel):
    table_name = "shop_settings"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.key = kwargs.get('key')
        self.value = kwargs.get('value')
        self.updated_at = kwargs.get('updated_at')
