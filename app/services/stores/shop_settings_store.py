"""Key/value access to the ``shop_settings`` table."""
from typing import Any, Optional

from app.models.base import SupabaseModel
from app.models.shop_settings import SettingKey, ShopSetting
from app.utils.supabase_helpers import safe_execute, safe_supabase_insert, safe_supabase_select


class ShopSettingsStore:
    table_name = ShopSetting.table_name

    def __init__(self, supabase):
        self.supabase = supabase

    def get(self, key: SettingKey) -> Optional[Any]:
        rows = safe_supabase_select(
            self.supabase, self.table_name, select_fields="key, value", filters={"key": key.value}, limit=1
        )
        if not rows:
            return None
        return ShopSetting.from_dict(rows[0]).value

    def set(self, key: SettingKey, value: Any) -> Any:
        """Update the row for ``key``, creating it on first write."""
        setting = ShopSetting(key=key.value, value=value, updated_at=SupabaseModel.timestamp())
        data = setting.to_supabase_dict()
        query = self.supabase.table(self.table_name).update(data).eq("key", key.value)
        rows = safe_execute(query, self.table_name, "Update").data
        if not rows:
            safe_supabase_insert(self.supabase, self.table_name, data)
        return value
