"""Shop settings endpoints."""
from typing import Any, Dict, List
from fastapi import APIRouter, Body, Depends
from pydantic import TypeAdapter, ValidationError

from app.core.dependencies import get_settings_service, require_permission
from app.core.errors import InvalidInput
from app.core.permissions import Permission
from app.core.supabase_auth import Identity
from app.models.shop_settings import SettingKey
from app.schemas.shop_settings import Banner, Holiday, OpeningHours, ShopInfo
from app.services.business.settings_service import SettingsService

router = APIRouter()
require_settings = require_permission(Permission.SETTINGS)

SETTING_SCHEMAS: Dict[SettingKey, TypeAdapter] = {
    SettingKey.SHOP_INFO: TypeAdapter(ShopInfo),
    SettingKey.OPENING_HOURS: TypeAdapter(OpeningHours),
    SettingKey.HOLIDAYS: TypeAdapter(List[Holiday]),
    SettingKey.BANNERS: TypeAdapter(List[Banner]),
}


def validate_setting(key: SettingKey, value: Any) -> Any:
    """Validate a settings payload and return its stored (camelCase JSON) form."""
    adapter = SETTING_SCHEMAS[key]
    try:
        parsed = adapter.validate_python(value)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise InvalidInput(f"Invalid {key.value}: {location} {first['msg']}".strip())
    return adapter.dump_python(parsed, by_alias=True, mode="json", exclude_none=True)


@router.get("")
def get_settings(
    identity: Identity = Depends(require_settings),
    shop_settings: SettingsService = Depends(get_settings_service),
) -> Any:
    return shop_settings.get_all()


@router.put("/{key}")
def update_setting(
    key: SettingKey,
    value: Any = Body(...),
    identity: Identity = Depends(require_settings),
    shop_settings: SettingsService = Depends(get_settings_service),
) -> Any:
    """Replace one settings value (``shop_info``, ``opening_hours``, ``holidays`` or ``banners``)."""
    data = validate_setting(key, value)
    if key == SettingKey.SHOP_INFO:
        return shop_settings.update_shop_info(data)
    if key == SettingKey.OPENING_HOURS:
        return shop_settings.update_opening_hours(data)
    if key == SettingKey.HOLIDAYS:
        return shop_settings.update_holidays(data)
    return shop_settings.update_banners(data)


@router.post("/holidays")
def add_holiday(
    holiday: Holiday,
    identity: Identity = Depends(require_settings),
    shop_settings: SettingsService = Depends(get_settings_service),
) -> Any:
    return shop_settings.add_holiday(holiday.to_wire())


@router.delete("/holidays/{holiday_date}")
def remove_holiday(
    holiday_date: str,
    identity: Identity = Depends(require_settings),
    shop_settings: SettingsService = Depends(get_settings_service),
) -> Any:
    return shop_settings.remove_holiday(holiday_date)
