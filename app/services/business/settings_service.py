"""Shop settings: shop info, opening hours, holidays and banners."""
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
import logging

from app.config.settings import settings
from app.core.errors import InvalidInput
from app.models.shop_settings import WEEKDAYS, SettingKey
from app.services.stores import ShopSettingsStore

logger = logging.getLogger(__name__)


def _minutes(hhmm: str) -> int:
    hours, _, minutes = hhmm.partition(":")
    return int(hours) * 60 + int(minutes or 0)


class SettingsService:
    """Typed access to the ``shop_settings`` key/value rows."""

    def __init__(self, store: ShopSettingsStore, default_delivery_fee: float = settings.DEFAULT_DELIVERY_FEE):
        self.store = store
        self.default_delivery_fee = default_delivery_fee

    def get_all(self) -> Dict[str, Any]:
        return {
            SettingKey.SHOP_INFO.value: self.get_shop_info(),
            SettingKey.OPENING_HOURS.value: self.get_opening_hours(),
            SettingKey.HOLIDAYS.value: self.get_holidays(),
            SettingKey.BANNERS.value: self.get_banners(),
        }

    # Shop info

    def get_shop_info(self) -> Dict[str, Any]:
        return self.store.get(SettingKey.SHOP_INFO) or {}

    def update_shop_info(self, info: Dict[str, Any]) -> Dict[str, Any]:
        fee = info.get("deliveryFee")
        if fee is not None and float(fee) < 0:
            raise InvalidInput("Delivery fee cannot be negative")
        logger.info("Shop info updated")
        return self.store.set(SettingKey.SHOP_INFO, info)

    def get_delivery_fee(self) -> Decimal:
        """Configured delivery fee; the default applies only when none is set (0 is a valid fee)."""
        fee = self.get_shop_info().get("deliveryFee")
        if fee is None:
            return Decimal(str(self.default_delivery_fee))
        return Decimal(str(fee))

    # Opening hours

    def get_opening_hours(self) -> Optional[Dict[str, Any]]:
        return self.store.get(SettingKey.OPENING_HOURS)

    def update_opening_hours(self, hours: Dict[str, Any]) -> Dict[str, Any]:
        logger.info("Opening hours updated")
        return self.store.set(SettingKey.OPENING_HOURS, hours)

    def is_shop_open(self, now: datetime) -> bool:
        """
        Whether ``now`` (shop-local) falls inside today's window, both ends
        inclusive. With no hours configured the shop counts as open.
        """
        hours = self.get_opening_hours()
        if not hours:
            return True
        schedule = hours.get(WEEKDAYS[now.weekday()])
        if not schedule or schedule.get("closed"):
            return False
        current = now.hour * 60 + now.minute
        return _minutes(schedule["open"]) <= current <= _minutes(schedule["close"])

    def next_opening_time(self, now: datetime) -> Optional[Dict[str, str]]:
        """The next opening (``{"day", "time"}``) after ``now``, or None if every day is closed."""
        hours = self.get_opening_hours()
        if not hours:
            return None
        current = now.hour * 60 + now.minute
        for offset in range(8):
            day = WEEKDAYS[(now.weekday() + offset) % 7]
            schedule = hours.get(day)
            if not schedule or schedule.get("closed"):
                continue
            if offset == 0 and current >= _minutes(schedule["open"]):
                continue
            return {"day": day, "time": schedule["open"]}
        return None

    # Holidays

    def get_holidays(self) -> List[Dict[str, Any]]:
        return self.store.get(SettingKey.HOLIDAYS) or []

    def update_holidays(self, holidays: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        ordered = sorted(holidays, key=lambda h: h["date"])
        return self.store.set(SettingKey.HOLIDAYS, ordered)

    def add_holiday(self, holiday: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Add a holiday, replacing any existing entry for the same date."""
        holidays = [h for h in self.get_holidays() if h.get("date") != holiday["date"]]
        holidays.append(holiday)
        logger.info(f"Holiday added for {holiday['date']}")
        return self.update_holidays(holidays)

    def remove_holiday(self, holiday_date: str) -> List[Dict[str, Any]]:
        holidays = [h for h in self.get_holidays() if h.get("date") != holiday_date]
        return self.update_holidays(holidays)

    def holiday_on(self, day: date) -> Optional[Dict[str, Any]]:
        iso = day.isoformat()
        for holiday in self.get_holidays():
            if holiday.get("date") == iso:
                return holiday
        return None

    # Banners

    def get_banners(self) -> List[Dict[str, Any]]:
        banners = self.store.get(SettingKey.BANNERS) or []
        return sorted(banners, key=lambda b: b.get("order", 0))

    def update_banners(self, banners: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Store banners in the given order, renumbering ``order`` from 0."""
        renumbered = [{**banner, "order": index} for index, banner in enumerate(banners)]
        return self.store.set(SettingKey.BANNERS, renumbered)

    # Storefront

    def shop_status(self, now: datetime) -> Dict[str, Any]:
        holiday = self.holiday_on(now.date())
        is_open = holiday is None and self.is_shop_open(now)
        return {
            "open": is_open,
            "holiday": holiday,
            "nextOpeningTime": None if is_open else self.next_opening_time(now),
            "shopInfo": self.get_shop_info(),
        }
