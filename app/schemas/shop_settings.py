"""Shop settings payloads, stored as JSON in ``shop_settings.value``."""
import datetime
from typing import Optional
from pydantic import Field, field_validator

from app.schemas.base import CamelSchema


class ShopInfo(CamelSchema):
    name: Optional[str] = None
    cuisine: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    delivery_time_min: Optional[int] = Field(default=None, ge=0)
    delivery_time_max: Optional[int] = Field(default=None, ge=0)
    delivery_fee: Optional[float] = None
    minimum_order: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None
    logo: Optional[str] = None


class DaySchedule(CamelSchema):
    """Opening window for one weekday, ``HH:MM`` 24h strings."""
    open: str = "09:00"
    close: str = "21:00"
    closed: bool = False

    @field_validator("open", "close")
    @classmethod
    def validate_time(cls, v: str) -> str:
        hours, sep, minutes = v.partition(":")
        if not sep or not hours.isdigit() or not minutes.isdigit():
            raise ValueError("Time must be HH:MM")
        if not (0 <= int(hours) <= 23 and 0 <= int(minutes) <= 59):
            raise ValueError("Time must be HH:MM")
        return f"{int(hours):02d}:{int(minutes):02d}"


class OpeningHours(CamelSchema):
    monday: DaySchedule = DaySchedule()
    tuesday: DaySchedule = DaySchedule()
    wednesday: DaySchedule = DaySchedule()
    thursday: DaySchedule = DaySchedule()
    friday: DaySchedule = DaySchedule()
    saturday: DaySchedule = DaySchedule()
    sunday: DaySchedule = DaySchedule()


class Holiday(CamelSchema):
    date: datetime.date
    name: str = Field(..., min_length=1)
    message: Optional[str] = None


class Banner(CamelSchema):
    id: str
    image: str
    alt: Optional[str] = None
    order: int = 0


class PageViewCreate(CamelSchema):
    page: str = Field(..., min_length=1)
    referrer: Optional[str] = None
    user_agent: Optional[str] = None
