"""Catering booking schemas."""
from datetime import date
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from app.models.catering import CateringStatus


class CateringBookingCreate(BaseModel):
    """Public booking request from the storefront catering form."""
    full_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)
    event_type: str = Field(..., min_length=1)
    event_date: date
    event_time: Optional[str] = None
    guest_count: int = Field(..., gt=0)
    venue_address: str = Field(..., min_length=1)
    service_type: str = Field(..., min_length=1)
    menu_preferences: Optional[str] = None
    budget_range: Optional[str] = None
    special_requests: Optional[str] = None
    heard_from: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "full_name": "Ada Obi",
                "email": "ada@example.com",
                "phone": "+12155550100",
                "event_type": "wedding",
                "event_date": "2026-06-20",
                "guest_count": 120,
                "venue_address": "10 Market St, Philadelphia, PA",
                "service_type": "buffet",
            }
        }
    }


class CateringBookingUpdate(BaseModel):
    status: Optional[CateringStatus] = None
    admin_notes: Optional[str] = None
    quote_amount: Optional[float] = Field(default=None, ge=0)
