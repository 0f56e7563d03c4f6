"""Catering booking model."""
from enum import Enum
from app.models.base import SupabaseModel


class CateringStatus(str, Enum):
    """Catering booking status; independent of the order lifecycle."""
    PENDING = "pending"
    REVIEWING = "reviewing"
    QUOTED = "quoted"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CateringBooking(SupabaseModel):
    """Event catering request submitted from the storefront."""
    table_name = "catering_bookings"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.id = kwargs.get('id')
        self.user_id = kwargs.get('user_id')
        self.full_name = kwargs.get('full_name')
        self.email = kwargs.get('email')
        self.phone = kwargs.get('phone')
        self.event_type = kwargs.get('event_type')
        self.event_date = kwargs.get('event_date')
        self.event_time = kwargs.get('event_time')
        self.guest_count = kwargs.get('guest_count')
        self.venue_address = kwargs.get('venue_address')
        self.service_type = kwargs.get('service_type')
        self.menu_preferences = kwargs.get('menu_preferences')
        self.budget_range = kwargs.get('budget_range')
        self.special_requests = kwargs.get('special_requests')
        self.heard_from = kwargs.get('heard_from')
        self.status = CateringStatus(kwargs.get('status', CateringStatus.PENDING))
        self.admin_notes = kwargs.get('admin_notes')
        self.quote_amount = kwargs.get('quote_amount')
        self.created_at = kwargs.get('created_at')
        self.updated_at = kwargs.get('updated_at')
