"""Catering booking intake and back-office handling."""
from typing import Any, Dict, List, Optional
import logging

from app.core.errors import InvalidInput, NotFound
from app.models.base import SupabaseModel
from app.models.catering import CateringBooking, CateringStatus
from app.utils.supabase_helpers import (
    safe_supabase_delete,
    safe_supabase_insert,
    safe_supabase_select,
    safe_supabase_update,
)

logger = logging.getLogger(__name__)


class CateringService:
    table_name = CateringBooking.table_name

    def __init__(self, supabase):
        self.supabase = supabase

    def create_booking(self, data: Dict[str, Any], user_id: Optional[str] = None) -> CateringBooking:
        """Record a booking request from the storefront. Always starts ``pending``."""
        now = SupabaseModel.timestamp()
        row = safe_supabase_insert(self.supabase, self.table_name, {
            **data,
            "user_id": user_id,
            "status": CateringStatus.PENDING.value,
            "created_at": now,
            "updated_at": now,
        })
        booking = CateringBooking.from_dict(row)
        logger.info(f"New catering booking {booking.id} for {booking.event_date} ({booking.guest_count} guests)")
        return booking

    def list_bookings(self, status: Optional[str] = None) -> List[CateringBooking]:
        filters = {"status": self._parse_status(status).value} if status else None
        rows = safe_supabase_select(
            self.supabase, self.table_name, filters=filters, order_by="created_at", desc=True
        )
        return [CateringBooking.from_dict(row) for row in rows]

    def get_booking(self, booking_id: str) -> CateringBooking:
        rows = safe_supabase_select(self.supabase, self.table_name, filters={"id": booking_id}, limit=1)
        if not rows:
            raise NotFound("Booking not found")
        return CateringBooking.from_dict(rows[0])

    def update_booking(self, booking_id: str, changes: Dict[str, Any]) -> CateringBooking:
        """Apply status / ``admin_notes`` / ``quote_amount`` changes."""
        if "status" in changes and changes["status"] is not None:
            changes["status"] = self._parse_status(changes["status"]).value
        quote = changes.get("quote_amount")
        if quote is not None and float(quote) < 0:
            raise InvalidInput("Quote amount cannot be negative")
        if not changes:
            return self.get_booking(booking_id)

        try:
            row = safe_supabase_update(
                self.supabase,
                self.table_name,
                {**changes, "updated_at": SupabaseModel.timestamp()},
                "id",
                booking_id,
            )
        except NotFound:
            raise NotFound("Booking not found")
        booking = CateringBooking.from_dict(row)
        logger.info(f"Catering booking {booking_id} updated: {sorted(changes)}")
        return booking

    def delete_booking(self, booking_id: str) -> None:
        try:
            safe_supabase_delete(self.supabase, self.table_name, "id", booking_id)
        except NotFound:
            raise NotFound("Booking not found")

    @staticmethod
    def _parse_status(value: Any) -> CateringStatus:
        try:
            return CateringStatus(value)
        except ValueError:
            raise InvalidInput(f"Invalid booking status: {value}")
