"""Catering booking management endpoints."""
from typing import Any, Optional
from fastapi import APIRouter, Depends

from app.core.dependencies import get_catering_service, require_permission
from app.core.permissions import Permission
from app.core.supabase_auth import Identity
from app.schemas.catering import CateringBookingUpdate
from app.services.business.catering_service import CateringService

router = APIRouter()
require_catering = require_permission(Permission.CATERING)


@router.get("")
def list_bookings(
    status: Optional[str] = None,
    identity: Identity = Depends(require_catering),
    catering: CateringService = Depends(get_catering_service),
) -> Any:
    return [booking.to_supabase_dict() for booking in catering.list_bookings(status)]


@router.get("/{booking_id}")
def get_booking(
    booking_id: str,
    identity: Identity = Depends(require_catering),
    catering: CateringService = Depends(get_catering_service),
) -> Any:
    return catering.get_booking(booking_id).to_supabase_dict()


@router.patch("/{booking_id}")
def update_booking(
    booking_id: str,
    changes: CateringBookingUpdate,
    identity: Identity = Depends(require_catering),
    catering: CateringService = Depends(get_catering_service),
) -> Any:
    """Change status, internal notes or the quoted amount."""
    booking = catering.update_booking(booking_id, changes.model_dump(exclude_unset=True, mode="json"))
    return booking.to_supabase_dict()


@router.delete("/{booking_id}")
def delete_booking(
    booking_id: str,
    identity: Identity = Depends(require_catering),
    catering: CateringService = Depends(get_catering_service),
) -> Any:
    catering.delete_booking(booking_id)
    return {"success": True}
