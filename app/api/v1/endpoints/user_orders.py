"""Signed-in customer's own orders."""
from typing import Any
from fastapi import APIRouter, Depends

from app.core.dependencies import get_order_service, require_auth
from app.core.supabase_auth import Identity
from app.services.business.order_service import OrderService

router = APIRouter()


@router.get("")
def list_my_orders(
    identity: Identity = Depends(require_auth),
    order_service: OrderService = Depends(get_order_service),
) -> Any:
    """Orders placed by the caller, newest first."""
    return [order.to_supabase_dict() for order in order_service.list_user_orders(identity.user_id)]


@router.get("/{order_id}")
def get_my_order(
    order_id: str,
    identity: Identity = Depends(require_auth),
    order_service: OrderService = Depends(get_order_service),
) -> Any:
    return order_service.get_user_order(identity.user_id, order_id).to_supabase_dict()
