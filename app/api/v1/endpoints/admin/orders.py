"""Order management endpoints."""
from typing import Any, Optional
from fastapi import APIRouter, Depends

from app.core.dependencies import get_order_service, require_permission
from app.core.permissions import Permission
from app.core.supabase_auth import Identity
from app.schemas.order import OrderStatusUpdate
from app.services.business.order_service import OrderService

router = APIRouter()
require_orders = require_permission(Permission.ORDERS)


@router.get("")
def list_orders(
    status: Optional[str] = None,
    identity: Identity = Depends(require_orders),
    order_service: OrderService = Depends(get_order_service),
) -> Any:
    """
    All orders, newest first, each with a customer summary.

    Query parameters:
    - status: Filter by order status
    """
    return order_service.list_orders(status)


@router.get("/{order_id}")
def get_order(
    order_id: str,
    identity: Identity = Depends(require_orders),
    order_service: OrderService = Depends(get_order_service),
) -> Any:
    return order_service.get_order(order_id)


@router.patch("/{order_id}/status")
def update_order_status(
    order_id: str,
    status_update: OrderStatusUpdate,
    identity: Identity = Depends(require_orders),
    order_service: OrderService = Depends(get_order_service),
) -> Any:
    """Move an order through the kitchen workflow; the customer is emailed on change."""
    order = order_service.update_status(order_id, status_update.status, actor=identity.user_id)
    return order.to_supabase_dict()
