"""Checkout endpoints."""
from typing import Any
from fastapi import APIRouter, Depends

from app.core.dependencies import get_checkout_service, get_order_service, require_auth
from app.core.supabase_auth import Identity
from app.schemas.checkout import CheckoutRequest
from app.services.business.checkout_service import CheckoutService
from app.services.business.order_service import OrderService

router = APIRouter()


@router.post("")
def create_checkout(
    checkout_request: CheckoutRequest,
    identity: Identity = Depends(require_auth),
    checkout_service: CheckoutService = Depends(get_checkout_service),
) -> Any:
    """
    Create a ``pending_payment`` order from the cart and open a hosted payment session.

    Returns ``{"sessionId", "orderId"}``; the client redirects to the provider
    with the session id.
    """
    return checkout_service.checkout(identity, checkout_request)


@router.get("/session/{session_id}")
def get_checkout_session_order(
    session_id: str,
    identity: Identity = Depends(require_auth),
    order_service: OrderService = Depends(get_order_service),
) -> Any:
    """The caller's order behind a payment session (checkout success page)."""
    return order_service.get_order_by_session(identity.user_id, session_id).to_supabase_dict()
