"""Payment provider webhook reconciliation."""
from typing import Any, Dict, Optional
import logging

from app.core.errors import AppError, ExternalServiceFailure

logger = logging.getLogger(__name__)

SESSION_COMPLETED = "checkout.session.completed"
SESSION_EXPIRED = "checkout.session.expired"


class PaymentWebhookService:
    """
    Applies authenticated payment events to orders.

    Nothing is read or written before the signature check passes. Handlers
    are idempotent: a redelivered event finds the order already moved out of
    ``pending_payment`` and does nothing.
    """

    def __init__(self, payments, orders):
        self.payments = payments
        self.orders = orders

    def handle(self, payload: bytes, signature: Optional[str]) -> Dict[str, bool]:
        event = self.payments.verify_webhook(payload, signature)
        event_type = event["type"]
        session = (event.get("data") or {}).get("object") or {}

        if event_type == SESSION_COMPLETED:
            self._session_completed(session)
        elif event_type == SESSION_EXPIRED:
            self._session_expired(session)
        else:
            logger.info(f"Unhandled webhook event type: {event_type}")

        return {"received": True}

    @staticmethod
    def _order_id(session: Dict[str, Any]) -> Optional[str]:
        return (session.get("metadata") or {}).get("orderId")

    def _session_completed(self, session: Dict[str, Any]) -> None:
        order_id = self._order_id(session)
        if not order_id:
            logger.warning(f"Completed session {session.get('id')} carries no orderId; ignoring")
            return
        try:
            self.orders.mark_paid(order_id, session.get("payment_intent"))
        except AppError as e:
            # Non-2xx makes the provider redeliver the event.
            logger.error(f"Failed to record payment for order {order_id}: {e.message}")
            raise ExternalServiceFailure("Failed to process payment confirmation", status_code=500)

    def _session_expired(self, session: Dict[str, Any]) -> None:
        order_id = self._order_id(session)
        if not order_id:
            logger.warning(f"Expired session {session.get('id')} carries no orderId; ignoring")
            return
        try:
            self.orders.mark_expired(order_id)
        except AppError as e:
            logger.error(f"Error handling expired session for order {order_id}: {e.message}")
