"""
Customer notifications for order events.

Emails are sent from Celery workers; this service only enqueues them. A
notification failure never fails the operation that triggered it.
"""
from typing import Any, Dict, Optional
from enum import Enum
import logging

from app.models.order import Order
from app.models.profile import UserProfile
from app.tasks.notification_tasks import send_order_confirmation_email, send_order_status_email

logger = logging.getLogger(__name__)


class NotificationType(str, Enum):
    """Types of notifications."""
    ORDER_CONFIRMATION = "order_confirmation"
    ORDER_STATUS_UPDATE = "order_status_update"


class NotificationService:
    """Enqueues customer emails for order events."""

    def __init__(self, status_task=send_order_status_email, confirmation_task=send_order_confirmation_email):
        self.tasks = {
            NotificationType.ORDER_STATUS_UPDATE: status_task,
            NotificationType.ORDER_CONFIRMATION: confirmation_task,
        }

    def order_status_changed(self, order: Order, customer: Optional[UserProfile]) -> bool:
        """Tell the customer their order moved to ``order.status``."""
        if not self._reachable(order, customer):
            return False
        return self._dispatch(
            NotificationType.ORDER_STATUS_UPDATE,
            order,
            order_id=order.id,
            new_status=order.status.value,
            customer_email=customer.email,
            customer_name=customer.full_name or "Customer",
            order_number=order.order_number,
        )

    def order_confirmed(self, order: Order, customer: Optional[UserProfile]) -> bool:
        """Send the order confirmation after payment."""
        if not self._reachable(order, customer):
            return False
        return self._dispatch(
            NotificationType.ORDER_CONFIRMATION,
            order,
            order=order.to_supabase_dict(),
            customer_email=customer.email,
            customer_name=customer.full_name or "Customer",
        )

    def _reachable(self, order: Order, customer: Optional[UserProfile]) -> bool:
        if customer is None or not customer.email:
            logger.info(f"No customer email for order {order.id}; skipping notification")
            return False
        return True

    def _dispatch(self, notification_type: NotificationType, source: Order, **kwargs: Any) -> bool:
        try:
            self.tasks[notification_type].delay(**kwargs)
        except Exception as e:
            logger.error(f"Failed to enqueue {notification_type.value} for order {source.id}: {e}", exc_info=True)
            return False
        logger.info(f"Enqueued {notification_type.value} for order {source.id}")
        return True
