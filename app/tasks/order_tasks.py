"""Background tasks for order housekeeping."""
from datetime import datetime, timedelta, timezone
import logging

from app.config.database import get_supabase_service_client
from app.config.settings import settings
from app.tasks.app import celery_app
from app.services.business.order_service import OrderService
from app.services.notifications.notification_service import NotificationService
from app.services.stores import OrderStore, ProfileStore

logger = logging.getLogger(__name__)


@celery_app.task(name="app.tasks.order_tasks.cancel_abandoned_orders")
def cancel_abandoned_orders() -> int:
    """
    Cancel orders that never completed payment.

    Checkout creates the order before the customer reaches the payment page;
    sessions the provider never reports back on would otherwise sit in
    ``pending_payment`` forever. Runs on the beat schedule.
    """
    cutoff = datetime.now(timezone.utc) - timedelta(hours=settings.ABANDONED_ORDER_TTL_HOURS)
    try:
        supabase = get_supabase_service_client()
        order_service = OrderService(OrderStore(supabase), ProfileStore(supabase), NotificationService())
        cancelled = order_service.cancel_abandoned_orders(cutoff.isoformat())
    except Exception as e:
        logger.error(f"Error cancelling abandoned orders: {e}", exc_info=True)
        return 0

    logger.info(f"Cancelled {cancelled} abandoned orders created before {cutoff.isoformat()}")
    return cancelled
