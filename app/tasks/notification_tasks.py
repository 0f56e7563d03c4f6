"""Background tasks that send customer emails."""
from typing import Any, Dict
import logging

import redis

from app.config.settings import settings
from app.services.notifications.email_service import EmailService
from app.tasks.app import celery_app
from app.tasks.utils.idempotency import DuplicateTaskInvocation, Idempotency

logger = logging.getLogger(__name__)

CONFIRMATION_KEY_TTL = 7 * 24 * 3600


def _redis_client() -> redis.Redis:
    return redis.Redis.from_url(settings.REDIS_URL)


@celery_app.task(name="app.tasks.notification_tasks.send_order_status_email")
def send_order_status_email(
    order_id: str,
    new_status: str,
    customer_email: str,
    customer_name: str,
    order_number: str,
) -> bool:
    """Email the customer that their order moved to ``new_status``."""
    try:
        return EmailService().send_order_status_email(
            order_id, new_status, customer_email, customer_name, order_number
        )
    except Exception as e:
        logger.error(f"Status email for order {order_id} failed: {e}", exc_info=True)
        return False


@celery_app.task(name="app.tasks.notification_tasks.send_order_confirmation_email")
def send_order_confirmation_email(order: Dict[str, Any], customer_email: str, customer_name: str) -> bool:
    """Email the order confirmation once per order."""
    order_id = order.get("id")
    email_service = EmailService()
    try:
        with Idempotency(_redis_client()).guard(
            f"email:order_confirmation:{order_id}", ttl_seconds=CONFIRMATION_KEY_TTL
        ):
            return email_service.send_order_confirmation_email(order, customer_email, customer_name)
    except DuplicateTaskInvocation:
        logger.info(f"Confirmation email for order {order_id} already sent; skipping")
        return False
    except redis.RedisError as e:
        logger.warning(f"Idempotency store unavailable ({e}); sending confirmation for {order_id} unguarded")
    except Exception as e:
        logger.error(f"Confirmation email for order {order_id} failed: {e}", exc_info=True)
        return False

    try:
        return email_service.send_order_confirmation_email(order, customer_email, customer_name)
    except Exception as e:
        logger.error(f"Confirmation email for order {order_id} failed: {e}", exc_info=True)
        return False
