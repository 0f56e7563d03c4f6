"""Stripe hosted checkout and webhook verification."""
from typing import Any, Dict, List, Optional
import logging

import stripe

from app.config.settings import settings
from app.core.errors import ExternalServiceFailure, SignatureInvalid

logger = logging.getLogger(__name__)

# Configure Stripe
stripe.api_key = settings.STRIPE_SECRET_KEY


class StripeService:
    """Payment provider adapter: creates checkout sessions and authenticates webhook calls."""

    def __init__(self, webhook_secret: Optional[str] = None, tolerance: Optional[int] = None):
        self.webhook_secret = webhook_secret or settings.STRIPE_WEBHOOK_SECRET
        self.tolerance = tolerance if tolerance is not None else settings.STRIPE_WEBHOOK_TOLERANCE

    def create_checkout_session(
        self,
        line_items: List[Dict[str, Any]],
        success_url: str,
        cancel_url: str,
        metadata: Dict[str, str],
        customer_email: Optional[str] = None,
    ) -> str:
        """Create a one-off hosted payment session and return its id."""
        try:
            session = stripe.checkout.Session.create(
                mode="payment",
                line_items=line_items,
                success_url=success_url,
                cancel_url=cancel_url,
                metadata=metadata,
                customer_email=customer_email,
            )
        except stripe.StripeError as e:
            logger.error(f"Failed to create Stripe checkout session: {e}")
            raise ExternalServiceFailure("Failed to create payment session")

        logger.info(f"Created Stripe checkout session: {session.id}")
        return session.id

    def verify_webhook(self, payload: bytes, signature: Optional[str]) -> Dict[str, Any]:
        """
        Authenticate a webhook body against its ``Stripe-Signature`` header.

        Fails closed: a missing header, a missing secret, a bad signature or a
        stale timestamp all raise ``SignatureInvalid``. Returns the parsed event.
        """
        if not signature:
            raise SignatureInvalid("No signature provided")
        if not self.webhook_secret:
            logger.error("STRIPE_WEBHOOK_SECRET is not configured; rejecting webhook")
            raise SignatureInvalid("Webhook secret not configured")

        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret, self.tolerance)
        except ValueError as e:
            logger.warning(f"Invalid webhook payload: {e}")
            raise SignatureInvalid("Invalid webhook payload")
        except stripe.SignatureVerificationError as e:
            logger.warning(f"Webhook signature verification failed: {e}")
            raise SignatureInvalid()

        if not event.get("type"):
            raise SignatureInvalid("Invalid webhook payload")
        return event
