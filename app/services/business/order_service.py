"""Order lifecycle business logic."""
from typing import Any, Dict, List, Optional
import logging

from app.config.settings import settings
from app.core.errors import (
    AppError,
    ConcurrentModification,
    InvalidInput,
    InvalidTransition,
    NotFound,
)
from app.models.order import ADMIN_STATUSES, NEXT_STATUS, Order, OrderStatus
from app.models.profile import UserProfile
from app.services.stores import OrderStore, ProfileStore

logger = logging.getLogger(__name__)


def profile_summary(profile: Optional[UserProfile]) -> Optional[Dict[str, Any]]:
    """The customer fields shown next to an order in the back office."""
    if profile is None:
        return None
    return {"id": profile.id, "full_name": profile.full_name, "email": profile.email, "phone": profile.phone}


class OrderService:
    """Service for managing orders - single source of truth for order status changes."""

    def __init__(
        self,
        orders: OrderStore,
        profiles: ProfileStore,
        notifier,
        strict_transitions: Optional[bool] = None,
    ):
        self.orders = orders
        self.profiles = profiles
        self.notifier = notifier
        self.strict_transitions = (
            settings.ORDER_STATUS_STRICT_TRANSITIONS if strict_transitions is None else strict_transitions
        )

    # Reads

    def list_orders(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        """All orders newest first, optionally filtered, with the customer attached."""
        status_filter = self.parse_status(status) if status else None
        orders = self.orders.list(status_filter)
        profiles = self.profiles.find_many([order.user_id for order in orders if order.user_id])
        return [self._with_profile(order, profiles.get(order.user_id)) for order in orders]

    def get_order(self, order_id: str) -> Dict[str, Any]:
        order = self.orders.get(order_id)
        return self._with_profile(order, self.profiles.find(order.user_id) if order.user_id else None)

    def list_user_orders(self, user_id: str) -> List[Order]:
        return self.orders.find_by_user_id(user_id)

    def get_user_order(self, user_id: str, order_id: str) -> Order:
        """An order owned by ``user_id``; other users' orders read as missing."""
        order = self.orders.find(order_id)
        if order is None or order.user_id != user_id:
            raise NotFound("Order not found")
        return order

    def get_order_by_session(self, user_id: str, session_id: str) -> Order:
        order = self.orders.find_by_session_id(session_id)
        if order is None or order.user_id != user_id:
            raise NotFound("Order not found")
        return order

    # Status changes

    @staticmethod
    def parse_status(value: str) -> OrderStatus:
        try:
            return OrderStatus(value)
        except ValueError:
            raise InvalidInput(f"Invalid order status: {value}")

    def validate_transition(self, current: OrderStatus, new: OrderStatus) -> None:
        """
        Check an admin-requested status change.

        Raises:
            InvalidInput: ``new`` is not a status admins may set.
            InvalidTransition: the order is finished, still awaiting payment,
                or (in strict mode) ``new`` skips or reverses a step.
        """
        if new not in ADMIN_STATUSES:
            raise InvalidInput(f"Status cannot be set manually: {new.value}")
        if current in (OrderStatus.DELIVERED, OrderStatus.CANCELLED):
            raise InvalidTransition(f"Order is already {current.value}")
        if current == OrderStatus.PENDING_PAYMENT and new != OrderStatus.CANCELLED:
            raise InvalidTransition("Order is awaiting payment and can only be cancelled")
        if self.strict_transitions and new not in (NEXT_STATUS.get(current), OrderStatus.CANCELLED):
            raise InvalidTransition(f"Cannot move order from {current.value} to {new.value}")

    def update_status(self, order_id: str, new_status: str, actor: Optional[str] = None) -> Order:
        """
        Move an order to ``new_status`` on behalf of an admin.

        The write only lands if the order still holds the status that was
        validated; a concurrent change surfaces as ``ConcurrentModification``.
        The customer is emailed after a successful change.

        Args:
            order_id: Order to update
            new_status: Requested status value
            actor: Acting admin's user id, for the audit log

        Returns:
            The updated order (unchanged if it already had ``new_status``)
        """
        target = self.parse_status(new_status)
        order = self.orders.get(order_id)

        if order.is_terminal:
            raise InvalidTransition(f"Order is already {order.status.value}")
        if order.status == target:
            return order

        self.validate_transition(order.status, target)

        updated = self.orders.transition(order_id, order.status, target)
        if updated is None:
            if self.orders.find(order_id) is None:
                raise NotFound("Order not found")
            raise ConcurrentModification("Order status changed while updating; reload and try again")

        logger.info(
            f"Order {order_id} status {order.status.value} -> {target.value}"
            f"{f' by {actor}' if actor else ''}"
        )
        self._notify(self.notifier.order_status_changed, updated)
        return updated

    def mark_paid(self, order_id: str, payment_intent_id: Optional[str]) -> Optional[Order]:
        """
        Record a completed payment: ``pending_payment -> pending``.

        Returns None when the order is not awaiting payment, which makes a
        redelivered webhook a no-op.
        """
        updated = self.orders.transition(
            order_id,
            OrderStatus.PENDING_PAYMENT,
            OrderStatus.PENDING,
            extra={"payment_intent_id": payment_intent_id},
        )
        if updated is None:
            logger.info(f"Order {order_id} not awaiting payment; payment confirmation ignored")
            return None

        logger.info(f"Order {order_id} paid (payment intent {payment_intent_id})")
        self._notify(self.notifier.order_confirmed, updated)
        return updated

    def mark_expired(self, order_id: str) -> Optional[Order]:
        """Cancel an order whose payment session expired unpaid."""
        updated = self.orders.transition(order_id, OrderStatus.PENDING_PAYMENT, OrderStatus.CANCELLED)
        if updated is None:
            logger.info(f"Order {order_id} not awaiting payment; expiry ignored")
            return None
        logger.info(f"Order {order_id} cancelled after payment session expired")
        return updated

    def cancel_abandoned_orders(self, created_before: str) -> int:
        """Cancel every order still awaiting payment that was created before the cutoff."""
        cancelled = 0
        for order in self.orders.list_stale(OrderStatus.PENDING_PAYMENT, created_before):
            if self.mark_expired(order.id) is not None:
                cancelled += 1
        return cancelled

    # Helpers

    def _notify(self, send, order: Order) -> None:
        try:
            send(order, self._customer_of(order))
        except Exception as e:
            logger.error(f"Notification for order {order.id} failed: {e}", exc_info=True)

    def _customer_of(self, order: Order) -> Optional[UserProfile]:
        if not order.user_id:
            return None
        try:
            return self.profiles.find(order.user_id)
        except AppError as e:
            logger.warning(f"Could not load customer for order {order.id}: {e.message}")
            return None

    @staticmethod
    def _with_profile(order: Order, profile: Optional[UserProfile]) -> Dict[str, Any]:
        data = order.to_supabase_dict()
        data["profile"] = profile_summary(profile)
        return data
