"""Order model for storefront orders using Supabase."""
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional
from app.models.base import SupabaseModel


class OrderStatus(str, Enum):
    """Order status enumeration."""
    PENDING_PAYMENT = "pending_payment"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


TERMINAL_STATUSES: FrozenSet[OrderStatus] = frozenset({
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
})

# Statuses an admin may set; pending_payment is only ever set by checkout.
ADMIN_STATUSES: FrozenSet[OrderStatus] = frozenset({
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
})

# Natural flow: pending -> confirmed -> preparing -> ready -> delivered
NEXT_STATUS: Dict[OrderStatus, OrderStatus] = {
    OrderStatus.PENDING_PAYMENT: OrderStatus.PENDING,
    OrderStatus.PENDING: OrderStatus.CONFIRMED,
    OrderStatus.CONFIRMED: OrderStatus.PREPARING,
    OrderStatus.PREPARING: OrderStatus.READY,
    OrderStatus.READY: OrderStatus.DELIVERED,
}

# Statuses counted as "in the kitchen" on the dashboard
ACTIVE_STATUSES = (
    OrderStatus.CONFIRMED.value,
    OrderStatus.PREPARING.value,
    OrderStatus.READY.value,
)


class Order(SupabaseModel):
    """Storefront order model for Supabase.

    ``items`` and ``delivery_address`` are snapshots taken at checkout and are
    never rewritten afterwards.
    """
    table_name = "orders"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.id = kwargs.get('id')
        self.order_number = kwargs.get('order_number')
        self.user_id = kwargs.get('user_id')
        self.items: List[Dict[str, Any]] = kwargs.get('items') or []
        self.subtotal = float(kwargs.get('subtotal') or 0)
        self.delivery_fee = float(kwargs.get('delivery_fee') or 0)
        self.tax = float(kwargs.get('tax') or 0)
        self.total = float(kwargs.get('total') or 0)
        self.delivery_address: Dict[str, Any] = kwargs.get('delivery_address') or {}
        self.status = OrderStatus(kwargs.get('status', OrderStatus.PENDING_PAYMENT))
        self.notes: Optional[str] = kwargs.get('notes')
        self.payment_intent_id: Optional[str] = kwargs.get('payment_intent_id')
        self.stripe_session_id: Optional[str] = kwargs.get('stripe_session_id')
        self.created_at = kwargs.get('created_at')
        self.updated_at = kwargs.get('updated_at')

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES
