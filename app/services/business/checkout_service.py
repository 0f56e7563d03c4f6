"""Checkout: price the cart, persist the order, open a hosted payment session."""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Union
import logging

from app.config.settings import settings
from app.core.errors import InvalidInput
from app.core.supabase_auth import Identity
from app.models.base import SupabaseModel
from app.models.order import OrderStatus
from app.schemas.checkout import CartItem, CheckoutRequest
from app.services.stores import OrderStore

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
Number = Union[Decimal, float, int, str]


def money(value: Number) -> Decimal:
    """Round to cents, halves away from zero."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def to_cents(value: Number) -> int:
    return int((Decimal(str(value)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    delivery_fee: Decimal
    tax: Decimal
    total: Decimal

    def as_row(self) -> Dict[str, float]:
        return {
            "subtotal": float(self.subtotal),
            "delivery_fee": float(self.delivery_fee),
            "tax": float(self.tax),
            "total": float(self.total),
        }


def compute_totals(items: List[CartItem], delivery_fee: Number, tax_rate: Number) -> OrderTotals:
    """
    Order money fields from cart lines.

    subtotal is the sum of line totals, tax is the subtotal times the rate
    rounded to cents, total is subtotal + delivery fee + tax.
    """
    subtotal = money(sum((Decimal(str(item.total_price)) for item in items), Decimal("0")))
    fee = money(delivery_fee)
    tax = money(subtotal * Decimal(str(tax_rate)))
    return OrderTotals(subtotal=subtotal, delivery_fee=fee, tax=tax, total=subtotal + fee + tax)


def image_url(image: Optional[str], cloud_name: Optional[str]) -> Optional[str]:
    if not image or not cloud_name:
        return None
    return f"https://res.cloudinary.com/{cloud_name}/image/upload/{image}"


def _price_line(name: str, unit_amount: int, quantity: int, currency: str, images: Optional[List[str]] = None):
    product_data: Dict[str, Any] = {"name": name}
    if images:
        product_data["images"] = images
    return {
        "price_data": {"currency": currency, "product_data": product_data, "unit_amount": unit_amount},
        "quantity": quantity,
    }


def tax_label(tax_rate: Number) -> str:
    percent = (Decimal(str(tax_rate)) * 100).normalize()
    return f"Tax ({percent:f}%)"


def build_line_items(
    items: List[CartItem],
    totals: OrderTotals,
    currency: str = settings.CURRENCY,
    tax_rate: Number = settings.TAX_RATE,
    cloud_name: Optional[str] = settings.CLOUDINARY_CLOUD_NAME,
) -> List[Dict[str, Any]]:
    """Payment-page lines: one per cart item, then delivery fee and tax."""
    line_items = []
    for item in items:
        unit_amount = int(
            (Decimal(str(item.total_price)) / item.quantity * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        )
        url = image_url(item.image, cloud_name)
        line_items.append(_price_line(item.title, unit_amount, item.quantity, currency, [url] if url else None))

    line_items.append(_price_line("Delivery Fee", to_cents(totals.delivery_fee), 1, currency))
    line_items.append(_price_line(tax_label(tax_rate), to_cents(totals.tax), 1, currency))
    return line_items


class CheckoutService:
    """Turns a cart into a ``pending_payment`` order and a payment session."""

    def __init__(self, orders: OrderStore, shop_settings, payments, tax_rate: Number = settings.TAX_RATE):
        self.orders = orders
        self.shop_settings = shop_settings
        self.payments = payments
        self.tax_rate = tax_rate

    @staticmethod
    def validate(request: CheckoutRequest) -> None:
        if not request.items:
            raise InvalidInput("Cart is empty")
        if request.delivery_address is None:
            raise InvalidInput("Delivery address is required")
        missing = request.delivery_address.missing_fields()
        if missing:
            raise InvalidInput(f"Delivery address is missing: {', '.join(missing)}")

    def checkout(self, identity: Identity, request: CheckoutRequest) -> Dict[str, str]:
        """
        Create the order and its payment session.

        The order is written before the session is opened so the session can
        carry the order id; an order whose session never completes stays in
        ``pending_payment`` until it expires or is swept.

        Returns:
            ``{"sessionId": ..., "orderId": ...}``
        """
        self.validate(request)

        totals = compute_totals(request.items, self.shop_settings.get_delivery_fee(), self.tax_rate)
        order_number = self.orders.generate_order_number()

        order = self.orders.insert({
            "order_number": order_number,
            "user_id": identity.user_id,
            "items": [item.to_wire() for item in request.items],
            **totals.as_row(),
            "delivery_address": request.delivery_address.to_wire(),
            "status": OrderStatus.PENDING_PAYMENT.value,
            "notes": request.notes,
            "created_at": SupabaseModel.timestamp(),
        })
        logger.info(f"Created order {order.id} (#{order_number}) for user {identity.user_id}, total {totals.total}")

        session_id = self.payments.create_checkout_session(
            line_items=build_line_items(request.items, totals, tax_rate=self.tax_rate),
            success_url=f"{settings.SITE_URL}/checkout/success?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{settings.SITE_URL}/checkout/cancel",
            metadata={"orderId": str(order.id), "userId": identity.user_id},
            customer_email=identity.email,
        )

        self.orders.update_fields(order.id, {"stripe_session_id": session_id})
        return {"sessionId": session_id, "orderId": str(order.id)}
