"""
Transactional email: order confirmation and order status updates.

Messages are rendered to HTML here and delivered through Resend when
``RESEND_API_KEY`` is set, otherwise SendGrid when ``SENDGRID_API_KEY`` is
set. With neither key configured sends are skipped with a warning.
"""
from html import escape
from typing import Any, Dict, List, Optional
import logging

import httpx

from app.config.settings import settings
from app.core.errors import ExternalServiceFailure

logger = logging.getLogger(__name__)

RESEND_URL = "https://api.resend.com/emails"
SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"

BRAND_COLOR = "#A62828"

STATUS_MESSAGES: Dict[str, Dict[str, str]] = {
    "pending": {
        "title": "Order Received",
        "message": "We have your order and it is waiting for the kitchen to confirm it.",
        "color": "#6b7280",
    },
    "confirmed": {
        "title": "Order Confirmed",
        "message": "Your order has been confirmed and our kitchen is preparing it!",
        "color": "#3b82f6",
    },
    "preparing": {
        "title": "Order Being Prepared",
        "message": "Our chefs are hard at work preparing your delicious meal!",
        "color": "#f59e0b",
    },
    "ready": {
        "title": "Order Ready",
        "message": "Your order is ready and will be delivered shortly!",
        "color": "#10b981",
    },
    "delivered": {
        "title": "Order Delivered",
        "message": "Your order has been delivered. Enjoy your meal!",
        "color": "#10b981",
    },
    "cancelled": {
        "title": "Order Cancelled",
        "message": "Your order has been cancelled. If you have questions, please contact us.",
        "color": "#ef4444",
    },
}


def status_message(status: str) -> Dict[str, str]:
    """Title/message/colour for a status; unknown statuses read as confirmed."""
    return STATUS_MESSAGES.get(status, STATUS_MESSAGES["confirmed"])


def _money(value: Any) -> str:
    return f"${float(value or 0):.2f}"


def _layout(title: str, body: str) -> str:
    shop = escape(settings.SHOP_NAME)
    return f"""<!DOCTYPE html>
<html>
<head><meta charset="UTF-8"><title>{escape(title)}</title></head>
<body style="margin:0;padding:0;font-family:-apple-system,'Segoe UI',Roboto,sans-serif;background-color:#f3f4f6;">
  <table width="100%" cellpadding="0" cellspacing="0" style="padding:40px 20px;">
    <tr><td align="center">
      <table width="600" cellpadding="0" cellspacing="0" style="background-color:#ffffff;border-radius:12px;">
        <tr><td style="background-color:{BRAND_COLOR};padding:40px;text-align:center;">
          <h1 style="color:#ffffff;margin:0;font-size:28px;">{shop}</h1>
        </td></tr>
        <tr><td style="padding:40px;">{body}</td></tr>
        <tr><td style="background-color:#f9fafb;padding:30px;text-align:center;border-top:1px solid #e5e7eb;">
          <p style="color:#9ca3af;margin:0;font-size:12px;">&copy; {shop}</p>
        </td></tr>
      </table>
    </td></tr>
  </table>
</body>
</html>"""


def _orders_button(label: str) -> str:
    return (
        f'<p style="text-align:center;margin:30px 0;">'
        f'<a href="{escape(settings.SITE_URL)}/orders" style="background-color:{BRAND_COLOR};color:#ffffff;'
        f'text-decoration:none;padding:14px 40px;border-radius:8px;font-weight:600;">{label}</a></p>'
    )


def render_status_email(status: str, customer_name: str, order_number: str) -> str:
    info = status_message(status)
    body = (
        f'<h2 style="color:{info["color"]};text-align:center;">{info["title"]}</h2>'
        f'<p style="text-align:center;color:#6b7280;">Order #{escape(str(order_number))}</p>'
        f"<p>Hi {escape(customer_name)},</p>"
        f"<p>{info['message']}</p>"
        + _orders_button("View Order Status")
    )
    return _layout("Order Update", body)


def render_confirmation_email(order: Dict[str, Any], customer_name: str) -> str:
    items: List[Dict[str, Any]] = order.get("items") or []
    rows = "".join(
        f"<tr><td><strong>{escape(str(item.get('title', '')))}</strong></td>"
        f"<td style=\"text-align:center;\">{int(item.get('quantity') or 0)}</td>"
        f"<td style=\"text-align:right;\">{_money(item.get('totalPrice'))}</td></tr>"
        for item in items
    )
    address = order.get("delivery_address") or {}
    totals = "".join(
        f'<tr><td colspan="2" style="text-align:right;">{label}:</td>'
        f'<td style="text-align:right;">{_money(order.get(field))}</td></tr>'
        for label, field in (
            ("Subtotal", "subtotal"),
            ("Delivery Fee", "delivery_fee"),
            ("Tax", "tax"),
            ("Total", "total"),
        )
    )
    body = (
        '<h2 style="text-align:center;">Order Confirmed!</h2>'
        f'<p style="text-align:center;color:#6b7280;">Order #{escape(str(order.get("order_number", "")))}</p>'
        f"<p>Hi {escape(customer_name)},</p>"
        "<p>Thank you for your order! We've received it and our kitchen is getting started. "
        "You'll receive another email when your order is ready for delivery.</p>"
        '<table width="100%"><thead><tr><th style="text-align:left;">Item</th><th>Qty</th>'
        f'<th style="text-align:right;">Price</th></tr></thead><tbody>{rows}</tbody><tfoot>{totals}</tfoot></table>'
        "<h3>Delivery Address</h3>"
        f"<p>{escape(str(address.get('street', '')))}<br>"
        f"{escape(str(address.get('city', '')))}, {escape(str(address.get('state', '')))} "
        f"{escape(str(address.get('zipCode', '')))}</p>"
        + _orders_button("Track Your Order")
    )
    return _layout("Order Confirmation", body)


class EmailService:
    """Sends rendered emails through the configured HTTP provider."""

    def __init__(self, http_client: Optional[httpx.Client] = None, timeout: float = 10.0):
        self.http_client = http_client
        self.timeout = timeout

    def send_order_status_email(
        self,
        order_id: str,
        new_status: str,
        customer_email: str,
        customer_name: str,
        order_number: str,
    ) -> bool:
        info = status_message(new_status)
        subject = f"{info['title']} - Order #{order_number}"
        html = render_status_email(new_status, customer_name, order_number)
        sent = self._deliver(customer_email, customer_name, subject, html)
        if sent:
            logger.info(f"Sent '{new_status}' status email for order {order_id}")
        return sent

    def send_order_confirmation_email(
        self,
        order: Dict[str, Any],
        customer_email: str,
        customer_name: str,
    ) -> bool:
        subject = f"Order Confirmation - #{order.get('order_number')}"
        html = render_confirmation_email(order, customer_name)
        sent = self._deliver(customer_email, customer_name, subject, html)
        if sent:
            logger.info(f"Sent confirmation email for order {order.get('id')}")
        return sent

    def _deliver(self, to_email: str, to_name: str, subject: str, html: str) -> bool:
        if settings.RESEND_API_KEY:
            url = RESEND_URL
            api_key = settings.RESEND_API_KEY
            payload = {
                "from": f"{settings.EMAIL_FROM_NAME} <{settings.EMAIL_FROM_ADDRESS}>",
                "to": to_email,
                "subject": subject,
                "html": html,
            }
        elif settings.SENDGRID_API_KEY:
            url = SENDGRID_URL
            api_key = settings.SENDGRID_API_KEY
            payload = {
                "personalizations": [{"to": [{"email": to_email, "name": to_name}]}],
                "from": {"email": settings.EMAIL_FROM_ADDRESS, "name": settings.EMAIL_FROM_NAME},
                "subject": subject,
                "content": [{"type": "text/html", "value": html}],
            }
        else:
            logger.warning("No email service configured. Set RESEND_API_KEY or SENDGRID_API_KEY")
            return False

        headers = {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}
        try:
            if self.http_client is not None:
                response = self.http_client.post(url, json=payload, headers=headers)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(url, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Failed to send email '{subject}': {e}")
            raise ExternalServiceFailure("Failed to send email")
        return True
