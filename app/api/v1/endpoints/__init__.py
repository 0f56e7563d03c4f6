from . import (
    checkout,
    webhooks,
    user_orders,
    shop,
    analytics,
)

__all__ = [
    "checkout",
    "webhooks",
    "user_orders",
    "shop",
    "analytics",
]
