"""Analytics Service for dashboard and reporting figures."""
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
import asyncio
import logging

from app.core.guards import check_permission
from app.core.permissions import Permission
from app.core.supabase_auth import Identity
from app.models.order import ACTIVE_STATUSES, Order, OrderStatus
from app.models.profile import UserRole
from app.services.stores import OrderStore, ProfileStore
from app.utils.supabase_helpers import safe_execute, safe_supabase_insert, safe_supabase_select

logger = logging.getLogger(__name__)

PAGE_VIEWS_TABLE = "page_views"
TOP_PRODUCTS_LIMIT = 5
RECENT_REVENUE_WINDOW = 100


def _growth(current: float, previous: float) -> float:
    """Percentage change; 0 when there is nothing to compare against."""
    if previous <= 0:
        return 0.0
    return round((current - previous) / previous * 100, 2)


def _day(timestamp: Optional[str]) -> Optional[str]:
    return str(timestamp)[:10] if timestamp else None


def _line_total(item: Dict[str, Any]) -> float:
    return float(item.get("totalPrice") or item.get("total_price") or 0)


class AnalyticsService:
    """Service for dashboard counters, analytics reports and page-view tracking."""

    def __init__(self, orders: OrderStore, profiles: ProfileStore, supabase):
        self.orders = orders
        self.profiles = profiles
        self.supabase = supabase

    async def dashboard_stats(self, identity: Identity, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Landing-page counters, shaped by what the caller may see.

        Order figures need ``orders`` or ``analytics``; the customer count
        needs ``customers``. Figures the caller cannot see stay at zero.
        """
        stats: Dict[str, Any] = {
            "totalOrders": 0,
            "totalRevenue": 0.0,
            "todayOrders": 0,
            "activeOrders": 0,
            "pendingOrders": 0,
            "totalCustomers": 0,
        }
        now = now or datetime.now(timezone.utc)
        today_start = now.replace(hour=0, minute=0, second=0, microsecond=0).isoformat()

        if check_permission(identity, Permission.ORDERS) or check_permission(identity, Permission.ANALYTICS):
            total, recent, today, active, pending = await asyncio.gather(
                asyncio.to_thread(self.orders.count),
                asyncio.to_thread(self.orders.recent_totals, RECENT_REVENUE_WINDOW),
                asyncio.to_thread(self.orders.count, None, None, today_start),
                asyncio.to_thread(self.orders.count, None, ACTIVE_STATUSES),
                asyncio.to_thread(self.orders.count, OrderStatus.PENDING),
            )
            stats.update({
                "totalOrders": total,
                "totalRevenue": round(sum(recent), 2),
                "todayOrders": today,
                "activeOrders": active,
                "pendingOrders": pending,
            })

        if check_permission(identity, Permission.CUSTOMERS):
            stats["totalCustomers"] = await asyncio.to_thread(self.profiles.count, UserRole.CUSTOMER)

        return stats

    def analytics(self, days: int = 7, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Revenue and order report for the last ``days`` days against the window before it."""
        now = now or datetime.now(timezone.utc)
        start = now - timedelta(days=days)
        prev_start = start - timedelta(days=days)

        orders = self.orders.list_created_between(start.isoformat())
        prev_orders = self.orders.list_created_between(prev_start.isoformat(), start.isoformat())
        customers = self.profiles.count(UserRole.CUSTOMER)
        products = safe_supabase_select(self.supabase, "products", select_fields="id, title, category_id")
        categories = {
            row["id"]: row.get("title")
            for row in safe_supabase_select(self.supabase, "categories", select_fields="id, title")
        }

        total_revenue = sum(order.total for order in orders)
        prev_revenue = sum(order.total for order in prev_orders)

        return {
            "totalRevenue": round(total_revenue, 2),
            "totalOrders": len(orders),
            "totalCustomers": customers,
            "totalProducts": len(products),
            "averageOrderValue": round(total_revenue / len(orders), 2) if orders else 0.0,
            "revenueGrowth": _growth(total_revenue, prev_revenue),
            "ordersGrowth": _growth(len(orders), len(prev_orders)),
            "revenueByDay": self._revenue_by_day(orders, days, now),
            "topProducts": self._top_products(orders),
            "ordersByStatus": self._orders_by_status(orders),
            "categoryRevenue": self._category_revenue(orders, products, categories),
            "pageViews": self._page_view_summary(start.isoformat()),
        }

    def track_page_view(
        self,
        page: str,
        referrer: Optional[str],
        user_agent: Optional[str],
        ip_address: str,
        timestamp: Optional[str] = None,
    ) -> None:
        safe_supabase_insert(self.supabase, PAGE_VIEWS_TABLE, {
            "page": page,
            "timestamp": timestamp or datetime.now(timezone.utc).isoformat(),
            "referrer": referrer,
            "user_agent": user_agent,
            "ip_address": ip_address,
        })

    # Report sections

    @staticmethod
    def _revenue_by_day(orders: List[Order], days: int, now: datetime) -> List[Dict[str, Any]]:
        buckets: Dict[str, Dict[str, Any]] = {}
        for offset in range(days - 1, -1, -1):
            buckets[(now - timedelta(days=offset)).date().isoformat()] = {"revenue": 0.0, "orders": 0}
        for order in orders:
            bucket = buckets.get(_day(order.created_at))
            if bucket is not None:
                bucket["revenue"] += order.total
                bucket["orders"] += 1
        return [
            {"date": day, "revenue": round(data["revenue"], 2), "orders": data["orders"]}
            for day, data in buckets.items()
        ]

    @staticmethod
    def _top_products(orders: List[Order]) -> List[Dict[str, Any]]:
        sales: Dict[str, Dict[str, Any]] = {}
        for order in orders:
            for item in order.items:
                title = item.get("title")
                entry = sales.setdefault(title, {"name": title, "sales": 0, "revenue": 0.0})
                entry["sales"] += int(item.get("quantity") or 0)
                entry["revenue"] += _line_total(item)
        ranked = sorted(sales.values(), key=lambda e: e["revenue"], reverse=True)[:TOP_PRODUCTS_LIMIT]
        return [{**entry, "revenue": round(entry["revenue"], 2)} for entry in ranked]

    @staticmethod
    def _orders_by_status(orders: List[Order]) -> List[Dict[str, Any]]:
        counts: Dict[str, int] = defaultdict(int)
        for order in orders:
            counts[order.status.value] += 1
        return [{"status": status, "count": count} for status, count in counts.items()]

    @staticmethod
    def _category_revenue(
        orders: List[Order], products: List[Dict[str, Any]], categories: Dict[Any, str]
    ) -> List[Dict[str, Any]]:
        category_of_title = {
            product.get("title"): categories.get(product.get("category_id")) for product in products
        }
        revenue: Dict[str, float] = defaultdict(float)
        for order in orders:
            for item in order.items:
                category = category_of_title.get(item.get("title"))
                if category:
                    revenue[category] += _line_total(item)
        ranked = sorted(revenue.items(), key=lambda kv: kv[1], reverse=True)
        return [{"category": category, "revenue": round(amount, 2)} for category, amount in ranked]

    def _page_view_summary(self, since: str) -> Dict[str, Any]:
        query = (
            self.supabase.table(PAGE_VIEWS_TABLE)
            .select("page, ip_address, timestamp")
            .gte("timestamp", since)
        )
        views = safe_execute(query, PAGE_VIEWS_TABLE, "Select").data or []
        pages: Dict[str, int] = defaultdict(int)
        for view in views:
            pages[view.get("page")] += 1
        top_pages = sorted(pages.items(), key=lambda kv: kv[1], reverse=True)[:TOP_PRODUCTS_LIMIT]
        return {
            "total": len(views),
            "uniqueVisitors": len({view.get("ip_address") for view in views}),
            "topPages": [{"page": page, "views": count} for page, count in top_pages],
        }
