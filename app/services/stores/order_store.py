"""Order persistence on the ``orders`` table."""
from typing import Any, Dict, Iterable, List, Optional
import logging

from app.core.errors import ExternalServiceFailure, NotFound
from app.models.base import SupabaseModel
from app.models.order import Order, OrderStatus
from app.utils.supabase_helpers import (
    safe_execute,
    safe_supabase_insert,
    safe_supabase_select,
    safe_supabase_update,
)

logger = logging.getLogger(__name__)


class OrderStore:
    """Reads and writes orders. Knows nothing about who is allowed to."""

    table_name = Order.table_name

    def __init__(self, supabase):
        self.supabase = supabase

    def generate_order_number(self) -> str:
        """Allocate the next human-readable order number from the database sequence."""
        response = safe_execute(
            self.supabase.rpc("generate_order_number"), self.table_name, "Generate order number"
        )
        if not response.data:
            raise ExternalServiceFailure("Failed to generate order number", status_code=500)
        return str(response.data)

    def insert(self, data: Dict[str, Any]) -> Order:
        return Order.from_dict(safe_supabase_insert(self.supabase, self.table_name, data))

    def find(self, order_id: str) -> Optional[Order]:
        rows = safe_supabase_select(self.supabase, self.table_name, filters={"id": order_id}, limit=1)
        return Order.from_dict(rows[0]) if rows else None

    def get(self, order_id: str) -> Order:
        order = self.find(order_id)
        if order is None:
            raise NotFound("Order not found")
        return order

    def find_by_session_id(self, session_id: str) -> Optional[Order]:
        rows = safe_supabase_select(
            self.supabase, self.table_name, filters={"stripe_session_id": session_id}, limit=1
        )
        return Order.from_dict(rows[0]) if rows else None

    def find_by_user_id(self, user_id: str) -> List[Order]:
        rows = safe_supabase_select(
            self.supabase, self.table_name, filters={"user_id": user_id}, order_by="created_at", desc=True
        )
        return [Order.from_dict(row) for row in rows]

    def list(self, status: Optional[OrderStatus] = None) -> List[Order]:
        filters = {"status": status.value} if status else None
        rows = safe_supabase_select(
            self.supabase, self.table_name, filters=filters, order_by="created_at", desc=True
        )
        return [Order.from_dict(row) for row in rows]

    def list_totals_for_users(self, user_ids: Iterable[str]) -> List[Dict[str, Any]]:
        """``user_id``/``total`` pairs for the given users, for customer stats."""
        user_ids = list(user_ids)
        if not user_ids:
            return []
        query = self.supabase.table(self.table_name).select("user_id, total").in_("user_id", user_ids)
        return safe_execute(query, self.table_name, "Select").data or []

    def list_created_between(self, start: str, end: Optional[str] = None) -> List[Order]:
        query = self.supabase.table(self.table_name).select("*").gte("created_at", start)
        if end:
            query = query.lt("created_at", end)
        rows = safe_execute(query, self.table_name, "Select").data or []
        return [Order.from_dict(row) for row in rows]

    def count(
        self,
        status: Optional[OrderStatus] = None,
        statuses: Optional[Iterable[str]] = None,
        since: Optional[str] = None,
    ) -> int:
        query = self.supabase.table(self.table_name).select("*", count="exact", head=True)
        if status:
            query = query.eq("status", status.value)
        if statuses:
            query = query.in_("status", list(statuses))
        if since:
            query = query.gte("created_at", since)
        return safe_execute(query, self.table_name, "Count").count or 0

    def recent_totals(self, limit: int = 100) -> List[float]:
        query = self.supabase.table(self.table_name).select("total").order("created_at", desc=True).limit(limit)
        rows = safe_execute(query, self.table_name, "Select").data or []
        return [float(row.get("total") or 0) for row in rows]

    def list_stale(self, status: OrderStatus, created_before: str) -> List[Order]:
        query = (
            self.supabase.table(self.table_name)
            .select("*")
            .eq("status", status.value)
            .lt("created_at", created_before)
        )
        rows = safe_execute(query, self.table_name, "Select").data or []
        return [Order.from_dict(row) for row in rows]

    def update_fields(self, order_id: str, fields: Dict[str, Any]) -> Order:
        data = {**fields, "updated_at": SupabaseModel.timestamp()}
        return Order.from_dict(safe_supabase_update(self.supabase, self.table_name, data, "id", order_id))

    def transition(
        self,
        order_id: str,
        from_status: OrderStatus,
        to_status: OrderStatus,
        extra: Optional[Dict[str, Any]] = None,
    ) -> Optional[Order]:
        """
        Conditionally move an order from one status to another.

        The write only applies while the row still holds ``from_status``; a
        ``None`` return means nothing matched (missing order, or somebody else
        changed the status first).
        """
        data = {**(extra or {}), "status": to_status.value, "updated_at": SupabaseModel.timestamp()}
        query = (
            self.supabase.table(self.table_name)
            .update(data)
            .eq("id", order_id)
            .eq("status", from_status.value)
        )
        rows = safe_execute(query, self.table_name, "Update").data
        if not rows:
            return None
        return Order.from_dict(rows[0])
