"""Profile persistence on the ``profiles`` table."""
from typing import Any, Dict, List, Optional

from app.core.errors import NotFound
from app.models.base import SupabaseModel
from app.models.profile import UserProfile, UserRole
from app.utils.supabase_helpers import safe_execute, safe_supabase_select, safe_supabase_update


class ProfileStore:
    table_name = UserProfile.table_name

    def __init__(self, supabase):
        self.supabase = supabase

    def find(self, user_id: str) -> Optional[UserProfile]:
        rows = safe_supabase_select(self.supabase, self.table_name, filters={"id": user_id}, limit=1)
        return UserProfile.from_dict(rows[0]) if rows else None

    def get(self, user_id: str) -> UserProfile:
        profile = self.find(user_id)
        if profile is None:
            raise NotFound("Profile not found")
        return profile

    def list(self, role: Optional[UserRole] = None) -> List[UserProfile]:
        filters = {"role": role.value} if role else None
        rows = safe_supabase_select(
            self.supabase, self.table_name, filters=filters, order_by="created_at", desc=True
        )
        return [UserProfile.from_dict(row) for row in rows]

    def find_many(self, user_ids: List[str]) -> Dict[str, UserProfile]:
        if not user_ids:
            return {}
        query = self.supabase.table(self.table_name).select("*").in_("id", list(set(user_ids)))
        rows = safe_execute(query, self.table_name, "Select").data or []
        return {row["id"]: UserProfile.from_dict(row) for row in rows}

    def count(self, role: UserRole) -> int:
        query = self.supabase.table(self.table_name).select("*", count="exact", head=True).eq("role", role.value)
        return safe_execute(query, self.table_name, "Count").count or 0

    def update(self, user_id: str, fields: Dict[str, Any]) -> UserProfile:
        data = {**fields, "updated_at": SupabaseModel.timestamp()}
        try:
            row = safe_supabase_update(self.supabase, self.table_name, data, "id", user_id)
        except NotFound:
            raise NotFound("Profile not found")
        return UserProfile.from_dict(row)
