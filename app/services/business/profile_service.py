"""Customer and admin account management."""
from collections import defaultdict
from typing import Any, Dict, List, Optional
import logging

from app.core.errors import ExternalServiceFailure, InvalidInput, SelfActionForbidden
from app.core.permissions import Permission
from app.core.supabase_auth import Identity
from app.models.profile import UserProfile, UserRole
from app.services.stores import OrderStore, ProfileStore

logger = logging.getLogger(__name__)


def validate_permissions(permissions: Optional[List[str]]) -> Optional[List[str]]:
    """
    Normalise a permission list for storage.

    ``None`` is kept (super admin). Unknown tags are rejected rather than
    silently dropped so a typo never looks like a successful grant.
    """
    if permissions is None:
        return None
    valid = {p.value for p in Permission}
    unknown = [p for p in permissions if p not in valid]
    if unknown:
        raise InvalidInput(f"Unknown permissions: {', '.join(unknown)}")
    return sorted(set(permissions))


class ProfileService:
    """Reads customers and admins; super-admin operations on roles and permissions."""

    def __init__(self, profiles: ProfileStore, orders: OrderStore, supabase):
        self.profiles = profiles
        self.orders = orders
        self.supabase = supabase

    # Customers

    def list_customers(self, role: Optional[UserRole] = UserRole.CUSTOMER) -> List[Dict[str, Any]]:
        """Profiles with ``order_count`` and ``total_spent``, newest first."""
        profiles = self.profiles.list(role)
        stats = self._order_stats([p.id for p in profiles])
        return [self._with_stats(p, stats.get(p.id)) for p in profiles]

    def get_customer(self, user_id: str) -> Dict[str, Any]:
        profile = self.profiles.get(user_id)
        return self._with_stats(profile, self._order_stats([user_id]).get(user_id))

    def update_customer_details(self, user_id: str, full_name: str, email: str, phone: Optional[str]) -> UserProfile:
        """
        Update name and phone on the profile; an email change goes through
        Supabase Auth, which sends the customer a confirmation link.
        """
        current = self.profiles.get(user_id)
        updated = self.profiles.update(user_id, {"full_name": full_name, "phone": phone})

        if current.email != email:
            try:
                self.supabase.auth.admin.update_user_by_id(user_id, {"email": email})
            except Exception as e:
                logger.error(f"Error updating auth email for {user_id}: {e}")
                raise ExternalServiceFailure(
                    "Profile updated but email change requires verification. "
                    "Customer will receive a confirmation email."
                )
            logger.info(f"Requested auth email change for {user_id}")
        return updated

    # Admins

    def list_admins(self) -> List[UserProfile]:
        return self.profiles.list(UserRole.ADMIN)

    def update_admin_permissions(
        self, actor: Identity, target_id: str, permissions: Optional[List[str]]
    ) -> UserProfile:
        if actor.user_id == target_id:
            raise SelfActionForbidden("You cannot edit your own permissions")

        target = self.profiles.get(target_id)
        if not target.is_admin:
            raise InvalidInput("User is not an admin")

        normalised = validate_permissions(permissions)
        updated = self.profiles.update(target_id, {"permissions": normalised})
        logger.info(
            f"Admin {actor.user_id} set permissions of {target_id} to "
            f"{'super admin' if normalised is None else normalised}"
        )
        return updated

    def demote_admin(self, actor: Identity, target_id: str) -> UserProfile:
        if actor.user_id == target_id:
            raise SelfActionForbidden("You cannot demote yourself")

        target = self.profiles.get(target_id)
        if not target.is_admin:
            raise InvalidInput("User is not an admin")

        updated = self.profiles.update(target_id, {"role": UserRole.CUSTOMER.value, "permissions": None})
        logger.info(f"Admin {actor.user_id} demoted {target_id} to customer")
        return updated

    def set_role(
        self,
        actor: Identity,
        target_id: str,
        role: UserRole,
        permissions: Optional[List[str]] = None,
    ) -> UserProfile:
        """
        Promote or demote from the customers screen.

        Promoting with ``permissions=None`` creates a super admin; an empty
        list creates an admin with no access yet. Demoting clears permissions.
        """
        if actor.user_id == target_id:
            raise SelfActionForbidden("You cannot change your own role")

        self.profiles.get(target_id)
        if role == UserRole.ADMIN:
            fields = {"role": role.value, "permissions": validate_permissions(permissions)}
        else:
            fields = {"role": role.value, "permissions": None}

        updated = self.profiles.update(target_id, fields)
        logger.info(f"Admin {actor.user_id} set role of {target_id} to {role.value}")
        return updated

    # Helpers

    def _order_stats(self, user_ids: List[str]) -> Dict[str, Dict[str, Any]]:
        stats: Dict[str, Dict[str, Any]] = defaultdict(lambda: {"order_count": 0, "total_spent": 0.0})
        for row in self.orders.list_totals_for_users(user_ids):
            entry = stats[row["user_id"]]
            entry["order_count"] += 1
            entry["total_spent"] += float(row.get("total") or 0)
        return stats

    @staticmethod
    def _with_stats(profile: UserProfile, stats: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        data = profile.to_supabase_dict()
        data.update(stats or {"order_count": 0, "total_spent": 0.0})
        data["total_spent"] = round(data["total_spent"], 2)
        return data
