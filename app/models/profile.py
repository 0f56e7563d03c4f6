"""User profile model (``profiles`` table)."""
import enum
from typing import Any, Dict, List, Optional

from app.core.permissions import Access, access_of, is_super_admin
from app.models.base import SupabaseModel


class UserRole(str, enum.Enum):
    """User roles in the system."""
    CUSTOMER = "customer"  # Can only place orders
    ADMIN = "admin"  # Back office; scope set by permissions


class UserProfile(SupabaseModel):
    """
    Profile row, 1:1 with a Supabase auth user.

    ``permissions`` is stored raw: ``None`` on an admin means super admin,
    a list means scoped admin. Customers ignore it. Use ``access`` rather than
    inspecting ``permissions`` directly.
    """
    table_name = "profiles"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.id: str = kwargs.get('id')
        self.role: str = kwargs.get('role') or UserRole.CUSTOMER.value
        self.permissions: Optional[List[str]] = kwargs.get('permissions')
        self.full_name: Optional[str] = kwargs.get('full_name')
        self.email: Optional[str] = kwargs.get('email')
        self.phone: Optional[str] = kwargs.get('phone')
        self.address: Optional[Dict[str, Any]] = kwargs.get('address')
        self.created_at = kwargs.get('created_at')
        self.updated_at = kwargs.get('updated_at')

    @property
    def access(self) -> Optional[Access]:
        return access_of(self)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @property
    def is_super_admin(self) -> bool:
        return is_super_admin(self)

    def __repr__(self):
        return f"<UserProfile {self.email} ({self.role})>"
