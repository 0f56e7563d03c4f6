"""Customer management endpoints."""
from typing import Any
from fastapi import APIRouter, Depends

from app.core.dependencies import get_profile_service, require_permission, require_super_admin
from app.core.permissions import Permission
from app.core.supabase_auth import Identity
from app.schemas.admin import CustomerDetailsUpdate, RoleUpdate
from app.services.business.profile_service import ProfileService

router = APIRouter()
require_customers = require_permission(Permission.CUSTOMERS)


@router.get("")
def list_customers(
    identity: Identity = Depends(require_customers),
    profiles: ProfileService = Depends(get_profile_service),
) -> Any:
    """Customers with order count and total spent."""
    return profiles.list_customers()


@router.get("/{user_id}")
def get_customer(
    user_id: str,
    identity: Identity = Depends(require_customers),
    profiles: ProfileService = Depends(get_profile_service),
) -> Any:
    return profiles.get_customer(user_id)


@router.put("/{user_id}")
def update_customer(
    user_id: str,
    details: CustomerDetailsUpdate,
    identity: Identity = Depends(require_customers),
    profiles: ProfileService = Depends(get_profile_service),
) -> Any:
    updated = profiles.update_customer_details(user_id, details.full_name, details.email, details.phone)
    return updated.to_supabase_dict()


@router.put("/{user_id}/role")
def set_customer_role(
    user_id: str,
    role_update: RoleUpdate,
    identity: Identity = Depends(require_super_admin),
    profiles: ProfileService = Depends(get_profile_service),
) -> Any:
    """Promote a customer to admin (``permissions: null`` for super admin) or demote back."""
    updated = profiles.set_role(identity, user_id, role_update.role, role_update.permissions)
    return updated.to_supabase_dict()
