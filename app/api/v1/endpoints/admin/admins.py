"""Admin account management endpoints (super admins only)."""
from typing import Any
from fastapi import APIRouter, Depends

from app.core.dependencies import get_profile_service, require_super_admin
from app.core.supabase_auth import Identity
from app.schemas.admin import PermissionsUpdate
from app.services.business.profile_service import ProfileService

router = APIRouter()


@router.get("")
def list_admins(
    identity: Identity = Depends(require_super_admin),
    profiles: ProfileService = Depends(get_profile_service),
) -> Any:
    return [profile.to_supabase_dict() for profile in profiles.list_admins()]


@router.put("/{user_id}/permissions")
def update_admin_permissions(
    user_id: str,
    permissions_update: PermissionsUpdate,
    identity: Identity = Depends(require_super_admin),
    profiles: ProfileService = Depends(get_profile_service),
) -> Any:
    """Set an admin's permission list; ``null`` grants super admin."""
    updated = profiles.update_admin_permissions(identity, user_id, permissions_update.permissions)
    return updated.to_supabase_dict()


@router.post("/{user_id}/demote")
def demote_admin(
    user_id: str,
    identity: Identity = Depends(require_super_admin),
    profiles: ProfileService = Depends(get_profile_service),
) -> Any:
    return profiles.demote_admin(identity, user_id).to_supabase_dict()
