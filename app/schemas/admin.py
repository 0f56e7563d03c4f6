"""Back-office account management schemas."""
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field

from app.models.profile import UserRole


class PermissionsUpdate(BaseModel):
    """``null`` makes the admin a super admin; a list scopes them."""
    permissions: Optional[List[str]]


class RoleUpdate(BaseModel):
    role: UserRole
    permissions: Optional[List[str]] = None


class CustomerDetailsUpdate(BaseModel):
    full_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
