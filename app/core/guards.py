"""
Access guard adapters.

One rule (``app.core.permissions.evaluate``), three ways of failing:

* ``guard_redirect`` for the edge middleware and page routes: raises
  ``RedirectRequired`` pointing at sign-in or an explanatory admin URL.
* ``enforce`` for API routes and admin actions: raises ``Unauthorized`` or
  ``Forbidden``.
* ``check`` for shaping data: returns a bool and never raises.
"""
from typing import Optional
from urllib.parse import urlencode

from app.core.errors import Forbidden, RedirectRequired, Unauthorized
from app.core.permissions import (
    ADMINS_CAPABILITY,
    Decision,
    Permission,
    Requirement,
    evaluate,
)
from app.core.supabase_auth import Identity

SIGNIN_PATH = "/signin"
HOME_PATH = "/"
ADMIN_HOME_PATH = "/admin"


def decide(identity: Optional[Identity], requirement: Requirement) -> Decision:
    profile = identity.profile if identity else None
    return evaluate(identity is not None, profile, requirement)


def check(identity: Optional[Identity], requirement: Requirement) -> bool:
    return decide(identity, requirement) == Decision.ALLOW


def check_permission(identity: Optional[Identity], permission: Permission) -> bool:
    return check(identity, Requirement.permission(permission))


def enforce(identity: Optional[Identity], requirement: Requirement) -> Identity:
    """Return the identity if it satisfies ``requirement``, else raise."""
    decision = decide(identity, requirement)
    if decision == Decision.ALLOW:
        return identity
    if decision == Decision.UNAUTHENTICATED:
        raise Unauthorized()
    if decision == Decision.NOT_ADMIN:
        raise Forbidden("Admin access required")
    if decision == Decision.SUPER_ADMIN_REQUIRED:
        raise Forbidden("Super admin access required", permission=ADMINS_CAPABILITY)
    names = requirement.permission_names
    raise Forbidden(f"Permission required: {names}", permission=names)


def redirect_location(decision: Decision, requirement: Requirement, path: str) -> Optional[str]:
    """Where a denied page request is sent; None when access is allowed."""
    if decision == Decision.ALLOW:
        return None
    if decision == Decision.UNAUTHENTICATED:
        return f"{SIGNIN_PATH}?{urlencode({'redirect': path})}"
    if decision == Decision.NOT_ADMIN:
        return f"{HOME_PATH}?{urlencode({'error': 'unauthorized'})}"
    if decision == Decision.SUPER_ADMIN_REQUIRED:
        return f"{ADMIN_HOME_PATH}?{urlencode({'error': 'super_admin_required'})}"
    query = urlencode({"error": "no_permission", "required": requirement.permission_names})
    return f"{ADMIN_HOME_PATH}?{query}"


def guard_redirect(identity: Optional[Identity], requirement: Requirement, path: str) -> Identity:
    location = redirect_location(decide(identity, requirement), requirement, path)
    if location:
        raise RedirectRequired(location)
    return identity


def signed_in_home(identity: Identity) -> str:
    """Landing page for a signed-in user who opened the sign-in or sign-up page."""
    if identity.profile is not None and identity.profile.is_admin:
        return ADMIN_HOME_PATH
    return HOME_PATH
