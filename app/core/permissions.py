"""
Admin permission model.

Pure decisions over a profile-shaped value (anything with ``role`` and
``permissions`` attributes). No I/O happens here; the guard layer in
``app.core.guards`` resolves the caller and adapts the ``Decision`` produced by
``evaluate`` into a redirect, an exception or a boolean.

Stored profiles use ``permissions = None`` on an admin to mean "super admin".
That sentinel is translated once, in ``access_of``, into the explicit
``SuperAdmin`` / ``Scoped`` variants used everywhere else.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Union


class Permission(str, Enum):
    """Grantable admin permissions."""
    PRODUCTS = "products"
    ORDERS = "orders"
    CUSTOMERS = "customers"
    CATEGORIES = "categories"
    CATERING = "catering"
    SETTINGS = "settings"
    ANALYTICS = "analytics"


# Not a grantable permission; names the super-admin-only capability in errors.
ADMINS_CAPABILITY = "admins"

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class SuperAdmin:
    """Unrestricted admin access."""

    def allows(self, permission: Permission) -> bool:
        return True


@dataclass(frozen=True)
class Scoped:
    """Access limited to an explicit, possibly empty, set of permissions."""
    permissions: FrozenSet[Permission] = field(default_factory=frozenset)

    def allows(self, permission: Permission) -> bool:
        return permission in self.permissions


Access = Union[SuperAdmin, Scoped]

SUPER_ADMIN = SuperAdmin()
NO_ACCESS = Scoped(frozenset())


def parse_permissions(raw: Optional[Iterable[str]]) -> FrozenSet[Permission]:
    """Convert stored permission tags into ``Permission`` members, dropping unknown tags."""
    if not raw:
        return frozenset()
    parsed = set()
    for tag in raw:
        try:
            parsed.add(Permission(tag))
        except ValueError:
            continue
    return frozenset(parsed)


def _role_of(profile) -> Optional[str]:
    role = getattr(profile, "role", None)
    return role.value if isinstance(role, Enum) else role


def access_of(profile) -> Optional[Access]:
    """Return the access variant for a profile, or None when there is no profile."""
    if profile is None:
        return None
    if _role_of(profile) != ADMIN_ROLE:
        return NO_ACCESS
    raw = getattr(profile, "permissions", None)
    if raw is None:
        return SUPER_ADMIN
    return Scoped(parse_permissions(raw))


def is_admin(profile) -> bool:
    return profile is not None and _role_of(profile) == ADMIN_ROLE


def is_super_admin(profile) -> bool:
    """True iff the profile is an admin whose permissions are unrestricted."""
    return isinstance(access_of(profile), SuperAdmin)


def has_permission(profile, permission: Union[Permission, str]) -> bool:
    access = access_of(profile)
    if access is None:
        return False
    try:
        permission = Permission(permission)
    except ValueError:
        return isinstance(access, SuperAdmin)
    return access.allows(permission)


def has_any_permission(profile, permissions: Iterable[Union[Permission, str]]) -> bool:
    if is_super_admin(profile):
        return True
    return any(has_permission(profile, p) for p in permissions)


def has_all_permissions(profile, permissions: Iterable[Union[Permission, str]]) -> bool:
    if is_super_admin(profile):
        return True
    if not is_admin(profile):
        return False
    return all(has_permission(profile, p) for p in permissions)


class RequirementKind(str, Enum):
    AUTHENTICATED = "authenticated"
    ADMIN = "admin"
    ANY_OF = "any_of"
    ALL_OF = "all_of"
    SUPER_ADMIN = "super_admin"


@dataclass(frozen=True)
class Requirement:
    """What a route or action demands of its caller."""
    kind: RequirementKind
    permissions: tuple = ()

    @classmethod
    def authenticated(cls) -> "Requirement":
        return cls(RequirementKind.AUTHENTICATED)

    @classmethod
    def admin(cls) -> "Requirement":
        return cls(RequirementKind.ADMIN)

    @classmethod
    def permission(cls, permission: Union[Permission, str]) -> "Requirement":
        return cls(RequirementKind.ALL_OF, (Permission(permission),))

    @classmethod
    def any_of(cls, *permissions: Union[Permission, str]) -> "Requirement":
        return cls(RequirementKind.ANY_OF, tuple(Permission(p) for p in permissions))

    @classmethod
    def all_of(cls, *permissions: Union[Permission, str]) -> "Requirement":
        return cls(RequirementKind.ALL_OF, tuple(Permission(p) for p in permissions))

    @classmethod
    def super_admin(cls) -> "Requirement":
        return cls(RequirementKind.SUPER_ADMIN)

    @property
    def permission_names(self) -> str:
        return ",".join(p.value for p in self.permissions)


class Decision(str, Enum):
    ALLOW = "allow"
    UNAUTHENTICATED = "unauthenticated"
    NOT_ADMIN = "not_admin"
    MISSING_PERMISSION = "missing_permission"
    SUPER_ADMIN_REQUIRED = "super_admin_required"


def evaluate(authenticated: bool, profile, requirement: Requirement) -> Decision:
    """
    Decide whether a caller satisfies a requirement.

    ``authenticated`` distinguishes "no session" from "session without a
    profile row": the latter passes ``AUTHENTICATED`` but is treated as
    signed out by every admin requirement.
    """
    if not authenticated:
        return Decision.UNAUTHENTICATED
    if requirement.kind == RequirementKind.AUTHENTICATED:
        return Decision.ALLOW
    if profile is None:
        return Decision.UNAUTHENTICATED
    if not is_admin(profile):
        return Decision.NOT_ADMIN
    if requirement.kind == RequirementKind.ADMIN:
        return Decision.ALLOW
    if requirement.kind == RequirementKind.SUPER_ADMIN:
        return Decision.ALLOW if is_super_admin(profile) else Decision.SUPER_ADMIN_REQUIRED
    if requirement.kind == RequirementKind.ANY_OF:
        allowed = has_any_permission(profile, requirement.permissions)
    else:
        allowed = has_all_permissions(profile, requirement.permissions)
    return Decision.ALLOW if allowed else Decision.MISSING_PERMISSION


# Page routes and what the edge demands before any page code runs.
ROUTE_PERMISSIONS = {
    "/admin/products": Permission.PRODUCTS,
    "/admin/orders": Permission.ORDERS,
    "/admin/customers": Permission.CUSTOMERS,
    "/admin/categories": Permission.CATEGORIES,
    "/admin/catering": Permission.CATERING,
    "/admin/settings": Permission.SETTINGS,
    "/admin/analytics": Permission.ANALYTICS,
}

SUPER_ADMIN_ONLY_ROUTES = ("/admin/admins",)

ADMIN_ROUTE_PREFIX = "/admin"

PROTECTED_ROUTES = ("/orders", "/profile", "/checkout/success")

AUTH_ROUTES = ("/signin", "/signup")


def _matches(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix.rstrip("/") + "/")


def requirement_for_path(path: str) -> Optional[Requirement]:
    """Requirement the edge enforces for a page path, or None if the path is public."""
    for route in SUPER_ADMIN_ONLY_ROUTES:
        if _matches(path, route):
            return Requirement.super_admin()
    for route, permission in ROUTE_PERMISSIONS.items():
        if _matches(path, route):
            return Requirement.permission(permission)
    if _matches(path, ADMIN_ROUTE_PREFIX):
        return Requirement.admin()
    for route in PROTECTED_ROUTES:
        if _matches(path, route):
            return Requirement.authenticated()
    return None


def is_auth_route(path: str) -> bool:
    return any(_matches(path, route) for route in AUTH_ROUTES)
