"""Request dependencies: caller identity, access guards and service wiring."""
from typing import Callable, Optional
import logging

from fastapi import Depends, FastAPI, Request

from app.config.database import get_supabase_client, get_supabase_service_client
from app.config.settings import settings
from app.core.guards import enforce, guard_redirect
from app.core.permissions import Permission, Requirement
from app.core.supabase_auth import Identity, IdentityResolver
from app.services.analytics_service import AnalyticsService
from app.services.business.catalog_service import CatalogService
from app.services.business.catering_service import CateringService
from app.services.business.checkout_service import CheckoutService
from app.services.business.order_service import OrderService
from app.services.business.payment_webhook_service import PaymentWebhookService
from app.services.business.profile_service import ProfileService
from app.services.business.settings_service import SettingsService
from app.services.external.stripe_service import StripeService
from app.services.notifications.notification_service import NotificationService
from app.services.stores import OrderStore, ProfileStore, ShopSettingsStore

logger = logging.getLogger(__name__)

_identity_resolver: Optional[IdentityResolver] = None
_UNRESOLVED = object()


def get_supabase():
    """Service-role client for table access. Callers must be guarded first."""
    return get_supabase_service_client()


def get_identity_resolver() -> IdentityResolver:
    global _identity_resolver
    if _identity_resolver is None:
        _identity_resolver = IdentityResolver(get_supabase_client(), get_supabase_service_client())
    return _identity_resolver


def identity_resolver_for(app: FastAPI) -> IdentityResolver:
    """Resolver honouring ``app.dependency_overrides`` for code outside the DI graph (middleware)."""
    factory = app.dependency_overrides.get(get_identity_resolver, get_identity_resolver)
    return factory()


def extract_access_token(request: Request) -> Optional[str]:
    """Bearer token from the Authorization header, else the session cookie."""
    authorization = request.headers.get("Authorization")
    if authorization and authorization.startswith("Bearer "):
        return authorization.split("Bearer ", 1)[1].strip() or None
    return request.cookies.get(settings.ACCESS_TOKEN_COOKIE)


def get_identity_optional(
    request: Request,
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> Optional[Identity]:
    # The access guard middleware may already have resolved this request.
    identity = getattr(request.state, "identity", _UNRESOLVED)
    if identity is not _UNRESOLVED:
        return identity
    return resolver.resolve(extract_access_token(request))


def require(requirement: Requirement) -> Callable[..., Identity]:
    """Throwing guard for API routes: 401 without identity, 403 without access."""

    def dependency(identity: Optional[Identity] = Depends(get_identity_optional)) -> Identity:
        return enforce(identity, requirement)

    return dependency


def require_permission(permission: Permission) -> Callable[..., Identity]:
    return require(Requirement.permission(permission))


require_auth = require(Requirement.authenticated())
require_admin = require(Requirement.admin())
require_super_admin = require(Requirement.super_admin())


def page_guard(requirement: Requirement) -> Callable[..., Identity]:
    """Redirecting guard for page routes."""

    def dependency(
        request: Request,
        identity: Optional[Identity] = Depends(get_identity_optional),
    ) -> Identity:
        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"
        return guard_redirect(identity, requirement, path)

    return dependency


# Service wiring

def get_notifier() -> NotificationService:
    return NotificationService()


def get_payment_provider() -> StripeService:
    return StripeService()


def get_settings_service(supabase=Depends(get_supabase)) -> SettingsService:
    return SettingsService(ShopSettingsStore(supabase))


def get_order_service(
    supabase=Depends(get_supabase),
    notifier: NotificationService = Depends(get_notifier),
) -> OrderService:
    return OrderService(OrderStore(supabase), ProfileStore(supabase), notifier)


def get_checkout_service(
    supabase=Depends(get_supabase),
    shop_settings: SettingsService = Depends(get_settings_service),
    payments: StripeService = Depends(get_payment_provider),
) -> CheckoutService:
    return CheckoutService(OrderStore(supabase), shop_settings, payments)


def get_webhook_service(
    payments: StripeService = Depends(get_payment_provider),
    orders: OrderService = Depends(get_order_service),
) -> PaymentWebhookService:
    return PaymentWebhookService(payments, orders)


def get_profile_service(supabase=Depends(get_supabase)) -> ProfileService:
    return ProfileService(ProfileStore(supabase), OrderStore(supabase), supabase)


def get_catalog_service(supabase=Depends(get_supabase)) -> CatalogService:
    return CatalogService(supabase)


def get_catering_service(supabase=Depends(get_supabase)) -> CateringService:
    return CateringService(supabase)


def get_analytics_service(supabase=Depends(get_supabase)) -> AnalyticsService:
    return AnalyticsService(OrderStore(supabase), ProfileStore(supabase), supabase)
