"""Analytics report endpoint."""
from typing import Any
from fastapi import APIRouter, Depends, Query

from app.core.dependencies import get_analytics_service, require_permission
from app.core.permissions import Permission
from app.core.supabase_auth import Identity
from app.services.analytics_service import AnalyticsService

router = APIRouter()


@router.get("")
def get_analytics(
    days: int = Query(7, ge=1, le=365),
    identity: Identity = Depends(require_permission(Permission.ANALYTICS)),
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> Any:
    """Revenue, orders, top products and page views for the last ``days`` days."""
    return analytics.analytics(days)
