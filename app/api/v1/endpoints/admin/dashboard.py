"""Back-office landing counters."""
from typing import Any
from fastapi import APIRouter, Depends

from app.core.dependencies import get_analytics_service, require_admin
from app.core.supabase_auth import Identity
from app.services.analytics_service import AnalyticsService

router = APIRouter()


@router.get("")
async def get_dashboard_stats(
    identity: Identity = Depends(require_admin),
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> Any:
    """Counters for any admin; figures outside the caller's permissions are zero."""
    return await analytics.dashboard_stats(identity)
