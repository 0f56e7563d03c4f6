"""Page view tracking."""
from typing import Any
from fastapi import APIRouter, Depends, Request

from app.core.dependencies import get_analytics_service
from app.schemas.shop_settings import PageViewCreate
from app.services.analytics_service import AnalyticsService

router = APIRouter()


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("x-real-ip") or (request.client.host if request.client else "unknown")


@router.post("/track")
def track_page_view(
    page_view: PageViewCreate,
    request: Request,
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> Any:
    analytics.track_page_view(
        page=page_view.page,
        referrer=page_view.referrer,
        user_agent=page_view.user_agent or request.headers.get("user-agent"),
        ip_address=client_ip(request),
    )
    return {"success": True}
