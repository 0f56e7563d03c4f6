"""Payment provider webhooks."""
from typing import Any, Optional
from fastapi import APIRouter, Depends, Header, Request
from starlette.concurrency import run_in_threadpool

from app.core.dependencies import get_webhook_service
from app.services.business.payment_webhook_service import PaymentWebhookService

router = APIRouter()


@router.post("/payment")
@router.post("/stripe", include_in_schema=False)
async def payment_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None),
    webhook_service: PaymentWebhookService = Depends(get_webhook_service),
) -> Any:
    """
    Receive payment events.

    The raw body is needed for signature verification, so it is read before
    anything parses it.
    """
    payload = await request.body()
    return await run_in_threadpool(webhook_service.handle, payload, stripe_signature)
