import logging
import stripe
from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core import config
from app.core.auth_dependency import get_db
from app.services.billing_service import construct_webhook_event, handle_webhook_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/billing", tags=["Billing Webhook"])


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: str = Header(None),
    db: Session = Depends(get_db),
):
    """
    Stripe webhook: plan changes and cancellations update the company plan.
    
    The Stripe signature is the only credential; unsigned or mis-signed
    payloads are rejected before anything is written.
    """
    if not config.STRIPE_WEBHOOK_SECRET:
        logger.error("Stripe webhook received but STRIPE_WEBHOOK_SECRET is not configured")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Webhook not configured"
        )

    payload = await request.body()

    try:
        event = construct_webhook_event(payload, stripe_signature)
    except (ValueError, stripe.SignatureVerificationError) as e:
        logger.warning(f"Webhook verification failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Webhook verification failed"
        )

    company = handle_webhook_event(db, event)

    # ✅ Always acknowledge verified events so Stripe stops retrying
    return {
        "status": "success",
        "company_id": company.id if company else None,
    }
