"""
Billing service for Stripe integration.

Turns verified Stripe webhook events into company plan syncs. Subscriptions
carry the identity-provider organization id in their metadata
("clerk_org_id"); the plan comes from metadata "plan" or from the price id.
"""
import logging
from typing import Any, Dict, Mapping, Optional
import stripe
from sqlalchemy.orm import Session

from app.core import config
from app.core.plan_limits import get_plan_limits, parse_plan
from app.core.service_auth import STRIPE_WEBHOOK_CALLER
from app.db.models.company import Company, CompanyPlan
from app.services.company_service import sync_company_plan

logger = logging.getLogger(__name__)

# Initialize Stripe
if config.STRIPE_SECRET_KEY:
    stripe.api_key = config.STRIPE_SECRET_KEY

PLAN_CHANGE_EVENTS = {
    "checkout.session.completed",
    "customer.subscription.created",
    "customer.subscription.updated",
}
PLAN_CANCEL_EVENTS = {
    "customer.subscription.deleted",
}

# Maximum age of a signed webhook payload
WEBHOOK_TOLERANCE_SECONDS = 300


def _build_price_mapping() -> Dict[str, CompanyPlan]:
    """Build price ID -> plan mapping from environment variables."""
    price_to_plan: Dict[str, CompanyPlan] = {}

    if config.STRIPE_PRICE_ID_STARTER:
        price_to_plan[config.STRIPE_PRICE_ID_STARTER] = CompanyPlan.STARTER

    if config.STRIPE_PRICE_ID_GROWTH:
        price_to_plan[config.STRIPE_PRICE_ID_GROWTH] = CompanyPlan.GROWTH

    return price_to_plan


def get_plan_from_price_id(price_id: Optional[str]) -> Optional[CompanyPlan]:
    """Get plan from Stripe price ID."""
    if not price_id:
        return None
    return _build_price_mapping().get(price_id)


def _extract_price_id(obj: Mapping[str, Any]) -> Optional[str]:
    """First price id on a subscription object, if any."""
    items = (obj.get("items") or {}).get("data") or []
    if not items:
        return None
    return (items[0].get("price") or {}).get("id")


def construct_webhook_event(payload: bytes, sig_header: Optional[str]) -> stripe.Event:
    """
    Verify a webhook payload against STRIPE_WEBHOOK_SECRET and build the event.

    Raises:
        ValueError: missing signature header or invalid payload
        stripe.SignatureVerificationError: signature does not match
    """
    if not sig_header:
        raise ValueError("Missing Stripe-Signature header")
    event = stripe.Webhook.construct_event(
        payload,
        sig_header,
        config.STRIPE_WEBHOOK_SECRET,
        tolerance=WEBHOOK_TOLERANCE_SECONDS,
    )
    logger.info(f"Verified webhook event: {event['type']}, id={event['id']}")
    return event


def resolve_event_plan(event_type: str, obj: Mapping[str, Any]) -> Optional[CompanyPlan]:
    """
    Work out which plan an event moves the company to.

    Returns:
        The plan, or None when the event carries no recognizable plan
    """
    if event_type in PLAN_CANCEL_EVENTS:
        return CompanyPlan.FREE

    metadata = obj.get("metadata") or {}
    plan = parse_plan(metadata.get("plan"))
    if plan:
        return plan
    return get_plan_from_price_id(_extract_price_id(obj))


def handle_webhook_event(db: Session, event: Mapping[str, Any]) -> Optional[Company]:
    """
    Apply a verified Stripe event.

    Args:
        db: Database session
        event: Verified Stripe event

    Returns:
        The synced Company, or None when the event was ignored
    """
    event_type = event["type"]
    if event_type not in PLAN_CHANGE_EVENTS and event_type not in PLAN_CANCEL_EVENTS:
        logger.debug(f"Ignoring Stripe event: type={event_type}")
        return None

    obj = event["data"]["object"]
    metadata = obj.get("metadata") or {}
    clerk_org_id = metadata.get("clerk_org_id")
    if not clerk_org_id:
        logger.warning(f"Stripe event without clerk_org_id metadata: type={event_type}, id={event.get('id')}")
        return None

    plan = resolve_event_plan(event_type, obj)
    if plan is None:
        logger.warning(f"Stripe event without a known plan: type={event_type}, id={event.get('id')}")
        return None

    seat_limit, job_limit = get_plan_limits(plan)
    company = sync_company_plan(
        db,
        STRIPE_WEBHOOK_CALLER,
        clerk_org_id=clerk_org_id,
        plan=plan,
        seat_limit=seat_limit,
        job_limit=job_limit,
    )

    logger.info(f"Stripe event applied: type={event_type}, company_id={company.id}, plan={plan.value}")
    return company
