"""
Endpoint tests for trusted callers: internal service routes and the Stripe webhook.
"""
import hashlib
import hmac
import json
import time

import pytest

from app.core import config
from app.db.models.company import Company, CompanyPlan
from app.db.models.company_member import MembershipStatus

SERVICE_TOKEN = "service-token-for-tests"
WEBHOOK_SECRET = "whsec_test_secret"


@pytest.fixture
def service_headers(monkeypatch):
    monkeypatch.setattr(config, "SERVICE_API_TOKEN", SERVICE_TOKEN)
    return {"X-Service-Token": SERVICE_TOKEN}


def sign_payload(payload: str, secret: str = WEBHOOK_SECRET, timestamp: int = None) -> str:
    """Build a Stripe-Signature header for payload."""
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.{payload}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


# --- service token ---------------------------------------------------------

def test_internal_routes_require_token(client, monkeypatch, make_company):
    monkeypatch.setattr(config, "SERVICE_API_TOKEN", SERVICE_TOKEN)
    company = make_company()

    assert client.get(f"/internal/companies/{company.id}/usage").status_code == 401
    response = client.get(
        f"/internal/companies/{company.id}/usage",
        headers={"X-Service-Token": "wrong"},
    )
    assert response.status_code == 401


def test_internal_routes_closed_without_configured_token(client, monkeypatch):
    monkeypatch.setattr(config, "SERVICE_API_TOKEN", None)
    response = client.post(
        "/internal/companies/plan",
        json={"clerk_org_id": "org_acme", "plan": "starter", "seat_limit": 5, "job_limit": 10},
        headers={"X-Service-Token": "anything"},
    )
    assert response.status_code == 401


def test_internal_usage_skips_membership(client, service_headers, make_company, make_user, make_membership):
    company = make_company()
    for _ in range(3):
        make_membership(company, make_user())
    for _ in range(2):
        make_membership(company, make_user(), status=MembershipStatus.REMOVED)

    response = client.get(f"/internal/companies/{company.id}/usage", headers=service_headers)

    assert response.status_code == 200
    assert response.json() == {
        "active_member_count": 3,
        "invited_member_count": 2,
        "active_job_count": 0,
        "total_job_count": 0,
    }


def test_internal_plan_sync_is_idempotent(client, db, service_headers):
    body = {"clerk_org_id": "org_acme", "plan": "growth", "seat_limit": 25, "job_limit": 50}

    first = client.post("/internal/companies/plan", json=body, headers=service_headers)
    second = client.post("/internal/companies/plan", json=body, headers=service_headers)

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json()["id"] == second.json()["id"]
    assert second.json()["plan"] == "growth"
    assert second.json()["name"] == ""
    assert db.query(Company).count() == 1


def test_internal_plan_sync_rejects_unknown_plan(client, service_headers):
    response = client.post(
        "/internal/companies/plan",
        json={"clerk_org_id": "org_acme", "plan": "enterprise", "seat_limit": 1, "job_limit": 1},
        headers=service_headers,
    )
    assert response.status_code == 422


def test_internal_member_sync(client, service_headers):
    response = client.post(
        "/internal/companies/members",
        json={"clerk_org_id": "org_new", "clerk_user_id": "user_new", "role": "owner"},
        headers=service_headers,
    )
    assert response.status_code == 200
    assert response.json()["role"] == "owner"
    assert response.json()["status"] == "active"


def test_internal_notification(client, service_headers, make_user):
    user = make_user()
    response = client.post(
        "/internal/notifications",
        json={
            "user_id": user.id,
            "type": "application_status",
            "title": "Interview scheduled",
            "message": "Your interview is on Monday",
            "metadata": {"application_id": 4},
        },
        headers=service_headers,
    )
    assert response.status_code == 201
    body = response.json()
    assert body["is_read"] is False
    assert body["read_at"] is None
    assert body["metadata"] == {"application_id": 4}


def test_internal_notification_unknown_user(client, service_headers):
    response = client.post(
        "/internal/notifications",
        json={"user_id": 999, "type": "system", "title": "Hi", "message": "Hello"},
        headers=service_headers,
    )
    assert response.status_code == 404


# --- stripe webhook --------------------------------------------------------

def subscription_payload(event_type, metadata):
    return json.dumps({
        "id": "evt_test",
        "type": event_type,
        "data": {"object": {"id": "sub_test", "metadata": metadata}},
    })


def test_webhook_not_configured(client, monkeypatch):
    monkeypatch.setattr(config, "STRIPE_WEBHOOK_SECRET", None)
    response = client.post("/billing/webhook", content="{}", headers={"Stripe-Signature": "t=1,v1=abc"})
    assert response.status_code == 503


def test_webhook_applies_signed_event(client, db, monkeypatch):
    monkeypatch.setattr(config, "STRIPE_WEBHOOK_SECRET", WEBHOOK_SECRET)
    payload = subscription_payload(
        "customer.subscription.created",
        {"clerk_org_id": "org_acme", "plan": "starter"},
    )

    response = client.post(
        "/billing/webhook",
        content=payload,
        headers={"Stripe-Signature": sign_payload(payload), "Content-Type": "application/json"},
    )

    assert response.status_code == 200
    assert response.json()["status"] == "success"
    company = db.query(Company).filter(Company.clerk_org_id == "org_acme").one()
    assert response.json()["company_id"] == company.id
    assert company.plan is CompanyPlan.STARTER
    assert company.seat_limit == 5
    assert company.job_limit == 10


def test_webhook_bad_signature_writes_nothing(client, db, monkeypatch):
    monkeypatch.setattr(config, "STRIPE_WEBHOOK_SECRET", WEBHOOK_SECRET)
    payload = subscription_payload(
        "customer.subscription.created",
        {"clerk_org_id": "org_acme", "plan": "growth"},
    )

    response = client.post(
        "/billing/webhook",
        content=payload,
        headers={"Stripe-Signature": sign_payload(payload, secret="whsec_wrong")},
    )

    assert response.status_code == 400
    assert db.query(Company).count() == 0


def test_webhook_missing_signature(client, monkeypatch):
    monkeypatch.setattr(config, "STRIPE_WEBHOOK_SECRET", WEBHOOK_SECRET)
    response = client.post("/billing/webhook", content="{}")
    assert response.status_code == 400


def test_webhook_acknowledges_ignored_event(client, db, monkeypatch):
    monkeypatch.setattr(config, "STRIPE_WEBHOOK_SECRET", WEBHOOK_SECRET)
    payload = subscription_payload("invoice.paid", {"clerk_org_id": "org_acme"})

    response = client.post(
        "/billing/webhook",
        content=payload,
        headers={"Stripe-Signature": sign_payload(payload)},
    )

    assert response.status_code == 200
    assert response.json() == {"status": "success", "company_id": None}
    assert db.query(Company).count() == 0
