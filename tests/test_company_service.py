"""
Unit tests for company service.
Tests workspace context, usage aggregation and plan sync.
"""
import pytest

from app.core.errors import NotFoundError, AccessDeniedError
from app.core.service_auth import INTERNAL_API_CALLER
from app.db.models.company import Company, CompanyPlan
from app.db.models.company_member import CompanyRole, MembershipStatus
from app.services import company_service
from app.services.company_service import (
    get_my_company_context,
    get_company_usage,
    get_my_company_usage,
    sync_company_plan,
    rename_company,
)
from app.services.job_source import ABSENT_JOB_SOURCE, JobRecord, JobSource


class StaticJobSource(JobSource):
    """Job source returning a fixed list of jobs."""

    def __init__(self, jobs):
        self.jobs = jobs
        self.calls = 0

    def list_jobs(self):
        self.calls += 1
        return list(self.jobs)


class ExplodingJobSource(JobSource):
    """Fails the test if anything reads jobs."""

    def list_jobs(self):
        raise AssertionError("job source must not be read")


@pytest.fixture
def company_with_members(make_company, make_user, make_membership):
    """Company with 3 active and 2 removed members."""
    company = make_company(clerk_org_id="org_usage", seat_limit=5, job_limit=10)
    for _ in range(3):
        make_membership(company, make_user())
    for _ in range(2):
        make_membership(company, make_user(), status=MembershipStatus.REMOVED)
    return company


# --- context ---------------------------------------------------------------

def test_context_unauthenticated_returns_none(db, make_company):
    make_company(clerk_org_id="org_acme")
    assert get_my_company_context(db, None, "org_acme") is None


def test_context_unknown_org_returns_none(db, make_user):
    viewer = make_user()
    assert get_my_company_context(db, viewer, "org_missing") is None


def test_context_without_membership_defaults_to_member(db, make_user, make_company):
    """A viewer with no membership row sees role 'member' and the real limits."""
    viewer = make_user()
    company = make_company(clerk_org_id="org_acme", name="Acme", seat_limit=5, job_limit=10)

    context = get_my_company_context(db, viewer, "org_acme")

    assert context == {
        "company_id": company.id,
        "company_name": "Acme",
        "role": CompanyRole.MEMBER,
        "seat_limit": 5,
        "job_limit": 10,
    }


def test_context_reports_membership_role(db, make_user, make_company, make_membership):
    viewer = make_user()
    company = make_company(clerk_org_id="org_acme")
    make_membership(company, viewer, role=CompanyRole.ADMIN)

    context = get_my_company_context(db, viewer, "org_acme")
    assert context["role"] is CompanyRole.ADMIN


def test_context_company_without_plan_has_no_limits(db, make_user, make_company):
    viewer = make_user()
    make_company(clerk_org_id="org_new")

    context = get_my_company_context(db, viewer, "org_new")
    assert context["seat_limit"] is None
    assert context["job_limit"] is None


# --- usage -----------------------------------------------------------------

def test_company_usage_without_job_table(db, company_with_members):
    """3 active + 2 removed members and no job table."""
    usage = get_company_usage(db, INTERNAL_API_CALLER, company_with_members.id, ABSENT_JOB_SOURCE)
    assert usage == {
        "active_member_count": 3,
        "invited_member_count": 2,
        "active_job_count": 0,
        "total_job_count": 0,
    }


def test_company_usage_pending_counts_as_invited(db, make_company, make_user, make_membership):
    company = make_company()
    make_membership(company, make_user())
    make_membership(company, make_user(), status=MembershipStatus.PENDING)
    make_membership(company, make_user(), status=MembershipStatus.REMOVED)

    usage = get_company_usage(db, INTERNAL_API_CALLER, company.id, ABSENT_JOB_SOURCE)
    assert usage["active_member_count"] == 1
    assert usage["invited_member_count"] == 2


def test_company_usage_counts_only_company_jobs(db, company_with_members):
    other_company_id = company_with_members.id + 100
    jobs = StaticJobSource([
        JobRecord(company_id=company_with_members.id, is_active=True),
        JobRecord(company_id=company_with_members.id, is_active=True),
        JobRecord(company_id=company_with_members.id, is_active=False),
        JobRecord(company_id=other_company_id, is_active=True),
    ])

    usage = get_company_usage(db, INTERNAL_API_CALLER, company_with_members.id, jobs)

    assert usage["active_job_count"] == 2
    assert usage["total_job_count"] == 3


def test_company_usage_unknown_company_is_all_zero(db):
    usage = get_company_usage(db, INTERNAL_API_CALLER, 12345, ABSENT_JOB_SOURCE)
    assert usage == {
        "active_member_count": 0,
        "invited_member_count": 0,
        "active_job_count": 0,
        "total_job_count": 0,
    }


def test_my_company_usage_active_member(db, company_with_members, make_user, make_membership):
    viewer = make_user()
    make_membership(company_with_members, viewer, role=CompanyRole.RECRUITER)
    jobs = StaticJobSource([JobRecord(company_id=company_with_members.id, is_active=True)])

    usage = get_my_company_usage(db, viewer, company_with_members.id, jobs)

    assert usage["active_member_count"] == 4
    assert usage["invited_member_count"] == 2
    assert usage["active_job_count"] == 1
    assert usage["total_job_count"] == 1


def test_my_company_usage_pending_member_denied_before_counting(db, company_with_members, make_user, make_membership):
    """A pending member is rejected before any aggregation runs."""
    viewer = make_user()
    make_membership(company_with_members, viewer, status=MembershipStatus.PENDING)

    with pytest.raises(AccessDeniedError):
        get_my_company_usage(db, viewer, company_with_members.id, ExplodingJobSource())


def test_my_company_usage_non_member_denied(db, company_with_members, make_user):
    with pytest.raises(AccessDeniedError):
        get_my_company_usage(db, make_user(), company_with_members.id, ExplodingJobSource())


# --- plan sync -------------------------------------------------------------

def test_sync_company_plan_creates_company(db):
    company = sync_company_plan(db, INTERNAL_API_CALLER, "org_new", CompanyPlan.STARTER, 5, 10)

    assert company.clerk_org_id == "org_new"
    assert company.name == ""
    assert company.plan is CompanyPlan.STARTER
    assert company.seat_limit == 5
    assert company.job_limit == 10
    assert company.created_at == company.updated_at


def test_sync_company_plan_is_idempotent(db):
    """Two identical syncs for a new org leave exactly one row."""
    first = sync_company_plan(db, INTERNAL_API_CALLER, "org_new", CompanyPlan.GROWTH, 25, 50)
    second = sync_company_plan(db, INTERNAL_API_CALLER, "org_new", CompanyPlan.GROWTH, 25, 50)

    assert first.id == second.id
    companies = db.query(Company).filter(Company.clerk_org_id == "org_new").all()
    assert len(companies) == 1
    assert companies[0].plan is CompanyPlan.GROWTH
    assert companies[0].seat_limit == 25
    assert companies[0].job_limit == 50


def test_sync_company_plan_updates_existing(db, make_company):
    existing = make_company(clerk_org_id="org_acme", name="Acme", plan=CompanyPlan.FREE, seat_limit=2, job_limit=1)
    created_at = existing.created_at

    company = sync_company_plan(db, INTERNAL_API_CALLER, "org_acme", "growth", 25, 50)

    assert company.id == existing.id
    assert company.name == "Acme"
    assert company.plan is CompanyPlan.GROWTH
    assert company.seat_limit == 25
    assert company.job_limit == 50
    assert company.created_at == created_at
    assert db.query(Company).count() == 1


def test_sync_company_plan_conflicting_insert_updates_existing_row(db, make_company, monkeypatch):
    """A sync that loses the insert race updates the row the winner created."""
    existing = make_company(clerk_org_id="org_race", name="Raced", plan=CompanyPlan.FREE, seat_limit=2, job_limit=1)
    existing_id = existing.id
    real_find = company_service.find_company_by_org
    calls = []

    def stale_find(session, clerk_org_id):
        calls.append(clerk_org_id)
        if len(calls) == 1:
            return None  # the read that happened before the other sync committed
        return real_find(session, clerk_org_id)

    monkeypatch.setattr(company_service, "find_company_by_org", stale_find)

    company = sync_company_plan(db, INTERNAL_API_CALLER, "org_race", CompanyPlan.GROWTH, 25, 50)

    assert len(calls) == 2
    assert company.id == existing_id
    assert company.name == "Raced"
    assert company.plan is CompanyPlan.GROWTH
    assert db.query(Company).count() == 1


def test_sync_company_plan_rejects_unknown_plan(db):
    with pytest.raises(ValueError):
        sync_company_plan(db, INTERNAL_API_CALLER, "org_new", "enterprise", 100, 100)
    assert db.query(Company).count() == 0


# --- rename ----------------------------------------------------------------

def test_rename_company_by_admin(db, make_company, make_user, make_membership):
    company = make_company(name="")
    admin = make_user()
    make_membership(company, admin, role=CompanyRole.ADMIN)

    renamed = rename_company(db, admin, company.id, "Acme Hiring")
    assert renamed.name == "Acme Hiring"


def test_rename_company_by_recruiter_denied(db, make_company, make_user, make_membership):
    company = make_company(name="Acme")
    recruiter = make_user()
    make_membership(company, recruiter, role=CompanyRole.RECRUITER)

    with pytest.raises(AccessDeniedError):
        rename_company(db, recruiter, company.id, "Hijacked")
    db.refresh(company)
    assert company.name == "Acme"


def test_rename_missing_company(db, make_user):
    with pytest.raises(NotFoundError):
        rename_company(db, make_user(), 999, "Nope")
