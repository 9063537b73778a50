"""
Company service: workspace context, usage aggregation and plan sync.

Usage has two entry points. get_my_company_usage is for end users and
requires an active membership. get_company_usage has no membership check and
takes a ServiceCaller instead; it is only reachable from internal callers.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, Optional, Any
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.company_guard import require_company, require_active_membership, require_company_role
from app.core.service_auth import ServiceCaller
from app.db.models.company import Company, CompanyPlan
from app.db.models.company_member import CompanyMember, CompanyRole, MembershipStatus
from app.db.models.user import User
from app.services.job_source import JobSource

logger = logging.getLogger(__name__)

# Role reported for a viewer of an existing company who has no membership row
DEFAULT_VIEWER_ROLE = CompanyRole.MEMBER

COMPANY_MANAGER_ROLES = (CompanyRole.OWNER, CompanyRole.ADMIN)


def find_company_by_org(db: Session, clerk_org_id: str) -> Optional[Company]:
    """Look up a company through the unique clerk_org_id index."""
    return db.query(Company).filter(Company.clerk_org_id == clerk_org_id).one_or_none()


def find_membership(db: Session, company_id: int, user_id: int) -> Optional[CompanyMember]:
    """Look up the single membership row for (company_id, user_id)."""
    return db.query(CompanyMember).filter(
        CompanyMember.company_id == company_id,
        CompanyMember.user_id == user_id,
    ).one_or_none()


def get_my_company_context(
    db: Session,
    viewer: Optional[User],
    clerk_org_id: str,
) -> Optional[Dict[str, Any]]:
    """
    Get the viewer's view of the company linked to clerk_org_id.

    Returns None for a logged-out viewer or an unknown org. A viewer without
    a membership row is reported with the "member" role; what such a viewer
    may see is decided by the client.

    Args:
        db: Database session
        viewer: Calling user, or None when unauthenticated
        clerk_org_id: Identity-provider organization id

    Returns:
        Dictionary with company_id, company_name, role, seat_limit, job_limit
    """
    if viewer is None:
        return None

    company = find_company_by_org(db, clerk_org_id)
    if not company:
        return None

    membership = find_membership(db, company.id, viewer.id)
    role = membership.role if membership else DEFAULT_VIEWER_ROLE

    return {
        "company_id": company.id,
        "company_name": company.name,
        "role": role,
        "seat_limit": company.seat_limit,
        "job_limit": company.job_limit,
    }


def aggregate_company_usage(db: Session, company_id: int, job_source: JobSource) -> Dict[str, int]:
    """
    Count members and jobs for a company.

    Members come from the company-scoped membership index. Jobs are read
    with a full scan of the job source and filtered here by company.

    Returns:
        Dictionary with active_member_count, invited_member_count,
        active_job_count, total_job_count
    """
    members = db.query(CompanyMember).filter(CompanyMember.company_id == company_id).all()

    active_member_count = sum(1 for m in members if m.status is MembershipStatus.ACTIVE)
    # pending and removed both count as "invited"
    invited_member_count = len(members) - active_member_count

    # external tables may store company ids as text
    wanted = str(company_id)
    company_jobs = [job for job in job_source.list_jobs() if str(job.company_id) == wanted]
    total_job_count = len(company_jobs)
    active_job_count = sum(1 for job in company_jobs if job.is_active)

    return {
        "active_member_count": active_member_count,
        "invited_member_count": invited_member_count,
        "active_job_count": active_job_count,
        "total_job_count": total_job_count,
    }


def get_company_usage(
    db: Session,
    caller: ServiceCaller,
    company_id: int,
    job_source: JobSource,
) -> Dict[str, int]:
    """
    Usage counts for internal callers. No membership check is made.
    """
    usage = aggregate_company_usage(db, company_id, job_source)
    logger.debug(f"Company usage read: company_id={company_id}, caller={caller.name}")
    return usage


def get_my_company_usage(
    db: Session,
    viewer: User,
    company_id: int,
    job_source: JobSource,
) -> Dict[str, int]:
    """
    Usage counts for a company the viewer is an active member of.

    Raises:
        AccessDeniedError: viewer has no active membership (checked before
            anything is counted)
    """
    require_active_membership(db, company_id, viewer.id)
    return aggregate_company_usage(db, company_id, job_source)


def _apply_plan(
    company: Company,
    plan: CompanyPlan,
    seat_limit: int,
    job_limit: int,
    now: datetime,
) -> None:
    company.plan = plan
    company.seat_limit = seat_limit
    company.job_limit = job_limit
    company.updated_at = now


def sync_company_plan(
    db: Session,
    caller: ServiceCaller,
    clerk_org_id: str,
    plan: CompanyPlan,
    seat_limit: int,
    job_limit: int,
) -> Company:
    """
    Create or update the company for clerk_org_id with a billing plan.

    Idempotent: repeating a call leaves exactly one row with the given
    values. A new company gets an empty name placeholder. If a concurrent
    sync inserts the same org first, the unique constraint rejects our
    insert and the existing row is updated instead.

    No role check is made here; only trusted callers hold a ServiceCaller.

    Args:
        db: Database session
        caller: Trusted caller performing the sync
        clerk_org_id: Identity-provider organization id
        plan: Billing plan
        seat_limit: Maximum active members
        job_limit: Maximum job postings

    Returns:
        The stored Company
    """
    plan = CompanyPlan(plan)
    now = datetime.now(timezone.utc)
    company = find_company_by_org(db, clerk_org_id)

    if company is None:
        company = Company(clerk_org_id=clerk_org_id, name="", created_at=now)
        _apply_plan(company, plan, seat_limit, job_limit, now)
        db.add(company)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            company = find_company_by_org(db, clerk_org_id)
            if company is None:
                raise
            logger.info(
                f"Company insert conflicted, updating instead: company_id={company.id}, "
                f"caller={caller.name}"
            )
            _apply_plan(company, plan, seat_limit, job_limit, now)
            db.commit()
        else:
            logger.info(
                f"Company created from plan sync: company_id={company.id}, plan={plan.value}, "
                f"caller={caller.name}"
            )
    else:
        _apply_plan(company, plan, seat_limit, job_limit, now)
        db.commit()
        logger.info(
            f"Company plan synced: company_id={company.id}, plan={plan.value}, "
            f"seat_limit={seat_limit}, job_limit={job_limit}, caller={caller.name}"
        )

    db.refresh(company)
    return company


def rename_company(db: Session, actor: User, company_id: int, name: str) -> Company:
    """
    Set a company's display name. Owners and admins only.
    """
    company = require_company(db, company_id)
    require_company_role(db, company_id, actor.id, COMPANY_MANAGER_ROLES)

    company.name = name
    company.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(company)

    logger.info(f"Company renamed: company_id={company.id}, user_id={actor.id}")
    return company
