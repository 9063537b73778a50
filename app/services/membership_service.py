"""
Membership service for company workspaces.

Handles invitations, role changes and removals. A membership row is never
deleted: removal sets status to "removed", and a removed user can be invited
again, which reuses the same row.
"""
import logging
from datetime import datetime, timezone
from typing import List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.company_guard import require_company, require_active_membership, require_company_role
from app.core.errors import NotFoundError, AccessDeniedError, ConflictError
from app.core.service_auth import ServiceCaller
from app.db.models.company import Company
from app.db.models.company_member import CompanyMember, CompanyRole, MembershipStatus
from app.db.models.user import User
from app.services.company_service import COMPANY_MANAGER_ROLES, find_company_by_org, find_membership
from app.services.user_service import get_or_create_user

logger = logging.getLogger(__name__)


def _count_active_owners(db: Session, company_id: int) -> int:
    return db.query(CompanyMember).filter(
        CompanyMember.company_id == company_id,
        CompanyMember.role == CompanyRole.OWNER,
        CompanyMember.status == MembershipStatus.ACTIVE,
    ).count()


def _require_current_member(db: Session, company_id: int, user_id: int) -> CompanyMember:
    membership = find_membership(db, company_id, user_id)
    if not membership or membership.status is MembershipStatus.REMOVED:
        raise NotFoundError("Member was not found.")
    return membership


def list_company_members(db: Session, viewer: User, company_id: int) -> List[CompanyMember]:
    """List every membership row of a company, oldest invitation first. Active members only."""
    require_company(db, company_id)
    require_active_membership(db, company_id, viewer.id)
    return db.query(CompanyMember).filter(
        CompanyMember.company_id == company_id
    ).order_by(CompanyMember.invited_at, CompanyMember.id).all()


def invite_member(
    db: Session,
    actor: User,
    company_id: int,
    user_id: int,
    role: CompanyRole,
) -> CompanyMember:
    """
    Invite a user into a company as a pending member.

    Owners and admins may invite; only owners may invite another owner.
    A previously removed member is re-invited on the same row.

    Raises:
        NotFoundError: company or user does not exist
        AccessDeniedError: actor lacks the required role
        ConflictError: user already has a pending or active membership
    """
    role = CompanyRole(role)
    require_company(db, company_id)
    actor_membership = require_company_role(db, company_id, actor.id, COMPANY_MANAGER_ROLES)

    if role is CompanyRole.OWNER and actor_membership.role is not CompanyRole.OWNER:
        raise AccessDeniedError("Only owners can invite owners.")

    if not db.get(User, user_id):
        raise NotFoundError("User was not found.")

    now = datetime.now(timezone.utc)
    membership = find_membership(db, company_id, user_id)

    if membership:
        if membership.status is not MembershipStatus.REMOVED:
            raise ConflictError(
                "User already has a membership in this company.",
                extra={"status": membership.status.value},
            )
        membership.role = role
        membership.status = MembershipStatus.PENDING
        membership.invited_at = now
        membership.updated_at = now
    else:
        membership = CompanyMember(
            company_id=company_id,
            user_id=user_id,
            role=role,
            status=MembershipStatus.PENDING,
            invited_at=now,
            updated_at=now,
        )
        db.add(membership)

    db.commit()
    db.refresh(membership)

    logger.info(
        f"Member invited: company_id={company_id}, user_id={user_id}, "
        f"role={role.value}, invited_by={actor.id}"
    )
    return membership


def accept_invitation(db: Session, viewer: User, company_id: int) -> CompanyMember:
    """
    Activate the viewer's pending membership.

    Raises:
        NotFoundError: viewer has no pending invitation for the company
    """
    membership = find_membership(db, company_id, viewer.id)
    if not membership or membership.status is not MembershipStatus.PENDING:
        raise NotFoundError("No pending invitation for this company.")

    membership.status = MembershipStatus.ACTIVE
    membership.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(membership)

    logger.info(f"Invitation accepted: company_id={company_id}, user_id={viewer.id}")
    return membership


def update_member_role(
    db: Session,
    actor: User,
    company_id: int,
    user_id: int,
    role: CompanyRole,
) -> CompanyMember:
    """
    Change the role of a pending or active member.

    Owners and admins may change roles; granting or revoking "owner" needs
    an owner, and the last active owner cannot be demoted.
    """
    role = CompanyRole(role)
    require_company(db, company_id)
    actor_membership = require_company_role(db, company_id, actor.id, COMPANY_MANAGER_ROLES)
    membership = _require_current_member(db, company_id, user_id)

    touches_owner = role is CompanyRole.OWNER or membership.role is CompanyRole.OWNER
    if touches_owner and actor_membership.role is not CompanyRole.OWNER:
        raise AccessDeniedError("Only owners can grant or revoke the owner role.")

    if membership.role is role:
        return membership

    if (
        membership.role is CompanyRole.OWNER
        and membership.status is MembershipStatus.ACTIVE
        and _count_active_owners(db, company_id) <= 1
    ):
        raise ConflictError("A company must keep at least one active owner.")

    previous = membership.role
    membership.role = role
    membership.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(membership)

    logger.info(
        f"Member role changed: company_id={company_id}, user_id={user_id}, "
        f"{previous.value} -> {role.value}, changed_by={actor.id}"
    )
    return membership


def remove_member(db: Session, actor: User, company_id: int, user_id: int) -> CompanyMember:
    """
    Mark a membership as removed. The row is kept.

    Removing an already removed member is a no-op.
    """
    require_company(db, company_id)
    actor_membership = require_company_role(db, company_id, actor.id, COMPANY_MANAGER_ROLES)

    membership = find_membership(db, company_id, user_id)
    if not membership:
        raise NotFoundError("Member was not found.")
    if membership.status is MembershipStatus.REMOVED:
        return membership

    if membership.role is CompanyRole.OWNER:
        if actor_membership.role is not CompanyRole.OWNER:
            raise AccessDeniedError("Only owners can remove owners.")
        if membership.status is MembershipStatus.ACTIVE and _count_active_owners(db, company_id) <= 1:
            raise ConflictError("A company must keep at least one active owner.")

    membership.status = MembershipStatus.REMOVED
    membership.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(membership)

    logger.info(f"Member removed: company_id={company_id}, user_id={user_id}, removed_by={actor.id}")
    return membership


def _apply_member_sync(
    db: Session,
    caller: ServiceCaller,
    clerk_org_id: str,
    clerk_user_id: str,
    role: CompanyRole,
    now: datetime,
) -> CompanyMember:
    company = find_company_by_org(db, clerk_org_id)
    if company is None:
        company = Company(clerk_org_id=clerk_org_id, name="", created_at=now, updated_at=now)
        db.add(company)
        db.flush()
        logger.info(f"Placeholder company created: company_id={company.id}, caller={caller.name}")

    user = get_or_create_user(db, clerk_user_id)

    membership = find_membership(db, company.id, user.id)
    if membership is None:
        membership = CompanyMember(
            company_id=company.id,
            user_id=user.id,
            invited_at=now,
        )
        db.add(membership)
    membership.role = role
    membership.status = MembershipStatus.ACTIVE
    membership.updated_at = now

    db.commit()
    return membership


def sync_company_member(
    db: Session,
    caller: ServiceCaller,
    clerk_org_id: str,
    clerk_user_id: str,
    role: CompanyRole,
) -> CompanyMember:
    """
    Mirror an identity-provider organization membership as an active member.

    Missing company and user rows are created as placeholders, so this is how
    the first owner of a new workspace appears. If a concurrent sync creates
    any of those rows first, the unique constraint rejects our insert and the
    sync is replayed once against the rows that now exist.
    """
    role = CompanyRole(role)
    now = datetime.now(timezone.utc)

    try:
        membership = _apply_member_sync(db, caller, clerk_org_id, clerk_user_id, role, now)
    except IntegrityError:
        db.rollback()
        logger.info(
            f"Member sync conflicted, retrying: clerk_org_id={clerk_org_id}, caller={caller.name}"
        )
        membership = _apply_member_sync(db, caller, clerk_org_id, clerk_user_id, role, now)

    db.refresh(membership)

    logger.info(
        f"Member synced: company_id={membership.company_id}, user_id={membership.user_id}, "
        f"role={role.value}, caller={caller.name}"
    )
    return membership
