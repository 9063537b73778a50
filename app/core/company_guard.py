"""
Company workspace authorization guards.

Every check re-reads membership from the database instead of trusting a role
claimed by the client. Guards only read; they never write.
"""
import logging
from typing import Iterable
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, AccessDeniedError
from app.db.models.company import Company
from app.db.models.company_member import CompanyMember, CompanyRole, MembershipStatus

logger = logging.getLogger(__name__)


def require_company(db: Session, company_id: int) -> Company:
    """
    Fetch a company by primary key.
    
    Raises:
        NotFoundError: company does not exist
    """
    company = db.get(Company, company_id)
    if not company:
        raise NotFoundError("Company was not found.")
    return company


def require_active_membership(db: Session, company_id: int, user_id: int) -> CompanyMember:
    """
    Fetch the caller's membership and require it to be active.
    
    Raises:
        AccessDeniedError: no membership row, or status is pending/removed
    """
    membership = db.query(CompanyMember).filter(
        CompanyMember.company_id == company_id,
        CompanyMember.user_id == user_id,
    ).one_or_none()

    if not membership or membership.status is not MembershipStatus.ACTIVE:
        logger.warning(
            f"Company access denied: company_id={company_id}, user_id={user_id}, "
            f"status={membership.status.value if membership else None}"
        )
        raise AccessDeniedError("You do not have access to this company workspace.")
    return membership


def require_company_role(
    db: Session,
    company_id: int,
    user_id: int,
    allowed_roles: Iterable[CompanyRole],
) -> CompanyMember:
    """
    Require an active membership whose role is one of allowed_roles.
    
    Raises:
        AccessDeniedError: inactive membership or role not allowed
    """
    membership = require_active_membership(db, company_id, user_id)
    allowed = {CompanyRole(role) for role in allowed_roles}
    if membership.role not in allowed:
        logger.warning(
            f"Company role denied: company_id={company_id}, user_id={user_id}, "
            f"role={membership.role.value}, allowed={sorted(r.value for r in allowed)}"
        )
        raise AccessDeniedError("Insufficient company role permissions.")
    return membership
