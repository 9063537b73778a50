"""
CompanyMember model: the join row granting a user a role in a company.
"""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from app.db.base import Base


class CompanyRole(str, enum.Enum):
    """Roles inside a company workspace, highest privilege first."""
    OWNER = "owner"
    ADMIN = "admin"
    RECRUITER = "recruiter"
    MEMBER = "member"


class MembershipStatus(str, enum.Enum):
    """Lifecycle of a membership. Removal is a status, never a row delete."""
    PENDING = "pending"
    ACTIVE = "active"
    REMOVED = "removed"


class CompanyMember(Base):
    """
    Membership of one user in one company.
    
    At most one row exists per (company_id, user_id); the unique constraint
    doubles as the composite lookup index used by the authorization guards
    and as the company-scoped range index used by usage aggregation.
    """
    __tablename__ = "company_members"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    
    role = Column(
        Enum(CompanyRole, name="companyrole", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=CompanyRole.MEMBER,
    )
    status = Column(
        Enum(MembershipStatus, name="membershipstatus", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=MembershipStatus.PENDING,
    )
    
    # Timestamps
    invited_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    
    # Relationships
    company = relationship("Company", backref="members")
    user = relationship("User", backref="memberships")
    
    __table_args__ = (
        UniqueConstraint("company_id", "user_id", name="uq_company_members_company_user"),
    )

    def __repr__(self):
        return (
            f"<CompanyMember(company_id={self.company_id}, user_id={self.user_id}, "
            f"role='{self.role}', status='{self.status}')>"
        )
