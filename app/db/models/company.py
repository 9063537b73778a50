"""
Company model: one row per tenant organization workspace.
"""
from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.sql import func
import enum
from app.db.base import Base


class CompanyPlan(str, enum.Enum):
    """Billing plans a company can be on."""
    FREE = "free"
    STARTER = "starter"
    GROWTH = "growth"


class Company(Base):
    """
    Company workspace linked to an identity-provider organization.
    
    Plan and limits are written by the billing integration; name may be an
    empty placeholder until someone renames the workspace.
    """
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    clerk_org_id = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False, default="")
    
    # Plan and limits (None until the first plan sync)
    plan = Column(
        Enum(CompanyPlan, name="companyplan", values_callable=lambda e: [m.value for m in e]),
        nullable=True,
    )
    seat_limit = Column(Integer, nullable=True)
    job_limit = Column(Integer, nullable=True)
    
    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Company(id={self.id}, clerk_org_id='{self.clerk_org_id}', plan='{self.plan}')>"
