"""
Pydantic schemas for company endpoints.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field

from app.db.models.company import CompanyPlan
from app.db.models.company_member import CompanyRole


class CompanyContextResponse(BaseModel):
    """The viewer's view of a company workspace."""
    company_id: int = Field(..., description="Company ID")
    company_name: str = Field(..., description="Company display name (may be empty)")
    role: CompanyRole = Field(..., description="Viewer's role; 'member' when the viewer has no membership")
    seat_limit: Optional[int] = Field(None, description="Plan seat limit")
    job_limit: Optional[int] = Field(None, description="Plan job posting limit")
    
    class Config:
        json_schema_extra = {
            "example": {
                "company_id": 1,
                "company_name": "Acme Hiring",
                "role": "admin",
                "seat_limit": 5,
                "job_limit": 10
            }
        }


class CompanyUsageResponse(BaseModel):
    """Member and job counts for a company."""
    active_member_count: int = Field(..., description="Members with status 'active'")
    invited_member_count: int = Field(..., description="Members with status 'pending' or 'removed'")
    active_job_count: int = Field(..., description="Active job postings")
    total_job_count: int = Field(..., description="All job postings")
    
    class Config:
        json_schema_extra = {
            "example": {
                "active_member_count": 3,
                "invited_member_count": 2,
                "active_job_count": 0,
                "total_job_count": 0
            }
        }


class SyncCompanyPlanRequest(BaseModel):
    """Request schema for the internal plan sync."""
    clerk_org_id: str = Field(..., description="Identity-provider organization ID", min_length=1)
    plan: CompanyPlan = Field(..., description="Plan: free, starter or growth")
    seat_limit: int = Field(..., description="Seat limit", ge=0)
    job_limit: int = Field(..., description="Job posting limit", ge=0)
    
    class Config:
        json_schema_extra = {
            "example": {
                "clerk_org_id": "org_2abc",
                "plan": "starter",
                "seat_limit": 5,
                "job_limit": 10
            }
        }


class RenameCompanyRequest(BaseModel):
    """Request schema for renaming a company."""
    name: str = Field(..., description="New display name", min_length=1, max_length=255)


class CompanyResponse(BaseModel):
    """Schema for company response."""
    id: int = Field(..., description="Company ID")
    clerk_org_id: str = Field(..., description="Identity-provider organization ID")
    name: str = Field(..., description="Display name")
    plan: Optional[CompanyPlan] = Field(None, description="Billing plan")
    seat_limit: Optional[int] = Field(None, description="Seat limit")
    job_limit: Optional[int] = Field(None, description="Job posting limit")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
    
    class Config:
        from_attributes = True
