"""
Pydantic schemas for company membership endpoints.
"""
from datetime import datetime
from pydantic import BaseModel, Field

from app.db.models.company_member import CompanyRole, MembershipStatus


class MemberResponse(BaseModel):
    """Schema for a membership row."""
    id: int = Field(..., description="Membership ID")
    company_id: int = Field(..., description="Company ID")
    user_id: int = Field(..., description="User ID")
    role: CompanyRole = Field(..., description="Role in the company")
    status: MembershipStatus = Field(..., description="pending, active or removed")
    invited_at: datetime = Field(..., description="When the user was (last) invited")
    updated_at: datetime = Field(..., description="Last role/status change")
    
    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": 7,
                "company_id": 1,
                "user_id": 42,
                "role": "recruiter",
                "status": "pending",
                "invited_at": "2026-01-15T10:00:00Z",
                "updated_at": "2026-01-15T10:00:00Z"
            }
        }


class InviteMemberRequest(BaseModel):
    """Request schema for inviting a user."""
    user_id: int = Field(..., description="User to invite")
    role: CompanyRole = Field(default=CompanyRole.MEMBER, description="Role granted on acceptance")


class UpdateMemberRoleRequest(BaseModel):
    """Request schema for changing a member's role."""
    role: CompanyRole = Field(..., description="New role")


class SyncCompanyMemberRequest(BaseModel):
    """Request schema for mirroring an identity-provider organization membership."""
    clerk_org_id: str = Field(..., description="Identity-provider organization ID", min_length=1)
    clerk_user_id: str = Field(..., description="Identity-provider user ID", min_length=1)
    role: CompanyRole = Field(default=CompanyRole.MEMBER, description="Role to grant")
