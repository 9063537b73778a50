"""
Pydantic schemas for user endpoints.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class SyncUserRequest(BaseModel):
    """Profile fields copied from the identity provider. Omitted fields are left unchanged."""
    email: Optional[str] = Field(None, description="Primary email")
    first_name: Optional[str] = Field(None, description="First name")
    last_name: Optional[str] = Field(None, description="Last name")
    image_url: Optional[str] = Field(None, description="Avatar URL")


class UserResponse(BaseModel):
    """Schema for user response."""
    id: int = Field(..., description="User ID")
    clerk_user_id: str = Field(..., description="Identity-provider user ID")
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    
    class Config:
        from_attributes = True
