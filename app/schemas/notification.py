"""
Pydantic schemas for notification endpoints.
"""
from typing import Any, List, Optional
from datetime import datetime
from pydantic import AliasChoices, BaseModel, Field

from app.db.models.notification import NotificationType


class NotificationResponse(BaseModel):
    """Schema for a single notification."""
    id: int = Field(..., description="Notification ID")
    type: NotificationType = Field(..., description="Notification type")
    title: str = Field(..., description="Title")
    message: str = Field(..., description="Body text")
    link_url: Optional[str] = Field(None, description="Link to open")
    metadata: Optional[Any] = Field(None, validation_alias=AliasChoices("metadata_json", "metadata"), description="Free-form payload")
    is_read: bool = Field(..., description="Whether the user has read it")
    created_at: datetime = Field(..., description="Creation timestamp")
    read_at: Optional[datetime] = Field(None, description="When it was marked read")
    
    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": 3,
                "type": "application_received",
                "title": "New application",
                "message": "Jane Doe applied to Backend Engineer",
                "link_url": "/jobs/12/applications",
                "metadata": {"job_id": 12},
                "is_read": False,
                "created_at": "2026-01-15T10:30:00Z",
                "read_at": None
            }
        }


class NotificationListResponse(BaseModel):
    """Schema for the notification feed."""
    notifications: List[NotificationResponse] = Field(..., description="Newest first")
    unread_count: int = Field(..., description="Unread notifications in total")


class UnreadCountResponse(BaseModel):
    unread_count: int = Field(..., description="Unread notifications")


class MarkAllReadResponse(BaseModel):
    updated: int = Field(..., description="Notifications marked read")


class CreateNotificationRequest(BaseModel):
    """Request schema for the internal notification fan-out."""
    user_id: int = Field(..., description="Recipient user ID")
    type: NotificationType = Field(..., description="Notification type")
    title: str = Field(..., description="Title", min_length=1)
    message: str = Field(..., description="Body text", min_length=1)
    link_url: Optional[str] = Field(None, description="Link to open")
    metadata: Optional[Any] = Field(None, description="Free-form payload")
