"""
Notification feed endpoints.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_db, require_viewer_user
from app.db.models.user import User
from app.schemas.notification import (
    NotificationResponse,
    NotificationListResponse,
    UnreadCountResponse,
    MarkAllReadResponse,
)
from app.services import notification_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", status_code=status.HTTP_200_OK, response_model=NotificationListResponse)
def list_notifications(
    unread_only: bool = Query(False, description="Only unread notifications"),
    limit: int = Query(notification_service.DEFAULT_FEED_LIMIT, ge=1, le=200, description="Maximum items"),
    viewer: User = Depends(require_viewer_user),
    db: Session = Depends(get_db)
):
    """Get the viewer's notifications, newest first."""
    notifications = notification_service.list_notifications(db, viewer, unread_only=unread_only, limit=limit)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        unread_count=notification_service.get_unread_count(db, viewer),
    )


@router.get("/unread-count", status_code=status.HTTP_200_OK, response_model=UnreadCountResponse)
def unread_count(
    viewer: User = Depends(require_viewer_user),
    db: Session = Depends(get_db)
):
    return UnreadCountResponse(unread_count=notification_service.get_unread_count(db, viewer))


@router.post("/read-all", status_code=status.HTTP_200_OK, response_model=MarkAllReadResponse)
def mark_all_read(
    viewer: User = Depends(require_viewer_user),
    db: Session = Depends(get_db)
):
    """Mark every unread notification of the viewer as read."""
    try:
        updated = notification_service.mark_all_notifications_read(db, viewer)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to mark notifications read: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to mark notifications read"
        )
    return MarkAllReadResponse(updated=updated)


@router.post("/{notification_id}/read", status_code=status.HTTP_200_OK, response_model=NotificationResponse)
def mark_read(
    notification_id: int,
    viewer: User = Depends(require_viewer_user),
    db: Session = Depends(get_db)
):
    """Mark one notification as read."""
    try:
        notification = notification_service.mark_notification_read(db, viewer, notification_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to mark notification read: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to mark notification read"
        )
    return NotificationResponse.model_validate(notification)
