"""
Notification service for the in-app feed.

read_at is written only when a notification goes from unread to read.
"""
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional
from sqlalchemy import desc
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.core.service_auth import ServiceCaller
from app.db.models.notification import Notification, NotificationType
from app.db.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_FEED_LIMIT = 50


def create_notification(
    db: Session,
    caller: ServiceCaller,
    user_id: int,
    type: NotificationType,
    title: str,
    message: str,
    link_url: Optional[str] = None,
    metadata: Optional[Any] = None,
) -> Notification:
    """
    Deliver an unread notification to a user.

    Raises:
        NotFoundError: user does not exist
    """
    if not db.get(User, user_id):
        raise NotFoundError("User was not found.")

    notification = Notification(
        user_id=user_id,
        type=NotificationType(type),
        title=title,
        message=message,
        link_url=link_url,
        metadata_json=metadata,
        is_read=False,
        created_at=datetime.now(timezone.utc),
        read_at=None,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)

    logger.info(
        f"Notification created: notification_id={notification.id}, user_id={user_id}, "
        f"type={notification.type.value}, caller={caller.name}"
    )
    return notification


def list_notifications(
    db: Session,
    viewer: User,
    unread_only: bool = False,
    limit: int = DEFAULT_FEED_LIMIT,
) -> List[Notification]:
    """Newest-first notifications for the viewer, optionally unread only."""
    query = db.query(Notification).filter(Notification.user_id == viewer.id)
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    return query.order_by(desc(Notification.created_at), desc(Notification.id)).limit(limit).all()


def get_unread_count(db: Session, viewer: User) -> int:
    return db.query(Notification).filter(
        Notification.user_id == viewer.id,
        Notification.is_read.is_(False),
    ).count()


def mark_notification_read(db: Session, viewer: User, notification_id: int) -> Notification:
    """
    Mark one of the viewer's notifications as read.

    Marking an already read notification leaves read_at unchanged.

    Raises:
        NotFoundError: no such notification for this viewer
    """
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == viewer.id,
    ).one_or_none()
    if not notification:
        raise NotFoundError("Notification was not found.")

    if not notification.is_read:
        notification.is_read = True
        notification.read_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(notification)
        logger.debug(f"Notification read: notification_id={notification.id}, user_id={viewer.id}")

    return notification


def mark_all_notifications_read(db: Session, viewer: User) -> int:
    """
    Mark every unread notification of the viewer as read.

    Returns:
        Number of notifications updated
    """
    now = datetime.now(timezone.utc)
    updated = db.query(Notification).filter(
        Notification.user_id == viewer.id,
        Notification.is_read.is_(False),
    ).update(
        {Notification.is_read: True, Notification.read_at: now},
        synchronize_session=False,
    )
    db.commit()

    logger.info(f"Notifications marked read: user_id={viewer.id}, count={updated}")
    return updated
