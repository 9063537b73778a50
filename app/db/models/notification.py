"""
Notification model for the in-app notification feed.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Boolean, JSON, Index, Enum, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from app.db.base import Base


class NotificationType(str, enum.Enum):
    """Kinds of notifications shown in the feed."""
    APPLICATION_STATUS = "application_status"
    APPLICATION_RECEIVED = "application_received"
    JOB_CLOSED = "job_closed"
    SYSTEM = "system"


class Notification(Base):
    """
    Notification delivered to a single user.
    
    read_at is only ever set together with is_read=True.
    """
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    
    type = Column(
        Enum(NotificationType, name="notificationtype", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    link_url = Column(String, nullable=True)
    # "metadata" is reserved on declarative models, so the attribute is renamed
    metadata_json = Column("metadata", JSON, nullable=True)
    
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    
    # Relationships
    user = relationship("User", backref="notifications")
    
    # Indexes: unread feed and timeline
    __table_args__ = (
        Index("idx_notifications_user_read_created", "user_id", "is_read", "created_at"),
        Index("idx_notifications_user_created", "user_id", "created_at"),
        CheckConstraint("read_at IS NULL OR is_read", name="ck_notifications_read_at_requires_is_read"),
    )

    def __repr__(self):
        return f"<Notification(id={self.id}, user_id={self.user_id}, type='{self.type}', is_read={self.is_read})>"
