"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.

All models must be imported here to be included in database migrations and table creation.
"""
from app.db.models.user import User
from app.db.models.company import Company, CompanyPlan
from app.db.models.company_member import CompanyMember, CompanyRole, MembershipStatus
from app.db.models.notification import Notification, NotificationType

# Explicitly export all models for clarity
__all__ = [
    "User",
    "Company",
    "CompanyPlan",
    "CompanyMember",
    "CompanyRole",
    "MembershipStatus",
    "Notification",
    "NotificationType",
]
