"""
User service for local user records mirrored from the identity provider.
"""
import logging
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db.models.user import User

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("email", "first_name", "last_name", "image_url")


def get_user_by_clerk_id(db: Session, clerk_user_id: str) -> Optional[User]:
    """Look up a user through the unique clerk_user_id index."""
    return db.query(User).filter(User.clerk_user_id == clerk_user_id).one_or_none()


def get_or_create_user(db: Session, clerk_user_id: str) -> User:
    """
    Return the user for clerk_user_id, adding a bare placeholder row if missing.
    
    The new row is only added to the session; the caller commits.
    """
    user = get_user_by_clerk_id(db, clerk_user_id)
    if user:
        return user
    now = datetime.now(timezone.utc)
    user = User(clerk_user_id=clerk_user_id, created_at=now, updated_at=now)
    db.add(user)
    db.flush()
    logger.info(f"Placeholder user created: user_id={user.id}")
    return user


def _apply_profile(user: User, profile: dict, now: datetime) -> None:
    for field in PROFILE_FIELDS:
        if field in profile:
            setattr(user, field, profile[field])
    user.updated_at = now


def sync_viewer_user(db: Session, clerk_user_id: str, **profile) -> User:
    """
    Upsert the local user row for an identity-provider user.
    
    Only profile fields that are passed are written; omitted fields keep
    their stored values. A concurrent insert for the same clerk_user_id is
    resolved by re-reading the row and updating it.
    
    Args:
        db: Database session
        clerk_user_id: External identity id
        **profile: Any of email, first_name, last_name, image_url
        
    Returns:
        The stored User
    """
    unknown = set(profile) - set(PROFILE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown profile fields: {sorted(unknown)}")

    now = datetime.now(timezone.utc)
    user = get_user_by_clerk_id(db, clerk_user_id)

    if user is None:
        user = User(clerk_user_id=clerk_user_id, created_at=now)
        _apply_profile(user, profile, now)
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            user = get_user_by_clerk_id(db, clerk_user_id)
            if user is None:
                raise
            logger.info(f"User insert raced, updating instead: user_id={user.id}")
            _apply_profile(user, profile, now)
            db.commit()
        else:
            logger.info(f"User created: user_id={user.id}")
    else:
        _apply_profile(user, profile, now)
        db.commit()
        logger.debug(f"User synced: user_id={user.id}")

    db.refresh(user)
    return user
