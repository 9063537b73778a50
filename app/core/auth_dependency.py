"""
Identity resolution dependencies.

The identity provider issues bearer tokens whose "sub" claim is the external
user id (clerk_user_id). These dependencies map that id to the local User row.
"""
import logging
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session
from app.core.errors import UnauthorizedError
from app.core.security import decode_access_token
from app.db.session import SessionLocal
from app.db.models.user import User
from app.services.user_service import get_user_by_clerk_id

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_db():
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_clerk_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """
    Get the external identity id from the bearer token.

    Returns None when no token is presented (logged-out caller).
    A presented but unreadable token is always an error.
    """
    if credentials is None:
        return None
    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError:
        raise UnauthorizedError("Invalid token")

    clerk_user_id = payload.get("sub")
    if clerk_user_id is None:
        raise UnauthorizedError("Invalid token")
    return clerk_user_id


def require_clerk_user_id(
    clerk_user_id: Optional[str] = Depends(get_current_clerk_user_id),
) -> str:
    if clerk_user_id is None:
        raise UnauthorizedError("Authentication required")
    return clerk_user_id


def get_viewer_user(
    clerk_user_id: Optional[str] = Depends(get_current_clerk_user_id),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Get the calling User, or None for logged-out callers and unknown identities."""
    if clerk_user_id is None:
        return None
    return get_user_by_clerk_id(db, clerk_user_id)


def require_viewer_user(viewer: Optional[User] = Depends(get_viewer_user)) -> User:
    """Get the calling User, failing with 401 when there is none."""
    if viewer is None:
        raise UnauthorizedError("Authentication required")
    return viewer
