"""
User endpoints.

The identity provider owns accounts; these endpoints mirror the signed-in
user into the local users table.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_db, require_clerk_user_id, require_viewer_user
from app.db.models.user import User
from app.schemas.user import SyncUserRequest, UserResponse
from app.services.user_service import sync_viewer_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("/me/sync", status_code=status.HTTP_200_OK, response_model=UserResponse)
def sync_me(
    body: SyncUserRequest,
    clerk_user_id: str = Depends(require_clerk_user_id),
    db: Session = Depends(get_db)
):
    """Create or update the local record of the signed-in user."""
    try:
        user = sync_viewer_user(db, clerk_user_id, **body.model_dump(exclude_unset=True))
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to sync user: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to sync user"
        )
    return UserResponse.model_validate(user)


@router.get("/me", status_code=status.HTTP_200_OK, response_model=UserResponse)
def get_me(viewer: User = Depends(require_viewer_user)):
    return UserResponse.model_validate(viewer)
