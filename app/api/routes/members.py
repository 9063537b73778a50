"""
Company membership endpoints.

Invitations, role changes and removals. Removal keeps the membership row
with status "removed".
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_db, require_viewer_user
from app.db.models.user import User
from app.schemas.member import MemberResponse, InviteMemberRequest, UpdateMemberRoleRequest
from app.services import membership_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies/{company_id}/members", tags=["Members"])


def _write_failed(db: Session, action: str, error: Exception) -> HTTPException:
    db.rollback()
    logger.error(f"Failed to {action}: {error}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}"
    )


@router.get("", status_code=status.HTTP_200_OK, response_model=List[MemberResponse])
def list_members(
    company_id: int,
    viewer: User = Depends(require_viewer_user),
    db: Session = Depends(get_db)
):
    """List memberships of a company. Requires an active membership."""
    members = membership_service.list_company_members(db, viewer, company_id)
    return [MemberResponse.model_validate(m) for m in members]


@router.post("", status_code=status.HTTP_201_CREATED, response_model=MemberResponse)
def invite_member(
    company_id: int,
    body: InviteMemberRequest,
    viewer: User = Depends(require_viewer_user),
    db: Session = Depends(get_db)
):
    """Invite a user as a pending member. Owners and admins only."""
    try:
        membership = membership_service.invite_member(db, viewer, company_id, body.user_id, body.role)
    except SQLAlchemyError as e:
        raise _write_failed(db, "invite member", e)
    return MemberResponse.model_validate(membership)


@router.post("/accept", status_code=status.HTTP_200_OK, response_model=MemberResponse)
def accept_invitation(
    company_id: int,
    viewer: User = Depends(require_viewer_user),
    db: Session = Depends(get_db)
):
    """Accept the viewer's pending invitation."""
    try:
        membership = membership_service.accept_invitation(db, viewer, company_id)
    except SQLAlchemyError as e:
        raise _write_failed(db, "accept invitation", e)
    return MemberResponse.model_validate(membership)


@router.patch("/{user_id}", status_code=status.HTTP_200_OK, response_model=MemberResponse)
def update_member_role(
    company_id: int,
    user_id: int,
    body: UpdateMemberRoleRequest,
    viewer: User = Depends(require_viewer_user),
    db: Session = Depends(get_db)
):
    """Change a member's role. Owners and admins only; owner changes need an owner."""
    try:
        membership = membership_service.update_member_role(db, viewer, company_id, user_id, body.role)
    except SQLAlchemyError as e:
        raise _write_failed(db, "update member role", e)
    return MemberResponse.model_validate(membership)


@router.delete("/{user_id}", status_code=status.HTTP_200_OK, response_model=MemberResponse)
def remove_member(
    company_id: int,
    user_id: int,
    viewer: User = Depends(require_viewer_user),
    db: Session = Depends(get_db)
):
    """Remove a member (status becomes "removed"). Owners and admins only."""
    try:
        membership = membership_service.remove_member(db, viewer, company_id, user_id)
    except SQLAlchemyError as e:
        raise _write_failed(db, "remove member", e)
    return MemberResponse.model_validate(membership)
