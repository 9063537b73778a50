"""
Internal endpoints for trusted services.

Every route requires the shared X-Service-Token. These operations skip
membership checks, so they must never be exposed to end users.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.routes.companies import provide_job_source
from app.core.auth_dependency import get_db
from app.core.service_auth import ServiceCaller, require_service_caller
from app.schemas.company import CompanyUsageResponse, CompanyResponse, SyncCompanyPlanRequest
from app.schemas.member import MemberResponse, SyncCompanyMemberRequest
from app.schemas.notification import CreateNotificationRequest, NotificationResponse
from app.services.company_service import get_company_usage, sync_company_plan
from app.services.job_source import JobSource
from app.services.membership_service import sync_company_member
from app.services.notification_service import create_notification

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/internal", tags=["Internal"])


def _write_failed(db: Session, action: str, error: Exception) -> HTTPException:
    db.rollback()
    logger.error(f"Failed to {action}: {error}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}"
    )


@router.get("/companies/{company_id}/usage", status_code=status.HTTP_200_OK, response_model=CompanyUsageResponse)
def company_usage(
    company_id: int,
    caller: ServiceCaller = Depends(require_service_caller),
    db: Session = Depends(get_db),
    job_source: JobSource = Depends(provide_job_source)
):
    """Member and job counts for any company, without a membership check."""
    return get_company_usage(db, caller, company_id, job_source)


@router.post("/companies/plan", status_code=status.HTTP_200_OK, response_model=CompanyResponse)
def company_plan(
    body: SyncCompanyPlanRequest,
    caller: ServiceCaller = Depends(require_service_caller),
    db: Session = Depends(get_db)
):
    """Create or update a company's plan and limits (idempotent)."""
    try:
        company = sync_company_plan(
            db,
            caller,
            clerk_org_id=body.clerk_org_id,
            plan=body.plan,
            seat_limit=body.seat_limit,
            job_limit=body.job_limit,
        )
    except SQLAlchemyError as e:
        raise _write_failed(db, "sync company plan", e)
    return CompanyResponse.model_validate(company)


@router.post("/companies/members", status_code=status.HTTP_200_OK, response_model=MemberResponse)
def company_member(
    body: SyncCompanyMemberRequest,
    caller: ServiceCaller = Depends(require_service_caller),
    db: Session = Depends(get_db)
):
    """Mirror an identity-provider organization membership as an active member."""
    try:
        membership = sync_company_member(db, caller, body.clerk_org_id, body.clerk_user_id, body.role)
    except SQLAlchemyError as e:
        raise _write_failed(db, "sync company member", e)
    return MemberResponse.model_validate(membership)


@router.post("/notifications", status_code=status.HTTP_201_CREATED, response_model=NotificationResponse)
def notification(
    body: CreateNotificationRequest,
    caller: ServiceCaller = Depends(require_service_caller),
    db: Session = Depends(get_db)
):
    """Deliver a notification to a user."""
    try:
        created = create_notification(
            db,
            caller,
            user_id=body.user_id,
            type=body.type,
            title=body.title,
            message=body.message,
            link_url=body.link_url,
            metadata=body.metadata,
        )
    except SQLAlchemyError as e:
        raise _write_failed(db, "create notification", e)
    return NotificationResponse.model_validate(created)
