"""
Company workspace endpoints.

Context, usage and profile for the company a viewer works in.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_db, get_viewer_user, require_viewer_user
from app.db.models.user import User
from app.schemas.company import (
    CompanyContextResponse,
    CompanyUsageResponse,
    CompanyResponse,
    RenameCompanyRequest,
)
from app.services.company_service import get_my_company_context, get_my_company_usage, rename_company
from app.services.job_source import JobSource, get_job_source

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies", tags=["Companies"])


def provide_job_source(db: Session = Depends(get_db)) -> JobSource:
    """Job source dependency; AbsentJobSource when job postings aren't provisioned."""
    return get_job_source(db)


@router.get("/context", status_code=status.HTTP_200_OK, response_model=Optional[CompanyContextResponse])
def get_company_context(
    clerk_org_id: str = Query(..., min_length=1, description="Identity-provider organization ID"),
    viewer: Optional[User] = Depends(get_viewer_user),
    db: Session = Depends(get_db)
):
    """
    Get the viewer's company context for an organization.
    
    Returns null for logged-out callers and unknown organizations.
    A viewer without a membership is reported with role "member".
    """
    return get_my_company_context(db, viewer, clerk_org_id)


@router.get("/{company_id}/usage", status_code=status.HTTP_200_OK, response_model=CompanyUsageResponse)
def get_usage(
    company_id: int,
    viewer: User = Depends(require_viewer_user),
    db: Session = Depends(get_db),
    job_source: JobSource = Depends(provide_job_source)
):
    """
    Get member and job counts for a company.
    
    Requires an active membership in the company.
    """
    usage = get_my_company_usage(db, viewer, company_id, job_source)
    logger.debug(f"Company usage requested: company_id={company_id}, user_id={viewer.id}")
    return usage


@router.patch("/{company_id}", status_code=status.HTTP_200_OK, response_model=CompanyResponse)
def update_company(
    company_id: int,
    body: RenameCompanyRequest,
    viewer: User = Depends(require_viewer_user),
    db: Session = Depends(get_db)
):
    """Rename a company. Owners and admins only."""
    try:
        company = rename_company(db, viewer, company_id, body.name)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to rename company: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to rename company"
        )
    return CompanyResponse.model_validate(company)
