"""
Plan-based company limits configuration.

Single source of truth for the seat and job-posting limits the billing
integration writes onto a company when its plan changes.
"""
from typing import Dict, Optional, Tuple

from app.db.models.company import CompanyPlan

# Plan limits: seats (active members) and open job postings
PLAN_LIMITS: Dict[CompanyPlan, Dict[str, int]] = {
    CompanyPlan.FREE: {
        "seat_limit": 2,
        "job_limit": 1,
    },
    CompanyPlan.STARTER: {
        "seat_limit": 5,
        "job_limit": 10,
    },
    CompanyPlan.GROWTH: {
        "seat_limit": 25,
        "job_limit": 50,
    },
}


def parse_plan(plan: Optional[str]) -> Optional[CompanyPlan]:
    """Map a plan name to CompanyPlan, or None when it isn't a known plan."""
    if not plan:
        return None
    try:
        return CompanyPlan(plan.lower())
    except ValueError:
        return None


def get_plan_limits(plan: CompanyPlan) -> Tuple[int, int]:
    """
    Get (seat_limit, job_limit) for a plan.
    
    Args:
        plan: Company plan
        
    Returns:
        Tuple of (seat_limit, job_limit)
    """
    limits = PLAN_LIMITS[plan]
    return limits["seat_limit"], limits["job_limit"]
