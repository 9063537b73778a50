"""
Script to set a company's plan by hand (support / billing corrections).

Run: python -m scripts.sync_company_plan org_2abc starter
     python -m scripts.sync_company_plan org_2abc growth --seat-limit 40 --job-limit 80
"""
import argparse
import logging
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.exc import SQLAlchemyError

from app.db.session import SessionLocal
from app.core.plan_limits import get_plan_limits, parse_plan
from app.core.service_auth import OPERATOR_SCRIPT_CALLER
from app.db.models.company import CompanyPlan
from app.services.company_service import sync_company_plan

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Set a company's plan and limits.")
    parser.add_argument("clerk_org_id", help="Identity-provider organization ID")
    parser.add_argument("plan", choices=[p.value for p in CompanyPlan], help="Plan to apply")
    parser.add_argument("--seat-limit", type=int, default=None, help="Override the plan's seat limit")
    parser.add_argument("--job-limit", type=int, default=None, help="Override the plan's job limit")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    plan = parse_plan(args.plan)
    seat_limit, job_limit = get_plan_limits(plan)
    if args.seat_limit is not None:
        seat_limit = args.seat_limit
    if args.job_limit is not None:
        job_limit = args.job_limit

    db = SessionLocal()
    try:
        company = sync_company_plan(
            db,
            OPERATOR_SCRIPT_CALLER,
            clerk_org_id=args.clerk_org_id,
            plan=plan,
            seat_limit=seat_limit,
            job_limit=job_limit,
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to sync plan for {args.clerk_org_id}: {e}", exc_info=True)
        return 1
    finally:
        db.close()

    print(
        f"\n[SUCCESS] Company {company.id} ({args.clerk_org_id}) is on {plan.value}: "
        f"{seat_limit} seats, {job_limit} jobs"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
