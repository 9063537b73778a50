"""
Read access to the job postings table.

The job postings table belongs to another part of the system and may not be
provisioned in a given deployment. Whether it is available is decided up
front: JOBS_TABLE_NAME must be configured and the table must exist with the
expected columns. Otherwise callers get AbsentJobSource, which reports no
jobs, so usage reporting keeps working with zero job counts.
"""
import logging
from dataclasses import dataclass
from typing import Any, List, Optional
from sqlalchemy import MetaData, Table, inspect, select
from sqlalchemy.orm import Session

from app.core import config

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = frozenset({"company_id", "is_active"})


@dataclass(frozen=True)
class JobRecord:
    """The two job fields usage aggregation needs."""
    company_id: Any
    is_active: bool


class JobSource:
    """Interface for reading every job posting in the system."""
    available = True

    def list_jobs(self) -> List[JobRecord]:
        raise NotImplementedError


class AbsentJobSource(JobSource):
    """Job postings are not provisioned; there are no jobs to count."""
    available = False

    def list_jobs(self) -> List[JobRecord]:
        return []


class TableJobSource(JobSource):
    """Scans a reflected job postings table."""

    def __init__(self, db: Session, table: Table):
        self.db = db
        self.table = table

    def list_jobs(self) -> List[JobRecord]:
        # Full scan; company filtering happens in the caller
        rows = self.db.execute(
            select(self.table.c.company_id, self.table.c.is_active)
        ).all()
        return [JobRecord(company_id=row.company_id, is_active=bool(row.is_active)) for row in rows]


ABSENT_JOB_SOURCE = AbsentJobSource()


def get_job_source(db: Session, table_name: Optional[str] = None) -> JobSource:
    """
    Resolve the job source for this database.
    
    Args:
        db: Database session
        table_name: Table to read; defaults to JOBS_TABLE_NAME
        
    Returns:
        TableJobSource when the table is configured and present with
        company_id/is_active columns, AbsentJobSource otherwise
    """
    table_name = table_name or config.JOBS_TABLE_NAME
    if not table_name:
        return ABSENT_JOB_SOURCE

    connection = db.connection()
    inspector = inspect(connection)
    if not inspector.has_table(table_name):
        logger.info(f"Job table '{table_name}' not present; job counts will be zero")
        return ABSENT_JOB_SOURCE

    columns = {column["name"] for column in inspector.get_columns(table_name)}
    missing = REQUIRED_COLUMNS - columns
    if missing:
        logger.warning(f"Job table '{table_name}' lacks columns {sorted(missing)}; job counts will be zero")
        return ABSENT_JOB_SOURCE

    table = Table(table_name, MetaData(), autoload_with=connection)
    return TableJobSource(db, table)
