"""
Unit tests for job source resolution.
"""
import pytest
from sqlalchemy import Boolean, Column, Integer, MetaData, String, Table

from app.core import config
from app.core.service_auth import INTERNAL_API_CALLER
from app.services.company_service import get_company_usage
from app.services.job_source import AbsentJobSource, TableJobSource, get_job_source


@pytest.fixture
def jobs_table(db):
    """A jobs table living outside the application's own metadata."""
    metadata = MetaData()
    table = Table(
        "jobs",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("company_id", Integer, nullable=False),
        Column("title", String, nullable=False),
        Column("is_active", Boolean, nullable=False),
    )
    engine = db.get_bind()
    metadata.create_all(bind=engine)
    try:
        yield table
    finally:
        db.close()
        metadata.drop_all(bind=engine)


def test_not_configured_is_absent(db, monkeypatch):
    monkeypatch.setattr(config, "JOBS_TABLE_NAME", None)
    source = get_job_source(db)
    assert isinstance(source, AbsentJobSource)
    assert source.available is False
    assert source.list_jobs() == []


def test_missing_table_is_absent(db, monkeypatch):
    monkeypatch.setattr(config, "JOBS_TABLE_NAME", "job_postings")
    source = get_job_source(db)
    assert isinstance(source, AbsentJobSource)


def test_table_without_required_columns_is_absent(db):
    metadata = MetaData()
    Table(
        "legacy_jobs",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("company_id", Integer),
    )
    engine = db.get_bind()
    metadata.create_all(bind=engine)
    try:
        source = get_job_source(db, table_name="legacy_jobs")
        assert isinstance(source, AbsentJobSource)
    finally:
        db.close()
        metadata.drop_all(bind=engine)


def test_configured_table_is_read(db, jobs_table, monkeypatch, make_company):
    monkeypatch.setattr(config, "JOBS_TABLE_NAME", "jobs")
    acme = make_company()
    other = make_company()
    db.execute(jobs_table.insert(), [
        {"company_id": acme.id, "title": "Backend Engineer", "is_active": True},
        {"company_id": acme.id, "title": "Designer", "is_active": False},
        {"company_id": other.id, "title": "Recruiter", "is_active": True},
    ])
    db.commit()

    source = get_job_source(db)
    assert isinstance(source, TableJobSource)
    assert source.available is True
    assert len(source.list_jobs()) == 3

    usage = get_company_usage(db, INTERNAL_API_CALLER, acme.id, source)
    assert usage["active_job_count"] == 1
    assert usage["total_job_count"] == 2


def test_explicit_table_name_overrides_config(db, jobs_table, monkeypatch):
    monkeypatch.setattr(config, "JOBS_TABLE_NAME", None)
    source = get_job_source(db, table_name="jobs")
    assert isinstance(source, TableJobSource)
    assert source.list_jobs() == []


def test_text_company_ids_are_counted(db, make_company):
    """Job tables owned elsewhere may key companies by text."""
    metadata = MetaData()
    text_jobs = Table(
        "text_jobs",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("company_id", String, nullable=False),
        Column("is_active", Boolean, nullable=False),
    )
    engine = db.get_bind()
    metadata.create_all(bind=engine)
    try:
        company = make_company()
        db.execute(text_jobs.insert(), [
            {"company_id": str(company.id), "is_active": True},
            {"company_id": str(company.id), "is_active": False},
            {"company_id": str(company.id + 1), "is_active": True},
        ])
        db.commit()

        source = get_job_source(db, table_name="text_jobs")
        usage = get_company_usage(db, INTERNAL_API_CALLER, company.id, source)

        assert usage["active_job_count"] == 1
        assert usage["total_job_count"] == 2
    finally:
        db.close()
        metadata.drop_all(bind=engine)
