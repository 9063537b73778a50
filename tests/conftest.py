"""
Shared fixtures: an in-memory SQLite database and row factories.
"""
import itertools

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.db.models  # noqa: F401  (registers every model on Base.metadata)
from app.db.base import Base
from app.db.models.user import User
from app.db.models.company import Company
from app.db.models.company_member import CompanyMember, CompanyRole, MembershipStatus


# Setup in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=test_engine)
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def make_user(db):
    """Factory for users with unique clerk ids."""
    counter = itertools.count(1)

    def _make_user(clerk_user_id=None, **fields):
        user = User(clerk_user_id=clerk_user_id or f"user_{next(counter)}", **fields)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_company(db):
    """Factory for companies with unique org ids."""
    counter = itertools.count(1)

    def _make_company(clerk_org_id=None, name="Acme Hiring", **fields):
        company = Company(clerk_org_id=clerk_org_id or f"org_{next(counter)}", name=name, **fields)
        db.add(company)
        db.commit()
        db.refresh(company)
        return company

    return _make_company


@pytest.fixture
def make_membership(db):
    """Factory for memberships; active members by default."""

    def _make_membership(company, user, role=CompanyRole.MEMBER, status=MembershipStatus.ACTIVE):
        membership = CompanyMember(
            company_id=company.id,
            user_id=user.id,
            role=role,
            status=status,
        )
        db.add(membership)
        db.commit()
        db.refresh(membership)
        return membership

    return _make_membership


@pytest.fixture
def client(db, monkeypatch):
    """TestClient bound to the test database session."""
    from fastapi.testclient import TestClient
    from app.core import config
    from app.core.auth_dependency import get_db
    from app.main import app

    monkeypatch.setattr(config, "JOBS_TABLE_NAME", None)
    app.dependency_overrides[get_db] = lambda: db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Bearer headers for an identity-provider user id."""
    from app.core.security import create_access_token

    def _auth_headers(clerk_user_id):
        token = create_access_token({"sub": clerk_user_id})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
