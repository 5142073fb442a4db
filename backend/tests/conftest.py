"""
Test Configuration and Fixtures
================================

Central configuration for pytest with all shared fixtures.

Features:
- SQLite in-memory database for testing
- TestClient setup
- Fixtures for users of every role, plus users with no or unknown role
- Fixtures for projects and defects
- Dependency overrides for database session
"""

import os
import uuid
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Set testing environment before importing app modules
os.environ["ENVIRONMENT"] = "testing"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-min-32-chars"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from app.db.base import Base
from app.db.session import get_db
from app.models.user import User
from app.models.project import Project
from app.models.defect import Defect, DefectStatusChange
from app.models.role_enum import Role
from app.services.token_service import create_access_token
from app.main import app as main_app


# =====================================
# Database Configuration
# =====================================

# StaticPool keeps the same in-memory connection across sessions
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Enable foreign key constraints for SQLite
@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable foreign key constraints for SQLite."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


# =====================================
# Database Fixtures
# =====================================

@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    Creates all tables before each test and drops them after.

    Yields:
        SQLAlchemy Session object
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a TestClient with database dependency override.

    Yields:
        TestClient instance
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    main_app.dependency_overrides[get_db] = override_get_db

    with TestClient(main_app) as test_client:
        yield test_client

    main_app.dependency_overrides.clear()


# =====================================
# User Fixtures
# =====================================

def _create_user(db_session: Session, email: str, role, name: str = None) -> User:
    user = User(
        id=uuid.uuid4(),
        name=name,
        email=email,
        role=role,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def developer_user(db_session: Session) -> User:
    """User with the developer role."""
    return _create_user(db_session, "dev@example.com", Role.DEVELOPER.value, name="Dana Developer")


@pytest.fixture
def tester_user(db_session: Session) -> User:
    """User with the tester role."""
    return _create_user(db_session, "tester@example.com", Role.TESTER.value, name="Tess Tester")


@pytest.fixture
def manager_user(db_session: Session) -> User:
    """User with the manager role."""
    return _create_user(db_session, "manager@example.com", Role.MANAGER.value, name="Max Manager")


@pytest.fixture
def no_role_user(db_session: Session) -> User:
    """User that has never been given a role."""
    return _create_user(db_session, "norole@example.com", None)


@pytest.fixture
def unknown_role_user(db_session: Session) -> User:
    """User whose stored role is not a recognized token."""
    return _create_user(db_session, "admin@example.com", "admin")


# =====================================
# Token & Header Fixtures
# =====================================

def _headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def developer_headers(developer_user: User) -> dict:
    return _headers_for(developer_user)


@pytest.fixture
def tester_headers(tester_user: User) -> dict:
    return _headers_for(tester_user)


@pytest.fixture
def manager_headers(manager_user: User) -> dict:
    return _headers_for(manager_user)


@pytest.fixture
def no_role_headers(no_role_user: User) -> dict:
    return _headers_for(no_role_user)


@pytest.fixture
def unknown_role_headers(unknown_role_user: User) -> dict:
    return _headers_for(unknown_role_user)


# =====================================
# Domain Fixtures
# =====================================

@pytest.fixture
def sample_project(db_session: Session) -> Project:
    """A project in the staging environment."""
    project = Project(id=uuid.uuid4(), name="Checkout Revamp", environment="staging")
    db_session.add(project)
    db_session.commit()
    db_session.refresh(project)
    return project


@pytest.fixture
def sample_defect(
    db_session: Session,
    sample_project: Project,
    tester_user: User,
    developer_user: User,
) -> Defect:
    """
    An open defect reported by the tester and assigned to the developer.

    Its status history holds the initial "open" entry.
    """
    defect = Defect(
        id=uuid.uuid4(),
        project_id=sample_project.id,
        name="Pay button unresponsive",
        description="Clicking Pay does nothing on Safari",
        assigned_to=developer_user.id,
        reporter_id=tester_user.id,
        type="functional",
        severity="major",
        priority="high",
        status="open",
    )
    defect.status_history.append(
        DefectStatusChange(status="open", changed_by=tester_user.id)
    )
    db_session.add(defect)
    db_session.commit()
    db_session.refresh(defect)
    return defect


@pytest.fixture
def defect_payload(sample_project: Project) -> dict:
    """JSON body for reporting a defect."""
    return {
        "project_id": str(sample_project.id),
        "name": "Broken footer link",
        "description": "The privacy link returns 404",
        "type": "content",
        "severity": "minor",
        "priority": "low",
        "status": "open",
    }
