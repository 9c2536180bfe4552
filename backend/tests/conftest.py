"""
Test Configuration and Fixtures
================================

Central configuration for pytest with all shared fixtures.

Features:
- SQLite in-memory database for testing
- TestClient setup
- Fixtures for users of every role and for domain records
- Dependency overrides for database session
"""

import os
import uuid
from datetime import date, datetime, timedelta, UTC
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
os.environ["RATE_LIMIT_ENABLED"] = "false"  # Disable rate limiting in tests
os.environ["ARGON2_TIME_COST"] = "1"
os.environ["ARGON2_MEMORY_COST"] = "1024"
os.environ["ARGON2_PARALLELISM"] = "1"

from civil_defence.core.enums import (
    EquipmentCategory,
    EquipmentCondition,
    IncidentSeverity,
    IncidentStatus,
    Role,
    TrainingStatus,
    VolunteerStatus,
)
from civil_defence.db.base import Base
from civil_defence.db.session import get_db
from civil_defence.models import (
    Incident,
    InventoryItem,
    Training,
    User,
    Volunteer,
)
from civil_defence.services.auth_service import AuthService
from civil_defence.main import app as main_app


TEST_PASSWORD = "Password123!"


# =====================================
# Database Configuration
# =====================================

# Create in-memory SQLite engine for testing
# StaticPool is used to maintain the same connection across tests
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
    This ensures complete test isolation.

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

    Args:
        db_session: Database session fixture

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
# Factories
# =====================================

def create_user(
    db: Session,
    username: str,
    role: Role,
    district: str | None = None,
    **overrides,
) -> User:
    """Insert a user with the shared test password."""
    user = User(
        id=uuid.uuid4(),
        username=username,
        email=f"{username}@example.com",
        password_hash=AuthService.hash_password(TEST_PASSWORD),
        role=role.value,
        district=district,
        is_active=True,
        is_locked=False,
        failed_attempts=0,
        token_version=1,
    )
    for key, value in overrides.items():
        setattr(user, key, value)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_volunteer(
    db: Session,
    user: User,
    district: str = "Khordha",
    status: VolunteerStatus = VolunteerStatus.PENDING,
    **overrides,
) -> Volunteer:
    values = dict(
        user_id=user.id,
        full_name=f"{user.username.title()} Volunteer",
        email=f"{user.username}@volunteers.example.com",
        phone="9876543210",
        address="Plot 12, Saheed Nagar",
        district=district,
        skills=["first_aid"],
        status=status.value,
    )
    values.update(overrides)
    volunteer = Volunteer(**values)
    db.add(volunteer)
    db.commit()
    db.refresh(volunteer)
    return volunteer


def create_incident(
    db: Session,
    reporter: User,
    district: str = "Khordha",
    severity: IncidentSeverity = IncidentSeverity.MEDIUM,
    status: IncidentStatus = IncidentStatus.REPORTED,
    **overrides,
) -> Incident:
    values = dict(
        reported_by=reporter.id,
        title=f"Flooding in {district}",
        description="Water level rising near the embankment",
        location=f"Ward 4, {district}",
        district=district,
        severity=severity.value,
        status=status.value,
        assigned_to=[],
    )
    values.update(overrides)
    incident = Incident(**values)
    db.add(incident)
    db.commit()
    db.refresh(incident)
    return incident


def create_item(
    db: Session,
    district: str = "Khordha",
    quantity: int = 25,
    **overrides,
) -> InventoryItem:
    values = dict(
        name="Life jacket",
        category=EquipmentCategory.SAFETY_GEAR.value,
        quantity=quantity,
        condition=EquipmentCondition.GOOD.value,
        location="District store room",
        district=district,
    )
    values.update(overrides)
    item = InventoryItem(**values)
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def create_training(
    db: Session,
    district: str = "Khordha",
    capacity: int = 30,
    status: TrainingStatus = TrainingStatus.UPCOMING,
    is_statewide: bool = False,
    **overrides,
) -> Training:
    start = datetime.now(UTC) + timedelta(days=7)
    values = dict(
        title="Basic First Aid",
        description="CPR and casualty handling",
        district=district,
        location="Training Centre",
        start_at=start,
        end_at=start + timedelta(hours=8),
        capacity=capacity,
        skills=["first_aid"],
        status=status.value,
        is_statewide=is_statewide,
    )
    values.update(overrides)
    training = Training(**values)
    db.add(training)
    db.commit()
    db.refresh(training)
    return training


def headers_for(user: User) -> dict:
    """Authorization headers carrying a fresh session token for ``user``."""
    token = AuthService.create_session_token(user.id, user.token_version)
    return {"Authorization": f"Bearer {token}"}


# =====================================
# User Fixtures
# =====================================

@pytest.fixture
def volunteer_user(db_session: Session) -> User:
    """Volunteer account in Khordha."""
    return create_user(db_session, "volunteer1", Role.VOLUNTEER, "Khordha")


@pytest.fixture
def second_volunteer_user(db_session: Session) -> User:
    return create_user(db_session, "volunteer2", Role.VOLUNTEER, "Cuttack")


@pytest.fixture
def district_admin(db_session: Session) -> User:
    """District admin for Khordha."""
    return create_user(db_session, "district_admin", Role.DISTRICT_ADMIN, "Khordha")


@pytest.fixture
def other_district_admin(db_session: Session) -> User:
    """District admin for Cuttack, for cross-district tests."""
    return create_user(db_session, "cuttack_admin", Role.DISTRICT_ADMIN, "Cuttack")


@pytest.fixture
def department_admin(db_session: Session) -> User:
    return create_user(db_session, "dept_admin", Role.DEPARTMENT_ADMIN, "Bhubaneswar")


@pytest.fixture
def state_admin(db_session: Session) -> User:
    return create_user(db_session, "state_admin", Role.STATE_ADMIN, "Bhubaneswar")


@pytest.fixture
def cms_manager(db_session: Session) -> User:
    return create_user(db_session, "cms_manager", Role.CMS_MANAGER, "Bhubaneswar")


@pytest.fixture
def locked_user(db_session: Session) -> User:
    return create_user(
        db_session, "locked_user", Role.VOLUNTEER, "Khordha",
        is_locked=True, failed_attempts=5,
    )


@pytest.fixture
def inactive_user(db_session: Session) -> User:
    return create_user(db_session, "inactive_user", Role.VOLUNTEER, "Khordha", is_active=False)


# =====================================
# Auth Header Fixtures
# =====================================

@pytest.fixture
def volunteer_headers(volunteer_user: User) -> dict:
    return headers_for(volunteer_user)


@pytest.fixture
def second_volunteer_headers(second_volunteer_user: User) -> dict:
    return headers_for(second_volunteer_user)


@pytest.fixture
def district_admin_headers(district_admin: User) -> dict:
    return headers_for(district_admin)


@pytest.fixture
def other_district_admin_headers(other_district_admin: User) -> dict:
    return headers_for(other_district_admin)


@pytest.fixture
def department_admin_headers(department_admin: User) -> dict:
    return headers_for(department_admin)


@pytest.fixture
def state_admin_headers(state_admin: User) -> dict:
    return headers_for(state_admin)


@pytest.fixture
def cms_headers(cms_manager: User) -> dict:
    return headers_for(cms_manager)


# =====================================
# Domain Fixtures
# =====================================

@pytest.fixture
def volunteer_profile(db_session: Session, volunteer_user: User) -> Volunteer:
    """Pending volunteer profile of ``volunteer_user`` in Khordha."""
    return create_volunteer(db_session, volunteer_user)


@pytest.fixture
def approved_volunteer(db_session: Session, volunteer_user: User) -> Volunteer:
    """Approved volunteer profile of ``volunteer_user`` in Khordha."""
    return create_volunteer(db_session, volunteer_user, status=VolunteerStatus.APPROVED)


@pytest.fixture
def cuttack_volunteer(db_session: Session, second_volunteer_user: User) -> Volunteer:
    return create_volunteer(
        db_session, second_volunteer_user, district="Cuttack", status=VolunteerStatus.APPROVED,
    )


@pytest.fixture
def khordha_incident(db_session: Session, volunteer_user: User) -> Incident:
    return create_incident(db_session, volunteer_user, "Khordha")


@pytest.fixture
def cuttack_incident(db_session: Session, second_volunteer_user: User) -> Incident:
    return create_incident(db_session, second_volunteer_user, "Cuttack")


@pytest.fixture
def khordha_item(db_session: Session) -> InventoryItem:
    return create_item(
        db_session, "Khordha",
        last_inspection=date(2024, 1, 10),
        next_inspection=date(2024, 7, 10),
    )


@pytest.fixture
def cuttack_item(db_session: Session) -> InventoryItem:
    return create_item(db_session, "Cuttack", name="Stretcher", category=EquipmentCategory.MEDICAL_SUPPLIES.value)


@pytest.fixture
def khordha_training(db_session: Session) -> Training:
    return create_training(db_session, "Khordha")


@pytest.fixture
def statewide_training(db_session: Session) -> Training:
    return create_training(db_session, "Bhubaneswar", is_statewide=True, title="State Flood Drill")
