"""
Demo Account Seeding
====================

Creates the demo accounts used on the sign-in page. Accounts that already
exist are left untouched, so the command can be run repeatedly.

Usage:
    python -m civil_defence.seed
    python -m civil_defence.seed --create-tables   # SQLite / local only
"""

import argparse
from typing import Dict, List

from sqlalchemy.orm import Session

from civil_defence.core.enums import Role
from civil_defence.core.logging import LogContext, configure_logging, get_logger
from civil_defence.db.session import SessionLocal, engine
from civil_defence.db.base import Base
import civil_defence.models  # noqa: F401
from civil_defence.models.user import User
from civil_defence.services.auth_service import AuthService

logger = get_logger(__name__)


DEMO_USERS: List[Dict[str, str]] = [
    {
        "username": "volunteer1",
        "password": "volunteer123",
        "first_name": "John",
        "last_name": "Volunteer",
        "email": "volunteer@example.com",
        "role": Role.VOLUNTEER.value,
        "district": "Khordha",
    },
    {
        "username": "district_admin",
        "password": "district123",
        "first_name": "District",
        "last_name": "Administrator",
        "email": "district.admin@odisha.gov.in",
        "role": Role.DISTRICT_ADMIN.value,
        "district": "Khordha",
    },
    {
        "username": "dept_admin",
        "password": "department123",
        "first_name": "Department",
        "last_name": "Administrator",
        "email": "dept.admin@odisha.gov.in",
        "role": Role.DEPARTMENT_ADMIN.value,
        "district": "Bhubaneswar",
    },
    {
        "username": "state_admin",
        "password": "state123",
        "first_name": "State",
        "last_name": "Administrator",
        "email": "state.admin@odisha.gov.in",
        "role": Role.STATE_ADMIN.value,
        "district": "Bhubaneswar",
    },
    {
        "username": "cms_manager",
        "password": "cms12345",
        "first_name": "Content",
        "last_name": "Manager",
        "email": "cms.manager@odisha.gov.in",
        "role": Role.CMS_MANAGER.value,
        "district": "Bhubaneswar",
    },
]


def seed_users(db: Session, users: List[Dict[str, str]] = DEMO_USERS) -> List[User]:
    """
    Insert the given accounts, skipping usernames that already exist.

    Args:
        db: Database session
        users: Account definitions, each with a plain ``password``

    Returns:
        The users that were created
    """
    created = []

    for entry in users:
        data = dict(entry)
        password = data.pop("password")

        existing = db.query(User).filter(User.username == data["username"]).first()
        if existing:
            logger.info("Seed user exists, skipping", extra={"username": data["username"]})
            continue

        user = User(password_hash=AuthService.hash_password(password), **data)
        db.add(user)
        created.append(user)

    db.commit()

    for user in created:
        logger.info("Seed user created", extra={"username": user.username, "role": user.role})

    return created


def seed_demo_users(create_tables: bool = False) -> int:
    """Seed the demo accounts in a fresh session. Returns the number created."""
    if create_tables:
        Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        return len(seed_users(db))
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Create the demo portal accounts")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables first instead of relying on Alembic",
    )
    args = parser.parse_args()

    configure_logging()
    with LogContext(request_id="seed"):
        count = seed_demo_users(create_tables=args.create_tables)
    print(f"Seeding completed: {count} account(s) created")


if __name__ == "__main__":
    main()
