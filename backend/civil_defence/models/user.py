"""
User Model
==========

Security Features:
- Account lock after configurable failed attempts
- Token version for session invalidation on logout
- String-stored role validated against the Role enum
- Soft disable via is_active flag

District:
    District admins only see records of their own district. The column
    is informational for volunteers and ignored for state-scope roles.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    String,
    Boolean,
    Integer,
    DateTime,
    Index,
    Uuid,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column

from civil_defence.db.base import Base, utcnow
from civil_defence.core.enums import Role


class User(Base):
    """
    User entity representing authenticated portal accounts.

    Security Controls:
        - failed_attempts: Counter for failed login attempts
        - is_locked: Account lock flag
        - token_version: Incremented on logout to revoke every session
        - is_active: Disabled accounts cannot log in

    Attributes:
        id: UUID primary key
        username: Unique login name
        email: Optional unique email address
        password_hash: Argon2 hashed password
        role: User role (see Role)
        district: Home district (required for district admins)
    """

    __tablename__ = "users"

    def __init__(self, **kwargs):
        """Initialize User with Python-level defaults."""
        kwargs.setdefault("role", Role.VOLUNTEER.value)
        kwargs.setdefault("is_active", True)
        kwargs.setdefault("failed_attempts", 0)
        kwargs.setdefault("is_locked", False)
        kwargs.setdefault("token_version", 1)
        super().__init__(**kwargs)

    # ==========================
    # Primary Key
    # ==========================
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # ==========================
    # Authentication
    # ==========================
    username: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        index=True,
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    # ==========================
    # Profile
    # ==========================
    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        unique=True,
        nullable=True,
    )
    first_name: Mapped[Optional[str]] = mapped_column(String(100))
    last_name: Mapped[Optional[str]] = mapped_column(String(100))
    profile_image_url: Mapped[Optional[str]] = mapped_column(String(500))

    # ==========================
    # Authorization
    # ==========================
    role: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=Role.VOLUNTEER.value,
    )
    district: Mapped[Optional[str]] = mapped_column(String(100), index=True)

    # ==========================
    # Account Status
    # ==========================
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    failed_attempts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_locked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    token_version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    # ==========================
    # Timestamps
    # ==========================
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )

    __table_args__ = (
        Index("ix_users_role", "role"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username}, role={self.role})>"

    @property
    def display_name(self) -> str:
        full = " ".join(p for p in (self.first_name, self.last_name) if p)
        return full or self.username

    def lock_account(self) -> None:
        self.is_locked = True

    def unlock_account(self) -> None:
        """Unlock the user account and reset failed attempts."""
        self.is_locked = False
        self.failed_attempts = 0

    def increment_failed_attempts(self, max_attempts: int = 5) -> bool:
        """
        Increment failed login attempts.

        Args:
            max_attempts: Maximum attempts before lockout

        Returns:
            True if the account is now locked
        """
        self.failed_attempts += 1
        if self.failed_attempts >= max_attempts:
            self.lock_account()
            return True
        return False

    def invalidate_sessions(self) -> None:
        """Invalidate all sessions by incrementing the token version."""
        self.token_version += 1
