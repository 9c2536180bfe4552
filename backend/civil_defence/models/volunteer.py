"""
Volunteer Model
===============

A volunteer registration submitted by a portal user. Each user owns at
most one profile; district admins approve or reject profiles in their
district.
"""

import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    JSON,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from civil_defence.core.enums import VolunteerStatus
from civil_defence.db.base import Base, utcnow
from civil_defence.models.user import User


class Volunteer(Base):
    __tablename__ = "volunteers"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    # ==========================
    # Personal details
    # ==========================
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    district: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date)

    # ==========================
    # Service background
    # ==========================
    is_ex_serviceman: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    service_history: Mapped[Optional[str]] = mapped_column(Text)
    skills: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    qualifications: Mapped[Optional[str]] = mapped_column(Text)
    medical_history: Mapped[Optional[str]] = mapped_column(Text)
    emergency_contact: Mapped[Optional[str]] = mapped_column(String(200))
    emergency_phone: Mapped[Optional[str]] = mapped_column(String(20))

    # ==========================
    # Uploaded documents
    # ==========================
    id_proof_url: Mapped[Optional[str]] = mapped_column(String(500))
    certificate_url: Mapped[Optional[str]] = mapped_column(String(500))
    photo_url: Mapped[Optional[str]] = mapped_column(String(500))

    # ==========================
    # Review
    # ==========================
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=VolunteerStatus.PENDING.value,
    )
    approved_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
    )
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )

    user: Mapped[User] = relationship(User, foreign_keys=[user_id])

    __table_args__ = (
        Index("ix_volunteers_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<Volunteer(id={self.id}, name={self.full_name}, status={self.status})>"
