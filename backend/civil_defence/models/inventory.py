"""
Inventory Model
===============

Equipment and supplies held by each district.
"""

import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from civil_defence.core.enums import EquipmentCondition
from civil_defence.db.base import Base, utcnow


class InventoryItem(Base):
    __tablename__ = "inventory"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    condition: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=EquipmentCondition.GOOD.value,
    )
    location: Mapped[str] = mapped_column(String(500), nullable=False)
    district: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    last_inspection: Mapped[Optional[date]] = mapped_column(Date)
    next_inspection: Mapped[Optional[date]] = mapped_column(Date)

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

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_inventory_quantity_non_negative"),
        Index("ix_inventory_category", "category"),
    )

    def __repr__(self) -> str:
        return f"<InventoryItem(id={self.id}, name={self.name}, quantity={self.quantity})>"
