"""
Assignment Schemas Module
=========================
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from civil_defence.core.enums import AssignmentStatus


class AssignmentCreate(BaseModel):
    volunteer_id: UUID
    incident_id: UUID
    role: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = Field(default=None, max_length=2000)


class AssignmentStatusUpdate(BaseModel):
    status: AssignmentStatus
    notes: Optional[str] = Field(default=None, max_length=2000)


class AssignmentResponse(BaseModel):
    id: UUID
    volunteer_id: UUID
    incident_id: UUID
    role: Optional[str] = None
    status: str
    assigned_by: Optional[UUID] = None
    assigned_at: datetime
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
