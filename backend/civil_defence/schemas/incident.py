"""
Incident Schemas Module
=======================
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from civil_defence.core.enums import IncidentSeverity, IncidentStatus


class IncidentCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=255)
    description: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1, max_length=500)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    district: str = Field(..., min_length=2, max_length=100)
    severity: IncidentSeverity = IncidentSeverity.MEDIUM

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Flooding near Mahanadi embankment",
                "description": "Water level rising, 20 households affected",
                "location": "Jobra, Cuttack",
                "district": "Cuttack",
                "severity": "high",
            }
        }
    )

    @field_validator("district")
    @classmethod
    def strip_district(cls, v: str) -> str:
        return v.strip()


class IncidentUpdate(BaseModel):
    """Partial update of descriptive fields. Status moves via the status endpoint."""

    title: Optional[str] = Field(default=None, min_length=3, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1)
    location: Optional[str] = Field(default=None, min_length=1, max_length=500)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    district: Optional[str] = Field(default=None, min_length=2, max_length=100)
    severity: Optional[IncidentSeverity] = None

    @field_validator("district")
    @classmethod
    def strip_district(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v


class IncidentStatusUpdate(BaseModel):
    status: IncidentStatus
    assigned_to: Optional[list[UUID]] = None


class IncidentResponse(BaseModel):
    id: UUID
    reported_by: UUID
    title: str
    description: str
    location: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    district: str
    severity: str
    status: str
    assigned_to: list[str] = Field(default_factory=list)
    resolved_by: Optional[UUID] = None
    resolved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
