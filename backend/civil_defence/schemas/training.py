"""
Training Schemas Module
=======================
"""

from datetime import UTC, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from civil_defence.core.config import settings
from civil_defence.core.enums import TrainingStatus


def as_utc(value: datetime) -> datetime:
    """Naive timestamps are taken to be UTC."""
    return value if value.tzinfo else value.replace(tzinfo=UTC)


class TrainingCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=255)
    description: str = Field(..., min_length=1)
    district: str = Field(..., min_length=2, max_length=100)
    location: str = Field(..., min_length=1, max_length=500)
    start_at: datetime
    end_at: datetime
    capacity: int = Field(default=settings.DEFAULT_TRAINING_CAPACITY, ge=1, le=10000)
    skills: list[str] = Field(default_factory=list)
    status: TrainingStatus = TrainingStatus.UPCOMING
    is_statewide: bool = False

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Basic First Aid",
                "description": "CPR, bandaging and casualty handling",
                "district": "Khordha",
                "location": "Civil Defence Training Centre, Bhubaneswar",
                "start_at": "2025-03-01T09:00:00+05:30",
                "end_at": "2025-03-01T17:00:00+05:30",
                "capacity": 30,
            }
        }
    )

    @field_validator("district")
    @classmethod
    def strip_district(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v

    @model_validator(mode="after")
    def end_after_start(self) -> "TrainingCreate":
        if as_utc(self.end_at) <= as_utc(self.start_at):
            raise ValueError("end_at must be after start_at")
        return self


class TrainingUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=3, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1)
    district: Optional[str] = Field(default=None, min_length=2, max_length=100)
    location: Optional[str] = Field(default=None, min_length=1, max_length=500)
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    capacity: Optional[int] = Field(default=None, ge=1, le=10000)
    skills: Optional[list[str]] = None
    status: Optional[TrainingStatus] = None
    is_statewide: Optional[bool] = None

    @field_validator("district")
    @classmethod
    def strip_district(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v

    @model_validator(mode="after")
    def end_after_start(self) -> "TrainingUpdate":
        if self.start_at and self.end_at and as_utc(self.end_at) <= as_utc(self.start_at):
            raise ValueError("end_at must be after start_at")
        return self


class TrainingResponse(BaseModel):
    id: UUID
    title: str
    description: str
    district: str
    location: str
    start_at: datetime
    end_at: datetime
    capacity: int
    enrolled_count: int
    skills: list[str] = Field(default_factory=list)
    status: str
    is_statewide: bool
    created_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RegistrationCreate(BaseModel):
    notes: Optional[str] = Field(default=None, max_length=1000)


class RegistrationResponse(BaseModel):
    id: UUID
    training_id: UUID
    volunteer_id: UUID
    status: str
    attended: bool
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
