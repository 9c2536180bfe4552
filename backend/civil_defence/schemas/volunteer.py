"""
Volunteer Schemas Module
========================

Request/response validation for volunteer registration and review.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from civil_defence.core.enums import VolunteerStatus

PHONE_PATTERN = r"^\+?[0-9][0-9 \-]{6,19}$"


class VolunteerCreate(BaseModel):
    """Volunteer registration form."""

    full_name: str = Field(..., min_length=2, max_length=200)
    email: EmailStr
    phone: str = Field(..., pattern=PHONE_PATTERN)
    address: str = Field(..., min_length=5)
    district: str = Field(..., min_length=2, max_length=100)
    date_of_birth: Optional[date] = None
    is_ex_serviceman: bool = False
    service_history: Optional[str] = None
    skills: list[str] = Field(default_factory=list)
    qualifications: Optional[str] = None
    medical_history: Optional[str] = None
    emergency_contact: Optional[str] = Field(default=None, max_length=200)
    emergency_phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    id_proof_url: Optional[str] = Field(default=None, max_length=500)
    certificate_url: Optional[str] = Field(default=None, max_length=500)
    photo_url: Optional[str] = Field(default=None, max_length=500)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "full_name": "Ravi Kumar",
                "email": "ravi@example.com",
                "phone": "9876543210",
                "address": "Plot 12, Saheed Nagar, Bhubaneswar",
                "district": "Khordha",
                "skills": ["first_aid", "swimming"],
            }
        }
    )

    @field_validator("district")
    @classmethod
    def strip_district(cls, v: str) -> str:
        return v.strip()

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, v: list[str]) -> list[str]:
        return [s.strip() for s in v if s and s.strip()]

    @field_validator("date_of_birth")
    @classmethod
    def date_of_birth_in_past(cls, v: Optional[date]) -> Optional[date]:
        if v is not None and v >= date.today():
            raise ValueError("date_of_birth must be in the past")
        return v


class VolunteerStatusUpdate(BaseModel):
    """Approve or reject a volunteer."""

    status: VolunteerStatus
    rejection_reason: Optional[str] = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def reason_only_for_rejection(self) -> "VolunteerStatusUpdate":
        if self.rejection_reason and self.status != VolunteerStatus.REJECTED:
            raise ValueError("rejection_reason is only allowed when rejecting")
        return self


class VolunteerResponse(BaseModel):
    id: UUID
    user_id: UUID
    full_name: str
    email: str
    phone: str
    address: str
    district: str
    date_of_birth: Optional[date] = None
    is_ex_serviceman: bool
    service_history: Optional[str] = None
    skills: list[str] = Field(default_factory=list)
    qualifications: Optional[str] = None
    medical_history: Optional[str] = None
    emergency_contact: Optional[str] = None
    emergency_phone: Optional[str] = None
    id_proof_url: Optional[str] = None
    certificate_url: Optional[str] = None
    photo_url: Optional[str] = None
    status: str
    approved_by: Optional[UUID] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
