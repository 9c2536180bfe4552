"""
Authentication Schemas Module
=============================

Pydantic models for authentication request/response validation.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


# ==========================
# Signup / Login Schemas
# ==========================

class SignupRequest(BaseModel):
    """
    Self-service account registration.

    The role is never taken from the request: new accounts are always
    volunteers and elevated roles are granted by state admins.
    """

    username: str = Field(
        ...,
        min_length=3,
        max_length=100,
        pattern=r"^[A-Za-z0-9_.-]+$",
        description="Login name",
        examples=["volunteer1"],
    )
    password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="Password (min 8 characters)",
    )
    email: Optional[EmailStr] = Field(default=None, description="Email address")
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    district: Optional[str] = Field(default=None, max_length=100)

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "username": "volunteer1",
                "password": "volunteer123",
                "email": "volunteer@example.com",
                "first_name": "Ravi",
                "last_name": "Kumar",
                "district": "Khordha",
            }
        },
    )

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("district")
    @classmethod
    def blank_district_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class LoginRequest(BaseModel):
    """Login request schema."""

    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "district_admin",
                "password": "district123",
            }
        }
    )

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        return v.strip().lower()


class LogoutResponse(BaseModel):
    message: str = Field(default="Successfully logged out")


# ==========================
# Current User Schemas
# ==========================

class PermissionsResponse(BaseModel):
    """Permission flags for the caller's role."""

    can_approve_volunteers: bool
    can_manage_incidents: bool
    can_manage_inventory: bool
    can_view_reports: bool
    can_export_data: bool
    can_view_all_districts: bool
    can_manage_users: bool
    can_manage_cms: bool
    scope: str


class CurrentUserResponse(BaseModel):
    """
    Current authenticated user response.

    Includes the permission table entry for the user's role so the
    portal can build its navigation.
    """

    id: UUID
    username: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: str
    district: Optional[str] = None
    is_active: bool
    created_at: datetime
    permissions: PermissionsResponse

    model_config = ConfigDict(from_attributes=True)


# ==========================
# Token Payload Schemas
# ==========================

class SessionTokenPayload(BaseModel):
    """Session token payload schema (for internal use)."""

    sub: str  # User ID
    token_version: int
    type: str
    exp: int
    iat: Optional[int] = None
    iss: Optional[str] = None
    aud: Optional[str] = None


# ==========================
# Error Schemas
# ==========================

class ErrorResponse(BaseModel):
    """Standard error response schema."""

    message: str = Field(..., description="Error message")
    details: Optional[dict] = Field(default=None, description="Additional error details")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "Invalid username or password",
                "details": {},
            }
        }
    )


class MessageResponse(BaseModel):
    message: str
