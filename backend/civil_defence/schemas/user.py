"""
User Schemas Module
===================

Pydantic models for user administration. Password hashes and lockout
counters never leave the API.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from civil_defence.core.enums import Role


class UserUpdate(BaseModel):
    """Schema for updating a user (admin use)."""

    email: Optional[EmailStr] = Field(default=None, description="New email address")
    role: Optional[Role] = Field(default=None, description="New role")
    district: Optional[str] = Field(default=None, max_length=100, description="Home district")
    is_active: Optional[bool] = Field(default=None, description="Account active status")


class UserResponse(BaseModel):
    """User response schema (excludes sensitive data)."""

    id: UUID
    username: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str
    district: Optional[str] = None
    is_active: bool
    is_locked: bool
    created_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "username": "district_admin",
                "email": "district@example.com",
                "role": "district_admin",
                "district": "Khordha",
                "is_active": True,
                "is_locked": False,
                "created_at": "2024-01-15T10:30:00Z",
            }
        },
    )


class UserListResponse(BaseModel):
    """Response schema for user list."""

    users: list[UserResponse]
    total: int = Field(..., description="Total number of users")
    page: int = Field(default=1, description="Current page number")
    page_size: int = Field(default=20, description="Number of users per page")
