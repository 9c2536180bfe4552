"""
Schemas Package Initialization
==============================

Exports all Pydantic schemas for the application.

Usage:
    from civil_defence.schemas import LoginRequest, VolunteerCreate
"""

# Auth schemas
from civil_defence.schemas.auth import (
    SignupRequest,
    LoginRequest,
    LogoutResponse,
    PermissionsResponse,
    CurrentUserResponse,
    SessionTokenPayload,
    ErrorResponse,
    MessageResponse,
)

# User schemas
from civil_defence.schemas.user import (
    UserUpdate,
    UserResponse,
    UserListResponse,
)

# Domain schemas
from civil_defence.schemas.volunteer import (
    VolunteerCreate,
    VolunteerStatusUpdate,
    VolunteerResponse,
)
from civil_defence.schemas.incident import (
    IncidentCreate,
    IncidentUpdate,
    IncidentStatusUpdate,
    IncidentResponse,
)
from civil_defence.schemas.inventory import (
    InventoryItemCreate,
    InventoryItemUpdate,
    InventoryItemResponse,
)
from civil_defence.schemas.training import (
    TrainingCreate,
    TrainingUpdate,
    TrainingResponse,
    RegistrationCreate,
    RegistrationResponse,
)
from civil_defence.schemas.assignment import (
    AssignmentCreate,
    AssignmentStatusUpdate,
    AssignmentResponse,
)
from civil_defence.schemas.report import (
    DistrictStats,
    SummaryReport,
)

__all__ = [
    # Auth
    "SignupRequest",
    "LoginRequest",
    "LogoutResponse",
    "PermissionsResponse",
    "CurrentUserResponse",
    "SessionTokenPayload",
    "ErrorResponse",
    "MessageResponse",
    # User
    "UserUpdate",
    "UserResponse",
    "UserListResponse",
    # Volunteer
    "VolunteerCreate",
    "VolunteerStatusUpdate",
    "VolunteerResponse",
    # Incident
    "IncidentCreate",
    "IncidentUpdate",
    "IncidentStatusUpdate",
    "IncidentResponse",
    # Inventory
    "InventoryItemCreate",
    "InventoryItemUpdate",
    "InventoryItemResponse",
    # Training
    "TrainingCreate",
    "TrainingUpdate",
    "TrainingResponse",
    "RegistrationCreate",
    "RegistrationResponse",
    # Assignment
    "AssignmentCreate",
    "AssignmentStatusUpdate",
    "AssignmentResponse",
    # Reports
    "DistrictStats",
    "SummaryReport",
]
