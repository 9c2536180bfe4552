"""
Enumeration Module
==================

Defines enumerations used across the application.

Values are stored as plain strings in the database, so every enum
subclasses ``str`` and compares equal to its stored value.
"""

from enum import Enum


class Role(str, Enum):
    """System-wide allowed roles."""

    VOLUNTEER = "volunteer"
    DISTRICT_ADMIN = "district_admin"
    DEPARTMENT_ADMIN = "department_admin"
    STATE_ADMIN = "state_admin"
    CMS_MANAGER = "cms_manager"


class Scope(str, Enum):
    """Data visibility class of a role."""

    VOLUNTEER = "volunteer"
    DISTRICT = "district"
    STATE = "state"


class VolunteerStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class IncidentSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class IncidentStatus(str, Enum):
    """Lifecycle statuses for incidents."""

    REPORTED = "reported"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class EquipmentCategory(str, Enum):
    MEDICAL_SUPPLIES = "medical_supplies"
    COMMUNICATION_EQUIPMENT = "communication_equipment"
    RESCUE_EQUIPMENT = "rescue_equipment"
    VEHICLES = "vehicles"
    SAFETY_GEAR = "safety_gear"
    OTHER = "other"


class EquipmentCondition(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    NEEDS_REPAIR = "needs_repair"


class TrainingStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RegistrationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    WAITLISTED = "waitlisted"
    CANCELLED = "cancelled"
    ATTENDED = "attended"


class AssignmentStatus(str, Enum):
    ASSIGNED = "assigned"
    ACCEPTED = "accepted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    DECLINED = "declined"


class ExportFormat(str, Enum):
    CSV = "csv"
    PDF = "pdf"


class ExportResource(str, Enum):
    VOLUNTEERS = "volunteers"
    INCIDENTS = "incidents"
    INVENTORY = "inventory"


# Incident statuses counted as "active" on dashboards
ACTIVE_INCIDENT_STATUSES = (
    IncidentStatus.REPORTED,
    IncidentStatus.ASSIGNED,
    IncidentStatus.IN_PROGRESS,
)

# Training statuses that no longer accept registrations
CLOSED_TRAINING_STATUSES = (
    TrainingStatus.COMPLETED,
    TrainingStatus.CANCELLED,
)
