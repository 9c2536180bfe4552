"""
Model Package Initialization
============================

Ensures models are properly registered when imported by the application.

All SQLAlchemy ORM models are exported from this module.

Usage:
    from civil_defence.models import User, Volunteer, Incident
"""

from .user import User
from .volunteer import Volunteer
from .incident import Incident
from .inventory import InventoryItem
from .training import Training, TrainingRegistration
from .assignment import Assignment
from .cms import AboutContent, HeroBanner, Service, SiteSetting, Translation

__all__ = [
    "User",
    "Volunteer",
    "Incident",
    "InventoryItem",
    "Training",
    "TrainingRegistration",
    "Assignment",
    "Translation",
    "HeroBanner",
    "AboutContent",
    "Service",
    "SiteSetting",
]
