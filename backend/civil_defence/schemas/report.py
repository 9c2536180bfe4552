"""
Report Schemas Module
=====================

Dashboard aggregates returned by the report endpoints.
"""

from typing import Optional

from pydantic import BaseModel, Field


class VolunteerCounts(BaseModel):
    total: int = 0
    approved: int = 0
    pending: int = 0


class IncidentCounts(BaseModel):
    total: int = 0
    active: int = 0
    critical: int = 0


class TrainingCounts(BaseModel):
    total: int = 0
    upcoming: int = 0


class DistrictStats(BaseModel):
    district: str
    volunteers: VolunteerCounts
    incidents: IncidentCounts
    trainings: TrainingCounts


class OverviewTotals(BaseModel):
    total_volunteers: int = 0
    approved_volunteers: int = 0
    pending_volunteers: int = 0
    total_incidents: int = 0
    active_incidents: int = 0
    resolved_incidents: int = 0
    total_inventory_items: int = 0
    low_stock_items: int = 0


class Rates(BaseModel):
    """Whole-number percentages, 0 when there is nothing to measure."""

    approval_rate: int = Field(0, ge=0, le=100)
    resolution_rate: int = Field(0, ge=0, le=100)
    inventory_health: int = Field(0, ge=0, le=100)


class SummaryReport(BaseModel):
    district: Optional[str] = None
    overview: OverviewTotals
    volunteers_by_status: dict[str, int] = Field(default_factory=dict)
    volunteers_by_district: dict[str, int] = Field(default_factory=dict)
    incidents_by_severity: dict[str, int] = Field(default_factory=dict)
    incidents_by_status: dict[str, int] = Field(default_factory=dict)
    inventory_by_category: dict[str, int] = Field(default_factory=dict)
    inventory_by_condition: dict[str, int] = Field(default_factory=dict)
    rates: Rates
