"""
Report Service Module
=====================

Dashboard aggregates: per-district statistics and the MIS summary report.
All counts are computed in the database with grouped COUNT queries.
"""

from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from civil_defence.core.config import settings
from civil_defence.core.district.district_query import DistrictScope
from civil_defence.core.enums import (
    ACTIVE_INCIDENT_STATUSES,
    IncidentSeverity,
    IncidentStatus,
    Scope,
    TrainingStatus,
    VolunteerStatus,
)
from civil_defence.core.logging import get_logger
from civil_defence.core.permissions import get_scope
from civil_defence.models.incident import Incident
from civil_defence.models.inventory import InventoryItem
from civil_defence.models.training import Training
from civil_defence.models.user import User
from civil_defence.models.volunteer import Volunteer
from civil_defence.schemas.report import (
    DistrictStats,
    IncidentCounts,
    OverviewTotals,
    Rates,
    SummaryReport,
    TrainingCounts,
    VolunteerCounts,
)

logger = get_logger(__name__)

_ACTIVE_VALUES = [s.value for s in ACTIVE_INCIDENT_STATUSES]
_RESOLVED_VALUES = [IncidentStatus.RESOLVED.value, IncidentStatus.CLOSED.value]


def _count_when(condition):
    return func.count(case((condition, 1)))


def _percent(part: int, whole: int) -> int:
    """Whole-number percentage with halves rounded up (12.5 -> 13)."""
    if not whole:
        return 0
    return (part * 200 + whole) // (whole * 2)


def _empty_summary() -> SummaryReport:
    return SummaryReport(overview=OverviewTotals(), rates=Rates())


# ==========================================
# DISTRICT STATISTICS
# ==========================================

def generate_district_stats(
    db: Session,
    current_user: User,
    district: Optional[str] = None,
) -> List[DistrictStats]:
    """
    Volunteer, incident and training counts per district.

    State-scope users get every configured district (or the one asked
    for); district admins get their own district only, and an empty
    list when they have none. Statewide trainings count towards every
    district.
    """
    if get_scope(current_user.role) == Scope.STATE:
        districts: Iterable[str] = [district] if district else settings.districts
    else:
        scope = DistrictScope(db, Volunteer, current_user)
        if scope.is_unassigned and district is None:
            return []
        districts = [scope.effective_district(district)]
    districts = [d for d in districts if d]

    volunteer_rows = (
        db.query(
            Volunteer.district,
            func.count(Volunteer.id),
            _count_when(Volunteer.status == VolunteerStatus.APPROVED.value),
            _count_when(Volunteer.status == VolunteerStatus.PENDING.value),
        )
        .filter(Volunteer.district.in_(districts))
        .group_by(Volunteer.district)
        .all()
    )
    volunteers = {
        row[0]: VolunteerCounts(total=row[1], approved=row[2], pending=row[3])
        for row in volunteer_rows
    }

    incident_rows = (
        db.query(
            Incident.district,
            func.count(Incident.id),
            _count_when(Incident.status.in_(_ACTIVE_VALUES)),
            _count_when(Incident.severity == IncidentSeverity.CRITICAL.value),
        )
        .filter(Incident.district.in_(districts))
        .group_by(Incident.district)
        .all()
    )
    incidents = {
        row[0]: IncidentCounts(total=row[1], active=row[2], critical=row[3])
        for row in incident_rows
    }

    upcoming = Training.status == TrainingStatus.UPCOMING.value
    local_rows = (
        db.query(Training.district, func.count(Training.id), _count_when(upcoming))
        .filter(Training.district.in_(districts), Training.is_statewide.is_(False))
        .group_by(Training.district)
        .all()
    )
    local_trainings = {row[0]: (row[1], row[2]) for row in local_rows}
    statewide_total, statewide_upcoming = (
        db.query(func.count(Training.id), _count_when(upcoming))
        .filter(Training.is_statewide.is_(True))
        .one()
    )

    stats = []
    for name in districts:
        local_total, local_upcoming = local_trainings.get(name, (0, 0))
        stats.append(
            DistrictStats(
                district=name,
                volunteers=volunteers.get(name, VolunteerCounts()),
                incidents=incidents.get(name, IncidentCounts()),
                trainings=TrainingCounts(
                    total=local_total + (statewide_total or 0),
                    upcoming=local_upcoming + (statewide_upcoming or 0),
                ),
            )
        )

    return stats


# ==========================================
# MIS SUMMARY REPORT
# ==========================================

def _grouped(db: Session, column, district_column, district: Optional[str]) -> Dict[str, int]:
    query = db.query(column, func.count()).group_by(column)
    if district is not None:
        query = query.filter(district_column == district)
    return {key: count for key, count in query.all() if key is not None}


def _total(db: Session, model, district: Optional[str], *conditions: Any) -> int:
    query = db.query(func.count(model.id)).filter(*conditions)
    if district is not None:
        query = query.filter(model.district == district)
    return query.scalar() or 0


def generate_summary_report(
    db: Session,
    current_user: User,
    district: Optional[str] = None,
) -> SummaryReport:
    """
    Build the MIS summary for one district or the whole state.

    Args:
        db: Database session
        current_user: Admin requesting the report
        district: District to report on; None means everything in scope

    Returns:
        SummaryReport with overview totals, breakdowns and rates
    """
    scope = DistrictScope(db, Volunteer, current_user)
    if scope.is_unassigned and district is None:
        return _empty_summary()
    district = scope.effective_district(district)

    volunteers_by_status = _grouped(db, Volunteer.status, Volunteer.district, district)
    volunteers_by_district = _grouped(db, Volunteer.district, Volunteer.district, district)
    incidents_by_severity = _grouped(db, Incident.severity, Incident.district, district)
    incidents_by_status = _grouped(db, Incident.status, Incident.district, district)
    inventory_by_category = _grouped(db, InventoryItem.category, InventoryItem.district, district)
    inventory_by_condition = _grouped(db, InventoryItem.condition, InventoryItem.district, district)

    total_volunteers = sum(volunteers_by_status.values())
    approved = volunteers_by_status.get(VolunteerStatus.APPROVED.value, 0)
    pending = volunteers_by_status.get(VolunteerStatus.PENDING.value, 0)

    total_incidents = sum(incidents_by_status.values())
    active = sum(incidents_by_status.get(s, 0) for s in _ACTIVE_VALUES)
    resolved = sum(incidents_by_status.get(s, 0) for s in _RESOLVED_VALUES)

    total_items = sum(inventory_by_category.values())
    low_stock = _total(
        db,
        InventoryItem,
        district,
        InventoryItem.quantity < settings.LOW_STOCK_THRESHOLD,
    )

    report = SummaryReport(
        district=district,
        overview=OverviewTotals(
            total_volunteers=total_volunteers,
            approved_volunteers=approved,
            pending_volunteers=pending,
            total_incidents=total_incidents,
            active_incidents=active,
            resolved_incidents=resolved,
            total_inventory_items=total_items,
            low_stock_items=low_stock,
        ),
        volunteers_by_status=volunteers_by_status,
        volunteers_by_district=volunteers_by_district,
        incidents_by_severity=incidents_by_severity,
        incidents_by_status=incidents_by_status,
        inventory_by_category=inventory_by_category,
        inventory_by_condition=inventory_by_condition,
        rates=Rates(
            approval_rate=_percent(approved, total_volunteers),
            resolution_rate=_percent(resolved, total_incidents),
            inventory_health=_percent(total_items - low_stock, total_items),
        ),
    )

    logger.info(
        "Summary report generated",
        extra={"district": district or "all", "volunteers": total_volunteers, "incidents": total_incidents}
    )
    return report
