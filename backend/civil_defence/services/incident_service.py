"""
Incident Service Module
=======================

Incident reporting and the admin-side incident lifecycle.
"""

from datetime import datetime, UTC
from typing import List, Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from civil_defence.core.district.district_query import DistrictScope
from civil_defence.core.enums import IncidentSeverity, IncidentStatus, Scope
from civil_defence.core.exceptions import AuthorizationError, IncidentNotFoundError
from civil_defence.core.logging import audit_logger, get_logger
from civil_defence.core.permissions import get_scope
from civil_defence.models.assignment import Assignment
from civil_defence.models.incident import Incident
from civil_defence.models.user import User
from civil_defence.models.volunteer import Volunteer
from civil_defence.schemas.incident import IncidentCreate, IncidentStatusUpdate, IncidentUpdate
from civil_defence.services.filters import apply_equals, apply_search
from civil_defence.services.lifecycle_service import validate_transition

logger = get_logger(__name__)


class IncidentService:
    def __init__(self, db: Session):
        self.db = db

    def _scope(self, current_user: User) -> DistrictScope:
        return DistrictScope(self.db, Incident, current_user)

    def _get_in_scope(self, current_user: User, incident_id: UUID) -> Incident:
        incident = self._scope(current_user).get_by_id(incident_id)
        if incident is None:
            raise IncidentNotFoundError(identifier=str(incident_id))
        return incident

    # --------------------------
    # Reporting
    # --------------------------

    def report(self, current_user: User, data: IncidentCreate) -> Incident:
        """
        Record a new incident reported by the caller.

        District admins may only report within their own district.
        """
        if get_scope(current_user.role) == Scope.DISTRICT:
            self._scope(current_user).ensure_district_access(data.district)

        incident = Incident(
            reported_by=current_user.id,
            title=data.title,
            description=data.description,
            location=data.location,
            latitude=data.latitude,
            longitude=data.longitude,
            district=data.district,
            severity=data.severity.value,
            status=IncidentStatus.REPORTED.value,
            assigned_to=[],
        )
        self.db.add(incident)
        self.db.commit()
        self.db.refresh(incident)

        audit_logger.log_record_created(
            actor_id=str(current_user.id),
            resource="incident",
            resource_id=str(incident.id),
        )
        if incident.severity == IncidentSeverity.CRITICAL.value:
            logger.warning(
                "Critical incident reported",
                extra={"incident_id": str(incident.id), "district": incident.district}
            )
        return incident

    # --------------------------
    # Lookup
    # --------------------------

    def list_incidents(
        self,
        current_user: User,
        status: Optional[IncidentStatus] = None,
        severity: Optional[IncidentSeverity] = None,
        district: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Incident]:
        query = self._scope(current_user).filter_by_district_name(district)
        query = apply_equals(query, Incident.status, status)
        query = apply_equals(query, Incident.severity, severity)
        query = apply_search(
            query,
            search,
            Incident.title,
            Incident.description,
            Incident.location,
            Incident.district,
        )
        return query.order_by(Incident.created_at.desc()).all()

    def list_for_user(self, current_user: User) -> List[Incident]:
        """Incidents the caller reported or was assigned to as a volunteer."""
        volunteer = (
            self.db.query(Volunteer).filter(Volunteer.user_id == current_user.id).first()
        )

        conditions = [Incident.reported_by == current_user.id]
        if volunteer is not None:
            assigned_ids = (
                self.db.query(Assignment.incident_id)
                .filter(Assignment.volunteer_id == volunteer.id)
            )
            conditions.append(Incident.id.in_(assigned_ids))

        return (
            self.db.query(Incident)
            .filter(or_(*conditions))
            .order_by(Incident.created_at.desc())
            .all()
        )

    def get_incident(self, current_user: User, incident_id: UUID) -> Incident:
        incident = self.db.get(Incident, incident_id)
        if incident is None:
            raise IncidentNotFoundError(identifier=str(incident_id))

        if incident.reported_by == current_user.id:
            return incident

        if get_scope(current_user.role) == Scope.VOLUNTEER:
            raise AuthorizationError("You can only view incidents you reported")

        self._scope(current_user).ensure_district_access(incident.district)
        return incident

    # --------------------------
    # Admin updates
    # --------------------------

    def update_incident(
        self,
        current_user: User,
        incident_id: UUID,
        data: IncidentUpdate,
    ) -> Incident:
        incident = self._get_in_scope(current_user, incident_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("district") and changes["district"] != incident.district:
            self._scope(current_user).ensure_district_access(changes["district"])

        for field, value in changes.items():
            if value is None and field in {"title", "description", "location", "district", "severity"}:
                continue
            setattr(incident, field, getattr(value, "value", value))

        self.db.commit()
        self.db.refresh(incident)
        return incident

    def update_status(
        self,
        current_user: User,
        incident_id: UUID,
        data: IncidentStatusUpdate,
    ) -> Incident:
        """
        Move an incident through its lifecycle.

        Resolving stamps resolved_by / resolved_at; reopening a resolved
        incident clears them.
        """
        incident = self._get_in_scope(current_user, incident_id)
        old_status = incident.status
        validate_transition("incident", old_status, data.status)

        incident.status = data.status.value
        if data.assigned_to is not None:
            incident.assigned_to = [str(v) for v in data.assigned_to]

        if old_status != incident.status:
            if data.status == IncidentStatus.RESOLVED:
                incident.resolved_by = current_user.id
                incident.resolved_at = datetime.now(UTC)
            elif data.status == IncidentStatus.IN_PROGRESS:
                incident.resolved_by = None
                incident.resolved_at = None

        self.db.commit()
        self.db.refresh(incident)

        audit_logger.log_status_changed(
            actor_id=str(current_user.id),
            resource="incident",
            resource_id=str(incident.id),
            old_status=old_status,
            new_status=incident.status,
        )
        return incident

    def delete_incident(self, current_user: User, incident_id: UUID) -> None:
        incident = self._get_in_scope(current_user, incident_id)

        self.db.query(Assignment).filter(Assignment.incident_id == incident.id).delete(
            synchronize_session=False
        )
        self.db.delete(incident)
        self.db.commit()

        audit_logger.log_record_deleted(
            actor_id=str(current_user.id),
            resource="incident",
            resource_id=str(incident_id),
        )
