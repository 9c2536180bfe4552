"""
Assignment Service Module
=========================

Assigning approved volunteers to incidents, and the volunteer-side
progress of each assignment.
"""

from datetime import datetime, UTC
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from civil_defence.core.district.district_query import DistrictScope
from civil_defence.core.enums import AssignmentStatus, IncidentStatus, VolunteerStatus
from civil_defence.core.exceptions import (
    AssignmentNotFoundError,
    AssignmentOwnershipError,
    DuplicateAssignmentError,
    IncidentNotFoundError,
    VolunteerNotApprovedError,
    VolunteerNotFoundError,
)
from civil_defence.core.logging import audit_logger, get_logger
from civil_defence.models.assignment import Assignment
from civil_defence.models.incident import Incident
from civil_defence.models.user import User
from civil_defence.models.volunteer import Volunteer
from civil_defence.schemas.assignment import AssignmentCreate, AssignmentStatusUpdate
from civil_defence.services.lifecycle_service import validate_transition

logger = get_logger(__name__)


class AssignmentService:
    def __init__(self, db: Session):
        self.db = db

    def _scope(self, current_user: User) -> DistrictScope:
        # Assignments carry no district; they follow the volunteer's
        return DistrictScope(
            self.db,
            Assignment,
            current_user,
            district_column=Volunteer.district,
            base_query=self.db.query(Assignment).join(Assignment.volunteer),
            district_getter=lambda assignment: assignment.volunteer.district,
        )

    def list_assignments(self, current_user: User) -> List[Assignment]:
        return (
            self._scope(current_user)
            .filter_by_district()
            .order_by(Assignment.assigned_at.desc())
            .all()
        )

    def list_for_user(self, current_user: User) -> List[Assignment]:
        volunteer = (
            self.db.query(Volunteer).filter(Volunteer.user_id == current_user.id).first()
        )
        if volunteer is None:
            return []

        return (
            self.db.query(Assignment)
            .filter(Assignment.volunteer_id == volunteer.id)
            .order_by(Assignment.assigned_at.desc())
            .all()
        )

    def create_assignment(self, current_user: User, data: AssignmentCreate) -> Assignment:
        """
        Assign a volunteer to an incident.

        The volunteer is added to the incident's ``assigned_to`` list, and
        an incident still in ``reported`` moves to ``assigned``.

        Raises:
            VolunteerNotFoundError / IncidentNotFoundError: Missing records
            DistrictScopeError: Either record is outside the admin's district
            VolunteerNotApprovedError: Volunteer is not approved
            DuplicateAssignmentError: An open assignment already links the two
        """
        volunteer = DistrictScope(self.db, Volunteer, current_user).get_by_id(data.volunteer_id)
        if volunteer is None:
            raise VolunteerNotFoundError(identifier=str(data.volunteer_id))

        incident = DistrictScope(self.db, Incident, current_user).get_by_id(data.incident_id)
        if incident is None:
            raise IncidentNotFoundError(identifier=str(data.incident_id))

        if volunteer.status != VolunteerStatus.APPROVED.value:
            raise VolunteerNotApprovedError(current_status=volunteer.status)

        existing = (
            self.db.query(Assignment)
            .filter(
                Assignment.volunteer_id == volunteer.id,
                Assignment.incident_id == incident.id,
                Assignment.status != AssignmentStatus.DECLINED.value,
            )
            .first()
        )
        if existing is not None:
            raise DuplicateAssignmentError(assignment_id=str(existing.id))

        assignment = Assignment(
            volunteer_id=volunteer.id,
            incident_id=incident.id,
            role=data.role,
            notes=data.notes,
            status=AssignmentStatus.ASSIGNED.value,
            assigned_by=current_user.id,
        )
        self.db.add(assignment)

        volunteer_ref = str(volunteer.id)
        if volunteer_ref not in (incident.assigned_to or []):
            # reassign so the JSON column is flagged dirty
            incident.assigned_to = [*(incident.assigned_to or []), volunteer_ref]
        if incident.status == IncidentStatus.REPORTED.value:
            incident.status = IncidentStatus.ASSIGNED.value

        self.db.commit()
        self.db.refresh(assignment)

        audit_logger.log_record_created(
            actor_id=str(current_user.id),
            resource="assignment",
            resource_id=str(assignment.id),
        )
        logger.info(
            "Volunteer assigned to incident",
            extra={"volunteer_id": volunteer_ref, "incident_id": str(incident.id)}
        )
        return assignment

    def update_status(
        self,
        current_user: User,
        assignment_id: UUID,
        data: AssignmentStatusUpdate,
    ) -> Assignment:
        """
        Progress an assignment. Only the assigned volunteer may do this.
        """
        assignment = self.db.get(Assignment, assignment_id)
        if assignment is None:
            raise AssignmentNotFoundError(identifier=str(assignment_id))

        if assignment.volunteer.user_id != current_user.id:
            raise AssignmentOwnershipError()

        old_status = assignment.status
        validate_transition("assignment", old_status, data.status)

        assignment.status = data.status.value
        if data.notes is not None:
            assignment.notes = data.notes
        if data.status == AssignmentStatus.COMPLETED and old_status != assignment.status:
            assignment.completed_at = datetime.now(UTC)

        self.db.commit()
        self.db.refresh(assignment)

        audit_logger.log_status_changed(
            actor_id=str(current_user.id),
            resource="assignment",
            resource_id=str(assignment.id),
            old_status=old_status,
            new_status=assignment.status,
        )
        return assignment
