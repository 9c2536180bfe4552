"""
Volunteer Service Module
========================

Volunteer registration, lookup and review (approve / reject).
"""

from datetime import datetime, UTC
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from civil_defence.core.district.district_query import DistrictScope
from civil_defence.core.enums import Scope, VolunteerStatus
from civil_defence.core.exceptions import (
    AuthorizationError,
    VolunteerNotFoundError,
    VolunteerProfileExistsError,
)
from civil_defence.core.logging import audit_logger, get_logger
from civil_defence.core.permissions import get_scope
from civil_defence.models.user import User
from civil_defence.models.volunteer import Volunteer
from civil_defence.schemas.volunteer import VolunteerCreate, VolunteerStatusUpdate
from civil_defence.services.filters import apply_equals, apply_search
from civil_defence.services.lifecycle_service import validate_transition

logger = get_logger(__name__)


class VolunteerService:
    """
    Usage:
        service = VolunteerService(db)
        pending = service.list_volunteers(current_user, status=VolunteerStatus.PENDING)
    """

    def __init__(self, db: Session):
        self.db = db

    def _scope(self, current_user: User) -> DistrictScope:
        return DistrictScope(self.db, Volunteer, current_user)

    # --------------------------
    # Registration
    # --------------------------

    def register(self, current_user: User, data: VolunteerCreate) -> Volunteer:
        """
        Create the caller's volunteer profile.

        Raises:
            VolunteerProfileExistsError: If the caller already has one
        """
        if self.get_for_user(current_user) is not None:
            raise VolunteerProfileExistsError()

        volunteer = Volunteer(
            user_id=current_user.id,
            status=VolunteerStatus.PENDING.value,
            **data.model_dump(),
        )
        volunteer.email = volunteer.email.lower()
        self.db.add(volunteer)
        self.db.commit()
        self.db.refresh(volunteer)

        audit_logger.log_record_created(
            actor_id=str(current_user.id),
            resource="volunteer",
            resource_id=str(volunteer.id),
        )
        return volunteer

    # --------------------------
    # Lookup
    # --------------------------

    def get_for_user(self, user: User) -> Optional[Volunteer]:
        return self.db.query(Volunteer).filter(Volunteer.user_id == user.id).first()

    def list_volunteers(
        self,
        current_user: User,
        status: Optional[VolunteerStatus] = None,
        district: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Volunteer]:
        """
        List volunteers visible to an admin.

        District admins only ever see their own district; naming another
        district raises DistrictScopeError.
        """
        query = self._scope(current_user).filter_by_district_name(district)
        query = apply_equals(query, Volunteer.status, status)
        query = apply_search(
            query,
            search,
            Volunteer.full_name,
            Volunteer.email,
            Volunteer.phone,
            Volunteer.district,
        )
        return query.order_by(Volunteer.created_at.desc()).all()

    def get_volunteer(self, current_user: User, volunteer_id: UUID) -> Volunteer:
        """
        Fetch a volunteer for its owner or an admin in scope.

        Raises:
            VolunteerNotFoundError: If missing
            AuthorizationError: If the caller may not see it
        """
        volunteer = self.db.get(Volunteer, volunteer_id)
        if volunteer is None:
            raise VolunteerNotFoundError(identifier=str(volunteer_id))

        if volunteer.user_id == current_user.id:
            return volunteer

        if get_scope(current_user.role) == Scope.VOLUNTEER:
            raise AuthorizationError("You can only view your own volunteer profile")

        self._scope(current_user).ensure_district_access(volunteer.district)
        return volunteer

    # --------------------------
    # Review
    # --------------------------

    def update_status(
        self,
        current_user: User,
        volunteer_id: UUID,
        data: VolunteerStatusUpdate,
    ) -> Volunteer:
        """
        Approve, reject or reopen a volunteer registration.

        Approval stamps approved_by / approved_at and clears any earlier
        rejection reason; rejection stores the reason given.
        """
        volunteer = self._scope(current_user).get_by_id(volunteer_id)
        if volunteer is None:
            raise VolunteerNotFoundError(identifier=str(volunteer_id))

        old_status = volunteer.status
        validate_transition("volunteer", old_status, data.status)

        volunteer.status = data.status.value
        if data.status == VolunteerStatus.APPROVED:
            volunteer.approved_by = current_user.id
            volunteer.approved_at = datetime.now(UTC)
            volunteer.rejection_reason = None
        elif data.status == VolunteerStatus.REJECTED:
            volunteer.rejection_reason = data.rejection_reason
        else:
            volunteer.approved_by = None
            volunteer.approved_at = None
            volunteer.rejection_reason = None

        self.db.commit()
        self.db.refresh(volunteer)

        audit_logger.log_status_changed(
            actor_id=str(current_user.id),
            resource="volunteer",
            resource_id=str(volunteer.id),
            old_status=old_status,
            new_status=volunteer.status,
        )
        logger.info(
            "Volunteer status updated",
            extra={
                "volunteer_id": str(volunteer.id),
                "status": volunteer.status,
                "district": volunteer.district,
            }
        )
        return volunteer
