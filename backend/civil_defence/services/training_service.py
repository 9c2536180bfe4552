"""
Training Service Module
=======================

Training programmes and volunteer registration.

Capacity:
    Registration locks the training row (SELECT ... FOR UPDATE) while the
    enrolment count is checked, so two concurrent registrations cannot
    both take the last seat. Backends without row locks (SQLite) ignore
    the lock clause.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from civil_defence.core.district.district_query import DistrictScope
from civil_defence.core.enums import (
    CLOSED_TRAINING_STATUSES,
    RegistrationStatus,
    Scope,
)
from civil_defence.core.exceptions import (
    DistrictScopeError,
    DuplicateRegistrationError,
    RegistrationNotFoundError,
    TrainingClosedError,
    TrainingFullError,
    TrainingNotFoundError,
    ValidationError,
    VolunteerProfileRequiredError,
)
from civil_defence.core.logging import audit_logger, get_logger, security_logger
from civil_defence.core.permissions import get_scope
from civil_defence.models.training import Training, TrainingRegistration
from civil_defence.models.user import User
from civil_defence.models.volunteer import Volunteer
from civil_defence.schemas.training import (
    RegistrationCreate,
    TrainingCreate,
    TrainingUpdate,
    as_utc,
)

logger = get_logger(__name__)

_CLOSED_STATUS_VALUES = {s.value for s in CLOSED_TRAINING_STATUSES}


class TrainingService:
    """
    Usage:
        service = TrainingService(db)
        registration = service.register(current_user, training_id, RegistrationCreate())
    """

    def __init__(self, db: Session):
        self.db = db

    def _scope(self, current_user: User) -> DistrictScope:
        return DistrictScope(self.db, Training, current_user)

    def _get(self, training_id: UUID) -> Training:
        training = self.db.get(Training, training_id)
        if training is None:
            raise TrainingNotFoundError(identifier=str(training_id))
        return training

    def _require_state_scope(self, current_user: User) -> None:
        if get_scope(current_user.role) != Scope.STATE:
            security_logger.log_district_scope_violation(
                user_id=str(current_user.id),
                user_district=current_user.district,
                target_district=None,
                resource="trainings",
            )
            raise DistrictScopeError(resource="statewide training")

    def _ensure_manageable(self, current_user: User, training: Training) -> None:
        """Statewide trainings belong to state-scope admins only."""
        if training.is_statewide:
            self._require_state_scope(current_user)
        else:
            self._scope(current_user).ensure_district_access(training.district)

    # --------------------------
    # Lookup
    # --------------------------

    def list_trainings(
        self,
        current_user: User,
        district: Optional[str] = None,
    ) -> List[Training]:
        """
        List trainings, optionally for one district.

        A district filter always includes statewide trainings. District
        admins are pinned to their own district; one without a district
        only sees statewide trainings.
        """
        scope = self._scope(current_user)
        if scope.is_unassigned and district is None:
            return (
                self.db.query(Training)
                .filter(Training.is_statewide.is_(True))
                .order_by(Training.start_at.desc())
                .all()
            )
        if scope.scope == Scope.DISTRICT:
            district = scope.effective_district(district)

        query = self.db.query(Training)
        if district is not None:
            query = query.filter(
                or_(Training.district == district, Training.is_statewide.is_(True))
            )

        return query.order_by(Training.start_at.desc()).all()

    def get_training(self, training_id: UUID) -> Training:
        return self._get(training_id)

    def list_for_user(self, current_user: User) -> List[Training]:
        volunteer = self._volunteer_of(current_user)
        if volunteer is None:
            return []

        return (
            self.db.query(Training)
            .join(TrainingRegistration, TrainingRegistration.training_id == Training.id)
            .filter(TrainingRegistration.volunteer_id == volunteer.id)
            .order_by(Training.start_at.desc())
            .all()
        )

    def list_registrations(
        self,
        current_user: User,
        training_id: UUID,
    ) -> List[TrainingRegistration]:
        training = self._get(training_id)
        if not training.is_statewide:
            self._scope(current_user).ensure_district_access(training.district)

        return (
            self.db.query(TrainingRegistration)
            .filter(TrainingRegistration.training_id == training.id)
            .order_by(TrainingRegistration.created_at.asc())
            .all()
        )

    # --------------------------
    # Admin management
    # --------------------------

    def create_training(self, current_user: User, data: TrainingCreate) -> Training:
        if data.is_statewide:
            self._require_state_scope(current_user)
        else:
            self._scope(current_user).ensure_district_access(data.district)

        training = Training(
            title=data.title,
            description=data.description,
            district=data.district,
            location=data.location,
            start_at=data.start_at,
            end_at=data.end_at,
            capacity=data.capacity,
            skills=data.skills,
            status=data.status.value,
            is_statewide=data.is_statewide,
            created_by=current_user.id,
        )
        self.db.add(training)
        self.db.commit()
        self.db.refresh(training)

        audit_logger.log_record_created(
            actor_id=str(current_user.id),
            resource="training",
            resource_id=str(training.id),
        )
        return training

    def update_training(
        self,
        current_user: User,
        training_id: UUID,
        data: TrainingUpdate,
    ) -> Training:
        """
        Partially update a training.

        Raises:
            ValidationError: If the resulting end_at is not after start_at
        """
        training = self._get(training_id)
        self._ensure_manageable(current_user, training)

        changes = data.model_dump(exclude_unset=True)
        if changes.get("is_statewide"):
            self._require_state_scope(current_user)
        if changes.get("district") and changes["district"] != training.district:
            self._scope(current_user).ensure_district_access(changes["district"])

        for field, value in changes.items():
            if value is None:
                continue
            setattr(training, field, getattr(value, "value", value))

        if as_utc(training.end_at) <= as_utc(training.start_at):
            self.db.rollback()
            raise ValidationError(
                "end_at must be after start_at",
                details={"field": "end_at"},
            )

        self.db.commit()
        self.db.refresh(training)
        return training

    def delete_training(self, current_user: User, training_id: UUID) -> None:
        training = self._get(training_id)
        self._ensure_manageable(current_user, training)

        # registrations go with it through the delete-orphan cascade
        self.db.delete(training)
        self.db.commit()

        audit_logger.log_record_deleted(
            actor_id=str(current_user.id),
            resource="training",
            resource_id=str(training_id),
        )

    # --------------------------
    # Registration
    # --------------------------

    def _volunteer_of(self, user: User) -> Optional[Volunteer]:
        return self.db.query(Volunteer).filter(Volunteer.user_id == user.id).first()

    def _registration_of(self, training_id: UUID, volunteer_id: UUID) -> Optional[TrainingRegistration]:
        return (
            self.db.query(TrainingRegistration)
            .filter(
                TrainingRegistration.training_id == training_id,
                TrainingRegistration.volunteer_id == volunteer_id,
            )
            .first()
        )

    def register(
        self,
        current_user: User,
        training_id: UUID,
        data: RegistrationCreate,
    ) -> TrainingRegistration:
        """
        Register the caller's volunteer profile for a training.

        Raises:
            VolunteerProfileRequiredError: Caller has no volunteer profile
            TrainingNotFoundError: Training does not exist
            DuplicateRegistrationError: Already registered
            TrainingClosedError: Training is completed or cancelled
            TrainingFullError: Enrolment has reached capacity
        """
        volunteer = self._volunteer_of(current_user)
        if volunteer is None:
            raise VolunteerProfileRequiredError()

        training = (
            self.db.query(Training)
            .filter(Training.id == training_id)
            .with_for_update()
            .first()
        )
        if training is None:
            raise TrainingNotFoundError(identifier=str(training_id))

        if self._registration_of(training.id, volunteer.id) is not None:
            self.db.rollback()
            raise DuplicateRegistrationError()

        if training.status in _CLOSED_STATUS_VALUES:
            self.db.rollback()
            raise TrainingClosedError(training_status=training.status)

        enrolled = (
            self.db.query(func.count(TrainingRegistration.id))
            .filter(TrainingRegistration.training_id == training.id)
            .scalar()
        ) or 0
        if enrolled >= training.capacity:
            self.db.rollback()
            raise TrainingFullError(capacity=training.capacity)

        registration = TrainingRegistration(
            training_id=training.id,
            volunteer_id=volunteer.id,
            status=RegistrationStatus.PENDING.value,
            notes=data.notes,
        )
        self.db.add(registration)
        try:
            self.db.commit()
        except IntegrityError:
            # a concurrent request registered the same volunteer first
            self.db.rollback()
            raise DuplicateRegistrationError()
        self.db.refresh(registration)

        logger.info(
            "Volunteer registered for training",
            extra={
                "training_id": str(training.id),
                "volunteer_id": str(volunteer.id),
                "enrolled": enrolled + 1,
                "capacity": training.capacity,
            }
        )
        return registration

    def unregister(self, current_user: User, training_id: UUID) -> None:
        volunteer = self._volunteer_of(current_user)
        if volunteer is None:
            raise VolunteerProfileRequiredError()

        training = self._get(training_id)
        registration = self._registration_of(training.id, volunteer.id)
        if registration is None:
            raise RegistrationNotFoundError(identifier=str(training_id))

        self.db.delete(registration)
        self.db.commit()

        logger.info(
            "Volunteer unregistered from training",
            extra={"training_id": str(training.id), "volunteer_id": str(volunteer.id)}
        )
