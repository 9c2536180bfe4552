"""
Training Service Unit Tests
===========================

Tests for training management and registration including:
- Capacity enforcement
- Closed trainings
- Duplicate registrations
- Statewide trainings and district admins
"""

import uuid
from datetime import datetime, timedelta, UTC

import pytest
from sqlalchemy.orm import Session

from civil_defence.core.enums import Role, TrainingStatus
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
from civil_defence.models import Training, TrainingRegistration, User, Volunteer
from civil_defence.schemas.training import RegistrationCreate, TrainingCreate, TrainingUpdate
from civil_defence.services.training_service import TrainingService

from conftest import create_training, create_user, create_volunteer


pytestmark = pytest.mark.unit


def _training_data(**overrides) -> TrainingCreate:
    start = datetime.now(UTC) + timedelta(days=3)
    values = dict(
        title="Search and Rescue Basics",
        description="Rope work and casualty evacuation",
        district="Khordha",
        location="Fire Station Grounds",
        start_at=start,
        end_at=start + timedelta(hours=6),
        capacity=20,
    )
    values.update(overrides)
    return TrainingCreate(**values)


class TestRegistration:
    """Tests for TrainingService.register."""

    def test_register_creates_pending_registration(
        self,
        db_session: Session,
        volunteer_user: User,
        volunteer_profile: Volunteer,
        khordha_training: Training,
    ):
        # Act
        registration = TrainingService(db_session).register(
            volunteer_user, khordha_training.id, RegistrationCreate(notes="Vegetarian lunch"),
        )

        # Assert
        assert registration.volunteer_id == volunteer_profile.id
        assert registration.status == "pending"
        assert registration.notes == "Vegetarian lunch"
        db_session.refresh(khordha_training)
        assert khordha_training.enrolled_count == 1

    def test_register_requires_volunteer_profile(
        self,
        db_session: Session,
        volunteer_user: User,
        khordha_training: Training,
    ):
        with pytest.raises(VolunteerProfileRequiredError):
            TrainingService(db_session).register(volunteer_user, khordha_training.id, RegistrationCreate())

    def test_register_unknown_training(
        self,
        db_session: Session,
        volunteer_user: User,
        volunteer_profile: Volunteer,
    ):
        with pytest.raises(TrainingNotFoundError):
            TrainingService(db_session).register(volunteer_user, uuid.uuid4(), RegistrationCreate())

    def test_register_twice_rejected(
        self,
        db_session: Session,
        volunteer_user: User,
        volunteer_profile: Volunteer,
        khordha_training: Training,
    ):
        # Arrange
        service = TrainingService(db_session)
        service.register(volunteer_user, khordha_training.id, RegistrationCreate())

        # Act & Assert
        with pytest.raises(DuplicateRegistrationError):
            service.register(volunteer_user, khordha_training.id, RegistrationCreate())

    def test_concurrent_duplicate_hits_unique_constraint(
        self,
        db_session: Session,
        volunteer_user: User,
        volunteer_profile: Volunteer,
        khordha_training: Training,
        monkeypatch: pytest.MonkeyPatch,
    ):
        """Test that a registration racing past the lookup still gets a 400."""
        # Arrange
        service = TrainingService(db_session)
        service.register(volunteer_user, khordha_training.id, RegistrationCreate())
        monkeypatch.setattr(service, "_registration_of", lambda training_id, volunteer_id: None)

        # Act & Assert
        with pytest.raises(DuplicateRegistrationError):
            service.register(volunteer_user, khordha_training.id, RegistrationCreate())
        assert db_session.query(TrainingRegistration).count() == 1

    def test_full_training_rejected(
        self,
        db_session: Session,
        volunteer_user: User,
        volunteer_profile: Volunteer,
    ):
        """Test that registration stops at capacity."""
        # Arrange
        training = create_training(db_session, capacity=1)
        other = create_user(db_session, "early_bird", Role.VOLUNTEER, "Khordha")
        create_volunteer(db_session, other)
        service = TrainingService(db_session)
        service.register(other, training.id, RegistrationCreate())

        # Act & Assert
        with pytest.raises(TrainingFullError) as exc_info:
            service.register(volunteer_user, training.id, RegistrationCreate())

        assert exc_info.value.details == {"capacity": 1}
        assert db_session.query(TrainingRegistration).count() == 1

    @pytest.mark.parametrize("closed", [TrainingStatus.COMPLETED, TrainingStatus.CANCELLED])
    def test_closed_training_rejected(
        self,
        db_session: Session,
        volunteer_user: User,
        volunteer_profile: Volunteer,
        closed: TrainingStatus,
    ):
        training = create_training(db_session, status=closed)
        with pytest.raises(TrainingClosedError):
            TrainingService(db_session).register(volunteer_user, training.id, RegistrationCreate())

    def test_unregister(
        self,
        db_session: Session,
        volunteer_user: User,
        volunteer_profile: Volunteer,
        khordha_training: Training,
    ):
        # Arrange
        service = TrainingService(db_session)
        service.register(volunteer_user, khordha_training.id, RegistrationCreate())

        # Act
        service.unregister(volunteer_user, khordha_training.id)

        # Assert
        assert db_session.query(TrainingRegistration).count() == 0
        with pytest.raises(RegistrationNotFoundError):
            service.unregister(volunteer_user, khordha_training.id)

    def test_my_trainings(
        self,
        db_session: Session,
        volunteer_user: User,
        volunteer_profile: Volunteer,
        khordha_training: Training,
        statewide_training: Training,
    ):
        # Arrange
        service = TrainingService(db_session)
        service.register(volunteer_user, statewide_training.id, RegistrationCreate())

        # Act
        trainings = service.list_for_user(volunteer_user)

        # Assert
        assert [t.id for t in trainings] == [statewide_training.id]


class TestListing:

    def test_district_filter_includes_statewide(
        self,
        db_session: Session,
        state_admin: User,
        khordha_training: Training,
        statewide_training: Training,
    ):
        # Arrange
        cuttack = create_training(db_session, "Cuttack")

        # Act
        trainings = TrainingService(db_session).list_trainings(state_admin, district="Khordha")

        # Assert
        ids = {t.id for t in trainings}
        assert ids == {khordha_training.id, statewide_training.id}
        assert cuttack.id not in ids

    def test_district_admin_pinned(
        self,
        db_session: Session,
        district_admin: User,
        khordha_training: Training,
        statewide_training: Training,
    ):
        create_training(db_session, "Cuttack")

        trainings = TrainingService(db_session).list_trainings(district_admin)

        assert {t.district for t in trainings if not t.is_statewide} == {"Khordha"}
        assert len(trainings) == 2

    def test_volunteer_sees_all(
        self,
        db_session: Session,
        volunteer_user: User,
        khordha_training: Training,
    ):
        create_training(db_session, "Cuttack")
        assert len(TrainingService(db_session).list_trainings(volunteer_user)) == 2


class TestManagement:

    def test_district_admin_creates_in_own_district(self, db_session: Session, district_admin: User):
        training = TrainingService(db_session).create_training(district_admin, _training_data())

        assert training.created_by == district_admin.id
        assert training.status == "upcoming"

    def test_district_admin_cannot_create_elsewhere(self, db_session: Session, district_admin: User):
        with pytest.raises(DistrictScopeError):
            TrainingService(db_session).create_training(district_admin, _training_data(district="Puri"))

    def test_district_admin_cannot_create_statewide(self, db_session: Session, district_admin: User):
        with pytest.raises(DistrictScopeError):
            TrainingService(db_session).create_training(district_admin, _training_data(is_statewide=True))

    def test_state_admin_creates_statewide(self, db_session: Session, state_admin: User):
        training = TrainingService(db_session).create_training(
            state_admin, _training_data(district="Bhubaneswar", is_statewide=True),
        )
        assert training.is_statewide is True

    def test_update_rejects_end_before_start(
        self,
        db_session: Session,
        district_admin: User,
        khordha_training: Training,
    ):
        """Test that moving only end_at before the stored start_at is refused."""
        # Arrange
        update = TrainingUpdate(end_at=khordha_training.start_at - timedelta(hours=1))

        # Act & Assert
        with pytest.raises(ValidationError):
            TrainingService(db_session).update_training(district_admin, khordha_training.id, update)

    def test_update_capacity(
        self,
        db_session: Session,
        district_admin: User,
        khordha_training: Training,
    ):
        training = TrainingService(db_session).update_training(
            district_admin, khordha_training.id, TrainingUpdate(capacity=50, status=TrainingStatus.ONGOING),
        )
        assert training.capacity == 50
        assert training.status == "ongoing"

    def test_district_admin_cannot_edit_statewide(
        self,
        db_session: Session,
        district_admin: User,
        statewide_training: Training,
    ):
        with pytest.raises(DistrictScopeError):
            TrainingService(db_session).update_training(
                district_admin, statewide_training.id, TrainingUpdate(capacity=5),
            )

    def test_delete_removes_registrations(
        self,
        db_session: Session,
        district_admin: User,
        volunteer_user: User,
        volunteer_profile: Volunteer,
        khordha_training: Training,
    ):
        # Arrange
        service = TrainingService(db_session)
        service.register(volunteer_user, khordha_training.id, RegistrationCreate())

        # Act
        service.delete_training(district_admin, khordha_training.id)

        # Assert
        assert db_session.query(Training).count() == 0
        assert db_session.query(TrainingRegistration).count() == 0
