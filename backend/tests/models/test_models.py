"""
Model Unit Tests
================

Tests for SQLAlchemy models including:
- User defaults, lockout and session helpers
- Database constraints
- Training enrolment count
"""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from civil_defence.core.enums import Role
from civil_defence.models import Training, TrainingRegistration, User, Volunteer

from conftest import create_item, create_training, create_user, create_volunteer


pytestmark = pytest.mark.unit


class TestUserModel:
    """Tests for User model."""

    def test_python_defaults(self):
        """Test that a bare User gets volunteer defaults before flush."""
        # Act
        user = User(username="fresh", password_hash="x")

        # Assert
        assert user.role == Role.VOLUNTEER.value
        assert user.is_active is True
        assert user.is_locked is False
        assert user.failed_attempts == 0
        assert user.token_version == 1

    def test_increment_failed_attempts_locks_at_max(self):
        # Arrange
        user = User(username="fresh", password_hash="x")

        # Act
        results = [user.increment_failed_attempts(max_attempts=3) for _ in range(3)]

        # Assert
        assert results == [False, False, True]
        assert user.is_locked is True

    def test_unlock_resets_attempts(self):
        user = User(username="fresh", password_hash="x", is_locked=True, failed_attempts=5)

        user.unlock_account()

        assert user.is_locked is False
        assert user.failed_attempts == 0

    def test_invalidate_sessions(self):
        user = User(username="fresh", password_hash="x")
        user.invalidate_sessions()
        assert user.token_version == 2

    @pytest.mark.parametrize(
        "first,last,expected",
        [("Ravi", "Kumar", "Ravi Kumar"), ("Ravi", None, "Ravi"), (None, None, "fresh")],
    )
    def test_display_name(self, first, last, expected):
        user = User(username="fresh", password_hash="x", first_name=first, last_name=last)
        assert user.display_name == expected

    def test_timestamps_set_on_insert(self, db_session: Session, volunteer_user: User):
        assert volunteer_user.created_at is not None
        assert volunteer_user.updated_at is not None

    def test_username_unique(self, db_session: Session, volunteer_user: User):
        db_session.add(User(username="volunteer1", password_hash="x"))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()


class TestConstraints:

    def test_one_volunteer_profile_per_user(self, db_session: Session, volunteer_profile: Volunteer):
        # Arrange
        duplicate = Volunteer(
            user_id=volunteer_profile.user_id,
            full_name="Second Profile",
            email="second@example.com",
            phone="9000000000",
            address="Somewhere long enough",
            district="Puri",
        )
        db_session.add(duplicate)

        # Act & Assert
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_inventory_quantity_non_negative(self, db_session: Session):
        with pytest.raises(IntegrityError):
            create_item(db_session, quantity=-1)
        db_session.rollback()

    def test_training_capacity_positive(self, db_session: Session):
        with pytest.raises(IntegrityError):
            create_training(db_session, capacity=0)
        db_session.rollback()

    def test_registration_unique_per_training(
        self,
        db_session: Session,
        volunteer_profile: Volunteer,
        khordha_training: Training,
    ):
        db_session.add(TrainingRegistration(training_id=khordha_training.id, volunteer_id=volunteer_profile.id))
        db_session.commit()

        db_session.add(TrainingRegistration(training_id=khordha_training.id, volunteer_id=volunteer_profile.id))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()


class TestTrainingModel:

    def test_enrolled_count(self, db_session: Session, khordha_training: Training):
        # Arrange
        for name in ("a_vol", "b_vol"):
            user = create_user(db_session, name, Role.VOLUNTEER, "Khordha")
            volunteer = create_volunteer(db_session, user)
            db_session.add(TrainingRegistration(training_id=khordha_training.id, volunteer_id=volunteer.id))
        db_session.commit()

        # Act
        db_session.refresh(khordha_training)

        # Assert
        assert khordha_training.enrolled_count == 2

    def test_registration_defaults(
        self,
        db_session: Session,
        volunteer_profile: Volunteer,
        khordha_training: Training,
    ):
        registration = TrainingRegistration(training_id=khordha_training.id, volunteer_id=volunteer_profile.id)
        db_session.add(registration)
        db_session.commit()

        assert registration.status == "pending"
        assert registration.attended is False
