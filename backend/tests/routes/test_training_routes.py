"""
Training Routes Integration Tests
=================================

Integration tests for training endpoints including:
- Browsing and my-trainings
- Admin create/update/delete
- Registration and cancellation
- Registration listing for admins
"""

import uuid
from datetime import datetime, timedelta, UTC

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from civil_defence.core.enums import TrainingStatus
from civil_defence.models import Training, TrainingRegistration, User, Volunteer

from conftest import create_training


pytestmark = pytest.mark.integration


def _training(**overrides) -> dict:
    start = datetime.now(UTC) + timedelta(days=10)
    payload = {
        "title": "Flood Rescue Drill",
        "description": "Boat handling and rope rescue",
        "district": "Khordha",
        "location": "Chilika lake front",
        "start_at": start.isoformat(),
        "end_at": (start + timedelta(hours=5)).isoformat(),
        "capacity": 25,
        "skills": ["swimming"],
    }
    payload.update(overrides)
    return payload


class TestBrowseTrainings:

    def test_volunteer_lists_all(
        self,
        client: TestClient,
        db_session: Session,
        khordha_training: Training,
        statewide_training: Training,
        volunteer_headers: dict,
    ):
        create_training(db_session, "Cuttack")

        response = client.get("/api/trainings", headers=volunteer_headers)

        assert response.status_code == 200
        assert len(response.json()) == 3

    def test_district_filter_includes_statewide(
        self,
        client: TestClient,
        db_session: Session,
        khordha_training: Training,
        statewide_training: Training,
        volunteer_headers: dict,
    ):
        # Arrange
        create_training(db_session, "Cuttack")

        # Act
        response = client.get("/api/trainings?district=Khordha", headers=volunteer_headers)

        # Assert
        ids = {t["id"] for t in response.json()}
        assert ids == {str(khordha_training.id), str(statewide_training.id)}

    def test_get_training(self, client: TestClient, khordha_training: Training, volunteer_headers: dict):
        response = client.get(f"/api/trainings/{khordha_training.id}", headers=volunteer_headers)

        assert response.status_code == 200
        assert response.json()["enrolled_count"] == 0

    def test_get_missing(self, client: TestClient, volunteer_headers: dict):
        assert client.get(f"/api/trainings/{uuid.uuid4()}", headers=volunteer_headers).status_code == 404

    def test_requires_login(self, client: TestClient):
        assert client.get("/api/trainings").status_code == 401


class TestManageTrainings:

    def test_district_admin_creates(
        self,
        client: TestClient,
        district_admin: User,
        district_admin_headers: dict,
    ):
        # Act
        response = client.post("/api/trainings", json=_training(), headers=district_admin_headers)

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["created_by"] == str(district_admin.id)
        assert data["status"] == "upcoming"
        assert data["is_statewide"] is False

    def test_end_before_start_rejected(self, client: TestClient, state_admin_headers: dict):
        start = datetime.now(UTC) + timedelta(days=2)
        payload = _training(start_at=start.isoformat(), end_at=(start - timedelta(hours=1)).isoformat())

        response = client.post("/api/trainings", json=payload, headers=state_admin_headers)

        assert response.status_code == 400

    def test_zero_capacity_rejected(self, client: TestClient, state_admin_headers: dict):
        response = client.post("/api/trainings", json=_training(capacity=0), headers=state_admin_headers)
        assert response.status_code == 400

    def test_district_admin_statewide_forbidden(self, client: TestClient, district_admin_headers: dict):
        response = client.post(
            "/api/trainings", json=_training(is_statewide=True), headers=district_admin_headers,
        )
        assert response.status_code == 403

    def test_volunteer_cannot_create(self, client: TestClient, volunteer_headers: dict):
        assert client.post("/api/trainings", json=_training(), headers=volunteer_headers).status_code == 403

    def test_update_status(self, client: TestClient, khordha_training: Training, district_admin_headers: dict):
        response = client.patch(
            f"/api/trainings/{khordha_training.id}",
            json={"status": "cancelled"},
            headers=district_admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

    def test_other_district_admin_cannot_update(
        self,
        client: TestClient,
        khordha_training: Training,
        other_district_admin_headers: dict,
    ):
        response = client.patch(
            f"/api/trainings/{khordha_training.id}",
            json={"capacity": 5},
            headers=other_district_admin_headers,
        )
        assert response.status_code == 403

    def test_delete(
        self,
        client: TestClient,
        db_session: Session,
        khordha_training: Training,
        district_admin_headers: dict,
    ):
        response = client.delete(f"/api/trainings/{khordha_training.id}", headers=district_admin_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Training deleted"}
        assert db_session.query(Training).count() == 0


class TestTrainingRegistration:

    def test_register_and_cancel(
        self,
        client: TestClient,
        db_session: Session,
        volunteer_profile: Volunteer,
        khordha_training: Training,
        volunteer_headers: dict,
    ):
        # Act
        registered = client.post(
            f"/api/trainings/{khordha_training.id}/register",
            json={"notes": "Bringing own life jacket"},
            headers=volunteer_headers,
        )
        mine = client.get("/api/my-trainings", headers=volunteer_headers)
        cancelled = client.delete(f"/api/trainings/{khordha_training.id}/register", headers=volunteer_headers)

        # Assert
        assert registered.status_code == 201
        assert registered.json()["volunteer_id"] == str(volunteer_profile.id)
        assert registered.json()["status"] == "pending"
        assert [t["id"] for t in mine.json()] == [str(khordha_training.id)]
        assert cancelled.json() == {"message": "Registration cancelled"}
        assert db_session.query(TrainingRegistration).count() == 0

    def test_register_without_body(
        self,
        client: TestClient,
        volunteer_profile: Volunteer,
        khordha_training: Training,
        volunteer_headers: dict,
    ):
        response = client.post(f"/api/trainings/{khordha_training.id}/register", headers=volunteer_headers)
        assert response.status_code == 201

    def test_register_without_profile(
        self,
        client: TestClient,
        khordha_training: Training,
        volunteer_headers: dict,
    ):
        response = client.post(f"/api/trainings/{khordha_training.id}/register", headers=volunteer_headers)
        assert response.status_code == 400

    def test_register_twice(
        self,
        client: TestClient,
        volunteer_profile: Volunteer,
        khordha_training: Training,
        volunteer_headers: dict,
    ):
        url = f"/api/trainings/{khordha_training.id}/register"
        client.post(url, headers=volunteer_headers)

        assert client.post(url, headers=volunteer_headers).status_code == 400

    def test_register_full(
        self,
        client: TestClient,
        db_session: Session,
        volunteer_profile: Volunteer,
        cuttack_volunteer: Volunteer,
        volunteer_headers: dict,
        second_volunteer_headers: dict,
    ):
        # Arrange
        training = create_training(db_session, capacity=1)
        url = f"/api/trainings/{training.id}/register"
        client.post(url, headers=second_volunteer_headers)

        # Act
        response = client.post(url, headers=volunteer_headers)

        # Assert
        assert response.status_code == 400
        assert response.json()["details"] == {"capacity": 1}

    def test_register_completed_training(
        self,
        client: TestClient,
        db_session: Session,
        volunteer_profile: Volunteer,
        volunteer_headers: dict,
    ):
        training = create_training(db_session, status=TrainingStatus.COMPLETED)

        response = client.post(f"/api/trainings/{training.id}/register", headers=volunteer_headers)

        assert response.status_code == 400

    def test_cancel_when_not_registered(
        self,
        client: TestClient,
        volunteer_profile: Volunteer,
        khordha_training: Training,
        volunteer_headers: dict,
    ):
        response = client.delete(f"/api/trainings/{khordha_training.id}/register", headers=volunteer_headers)
        assert response.status_code == 404


class TestRegistrationListing:

    def test_admin_lists_registrations(
        self,
        client: TestClient,
        volunteer_profile: Volunteer,
        khordha_training: Training,
        volunteer_headers: dict,
        district_admin_headers: dict,
    ):
        # Arrange
        client.post(f"/api/trainings/{khordha_training.id}/register", headers=volunteer_headers)

        # Act
        response = client.get(
            f"/api/trainings/{khordha_training.id}/registrations", headers=district_admin_headers,
        )

        # Assert
        assert response.status_code == 200
        assert [r["volunteer_id"] for r in response.json()] == [str(volunteer_profile.id)]

    def test_statewide_registrations_visible_to_district_admin(
        self,
        client: TestClient,
        statewide_training: Training,
        district_admin_headers: dict,
    ):
        response = client.get(
            f"/api/trainings/{statewide_training.id}/registrations", headers=district_admin_headers,
        )
        assert response.status_code == 200

    def test_other_district_forbidden(
        self,
        client: TestClient,
        khordha_training: Training,
        other_district_admin_headers: dict,
    ):
        response = client.get(
            f"/api/trainings/{khordha_training.id}/registrations", headers=other_district_admin_headers,
        )
        assert response.status_code == 403

    def test_volunteer_forbidden(self, client: TestClient, khordha_training: Training, volunteer_headers: dict):
        response = client.get(f"/api/trainings/{khordha_training.id}/registrations", headers=volunteer_headers)
        assert response.status_code == 403
