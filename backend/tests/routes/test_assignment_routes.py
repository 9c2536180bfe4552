"""
Assignment Routes Integration Tests
===================================

Integration tests for assigning volunteers to incidents and for the
volunteer-side assignment lifecycle.
"""

import uuid
from datetime import datetime, UTC

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from civil_defence.models import Assignment, Incident, User, Volunteer


pytestmark = pytest.mark.integration


def _assign(client: TestClient, headers: dict, volunteer: Volunteer, incident: Incident, **extra):
    payload = {"volunteer_id": str(volunteer.id), "incident_id": str(incident.id), **extra}
    return client.post("/api/assignments", json=payload, headers=headers)


class TestCreateAssignment:

    def test_assign_approved_volunteer(
        self,
        client: TestClient,
        db_session: Session,
        district_admin: User,
        approved_volunteer: Volunteer,
        khordha_incident: Incident,
        district_admin_headers: dict,
    ):
        # Act
        response = _assign(
            client, district_admin_headers, approved_volunteer, khordha_incident,
            role="Boat crew", notes="Report to ward office",
        )

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "assigned"
        assert data["role"] == "Boat crew"
        assert data["assigned_by"] == str(district_admin.id)

        db_session.refresh(khordha_incident)
        assert khordha_incident.status == "assigned"
        assert khordha_incident.assigned_to == [str(approved_volunteer.id)]

    def test_duplicate_assignment_rejected(
        self,
        client: TestClient,
        db_session: Session,
        approved_volunteer: Volunteer,
        khordha_incident: Incident,
        district_admin_headers: dict,
    ):
        # Arrange
        first = _assign(client, district_admin_headers, approved_volunteer, khordha_incident)

        # Act
        second = _assign(client, district_admin_headers, approved_volunteer, khordha_incident, role="Medic")

        # Assert
        assert second.status_code == 400
        assert second.json()["details"]["assignment_id"] == first.json()["id"]
        db_session.refresh(khordha_incident)
        assert khordha_incident.assigned_to == [str(approved_volunteer.id)]
        assert db_session.query(Assignment).count() == 1

    def test_reassign_after_decline(
        self,
        client: TestClient,
        db_session: Session,
        approved_volunteer: Volunteer,
        khordha_incident: Incident,
        district_admin_headers: dict,
        volunteer_headers: dict,
    ):
        # Arrange
        first_id = _assign(client, district_admin_headers, approved_volunteer, khordha_incident).json()["id"]
        client.patch(
            f"/api/assignments/{first_id}/status",
            json={"status": "declined"},
            headers=volunteer_headers,
        )

        # Act
        second = _assign(client, district_admin_headers, approved_volunteer, khordha_incident)

        # Assert
        assert second.status_code == 201
        db_session.refresh(khordha_incident)
        assert khordha_incident.assigned_to == [str(approved_volunteer.id)]
        assert db_session.query(Assignment).count() == 2

    def test_pending_volunteer_rejected(
        self,
        client: TestClient,
        volunteer_profile: Volunteer,
        khordha_incident: Incident,
        district_admin_headers: dict,
    ):
        response = _assign(client, district_admin_headers, volunteer_profile, khordha_incident)

        assert response.status_code == 400
        assert response.json()["details"]["volunteer_status"] == "pending"

    def test_volunteer_in_other_district_forbidden(
        self,
        client: TestClient,
        cuttack_volunteer: Volunteer,
        khordha_incident: Incident,
        district_admin_headers: dict,
    ):
        response = _assign(client, district_admin_headers, cuttack_volunteer, khordha_incident)
        assert response.status_code == 403

    def test_unknown_incident(
        self,
        client: TestClient,
        approved_volunteer: Volunteer,
        state_admin_headers: dict,
    ):
        response = client.post(
            "/api/assignments",
            json={"volunteer_id": str(approved_volunteer.id), "incident_id": str(uuid.uuid4())},
            headers=state_admin_headers,
        )
        assert response.status_code == 404

    def test_volunteer_cannot_assign(
        self,
        client: TestClient,
        approved_volunteer: Volunteer,
        khordha_incident: Incident,
        volunteer_headers: dict,
    ):
        response = _assign(client, volunteer_headers, approved_volunteer, khordha_incident)
        assert response.status_code == 403


class TestListAssignments:

    def test_admin_list_scoped_by_volunteer_district(
        self,
        client: TestClient,
        approved_volunteer: Volunteer,
        cuttack_volunteer: Volunteer,
        khordha_incident: Incident,
        cuttack_incident: Incident,
        state_admin_headers: dict,
        district_admin_headers: dict,
    ):
        # Arrange
        _assign(client, state_admin_headers, approved_volunteer, khordha_incident)
        _assign(client, state_admin_headers, cuttack_volunteer, cuttack_incident)

        # Act
        state_view = client.get("/api/assignments", headers=state_admin_headers).json()
        district_view = client.get("/api/assignments", headers=district_admin_headers).json()

        # Assert
        assert len(state_view) == 2
        assert [a["volunteer_id"] for a in district_view] == [str(approved_volunteer.id)]

    def test_my_assignments(
        self,
        client: TestClient,
        approved_volunteer: Volunteer,
        cuttack_volunteer: Volunteer,
        khordha_incident: Incident,
        cuttack_incident: Incident,
        state_admin_headers: dict,
        volunteer_headers: dict,
    ):
        _assign(client, state_admin_headers, approved_volunteer, khordha_incident)
        _assign(client, state_admin_headers, cuttack_volunteer, cuttack_incident)

        response = client.get("/api/my-assignments", headers=volunteer_headers)

        assert [a["incident_id"] for a in response.json()] == [str(khordha_incident.id)]

    def test_my_assignments_without_profile(self, client: TestClient, volunteer_headers: dict):
        assert client.get("/api/my-assignments", headers=volunteer_headers).json() == []


class TestAssignmentProgress:

    @pytest.fixture
    def assignment_id(
        self,
        client: TestClient,
        approved_volunteer: Volunteer,
        khordha_incident: Incident,
        district_admin_headers: dict,
    ) -> str:
        return _assign(client, district_admin_headers, approved_volunteer, khordha_incident).json()["id"]

    def test_full_lifecycle(self, client: TestClient, assignment_id: str, volunteer_headers: dict):
        # Act
        statuses = []
        for status in ("accepted", "in_progress", "completed"):
            response = client.patch(
                f"/api/assignments/{assignment_id}/status",
                json={"status": status},
                headers=volunteer_headers,
            )
            assert response.status_code == 200
            statuses.append(response.json())

        # Assert
        assert [s["status"] for s in statuses] == ["accepted", "in_progress", "completed"]
        assert statuses[1]["completed_at"] is None
        assert statuses[2]["completed_at"] is not None

    def test_completed_is_terminal(
        self,
        client: TestClient,
        db_session: Session,
        assignment_id: str,
        volunteer_headers: dict,
    ):
        # Arrange
        assignment = db_session.get(Assignment, uuid.UUID(assignment_id))
        assignment.status = "completed"
        assignment.completed_at = datetime(2020, 1, 1, tzinfo=UTC)
        db_session.commit()

        # Act
        response = client.patch(
            f"/api/assignments/{assignment_id}/status",
            json={"status": "completed"},
            headers=volunteer_headers,
        )

        # Assert
        assert response.status_code == 400
        db_session.refresh(assignment)
        assert assignment.completed_at.year == 2020

    def test_decline_with_notes(self, client: TestClient, assignment_id: str, volunteer_headers: dict):
        response = client.patch(
            f"/api/assignments/{assignment_id}/status",
            json={"status": "declined", "notes": "Out of station"},
            headers=volunteer_headers,
        )

        assert response.json()["status"] == "declined"
        assert response.json()["notes"] == "Out of station"

    def test_cannot_skip_acceptance(self, client: TestClient, assignment_id: str, volunteer_headers: dict):
        response = client.patch(
            f"/api/assignments/{assignment_id}/status",
            json={"status": "completed"},
            headers=volunteer_headers,
        )
        assert response.status_code == 400

    def test_only_assigned_volunteer(
        self,
        client: TestClient,
        assignment_id: str,
        second_volunteer_headers: dict,
        district_admin_headers: dict,
    ):
        for headers in (second_volunteer_headers, district_admin_headers):
            response = client.patch(
                f"/api/assignments/{assignment_id}/status",
                json={"status": "accepted"},
                headers=headers,
            )
            assert response.status_code == 403

    def test_unknown_assignment(self, client: TestClient, volunteer_headers: dict):
        response = client.patch(
            f"/api/assignments/{uuid.uuid4()}/status",
            json={"status": "accepted"},
            headers=volunteer_headers,
        )
        assert response.status_code == 404
