"""
Report Routes Integration Tests
===============================

Integration tests for dashboard statistics, the MIS summary and
CSV/PDF exports.
"""

from datetime import datetime, UTC

import pytest
from fastapi.testclient import TestClient

from civil_defence.models import Incident, InventoryItem, Volunteer


pytestmark = pytest.mark.integration


class TestDistrictStats:

    def test_district_admin_gets_own_district(
        self,
        client: TestClient,
        volunteer_profile: Volunteer,
        khordha_incident: Incident,
        district_admin_headers: dict,
    ):
        # Act
        response = client.get("/api/district-stats", headers=district_admin_headers)

        # Assert
        assert response.status_code == 200
        stats = response.json()
        assert [s["district"] for s in stats] == ["Khordha"]
        assert stats[0]["volunteers"] == {"total": 1, "approved": 0, "pending": 1}
        assert stats[0]["incidents"]["total"] == 1

    def test_state_admin_single_district(
        self,
        client: TestClient,
        cuttack_incident: Incident,
        state_admin_headers: dict,
    ):
        response = client.get("/api/district-stats?district=Cuttack", headers=state_admin_headers)

        assert [s["district"] for s in response.json()] == ["Cuttack"]

    def test_district_admin_other_district(self, client: TestClient, district_admin_headers: dict):
        response = client.get("/api/district-stats?district=Cuttack", headers=district_admin_headers)
        assert response.status_code == 403

    def test_volunteer_forbidden(self, client: TestClient, volunteer_headers: dict):
        assert client.get("/api/district-stats", headers=volunteer_headers).status_code == 403


class TestSummaryReport:

    def test_state_summary(
        self,
        client: TestClient,
        approved_volunteer: Volunteer,
        cuttack_volunteer: Volunteer,
        khordha_item: InventoryItem,
        state_admin_headers: dict,
    ):
        # Act
        response = client.get("/api/reports/summary", headers=state_admin_headers)

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["district"] is None
        assert data["overview"]["total_volunteers"] == 2
        assert data["overview"]["approved_volunteers"] == 2
        assert data["rates"]["approval_rate"] == 100
        assert data["rates"]["inventory_health"] == 100
        assert data["inventory_by_category"] == {"safety_gear": 1}

    def test_district_summary(
        self,
        client: TestClient,
        approved_volunteer: Volunteer,
        cuttack_volunteer: Volunteer,
        district_admin_headers: dict,
    ):
        data = client.get("/api/reports/summary", headers=district_admin_headers).json()

        assert data["district"] == "Khordha"
        assert data["volunteers_by_district"] == {"Khordha": 1}

    def test_cms_manager_forbidden(self, client: TestClient, cms_headers: dict):
        assert client.get("/api/reports/summary", headers=cms_headers).status_code == 403


class TestExports:

    def test_csv_export(
        self,
        client: TestClient,
        approved_volunteer: Volunteer,
        cuttack_volunteer: Volunteer,
        district_admin_headers: dict,
    ):
        # Act
        response = client.get("/api/reports/export/volunteers?format=csv", headers=district_admin_headers)

        # Assert
        assert response.status_code == 200
        assert response.headers["content-type"] == "text/csv; charset=utf-8"
        stamp = datetime.now(UTC).strftime("%Y%m%d")
        assert response.headers["content-disposition"] == f"attachment; filename=volunteers_{stamp}.csv"
        lines = response.text.splitlines()
        assert lines[0].startswith("Full Name,Email,Phone,District")
        assert len(lines) == 2

    def test_csv_is_default_format(
        self,
        client: TestClient,
        khordha_item: InventoryItem,
        state_admin_headers: dict,
    ):
        response = client.get("/api/reports/export/inventory", headers=state_admin_headers)
        assert response.headers["content-type"].startswith("text/csv")

    def test_pdf_export(
        self,
        client: TestClient,
        khordha_incident: Incident,
        state_admin_headers: dict,
    ):
        response = client.get("/api/reports/export/incidents?format=pdf", headers=state_admin_headers)

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")

    def test_unknown_resource(self, client: TestClient, state_admin_headers: dict):
        assert client.get("/api/reports/export/users", headers=state_admin_headers).status_code == 400

    def test_unknown_format(self, client: TestClient, state_admin_headers: dict):
        response = client.get("/api/reports/export/inventory?format=xlsx", headers=state_admin_headers)
        assert response.status_code == 400

    def test_district_admin_other_district(self, client: TestClient, district_admin_headers: dict):
        response = client.get(
            "/api/reports/export/inventory?district=Cuttack", headers=district_admin_headers,
        )
        assert response.status_code == 403

    @pytest.mark.parametrize("headers_fixture", ["cms_headers", "volunteer_headers"])
    def test_roles_without_export_permission(self, client: TestClient, request, headers_fixture: str):
        headers = request.getfixturevalue(headers_fixture)
        assert client.get("/api/reports/export/inventory", headers=headers).status_code == 403
