"""
Report Service Unit Tests
=========================

Tests for dashboard aggregates:
- Per-district statistics
- Statewide trainings counted in every district
- MIS summary totals and rates
- District scoping of both
"""

import pytest
from sqlalchemy.orm import Session

from civil_defence.core.enums import (
    IncidentSeverity,
    IncidentStatus,
    Role,
    TrainingStatus,
    VolunteerStatus,
)
from civil_defence.core.exceptions import DistrictScopeError
from civil_defence.models import User
from civil_defence.services.report_service import (
    generate_district_stats,
    generate_summary_report,
)

from conftest import (
    create_incident,
    create_item,
    create_training,
    create_user,
    create_volunteer,
)


pytestmark = pytest.mark.unit


@pytest.fixture
def populated(db_session: Session, volunteer_user: User) -> None:
    """Two districts worth of volunteers, incidents, inventory and trainings."""
    statuses = [VolunteerStatus.APPROVED, VolunteerStatus.APPROVED, VolunteerStatus.PENDING, VolunteerStatus.REJECTED]
    for index, status in enumerate(statuses):
        user = create_user(db_session, f"khordha_v{index}", Role.VOLUNTEER, "Khordha")
        create_volunteer(db_session, user, "Khordha", status=status)
    cuttack_user = create_user(db_session, "cuttack_v", Role.VOLUNTEER, "Cuttack")
    create_volunteer(db_session, cuttack_user, "Cuttack", status=VolunteerStatus.PENDING)

    create_incident(db_session, volunteer_user, "Khordha", severity=IncidentSeverity.CRITICAL)
    create_incident(db_session, volunteer_user, "Khordha", status=IncidentStatus.IN_PROGRESS)
    create_incident(db_session, volunteer_user, "Khordha", status=IncidentStatus.RESOLVED)
    create_incident(db_session, volunteer_user, "Khordha", status=IncidentStatus.CLOSED)
    create_incident(db_session, volunteer_user, "Cuttack", severity=IncidentSeverity.CRITICAL)

    create_item(db_session, "Khordha", quantity=50)
    create_item(db_session, "Khordha", quantity=3)
    create_item(db_session, "Khordha", quantity=10)
    create_item(db_session, "Cuttack", quantity=0)

    create_training(db_session, "Khordha")
    create_training(db_session, "Khordha", status=TrainingStatus.COMPLETED)
    create_training(db_session, "Cuttack")
    create_training(db_session, "Bhubaneswar", is_statewide=True)


class TestDistrictStats:

    def test_state_admin_gets_every_district(self, db_session: Session, state_admin: User, populated):
        # Act
        stats = generate_district_stats(db_session, state_admin)

        # Assert
        names = [s.district for s in stats]
        assert "Khordha" in names and "Cuttack" in names and "Puri" in names
        by_name = {s.district: s for s in stats}
        khordha = by_name["Khordha"]
        assert (khordha.volunteers.total, khordha.volunteers.approved, khordha.volunteers.pending) == (4, 2, 1)
        assert (khordha.incidents.total, khordha.incidents.active, khordha.incidents.critical) == (4, 2, 1)

    def test_statewide_training_counts_everywhere(self, db_session: Session, state_admin: User, populated):
        by_name = {s.district: s for s in generate_district_stats(db_session, state_admin)}

        assert (by_name["Khordha"].trainings.total, by_name["Khordha"].trainings.upcoming) == (3, 2)
        assert (by_name["Cuttack"].trainings.total, by_name["Cuttack"].trainings.upcoming) == (2, 2)
        assert (by_name["Puri"].trainings.total, by_name["Puri"].trainings.upcoming) == (1, 1)

    def test_state_admin_single_district(self, db_session: Session, state_admin: User, populated):
        stats = generate_district_stats(db_session, state_admin, "Cuttack")

        assert len(stats) == 1
        assert stats[0].volunteers.pending == 1

    def test_district_admin_gets_own_district(self, db_session: Session, district_admin: User, populated):
        stats = generate_district_stats(db_session, district_admin)

        assert [s.district for s in stats] == ["Khordha"]

    def test_district_admin_other_district_denied(self, db_session: Session, district_admin: User, populated):
        with pytest.raises(DistrictScopeError):
            generate_district_stats(db_session, district_admin, "Cuttack")


class TestSummaryReport:

    def test_statewide_totals(self, db_session: Session, state_admin: User, populated):
        # Act
        report = generate_summary_report(db_session, state_admin)

        # Assert
        overview = report.overview
        assert report.district is None
        assert overview.total_volunteers == 5
        assert overview.approved_volunteers == 2
        assert overview.pending_volunteers == 2
        assert overview.total_incidents == 5
        assert overview.active_incidents == 3
        assert overview.resolved_incidents == 2
        assert overview.total_inventory_items == 4
        assert overview.low_stock_items == 2
        assert report.volunteers_by_district == {"Khordha": 4, "Cuttack": 1}
        assert report.incidents_by_severity["critical"] == 2

    def test_rates(self, db_session: Session, state_admin: User, populated):
        rates = generate_summary_report(db_session, state_admin).rates

        assert rates.approval_rate == 40
        assert rates.resolution_rate == 40
        assert rates.inventory_health == 50

    def test_district_admin_report_is_scoped(self, db_session: Session, district_admin: User, populated):
        report = generate_summary_report(db_session, district_admin)

        assert report.district == "Khordha"
        assert report.overview.total_volunteers == 4
        assert report.overview.low_stock_items == 1
        assert report.volunteers_by_district == {"Khordha": 4}

    def test_empty_database_rates_are_zero(self, db_session: Session, state_admin: User):
        report = generate_summary_report(db_session, state_admin)

        assert report.overview.total_volunteers == 0
        assert report.rates.approval_rate == 0
        assert report.rates.resolution_rate == 0
        assert report.rates.inventory_health == 0

    def test_half_percent_rounds_up(self, db_session: Session, state_admin: User):
        """Test that 1 approved out of 8 volunteers reports 13, not 12."""
        # Arrange
        for index in range(8):
            user = create_user(db_session, f"rounding{index}", Role.VOLUNTEER)
            status = VolunteerStatus.APPROVED if index == 0 else VolunteerStatus.PENDING
            create_volunteer(db_session, user, status=status)

        # Act
        rates = generate_summary_report(db_session, state_admin).rates

        # Assert
        assert rates.approval_rate == 13
