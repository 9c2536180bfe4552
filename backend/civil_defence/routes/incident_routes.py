"""
Incident Routes Module
======================

Incident reporting and management.

Reporting is open to every logged-in user; listing, updating and
closing incidents is for admins within their district scope.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from civil_defence.core.dependencies.auth import get_current_user
from civil_defence.core.dependencies.rbac import require_admin
from civil_defence.core.enums import IncidentSeverity, IncidentStatus
from civil_defence.db.session import get_db
from civil_defence.models.user import User
from civil_defence.schemas import (
    ErrorResponse,
    IncidentCreate,
    IncidentResponse,
    IncidentStatusUpdate,
    IncidentUpdate,
    MessageResponse,
)
from civil_defence.services.incident_service import IncidentService


# =====================================
# Router Setup
# =====================================

router = APIRouter(
    tags=["Incidents"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
    },
)


@router.post(
    "/incidents",
    response_model=IncidentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Report Incident",
)
def report_incident(
    data: IncidentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return IncidentService(db).report(current_user, data)


@router.get(
    "/incidents",
    response_model=List[IncidentResponse],
    summary="List Incidents",
    description="List incidents in the caller's district scope, newest first.",
)
def list_incidents(
    status_filter: Optional[IncidentStatus] = Query(default=None, alias="status"),
    severity: Optional[IncidentSeverity] = Query(default=None),
    district: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None, max_length=100),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return IncidentService(db).list_incidents(
        current_user,
        status=status_filter,
        severity=severity,
        district=district,
        search=search,
    )


@router.get(
    "/my-incidents",
    response_model=List[IncidentResponse],
    summary="My Incidents",
    description="Incidents the caller reported or is assigned to.",
)
def list_my_incidents(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return IncidentService(db).list_for_user(current_user)


@router.get(
    "/incidents/{incident_id}",
    response_model=IncidentResponse,
    summary="Get Incident",
    responses={404: {"model": ErrorResponse, "description": "Incident not found"}},
)
def get_incident(
    incident_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return IncidentService(db).get_incident(current_user, incident_id)


@router.patch(
    "/incidents/{incident_id}",
    response_model=IncidentResponse,
    summary="Update Incident",
    responses={404: {"model": ErrorResponse, "description": "Incident not found"}},
)
def update_incident(
    incident_id: UUID,
    data: IncidentUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return IncidentService(db).update_incident(current_user, incident_id, data)


@router.patch(
    "/incidents/{incident_id}/status",
    response_model=IncidentResponse,
    summary="Update Incident Status",
    description="""
    Move an incident through its lifecycle.

    Allowed transitions:
    - reported -> assigned | in_progress | closed
    - assigned -> in_progress | reported | closed
    - in_progress -> resolved | assigned
    - resolved -> closed | in_progress
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Transition not allowed"},
        404: {"model": ErrorResponse, "description": "Incident not found"},
    },
)
def update_incident_status(
    incident_id: UUID,
    data: IncidentStatusUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return IncidentService(db).update_status(current_user, incident_id, data)


@router.delete(
    "/incidents/{incident_id}",
    response_model=MessageResponse,
    summary="Delete Incident",
    responses={404: {"model": ErrorResponse, "description": "Incident not found"}},
)
def delete_incident(
    incident_id: UUID,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    IncidentService(db).delete_incident(current_user, incident_id)
    return MessageResponse(message="Incident deleted")
