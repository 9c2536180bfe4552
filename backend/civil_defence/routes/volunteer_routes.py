"""
Volunteer Routes Module
=======================

Volunteer registration and review.

Features:
- Any logged-in user may register one volunteer profile
- Admins list and review volunteers in their district scope
- Owners can always read their own profile

Security:
- Review actions require an admin role
- District isolation is enforced in VolunteerService
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from civil_defence.core.dependencies.auth import get_current_user
from civil_defence.core.dependencies.rbac import require_admin
from civil_defence.core.enums import VolunteerStatus
from civil_defence.core.exceptions import VolunteerNotFoundError
from civil_defence.db.session import get_db
from civil_defence.models.user import User
from civil_defence.schemas import (
    ErrorResponse,
    VolunteerCreate,
    VolunteerResponse,
    VolunteerStatusUpdate,
)
from civil_defence.services.volunteer_service import VolunteerService


# =====================================
# Router Setup
# =====================================

router = APIRouter(
    tags=["Volunteers"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
    },
)


@router.post(
    "/volunteers",
    response_model=VolunteerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register As Volunteer",
    description="Submit the caller's volunteer registration. Each account may register once.",
    responses={
        201: {"description": "Registration submitted for review"},
        400: {"model": ErrorResponse, "description": "Invalid data or profile already exists"},
    },
)
def register_volunteer(
    data: VolunteerCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return VolunteerService(db).register(current_user, data)


@router.get(
    "/volunteers",
    response_model=List[VolunteerResponse],
    summary="List Volunteers",
    description="""
    List volunteers visible to the caller.

    District admins only see their own district; state-scope admins see
    all districts and may filter by one.
    """,
)
def list_volunteers(
    status_filter: Optional[VolunteerStatus] = Query(default=None, alias="status"),
    district: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None, max_length=100),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    List volunteers with optional filters.

    Args:
        status_filter: Only volunteers in this review status
        district: Only this district (must be in scope)
        search: Case-insensitive match on name, email, phone or district
        current_user: Admin making the request
        db: Database session
    """
    return VolunteerService(db).list_volunteers(
        current_user,
        status=status_filter,
        district=district,
        search=search,
    )


@router.get(
    "/my-volunteer-profile",
    response_model=VolunteerResponse,
    summary="Get My Volunteer Profile",
    responses={404: {"model": ErrorResponse, "description": "No volunteer profile"}},
)
def get_my_volunteer_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    volunteer = VolunteerService(db).get_for_user(current_user)
    if volunteer is None:
        raise VolunteerNotFoundError()
    return volunteer


@router.get(
    "/volunteers/{volunteer_id}",
    response_model=VolunteerResponse,
    summary="Get Volunteer",
    responses={404: {"model": ErrorResponse, "description": "Volunteer not found"}},
)
def get_volunteer(
    volunteer_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return VolunteerService(db).get_volunteer(current_user, volunteer_id)


@router.patch(
    "/volunteers/{volunteer_id}/status",
    response_model=VolunteerResponse,
    summary="Review Volunteer",
    description="""
    Approve, reject or reopen a volunteer registration.

    Allowed transitions:
    - pending -> approved | rejected
    - approved -> rejected
    - rejected -> pending | approved
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Transition not allowed"},
        404: {"model": ErrorResponse, "description": "Volunteer not found"},
    },
)
def update_volunteer_status(
    volunteer_id: UUID,
    data: VolunteerStatusUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return VolunteerService(db).update_status(current_user, volunteer_id, data)
