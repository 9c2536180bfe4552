"""
Assignment Routes Module
========================

Volunteer-to-incident assignments. Admins create them; the assigned
volunteer accepts, works and completes them.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from civil_defence.core.dependencies.auth import get_current_user
from civil_defence.core.dependencies.rbac import require_admin
from civil_defence.db.session import get_db
from civil_defence.models.user import User
from civil_defence.schemas import (
    AssignmentCreate,
    AssignmentResponse,
    AssignmentStatusUpdate,
    ErrorResponse,
)
from civil_defence.services.assignment_service import AssignmentService


router = APIRouter(
    tags=["Assignments"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
    },
)


@router.get(
    "/assignments",
    response_model=List[AssignmentResponse],
    summary="List Assignments",
    description="District admins only see assignments of volunteers in their district.",
)
def list_assignments(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return AssignmentService(db).list_assignments(current_user)


@router.post(
    "/assignments",
    response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Assign Volunteer",
    responses={
        400: {"model": ErrorResponse, "description": "Volunteer not approved"},
        404: {"model": ErrorResponse, "description": "Volunteer or incident not found"},
    },
)
def create_assignment(
    data: AssignmentCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return AssignmentService(db).create_assignment(current_user, data)


@router.get(
    "/my-assignments",
    response_model=List[AssignmentResponse],
    summary="My Assignments",
)
def list_my_assignments(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return AssignmentService(db).list_for_user(current_user)


@router.patch(
    "/assignments/{assignment_id}/status",
    response_model=AssignmentResponse,
    summary="Update Assignment Status",
    description="""
    Progress an assignment. Only the assigned volunteer may do this.

    Allowed transitions:
    - assigned -> accepted | declined
    - accepted -> in_progress | declined
    - in_progress -> completed
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Transition not allowed"},
        404: {"model": ErrorResponse, "description": "Assignment not found"},
    },
)
def update_assignment_status(
    assignment_id: UUID,
    data: AssignmentStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return AssignmentService(db).update_status(current_user, assignment_id, data)
