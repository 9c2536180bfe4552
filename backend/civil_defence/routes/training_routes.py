"""
Training Routes Module
======================

Training programmes and volunteer registration.

Features:
- Any logged-in user can browse trainings
- Volunteers register and unregister themselves
- Admins manage trainings in their district; statewide trainings are
  managed by state-scope admins only
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from civil_defence.core.dependencies.auth import get_current_user
from civil_defence.core.dependencies.rbac import require_admin
from civil_defence.db.session import get_db
from civil_defence.models.user import User
from civil_defence.schemas import (
    ErrorResponse,
    MessageResponse,
    RegistrationCreate,
    RegistrationResponse,
    TrainingCreate,
    TrainingResponse,
    TrainingUpdate,
)
from civil_defence.services.training_service import TrainingService


# =====================================
# Router Setup
# =====================================

router = APIRouter(
    tags=["Trainings"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
    },
)


# =====================================
# Browsing
# =====================================

@router.get(
    "/trainings",
    response_model=List[TrainingResponse],
    summary="List Trainings",
    description="""
    List trainings, newest start first.

    A district filter returns that district's trainings plus statewide
    ones. District admins always see their own district.
    """,
)
def list_trainings(
    district: Optional[str] = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return TrainingService(db).list_trainings(current_user, district=district)


@router.get(
    "/my-trainings",
    response_model=List[TrainingResponse],
    summary="My Trainings",
    description="Trainings the caller's volunteer profile is registered for.",
)
def list_my_trainings(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return TrainingService(db).list_for_user(current_user)


@router.get(
    "/trainings/{training_id}",
    response_model=TrainingResponse,
    summary="Get Training",
    responses={404: {"model": ErrorResponse, "description": "Training not found"}},
)
def get_training(
    training_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return TrainingService(db).get_training(training_id)


# =====================================
# Admin Management
# =====================================

@router.post(
    "/trainings",
    response_model=TrainingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Training",
)
def create_training(
    data: TrainingCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return TrainingService(db).create_training(current_user, data)


@router.patch(
    "/trainings/{training_id}",
    response_model=TrainingResponse,
    summary="Update Training",
    responses={404: {"model": ErrorResponse, "description": "Training not found"}},
)
def update_training(
    training_id: UUID,
    data: TrainingUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return TrainingService(db).update_training(current_user, training_id, data)


@router.delete(
    "/trainings/{training_id}",
    response_model=MessageResponse,
    summary="Delete Training",
    description="Delete a training together with its registrations.",
    responses={404: {"model": ErrorResponse, "description": "Training not found"}},
)
def delete_training(
    training_id: UUID,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    TrainingService(db).delete_training(current_user, training_id)
    return MessageResponse(message="Training deleted")


@router.get(
    "/trainings/{training_id}/registrations",
    response_model=List[RegistrationResponse],
    summary="List Registrations",
    responses={404: {"model": ErrorResponse, "description": "Training not found"}},
)
def list_registrations(
    training_id: UUID,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return TrainingService(db).list_registrations(current_user, training_id)


# =====================================
# Registration
# =====================================

@router.post(
    "/trainings/{training_id}/register",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register For Training",
    responses={
        400: {
            "model": ErrorResponse,
            "description": "No volunteer profile, already registered, closed or full",
        },
        404: {"model": ErrorResponse, "description": "Training not found"},
    },
)
def register_for_training(
    training_id: UUID,
    data: Optional[RegistrationCreate] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Register the caller for a training.

    Args:
        training_id: Training to join
        data: Optional registration notes
        current_user: Caller, who must have a volunteer profile
        db: Database session
    """
    return TrainingService(db).register(current_user, training_id, data or RegistrationCreate())


@router.delete(
    "/trainings/{training_id}/register",
    response_model=MessageResponse,
    summary="Unregister From Training",
    responses={404: {"model": ErrorResponse, "description": "Not registered"}},
)
def unregister_from_training(
    training_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    TrainingService(db).unregister(current_user, training_id)
    return MessageResponse(message="Registration cancelled")
