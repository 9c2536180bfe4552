"""
Admin Routes Module
===================

User administration for state-scope admins.

Features:
- User listing with filters and pagination
- Role / district / status changes
- Account unlock

Security:
- All endpoints require a department or state admin
- All changes are audit logged
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from civil_defence.core.dependencies.rbac import require_state_admin
from civil_defence.core.enums import Role
from civil_defence.core.exceptions import UserNotFoundError, ValidationError
from civil_defence.core.logging import audit_logger, get_logger
from civil_defence.db.session import get_db
from civil_defence.models.user import User
from civil_defence.schemas import (
    ErrorResponse,
    MessageResponse,
    UserListResponse,
    UserResponse,
    UserUpdate,
)

# Initialize logger
logger = get_logger(__name__)


# =====================================
# Router Setup
# =====================================

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
)


def _get_user_or_404(db: Session, user_id: UUID) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(identifier=str(user_id))
    return user


# =====================================
# User Management Endpoints
# =====================================

@router.get(
    "/users",
    response_model=UserListResponse,
    summary="List Users",
    description="List portal users with optional filters. Requires a department or state admin.",
)
def list_users(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Users per page"),
    role: Optional[Role] = Query(None, description="Filter by role"),
    district: Optional[str] = Query(None, description="Filter by district"),
    is_active: Optional[bool] = Query(None, description="Filter by active status"),
    current_user: User = Depends(require_state_admin),
    db: Session = Depends(get_db),
) -> UserListResponse:
    """
    List users with pagination and filtering.

    Args:
        page: Page number
        page_size: Users per page
        role: Optional role filter
        district: Optional district filter
        is_active: Optional active status filter
        current_user: Current authenticated user
        db: Database session

    Returns:
        Paginated list of users
    """
    query = db.query(User)

    if role is not None:
        query = query.filter(User.role == role.value)
    if district is not None:
        query = query.filter(User.district == district)
    if is_active is not None:
        query = query.filter(User.is_active.is_(is_active))

    total = query.count()
    offset = (page - 1) * page_size
    users = query.order_by(User.created_at.desc()).offset(offset).limit(page_size).all()

    return UserListResponse(
        users=[UserResponse.model_validate(user) for user in users],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get(
    "/users/{user_id}",
    response_model=UserResponse,
    summary="Get User by ID",
    responses={404: {"model": ErrorResponse, "description": "User not found"}},
)
def get_user(
    user_id: UUID,
    current_user: User = Depends(require_state_admin),
    db: Session = Depends(get_db),
):
    return _get_user_or_404(db, user_id)


@router.patch(
    "/users/{user_id}",
    response_model=UserResponse,
    summary="Update User",
    description="""
    Change a user's email, role, district or active status.

    A district admin must have a district.
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid change"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
def update_user(
    user_id: UUID,
    update_data: UserUpdate,
    current_user: User = Depends(require_state_admin),
    db: Session = Depends(get_db),
):
    """
    Update user information.

    Args:
        user_id: User UUID
        update_data: Update data
        current_user: Current authenticated user
        db: Database session

    Returns:
        Updated user details
    """
    user = _get_user_or_404(db, user_id)

    # Track changes for audit
    changes = {}

    if update_data.email is not None and update_data.email.lower() != user.email:
        new_email = update_data.email.lower()
        existing = db.query(User).filter(User.email == new_email, User.id != user.id).first()
        if existing:
            raise ValidationError(message="Email already in use")
        changes["email"] = {"old": user.email, "new": new_email}
        user.email = new_email

    if update_data.district is not None and update_data.district != user.district:
        changes["district"] = {"old": user.district, "new": update_data.district}
        user.district = update_data.district or None

    if update_data.role is not None and update_data.role.value != user.role:
        changes["role"] = {"old": user.role, "new": update_data.role.value}
        user.role = update_data.role.value

    if user.role == Role.DISTRICT_ADMIN.value and not user.district:
        db.rollback()
        raise ValidationError(
            message="District admins must be assigned a district",
            details={"field": "district"},
        )

    if update_data.is_active is not None and update_data.is_active != user.is_active:
        changes["is_active"] = {"old": user.is_active, "new": update_data.is_active}
        user.is_active = update_data.is_active

    db.commit()
    db.refresh(user)

    if changes:
        audit_logger.log_user_modified(
            actor_id=str(current_user.id),
            target_user_id=str(user.id),
            changes=changes,
        )

    logger.info(
        "User updated by admin",
        extra={
            "admin_id": str(current_user.id),
            "target_user_id": str(user.id),
            "changed_fields": sorted(changes),
        }
    )
    return user


@router.post(
    "/users/{user_id}/unlock",
    response_model=MessageResponse,
    summary="Unlock User Account",
    responses={404: {"model": ErrorResponse, "description": "User not found"}},
)
def unlock_user(
    user_id: UUID,
    current_user: User = Depends(require_state_admin),
    db: Session = Depends(get_db),
) -> MessageResponse:
    user = _get_user_or_404(db, user_id)

    if not user.is_locked:
        return MessageResponse(message="Account is not locked")

    user.unlock_account()
    db.commit()

    audit_logger.log_user_modified(
        actor_id=str(current_user.id),
        target_user_id=str(user.id),
        changes={"is_locked": {"old": True, "new": False}},
    )
    return MessageResponse(message="Account unlocked successfully")
