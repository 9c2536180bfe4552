"""
Role-Based Access Control (RBAC) Dependencies Module
=====================================================

FastAPI dependencies for role-based authorization.

Features:
- Strict role enforcement
- Multiple role support
- Permission-table backed checks
- Audit logging for unauthorized access

Usage:
    @router.get("/admin-only")
    def admin_route(user: User = Depends(require_admin)):
        return {"message": "Admin access granted"}
"""

from typing import Callable

from fastapi import Depends, HTTPException, status, Request

from civil_defence.core.dependencies.auth import get_current_user
from civil_defence.core.enums import Role
from civil_defence.core.logging import get_logger, security_logger
from civil_defence.core.permissions import RolePermissions, get_role_permissions
from civil_defence.models.user import User

# Initialize logger
logger = get_logger(__name__)


# =====================================
# Role Groups
# =====================================

ADMIN_ROLES: tuple[Role, ...] = (
    Role.DISTRICT_ADMIN,
    Role.DEPARTMENT_ADMIN,
    Role.STATE_ADMIN,
)

STATE_ADMIN_ROLES: tuple[Role, ...] = (
    Role.DEPARTMENT_ADMIN,
    Role.STATE_ADMIN,
)

CMS_ROLES: tuple[Role, ...] = (
    Role.CMS_MANAGER,
    Role.DEPARTMENT_ADMIN,
    Role.STATE_ADMIN,
)


def _deny(request: Request, current_user: User, detail: str) -> HTTPException:
    security_logger.log_unauthorized_access(
        user_id=str(current_user.id),
        role=current_user.role,
        resource=request.url.path,
        action=request.method,
    )
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


# =====================================
# Role Requirement Dependencies
# =====================================

def require_role(*allowed_roles: Role) -> Callable:
    """
    Create a dependency that requires specific roles.

    Args:
        *allowed_roles: Roles that are allowed access

    Returns:
        Dependency function

    Usage:
        @router.get("/cms-only")
        def cms_route(user: User = Depends(require_role(Role.CMS_MANAGER))):
            ...
    """
    allowed_values = {r.value for r in allowed_roles}

    async def role_checker(
        request: Request,
        current_user: User = Depends(get_current_user),
    ) -> User:
        if current_user.role not in allowed_values:
            logger.warning(
                "Role-based access denied",
                extra={
                    "user_role": current_user.role,
                    "required_roles": sorted(allowed_values),
                    "path": request.url.path,
                }
            )
            raise _deny(request, current_user, "Insufficient permissions for this action")

        return current_user

    return role_checker


def require_permission(permission: str) -> Callable:
    """
    Create a dependency that requires a flag from the permission table.

    Args:
        permission: RolePermissions attribute name, e.g. "can_export_data"
    """
    if permission not in RolePermissions.__dataclass_fields__:
        raise ValueError(f"Unknown permission: {permission}")

    async def permission_checker(
        request: Request,
        current_user: User = Depends(get_current_user),
    ) -> User:
        if not getattr(get_role_permissions(current_user.role), permission):
            raise _deny(request, current_user, "Insufficient permissions for this action")
        return current_user

    return permission_checker


# =====================================
# Common Role Gates
# =====================================

# District, department or state admin
require_admin = require_role(*ADMIN_ROLES)

# Department or state admin
require_state_admin = require_role(*STATE_ADMIN_ROLES)

# CMS manager, department or state admin
require_cms_manager = require_role(*CMS_ROLES)

# District, department or state admin with the export flag
require_export = require_permission("can_export_data")
