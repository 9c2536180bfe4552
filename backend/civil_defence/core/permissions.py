"""
Role Permissions Module
=======================

Static permission table shared by the API and the portal.

The portal renders navigation from ``GET /api/auth/me``, which embeds
the caller's permissions; the route dependencies enforce the same
table on the server side.
"""

from dataclasses import asdict, dataclass
from typing import Optional, Union

from civil_defence.core.enums import Role, Scope


@dataclass(frozen=True)
class RolePermissions:
    can_approve_volunteers: bool = False
    can_manage_incidents: bool = False
    can_manage_inventory: bool = False
    can_view_reports: bool = False
    can_export_data: bool = False
    can_view_all_districts: bool = False
    can_manage_users: bool = False
    can_manage_cms: bool = False
    scope: Scope = Scope.VOLUNTEER

    def to_dict(self) -> dict:
        data = asdict(self)
        data["scope"] = self.scope.value
        return data


_ADMIN = dict(
    can_approve_volunteers=True,
    can_manage_incidents=True,
    can_manage_inventory=True,
    can_view_reports=True,
    can_export_data=True,
)

_STATE_ADMIN = RolePermissions(
    **_ADMIN,
    can_view_all_districts=True,
    can_manage_users=True,
    can_manage_cms=True,
    scope=Scope.STATE,
)

ROLE_PERMISSIONS: dict[Role, RolePermissions] = {
    Role.VOLUNTEER: RolePermissions(),
    Role.DISTRICT_ADMIN: RolePermissions(**_ADMIN, scope=Scope.DISTRICT),
    Role.DEPARTMENT_ADMIN: _STATE_ADMIN,
    Role.STATE_ADMIN: _STATE_ADMIN,
    Role.CMS_MANAGER: RolePermissions(can_manage_cms=True, scope=Scope.STATE),
}


def get_role_permissions(role: Optional[Union[Role, str]]) -> RolePermissions:
    """
    Look up the permission set for a role.

    Unknown or missing roles get the volunteer permissions, which
    grant nothing.
    """
    try:
        return ROLE_PERMISSIONS[Role(role)]
    except ValueError:
        return ROLE_PERMISSIONS[Role.VOLUNTEER]


def get_scope(role: Optional[Union[Role, str]]) -> Scope:
    return get_role_permissions(role).scope


def has_state_scope(role: Optional[Union[Role, str]]) -> bool:
    return get_scope(role) == Scope.STATE
