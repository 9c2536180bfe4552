"""
District Query Utilities Module
===============================

Provides utilities for district-scoped data visibility.

Features:
- Automatic district filtering for queries
- State-scope roles bypass the filter
- District access validation helpers

Scope rules:
- state: every district
- district: only the user's own district (nothing when unset)
- volunteer: no admin visibility at all

Security:
- Enforces district isolation at the query level
- Logs district scope violations
"""

from typing import Any, Callable, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import false
from sqlalchemy.orm import Query, Session

from civil_defence.core.enums import Scope
from civil_defence.core.exceptions import DistrictScopeError
from civil_defence.core.logging import get_logger, security_logger
from civil_defence.core.permissions import get_scope
from civil_defence.models.user import User

# Initialize logger
logger = get_logger(__name__)

T = TypeVar("T")


class DistrictScope:
    """
    Helper class for district-scoped database queries.

    Usage:
        scope = DistrictScope(db, Volunteer, current_user)
        volunteers = scope.filter_by_district().all()

    For models without their own district column, pass the column to
    scope by and a base query that joins it in:

        DistrictScope(
            db, Assignment, current_user,
            district_column=Volunteer.district,
            base_query=db.query(Assignment).join(Assignment.volunteer),
            district_getter=lambda a: a.volunteer.district,
        )
    """

    def __init__(
        self,
        db: Session,
        model: Type[T],
        current_user: User,
        district_column: Any = None,
        base_query: Optional[Query] = None,
        district_getter: Optional[Callable[[Any], Optional[str]]] = None,
    ):
        """
        Initialize district query helper.

        Args:
            db: Database session
            model: SQLAlchemy model class
            current_user: Current authenticated user
            district_column: Column holding the district (defaults to model.district)
            base_query: Query to filter (defaults to db.query(model))
            district_getter: Reads the district from a loaded instance
        """
        self.db = db
        self.model = model
        self.current_user = current_user
        self.scope = get_scope(current_user.role)
        self.district_column = (
            district_column if district_column is not None else model.district
        )
        self._base_query = base_query if base_query is not None else db.query(model)
        self.district_getter = district_getter

    @property
    def resource_name(self) -> str:
        return getattr(self.model, "__tablename__", self.model.__name__)

    @property
    def is_unassigned(self) -> bool:
        """District admin without a district: lists come back empty."""
        return self.scope == Scope.DISTRICT and not self.current_user.district

    # --------------------------
    # Access checks
    # --------------------------

    def can_access(self, district: Optional[str]) -> bool:
        """
        Check whether the current user may see records of a district.

        Args:
            district: District name

        Returns:
            True if access is allowed
        """
        if self.scope == Scope.STATE:
            return True

        if self.scope == Scope.DISTRICT:
            return bool(self.current_user.district) and district == self.current_user.district

        return False

    def ensure_district_access(self, district: Optional[str]) -> None:
        """
        Raise if the district is outside the user's scope.

        Raises:
            DistrictScopeError: If access is denied
        """
        if not self.can_access(district):
            security_logger.log_district_scope_violation(
                user_id=str(self.current_user.id),
                user_district=self.current_user.district,
                target_district=district,
                resource=self.resource_name,
            )
            raise DistrictScopeError(resource=self.resource_name)

    def effective_district(self, requested: Optional[str] = None) -> Optional[str]:
        """
        Resolve the district a list query should use.

        District admins are pinned to their own district; asking for a
        different one is a scope violation. State-scope users get what
        they asked for (None means all districts).
        """
        if self.scope == Scope.STATE:
            return requested

        # also rejects district admins that have no district set
        self.ensure_district_access(
            requested if requested is not None else self.current_user.district
        )
        return self.current_user.district

    # --------------------------
    # Queries
    # --------------------------

    def filter_by_district(self) -> Query:
        """
        Get query filtered by current user's district.

        Returns:
            Filtered SQLAlchemy query
        """
        if self.scope == Scope.STATE:
            return self._base_query

        if self.scope == Scope.DISTRICT and self.current_user.district:
            return self._base_query.filter(
                self.district_column == self.current_user.district
            )

        return self._base_query.filter(false())

    def filter_by_district_name(self, district: Optional[str]) -> Query:
        """
        Get query filtered by an explicit district.

        Args:
            district: District name, or None for everything in scope

        Raises:
            DistrictScopeError: If the district is outside the user's scope
        """
        if district is None:
            return self.filter_by_district()

        self.ensure_district_access(district)
        return self._base_query.filter(self.district_column == district)

    def get_by_id(self, resource_id: UUID) -> Optional[T]:
        """
        Get a resource by ID with district validation.

        Returns:
            Resource instance or None

        Raises:
            DistrictScopeError: If resource belongs to a different district
        """
        resource = self._base_query.filter(self.model.id == resource_id).first()

        if resource is None:
            return None

        self.ensure_district_access(self._district_of(resource))
        return resource

    def _district_of(self, resource: Any) -> Optional[str]:
        if self.district_getter is not None:
            return self.district_getter(resource)
        return resource.district

