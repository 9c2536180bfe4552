"""
Centralized Exception Handling Module
=====================================

Defines custom exception classes for the application.

Every exception carries an HTTP status code and a details dict; the
application-level handler renders them as ``{"message", "details"}``.

Usage:
    raise InvalidCredentialsError()
    raise DistrictScopeError(resource="volunteers")
    raise TrainingFullError(capacity=30)
"""

from typing import Any, Dict, Optional

from fastapi import status


class CivilDefenceException(Exception):
    """
    Base exception class for the application.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# ==========================
# Authentication Exceptions
# ==========================

class AuthenticationError(CivilDefenceException):
    """Raised when authentication fails."""

    def __init__(
        self,
        message: str = "Not authenticated",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details,
        )


class InvalidCredentialsError(AuthenticationError):
    """Raised when login credentials are invalid."""

    def __init__(self):
        super().__init__(message="Invalid username or password")


class SessionExpiredError(AuthenticationError):
    """Raised when a session token has expired."""

    def __init__(self):
        super().__init__(message="Session has expired. Please log in again.")


class SessionInvalidError(AuthenticationError):
    """Raised when a session token is malformed, forged or revoked."""

    def __init__(self, reason: str = "Invalid session"):
        super().__init__(
            message="Invalid session",
            details={"reason": reason},
        )


# ==========================
# Authorization Exceptions
# ==========================

class AuthorizationError(CivilDefenceException):
    """Raised when user lacks required permissions."""

    def __init__(
        self,
        message: str = "Insufficient permissions",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            details=details,
        )


class RoleNotAuthorizedError(AuthorizationError):
    """Raised when user's role is not authorized for the action."""

    def __init__(self, required_roles: list):
        super().__init__(
            message="Your role is not authorized for this action",
            details={"required_roles": required_roles},
        )


class DistrictScopeError(AuthorizationError):
    """Raised when a record lies outside the caller's district."""

    def __init__(self, resource: str = "resource"):
        super().__init__(
            message="Access denied: record belongs to a different district",
            details={"resource": resource},
        )


class AssignmentOwnershipError(AuthorizationError):
    """Raised when a volunteer touches an assignment that is not theirs."""

    def __init__(self):
        super().__init__(message="You can only update your own assignments")


class AccountLockedError(AuthorizationError):
    """Raised when account is locked due to failed attempts."""

    def __init__(self):
        super().__init__(
            message="Account is locked due to multiple failed login attempts. "
                    "Please contact your administrator."
        )


class AccountDisabledError(AuthorizationError):
    """Raised when account is disabled."""

    def __init__(self):
        super().__init__(
            message="Account has been disabled. Please contact your administrator."
        )


# ==========================
# Resource Exceptions
# ==========================

class NotFoundError(CivilDefenceException):
    """Raised when a resource is not found."""

    def __init__(self, resource: str = "Resource", identifier: Optional[str] = None):
        message = f"{resource} not found"
        details = {"resource": resource}
        if identifier:
            details["identifier"] = identifier
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
        )


class UserNotFoundError(NotFoundError):
    def __init__(self, identifier: Optional[str] = None):
        super().__init__(resource="User", identifier=identifier)


class VolunteerNotFoundError(NotFoundError):
    def __init__(self, identifier: Optional[str] = None):
        super().__init__(resource="Volunteer", identifier=identifier)


class IncidentNotFoundError(NotFoundError):
    def __init__(self, identifier: Optional[str] = None):
        super().__init__(resource="Incident", identifier=identifier)


class InventoryItemNotFoundError(NotFoundError):
    def __init__(self, identifier: Optional[str] = None):
        super().__init__(resource="Inventory item", identifier=identifier)


class TrainingNotFoundError(NotFoundError):
    def __init__(self, identifier: Optional[str] = None):
        super().__init__(resource="Training", identifier=identifier)


class RegistrationNotFoundError(NotFoundError):
    def __init__(self, identifier: Optional[str] = None):
        super().__init__(resource="Training registration", identifier=identifier)


class AssignmentNotFoundError(NotFoundError):
    def __init__(self, identifier: Optional[str] = None):
        super().__init__(resource="Assignment", identifier=identifier)


# ==========================
# Validation Exceptions
# ==========================

class ValidationError(CivilDefenceException):
    """Raised when validation fails."""

    def __init__(
        self,
        message: str = "Validation error",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
        )


class UsernameAlreadyExistsError(ValidationError):
    def __init__(self):
        super().__init__(message="Username already exists")


class EmailAlreadyExistsError(ValidationError):
    def __init__(self):
        super().__init__(message="An account with this email already exists")


class InvalidStatusTransitionError(ValidationError):
    """Raised when a status change is not allowed from the current status."""

    def __init__(self, resource: str, current_status: str, new_status: str):
        super().__init__(
            message=f"Cannot move {resource} from {current_status} to {new_status}",
            details={
                "resource": resource,
                "current_status": current_status,
                "requested_status": new_status,
            },
        )


class VolunteerProfileExistsError(ValidationError):
    def __init__(self):
        super().__init__(message="A volunteer profile already exists for this account")


class VolunteerProfileRequiredError(ValidationError):
    def __init__(self):
        super().__init__(message="Volunteer profile not found. Please register as a volunteer first.")


class VolunteerNotApprovedError(ValidationError):
    def __init__(self, current_status: str):
        super().__init__(
            message="Only approved volunteers can be assigned to incidents",
            details={"volunteer_status": current_status},
        )


class DuplicateRegistrationError(ValidationError):
    def __init__(self):
        super().__init__(message="Already registered for this training")


class DuplicateAssignmentError(ValidationError):
    def __init__(self, assignment_id: str):
        super().__init__(
            message="Volunteer is already assigned to this incident",
            details={"assignment_id": assignment_id},
        )


class TrainingFullError(ValidationError):
    def __init__(self, capacity: int):
        super().__init__(
            message="Training is full",
            details={"capacity": capacity},
        )


class TrainingClosedError(ValidationError):
    def __init__(self, training_status: str):
        super().__init__(
            message="Registration is closed for this training",
            details={"training_status": training_status},
        )


class DuplicateContentKeyError(ValidationError):
    def __init__(self, resource: str, key: str):
        super().__init__(
            message=f"{resource} with this key already exists",
            details={"resource": resource, "key": key},
        )


# ==========================
# Rate Limiting Exceptions
# ==========================

class RateLimitError(CivilDefenceException):
    """Raised when rate limit is exceeded."""

    def __init__(self, retry_after: int = 60):
        super().__init__(
            message="Too many requests. Please try again later.",
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            details={"retry_after_seconds": retry_after},
        )
