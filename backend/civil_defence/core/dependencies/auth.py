"""
Authentication Dependencies Module
==================================

FastAPI dependencies for authentication and user extraction.

Features:
- Session token read from the httponly session cookie
- ``Authorization: Bearer`` fallback for API clients
- Account status verification
- Log context binding (user id, district)

Usage:
    @router.get("/protected")
    def protected_route(user: User = Depends(get_current_user)):
        return {"user": user.username}
"""

from typing import Optional

from fastapi import Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from civil_defence.core.config import settings
from civil_defence.core.exceptions import (
    AccountDisabledError,
    AccountLockedError,
    SessionExpiredError,
    SessionInvalidError,
)
from civil_defence.core.logging import (
    district_context,
    get_logger,
    security_logger,
    user_id_context,
)
from civil_defence.db.session import get_db
from civil_defence.models.user import User
from civil_defence.services.auth_service import AuthService

# Initialize logger
logger = get_logger(__name__)


# =====================================
# Token Extraction
# =====================================

bearer_scheme = OAuth2PasswordBearer(
    tokenUrl="/api/auth/login",
    auto_error=False,
    description="Session token, normally carried in the session cookie",
)


def get_session_token(
    request: Request,
    bearer_token: Optional[str] = Depends(bearer_scheme),
) -> Optional[str]:
    """
    Return the session token from the cookie, or the Bearer header.

    Args:
        request: FastAPI request object
        bearer_token: Token from the Authorization header, if any

    Returns:
        Token string or None
    """
    return request.cookies.get(settings.SESSION_COOKIE_NAME) or bearer_token


def _bind_request_user(request: Request, user: User) -> None:
    request.state.user_id = str(user.id)
    request.state.district = user.district
    user_id_context.set(str(user.id))
    district_context.set(user.district)


# =====================================
# Get Current User
# =====================================

def get_current_user(
    request: Request,
    token: Optional[str] = Depends(get_session_token),
    db: Session = Depends(get_db),
) -> User:
    """
    Validate the session and return current user from database.

    Security checks performed:
    - Token signature, issuer and audience validation
    - Token expiration check
    - Token version validation (logout revocation)
    - Account status check (locked/disabled)

    Args:
        request: FastAPI request object
        token: Session token from cookie or Authorization header
        db: Database session

    Returns:
        User model instance

    Raises:
        HTTPException: 401 if not authenticated, 403 if account blocked
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    auth_service = AuthService(db)

    try:
        user = auth_service.validate_session_token(token)

    except SessionExpiredError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session has expired. Please log in again.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    except SessionInvalidError as e:
        security_logger.log_session_invalid(
            reason=e.details.get("reason", "unknown"),
            ip_address=request.client.host if request.client else "unknown",
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate session",
            headers={"WWW-Authenticate": "Bearer"},
        )

    except AccountLockedError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is locked. Please contact your administrator.",
        )

    except AccountDisabledError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account has been disabled. Please contact your administrator.",
        )

    _bind_request_user(request, user)
    return user
