"""
Authentication Routes Module
============================

Handles:
- Self-service signup (always a volunteer account)
- Login with account lockout protection
- Logout (session invalidation)
- Current user lookup with role permissions

Sessions are carried in an httponly cookie; the same token is accepted
as a Bearer token by API clients.

Security Features:
- Account lockout handling
- Token version validation
- Rate limiting (middleware)
- Security logging
"""

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from civil_defence.core.config import settings
from civil_defence.core.dependencies.auth import get_current_user
from civil_defence.core.exceptions import (
    AccountDisabledError,
    AccountLockedError,
    EmailAlreadyExistsError,
    InvalidCredentialsError,
    UsernameAlreadyExistsError,
)
from civil_defence.core.logging import get_logger
from civil_defence.core.permissions import get_role_permissions
from civil_defence.db.session import get_db
from civil_defence.models.user import User
from civil_defence.schemas import (
    CurrentUserResponse,
    ErrorResponse,
    LoginRequest,
    LogoutResponse,
    SignupRequest,
)
from civil_defence.services.auth_service import AuthService

# Initialize logger
logger = get_logger(__name__)


# =====================================
# Router Setup
# =====================================

router = APIRouter(
    tags=["Authentication"],
    responses={
        401: {"model": ErrorResponse, "description": "Authentication failed"},
        403: {"model": ErrorResponse, "description": "Access forbidden"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
)


# =====================================
# Helpers
# =====================================

def build_current_user_response(user: User) -> CurrentUserResponse:
    return CurrentUserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        profile_image_url=user.profile_image_url,
        role=user.role,
        district=user.district,
        is_active=user.is_active,
        created_at=user.created_at,
        permissions=get_role_permissions(user.role).to_dict(),
    )


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite=settings.SESSION_COOKIE_SAMESITE,
        path="/",
    )


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


# =====================================
# Signup Endpoint
# =====================================

@router.post(
    "/auth/signup",
    response_model=CurrentUserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Account",
    description="""
    Register a new portal account and start a session.

    New accounts always get the volunteer role. Elevated roles are
    granted through user administration.
    """,
    responses={
        201: {"description": "Account created and logged in"},
        400: {"model": ErrorResponse, "description": "Username or email already taken"},
    },
)
def signup(
    request: Request,
    response: Response,
    signup_data: SignupRequest,
    db: Session = Depends(get_db),
) -> CurrentUserResponse:
    """
    Create a volunteer account and log it in.

    Args:
        request: FastAPI request object
        response: Response used to set the session cookie
        signup_data: Registration details
        db: Database session

    Returns:
        The new user with role permissions
    """
    auth_service = AuthService(db)

    try:
        user = auth_service.register_user(signup_data)
    except (UsernameAlreadyExistsError, EmailAlreadyExistsError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    token = AuthService.create_session_token(user.id, user.token_version)
    _set_session_cookie(response, token)

    logger.info(
        "User signed up",
        extra={"user_id": str(user.id), "district": user.district, "ip_address": _client_ip(request)}
    )
    return build_current_user_response(user)


# =====================================
# Login Endpoint
# =====================================

@router.post(
    "/auth/login",
    response_model=CurrentUserResponse,
    summary="User Login",
    description="""
    Authenticate with username and password.

    Sets the session cookie on success.

    Security features:
    - Account locks after repeated failed attempts
    - Rate limited per IP
    - All attempts are logged
    """,
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        403: {"model": ErrorResponse, "description": "Account locked or disabled"},
        429: {"model": ErrorResponse, "description": "Too many requests"},
    },
)
@router.post("/login", response_model=CurrentUserResponse, include_in_schema=False)
def login(
    request: Request,
    response: Response,
    login_data: LoginRequest,
    db: Session = Depends(get_db),
) -> CurrentUserResponse:
    """
    Authenticate user and start a session.

    Args:
        request: FastAPI request object
        response: Response used to set the session cookie
        login_data: Login credentials
        db: Database session

    Returns:
        The user with role permissions

    Raises:
        HTTPException: On authentication failure
    """
    auth_service = AuthService(db)
    client_ip = _client_ip(request)

    try:
        user, token = auth_service.authenticate_user(
            username=login_data.username,
            password=login_data.password,
            ip_address=client_ip,
        )

    except InvalidCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )

    except AccountLockedError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is locked due to multiple failed login attempts. "
                   "Please contact your administrator.",
        )

    except AccountDisabledError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account has been disabled. Please contact your administrator.",
        )

    _set_session_cookie(response, token)

    logger.info(
        "User logged in successfully",
        extra={
            "user_id": str(user.id),
            "role": user.role,
            "ip_address": client_ip,
        }
    )
    return build_current_user_response(user)


# =====================================
# Logout Endpoint
# =====================================

@router.post(
    "/auth/logout",
    response_model=LogoutResponse,
    summary="User Logout",
    description="""
    End every session of the current user.

    Increments the user's token version, which makes all outstanding
    session tokens invalid, and clears the session cookie.
    """,
    responses={
        200: {"description": "Successfully logged out"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
def logout(
    response: Response,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> LogoutResponse:
    AuthService(db).logout(current_user)
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME, path="/")
    return LogoutResponse()


# =====================================
# Current User Endpoint
# =====================================

@router.get(
    "/auth/me",
    response_model=CurrentUserResponse,
    summary="Get Current User",
    description="Get the authenticated user's profile and role permissions.",
    responses={
        200: {"description": "Current user information"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
@router.get("/auth/user", response_model=CurrentUserResponse, include_in_schema=False)
def get_me(
    current_user: User = Depends(get_current_user),
) -> CurrentUserResponse:
    return build_current_user_response(current_user)
