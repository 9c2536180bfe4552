"""
Authentication Service Module
=============================

Consolidated authentication service handling:
- Password hashing using Argon2
- Session token creation and validation
- Token version tracking for logout
- Account lockout management
- Self-service signup

Security Features:
- Argon2id password hashing (memory-hard, resistant to GPU attacks)
- Signed session tokens carried in an httponly cookie
- Issuer and audience validation
- Token version for revocation support
"""

from datetime import datetime, timedelta, UTC
from typing import Optional, Tuple
from uuid import UUID

from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError, Argon2Error
from jose import jwt, JWTError, ExpiredSignatureError
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from civil_defence.core.config import settings
from civil_defence.core.enums import Role
from civil_defence.core.exceptions import (
    AccountDisabledError,
    AccountLockedError,
    EmailAlreadyExistsError,
    InvalidCredentialsError,
    SessionExpiredError,
    SessionInvalidError,
    UsernameAlreadyExistsError,
)
from civil_defence.core.logging import get_logger, security_logger
from civil_defence.models.user import User
from civil_defence.schemas.auth import SessionTokenPayload, SignupRequest

# Initialize logger
logger = get_logger(__name__)


# ==========================
# Password Hasher Configuration
# ==========================

ph = PasswordHasher(
    time_cost=settings.ARGON2_TIME_COST,
    memory_cost=settings.ARGON2_MEMORY_COST,
    parallelism=settings.ARGON2_PARALLELISM,
    hash_len=32,
    salt_len=16,
)

SESSION_TOKEN_TYPE = "session"


# ==========================
# Auth Service Class
# ==========================

class AuthService:
    """
    Authentication service handling all auth-related operations.

    Usage:
        auth_service = AuthService(db)
        user, token = auth_service.authenticate_user(username, password)
    """

    def __init__(self, db: Session):
        """
        Initialize auth service with database session.

        Args:
            db: SQLAlchemy session
        """
        self.db = db

    # --------------------------
    # Password Utilities
    # --------------------------

    @staticmethod
    def hash_password(password: str) -> str:
        """
        Hash a password using Argon2id.

        Args:
            password: Plain text password

        Returns:
            Hashed password string
        """
        return ph.hash(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        Args:
            plain_password: Password to verify
            hashed_password: Stored hash from database

        Returns:
            True if password matches, False otherwise
        """
        try:
            ph.verify(hashed_password, plain_password)
            return True
        except VerifyMismatchError:
            return False
        except Argon2Error as e:
            logger.warning(
                "Password verification error",
                extra={"error": str(e)}
            )
            return False

    # --------------------------
    # Session Tokens
    # --------------------------

    @staticmethod
    def create_session_token(
        user_id: UUID,
        token_version: int,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """
        Create a signed session token.

        Args:
            user_id: User's UUID
            token_version: Current token version for revocation
            expires_delta: Custom expiration time

        Returns:
            Encoded session token
        """
        if expires_delta is None:
            expires_delta = timedelta(days=settings.SESSION_MAX_AGE_DAYS)

        now = datetime.now(UTC)

        payload = {
            "sub": str(user_id),
            "token_version": token_version,
            "type": SESSION_TOKEN_TYPE,
            "exp": now + expires_delta,
            "iat": now,
            "iss": settings.ISSUER,
            "aud": settings.AUDIENCE,
        }

        return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def decode_token(token: str) -> SessionTokenPayload:
        """
        Decode and validate a session token.

        Raises:
            SessionExpiredError: If token has expired
            SessionInvalidError: If token is invalid
        """
        try:
            raw = jwt.decode(
                token,
                settings.SECRET_KEY,
                algorithms=[settings.ALGORITHM],
                issuer=settings.ISSUER,
                audience=settings.AUDIENCE,
            )
        except ExpiredSignatureError:
            raise SessionExpiredError()
        except JWTError as e:
            logger.warning(
                "Token decode error",
                extra={"error": str(e)}
            )
            raise SessionInvalidError(reason=str(e))

        try:
            payload = SessionTokenPayload.model_validate(raw)
        except PydanticValidationError:
            raise SessionInvalidError(reason="Invalid token payload")

        if payload.type != SESSION_TOKEN_TYPE:
            raise SessionInvalidError(reason=f"Unexpected token type {payload.type}")

        return payload

    def validate_session_token(self, token: str) -> User:
        """
        Validate a session token and return the user.

        Raises:
            SessionInvalidError: If token is invalid or revoked
            AccountLockedError: If account is locked
            AccountDisabledError: If account is disabled
        """
        payload = self.decode_token(token)

        try:
            user_uuid = UUID(payload.sub)
        except ValueError:
            raise SessionInvalidError(reason="Invalid user ID format")

        user = self.db.get(User, user_uuid)

        if not user:
            raise SessionInvalidError(reason="User not found")

        if user.token_version != payload.token_version:
            raise SessionInvalidError(reason="token_version_mismatch")

        if user.is_locked:
            raise AccountLockedError()

        if not user.is_active:
            raise AccountDisabledError()

        return user

    # --------------------------
    # Signup
    # --------------------------

    def register_user(self, data: SignupRequest) -> User:
        """
        Create a volunteer account.

        Raises:
            UsernameAlreadyExistsError: If the username is taken
            EmailAlreadyExistsError: If the email is taken
        """
        if self.db.query(User).filter(User.username == data.username).first():
            raise UsernameAlreadyExistsError()

        email = data.email.lower() if data.email else None
        if email and self.db.query(User).filter(User.email == email).first():
            raise EmailAlreadyExistsError()

        user = User(
            username=data.username,
            password_hash=self.hash_password(data.password),
            email=email,
            first_name=data.first_name,
            last_name=data.last_name,
            district=data.district,
            role=Role.VOLUNTEER.value,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        logger.info(
            "User registered",
            extra={"user_id": str(user.id), "district": user.district}
        )
        return user

    # --------------------------
    # Authentication Methods
    # --------------------------

    def authenticate_user(
        self,
        username: str,
        password: str,
        ip_address: Optional[str] = None,
    ) -> Tuple[User, str]:
        """
        Authenticate a user with username and password.

        Returns:
            Tuple of (User, session token)

        Raises:
            InvalidCredentialsError: If credentials are invalid
            AccountLockedError: If account is locked
            AccountDisabledError: If account is disabled
        """
        ip_address = ip_address or "unknown"
        user = self.db.query(User).filter(User.username == username.lower()).first()

        if not user:
            security_logger.log_login_failure(
                username=username,
                ip_address=ip_address,
                reason="user_not_found",
            )
            raise InvalidCredentialsError()

        if user.is_locked:
            security_logger.log_login_failure(
                username=username,
                ip_address=ip_address,
                reason="account_locked",
            )
            raise AccountLockedError()

        if not user.is_active:
            security_logger.log_login_failure(
                username=username,
                ip_address=ip_address,
                reason="account_disabled",
            )
            raise AccountDisabledError()

        if not self.verify_password(password, user.password_hash):
            locked = user.increment_failed_attempts(settings.MAX_LOGIN_ATTEMPTS)
            self.db.commit()

            if locked:
                security_logger.log_account_locked(
                    user_id=str(user.id),
                    ip_address=ip_address,
                )

            security_logger.log_login_failure(
                username=username,
                ip_address=ip_address,
                reason="invalid_password",
            )
            raise InvalidCredentialsError()

        user.failed_attempts = 0
        self.db.commit()

        token = self.create_session_token(user.id, user.token_version)

        security_logger.log_login_success(
            user_id=str(user.id),
            username=user.username,
            ip_address=ip_address,
        )

        return user, token

    def logout(self, user: User) -> None:
        """
        Logout user by invalidating all sessions.

        Args:
            user: User model instance
        """
        user.invalidate_sessions()
        self.db.commit()

        security_logger.log_logout(user_id=str(user.id))
