"""
Logging Infrastructure
======================

This module provides structured logging with support for:
- JSON formatted logs for production
- Console formatted logs for development
- Context binding for request tracing
- Dedicated security and audit event loggers
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar, Token
from typing import Any, Dict, Optional

import structlog
from structlog.types import Processor

from civil_defence.core.config import get_settings

# Context variables for request tracing
request_id_context: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
user_id_context: ContextVar[Optional[str]] = ContextVar("user_id", default=None)
district_context: ContextVar[Optional[str]] = ContextVar("district", default=None)


def add_context_variables(
    logger: logging.Logger,
    method_name: str,
    event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Add context variables to log entries.

    This processor adds request_id, user_id and district from
    context variables to every log entry.
    """
    request_id = request_id_context.get()
    if request_id:
        event_dict["request_id"] = request_id

    user_id = user_id_context.get()
    if user_id:
        event_dict["user_id"] = user_id

    district = district_context.get()
    if district:
        event_dict["district"] = district

    return event_dict


def get_log_level(settings: Any) -> int:
    """Convert string log level to logging constant."""
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return level_map.get(settings.LOG_LEVEL.upper(), logging.INFO)


def get_processors(settings: Any) -> list[Processor]:
    """Get structlog processors based on settings."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_context_variables,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=not settings.is_production))

    return processors


def configure_logging() -> None:
    """
    Configure structured logging for the application.

    This should be called once at application startup.
    """
    settings = get_settings()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=get_log_level(settings),
    )

    structlog.configure(
        processors=get_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name. If None, uses the calling module's name.

    Returns:
        A structlog BoundLogger instance.

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("volunteer_approved", volunteer_id="123")
    """
    return structlog.get_logger(name)


class LogContext:
    """
    Context manager for setting log context variables.

    Example:
        >>> with LogContext(request_id="seed"):
        ...     log.info("Seed user created")
    """

    def __init__(
        self,
        request_id: Optional[str] = None,
        user_id: Optional[str] = None,
        district: Optional[str] = None,
    ):
        self._values = (
            (request_id_context, request_id),
            (user_id_context, user_id),
            (district_context, district),
        )
        self._tokens: list[tuple[ContextVar, Token]] = []

    def __enter__(self) -> "LogContext":
        for var, value in self._values:
            if value:
                self._tokens.append((var, var.set(value)))
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens.clear()


# =====================================
# Security Event Logger
# =====================================

class SecurityLogger:
    """
    Specialized logger for authentication and access-control events.

    Every event carries ``security_event`` so log pipelines can route
    these entries separately from application logs.
    """

    def __init__(self) -> None:
        self.log = get_logger("security")

    def log_login_success(self, user_id: str, username: str, ip_address: str) -> None:
        """Log a successful login."""
        self.log.info(
            "login_success",
            security_event="login_success",
            user_id=user_id,
            username=username,
            ip_address=ip_address,
        )

    def log_login_failure(self, username: str, ip_address: str, reason: str) -> None:
        """Log a failed login attempt."""
        self.log.warning(
            "login_failure",
            security_event="login_failure",
            username=username,
            ip_address=ip_address,
            reason=reason,
        )

    def log_account_locked(self, user_id: str, ip_address: str) -> None:
        self.log.warning(
            "account_locked",
            security_event="account_locked",
            user_id=user_id,
            ip_address=ip_address,
        )

    def log_logout(self, user_id: str) -> None:
        self.log.info("logout", security_event="logout", user_id=user_id)

    def log_session_invalid(self, reason: str, ip_address: str) -> None:
        self.log.warning(
            "session_invalid",
            security_event="session_invalid",
            reason=reason,
            ip_address=ip_address,
        )

    def log_unauthorized_access(
        self,
        user_id: str,
        role: str,
        resource: str,
        action: str,
    ) -> None:
        """Log a request rejected by a role check."""
        self.log.warning(
            "unauthorized_access",
            security_event="unauthorized_access",
            user_id=user_id,
            role=role,
            resource=resource,
            action=action,
        )

    def log_district_scope_violation(
        self,
        user_id: str,
        user_district: Optional[str],
        target_district: Optional[str],
        resource: str,
    ) -> None:
        """Log an attempt to reach data outside the caller's district."""
        self.log.warning(
            "district_scope_violation",
            security_event="district_scope_violation",
            user_id=user_id,
            user_district=user_district,
            target_district=target_district,
            resource=resource,
        )

    def log_rate_limit_exceeded(self, ip_address: str, endpoint: str) -> None:
        self.log.warning(
            "rate_limit_exceeded",
            security_event="rate_limit_exceeded",
            ip_address=ip_address,
            endpoint=endpoint,
        )


# =====================================
# Audit Logger
# =====================================

class AuditLogger:
    """Logger for administrative changes to records."""

    def __init__(self) -> None:
        self.log = get_logger("audit")

    def log_user_modified(
        self,
        actor_id: str,
        target_user_id: str,
        changes: Dict[str, Any],
    ) -> None:
        self.log.info(
            "user_modified",
            audit_event="user_modified",
            actor_id=actor_id,
            target_user_id=target_user_id,
            changes=changes,
        )

    def log_status_changed(
        self,
        actor_id: str,
        resource: str,
        resource_id: str,
        old_status: str,
        new_status: str,
    ) -> None:
        self.log.info(
            "status_changed",
            audit_event="status_changed",
            actor_id=actor_id,
            resource=resource,
            resource_id=resource_id,
            old_status=old_status,
            new_status=new_status,
        )

    def log_record_created(self, actor_id: str, resource: str, resource_id: str) -> None:
        self.log.info(
            "record_created",
            audit_event="record_created",
            actor_id=actor_id,
            resource=resource,
            resource_id=resource_id,
        )

    def log_record_deleted(self, actor_id: str, resource: str, resource_id: str) -> None:
        self.log.info(
            "record_deleted",
            audit_event="record_deleted",
            actor_id=actor_id,
            resource=resource,
            resource_id=resource_id,
        )


security_logger = SecurityLogger()
audit_logger = AuditLogger()
