"""
Defect Tracker - Logging Infrastructure

This module provides structured logging with support for:
- JSON formatted logs for production
- Text formatted logs for development
- Context binding for request tracing
- Security and audit event loggers
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar, Token
from typing import Any, Dict, Optional

import structlog
from structlog.types import Processor

from app.core.config import get_settings

# Context variables for request tracing
request_id_context: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
actor_id_context: ContextVar[Optional[str]] = ContextVar("actor_id", default=None)


def add_context_variables(
    logger: logging.Logger,
    method_name: str,
    event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Add context variables to log entries.

    This processor adds request_id and actor_id from
    context variables to every log entry.
    """
    request_id = request_id_context.get()
    if request_id:
        event_dict["request_id"] = request_id

    actor_id = actor_id_context.get()
    if actor_id:
        event_dict["actor_id"] = actor_id

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
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

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
        >>> log.info("defect_updated", defect_id="123", fields=["status"])
    """
    return structlog.get_logger(name)


class LogContext:
    """
    Context manager for setting log context variables.

    Example:
        >>> with LogContext(request_id="req-123", actor_id="user-1"):
        ...     log.info("processing_update")
    """

    def __init__(
        self,
        request_id: Optional[str] = None,
        actor_id: Optional[str] = None,
    ):
        self.request_id = request_id
        self.actor_id = actor_id
        self._tokens: list[tuple[ContextVar, Token]] = []

    def __enter__(self) -> "LogContext":
        if self.request_id:
            self._tokens.append((request_id_context, request_id_context.set(self.request_id)))
        if self.actor_id:
            self._tokens.append((actor_id_context, actor_id_context.set(self.actor_id)))
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens.clear()


class SecurityLogger:
    """
    Specialized logger for security-relevant events.

    Authorization denials are logged here rather than raised by the
    permission layer; callers decide how to reject the request.
    """

    def __init__(self) -> None:
        self.log = get_logger("security")

    def log_permission_denied(
        self,
        actor_id: Optional[str],
        actor_role: Optional[str],
        required_role: str,
    ) -> None:
        """Log a role check that came back negative."""
        self.log.warning(
            "permission_denied",
            actor_id=actor_id,
            actor_role=actor_role,
            required_role=required_role,
        )

    def log_token_invalid(self, reason: str, ip_address: str = "unknown") -> None:
        """Log a bearer token that failed verification."""
        self.log.warning(
            "token_invalid",
            reason=reason,
            ip_address=ip_address,
        )


class AuditLogger:
    """Logger for successful state-changing operations."""

    def __init__(self) -> None:
        self.log = get_logger("audit")

    def log_change(
        self,
        action: str,
        actor_id: Optional[str],
        resource: str,
        resource_id: Optional[str],
        **changes: Any,
    ) -> None:
        self.log.info(
            "audit_event",
            action=action,
            actor_id=actor_id,
            resource=resource,
            resource_id=resource_id,
            **changes,
        )


security_logger = SecurityLogger()
audit_logger = AuditLogger()
