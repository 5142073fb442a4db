"""
Centralized Exception Handling Module
=====================================

Defines custom exception classes for the application.

Benefits:
- Consistent error responses
- Proper HTTP status codes
- Structured error messages

Usage:
    raise DefectNotFoundError(identifier=str(defect_id))
    raise ValidationError("Invalid status", field="status", value="Open")
"""

from typing import Any, Dict, Optional
from fastapi import status


class DefectTrackerException(Exception):
    """
    Base exception class for the Defect Tracker application.

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

class AuthenticationError(DefectTrackerException):
    """Raised when authentication fails."""

    def __init__(
        self,
        message: str = "Could not validate credentials",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details,
        )


class TokenExpiredError(AuthenticationError):
    """Raised when a bearer token has expired."""

    def __init__(self):
        super().__init__(message="Access token has expired")


class TokenInvalidError(AuthenticationError):
    """Raised when a bearer token is invalid."""

    def __init__(self, reason: str = "Invalid token"):
        super().__init__(
            message="Invalid token",
            details={"reason": reason}
        )


# ==========================
# Authorization Exceptions
# ==========================

class AuthorizationError(DefectTrackerException):
    """Raised when the actor lacks required permissions."""

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


class InsufficientRoleError(AuthorizationError):
    """Raised when the actor's role is below the role an operation requires."""

    def __init__(self, required_role: str):
        super().__init__(
            message="Insufficient permissions for this action",
            details={"required_role": required_role}
        )


# ==========================
# Resource Exceptions
# ==========================

class NotFoundError(DefectTrackerException):
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
    """Raised when a user is not found."""

    def __init__(self, identifier: Optional[str] = None):
        super().__init__(resource="User", identifier=identifier)


class ProjectNotFoundError(NotFoundError):
    """Raised when a project is not found."""

    def __init__(self, identifier: Optional[str] = None):
        super().__init__(resource="Project", identifier=identifier)


class DefectNotFoundError(NotFoundError):
    """Raised when a defect is not found."""

    def __init__(self, identifier: Optional[str] = None):
        super().__init__(resource="Defect", identifier=identifier)


# ==========================
# Validation Exceptions
# ==========================

class ValidationError(DefectTrackerException):
    """
    Raised when validation fails.

    When the failure concerns a single field, ``field`` and ``value``
    identify the offending input and are echoed in ``details``.
    """

    def __init__(
        self,
        message: str = "Validation error",
        field: Optional[str] = None,
        value: Any = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.field = field
        self.value = value
        details = dict(details or {})
        if field is not None:
            details.setdefault("field", field)
            details.setdefault("value", value)
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
        )


class EmailAlreadyExistsError(ValidationError):
    """Raised when an email address is already taken by another user."""

    def __init__(self, email: str):
        super().__init__(
            message="Email already in use",
            field="email",
            value=email,
        )

