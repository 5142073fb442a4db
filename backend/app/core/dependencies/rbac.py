"""
Role-Based Access Control (RBAC) Dependencies Module
=====================================================

FastAPI dependencies for role-based authorization.

Features:
- Hierarchical role checking (developer < tester < manager)
- Role read fresh from the database on every request
- Denials logged by the permission check

Usage:
    @router.delete("/defects/{defect_id}")
    def delete_defect(user: User = Depends(require_manager)):
        ...
"""

from typing import Callable

from fastapi import Depends
from sqlalchemy.orm import Session

from app.models.user import User
from app.models.role_enum import Role
from app.core.dependencies.auth import get_current_user
from app.core.exceptions import InsufficientRoleError
from app.core.logging import get_logger
from app.core.permissions import get_role_level, has_permission
from app.db.session import get_db
from app.services.user_service import UserService

# Initialize logger
logger = get_logger(__name__)


# =====================================
# Role Requirement Dependencies
# =====================================

def require_role_or_higher(minimum_role: Role) -> Callable:
    """
    Create a dependency that requires a minimum role level.

    Users with the required role or any higher role can access.
    Users with no role or an unrecognized role are always refused.

    Args:
        minimum_role: Minimum role required

    Returns:
        Dependency function

    Raises:
        ValueError: If minimum_role is not a valid Role

    Usage:
        @router.post("/projects")
        def create_project(user: User = Depends(require_role_or_higher(Role.TESTER))):
            ...
    """
    if get_role_level(minimum_role) is None:
        raise ValueError(f"Invalid required role: {minimum_role!r}")

    def role_checker(
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ) -> User:
        user_service = UserService(db)

        # has_permission logs the denial
        if not has_permission(user_service.get_role, current_user.id, minimum_role):
            raise InsufficientRoleError(Role(minimum_role).value)

        return current_user

    return role_checker


require_developer = require_role_or_higher(Role.DEVELOPER)
require_tester = require_role_or_higher(Role.TESTER)
require_manager = require_role_or_higher(Role.MANAGER)
