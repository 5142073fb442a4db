"""
User Routes Module
==================

Endpoints for browsing and administering users.

Security:
- Listing and viewing require authentication only
- Creating, updating (including role assignment) and deleting require MANAGER
- All changes are audit logged
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.user import User
from app.models.role_enum import Role
from app.core.dependencies.auth import get_current_user
from app.core.dependencies.rbac import require_manager
from app.core.logging import get_logger
from app.services.user_service import UserService
from app.schemas import (
    ErrorResponse,
    MessageResponse,
    UserListResponse,
    UserCreate,
    UserResponse,
    UserUpdate,
)

# Initialize logger
logger = get_logger(__name__)


# =====================================
# Router Setup
# =====================================

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)


@router.get(
    "",
    response_model=UserListResponse,
    summary="List Users",
    description="List all users, optionally filtered by role.",
)
def list_users(
    role: Optional[Role] = Query(None, description="Filter by role"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    users = UserService(db).list_users(role=role)
    return {"users": users, "total": len(users)}


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
    description="Create a user with a role. Requires MANAGER role.",
    responses={
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
        422: {"model": ErrorResponse, "description": "Invalid field value or email taken"},
    },
)
def create_user(
    user_data: UserCreate,
    current_user: User = Depends(require_manager),
    db: Session = Depends(get_db),
):
    user = UserService(db).create_user(
        name=user_data.name,
        email=user_data.email,
        role=user_data.role,
        user_id=user_data.id,
        actor_id=current_user.id,
    )

    logger.info(
        "user_created_by_manager",
        manager_id=str(current_user.id),
        target_user_id=str(user.id),
    )

    return user


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Current User",
    description="Get the authenticated user.",
)
def get_me(
    current_user: User = Depends(get_current_user),
):
    return current_user


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get User by ID",
    responses={
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
def get_user(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return UserService(db).get_user(user_id)


@router.patch(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update User",
    description="Update name, email or role. Requires MANAGER role.",
    responses={
        200: {"description": "User updated"},
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
        404: {"model": ErrorResponse, "description": "User not found"},
        422: {"model": ErrorResponse, "description": "Invalid field value"},
    },
)
def update_user(
    user_id: UUID,
    update_data: UserUpdate,
    current_user: User = Depends(require_manager),
    db: Session = Depends(get_db),
):
    """
    Update user information.

    Requires MANAGER role. A role change takes effect on the user's
    next request.

    Args:
        user_id: User UUID
        update_data: Update data
        current_user: Current authenticated user
        db: Database session

    Returns:
        Updated user details
    """
    user = UserService(db).update_user(
        user_id,
        update_data.model_dump(exclude_unset=True),
        actor_id=current_user.id,
    )

    logger.info(
        "user_updated_by_manager",
        manager_id=str(current_user.id),
        target_user_id=str(user.id),
    )

    return user


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    summary="Delete User",
    description="Delete a user. Requires MANAGER role.",
    responses={
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
def delete_user(
    user_id: UUID,
    current_user: User = Depends(require_manager),
    db: Session = Depends(get_db),
) -> dict:
    UserService(db).delete_user(user_id, actor_id=current_user.id)
    return {"message": "User deleted"}
