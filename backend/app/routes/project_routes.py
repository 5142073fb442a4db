"""
Project Routes Module
=====================

Endpoints for project management.

Security:
- Listing requires authentication only
- Creating, updating and deleting require TESTER or higher
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.user import User
from app.core.dependencies.auth import get_current_user
from app.core.dependencies.rbac import require_tester
from app.services.project_service import ProjectService
from app.schemas import (
    ErrorResponse,
    MessageResponse,
    ProjectCreate,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
)

router = APIRouter(
    prefix="/projects",
    tags=["Projects"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)


@router.get("", response_model=ProjectListResponse, summary="List Projects")
def list_projects(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    projects = ProjectService(db).list_projects()
    return {"projects": projects, "total": len(projects)}


@router.get(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Get Project",
    responses={404: {"model": ErrorResponse, "description": "Project not found"}},
)
def get_project(
    project_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ProjectService(db).get_project(project_id)


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Project",
    description="Create a project. Requires TESTER role or higher.",
    responses={403: {"model": ErrorResponse, "description": "Insufficient permissions"}},
)
def create_project(
    project_data: ProjectCreate,
    current_user: User = Depends(require_tester),
    db: Session = Depends(get_db),
):
    return ProjectService(db).create_project(
        name=project_data.name,
        environment=project_data.environment,
        actor_id=current_user.id,
    )


@router.patch(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Update Project",
    description="Apply a partial update. Requires TESTER role or higher.",
    responses={
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
        404: {"model": ErrorResponse, "description": "Project not found"},
    },
)
def update_project(
    project_id: UUID,
    update_data: ProjectUpdate,
    current_user: User = Depends(require_tester),
    db: Session = Depends(get_db),
):
    return ProjectService(db).update_project(
        project_id,
        update_data.model_dump(exclude_unset=True),
        actor_id=current_user.id,
    )


@router.delete(
    "/{project_id}",
    response_model=MessageResponse,
    summary="Delete Project",
    description="Delete a project and all of its defects. Requires TESTER role or higher.",
    responses={
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
        404: {"model": ErrorResponse, "description": "Project not found"},
    },
)
def delete_project(
    project_id: UUID,
    current_user: User = Depends(require_tester),
    db: Session = Depends(get_db),
) -> dict:
    ProjectService(db).delete_project(project_id, actor_id=current_user.id)
    return {"message": "Project deleted"}
