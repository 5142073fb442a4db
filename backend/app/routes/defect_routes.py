"""
Defect Routes Module
====================

Endpoints for reporting, browsing, updating and commenting on defects.

Security:
- Reads require authentication only
- Reporting, updating and commenting require DEVELOPER or higher
- Deletion requires MANAGER
- All mutations are audit logged
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.user import User
from app.models.role_enum import Role
from app.core.dependencies.auth import get_current_user
from app.core.dependencies.rbac import require_developer, require_manager
from app.core.enums import (
    DefectField,
    DefectPriority,
    DefectSeverity,
    DefectStatus,
    DefectType,
    ProjectEnvironment,
    options_for,
)
from app.core.logging import get_logger
from app.services.defect_service import DefectService, serialize_defect
from app.schemas import (
    CommentCreate,
    DefectCreate,
    DefectListResponse,
    DefectResponse,
    DefectUpdate,
    ErrorResponse,
    MessageResponse,
    VocabulariesResponse,
)

# Initialize logger
logger = get_logger(__name__)


# =====================================
# Router Setup
# =====================================

router = APIRouter(
    prefix="/defects",
    tags=["Defects"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
)


# =====================================
# Read Endpoints
# =====================================

@router.get(
    "",
    response_model=DefectListResponse,
    summary="List Defects",
    description="List defects, optionally filtered. Display names of the project, reporter and assignee are resolved.",
)
def list_defects(
    project_id: Optional[UUID] = Query(None, description="Filter by project"),
    defect_status: Optional[DefectStatus] = Query(None, alias="status", description="Filter by status"),
    severity: Optional[DefectSeverity] = Query(None, description="Filter by severity"),
    priority: Optional[DefectPriority] = Query(None, description="Filter by priority"),
    defect_type: Optional[DefectType] = Query(None, alias="type", description="Filter by type"),
    assigned_to: Optional[UUID] = Query(None, description="Filter by assignee"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    defects = DefectService(db).list_defects(
        project_id=project_id,
        status=defect_status,
        severity=severity,
        priority=priority,
        type=defect_type,
        assigned_to=assigned_to,
    )
    return {"defects": defects, "total": len(defects)}


@router.get(
    "/vocabularies",
    response_model=VocabulariesResponse,
    summary="Defect Vocabularies",
    description="Valid tokens, labels and colours for every enumerated field.",
)
def get_vocabularies(
    current_user: User = Depends(get_current_user),
) -> dict:
    return {
        "types": [option._asdict() for option in options_for(DefectField.TYPE)],
        "severities": [option._asdict() for option in options_for(DefectField.SEVERITY)],
        "priorities": [option._asdict() for option in options_for(DefectField.PRIORITY)],
        "statuses": [option._asdict() for option in options_for(DefectField.STATUS)],
        "roles": [role.value for role in Role],
        "environments": [environment.value for environment in ProjectEnvironment],
    }


@router.get(
    "/{defect_id}",
    response_model=DefectResponse,
    summary="Get Defect",
    responses={
        404: {"model": ErrorResponse, "description": "Defect not found"},
    },
)
def get_defect(
    defect_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    defect = DefectService(db).get_defect(defect_id)
    return serialize_defect(defect)


# =====================================
# Mutation Endpoints
# =====================================

@router.post(
    "",
    response_model=DefectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Report Defect",
    description="Report a new defect. Requires DEVELOPER role or higher.",
    responses={
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
        422: {"model": ErrorResponse, "description": "Invalid field value"},
    },
)
def create_defect(
    defect_data: DefectCreate,
    current_user: User = Depends(require_developer),
    db: Session = Depends(get_db),
) -> dict:
    """
    Report a new defect.

    The current user is recorded as the reporter and the initial
    status opens the status history.
    """
    defect = DefectService(db).create_defect(
        defect_data.model_dump(),
        reporter_id=current_user.id,
    )
    return serialize_defect(defect)


@router.patch(
    "/{defect_id}",
    response_model=DefectResponse,
    summary="Update Defect",
    description="Apply a partial update. Omitted fields are left unchanged. Requires DEVELOPER role or higher.",
    responses={
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
        404: {"model": ErrorResponse, "description": "Defect not found"},
        422: {"model": ErrorResponse, "description": "Invalid field value; nothing was changed"},
    },
)
def update_defect(
    defect_id: UUID,
    update_data: DefectUpdate,
    current_user: User = Depends(require_developer),
    db: Session = Depends(get_db),
) -> dict:
    """
    Update a defect.

    Every supplied field is validated before any is written, so a single
    invalid value rejects the whole update.
    """
    defect = DefectService(db).update_defect(
        defect_id,
        update_data.model_dump(exclude_unset=True),
        actor_id=current_user.id,
    )
    return serialize_defect(defect)


@router.post(
    "/{defect_id}/comments",
    response_model=DefectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add Comment",
    responses={
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
        404: {"model": ErrorResponse, "description": "Defect not found"},
    },
)
def add_comment(
    defect_id: UUID,
    comment: CommentCreate,
    current_user: User = Depends(require_developer),
    db: Session = Depends(get_db),
) -> dict:
    defect = DefectService(db).add_comment(
        defect_id,
        comment.text,
        author_id=current_user.id,
    )
    return serialize_defect(defect)


@router.delete(
    "/{defect_id}",
    response_model=MessageResponse,
    summary="Delete Defect",
    description="Delete a defect with its comments and history. Requires MANAGER role.",
    responses={
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
        404: {"model": ErrorResponse, "description": "Defect not found"},
    },
)
def delete_defect(
    defect_id: UUID,
    current_user: User = Depends(require_manager),
    db: Session = Depends(get_db),
) -> dict:
    DefectService(db).delete_defect(defect_id, actor_id=current_user.id)
    return {"message": "Defect deleted"}
