"""
Schemas Package Initialization
==============================

Exports all Pydantic schemas for the application.

Usage:
    from app.schemas import DefectUpdate, DefectResponse, ErrorResponse
"""

from app.schemas.common import ErrorResponse, MessageResponse

from app.schemas.user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserListResponse,
)

from app.schemas.project import (
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    ProjectListResponse,
)

from app.schemas.defect import (
    DefectCreate,
    DefectUpdate,
    CommentCreate,
    CommentResponse,
    StatusChangeResponse,
    DefectResponse,
    DefectListResponse,
    VocabularyOptionResponse,
    VocabulariesResponse,
    SummaryMetricsResponse,
    DefectsOverTimeResponse,
)

__all__ = [
    # Common
    "ErrorResponse",
    "MessageResponse",
    # User
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserListResponse",
    # Project
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectResponse",
    "ProjectListResponse",
    # Defect
    "DefectCreate",
    "DefectUpdate",
    "CommentCreate",
    "CommentResponse",
    "StatusChangeResponse",
    "DefectResponse",
    "DefectListResponse",
    "VocabularyOptionResponse",
    "VocabulariesResponse",
    "SummaryMetricsResponse",
    "DefectsOverTimeResponse",
]
