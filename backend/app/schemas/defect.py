"""
Defect Schemas Module
=====================

Pydantic models for defect requests and responses.

Request schemas type the enumerated fields with their enums so the
OpenAPI document lists every token; the service layer validates them
again before anything is written.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.core.enums import (
    DefectPriority,
    DefectSeverity,
    DefectStatus,
    DefectType,
)


# ==========================
# Request Schemas
# ==========================

class DefectCreate(BaseModel):
    """Schema for reporting a new defect."""

    project_id: UUID = Field(..., description="Project the defect belongs to")
    name: str = Field(..., max_length=255, description="Short summary")
    description: str = Field(..., description="Full description")
    type: DefectType = Field(..., description="Defect type")
    severity: DefectSeverity = Field(..., description="Defect severity")
    priority: DefectPriority = Field(..., description="Defect priority")
    status: DefectStatus = Field(default=DefectStatus.OPEN, description="Initial status")
    screenshot: Optional[str] = Field(default=None, description="Uploaded screenshot id")
    assigned_to: Optional[UUID] = Field(default=None, description="Assignee user id")


class DefectUpdate(BaseModel):
    """Schema for updating a defect. Omitted fields are left unchanged."""

    model_config = ConfigDict(extra="forbid")

    project_id: Optional[UUID] = None
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    type: Optional[DefectType] = None
    severity: Optional[DefectSeverity] = None
    priority: Optional[DefectPriority] = None
    status: Optional[DefectStatus] = None
    screenshot: Optional[str] = None
    assigned_to: Optional[UUID] = None


class CommentCreate(BaseModel):
    """Schema for adding a comment."""

    text: str = Field(..., description="Comment text")


# ==========================
# Response Schemas
# ==========================

class CommentResponse(BaseModel):
    text: str
    author_id: Optional[UUID] = None
    created_at: datetime


class StatusChangeResponse(BaseModel):
    status: str
    changed_by: Optional[UUID] = None
    changed_at: datetime


class DefectResponse(BaseModel):
    """Defect with display names resolved."""

    id: UUID
    project_id: UUID
    project_name: str
    name: str
    description: str
    screenshot: Optional[str] = None
    assigned_to: Optional[UUID] = None
    assigned_to_name: Optional[str] = None
    reporter_id: Optional[UUID] = None
    reporter_name: str
    type: str
    severity: str
    priority: str
    status: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    comments: List[CommentResponse] = Field(default_factory=list)
    status_history: List[StatusChangeResponse] = Field(default_factory=list)


class DefectListResponse(BaseModel):
    defects: List[DefectResponse]
    total: int


# ==========================
# Vocabulary & Metrics Schemas
# ==========================

class VocabularyOptionResponse(BaseModel):
    value: str
    label: str
    color: Optional[str] = None


class VocabulariesResponse(BaseModel):
    """Every closed vocabulary, in display order."""

    types: List[VocabularyOptionResponse]
    severities: List[VocabularyOptionResponse]
    priorities: List[VocabularyOptionResponse]
    statuses: List[VocabularyOptionResponse]
    roles: List[str]
    environments: List[str]


class SummaryMetricsResponse(BaseModel):
    """Defect counts, zero-filled over every vocabulary token."""

    total: int
    by_status: Dict[str, int]
    by_severity: Dict[str, int]
    by_priority: Dict[str, int]
    by_type: Dict[str, int]


class DefectsOverTimeResponse(BaseModel):
    """Per-day defect counts broken down by type."""

    types: List[VocabularyOptionResponse]
    data: List[Dict[str, Any]]
