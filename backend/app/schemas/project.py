"""
Project Schemas Module
======================

Pydantic models for project requests and responses.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.core.enums import ProjectEnvironment


class ProjectCreate(BaseModel):
    """Schema for creating a project."""

    name: str = Field(
        ...,
        max_length=255,
        description="Project name"
    )
    environment: ProjectEnvironment = Field(
        ...,
        description="Deployment environment"
    )


class ProjectUpdate(BaseModel):
    """Schema for updating a project. Omitted fields are left unchanged."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(
        default=None,
        max_length=255,
        description="New project name"
    )
    environment: Optional[ProjectEnvironment] = Field(
        default=None,
        description="New deployment environment"
    )


class ProjectResponse(BaseModel):
    """Project response schema."""

    id: UUID
    name: str
    environment: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProjectListResponse(BaseModel):
    """Response schema for project list."""

    projects: list[ProjectResponse]
    total: int
