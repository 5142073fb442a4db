"""
User Schemas Module
===================

Pydantic models for user-related request/response validation.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.models.role_enum import Role


class UserCreate(BaseModel):
    """Schema for creating a user."""

    id: Optional[UUID] = Field(
        default=None,
        description="Subject of the identity provider account; generated when omitted"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Display name"
    )
    email: EmailStr = Field(
        ...,
        description="Email address"
    )
    role: Role = Field(
        default=Role.DEVELOPER,
        description="Role"
    )

    model_config = ConfigDict(extra="forbid")


class UserUpdate(BaseModel):
    """Schema for updating user information. Omitted fields are left unchanged."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=255,
        description="New display name"
    )
    email: Optional[EmailStr] = Field(
        default=None,
        description="New email address"
    )
    role: Optional[Role] = Field(
        default=None,
        description="New role"
    )


class UserResponse(BaseModel):
    """User response schema."""

    id: UUID = Field(
        ...,
        description="User UUID"
    )
    name: Optional[str] = Field(
        default=None,
        description="Display name"
    )
    email: str = Field(
        ...,
        description="User email address"
    )
    # Raw token: users may carry no role or one the API does not recognize
    role: Optional[str] = Field(
        default=None,
        description="User role"
    )
    created_at: datetime = Field(
        ...,
        description="Account creation timestamp"
    )

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "name": "Ada Tester",
                "email": "ada@example.com",
                "role": "tester",
                "created_at": "2024-01-15T10:30:00Z"
            }
        }
    )


class UserListResponse(BaseModel):
    """Response schema for user list."""

    users: list[UserResponse]
    total: int = Field(
        ...,
        description="Total number of users"
    )
