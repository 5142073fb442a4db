"""
Common Schemas Module
=====================

Response envelopes shared by every router.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    message: str = Field(
        ...,
        description="Error message"
    )
    details: Optional[dict] = Field(
        default=None,
        description="Additional error details"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "Invalid status: 'Open'",
                "details": {"field": "status", "value": "Open"}
            }
        }
    )


class MessageResponse(BaseModel):
    """Simple acknowledgement response."""

    message: str = Field(
        ...,
        description="Human-readable result"
    )
