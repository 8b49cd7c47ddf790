"""
ReviewShare Backend — Shared Response Schemas
==============================================

What:  Envelopes shared by every router: the mutation result, the error body
       and the health check body.
"""

from typing import Optional

from pydantic import BaseModel, Field

# Largest id accepted on input; DynamoDB numbers beyond this lose precision
MAX_ID = 2**63 - 1


class ActionResponse(BaseModel):
    """
    What:  Standard success envelope for create/update/delete operations.

    Example:
        {"success": true, "message": "Review added successfully!", "id": 7}
    """
    success: bool = Field(description="Whether the operation succeeded")
    message: str = Field(description="Human-readable outcome")
    id: Optional[int] = Field(default=None, description="Id of the created entity, if any")


class LikeResponse(BaseModel):
    id: int
    like: int = Field(description="Like counter after the increment")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "review with ID '42' was not found",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    store: str = Field(description="DynamoDB connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
