"""
Common API schemas used across endpoints.
"""

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Detailed error information")
    code: str = Field(..., description="Error code")
    timestamp: str = Field(..., description="ISO 8601 timestamp")

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Trend not found",
                "detail": "Trend with ID 3f2a9c1b7d8e4a6f0b1c2d3e does not exist",
                "code": "HTTP_404",
                "timestamp": "2024-01-15T10:30:00+00:00",
            }
        }


class MessageResponse(BaseModel):
    """Plain message response."""

    message: str = Field(..., description="Human-readable message")


class HealthCheckResponse(BaseModel):
    """Liveness response."""

    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current server time")

    class Config:
        json_schema_extra = {
            "example": {"status": "ok", "timestamp": "2024-01-15T10:30:00Z"}
        }


class CollectorHealthResponse(BaseModel):
    """Result of probing every registered collector."""

    healthy: bool = Field(..., description="True when every collector is healthy")
    collectors: Dict[str, bool] = Field(..., description="Collector name -> health")
