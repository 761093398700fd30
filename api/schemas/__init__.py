"""
API schemas for request and response models.

This module defines Pydantic models used for API serialization.
"""

from api.schemas.common import (
    CollectorHealthResponse,
    ErrorResponse,
    HealthCheckResponse,
    MessageResponse,
)
from api.schemas.trends import StatusResponse, TrendListResponse, UpdateResponse

__all__ = [
    "ErrorResponse",
    "MessageResponse",
    "HealthCheckResponse",
    "CollectorHealthResponse",
    "TrendListResponse",
    "UpdateResponse",
    "StatusResponse",
]
