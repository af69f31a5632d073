"""
Pydantic schemas for API responses.
"""

from pydantic import BaseModel
from enum import Enum


class HealthStatus(str, Enum):
    """Overall service health."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"


class HealthResponse(BaseModel):
    """Schema for health check response."""
    status: HealthStatus
    static_root: str
    static_root_exists: bool
