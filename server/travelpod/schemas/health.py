"""Health-related Pydantic schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"


class HealthResponse(BaseModel):
    """Ping response with per-dependency checks."""

    status: HealthStatus = Field(..., description="healthy, or degraded when a check fails")
    timestamp: datetime = Field(..., description="Current server time (ISO 8601)")
    version: str = Field(..., description="API version")
    currency: str = Field(..., description="Currency all prices are quoted in")
    checks: dict[str, str] = Field(default_factory=dict, description="Dependency name to 'ok' or 'unavailable'")
    workers: dict[str, bool] = Field(default_factory=dict, description="Background worker name to running flag")
