"""Common Pydantic schemas."""

from pydantic import BaseModel, Field


class SuccessResponse(BaseModel):
    """Envelope returned by maintenance operations."""

    success: bool = Field(..., description="Whether the operation succeeded")
    message: str = Field(..., description="Human-readable outcome")
