"""Health and liveness models."""

from datetime import datetime

from pydantic import BaseModel


class StatusResponse(BaseModel):
    """Response model for the liveness endpoint."""

    status: str


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    timestamp: datetime
    version: str
