"""
Pydantic response schemas for the non-command endpoints.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check result."""

    status: str = Field(description="healthy or unhealthy")
    version: str = Field(description="Service version")
    timestamp: str = Field(description="ISO timestamp of the check")
    components: dict[str, str] = Field(
        default_factory=dict, description="Per-component status messages"
    )


class ServiceInfo(BaseModel):
    """Root endpoint payload."""

    name: str
    version: str
    status: str
    command_endpoint: str
    health: str
