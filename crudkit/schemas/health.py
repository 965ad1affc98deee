"""Pydantic schemas for health check responses."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response body for the health check endpoint."""

    status: Literal["ok"] = Field(default="ok", description="Service status")
    version: str = Field(description="Running application version")
    database: Literal["connected", "disconnected"] | None = Field(
        default=None,
        description="Database connectivity status when check is performed",
    )
    cache: Literal["connected", "disconnected", "disabled"] | None = Field(
        default=None,
        description="Redis connectivity, or 'disabled' when REDIS_URL is unset",
    )
