"""Pydantic schemas for health check responses."""

from typing import Literal

from pydantic import Field

from app.schemas.base import CamelModel


class HealthResponse(CamelModel):
    """Response body for the health check endpoint."""

    status: Literal["ok"] = Field(default="ok", description="Service status")
    environment: str = Field(description="Current app environment (e.g. dev, prod)")
    database: Literal["connected", "disconnected"] = Field(
        description="Database connectivity status",
    )
    seeded: bool | None = Field(
        default=None,
        description="Whether the bootstrap and default roles exist (omitted when the database is down)",
    )
