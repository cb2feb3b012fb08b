"""Pydantic schemas for username availability."""

from __future__ import annotations

from pydantic import BaseModel, Field


class AvailabilityResponse(BaseModel):
    """Availability of a sanitised candidate username."""

    username: str
    available: bool | None = Field(
        description="True if free, False if taken, null when unknown (too short or lookup failed)"
    )
