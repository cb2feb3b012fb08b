"""Shared Pydantic schemas for API responses."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body returned for every recoverable operation failure."""

    detail: str = Field(description="Human-readable message")
    error: str = Field(description="Error kind, e.g. 'validation' or 'not_found'")
    field: str | None = Field(default=None, description="Offending field, if any")
