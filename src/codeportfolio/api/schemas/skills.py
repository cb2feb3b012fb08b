"""Pydantic schemas for portfolio skills."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SkillResponse(BaseModel):
    """Skill tag returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    portfolio_id: int
    name: str
    category: str | None = None


class SkillCreateRequest(BaseModel):
    """Request body for adding a skill."""

    model_config = ConfigDict(extra="forbid")

    name: str
    category: str | None = None
