"""Pydantic schemas for portfolio API requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from codeportfolio.api.schemas.projects import ProjectResponse
from codeportfolio.api.schemas.skills import SkillResponse
from codeportfolio.constants.portfolio_constants import DEFAULT_TEMPLATE_ID
from codeportfolio.models.views import PublicPortfolio
from codeportfolio.services.completion import CompletionStatus


class PortfolioCreateRequest(BaseModel):
    """Request body for creating a portfolio."""

    model_config = ConfigDict(extra="forbid")

    username: str = Field(description="Public handle, 3-30 characters of [a-z0-9-]")
    template_id: str = DEFAULT_TEMPLATE_ID.value


class PortfolioUpdateRequest(BaseModel):
    """Partial profile/theme update. Only the fields sent are written."""

    model_config = ConfigDict(extra="forbid")

    display_name: str | None = None
    tagline: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    hero_title: str | None = None
    hero_subtitle: str | None = None
    cta_text: str | None = None
    cta_url: str | None = None
    github_url: str | None = None
    linkedin_url: str | None = None
    twitter_url: str | None = None
    email: str | None = None
    primary_color: str | None = None
    secondary_color: str | None = None
    accent_color: str | None = None
    template_id: str | None = None


class PortfolioResponse(BaseModel):
    """Full portfolio record as seen by its owner."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    display_name: str | None
    tagline: str | None
    bio: str | None
    avatar_url: str | None
    hero_title: str | None
    hero_subtitle: str | None
    cta_text: str | None
    cta_url: str | None
    github_url: str | None
    linkedin_url: str | None
    twitter_url: str | None
    email: str | None
    primary_color: str
    secondary_color: str
    accent_color: str
    template_id: str
    is_published: bool
    views_count: int
    created_at: datetime | None
    updated_at: datetime | None


class PortfolioSummaryResponse(BaseModel):
    """Dashboard row."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    display_name: str | None
    is_published: bool
    views_count: int
    public_url: str
    updated_at: datetime | None


class CompletionResponse(BaseModel):
    profile: bool
    projects: bool
    skills: bool
    theme: bool
    completed_count: int
    progress_percent: int

    @classmethod
    def from_status(cls, status: CompletionStatus) -> CompletionResponse:
        return cls(
            **status.as_dict(),
            completed_count=status.completed_count,
            progress_percent=status.progress_percent,
        )


class EditorSnapshotResponse(BaseModel):
    """Everything the editor needs in one read."""

    portfolio: PortfolioResponse
    projects: list[ProjectResponse]
    skills: list[SkillResponse]
    completion: CompletionResponse


class PublishResponse(BaseModel):
    is_published: bool


class PublicPortfolioResponse(BaseModel):
    """Read-only payload for the public portfolio page."""

    username: str
    display_name: str | None
    tagline: str | None
    bio: str | None
    avatar_url: str | None
    hero_title: str | None
    hero_subtitle: str | None
    cta_text: str | None
    cta_url: str | None
    github_url: str | None
    linkedin_url: str | None
    twitter_url: str | None
    email: str | None
    primary_color: str
    secondary_color: str
    accent_color: str
    template_id: str
    views_count: int
    public_url: str
    title: str
    description: str
    projects: list[ProjectResponse]
    skills: list[SkillResponse]

    @classmethod
    def from_public(cls, public: PublicPortfolio) -> PublicPortfolioResponse:
        portfolio = public.portfolio
        return cls(
            username=portfolio.username,
            display_name=portfolio.display_name,
            tagline=portfolio.tagline,
            bio=portfolio.bio,
            avatar_url=portfolio.avatar_url,
            hero_title=portfolio.hero_title,
            hero_subtitle=portfolio.hero_subtitle,
            cta_text=portfolio.cta_text,
            cta_url=portfolio.cta_url,
            github_url=portfolio.github_url,
            linkedin_url=portfolio.linkedin_url,
            twitter_url=portfolio.twitter_url,
            email=portfolio.email,
            primary_color=portfolio.primary_color,
            secondary_color=portfolio.secondary_color,
            accent_color=portfolio.accent_color,
            template_id=portfolio.template_id,
            views_count=portfolio.views_count,
            public_url=public.public_url,
            title=public.page_title,
            description=public.page_description,
            projects=[ProjectResponse.from_view(p) for p in public.projects],
            skills=[SkillResponse.model_validate(s) for s in public.skills],
        )
