"""Detached, read-only snapshots of portfolio records.

Services return these instead of ORM instances so callers never touch a
session-bound object after its session has closed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from codeportfolio.models.image_sequence import ImageSequence

if TYPE_CHECKING:
    from codeportfolio.data.models import Portfolio, Project, Skill


@dataclass(slots=True)
class PortfolioView:
    id: int
    owner_id: str
    username: str
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
    primary_color: str = ""
    secondary_color: str = ""
    accent_color: str = ""
    template_id: str = ""
    is_published: bool = False
    views_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, portfolio: Portfolio) -> PortfolioView:
        return cls(
            id=portfolio.id,
            owner_id=portfolio.owner_id,
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
            is_published=bool(portfolio.is_published),
            views_count=portfolio.views_count or 0,
            created_at=portfolio.created_at,
            updated_at=portfolio.updated_at,
        )


@dataclass(slots=True)
class ProjectView:
    id: int
    portfolio_id: int
    title: str
    description: str | None = None
    image_urls: ImageSequence = field(default_factory=ImageSequence)
    demo_url: str | None = None
    github_url: str | None = None
    tech_stack: list[str] = field(default_factory=list)
    display_order: int = 0

    @property
    def cover_image(self) -> str | None:
        return self.image_urls.cover

    @classmethod
    def from_model(cls, project: Project) -> ProjectView:
        return cls(
            id=project.id,
            portfolio_id=project.portfolio_id,
            title=project.title,
            description=project.description,
            image_urls=ImageSequence.from_storage(project.image_urls),
            demo_url=project.demo_url,
            github_url=project.github_url,
            tech_stack=list(project.tech_stack or []),
            display_order=project.display_order,
        )


@dataclass(slots=True)
class SkillView:
    id: int
    portfolio_id: int
    name: str
    category: str | None = None

    @classmethod
    def from_model(cls, skill: Skill) -> SkillView:
        return cls(
            id=skill.id,
            portfolio_id=skill.portfolio_id,
            name=skill.name,
            category=skill.category,
        )


@dataclass(slots=True)
class EditorSnapshot:
    """Everything the editor loads in one read."""

    portfolio: PortfolioView
    projects: list[ProjectView] = field(default_factory=list)
    skills: list[SkillView] = field(default_factory=list)


@dataclass(slots=True)
class PortfolioSummary:
    """Dashboard card for one of the caller's portfolios."""

    id: int
    username: str
    display_name: str | None
    is_published: bool
    views_count: int
    public_url: str
    updated_at: datetime | None = None


@dataclass(slots=True)
class PublicPortfolio:
    """Payload handed to the public template renderer."""

    portfolio: PortfolioView
    projects: list[ProjectView]
    skills: list[SkillView]
    public_url: str

    @property
    def page_title(self) -> str:
        """Browser title for the public page."""
        return f"{self._owner_name} - Portfolio"

    @property
    def page_description(self) -> str:
        """Meta description: the tagline, or a generic invitation."""
        return self.portfolio.tagline or f"Check out {self._owner_name}'s portfolio"

    @property
    def _owner_name(self) -> str:
        return self.portfolio.display_name or self.portfolio.username
