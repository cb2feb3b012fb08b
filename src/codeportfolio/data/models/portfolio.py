"""ORM model representing a user's public portfolio page.

A portfolio holds the profile and theme fields edited in the editor, the
publish flag checked by the public read path, and owns its projects and
skills (cascade-deleted with it).
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from codeportfolio.constants.portfolio_constants import (
    DEFAULT_ACCENT_COLOR,
    DEFAULT_PRIMARY_COLOR,
    DEFAULT_SECONDARY_COLOR,
    DEFAULT_TEMPLATE_ID,
    USERNAME_MAX_LENGTH,
)
from codeportfolio.data.db import Base

if TYPE_CHECKING:
    from codeportfolio.data.models.project import Project
    from codeportfolio.data.models.skill import Skill


class Portfolio(Base):
    """Public-facing profile record owned by one user.

    Attributes:
        id: Auto-incrementing primary key.
        owner_id: Identifier of the owning user, issued by the session provider.
        username: Globally unique, lowercase handle used in the public URL.
        is_published: Sole gate for public visibility.
        views_count: Monotonic counter bumped once per public render.
    """

    __tablename__ = "portfolios"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    username: Mapped[str] = mapped_column(
        String(USERNAME_MAX_LENGTH), unique=True, nullable=False, index=True
    )

    display_name: Mapped[str | None] = mapped_column(String, nullable=True)
    tagline: Mapped[str | None] = mapped_column(String, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String, nullable=True)
    hero_title: Mapped[str | None] = mapped_column(String, nullable=True)
    hero_subtitle: Mapped[str | None] = mapped_column(String, nullable=True)
    cta_text: Mapped[str | None] = mapped_column(String, nullable=True)
    cta_url: Mapped[str | None] = mapped_column(String, nullable=True)
    github_url: Mapped[str | None] = mapped_column(String, nullable=True)
    linkedin_url: Mapped[str | None] = mapped_column(String, nullable=True)
    twitter_url: Mapped[str | None] = mapped_column(String, nullable=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True)

    primary_color: Mapped[str] = mapped_column(
        String(7), nullable=False, default=DEFAULT_PRIMARY_COLOR
    )
    secondary_color: Mapped[str] = mapped_column(
        String(7), nullable=False, default=DEFAULT_SECONDARY_COLOR
    )
    accent_color: Mapped[str] = mapped_column(
        String(7), nullable=False, default=DEFAULT_ACCENT_COLOR
    )
    template_id: Mapped[str] = mapped_column(
        String(32), nullable=False, default=DEFAULT_TEMPLATE_ID.value
    )

    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    views_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    projects: Mapped[list[Project]] = relationship(
        "Project",
        back_populates="portfolio",
        cascade="all, delete-orphan",
    )
    skills: Mapped[list[Skill]] = relationship(
        "Skill",
        back_populates="portfolio",
        cascade="all, delete-orphan",
    )
