"""ORM model representing a showcased project within a portfolio."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from codeportfolio.data.db import Base

if TYPE_CHECKING:
    from codeportfolio.data.models.portfolio import Portfolio


class Project(Base):
    """A work item shown on a portfolio page.

    Attributes:
        id: Auto-incrementing primary key.
        portfolio_id: Foreign key to the owning portfolio (CASCADE on delete).
        title: Required, non-empty project title.
        image_urls: Ordered list of up to five image URLs; index 0 is the cover.
            Stored as a JSON array, never NULL (empty list when no images).
        tech_stack: Ordered list of distinct technology names.
        display_order: Relative position within the portfolio. Gaps and ties
            are tolerated; only the relative value matters.
    """

    __tablename__ = "projects"
    __table_args__ = (Index("ix_projects_portfolio_order", "portfolio_id", "display_order"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    portfolio_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("portfolios.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_urls: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    demo_url: Mapped[str | None] = mapped_column(String, nullable=True)
    github_url: Mapped[str | None] = mapped_column(String, nullable=True)
    tech_stack: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    portfolio: Mapped[Portfolio] = relationship("Portfolio", back_populates="projects")
