"""ORM model for skills listed on a portfolio.

Skill names are free-form tags: no uniqueness constraint is enforced, so the
same name may appear more than once on a portfolio.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from codeportfolio.data.db import Base

if TYPE_CHECKING:
    from codeportfolio.data.models.portfolio import Portfolio


class Skill(Base):
    """A named competency tag.

    Attributes:
        id: Auto-incrementing primary key.
        portfolio_id: Foreign key to the owning portfolio (CASCADE on delete).
        name: Non-empty skill name (e.g., "Rust").
        category: Optional free-text grouping (e.g., "Backend").
    """

    __tablename__ = "skills"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    portfolio_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("portfolios.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    category: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )

    portfolio: Mapped[Portfolio] = relationship("Portfolio", back_populates="skills")
