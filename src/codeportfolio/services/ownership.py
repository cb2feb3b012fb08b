"""Identity and ownership gate shared by the editor services.

Every mutation is scoped to records owned by the calling user. A record that
exists but belongs to someone else is reported exactly like a missing one.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from codeportfolio.data.db import get_session
from codeportfolio.data.models import Portfolio, Project, Skill
from codeportfolio.models.caller import CallerContext
from codeportfolio.models.errors import NotFoundError, PersistenceError

logger = logging.getLogger(__name__)

__all__ = [
    "require_portfolio",
    "require_project",
    "require_skill",
    "store_session",
]


@contextmanager
def store_session(action: str) -> Iterator[Session]:
    """Open a transactional session, converting store failures to PersistenceError.

    Args:
        action: Short description used in the log line and the error message,
            e.g. ``"update profile"``.
    """
    try:
        with get_session() as session:
            yield session
    except SQLAlchemyError as exc:
        logger.exception("Persistence failure while trying to %s", action)
        raise PersistenceError(f"Failed to {action}. Please try again.") from exc


def require_portfolio(session: Session, caller: CallerContext, portfolio_id: int) -> Portfolio:
    """Return the caller's portfolio or raise NotFoundError."""
    portfolio = (
        session.query(Portfolio)
        .filter(Portfolio.id == portfolio_id, Portfolio.owner_id == caller.user_id)
        .first()
    )
    if portfolio is None:
        raise NotFoundError("Portfolio not found.")
    return portfolio


def require_project(session: Session, caller: CallerContext, project_id: int) -> Project:
    """Return a project whose portfolio the caller owns, or raise NotFoundError."""
    project = (
        session.query(Project)
        .join(Portfolio, Portfolio.id == Project.portfolio_id)
        .filter(Project.id == project_id, Portfolio.owner_id == caller.user_id)
        .first()
    )
    if project is None:
        raise NotFoundError("Project not found.")
    return project


def require_skill(session: Session, caller: CallerContext, skill_id: int) -> Skill:
    """Return a skill whose portfolio the caller owns, or raise NotFoundError."""
    skill = (
        session.query(Skill)
        .join(Portfolio, Portfolio.id == Skill.portfolio_id)
        .filter(Skill.id == skill_id, Portfolio.owner_id == caller.user_id)
        .first()
    )
    if skill is None:
        raise NotFoundError("Skill not found.")
    return skill
