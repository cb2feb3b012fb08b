"""Publish toggle and the public read path.

A portfolio resolves publicly only when the requested username matches the
stored one exactly and the portfolio is published. A missing username and an
unpublished one produce the same ``None`` result, so the public surface never
reveals which usernames exist.
"""

from __future__ import annotations

import logging

from sqlalchemy import update

from codeportfolio.data.models import Portfolio, Project, Skill
from codeportfolio.models.caller import CallerContext
from codeportfolio.models.views import PortfolioView, ProjectView, PublicPortfolio, SkillView
from codeportfolio.services.ownership import require_portfolio, store_session
from codeportfolio.services.portfolio_store import increment_views
from codeportfolio.services.username_registry import public_url_for

logger = logging.getLogger(__name__)

__all__ = [
    "render_public_portfolio",
    "resolve_public_portfolio",
    "toggle_publish",
]


def toggle_publish(caller: CallerContext, portfolio_id: int) -> bool:
    """Flip ``is_published`` and return the new value.

    Only the publish column is written, so a concurrent profile autosave is
    never overwritten.
    """
    with store_session("update publish state") as session:
        portfolio = require_portfolio(session, caller, portfolio_id)
        new_state = not portfolio.is_published
        session.execute(
            update(Portfolio)
            .where(Portfolio.id == portfolio.id)
            .values(is_published=new_state)
        )
    logger.info(
        "Portfolio %d %s", portfolio_id, "published" if new_state else "unpublished"
    )
    return new_state


def resolve_public_portfolio(username: str) -> PublicPortfolio | None:
    """Return the public payload for ``username`` or None.

    None covers every non-public case: no such username, an unpublished
    portfolio, or a username differing only in case.
    """
    with store_session("load portfolio") as session:
        portfolio = (
            session.query(Portfolio)
            .filter(Portfolio.username == username, Portfolio.is_published.is_(True))
            .first()
        )
        if portfolio is None:
            return None

        projects = (
            session.query(Project)
            .filter(Project.portfolio_id == portfolio.id)
            .order_by(Project.display_order.asc(), Project.id.asc())
            .all()
        )
        skills = session.query(Skill).filter(Skill.portfolio_id == portfolio.id).all()
        return PublicPortfolio(
            portfolio=PortfolioView.from_model(portfolio),
            projects=[ProjectView.from_model(p) for p in projects],
            skills=[SkillView.from_model(s) for s in skills],
            public_url=public_url_for(portfolio.username),
        )


def render_public_portfolio(username: str) -> PublicPortfolio | None:
    """Resolve the public payload and count the view exactly once.

    The view counter is best effort: a failure to bump it never fails the
    render.
    """
    payload = resolve_public_portfolio(username)
    if payload is not None:
        increment_views(payload.portfolio.id)
    return payload
