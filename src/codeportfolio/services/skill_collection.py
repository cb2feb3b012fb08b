"""Skill collection manager.

Skill names are free-form tags: they are trimmed but neither deduplicated nor
case-normalised, so adding "Rust" twice yields two skills.
"""

from __future__ import annotations

import logging

from codeportfolio.data.models import Skill
from codeportfolio.models.caller import CallerContext
from codeportfolio.models.views import SkillView
from codeportfolio.services.ownership import require_portfolio, require_skill, store_session
from codeportfolio.utils.validation import clean_optional_text, require_text

logger = logging.getLogger(__name__)

__all__ = ["add_skill", "delete_skill", "list_skills"]


def list_skills(caller: CallerContext, portfolio_id: int) -> list[SkillView]:
    """Return the portfolio's skills in insertion order."""
    with store_session("load skills") as session:
        require_portfolio(session, caller, portfolio_id)
        skills = (
            session.query(Skill)
            .filter(Skill.portfolio_id == portfolio_id)
            .order_by(Skill.id.asc())
            .all()
        )
        return [SkillView.from_model(s) for s in skills]


def add_skill(
    caller: CallerContext, portfolio_id: int, name: str, category: str | None = None
) -> SkillView:
    """Add a skill to a portfolio.

    Raises:
        ValidationError: ``name`` is blank after trimming.
        NotFoundError: No portfolio with that id is owned by the caller.
    """
    cleaned_name = require_text(name, "name", "Please enter a skill name")
    with store_session("add skill") as session:
        require_portfolio(session, caller, portfolio_id)
        skill = Skill(
            portfolio_id=portfolio_id,
            name=cleaned_name,
            category=clean_optional_text(category),
        )
        session.add(skill)
        session.flush()
        return SkillView.from_model(skill)


def delete_skill(caller: CallerContext, skill_id: int) -> None:
    """Delete a skill. No confirmation step is involved."""
    with store_session("delete skill") as session:
        skill = require_skill(session, caller, skill_id)
        session.delete(skill)
