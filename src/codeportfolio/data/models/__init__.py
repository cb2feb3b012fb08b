"""ORM models package for database tables.

This package provides SQLAlchemy ORM models representing database tables:
- Portfolio: Profile, theme and publish state for one public page
- Project: Ordered showcase entries belonging to a portfolio
- Skill: Competency tags belonging to a portfolio

All models inherit from the shared Base declarative class defined in data.db.
"""

from codeportfolio.data.db import Base
from codeportfolio.data.models.portfolio import Portfolio
from codeportfolio.data.models.project import Project
from codeportfolio.data.models.skill import Skill

__all__ = ["Base", "Portfolio", "Project", "Skill"]
