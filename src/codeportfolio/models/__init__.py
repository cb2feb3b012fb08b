"""Data models and type definitions"""

from codeportfolio.models.caller import CallerContext
from codeportfolio.models.errors import (
    CapacityError,
    DuplicateUsernameError,
    InvalidUsernameError,
    NotFoundError,
    PersistenceError,
    PortfolioError,
    StorageError,
    ValidationError,
)
from codeportfolio.models.image_sequence import ImageSequence
from codeportfolio.models.views import (
    EditorSnapshot,
    PortfolioSummary,
    PortfolioView,
    ProjectView,
    PublicPortfolio,
    SkillView,
)

__all__ = [
    "CallerContext",
    "CapacityError",
    "DuplicateUsernameError",
    "EditorSnapshot",
    "ImageSequence",
    "InvalidUsernameError",
    "NotFoundError",
    "PersistenceError",
    "PortfolioError",
    "PortfolioSummary",
    "PortfolioView",
    "ProjectView",
    "PublicPortfolio",
    "SkillView",
    "StorageError",
    "ValidationError",
]
