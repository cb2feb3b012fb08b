"""Route handlers for the API."""

from codeportfolio.api.routes import (
    health,
    media,
    portfolios,
    projects,
    public,
    skills,
    usernames,
)

__all__ = [
    "health",
    "media",
    "portfolios",
    "projects",
    "public",
    "skills",
    "usernames",
]
