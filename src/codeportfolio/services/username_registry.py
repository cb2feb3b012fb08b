"""Username registry: sanitising, validating and checking public handles.

Availability checks are advisory only. There is no reservation between a
check and the create call; the unique index on ``portfolios.username`` is the
final authority and ``create_portfolio`` rejects duplicates on its own.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from codeportfolio.constants.portfolio_constants import (
    USERNAME_ALLOWED_PATTERN,
    USERNAME_DISALLOWED_CHARS,
    USERNAME_MAX_LENGTH,
    USERNAME_MIN_LENGTH,
)
from codeportfolio.data.db import get_session
from codeportfolio.data.models import Portfolio
from codeportfolio.models.errors import InvalidUsernameError

logger = logging.getLogger(__name__)

__all__ = [
    "AvailabilityResult",
    "check_availability",
    "public_url_for",
    "sanitize_username",
    "validate_username",
]


@dataclass(frozen=True, slots=True)
class AvailabilityResult:
    """Outcome of an availability check.

    Attributes:
        username: The sanitised candidate the check was run for.
        available: True when free, False when taken, None when unknown
            (candidate too short, or the lookup failed).
    """

    username: str
    available: bool | None

    def allows_creation_of(self, candidate: str) -> bool:
        """Return True only if this result says ``candidate`` itself is free."""
        return self.available is True and self.username == sanitize_username(candidate)


def sanitize_username(raw: str) -> str:
    """Lowercase ``raw`` and strip every character outside ``[a-z0-9-]``."""
    return USERNAME_DISALLOWED_CHARS.sub("", raw.lower())


def validate_username(username: str) -> str:
    """Return the normalised (lowercased) username or raise InvalidUsernameError."""
    normalized = username.strip().lower()
    if not USERNAME_MIN_LENGTH <= len(normalized) <= USERNAME_MAX_LENGTH:
        raise InvalidUsernameError(
            f"Username must be between {USERNAME_MIN_LENGTH} and "
            f"{USERNAME_MAX_LENGTH} characters."
        )
    if not USERNAME_ALLOWED_PATTERN.match(normalized):
        raise InvalidUsernameError(
            "Username may only contain lowercase letters, numbers and hyphens."
        )
    return normalized


def check_availability(candidate: str) -> AvailabilityResult:
    """Check whether a sanitised candidate username is free.

    Candidates shorter than the minimum length return a neutral result without
    touching the database. Lookup failures are logged and also reported as
    neutral, so typing never surfaces an error.
    """
    username = sanitize_username(candidate)
    if len(username) < USERNAME_MIN_LENGTH:
        return AvailabilityResult(username=username, available=None)
    if len(username) > USERNAME_MAX_LENGTH:
        return AvailabilityResult(username=username, available=False)

    try:
        with get_session() as session:
            taken = (
                session.query(Portfolio.id).filter(Portfolio.username == username).first()
                is not None
            )
    except SQLAlchemyError:
        logger.exception("Username availability lookup failed for %s", username)
        return AvailabilityResult(username=username, available=None)

    return AvailabilityResult(username=username, available=not taken)


def public_url_for(username: str) -> str:
    """Return the public page URL derived from a username."""
    base = os.getenv("CODEPORTFOLIO_PUBLIC_BASE_URL", "http://localhost:8000/p").rstrip("/")
    return f"{base}/{username}"
