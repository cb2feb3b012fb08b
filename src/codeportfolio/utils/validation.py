"""Field-level input checks shared by the portfolio, project and skill services."""

from __future__ import annotations

import re
from collections.abc import Iterable
from urllib.parse import urlparse

from codeportfolio.constants.portfolio_constants import HEX_COLOR_PATTERN
from codeportfolio.models.errors import ValidationError

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def clean_optional_text(value: str | None) -> str | None:
    """Return ``value`` stripped, or None when it is empty."""
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def require_text(value: str | None, field: str, message: str) -> str:
    """Return the stripped value or raise ValidationError when it is blank."""
    cleaned = clean_optional_text(value)
    if cleaned is None:
        raise ValidationError(message, field=field)
    return cleaned


def validate_url(value: str | None, field: str, *, allow_relative: bool = False) -> str | None:
    """Return a cleaned absolute http(s) URL, or None when blank.

    With ``allow_relative`` a site-relative path such as ``/media/a.png`` is
    also accepted.
    """
    cleaned = clean_optional_text(value)
    if cleaned is None:
        return None
    if allow_relative and cleaned.startswith("/") and not cleaned.startswith("//"):
        return cleaned
    parsed = urlparse(cleaned)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError(f"{field} must be a valid http(s) URL", field=field)
    return cleaned


def validate_email(value: str | None, field: str = "email") -> str | None:
    cleaned = clean_optional_text(value)
    if cleaned is None:
        return None
    if not _EMAIL_PATTERN.match(cleaned):
        raise ValidationError("Enter a valid email address", field=field)
    return cleaned


def validate_hex_color(value: str | None, field: str) -> str:
    cleaned = clean_optional_text(value)
    if cleaned is None or not HEX_COLOR_PATTERN.match(cleaned):
        raise ValidationError(f"{field} must be a hex color like #4F46E5", field=field)
    return cleaned.upper()


def normalize_tech_stack(values: Iterable[str] | None) -> list[str]:
    """Trim entries, drop blanks and keep the first occurrence of each name."""
    result: list[str] = []
    for value in values or ():
        cleaned = value.strip()
        if cleaned and cleaned not in result:
            result.append(cleaned)
    return result
