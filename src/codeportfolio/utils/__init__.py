"""Utility functions and helpers"""

from codeportfolio.utils.validation import (
    clean_optional_text,
    normalize_tech_stack,
    require_text,
    validate_email,
    validate_hex_color,
    validate_url,
)

__all__ = [
    "clean_optional_text",
    "normalize_tech_stack",
    "require_text",
    "validate_email",
    "validate_hex_color",
    "validate_url",
]
