"""Limits, defaults and presets shared by the portfolio editor services."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
USERNAME_ALLOWED_PATTERN = re.compile(r"^[a-z0-9-]+$")
USERNAME_DISALLOWED_CHARS = re.compile(r"[^a-z0-9-]")

MAX_PROJECT_IMAGES = 5
MAX_IMAGE_BYTES = 5 * 1024 * 1024

MIN_PROJECTS_FOR_COMPLETION = 1
MIN_SKILLS_FOR_COMPLETION = 3

AUTOSAVE_DELAY_SECONDS = 2.0

DEFAULT_PRIMARY_COLOR = "#4F46E5"
DEFAULT_SECONDARY_COLOR = "#7C3AED"
DEFAULT_ACCENT_COLOR = "#EC4899"

HEX_COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")


class TemplateId(StrEnum):
    """Visual templates a portfolio can be rendered with."""

    MINIMAL = "minimal"
    MODERN = "modern"
    MODERN_DARK = "modern-dark"
    CREATIVE = "creative"


DEFAULT_TEMPLATE_ID = TemplateId.MINIMAL


class EditorSection(StrEnum):
    """Editor tabs, in their fixed forward order."""

    PROFILE = "profile"
    PROJECTS = "projects"
    SKILLS = "skills"
    THEME = "theme"


SECTION_ORDER: tuple[EditorSection, ...] = (
    EditorSection.PROFILE,
    EditorSection.PROJECTS,
    EditorSection.SKILLS,
    EditorSection.THEME,
)


@dataclass(frozen=True)
class ThemePreset:
    primary_color: str
    secondary_color: str
    accent_color: str


THEME_PRESETS: dict[str, ThemePreset] = {
    "indigo": ThemePreset(DEFAULT_PRIMARY_COLOR, DEFAULT_SECONDARY_COLOR, DEFAULT_ACCENT_COLOR),
    "emerald": ThemePreset("#059669", "#10B981", "#34D399"),
    "crimson": ThemePreset("#DC2626", "#EF4444", "#F87171"),
    "ocean": ThemePreset("#2563EB", "#3B82F6", "#60A5FA"),
}

# Fields the profile editor may write. username, id, owner_id, views_count and
# is_published are never part of a profile update.
PROFILE_TEXT_FIELDS = (
    "display_name",
    "tagline",
    "bio",
    "hero_title",
    "hero_subtitle",
    "cta_text",
    "cta_url",
    "github_url",
    "linkedin_url",
    "twitter_url",
    "email",
)
THEME_FIELDS = ("primary_color", "secondary_color", "accent_color", "template_id")
PROFILE_FIELDS = (*PROFILE_TEXT_FIELDS, "avatar_url", *THEME_FIELDS)

PROFILE_URL_FIELDS = ("cta_url", "github_url", "linkedin_url", "twitter_url", "avatar_url")
COLOR_FIELDS = ("primary_color", "secondary_color", "accent_color")

# Profile fields committed by autosave (everything the editor form holds).
AUTOSAVE_TRACKED_FIELDS = (*PROFILE_TEXT_FIELDS, *COLOR_FIELDS)
