from __future__ import annotations

from codeportfolio.constants.portfolio_constants import (
    SECTION_ORDER,
    THEME_PRESETS,
    EditorSection,
    TemplateId,
    ThemePreset,
)

__all__ = [
    "EditorSection",
    "SECTION_ORDER",
    "TemplateId",
    "ThemePreset",
    "THEME_PRESETS",
]
