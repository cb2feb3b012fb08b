"""Setup-completeness flags and the forward-navigation gate of the editor.

Everything here is a pure function of the editor's in-memory state; nothing
is persisted. Gating only restricts moving forward between sections. Going
back is always allowed, and publishing is never gated.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from codeportfolio.constants.portfolio_constants import (
    MIN_PROJECTS_FOR_COMPLETION,
    MIN_SKILLS_FOR_COMPLETION,
    SECTION_ORDER,
    EditorSection,
)
from codeportfolio.models.views import PortfolioView

__all__ = [
    "CompletionStatus",
    "EditorNavigator",
    "NavigationResult",
    "compute_completion",
    "section_errors",
]


def _filled(value: str | None) -> bool:
    return bool(value and value.strip())


@dataclass(frozen=True, slots=True)
class CompletionStatus:
    profile: bool
    projects: bool
    skills: bool
    theme: bool = True

    def is_complete(self, section: EditorSection) -> bool:
        return getattr(self, section.value)

    @property
    def completed_count(self) -> int:
        return sum(self.is_complete(section) for section in SECTION_ORDER)

    @property
    def progress_percent(self) -> int:
        return round(self.completed_count * 100 / len(SECTION_ORDER))

    def as_dict(self) -> dict[str, bool]:
        return {section.value: self.is_complete(section) for section in SECTION_ORDER}


def compute_completion(
    portfolio: PortfolioView, project_count: int, skill_count: int
) -> CompletionStatus:
    return CompletionStatus(
        profile=_filled(portfolio.display_name) and _filled(portfolio.tagline),
        projects=project_count >= MIN_PROJECTS_FOR_COMPLETION,
        skills=skill_count >= MIN_SKILLS_FOR_COMPLETION,
        theme=True,
    )


def section_errors(
    section: EditorSection, portfolio: PortfolioView, project_count: int, skill_count: int
) -> dict[str, str]:
    """Return the field -> message map explaining why ``section`` is incomplete."""
    errors: dict[str, str] = {}
    if section is EditorSection.PROFILE:
        if not _filled(portfolio.display_name):
            errors["display_name"] = "Display name is required"
        if not _filled(portfolio.tagline):
            errors["tagline"] = "Tagline is required to showcase your role"
    elif section is EditorSection.PROJECTS:
        if project_count < MIN_PROJECTS_FOR_COMPLETION:
            errors["projects"] = "Add at least one project to showcase your work"
    elif section is EditorSection.SKILLS:
        missing = MIN_SKILLS_FOR_COMPLETION - skill_count
        if missing > 0:
            plural = "" if missing == 1 else "s"
            errors["skills"] = (
                f"Add {missing} more skill{plural} (minimum {MIN_SKILLS_FOR_COMPLETION} required)"
            )
    return errors


@dataclass(frozen=True, slots=True)
class NavigationResult:
    allowed: bool
    section: EditorSection
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def message(self) -> str | None:
        if self.allowed or not self.errors:
            return None
        return next(iter(self.errors.values()))


class EditorNavigator:
    """Tracks the active editor section and enforces forward gating."""

    def __init__(self, section: EditorSection = EditorSection.PROFILE) -> None:
        self.section = section
        self.errors: dict[str, str] = {}

    def go_to(
        self,
        target: EditorSection,
        portfolio: PortfolioView,
        projects: Sequence[object],
        skills: Sequence[object],
    ) -> NavigationResult:
        """Move to ``target`` if every section being left behind is complete.

        A forward move that skips sections requires each skipped section to be
        complete as well. On rejection the active section does not change and
        the offending fields are recorded in :attr:`errors`.
        """
        current_index = SECTION_ORDER.index(self.section)
        target_index = SECTION_ORDER.index(target)

        for section in SECTION_ORDER[current_index:target_index]:
            errors = section_errors(section, portfolio, len(projects), len(skills))
            if errors:
                self.errors = errors
                return NavigationResult(allowed=False, section=self.section, errors=errors)

        self.section = target
        self.errors = {}
        return NavigationResult(allowed=True, section=target)

    def next(
        self, portfolio: PortfolioView, projects: Sequence[object], skills: Sequence[object]
    ) -> NavigationResult:
        index = SECTION_ORDER.index(self.section)
        if index == len(SECTION_ORDER) - 1:
            return NavigationResult(allowed=False, section=self.section)
        return self.go_to(SECTION_ORDER[index + 1], portfolio, projects, skills)

    def back(self) -> NavigationResult:
        index = SECTION_ORDER.index(self.section)
        self.section = SECTION_ORDER[max(index - 1, 0)]
        self.errors = {}
        return NavigationResult(allowed=True, section=self.section)
