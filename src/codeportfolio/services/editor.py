"""Editor session: the in-memory editing surface for one portfolio.

An :class:`EditorSession` holds the loaded snapshot, routes profile edits
through autosave, commits collection changes directly, and keeps the derived
completion flags and navigation gate in step with its local state.

Every user-initiated action is wrapped in one error boundary: a
:class:`PortfolioError` becomes a single :class:`Notification`, local state
is restored where the action was applied optimistically, and nothing is
re-raised. Any other exception is a bug and propagates.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Any, Literal, TypeVar

from codeportfolio.constants.portfolio_constants import (
    AUTOSAVE_DELAY_SECONDS,
    AUTOSAVE_TRACKED_FIELDS,
    THEME_PRESETS,
    EditorSection,
)
from codeportfolio.models.caller import CallerContext
from codeportfolio.models.errors import PortfolioError, ValidationError
from codeportfolio.models.views import EditorSnapshot, PortfolioView, ProjectView, SkillView
from codeportfolio.services import (
    portfolio_store,
    project_collection,
    publish,
    skill_collection,
)
from codeportfolio.services.autosave import AutosaveController
from codeportfolio.services.completion import (
    CompletionStatus,
    EditorNavigator,
    NavigationResult,
    compute_completion,
)
from codeportfolio.services.image_storage import BlobStore, ImageUpload

logger = logging.getLogger(__name__)

T = TypeVar("T")

__all__ = ["EditorSession", "Notification"]


@dataclass(frozen=True, slots=True)
class Notification:
    """One user-visible message produced by an editor action."""

    level: Literal["success", "error"]
    message: str
    kind: str | None = None
    field: str | None = None


class EditorSession:
    """Editing state for one portfolio, owned by one caller.

    Use :meth:`open` to load a session. Actions return their result (or
    ``None``/``False`` on failure) and append to :attr:`notifications`.
    """

    def __init__(
        self,
        caller: CallerContext,
        snapshot: EditorSnapshot,
        *,
        autosave_delay: float = AUTOSAVE_DELAY_SECONDS,
        store: BlobStore | None = None,
    ) -> None:
        self.caller = caller
        self.portfolio: PortfolioView = snapshot.portfolio
        self.projects: list[ProjectView] = list(snapshot.projects)
        self.skills: list[SkillView] = list(snapshot.skills)
        self.navigator = EditorNavigator()
        self.notifications: list[Notification] = []
        self._store = store
        self.autosave = AutosaveController(
            self._commit_profile,
            initial={f: getattr(self.portfolio, f) for f in AUTOSAVE_TRACKED_FIELDS},
            delay=autosave_delay,
            on_error=self._autosave_failed,
        )

    @classmethod
    def open(
        cls,
        caller: CallerContext,
        portfolio_id: int,
        *,
        autosave_delay: float = AUTOSAVE_DELAY_SECONDS,
        store: BlobStore | None = None,
    ) -> EditorSession:
        """Load a portfolio for editing.

        Raises:
            NotFoundError: The portfolio is missing or not owned by ``caller``;
                the caller should fall back to the dashboard.
        """
        snapshot = portfolio_store.load_editor_snapshot(caller, portfolio_id)
        return cls(caller, snapshot, autosave_delay=autosave_delay, store=store)

    # Derived state

    @property
    def completion(self) -> CompletionStatus:
        return compute_completion(self.portfolio, len(self.projects), len(self.skills))

    @property
    def section(self) -> EditorSection:
        return self.navigator.section

    # Error boundary

    def _notify(self, level: Literal["success", "error"], message: str, **kwargs: Any) -> None:
        self.notifications.append(Notification(level=level, message=message, **kwargs))

    def _fail(self, exc: PortfolioError) -> None:
        self._notify("error", exc.message, kind=exc.kind, field=exc.field)

    async def _run(
        self,
        action: Callable[..., Awaitable[T] | T],
        *args: Any,
        success: str | None = None,
        rollback: Callable[[], None] | None = None,
        **kwargs: Any,
    ) -> tuple[bool, T | None]:
        """Run one service call; synchronous ones go to a worker thread."""
        try:
            if inspect.iscoroutinefunction(action):
                result = await action(*args, **kwargs)
            else:
                result = await asyncio.to_thread(action, *args, **kwargs)
        except PortfolioError as exc:
            if rollback is not None:
                rollback()
            self._fail(exc)
            return False, None
        if success:
            self._notify("success", success)
        return True, result

    # Profile and theme (autosaved)

    def _commit_profile(self, fields: dict[str, Any]) -> None:
        portfolio_store.update_profile(self.caller, self.portfolio.id, fields)

    def _autosave_failed(self, exc: PortfolioError) -> None:
        self._notify("error", "Failed to save", kind=exc.kind, field=exc.field)

    def edit_profile_field(self, field: str, value: Any) -> None:
        """Apply an edit locally and schedule an autosave. Never discards the edit."""
        self.edit_profile({field: value})

    def edit_profile(self, changes: Mapping[str, Any]) -> None:
        untracked = [f for f in changes if f not in AUTOSAVE_TRACKED_FIELDS]
        if untracked:
            raise KeyError(f"Field '{untracked[0]}' is not an autosaved profile field")
        self.portfolio = replace(self.portfolio, **changes)
        if self.navigator.errors:
            self.navigator.errors = {
                k: v for k, v in self.navigator.errors.items() if k not in changes
            }
        self.autosave.edit_many(changes)

    def apply_theme_preset(self, name: str) -> bool:
        preset = THEME_PRESETS.get(name)
        if preset is None:
            self._fail(ValidationError(f"Unknown theme preset '{name}'", field="theme"))
            return False
        self.edit_profile(
            {
                "primary_color": preset.primary_color,
                "secondary_color": preset.secondary_color,
                "accent_color": preset.accent_color,
            }
        )
        return True

    async def set_avatar(self, upload: ImageUpload) -> bool:
        ok, view = await self._run(
            portfolio_store.set_avatar,
            self.caller,
            self.portfolio.id,
            upload,
            store=self._store,
            success="Avatar updated!",
        )
        if ok and view is not None:
            self.portfolio = replace(self.portfolio, avatar_url=view.avatar_url)
        return ok

    async def clear_avatar(self) -> bool:
        ok, _ = await self._run(
            portfolio_store.clear_avatar,
            self.caller,
            self.portfolio.id,
            store=self._store,
            success="Avatar removed",
        )
        if ok:
            self.portfolio = replace(self.portfolio, avatar_url=None)
        return ok

    # Navigation

    def _gate(self, result: NavigationResult) -> NavigationResult:
        if result.message:
            self._notify(
                "error", result.message, kind="validation", field=next(iter(result.errors))
            )
        return result

    def go_to(self, section: EditorSection) -> NavigationResult:
        return self._gate(
            self.navigator.go_to(section, self.portfolio, self.projects, self.skills)
        )

    def next_section(self) -> NavigationResult:
        return self._gate(self.navigator.next(self.portfolio, self.projects, self.skills))

    def previous_section(self) -> NavigationResult:
        return self.navigator.back()

    # Publish

    async def toggle_publish(self) -> bool:
        """Flip the displayed publish state first, then persist it.

        Returns the publish state shown after the action: the new one on
        success, the original one if persisting failed.
        """
        previous = self.portfolio.is_published
        self.portfolio = replace(self.portfolio, is_published=not previous)

        def _revert() -> None:
            self.portfolio = replace(self.portfolio, is_published=previous)

        ok, new_state = await self._run(
            publish.toggle_publish,
            self.caller,
            self.portfolio.id,
            success="Portfolio unpublished" if previous else "Portfolio published!",
            rollback=_revert,
        )
        if ok and new_state is not None:
            self.portfolio = replace(self.portfolio, is_published=new_state)
        return self.portfolio.is_published

    # Projects

    async def add_project(
        self, fields: project_collection.ProjectFields | Mapping[str, Any]
    ) -> ProjectView | None:
        ok, project = await self._run(
            project_collection.add_project,
            self.caller,
            self.portfolio.id,
            fields,
            success="Project added!",
        )
        if ok and project is not None:
            self.projects.append(project)
        return project

    async def update_project(
        self, project_id: int, fields: project_collection.ProjectFields | Mapping[str, Any]
    ) -> ProjectView | None:
        ok, project = await self._run(
            project_collection.update_project,
            self.caller,
            project_id,
            fields,
            success="Project updated!",
        )
        if ok and project is not None:
            self._replace_project(project)
        return project

    async def delete_project(self, project_id: int, *, confirmed: bool) -> bool:
        """Delete a project once the user has confirmed it."""
        if not confirmed:
            return False
        ok, _ = await self._run(
            project_collection.delete_project,
            self.caller,
            project_id,
            success="Project deleted",
        )
        if ok:
            self.projects = [p for p in self.projects if p.id != project_id]
        return ok

    async def reorder_projects(self, ordered_ids: Sequence[int]) -> bool:
        """Show the new order immediately, persist it, restore it on failure.

        Partial writes are not undone when persisting fails; the restored
        display order is corrected by the next successful reorder.
        """
        previous = list(self.projects)
        by_id = {p.id: p for p in self.projects}
        ordered = [by_id[pid] for pid in ordered_ids if pid in by_id]
        ordered += [p for p in self.projects if p.id not in set(ordered_ids)]
        self.projects = [replace(p, display_order=i) for i, p in enumerate(ordered)]

        def _restore() -> None:
            self.projects = previous

        ok, result = await self._run(
            project_collection.reorder_projects,
            self.caller,
            self.portfolio.id,
            [p.id for p in ordered],
            success="Project order updated",
            rollback=_restore,
        )
        if ok and result is not None and result.skipped:
            skipped = set(result.skipped)
            self.projects = [p for p in self.projects if p.id not in skipped]
        return ok

    async def move_project(self, project_id: int, new_index: int) -> bool:
        """Drag-and-drop helper: move one project to ``new_index`` and persist."""
        ids = [p.id for p in self.projects]
        if project_id not in ids:
            return False
        old_index = ids.index(project_id)
        new_index = max(0, min(new_index, len(ids) - 1))
        if old_index == new_index:
            return True
        ids.insert(new_index, ids.pop(old_index))
        return await self.reorder_projects(ids)

    async def upload_project_images(
        self, project_id: int, uploads: Sequence[ImageUpload]
    ) -> ProjectView | None:
        ok, project = await self._run(
            project_collection.upload_project_images,
            self.caller,
            project_id,
            uploads,
            store=self._store,
            success=f"{len(uploads)} image(s) uploaded!",
        )
        if ok and project is not None:
            self._replace_project(project)
        return project

    async def remove_project_image(self, project_id: int, url: str) -> ProjectView | None:
        ok, project = await self._run(
            project_collection.remove_project_image,
            self.caller,
            project_id,
            url,
            store=self._store,
            success="Image removed",
        )
        if ok and project is not None:
            self._replace_project(project)
        return project

    def _replace_project(self, project: ProjectView) -> None:
        self.projects = [project if p.id == project.id else p for p in self.projects]

    # Skills

    async def add_skill(self, name: str, category: str | None = None) -> SkillView | None:
        ok, skill = await self._run(
            skill_collection.add_skill,
            self.caller,
            self.portfolio.id,
            name,
            category,
            success="Skill added!",
        )
        if ok and skill is not None:
            self.skills.append(skill)
        return skill

    async def delete_skill(self, skill_id: int) -> bool:
        ok, _ = await self._run(
            skill_collection.delete_skill,
            self.caller,
            skill_id,
            success="Skill removed",
        )
        if ok:
            self.skills = [s for s in self.skills if s.id != skill_id]
        return ok

    # Lifecycle

    async def flush(self) -> None:
        """Wait until any scheduled autosave has run."""
        await self.autosave.wait_idle()

    def close(self) -> None:
        """Tear down: drop any pending autosave without committing it."""
        self.autosave.close()
        logger.debug("Closed editor session for portfolio %d", self.portfolio.id)
