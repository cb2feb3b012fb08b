"""Debounced autosave of profile fields.

Each edit cancels the pending save and schedules a new one ``delay`` seconds
out, so a burst of edits collapses into a single commit of the latest values.
Once the delay has elapsed the commit is in flight and is no longer cancelled
by later edits; those simply schedule another commit. Closing the controller
drops a pending save without flushing it.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

from codeportfolio.constants.portfolio_constants import (
    AUTOSAVE_DELAY_SECONDS,
    AUTOSAVE_TRACKED_FIELDS,
    PROFILE_TEXT_FIELDS,
)
from codeportfolio.models.errors import PortfolioError

logger = logging.getLogger(__name__)

CommitFn = Callable[[dict[str, Any]], Awaitable[Any] | Any]
ErrorFn = Callable[[PortfolioError], None]

__all__ = ["AutosaveController"]


class AutosaveController:
    """Schedules profile commits on the running event loop.

    Args:
        commit: Called with the full tracked-field mapping. Async callables are
            awaited; plain ones run in a worker thread.
        initial: Starting values (usually the loaded portfolio).
        delay: Debounce window in seconds.
        tracked_fields: Fields included in every commit.
        content_fields: Fields inspected by the blank check. Theme colours are
            always populated, so they are left out of it by default.
        on_error: Receives commit failures; the in-memory values are kept.
        on_saved: Called with the committed values after a successful commit.
    """

    def __init__(
        self,
        commit: CommitFn,
        initial: Mapping[str, Any] | None = None,
        *,
        delay: float = AUTOSAVE_DELAY_SECONDS,
        tracked_fields: Iterable[str] = AUTOSAVE_TRACKED_FIELDS,
        content_fields: Iterable[str] = PROFILE_TEXT_FIELDS,
        on_error: ErrorFn | None = None,
        on_saved: Callable[[dict[str, Any]], None] | None = None,
    ) -> None:
        self._commit = commit
        self._delay = delay
        self._tracked = tuple(tracked_fields)
        self._content = tuple(f for f in content_fields if f in self._tracked)
        self._on_error = on_error
        self._on_saved = on_saved
        initial = initial or {}
        self.values: dict[str, Any] = {f: initial.get(f) for f in self._tracked}
        self._pending: asyncio.Task[None] | None = None
        self._in_flight: set[asyncio.Task[None]] = set()
        self._closed = False
        self.commit_count = 0
        self.last_error: PortfolioError | None = None

    @property
    def has_pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    @property
    def closed(self) -> bool:
        return self._closed

    def edit(self, field: str, value: Any) -> None:
        """Record an edit to one tracked field and restart the debounce timer."""
        self.edit_many({field: value})

    def edit_many(self, changes: Mapping[str, Any]) -> None:
        if self._closed:
            raise RuntimeError("Autosave controller is closed")
        untracked = [f for f in changes if f not in self._tracked]
        if untracked:
            raise KeyError(f"Field '{untracked[0]}' is not autosaved")
        self.values.update(changes)
        self._reschedule()

    def _reschedule(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        loop = asyncio.get_running_loop()
        self._pending = loop.create_task(self._wait_then_commit())

    async def _wait_then_commit(self) -> None:
        await asyncio.sleep(self._delay)
        # From here on the commit belongs to the in-flight set and is never cancelled.
        task = asyncio.current_task()
        if self._pending is task:
            self._pending = None
        if task is not None:
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)
        await self.commit_now()

    def _is_blank(self) -> bool:
        return not any(
            isinstance(value, str) and value.strip()
            for value in (self.values.get(name) for name in self._content)
        )

    async def commit_now(self) -> bool:
        """Commit the current values immediately.

        Returns:
            True if a commit was issued and succeeded, False if it was skipped
            because every content field is blank or if it failed.
        """
        if self._is_blank():
            logger.debug("Autosave skipped: all profile fields are empty")
            return False

        snapshot = dict(self.values)
        try:
            if inspect.iscoroutinefunction(self._commit):
                await self._commit(snapshot)
            else:
                await asyncio.to_thread(self._commit, snapshot)
        except PortfolioError as exc:
            logger.warning("Autosave failed: %s", exc.message)
            self.last_error = exc
            if self._on_error is not None:
                self._on_error(exc)
            return False

        self.commit_count += 1
        self.last_error = None
        if self._on_saved is not None:
            self._on_saved(snapshot)
        return True

    async def wait_idle(self) -> None:
        """Wait for the pending save (if any) and every in-flight commit.

        A commit that failed with anything other than :class:`PortfolioError`
        is re-raised here.
        """
        while True:
            tasks = [
                t for t in (self._pending, *self._in_flight) if t is not None and not t.done()
            ]
            if not tasks:
                return
            results = await asyncio.gather(*tasks, return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    raise result

    def close(self) -> None:
        """Cancel a pending save without committing it. In-flight commits finish."""
        self._closed = True
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
