"""Async paths must open database sessions in worker threads, never on the loop."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable

import pytest

from codeportfolio.data import db
from codeportfolio.models.caller import CallerContext
from codeportfolio.services import (
    ownership,
    portfolio_store,
    project_collection,
    username_registry,
)
from codeportfolio.services.editor import EditorSession
from codeportfolio.services.image_storage import BlobStore
from conftest import png_upload


class SessionThreads:
    """Thread ids of every database session opened while installed."""

    def __init__(self) -> None:
        self.idents: list[int] = []
        self.loop_ident: int | None = None

    def __call__(self):
        self.idents.append(threading.get_ident())
        return db.get_session()

    def run(self, scenario: Callable[[], object]) -> None:
        async def wrapped() -> None:
            self.loop_ident = threading.get_ident()
            await scenario()

        self.idents.clear()
        asyncio.run(wrapped())

    def assert_off_loop(self) -> None:
        assert self.idents, "no database session was opened"
        assert self.loop_ident not in self.idents


@pytest.fixture
def session_threads(monkeypatch: pytest.MonkeyPatch) -> SessionThreads:
    recorder = SessionThreads()
    for module in (ownership, portfolio_store, username_registry):
        monkeypatch.setattr(module, "get_session", recorder)
    return recorder


@pytest.fixture
def portfolio_id(caller: CallerContext) -> int:
    return portfolio_store.create_portfolio(caller, "jane").id


def test_image_upload_and_removal_stay_off_the_loop(
    caller: CallerContext,
    store: BlobStore,
    portfolio_id: int,
    session_threads: SessionThreads,
) -> None:
    project = project_collection.add_project(caller, portfolio_id, {"title": "Demo"})

    async def upload() -> None:
        await project_collection.upload_project_images(
            caller, project.id, [png_upload()], store=store
        )

    session_threads.run(upload)
    session_threads.assert_off_loop()

    url = project_collection.list_projects(caller, portfolio_id)[0].image_urls[0]

    async def remove() -> None:
        await project_collection.remove_project_image(caller, project.id, url, store=store)

    session_threads.run(remove)
    session_threads.assert_off_loop()


def test_avatar_set_and_clear_stay_off_the_loop(
    caller: CallerContext,
    store: BlobStore,
    portfolio_id: int,
    session_threads: SessionThreads,
) -> None:
    async def set_avatar() -> None:
        await portfolio_store.set_avatar(caller, portfolio_id, png_upload(), store=store)

    session_threads.run(set_avatar)
    session_threads.assert_off_loop()

    async def clear_avatar() -> None:
        await portfolio_store.clear_avatar(caller, portfolio_id, store=store)

    session_threads.run(clear_avatar)
    session_threads.assert_off_loop()


def test_editor_actions_and_autosave_stay_off_the_loop(
    caller: CallerContext,
    store: BlobStore,
    portfolio_id: int,
    session_threads: SessionThreads,
) -> None:
    session = EditorSession.open(caller, portfolio_id, autosave_delay=0.01, store=store)

    async def scenario() -> None:
        session.edit_profile_field("display_name", "Jane")
        await session.flush()
        await session.add_project({"title": "Demo"})
        await session.add_skill("Go")
        await session.toggle_publish()

    session_threads.run(scenario)
    session_threads.assert_off_loop()

    assert not [n for n in session.notifications if n.level == "error"]
    stored = portfolio_store.get_portfolio(caller, portfolio_id)
    assert stored.display_name == "Jane"
    assert stored.is_published is True
