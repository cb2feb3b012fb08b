from __future__ import annotations

import asyncio

import pytest

from codeportfolio.constants.portfolio_constants import EditorSection
from codeportfolio.models.caller import CallerContext
from codeportfolio.models.errors import NotFoundError, PersistenceError
from codeportfolio.services import portfolio_store, project_collection, publish
from codeportfolio.services.editor import EditorSession
from codeportfolio.services.image_storage import BlobStore
from conftest import png_upload

DELAY = 0.01


def _raise_persistence(*args, **kwargs):
    raise PersistenceError("Failed to save. Please try again.")


@pytest.fixture
def session(caller: CallerContext, store: BlobStore) -> EditorSession:
    view = portfolio_store.create_portfolio(caller, "jane")
    return EditorSession.open(caller, view.id, autosave_delay=DELAY, store=store)


def test_full_setup_scenario_unblocks_navigation(
    caller: CallerContext, session: EditorSession
) -> None:
    async def scenario() -> None:
        session.edit_profile_field("display_name", "Jane Doe")
        session.edit_profile_field("tagline", "Systems engineer")
        await session.flush()
        await session.add_project({"title": "Demo"})
        for name in ("Go", "Rust", "TS"):
            await session.add_skill(name)

    asyncio.run(scenario())

    status = session.completion
    assert status.as_dict() == {
        "profile": True,
        "projects": True,
        "skills": True,
        "theme": True,
    }
    for expected in (EditorSection.PROJECTS, EditorSection.SKILLS, EditorSection.THEME):
        result = session.next_section()
        assert result.allowed
        assert session.section is expected

    stored = portfolio_store.get_portfolio(caller, session.portfolio.id)
    assert stored.display_name == "Jane Doe"
    assert stored.tagline == "Systems engineer"


def test_gate_failure_becomes_a_notification(session: EditorSession) -> None:
    result = session.next_section()

    assert not result.allowed
    assert session.section is EditorSection.PROFILE
    note = session.notifications[-1]
    assert note.level == "error"
    assert note.message == "Display name is required"
    assert note.field == "display_name"


def test_open_unknown_portfolio_raises(caller: CallerContext) -> None:
    with pytest.raises(NotFoundError):
        EditorSession.open(caller, 12345)


def test_publish_is_optimistic_and_reverts_on_failure(
    session: EditorSession, monkeypatch: pytest.MonkeyPatch
) -> None:
    shown_while_saving: list[bool] = []
    real_toggle = publish.toggle_publish

    def recording_toggle(caller, portfolio_id):
        shown_while_saving.append(session.portfolio.is_published)
        return real_toggle(caller, portfolio_id)

    def failing_toggle(caller, portfolio_id):
        shown_while_saving.append(session.portfolio.is_published)
        _raise_persistence()

    monkeypatch.setattr(publish, "toggle_publish", recording_toggle)

    assert asyncio.run(session.toggle_publish()) is True
    assert shown_while_saving == [True]
    assert session.portfolio.is_published is True
    assert session.notifications[-1].message == "Portfolio published!"

    monkeypatch.setattr(publish, "toggle_publish", failing_toggle)

    assert asyncio.run(session.toggle_publish()) is True
    assert shown_while_saving == [True, False]
    assert session.portfolio.is_published is True
    assert session.notifications[-1].level == "error"
    assert session.notifications[-1].kind == "persistence"


def test_reorder_restores_previous_order_on_failure(
    session: EditorSession, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def add_three() -> list[int]:
        return [(await session.add_project({"title": t})).id for t in "abc"]

    a, b, c = asyncio.run(add_three())

    assert asyncio.run(session.reorder_projects([c, a, b]))
    assert [p.title for p in session.projects] == ["c", "a", "b"]

    monkeypatch.setattr(project_collection, "reorder_projects", _raise_persistence)

    assert not asyncio.run(session.move_project(a, 2))
    assert [p.title for p in session.projects] == ["c", "a", "b"]
    assert session.notifications[-1].level == "error"


def test_move_project_persists(caller: CallerContext, session: EditorSession) -> None:
    async def scenario() -> None:
        for title in "abc":
            await session.add_project({"title": title})
        await session.move_project(session.projects[0].id, 2)

    asyncio.run(scenario())

    assert [p.title for p in session.projects] == ["b", "c", "a"]
    stored = project_collection.list_projects(caller, session.portfolio.id)
    assert [p.title for p in stored] == ["b", "c", "a"]


def test_delete_requires_confirmation(session: EditorSession) -> None:
    project = asyncio.run(session.add_project({"title": "Demo"}))

    assert not asyncio.run(session.delete_project(project.id, confirmed=False))
    assert len(session.projects) == 1

    assert asyncio.run(session.delete_project(project.id, confirmed=True))
    assert session.projects == []


def test_validation_errors_are_reported_per_field(session: EditorSession) -> None:
    result = asyncio.run(session.add_project({"title": ""}))

    assert result is None
    note = session.notifications[-1]
    assert note.kind == "validation"
    assert note.field == "title"
    assert note.message == "Please enter a project title"


def test_sixth_image_is_rejected_and_sequence_unchanged(session: EditorSession) -> None:
    async def scenario() -> None:
        project = await session.add_project({"title": "Demo"})
        await session.upload_project_images(project.id, [png_upload() for _ in range(5)])
        await session.upload_project_images(project.id, [png_upload()])

    asyncio.run(scenario())

    assert len(session.projects[0].image_urls) == 5
    assert session.notifications[-1].kind == "capacity"


def test_autosave_failure_keeps_local_edits(
    session: EditorSession, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(portfolio_store, "update_profile", _raise_persistence)

    async def scenario() -> None:
        session.edit_profile_field("display_name", "Jane")
        await session.flush()

    asyncio.run(scenario())

    assert session.portfolio.display_name == "Jane"
    assert session.notifications[-1].message == "Failed to save"


def test_theme_preset(caller: CallerContext, session: EditorSession) -> None:
    async def scenario() -> None:
        session.edit_profile_field("display_name", "Jane")
        assert session.apply_theme_preset("emerald")
        await session.flush()

    asyncio.run(scenario())

    stored = portfolio_store.get_portfolio(caller, session.portfolio.id)
    assert stored.primary_color == "#059669"
    assert session.portfolio.accent_color == "#34D399"

    assert not session.apply_theme_preset("neon")
    assert session.notifications[-1].field == "theme"


def test_close_drops_pending_autosave(caller: CallerContext, session: EditorSession) -> None:
    async def scenario() -> None:
        session.edit_profile_field("display_name", "Unsaved")
        session.close()
        await asyncio.sleep(DELAY * 5)

    asyncio.run(scenario())

    assert portfolio_store.get_portfolio(caller, session.portfolio.id).display_name is None
