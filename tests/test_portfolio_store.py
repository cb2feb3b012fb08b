from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from codeportfolio.data.db import get_session
from codeportfolio.data.models import Portfolio, Project, Skill
from codeportfolio.models.caller import CallerContext
from codeportfolio.models.errors import (
    DuplicateUsernameError,
    InvalidUsernameError,
    NotFoundError,
    ValidationError,
)
from codeportfolio.services import portfolio_store, project_collection, skill_collection
from codeportfolio.services.image_storage import BlobStore
from conftest import png_upload


def test_create_portfolio_is_unpublished_with_defaults(caller: CallerContext) -> None:
    view = portfolio_store.create_portfolio(caller, "Jane")

    assert view.username == "jane"
    assert view.owner_id == caller.user_id
    assert view.is_published is False
    assert view.views_count == 0
    assert view.template_id == "minimal"
    assert view.primary_color == "#4F46E5"
    assert view.secondary_color == "#7C3AED"
    assert view.accent_color == "#EC4899"
    assert view.display_name is None


def test_create_portfolio_rejects_duplicate_username(
    caller: CallerContext, other_caller: CallerContext
) -> None:
    portfolio_store.create_portfolio(caller, "jane")

    with pytest.raises(DuplicateUsernameError) as excinfo:
        portfolio_store.create_portfolio(other_caller, "JANE")

    assert excinfo.value.field == "username"


def test_create_portfolio_validates_username_and_template(caller: CallerContext) -> None:
    with pytest.raises(InvalidUsernameError):
        portfolio_store.create_portfolio(caller, "no spaces")
    with pytest.raises(ValidationError):
        portfolio_store.create_portfolio(caller, "jane", template_id="brutalist")


def test_list_portfolios_only_returns_callers_newest_first(
    caller: CallerContext, other_caller: CallerContext
) -> None:
    first = portfolio_store.create_portfolio(caller, "first")
    second = portfolio_store.create_portfolio(caller, "second")
    portfolio_store.create_portfolio(other_caller, "someone-else")

    summaries = portfolio_store.list_portfolios(caller)

    assert [s.id for s in summaries] == [second.id, first.id]
    assert summaries[0].public_url == "http://localhost:8000/p/second"


def test_update_profile_is_partial(caller: CallerContext) -> None:
    view = portfolio_store.create_portfolio(caller, "jane")
    portfolio_store.update_profile(caller, view.id, {"display_name": "Jane Doe"})

    updated = portfolio_store.update_profile(
        caller, view.id, {"tagline": "Backend engineer", "primary_color": "#10b981"}
    )

    assert updated.display_name == "Jane Doe"
    assert updated.tagline == "Backend engineer"
    assert updated.primary_color == "#10B981"


@pytest.mark.parametrize(
    "fields",
    [
        {"github_url": "github.com/jane"},
        {"email": "not-an-email"},
        {"accent_color": "pink"},
        {"template_id": "unknown"},
        {"is_published": True},
        {"username": "other"},
        {"views_count": 100},
    ],
)
def test_update_profile_rejects_bad_or_forbidden_fields(
    caller: CallerContext, fields: dict
) -> None:
    view = portfolio_store.create_portfolio(caller, "jane")

    with pytest.raises(ValidationError):
        portfolio_store.update_profile(caller, view.id, fields)


def test_other_callers_cannot_touch_a_portfolio(
    caller: CallerContext, other_caller: CallerContext
) -> None:
    view = portfolio_store.create_portfolio(caller, "jane")

    with pytest.raises(NotFoundError):
        portfolio_store.load_editor_snapshot(other_caller, view.id)
    with pytest.raises(NotFoundError):
        portfolio_store.update_profile(other_caller, view.id, {"display_name": "X"})
    with pytest.raises(NotFoundError):
        portfolio_store.delete_portfolio(other_caller, view.id)


def test_editor_snapshot_orders_projects(caller: CallerContext) -> None:
    view = portfolio_store.create_portfolio(caller, "jane")
    a = project_collection.add_project(caller, view.id, {"title": "A"})
    b = project_collection.add_project(caller, view.id, {"title": "B"})
    project_collection.reorder_projects(caller, view.id, [b.id, a.id])
    skill_collection.add_skill(caller, view.id, "Go")

    snapshot = portfolio_store.load_editor_snapshot(caller, view.id)

    assert snapshot.portfolio.id == view.id
    assert [p.title for p in snapshot.projects] == ["B", "A"]
    assert [s.name for s in snapshot.skills] == ["Go"]


def test_delete_portfolio_cascades(caller: CallerContext) -> None:
    view = portfolio_store.create_portfolio(caller, "jane")
    project_collection.add_project(caller, view.id, {"title": "Demo"})
    skill_collection.add_skill(caller, view.id, "Go")

    portfolio_store.delete_portfolio(caller, view.id)

    with get_session() as session:
        assert session.query(Portfolio).count() == 0
        assert session.query(Project).count() == 0
        assert session.query(Skill).count() == 0


def test_increment_views_never_raises(caller: CallerContext) -> None:
    view = portfolio_store.create_portfolio(caller, "jane")

    portfolio_store.increment_views(view.id)
    portfolio_store.increment_views(view.id)
    portfolio_store.increment_views(999_999)

    assert portfolio_store.get_portfolio(caller, view.id).views_count == 2


def test_set_and_clear_avatar(caller: CallerContext, store: BlobStore, tmp_path: Path) -> None:
    view = portfolio_store.create_portfolio(caller, "jane")

    updated = asyncio.run(portfolio_store.set_avatar(caller, view.id, png_upload(), store=store))

    assert updated.avatar_url is not None
    assert updated.avatar_url.startswith("/media/avatars/")
    stored = store.resolve(store.path_from_url(updated.avatar_url))
    assert stored.is_file()

    cleared = asyncio.run(portfolio_store.clear_avatar(caller, view.id, store=store))

    assert cleared.avatar_url is None
    assert not stored.exists()
