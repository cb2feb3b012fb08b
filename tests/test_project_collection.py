from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from codeportfolio.data.db import get_session
from codeportfolio.data.models import Project
from codeportfolio.models.caller import CallerContext
from codeportfolio.models.errors import (
    CapacityError,
    NotFoundError,
    PersistenceError,
    StorageError,
    ValidationError,
)
from codeportfolio.services import portfolio_store, project_collection
from codeportfolio.services import ownership
from codeportfolio.services.image_storage import BlobStore
from conftest import png_upload


class FailingStore(BlobStore):
    """Stores every object except the ``fail_at``-th one of each batch."""

    def __init__(self, root: Path, fail_at: int) -> None:
        super().__init__(root, "/media")
        self.fail_at = fail_at
        self.calls = 0

    async def upload(self, path: str, data: bytes) -> str:
        self.calls += 1
        if self.calls == self.fail_at:
            raise StorageError("Failed to store image.")
        return await super().upload(path, data)


@pytest.fixture
def portfolio_id(caller: CallerContext) -> int:
    return portfolio_store.create_portfolio(caller, "jane").id


def _set_order(project_id: int, order: int) -> None:
    with get_session() as session:
        session.get(Project, project_id).display_order = order


def _titles(caller: CallerContext, portfolio_id: int) -> list[str]:
    return [p.title for p in project_collection.list_projects(caller, portfolio_id)]


def test_added_projects_are_numbered_from_zero(caller: CallerContext, portfolio_id: int) -> None:
    projects = [
        project_collection.add_project(caller, portfolio_id, {"title": f"P{i}"}) for i in range(4)
    ]

    assert [p.display_order for p in projects] == [0, 1, 2, 3]


def test_add_project_appends_after_highest_order(
    caller: CallerContext, portfolio_id: int
) -> None:
    first = project_collection.add_project(caller, portfolio_id, {"title": "A"})
    _set_order(first.id, 7)

    second = project_collection.add_project(caller, portfolio_id, {"title": "B"})

    assert second.display_order == 8


def test_add_project_requires_title(caller: CallerContext, portfolio_id: int) -> None:
    with pytest.raises(ValidationError) as excinfo:
        project_collection.add_project(caller, portfolio_id, {"title": "  "})

    assert excinfo.value.message == "Please enter a project title"
    assert excinfo.value.field == "title"


def test_add_project_cleans_fields(caller: CallerContext, portfolio_id: int) -> None:
    project = project_collection.add_project(
        caller,
        portfolio_id,
        {
            "title": " Demo ",
            "description": "",
            "demo_url": "https://demo.example.com",
            "tech_stack": ["Go", " Rust ", "", "Go"],
        },
    )

    assert project.title == "Demo"
    assert project.description is None
    assert project.tech_stack == ["Go", "Rust"]
    assert project.image_urls == []
    assert project.cover_image is None


def test_add_project_rejects_bad_urls(caller: CallerContext, portfolio_id: int) -> None:
    with pytest.raises(ValidationError) as excinfo:
        project_collection.add_project(
            caller, portfolio_id, {"title": "Demo", "github_url": "ftp://example.com"}
        )

    assert excinfo.value.field == "github_url"


def test_reorder_with_non_contiguous_orders(caller: CallerContext, portfolio_id: int) -> None:
    a = project_collection.add_project(caller, portfolio_id, {"title": "a"})
    b = project_collection.add_project(caller, portfolio_id, {"title": "b"})
    c = project_collection.add_project(caller, portfolio_id, {"title": "c"})
    _set_order(a.id, 3)
    _set_order(b.id, 10)
    _set_order(c.id, 42)

    result = project_collection.reorder_projects(caller, portfolio_id, [c.id, a.id, b.id])

    assert result.applied == [c.id, a.id, b.id]
    assert result.skipped == []
    assert _titles(caller, portfolio_id) == ["c", "a", "b"]


def test_reorder_skips_vanished_projects(caller: CallerContext, portfolio_id: int) -> None:
    a = project_collection.add_project(caller, portfolio_id, {"title": "a"})
    b = project_collection.add_project(caller, portfolio_id, {"title": "b"})
    c = project_collection.add_project(caller, portfolio_id, {"title": "c"})
    project_collection.delete_project(caller, b.id)

    result = project_collection.reorder_projects(caller, portfolio_id, [c.id, b.id, a.id])

    assert result.skipped == [b.id]
    assert _titles(caller, portfolio_id) == ["c", "a"]


def test_reorder_rejects_duplicate_ids(caller: CallerContext, portfolio_id: int) -> None:
    a = project_collection.add_project(caller, portfolio_id, {"title": "a"})

    with pytest.raises(ValidationError):
        project_collection.reorder_projects(caller, portfolio_id, [a.id, a.id])


def test_reorder_failure_leaves_partial_order(
    caller: CallerContext, portfolio_id: int, monkeypatch: pytest.MonkeyPatch
) -> None:
    a = project_collection.add_project(caller, portfolio_id, {"title": "a"})
    b = project_collection.add_project(caller, portfolio_id, {"title": "b"})
    c = project_collection.add_project(caller, portfolio_id, {"title": "c"})

    real_store_session = ownership.store_session
    calls = {"count": 0}

    def flaky_store_session(action: str):
        calls["count"] += 1
        # 1: ownership check, 2: first record, 3: second record fails
        if calls["count"] == 3:
            raise PersistenceError(f"Failed to {action}. Please try again.")
        return real_store_session(action)

    monkeypatch.setattr(project_collection, "store_session", flaky_store_session)

    with pytest.raises(PersistenceError):
        project_collection.reorder_projects(caller, portfolio_id, [c.id, b.id, a.id])

    monkeypatch.undo()
    orders = {
        p.title: p.display_order for p in project_collection.list_projects(caller, portfolio_id)
    }
    assert orders == {"a": 0, "b": 1, "c": 0}


def test_delete_keeps_relative_order(caller: CallerContext, portfolio_id: int) -> None:
    projects = [
        project_collection.add_project(caller, portfolio_id, {"title": t}) for t in "abcd"
    ]

    project_collection.delete_project(caller, projects[1].id)

    remaining = project_collection.list_projects(caller, portfolio_id)
    assert [p.title for p in remaining] == ["a", "c", "d"]
    assert [p.display_order for p in remaining] == [0, 2, 3]


def test_update_project_keeps_position(caller: CallerContext, portfolio_id: int) -> None:
    project_collection.add_project(caller, portfolio_id, {"title": "a"})
    b = project_collection.add_project(caller, portfolio_id, {"title": "b"})

    updated = project_collection.update_project(
        caller, b.id, {"title": "b2", "tech_stack": ["TS"]}
    )

    assert updated.display_order == 1
    assert updated.title == "b2"
    assert updated.tech_stack == ["TS"]


def test_projects_are_owner_scoped(
    caller: CallerContext, other_caller: CallerContext, portfolio_id: int
) -> None:
    project = project_collection.add_project(caller, portfolio_id, {"title": "a"})

    with pytest.raises(NotFoundError):
        project_collection.update_project(other_caller, project.id, {"title": "x"})
    with pytest.raises(NotFoundError):
        project_collection.delete_project(other_caller, project.id)
    with pytest.raises(NotFoundError):
        project_collection.add_project(other_caller, portfolio_id, {"title": "x"})


def test_upload_appends_images_in_selection_order(
    caller: CallerContext, portfolio_id: int, store: BlobStore
) -> None:
    project = project_collection.add_project(caller, portfolio_id, {"title": "Demo"})

    updated = asyncio.run(
        project_collection.upload_project_images(
            caller, project.id, [png_upload("1.png"), png_upload("2.png")], store=store
        )
    )

    assert len(updated.image_urls) == 2
    assert updated.cover_image == updated.image_urls[0]
    assert all(url.startswith("/media/project-images/") for url in updated.image_urls)


def test_sixth_image_is_rejected(
    caller: CallerContext, portfolio_id: int, store: BlobStore
) -> None:
    project = project_collection.add_project(caller, portfolio_id, {"title": "Demo"})
    asyncio.run(
        project_collection.upload_project_images(
            caller, project.id, [png_upload() for _ in range(5)], store=store
        )
    )

    with pytest.raises(CapacityError):
        asyncio.run(
            project_collection.upload_project_images(
                caller, project.id, [png_upload()], store=store
            )
        )

    images = project_collection.list_projects(caller, portfolio_id)[0].image_urls
    assert len(images) == 5


def test_batch_with_failed_upload_appends_nothing(
    caller: CallerContext, portfolio_id: int, tmp_path: Path
) -> None:
    project = project_collection.add_project(caller, portfolio_id, {"title": "Demo"})
    store = FailingStore(tmp_path / "uploads", fail_at=2)

    with pytest.raises(StorageError):
        asyncio.run(
            project_collection.upload_project_images(
                caller, project.id, [png_upload() for _ in range(3)], store=store
            )
        )

    assert project_collection.list_projects(caller, portfolio_id)[0].image_urls == []
    folder = tmp_path / "uploads" / "project-images"
    assert not folder.exists() or list(folder.iterdir()) == []


def test_remove_image_by_value(
    caller: CallerContext, portfolio_id: int, store: BlobStore
) -> None:
    project = project_collection.add_project(caller, portfolio_id, {"title": "Demo"})
    uploaded = asyncio.run(
        project_collection.upload_project_images(
            caller, project.id, [png_upload() for _ in range(3)], store=store
        )
    )
    first, second, third = uploaded.image_urls

    updated = asyncio.run(
        project_collection.remove_project_image(caller, project.id, second, store=store)
    )

    assert updated.image_urls == [first, third]
    assert not store.resolve(store.path_from_url(second)).exists()

    with pytest.raises(NotFoundError):
        asyncio.run(
            project_collection.remove_project_image(caller, project.id, second, store=store)
        )
