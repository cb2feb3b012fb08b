"""Project collection manager: ordered showcase entries of a portfolio.

Ordering uses ``display_order`` by relative value only. Deleting leaves gaps,
and every read sorts by ``(display_order, id)`` so ties stay deterministic.
Reordering is a sequence of independent per-record updates, not a single
transaction: a failure part-way leaves a partially applied order behind.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, TypedDict

from sqlalchemy import func

from codeportfolio.data.models import Project
from codeportfolio.models.caller import CallerContext
from codeportfolio.models.errors import NotFoundError, ValidationError
from codeportfolio.models.image_sequence import ImageSequence
from codeportfolio.models.views import ProjectView
from codeportfolio.services.image_storage import (
    BlobStore,
    ImageUpload,
    discard_blob_url,
    discard_blobs,
    get_blob_store,
    upload_image_batch,
)
from codeportfolio.services.ownership import require_portfolio, require_project, store_session
from codeportfolio.utils.validation import (
    clean_optional_text,
    normalize_tech_stack,
    require_text,
    validate_url,
)

logger = logging.getLogger(__name__)

__all__ = [
    "ProjectFields",
    "ReorderResult",
    "add_project",
    "delete_project",
    "list_projects",
    "remove_project_image",
    "reorder_projects",
    "update_project",
    "upload_project_images",
]


_PROJECT_FIELDS = (
    "title",
    "description",
    "image_urls",
    "demo_url",
    "github_url",
    "tech_stack",
)


class ProjectFields(TypedDict, total=False):
    """Editable project fields."""

    title: str
    description: str | None
    image_urls: list[str]
    demo_url: str | None
    github_url: str | None
    tech_stack: list[str]


@dataclass(slots=True)
class ReorderResult:
    """Outcome of a reorder request.

    Attributes:
        applied: Project ids whose ``display_order`` was written.
        skipped: Ids that no longer exist in the portfolio (deleted meanwhile).
    """

    applied: list[int] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)


def _clean_project_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Validate a full set of editable fields, filling absent ones with empties."""
    unknown = sorted(set(fields) - set(_PROJECT_FIELDS))
    if unknown:
        raise ValidationError(f"Unknown project field '{unknown[0]}'", field=unknown[0])

    urls = [
        validate_url(url, "image_urls", allow_relative=True)
        for url in fields.get("image_urls") or ()
    ]
    images = ImageSequence(url for url in urls if url)
    return {
        "title": require_text(fields.get("title"), "title", "Please enter a project title"),
        "description": clean_optional_text(fields.get("description")),
        "image_urls": images.to_list(),
        "demo_url": validate_url(fields.get("demo_url"), "demo_url"),
        "github_url": validate_url(fields.get("github_url"), "github_url"),
        "tech_stack": normalize_tech_stack(fields.get("tech_stack")),
    }


def list_projects(caller: CallerContext, portfolio_id: int) -> list[ProjectView]:
    """Return the portfolio's projects in presentation order."""
    with store_session("load projects") as session:
        require_portfolio(session, caller, portfolio_id)
        projects = (
            session.query(Project)
            .filter(Project.portfolio_id == portfolio_id)
            .order_by(Project.display_order.asc(), Project.id.asc())
            .all()
        )
        return [ProjectView.from_model(p) for p in projects]


def add_project(
    caller: CallerContext, portfolio_id: int, fields: ProjectFields | Mapping[str, Any]
) -> ProjectView:
    """Append a project after the current last one.

    The new ``display_order`` is the current maximum plus one, or 0 when the
    portfolio has no projects yet.
    """
    cleaned = _clean_project_fields(fields)
    with store_session("add project") as session:
        require_portfolio(session, caller, portfolio_id)
        max_order = (
            session.query(func.max(Project.display_order))
            .filter(Project.portfolio_id == portfolio_id)
            .scalar()
        )
        project = Project(
            portfolio_id=portfolio_id,
            display_order=0 if max_order is None else max_order + 1,
            **cleaned,
        )
        session.add(project)
        session.flush()
        session.refresh(project)
        return ProjectView.from_model(project)


def update_project(
    caller: CallerContext, project_id: int, fields: ProjectFields | Mapping[str, Any]
) -> ProjectView:
    """Replace every editable field of a project. ``display_order`` is untouched."""
    cleaned = _clean_project_fields(fields)
    with store_session("update project") as session:
        project = require_project(session, caller, project_id)
        for name, value in cleaned.items():
            setattr(project, name, value)
        session.flush()
        return ProjectView.from_model(project)


def delete_project(caller: CallerContext, project_id: int) -> None:
    """Delete one project. Remaining siblings keep their ``display_order``."""
    with store_session("delete project") as session:
        project = require_project(session, caller, project_id)
        session.delete(project)


def reorder_projects(
    caller: CallerContext, portfolio_id: int, ordered_ids: Sequence[int]
) -> ReorderResult:
    """Write ``display_order = index`` for each id, one record at a time.

    Ids that are no longer part of the portfolio are skipped without aborting
    the rest. A store failure raises PersistenceError immediately and leaves
    the records written so far in place.
    """
    if len(set(ordered_ids)) != len(ordered_ids):
        raise ValidationError("Project order contains duplicate ids", field="project_ids")

    with store_session("update project order") as session:
        require_portfolio(session, caller, portfolio_id)

    result = ReorderResult()
    for index, project_id in enumerate(ordered_ids):
        with store_session("update project order") as session:
            project = (
                session.query(Project)
                .filter(Project.id == project_id, Project.portfolio_id == portfolio_id)
                .first()
            )
            if project is None:
                logger.warning(
                    "Skipping project %s while reordering portfolio %s: not found",
                    project_id,
                    portfolio_id,
                )
                result.skipped.append(project_id)
                continue
            project.display_order = index
        result.applied.append(project_id)
    return result


def _check_image_room(caller: CallerContext, project_id: int, count: int) -> None:
    with store_session("load project") as session:
        project = require_project(session, caller, project_id)
        ImageSequence.from_storage(project.image_urls).ensure_room_for(count)


def _attach_images(caller: CallerContext, project_id: int, urls: Sequence[str]) -> ProjectView:
    with store_session("attach images") as session:
        project = require_project(session, caller, project_id)
        images = ImageSequence.from_storage(project.image_urls).extend(urls)
        project.image_urls = images.to_list()
        session.flush()
        return ProjectView.from_model(project)


def _detach_image(caller: CallerContext, project_id: int, url: str) -> ProjectView:
    with store_session("remove image") as session:
        project = require_project(session, caller, project_id)
        images = ImageSequence.from_storage(project.image_urls)
        if url not in images:
            raise NotFoundError("Image not found on this project.")
        project.image_urls = images.without(url).to_list()
        session.flush()
        return ProjectView.from_model(project)


async def upload_project_images(
    caller: CallerContext,
    project_id: int,
    uploads: Sequence[ImageUpload],
    *,
    store: BlobStore | None = None,
) -> ProjectView:
    """Upload a batch of images and append them after the existing ones.

    Capacity is checked before anything is uploaded. Uploads run in parallel
    and the batch is appended only if every upload succeeded, so the cover
    image never changes because of a partial batch. Database work runs in a
    worker thread.

    Raises:
        CapacityError: The batch would take the project past its image ceiling,
            or one file is over the size limit.
        ValidationError: One file is not an image.
        StorageError: Any upload failed (nothing is appended).
    """
    if not uploads:
        raise ValidationError("Select at least one image", field="images")
    store = store or get_blob_store()

    await asyncio.to_thread(_check_image_room, caller, project_id, len(uploads))

    urls = await upload_image_batch(uploads, store=store)

    try:
        view = await asyncio.to_thread(_attach_images, caller, project_id, urls)
    except Exception:
        paths = [path for path in (store.path_from_url(url) for url in urls) if path]
        await discard_blobs(paths, store=store)
        raise

    logger.info("Attached %d image(s) to project %d", len(urls), project_id)
    return view


async def remove_project_image(
    caller: CallerContext,
    project_id: int,
    url: str,
    *,
    store: BlobStore | None = None,
) -> ProjectView:
    """Remove an image by value, keeping the order of the remaining ones."""
    view = await asyncio.to_thread(_detach_image, caller, project_id, url)
    await discard_blob_url(url, store=store)
    return view
