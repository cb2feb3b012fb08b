"""Portfolio record store: creation, profile/theme updates, deletion and views.

Profile updates are partial and restricted to profile and theme columns, so
an autosave commit and a publish toggle never overwrite each other's fields.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, TypedDict

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from codeportfolio.constants.portfolio_constants import (
    COLOR_FIELDS,
    DEFAULT_TEMPLATE_ID,
    PROFILE_FIELDS,
    PROFILE_URL_FIELDS,
    TemplateId,
)
from codeportfolio.data.db import get_session
from codeportfolio.data.models import Portfolio, Project, Skill
from codeportfolio.models.caller import CallerContext
from codeportfolio.models.errors import DuplicateUsernameError, ValidationError
from codeportfolio.models.views import (
    EditorSnapshot,
    PortfolioSummary,
    PortfolioView,
    ProjectView,
    SkillView,
)
from codeportfolio.services.image_storage import (
    AVATAR_FOLDER,
    BlobStore,
    ImageUpload,
    discard_blob_url,
    upload_image_batch,
)
from codeportfolio.services.ownership import require_portfolio, store_session
from codeportfolio.services.username_registry import public_url_for, validate_username
from codeportfolio.utils.validation import (
    validate_email,
    validate_hex_color,
    validate_url,
)

logger = logging.getLogger(__name__)

__all__ = [
    "ProfileFields",
    "clear_avatar",
    "create_portfolio",
    "delete_portfolio",
    "get_portfolio",
    "increment_views",
    "list_portfolios",
    "load_editor_snapshot",
    "set_avatar",
    "update_profile",
    "validate_profile_fields",
]


class ProfileFields(TypedDict, total=False):
    """Profile and theme fields accepted by :func:`update_profile`."""

    display_name: str | None
    tagline: str | None
    bio: str | None
    avatar_url: str | None
    hero_title: str | None
    hero_subtitle: str | None
    cta_text: str | None
    cta_url: str | None
    github_url: str | None
    linkedin_url: str | None
    twitter_url: str | None
    email: str | None
    primary_color: str
    secondary_color: str
    accent_color: str
    template_id: str


def validate_template_id(template_id: str) -> str:
    try:
        return TemplateId(template_id).value
    except ValueError:
        allowed = ", ".join(t.value for t in TemplateId)
        raise ValidationError(
            f"Unknown template '{template_id}'. Choose one of: {allowed}", field="template_id"
        ) from None


def validate_profile_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Return a cleaned copy of ``fields`` or raise ValidationError.

    Only profile and theme columns are accepted; identity, ownership, publish
    state and the view counter can never be written through this path.
    """
    unknown = sorted(set(fields) - set(PROFILE_FIELDS))
    if unknown:
        raise ValidationError(
            f"Field '{unknown[0]}' cannot be updated from the profile editor", field=unknown[0]
        )

    cleaned: dict[str, Any] = {}
    for field, value in fields.items():
        if field == "avatar_url":
            cleaned[field] = validate_url(value, field, allow_relative=True)
        elif field in PROFILE_URL_FIELDS:
            cleaned[field] = validate_url(value, field)
        elif field == "email":
            cleaned[field] = validate_email(value)
        elif field in COLOR_FIELDS:
            cleaned[field] = validate_hex_color(value, field)
        elif field == "template_id":
            cleaned[field] = validate_template_id(value)
        else:
            cleaned[field] = value
    return cleaned


def create_portfolio(
    caller: CallerContext,
    username: str,
    template_id: str = DEFAULT_TEMPLATE_ID.value,
) -> PortfolioView:
    """Create an empty, unpublished portfolio holding only its username.

    Raises:
        InvalidUsernameError: Username fails the length/charset rules.
        DuplicateUsernameError: Another portfolio already holds the username,
            whatever an earlier availability check reported.
    """
    normalized = validate_username(username)
    template = validate_template_id(template_id)

    with store_session("create portfolio") as session:
        existing = session.query(Portfolio.id).filter(Portfolio.username == normalized).first()
        if existing is not None:
            raise DuplicateUsernameError(normalized)

        portfolio = Portfolio(
            owner_id=caller.user_id,
            username=normalized,
            template_id=template,
            is_published=False,
        )
        session.add(portfolio)
        try:
            session.flush()
        except IntegrityError as exc:
            raise DuplicateUsernameError(normalized) from exc
        session.refresh(portfolio)

        logger.info("Created portfolio %s for user %s", normalized, caller.user_id)
        return PortfolioView.from_model(portfolio)


def list_portfolios(caller: CallerContext) -> list[PortfolioSummary]:
    """Return the caller's portfolios, most recently created first."""
    with store_session("load portfolios") as session:
        portfolios = (
            session.query(Portfolio)
            .filter(Portfolio.owner_id == caller.user_id)
            .order_by(Portfolio.created_at.desc(), Portfolio.id.desc())
            .all()
        )
        return [
            PortfolioSummary(
                id=p.id,
                username=p.username,
                display_name=p.display_name,
                is_published=bool(p.is_published),
                views_count=p.views_count or 0,
                public_url=public_url_for(p.username),
                updated_at=p.updated_at,
            )
            for p in portfolios
        ]


def get_portfolio(caller: CallerContext, portfolio_id: int) -> PortfolioView:
    with store_session("load portfolio") as session:
        return PortfolioView.from_model(require_portfolio(session, caller, portfolio_id))


def load_editor_snapshot(caller: CallerContext, portfolio_id: int) -> EditorSnapshot:
    """Load a portfolio with its ordered projects and its skills in one read.

    Raises:
        NotFoundError: No portfolio with that id is owned by the caller.
    """
    with store_session("load portfolio") as session:
        portfolio = require_portfolio(session, caller, portfolio_id)
        projects = (
            session.query(Project)
            .filter(Project.portfolio_id == portfolio.id)
            .order_by(Project.display_order.asc(), Project.id.asc())
            .all()
        )
        skills = (
            session.query(Skill)
            .filter(Skill.portfolio_id == portfolio.id)
            .order_by(Skill.id.asc())
            .all()
        )
        return EditorSnapshot(
            portfolio=PortfolioView.from_model(portfolio),
            projects=[ProjectView.from_model(p) for p in projects],
            skills=[SkillView.from_model(s) for s in skills],
        )


def update_profile(
    caller: CallerContext, portfolio_id: int, fields: ProfileFields | Mapping[str, Any]
) -> PortfolioView:
    """Apply a partial update of profile/theme fields.

    Raises:
        ValidationError: A field is not editable or holds a malformed value.
        NotFoundError: No portfolio with that id is owned by the caller.
    """
    cleaned = validate_profile_fields(fields)
    with store_session("save profile") as session:
        portfolio = require_portfolio(session, caller, portfolio_id)
        for field, value in cleaned.items():
            setattr(portfolio, field, value)
        session.flush()
        return PortfolioView.from_model(portfolio)


def delete_portfolio(caller: CallerContext, portfolio_id: int) -> None:
    """Delete a portfolio together with all of its projects and skills.

    Confirmation is the caller's responsibility; this cannot be undone.
    """
    with store_session("delete portfolio") as session:
        portfolio = require_portfolio(session, caller, portfolio_id)
        username = portfolio.username
        session.delete(portfolio)
    logger.info("Deleted portfolio %s for user %s", username, caller.user_id)


def increment_views(portfolio_id: int) -> None:
    """Bump the view counter once. Failures are logged and never raised."""
    try:
        with get_session() as session:
            session.execute(
                update(Portfolio)
                .where(Portfolio.id == portfolio_id)
                .values(views_count=Portfolio.views_count + 1)
            )
    except SQLAlchemyError:
        logger.exception("Failed to increment views for portfolio %d", portfolio_id)


def _replace_avatar_url(
    caller: CallerContext, portfolio_id: int, url: str | None
) -> tuple[PortfolioView, str | None]:
    """Write ``avatar_url`` and return the new view with the URL it replaced."""
    with store_session("save avatar" if url else "remove avatar") as session:
        portfolio = require_portfolio(session, caller, portfolio_id)
        previous = portfolio.avatar_url
        portfolio.avatar_url = url
        session.flush()
        return PortfolioView.from_model(portfolio), previous


async def set_avatar(
    caller: CallerContext,
    portfolio_id: int,
    upload: ImageUpload,
    *,
    store: BlobStore | None = None,
) -> PortfolioView:
    """Upload a new avatar image and store its URL on the portfolio immediately."""
    await asyncio.to_thread(get_portfolio, caller, portfolio_id)
    (url,) = await upload_image_batch([upload], folder=AVATAR_FOLDER, store=store)
    try:
        view, previous = await asyncio.to_thread(_replace_avatar_url, caller, portfolio_id, url)
    except Exception:
        await discard_blob_url(url, store=store)
        raise
    await discard_blob_url(previous, store=store)
    return view


async def clear_avatar(
    caller: CallerContext, portfolio_id: int, *, store: BlobStore | None = None
) -> PortfolioView:
    """Remove the avatar blob (best effort) and clear ``avatar_url``."""
    view, previous = await asyncio.to_thread(_replace_avatar_url, caller, portfolio_id, None)
    await discard_blob_url(previous, store=store)
    return view
