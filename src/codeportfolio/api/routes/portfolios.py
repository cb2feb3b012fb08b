"""Portfolio editing routes for the API.

Every route here is owner-scoped: the caller comes from
:func:`get_current_caller`, and a portfolio that is missing or belongs to
someone else is reported as 404.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, File, Response, UploadFile, status

from codeportfolio.api.dependencies import get_current_caller, read_upload
from codeportfolio.api.schemas.common import ErrorResponse
from codeportfolio.api.schemas.portfolios import (
    CompletionResponse,
    EditorSnapshotResponse,
    PortfolioCreateRequest,
    PortfolioResponse,
    PortfolioSummaryResponse,
    PortfolioUpdateRequest,
    PublishResponse,
)
from codeportfolio.api.schemas.projects import (
    ProjectOrderRequest,
    ProjectOrderResponse,
    ProjectRequest,
    ProjectResponse,
)
from codeportfolio.api.schemas.skills import SkillCreateRequest, SkillResponse
from codeportfolio.models.caller import CallerContext
from codeportfolio.services import (
    portfolio_store,
    project_collection,
    publish,
    skill_collection,
)
from codeportfolio.services.completion import compute_completion

router = APIRouter(prefix="/portfolios", tags=["portfolios"])

Caller = Annotated[CallerContext, Depends(get_current_caller)]

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Portfolio not found"}}


@router.post(
    "",
    response_model=PortfolioResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a portfolio",
    description="Claim a username and create an unpublished portfolio for the caller.",
    responses={
        409: {"model": ErrorResponse, "description": "Username already taken"},
        422: {"model": ErrorResponse, "description": "Invalid username or template"},
    },
)
def create_portfolio(request: PortfolioCreateRequest, caller: Caller) -> PortfolioResponse:
    view = portfolio_store.create_portfolio(caller, request.username, request.template_id)
    return PortfolioResponse.model_validate(view)


@router.get(
    "",
    response_model=list[PortfolioSummaryResponse],
    summary="List the caller's portfolios",
    description="Return the caller's portfolios for the dashboard, newest first.",
)
def list_portfolios(caller: Caller) -> list[PortfolioSummaryResponse]:
    return [
        PortfolioSummaryResponse.model_validate(summary)
        for summary in portfolio_store.list_portfolios(caller)
    ]


@router.get(
    "/{portfolio_id}",
    response_model=EditorSnapshotResponse,
    summary="Load a portfolio for editing",
    description="Return the portfolio with its ordered projects, skills and completion flags.",
    responses=_NOT_FOUND,
)
def get_portfolio(portfolio_id: int, caller: Caller) -> EditorSnapshotResponse:
    snapshot = portfolio_store.load_editor_snapshot(caller, portfolio_id)
    completion = compute_completion(
        snapshot.portfolio, len(snapshot.projects), len(snapshot.skills)
    )
    return EditorSnapshotResponse(
        portfolio=PortfolioResponse.model_validate(snapshot.portfolio),
        projects=[ProjectResponse.from_view(p) for p in snapshot.projects],
        skills=[SkillResponse.model_validate(s) for s in snapshot.skills],
        completion=CompletionResponse.from_status(completion),
    )


@router.patch(
    "/{portfolio_id}",
    response_model=PortfolioResponse,
    summary="Update profile and theme fields",
    description="Write only the fields present in the request body.",
    responses=_NOT_FOUND,
)
def update_portfolio(
    portfolio_id: int, request: PortfolioUpdateRequest, caller: Caller
) -> PortfolioResponse:
    fields = request.model_dump(exclude_unset=True)
    view = portfolio_store.update_profile(caller, portfolio_id, fields)
    return PortfolioResponse.model_validate(view)


@router.delete(
    "/{portfolio_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a portfolio",
    description="Delete the portfolio together with its projects and skills.",
    responses=_NOT_FOUND,
)
def delete_portfolio(portfolio_id: int, caller: Caller) -> Response:
    portfolio_store.delete_portfolio(caller, portfolio_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{portfolio_id}/publish",
    response_model=PublishResponse,
    summary="Toggle publish state",
    description="Flip is_published and return the new value.",
    responses=_NOT_FOUND,
)
def toggle_publish(portfolio_id: int, caller: Caller) -> PublishResponse:
    return PublishResponse(is_published=publish.toggle_publish(caller, portfolio_id))


@router.put(
    "/{portfolio_id}/avatar",
    response_model=PortfolioResponse,
    summary="Upload an avatar",
    responses={
        **_NOT_FOUND,
        413: {"model": ErrorResponse, "description": "Image too large"},
        422: {"model": ErrorResponse, "description": "Not an image"},
    },
)
async def set_avatar(
    portfolio_id: int,
    file: Annotated[UploadFile, File(description="Avatar image file")],
    caller: Caller,
) -> PortfolioResponse:
    upload = await read_upload(file)
    view = await portfolio_store.set_avatar(caller, portfolio_id, upload)
    return PortfolioResponse.model_validate(view)


@router.delete(
    "/{portfolio_id}/avatar",
    response_model=PortfolioResponse,
    summary="Remove the avatar",
    responses=_NOT_FOUND,
)
async def clear_avatar(portfolio_id: int, caller: Caller) -> PortfolioResponse:
    view = await portfolio_store.clear_avatar(caller, portfolio_id)
    return PortfolioResponse.model_validate(view)


@router.post(
    "/{portfolio_id}/projects",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a project",
    description="Append a project after the existing ones.",
    responses=_NOT_FOUND,
)
def add_project(portfolio_id: int, request: ProjectRequest, caller: Caller) -> ProjectResponse:
    view = project_collection.add_project(caller, portfolio_id, request.model_dump())
    return ProjectResponse.from_view(view)


@router.put(
    "/{portfolio_id}/projects/order",
    response_model=ProjectOrderResponse,
    summary="Reorder projects",
    description=(
        "Write display_order for each id in the given order. Ids that no longer exist "
        "are skipped; a store failure part-way leaves the earlier writes in place."
    ),
    responses=_NOT_FOUND,
)
def reorder_projects(
    portfolio_id: int, request: ProjectOrderRequest, caller: Caller
) -> ProjectOrderResponse:
    result = project_collection.reorder_projects(caller, portfolio_id, request.project_ids)
    return ProjectOrderResponse(applied=result.applied, skipped=result.skipped)


@router.post(
    "/{portfolio_id}/skills",
    response_model=SkillResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a skill",
    responses=_NOT_FOUND,
)
def add_skill(portfolio_id: int, request: SkillCreateRequest, caller: Caller) -> SkillResponse:
    view = skill_collection.add_skill(caller, portfolio_id, request.name, request.category)
    return SkillResponse.model_validate(view)
