"""Project routes for the API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile, status

from codeportfolio.api.dependencies import get_current_caller, read_upload
from codeportfolio.api.schemas.common import ErrorResponse
from codeportfolio.api.schemas.projects import ProjectRequest, ProjectResponse
from codeportfolio.models.caller import CallerContext
from codeportfolio.services import project_collection

router = APIRouter(prefix="/projects", tags=["projects"])

Caller = Annotated[CallerContext, Depends(get_current_caller)]

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Project not found"}}


@router.put(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Update a project",
    description="Replace the editable fields of a project. Its position is unchanged.",
    responses=_NOT_FOUND,
)
def update_project(project_id: int, request: ProjectRequest, caller: Caller) -> ProjectResponse:
    view = project_collection.update_project(caller, project_id, request.model_dump())
    return ProjectResponse.from_view(view)


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a project",
    responses=_NOT_FOUND,
)
def delete_project(project_id: int, caller: Caller) -> Response:
    project_collection.delete_project(caller, project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{project_id}/images",
    response_model=ProjectResponse,
    summary="Upload project images",
    description=(
        "Upload one or more images in parallel and append them in the order given. "
        "Either every file is attached or none is."
    ),
    responses={
        **_NOT_FOUND,
        413: {"model": ErrorResponse, "description": "Too many images or file too large"},
        422: {"model": ErrorResponse, "description": "A file is not an image"},
        503: {"model": ErrorResponse, "description": "Storage failure, nothing attached"},
    },
)
async def upload_images(
    project_id: int,
    files: Annotated[list[UploadFile], File(description="Image files")],
    caller: Caller,
) -> ProjectResponse:
    uploads = [await read_upload(file) for file in files]
    view = await project_collection.upload_project_images(caller, project_id, uploads)
    return ProjectResponse.from_view(view)


@router.delete(
    "/{project_id}/images",
    response_model=ProjectResponse,
    summary="Remove a project image",
    description="Remove one image by URL; the remaining images keep their order.",
    responses=_NOT_FOUND,
)
async def remove_image(
    project_id: int,
    url: Annotated[str, Query(description="URL of the image to remove")],
    caller: Caller,
) -> ProjectResponse:
    view = await project_collection.remove_project_image(caller, project_id, url)
    return ProjectResponse.from_view(view)
