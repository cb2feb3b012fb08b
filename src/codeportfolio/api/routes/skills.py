"""Skill routes for the API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from codeportfolio.api.dependencies import get_current_caller
from codeportfolio.api.schemas.common import ErrorResponse
from codeportfolio.models.caller import CallerContext
from codeportfolio.services import skill_collection

router = APIRouter(prefix="/skills", tags=["skills"])


@router.delete(
    "/{skill_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a skill",
    responses={404: {"model": ErrorResponse, "description": "Skill not found"}},
)
def delete_skill(
    skill_id: int, caller: Annotated[CallerContext, Depends(get_current_caller)]
) -> Response:
    skill_collection.delete_skill(caller, skill_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
