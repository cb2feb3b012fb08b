"""Public portfolio page data.

A username that does not exist and one whose portfolio is unpublished get the
same 404 response, so the route cannot be used to discover usernames.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from codeportfolio.api.schemas.portfolios import PublicPortfolioResponse
from codeportfolio.services.publish import render_public_portfolio

router = APIRouter(prefix="/p", tags=["public"])

PUBLIC_NOT_FOUND_DETAIL = "Portfolio not found."


@router.get(
    "/{username}",
    response_model=PublicPortfolioResponse,
    summary="Get a published portfolio",
    responses={404: {"description": "No published portfolio under this username"}},
)
def get_public_portfolio(username: str) -> PublicPortfolioResponse:
    public = render_public_portfolio(username)
    if public is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PUBLIC_NOT_FOUND_DETAIL)
    return PublicPortfolioResponse.from_public(public)
