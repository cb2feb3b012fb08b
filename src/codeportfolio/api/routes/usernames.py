"""Username availability routes."""

from __future__ import annotations

from fastapi import APIRouter

from codeportfolio.api.schemas.usernames import AvailabilityResponse
from codeportfolio.services.username_registry import check_availability

router = APIRouter(prefix="/usernames", tags=["usernames"])


@router.get(
    "/{candidate}/availability",
    response_model=AvailabilityResponse,
    summary="Check username availability",
    description=(
        "Sanitise the candidate (lowercase, strip characters outside [a-z0-9-]) and "
        "report whether it is free. Candidates shorter than 3 characters are reported "
        "as unknown without a lookup."
    ),
)
def get_availability(candidate: str) -> AvailabilityResponse:
    result = check_availability(candidate)
    return AvailabilityResponse(username=result.username, available=result.available)
