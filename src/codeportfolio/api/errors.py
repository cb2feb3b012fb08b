"""Map portfolio operation failures to HTTP responses."""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from codeportfolio.models.errors import (
    CapacityError,
    DuplicateUsernameError,
    NotFoundError,
    PersistenceError,
    PortfolioError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Checked in order; subclasses resolve through their base.
STATUS_BY_ERROR: tuple[tuple[type[PortfolioError], int], ...] = (
    (ValidationError, 422),
    (DuplicateUsernameError, 409),
    (NotFoundError, 404),
    (CapacityError, 413),
    (PersistenceError, 503),
)


def status_for(exc: PortfolioError) -> int:
    for error_type, code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return 400


async def portfolio_error_handler(request: Request, exc: PortfolioError) -> JSONResponse:
    code = status_for(exc)
    if code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=code,
        content={"detail": exc.message, "error": exc.kind, "field": exc.field},
    )
