"""FastAPI application entry point for the portfolio editor API."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from codeportfolio.api.errors import portfolio_error_handler
from codeportfolio.api.routes import (
    health,
    media,
    portfolios,
    projects,
    public,
    skills,
    usernames,
)
from codeportfolio.models.errors import PortfolioError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize resources on startup and clean up on shutdown."""
    from codeportfolio.data.db import init_db

    init_db()
    yield


app = FastAPI(
    title="Code Portfolio API",
    description="API for building, editing and publishing developer portfolios",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(PortfolioError, portfolio_error_handler)

app.include_router(health.router)
app.include_router(usernames.router, prefix="/api")
app.include_router(portfolios.router, prefix="/api")
app.include_router(projects.router, prefix="/api")
app.include_router(skills.router, prefix="/api")
app.include_router(public.router)
app.include_router(media.router)


def main() -> None:
    """Start the development server."""
    import uvicorn

    uvicorn.run(
        "codeportfolio.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    main()
