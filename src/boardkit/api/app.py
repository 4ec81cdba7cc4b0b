"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from boardkit import __version__
from boardkit.api.dependencies import (
    close_catalog,
    close_settings,
    init_catalog,
    init_settings,
)
from boardkit.api.models import APIResponse
from boardkit.api.routes import generate, repos, templates
from boardkit.config import Settings, load_settings
from boardkit.github import (
    GitHubAuthError,
    GitHubError,
    RateLimitError,
    RepositoryAccessError,
)
from boardkit.logging import sanitize_for_log
from boardkit.templates import InvalidTemplateError, TemplateCatalog, TemplateNotFoundError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger("boardkit.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    settings: Settings | None = getattr(app.state, "settings", None)
    if settings is None:
        settings = load_settings()
    init_settings(settings)

    catalog: TemplateCatalog | None = getattr(app.state, "catalog", None)
    if catalog is None:
        catalog = TemplateCatalog.load(settings.templates_dir)
    init_catalog(catalog)

    yield
    # Shutdown
    close_catalog()
    close_settings()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=APIResponse[None](data=None, error=message).model_dump(),
    )


def create_app(
    settings: Settings | None = None,
    catalog: TemplateCatalog | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use; loaded from the environment at startup if None.
        catalog: Template catalog; loaded from bundled templates at startup if None.
    """
    app = FastAPI(
        title="BoardKit API",
        description="Generate GitHub labels, issues and project boards from templates",
        version=__version__,
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.settings = settings
    app.state.catalog = catalog

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(TemplateNotFoundError)
    async def template_not_found_handler(
        _request: Request, _exc: TemplateNotFoundError
    ) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, "Template not found")

    @app.exception_handler(InvalidTemplateError)
    async def invalid_template_handler(
        _request: Request, exc: InvalidTemplateError
    ) -> JSONResponse:
        return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc))

    @app.exception_handler(GitHubAuthError)
    async def auth_error_handler(_request: Request, _exc: GitHubAuthError) -> JSONResponse:
        return _error(status.HTTP_401_UNAUTHORIZED, "Authentication required")

    @app.exception_handler(RepositoryAccessError)
    async def repo_access_handler(
        _request: Request, _exc: RepositoryAccessError
    ) -> JSONResponse:
        return _error(
            status.HTTP_403_FORBIDDEN, "No access to repository or repository not found"
        )

    @app.exception_handler(RateLimitError)
    async def rate_limit_handler(_request: Request, _exc: RateLimitError) -> JSONResponse:
        return _error(status.HTTP_429_TOO_MANY_REQUESTS, "GitHub rate limit exceeded")

    @app.exception_handler(GitHubError)
    async def github_error_handler(_request: Request, exc: GitHubError) -> JSONResponse:
        logger.error("GitHub request failed: %s", sanitize_for_log(str(exc)))
        return _error(status.HTTP_502_BAD_GATEWAY, "GitHub request failed")

    app.include_router(generate.router, prefix="/api/v1")
    app.include_router(templates.router, prefix="/api/v1")
    app.include_router(repos.router, prefix="/api/v1")

    return app


# Default app instance
app = create_app()
