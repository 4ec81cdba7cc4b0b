"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends, Header

from boardkit.config import Settings
from boardkit.generation import BoardGenerator, Throttle
from boardkit.github import GitHubAuthError, GitHubGraphClient, GitHubRestClient
from boardkit.templates import TemplateCatalog

# Global Settings instance (initialized on app startup)
_settings: Settings | None = None


def init_settings(settings: Settings) -> Settings:
    """Initialize the global Settings instance."""
    global _settings  # noqa: PLW0603
    _settings = settings
    return _settings


def close_settings() -> None:
    """Clear the global Settings instance."""
    global _settings  # noqa: PLW0603
    _settings = None


def get_settings() -> Generator[Settings, None, None]:
    """Dependency that provides the Settings instance."""
    if _settings is None:
        raise RuntimeError("Settings not initialized. Call init_settings() first.")
    yield _settings


# Type alias for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Global TemplateCatalog instance (initialized on app startup)
_catalog: TemplateCatalog | None = None


def init_catalog(catalog: TemplateCatalog) -> TemplateCatalog:
    """Initialize the global TemplateCatalog instance."""
    global _catalog  # noqa: PLW0603
    _catalog = catalog
    return _catalog


def close_catalog() -> None:
    """Clear the global TemplateCatalog instance."""
    global _catalog  # noqa: PLW0603
    _catalog = None


def get_catalog() -> Generator[TemplateCatalog, None, None]:
    """Dependency that provides the TemplateCatalog instance."""
    if _catalog is None:
        raise RuntimeError("TemplateCatalog not initialized. Call init_catalog() first.")
    yield _catalog


CatalogDep = Annotated[TemplateCatalog, Depends(get_catalog)]


def get_token(
    settings: SettingsDep,
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """GitHub token from the bearer header, falling back to the configured token.

    Raises:
        GitHubAuthError: If no token is available.
    """
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    if settings.github_token:
        return settings.github_token
    raise GitHubAuthError("Authentication required")


TokenDep = Annotated[str, Depends(get_token)]


def get_rest_client(token: TokenDep, settings: SettingsDep) -> Generator[GitHubRestClient, None, None]:
    """Dependency that provides a per-request REST client."""
    client = GitHubRestClient(token=token, base_url=settings.api_url)
    try:
        yield client
    finally:
        client.close()


RestClientDep = Annotated[GitHubRestClient, Depends(get_rest_client)]


def get_graph_client(
    token: TokenDep, settings: SettingsDep
) -> Generator[GitHubGraphClient, None, None]:
    """Dependency that provides a per-request GraphQL client."""
    client = GitHubGraphClient(token=token, base_url=settings.graphql_url)
    try:
        yield client
    finally:
        client.close()


GraphClientDep = Annotated[GitHubGraphClient, Depends(get_graph_client)]


def get_generator(
    rest: RestClientDep, graph: GraphClientDep, settings: SettingsDep
) -> BoardGenerator:
    """Dependency that provides a BoardGenerator wired to the request's clients."""
    return BoardGenerator(
        issues=rest,
        projects=graph,
        throttle=Throttle(settings.throttle_seconds),
        placement_policy=settings.placement_policy,
    )


GeneratorDep = Annotated[BoardGenerator, Depends(get_generator)]
