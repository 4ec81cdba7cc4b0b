"""Environment-driven settings for BoardKit."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from boardkit.generation.placement import PlacementPolicy

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_GRAPHQL_URL = "https://api.github.com/graphql"
DEFAULT_THROTTLE_SECONDS = 0.1
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


class ConfigError(Exception):
    """Raised when configuration is invalid."""


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the generator and the HTTP service.

    Attributes:
        github_token: Fallback token used when a request carries none.
        api_url: GitHub REST API base URL.
        graphql_url: GitHub GraphQL endpoint.
        throttle_seconds: Minimum spacing between creation calls.
        placement_policy: How created issues are routed to board columns.
        templates_dir: Optional directory of extra template JSON files.
        host: Bind address for the HTTP service.
        port: Bind port for the HTTP service.
    """

    github_token: str = ""
    api_url: str = DEFAULT_API_URL
    graphql_url: str = DEFAULT_GRAPHQL_URL
    throttle_seconds: float = DEFAULT_THROTTLE_SECONDS
    placement_policy: PlacementPolicy = PlacementPolicy.FIRST_COLUMN
    templates_dir: Path | None = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


def get_github_token(environ: Mapping[str, str] | None = None) -> str:
    """Get GitHub token from environment or gh CLI."""
    env = os.environ if environ is None else environ
    token = env.get("GITHUB_TOKEN")
    if token:
        return token
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()
    except (subprocess.CalledProcessError, FileNotFoundError):
        return ""


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Load settings from environment variables.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.

    Returns:
        Parsed settings.

    Raises:
        ConfigError: If a variable holds an invalid value.
    """
    env = os.environ if environ is None else environ

    raw_throttle = env.get("BOARDKIT_THROTTLE_SECONDS", str(DEFAULT_THROTTLE_SECONDS))
    try:
        throttle_seconds = float(raw_throttle)
    except ValueError as e:
        raise ConfigError(f"BOARDKIT_THROTTLE_SECONDS must be a number, got {raw_throttle!r}") from e
    if throttle_seconds < 0:
        raise ConfigError("BOARDKIT_THROTTLE_SECONDS must not be negative")

    raw_policy = env.get("BOARDKIT_PLACEMENT_POLICY", PlacementPolicy.FIRST_COLUMN.value)
    try:
        placement_policy = PlacementPolicy(raw_policy.strip().lower())
    except ValueError as e:
        allowed = ", ".join(p.value for p in PlacementPolicy)
        raise ConfigError(
            f"BOARDKIT_PLACEMENT_POLICY must be one of: {allowed}; got {raw_policy!r}"
        ) from e

    raw_port = env.get("BOARDKIT_PORT", str(DEFAULT_PORT))
    try:
        port = int(raw_port)
    except ValueError as e:
        raise ConfigError(f"BOARDKIT_PORT must be an integer, got {raw_port!r}") from e

    templates_dir = env.get("BOARDKIT_TEMPLATES_DIR")

    return Settings(
        github_token=get_github_token(env),
        api_url=env.get("BOARDKIT_API_URL", DEFAULT_API_URL).rstrip("/"),
        graphql_url=env.get("BOARDKIT_GRAPHQL_URL", DEFAULT_GRAPHQL_URL),
        throttle_seconds=throttle_seconds,
        placement_policy=placement_policy,
        templates_dir=Path(templates_dir) if templates_dir else None,
        host=env.get("BOARDKIT_HOST", DEFAULT_HOST),
        port=port,
    )
