"""REST API for BoardKit."""

from boardkit.api.app import app, create_app
from boardkit.api.models import (
    APIResponse,
    BoardConfigPayload,
    GenerateRequest,
    GenerateResponse,
)

__all__ = [
    "APIResponse",
    "BoardConfigPayload",
    "GenerateRequest",
    "GenerateResponse",
    "app",
    "create_app",
]
