"""Template catalog and board preset endpoints."""

from fastapi import APIRouter, Query

from boardkit.api.dependencies import CatalogDep
from boardkit.api.models import (
    APIResponse,
    BoardColumnResponse,
    BoardPresetResponse,
    TemplateResponse,
    TemplateSummaryResponse,
    template_to_response,
    template_to_summary,
)
from boardkit.board import BOARD_TYPE_LABELS, preset_columns

router = APIRouter(tags=["templates"])


@router.get("/templates", response_model=APIResponse[list[TemplateSummaryResponse]])
def list_templates(
    catalog: CatalogDep,
    category: str | None = Query(default=None, description="Filter by category"),
) -> APIResponse[list[TemplateSummaryResponse]]:
    """List built-in templates."""
    templates = catalog.list_templates(category=category)
    return APIResponse(data=[template_to_summary(t) for t in templates])


@router.get("/templates/categories", response_model=APIResponse[list[str]])
def list_categories(catalog: CatalogDep) -> APIResponse[list[str]]:
    """List template categories."""
    return APIResponse(data=catalog.categories())


@router.get("/templates/{template_id}", response_model=APIResponse[TemplateResponse])
def get_template(template_id: str, catalog: CatalogDep) -> APIResponse[TemplateResponse]:
    """Get a template with its labels, phases and issues."""
    return APIResponse(data=template_to_response(catalog.get(template_id)))


@router.get("/board-presets", response_model=APIResponse[list[BoardPresetResponse]])
def list_board_presets() -> APIResponse[list[BoardPresetResponse]]:
    """List board types with their preset columns."""
    return APIResponse(
        data=[
            BoardPresetResponse(
                board_type=board_type,
                label=label,
                columns=[
                    BoardColumnResponse.model_validate(c) for c in preset_columns(board_type)
                ],
            )
            for board_type, label in BOARD_TYPE_LABELS.items()
        ]
    )
