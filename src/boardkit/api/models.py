"""Pydantic models for REST API."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from boardkit.board import (
    BoardColumn,
    BoardConfiguration,
    BoardType,
    PhaseColumnMapping,
    with_preset_columns,
)
from boardkit.templates import TemplatePayload

T = TypeVar("T")

_NAME_PATTERN = r"^[\w\-\.]+$"


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


# Board configuration models


class BoardColumnPayload(BaseModel):
    """A requested board column."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None


class PhaseMappingPayload(BaseModel):
    """Maps a template phase to a column."""

    phase_name: str = Field(..., min_length=1)
    column_name: str = Field(..., min_length=1)


class BoardConfigPayload(BaseModel):
    """Request model for board configuration."""

    enabled: bool = False
    board_type: BoardType = BoardType.KANBAN
    board_name: str = Field(default="", max_length=255)
    columns: list[BoardColumnPayload] = Field(default_factory=list)
    phase_mapping: list[PhaseMappingPayload] = Field(default_factory=list)

    @field_validator("columns")
    @classmethod
    def _unique_columns(cls, value: list[BoardColumnPayload]) -> list[BoardColumnPayload]:
        names = [column.name for column in value]
        if len(set(names)) != len(names):
            raise ValueError("column names must be unique")
        return value

    def to_board_config(self) -> BoardConfiguration:
        """Build the engine's board configuration, filling preset columns."""
        config = BoardConfiguration(
            enabled=self.enabled,
            board_type=self.board_type,
            board_name=self.board_name,
            columns=tuple(BoardColumn(c.name, c.description) for c in self.columns),
            phase_mapping=tuple(
                PhaseColumnMapping(m.phase_name, m.column_name) for m in self.phase_mapping
            ),
        )
        return with_preset_columns(config)


# Generation models


class GenerateRequest(BaseModel):
    """Request model for generating a board from a template.

    Exactly one of ``template_id`` (a catalog template) or ``template`` (an
    inline template document) must be given.
    """

    owner: str = Field(..., min_length=1, max_length=100, pattern=_NAME_PATTERN)
    repo: str = Field(..., min_length=1, max_length=100, pattern=_NAME_PATTERN)
    template_id: str | None = None
    template: TemplatePayload | None = None
    board_config: BoardConfigPayload | None = None

    @model_validator(mode="after")
    def _one_template_source(self) -> GenerateRequest:
        if (self.template_id is None) == (self.template is None):
            raise ValueError("provide exactly one of template_id or template")
        return self


class GenerateResponse(BaseModel):
    """Response model for a generation run."""

    issues_created: int
    issues_skipped: int
    labels_created: int
    labels_updated: int
    labels_unchanged: int
    project_url: str | None = None
    repository_url: str
    issues_url: str
    failures: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


# Template models


class _FromAttributes(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class LabelResponse(_FromAttributes):
    name: str
    color: str
    description: str


class IssueResponse(_FromAttributes):
    title: str
    body: str
    labels: list[str]
    assignees: list[str]


class PhaseResponse(_FromAttributes):
    name: str
    description: str
    duration: str | None
    issues: list[IssueResponse]


class TemplateSummaryResponse(_FromAttributes):
    """Response model for a template in a listing."""

    id: str
    name: str
    description: str
    category: str
    icon: str
    estimated_issues: int | None
    issue_count: int
    phase_names: list[str]


class TemplateResponse(TemplateSummaryResponse):
    """Response model for a full template."""

    labels: list[LabelResponse]
    phases: list[PhaseResponse]


def template_to_summary(template: Any) -> TemplateSummaryResponse:
    """Convert a Template to TemplateSummaryResponse."""
    return TemplateSummaryResponse.model_validate(template)


def template_to_response(template: Any) -> TemplateResponse:
    """Convert a Template to TemplateResponse."""
    return TemplateResponse.model_validate(template)


class BoardColumnResponse(_FromAttributes):
    name: str
    description: str | None


class BoardPresetResponse(BaseModel):
    """Response model for a board type and its preset columns."""

    board_type: BoardType
    label: str
    columns: list[BoardColumnResponse]


# Repository models


class RepositoryResponse(_FromAttributes):
    """Response model for a repository."""

    id: int
    name: str
    full_name: str
    owner: str
    private: bool
    html_url: str
    description: str | None


class ScopeCheckResponse(BaseModel):
    """Response model for token scopes."""

    scopes: list[str]
    has_project_scope: bool
