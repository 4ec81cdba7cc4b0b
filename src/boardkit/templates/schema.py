"""Pydantic payload models used to validate template JSON.

Both the built-in catalog files and inline templates posted to the API are
decoded through these models. Keys are accepted in camelCase (as written by
the template editor) or snake_case.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from boardkit.templates.exceptions import InvalidTemplateError
from boardkit.templates.models import GitHubLabel, Issue, Phase, Template

_HEX_COLOR = re.compile(r"^[0-9a-fA-F]{6}$")


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class LabelPayload(_Payload):
    """A template label."""

    name: str = Field(..., min_length=1, max_length=50)
    color: str
    description: str = Field(default="", max_length=100)

    @field_validator("color")
    @classmethod
    def _normalize_color(cls, value: str) -> str:
        color = value.strip().lstrip("#")
        if not _HEX_COLOR.match(color):
            raise ValueError(f"color must be 6 hex characters, got {value!r}")
        return color

    def to_label(self) -> GitHubLabel:
        return GitHubLabel(name=self.name, color=self.color, description=self.description)


class IssuePayload(_Payload):
    """A template issue."""

    title: str = Field(..., min_length=1, max_length=256)
    body: str = ""
    labels: list[str] = Field(default_factory=list)
    assignees: list[str] = Field(default_factory=list)

    def to_issue(self) -> Issue:
        return Issue(
            title=self.title,
            body=self.body,
            labels=tuple(self.labels),
            assignees=tuple(self.assignees),
        )


class PhasePayload(_Payload):
    """A template phase."""

    name: str = Field(..., min_length=1)
    description: str = ""
    duration: str | None = None
    issues: list[IssuePayload] = Field(default_factory=list)

    def to_phase(self) -> Phase:
        return Phase(
            name=self.name,
            description=self.description,
            duration=self.duration,
            issues=tuple(issue.to_issue() for issue in self.issues),
        )


class TemplatePayload(_Payload):
    """A full template document."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: str = ""
    category: str = ""
    icon: str = ""
    labels: list[LabelPayload] = Field(default_factory=list)
    phases: list[PhasePayload] = Field(default_factory=list)
    estimated_issues: int | None = Field(default=None, ge=0)

    @field_validator("labels")
    @classmethod
    def _unique_label_names(cls, value: list[LabelPayload]) -> list[LabelPayload]:
        names = [label.name for label in value]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"duplicate label names: {', '.join(duplicates)}")
        return value

    @field_validator("phases")
    @classmethod
    def _unique_phase_names(cls, value: list[PhasePayload]) -> list[PhasePayload]:
        names = [phase.name for phase in value]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"duplicate phase names: {', '.join(duplicates)}")
        return value

    def to_template(self) -> Template:
        phases = tuple(phase.to_phase() for phase in self.phases)
        estimated = self.estimated_issues
        if estimated is None:
            estimated = sum(len(phase.issues) for phase in phases)
        return Template(
            id=self.id,
            name=self.name,
            description=self.description,
            category=self.category,
            icon=self.icon,
            labels=tuple(label.to_label() for label in self.labels),
            phases=phases,
            estimated_issues=estimated,
        )


def parse_template(data: Any) -> Template:
    """Validate a decoded JSON document and build a Template.

    Args:
        data: Decoded JSON (normally a dict).

    Returns:
        The validated Template.

    Raises:
        InvalidTemplateError: If the document does not describe a valid template.
    """
    try:
        payload = TemplatePayload.model_validate(data)
    except ValidationError as e:
        raise InvalidTemplateError(f"Invalid template: {e}") from e
    return payload.to_template()
