"""Templates - Declarative descriptions of labels, phases and issues."""

from boardkit.templates.catalog import TemplateCatalog
from boardkit.templates.exceptions import (
    InvalidTemplateError,
    TemplateError,
    TemplateNotFoundError,
)
from boardkit.templates.models import GitHubLabel, Issue, Phase, Template
from boardkit.templates.schema import TemplatePayload, parse_template

__all__ = [
    "GitHubLabel",
    "InvalidTemplateError",
    "Issue",
    "Phase",
    "Template",
    "TemplateCatalog",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplatePayload",
    "parse_template",
]
