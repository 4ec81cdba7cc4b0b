"""Custom exceptions for project templates."""


class TemplateError(Exception):
    """Base exception for template errors."""


class TemplateNotFoundError(TemplateError):
    """Template with given ID does not exist."""


class InvalidTemplateError(TemplateError):
    """Template payload failed validation."""
