"""Exceptions for the generation engine."""


class GenerationError(Exception):
    """Base exception for generation errors."""

    pass


class BoardProvisioningError(GenerationError):
    """Project board could not be provisioned."""

    pass
