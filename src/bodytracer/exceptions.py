"""Public exception types for bodytracer."""

from __future__ import annotations


class BodytracerError(Exception):
    """Base class for all bodytracer exceptions."""


class BodytracerConfigError(BodytracerError):
    """Raised when explicit configuration arguments are invalid."""


class BodyReadError(BodytracerError):
    """Raised when a request body cannot be duplicated for capture."""
