from __future__ import annotations


class ProgressionError(Exception):
    """Base class for all progression errors."""


class InvalidArgument(ProgressionError, ValueError):
    """Malformed input, a direction mismatch or an infinite increment."""


class InvalidOperation(ProgressionError, RuntimeError):
    """Attempted mutation of a template-origin progression."""


class StructuralDeserializationError(ProgressionError, ValueError):
    """A serialized progression is missing an attribute or holds bad data."""

    def __init__(self, message: str, attribute: str | None = None) -> None:
        super().__init__(message)
        self.attribute = attribute
