"""Progression value type: arithmetic sequences of test-condition values."""

from stepsweep.progression.errors import (
    InvalidArgument,
    InvalidOperation,
    ProgressionError,
    StructuralDeserializationError,
)
from stepsweep.progression.grammar import format_number, parse_number
from stepsweep.progression.model import CONTINUOUS, ContinuousSpan, Field, Progression

__all__ = [
    "CONTINUOUS",
    "ContinuousSpan",
    "Field",
    "InvalidArgument",
    "InvalidOperation",
    "Progression",
    "ProgressionError",
    "StructuralDeserializationError",
    "format_number",
    "parse_number",
]
