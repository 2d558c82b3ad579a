"""Text form of a progression.

Formatting produces ``[*]From <from> To <to> By <increment>``. Parsing is
deliberately forgiving: keywords are case-insensitive and may be abbreviated
to their first letter (``fr``, ``t``, ``b``), whitespace is free-form and a
leading ``*`` marks the progression as template-origin.
"""

from __future__ import annotations

import logging
import math
import re

from stepsweep.progression.errors import InvalidArgument

logger = logging.getLogger(__name__)

TEMPLATE_MARKER = "*"

# Compiled once at import, read-only afterwards.
_PROGRESSION_RE = re.compile(
    r"^\s*(\*?)\s*f r? o? m? \s*? (\S*) \s*? t o? \s*? (\S*) \s* b y? \s* (\S*)",
    re.IGNORECASE | re.VERBOSE,
)


def format_number(value: float) -> str:
    """Shortest text that parses back to the same double."""
    if math.isnan(value):
        return "NaN"
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def parse_number(token: str) -> float:
    """Parse a numeric token; raises ValueError on anything float() rejects."""
    if "_" in token:
        raise ValueError(f"could not convert string to float: {token!r}")
    return float(token)


def format_progression(from_value: float, to_value: float, increment: float,
                       from_template: bool = False) -> str:
    marker = TEMPLATE_MARKER if from_template else ""
    return (f"{marker}From {format_number(from_value)} "
            f"To {format_number(to_value)} By {format_number(increment)}")


def parse_components(text: str) -> tuple[bool, float, float, float]:
    """Split progression text into ``(from_template, from, to, increment)``.

    Only the grammar is checked here; direction consistency is the caller's
    concern.
    """
    if not text:
        raise InvalidArgument("progression text was not formatted correctly: ''")

    match = _PROGRESSION_RE.match(text)
    if match is None:
        raise InvalidArgument(f"progression text was not formatted correctly: {text!r}")

    try:
        from_value, to_value, increment = (parse_number(tok) for tok in match.group(2, 3, 4))
    except ValueError as exc:
        raise InvalidArgument(
            f"progression text was not formatted correctly: {text!r}"
        ) from exc

    from_template = match.group(1) == TEMPLATE_MARKER
    logger.debug("Parsed %r -> template=%s from=%r to=%r by=%r",
                 text, from_template, from_value, to_value, increment)
    return from_template, from_value, to_value, increment
