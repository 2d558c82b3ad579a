"""Attribute-level XML form of progressions.

A progression is written as a single element carrying four attributes::

    <Progression FromValue="0" ToValue="1.5" Increment="0.1" Selected="True" />

Template provenance is not stored; the reader supplies it.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Mapping

from stepsweep.progression.errors import StructuralDeserializationError
from stepsweep.progression.grammar import format_number, parse_number
from stepsweep.progression.model import Progression
from stepsweep.sweep.plan import SweepPlan

logger = logging.getLogger(__name__)

ELEMENT_NAME = Progression.__name__
PLAN_ELEMENT_NAME = "Sweep"

FROM_VALUE = "FromValue"
TO_VALUE = "ToValue"
INCREMENT = "Increment"
SELECTED = "Selected"
NAME = "Name"


def _format_bool(value: bool) -> str:
    return "True" if value else "False"


def _parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"not a boolean literal: {text!r}")


def _require(attrs: Mapping[str, str], name: str) -> str:
    if name not in attrs:
        raise StructuralDeserializationError(f"missing attribute {name!r}", attribute=name)
    return attrs[name]


def _read_float(attrs: Mapping[str, str], name: str) -> float:
    raw = _require(attrs, name)
    try:
        return parse_number(raw.strip())
    except ValueError as exc:
        raise StructuralDeserializationError(
            f"bad data in attribute {name!r}: {raw!r}", attribute=name
        ) from exc


# ---- Attributes ----

def to_attributes(progression: Progression) -> dict[str, str]:
    return {
        FROM_VALUE: format_number(progression.from_value),
        TO_VALUE: format_number(progression.to_value),
        INCREMENT: format_number(float(progression.increment)),
        SELECTED: _format_bool(progression.selected),
    }


def from_attributes(attrs: Mapping[str, str], from_template: bool = False) -> Progression:
    """Rebuild a progression from its four attributes.

    Raises StructuralDeserializationError for a missing or unparsable
    attribute, InvalidArgument if the values are direction-inconsistent.
    """
    from_value = _read_float(attrs, FROM_VALUE)
    to_value = _read_float(attrs, TO_VALUE)
    increment = _read_float(attrs, INCREMENT)

    raw_selected = _require(attrs, SELECTED)
    try:
        selected = _parse_bool(raw_selected)
    except ValueError as exc:
        raise StructuralDeserializationError(
            f"bad data in attribute {SELECTED!r}: {raw_selected!r}", attribute=SELECTED
        ) from exc

    progression = Progression(from_value, to_value, increment, from_template=from_template)
    progression.selected = selected
    return progression


# ---- Elements ----

def to_element(progression: Progression, element_name: str = ELEMENT_NAME) -> ET.Element:
    return ET.Element(element_name, to_attributes(progression))


def from_element(element: ET.Element, from_template: bool = False) -> Progression:
    return from_attributes(element.attrib, from_template=from_template)


def plan_to_element(plan: SweepPlan, element_name: str = ELEMENT_NAME) -> ET.Element:
    root = ET.Element(PLAN_ELEMENT_NAME)
    for name in plan.names:
        child = to_element(plan.get(name), element_name)
        child.set(NAME, name)
        root.append(child)
    return root


def plan_from_element(element: ET.Element, from_template: bool = False) -> SweepPlan:
    plan = SweepPlan()
    for child in element:
        name = _require(child.attrib, NAME)
        plan.add(name, from_element(child, from_template=from_template))
    logger.debug("Read sweep plan with %d progressions", len(plan))
    return plan


# ---- Serialization ----

def serialize(progression: Progression, element_name: str = ELEMENT_NAME) -> bytes:
    return ET.tostring(to_element(progression, element_name))


def deserialize(data: bytes | str, from_template: bool = False) -> Progression:
    try:
        element = ET.fromstring(data)
    except ET.ParseError as exc:
        raise StructuralDeserializationError(f"malformed XML: {exc}") from exc
    return from_element(element, from_template=from_template)
