"""The Progression value type.

A progression is a closed interval ``[from_value, to_value]`` (or its
reverse) sampled at a fixed increment. Its members are::

    {x : from_value <= x <= to_value   (increment >= 0)
         to_value <= x <= from_value   (increment < 0)
     and x == from_value + y * increment for some integer y}

An increment of zero denotes the empty progression. The ``CONTINUOUS``
increment makes every real between the two endpoints a member.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal, localcontext
from enum import Enum

import numpy as np

from stepsweep.events.notifier import ChangeCallback, ChangeNotifier
from stepsweep.progression.errors import InvalidArgument, InvalidOperation
from stepsweep.progression.grammar import format_progression, parse_components

logger = logging.getLogger(__name__)

# Enough digits for the integer part of any quotient of two doubles
_DECIMAL_PRECISION = 700


class ContinuousSpan:
    """Increment marking every value in the interval as a member."""

    _instance: ContinuousSpan | None = None

    def __new__(cls) -> ContinuousSpan:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __float__(self) -> float:
        return math.nan

    def __repr__(self) -> str:
        return "CONTINUOUS"

    def __copy__(self) -> ContinuousSpan:
        return self

    def __deepcopy__(self, memo: dict) -> ContinuousSpan:
        return self

    def __reduce__(self) -> str:
        return "CONTINUOUS"


CONTINUOUS = ContinuousSpan()


class Field(str, Enum):
    FROM_VALUE = "from_value"
    TO_VALUE = "to_value"
    INCREMENT = "increment"
    SELECTED = "selected"


@dataclass(frozen=True, slots=True)
class _Snapshot:
    from_value: float
    to_value: float
    increment: float | ContinuousSpan


def _same(a: float, b: float) -> bool:
    return a == b or (math.isnan(a) and math.isnan(b))


def _normalize_increment(value: float | ContinuousSpan) -> float | ContinuousSpan:
    if value is CONTINUOUS:
        return CONTINUOUS
    value = float(value)
    if math.isnan(value):
        return CONTINUOUS
    if math.isinf(value):
        raise InvalidArgument("increment cannot be infinite.")
    return value


def _check_direction(from_value: float, to_value: float,
                     increment: float | ContinuousSpan) -> None:
    # Single-point and continuous progressions may run either way
    if increment is CONTINUOUS or from_value == to_value:
        return
    if increment == 0 and to_value < from_value:
        raise InvalidArgument(
            f"to_value cannot be less than from_value for an empty progression "
            f"(from={from_value!r}, to={to_value!r})."
        )
    if increment > 0 and to_value < from_value:
        raise InvalidArgument(
            f"to_value cannot be less than from_value for a positive increment "
            f"(from={from_value!r}, to={to_value!r}, by={increment!r})."
        )
    if increment < 0 and to_value > from_value:
        raise InvalidArgument(
            f"to_value cannot be greater than from_value for a negative increment "
            f"(from={from_value!r}, to={to_value!r}, by={increment!r})."
        )


def _as_decimal(value: float) -> Decimal:
    # Shortest round-trip text, so 0.1 is read as one tenth
    return Decimal(repr(value))


def _as_rounded_decimal(value: float) -> Decimal:
    # 15 significant digits: also drops noise such as 0.1 + 0.2
    return Decimal(format(value, ".15g"))


def _is_whole_steps(value: Decimal, origin: Decimal, step: Decimal) -> bool:
    """True if (value - origin) is an exact integer multiple of step."""
    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PRECISION
        return (value - origin) % step == 0


class Progression:
    """Arithmetic progression of values a controllable quantity takes on.

    Template-origin progressions (``from_template=True``) are read-only:
    assigning ``from_value``, ``to_value`` or ``increment`` raises
    :class:`InvalidOperation`. ``selected`` stays writable.

    Changes are reported to subscribers as ``(progression, Field)`` pairs.
    """

    __hash__ = None  # mutable

    def __init__(
        self,
        from_value: float = 0.0,
        to_value: float = 0.0,
        increment: float | ContinuousSpan = 0.0,
        from_template: bool = False,
    ) -> None:
        from_value = float(from_value)
        to_value = float(to_value)
        increment = _normalize_increment(increment)
        _check_direction(from_value, to_value, increment)
        self._init_state(from_value, to_value, increment, from_template, selected=False)

    def _init_state(self, from_value: float, to_value: float,
                    increment: float | ContinuousSpan, from_template: bool,
                    selected: bool) -> None:
        self._notifier = ChangeNotifier()
        self._from_value = from_value
        self._to_value = to_value
        self._store_increment(increment)
        self._from_template = bool(from_template)
        self._selected = bool(selected)
        self._snapshot: _Snapshot | None = None

    @classmethod
    def parse(cls, text: str) -> Progression:
        """Build a progression from its text form, e.g. ``"From 0 To 1.5 By 0.1"``."""
        from_template, from_value, to_value, increment = parse_components(text)
        return cls(from_value, to_value, increment, from_template=from_template)

    # ---- Change notification ----

    def subscribe(self, callback: ChangeCallback) -> None:
        self._notifier.subscribe(callback)

    def unsubscribe(self, callback: ChangeCallback) -> bool:
        return self._notifier.unsubscribe(callback)

    # ---- Properties ----

    @property
    def from_template(self) -> bool:
        return self._from_template

    @property
    def selected(self) -> bool:
        """Whether this progression's values are applied during a test."""
        return self._selected

    @selected.setter
    def selected(self, value: bool) -> None:
        value = bool(value)
        if value != self._selected:
            self._selected = value
            self._notifier.notify(self, Field.SELECTED)

    @property
    def from_value(self) -> float:
        """The first value this progression attains."""
        return self._from_value

    @from_value.setter
    def from_value(self, value: float) -> None:
        self._guard_template()
        value = float(value)
        if not _same(value, self._from_value):
            self._from_value = value
            self._notifier.notify(self, Field.FROM_VALUE)

    @property
    def to_value(self) -> float:
        """The last value this progression can attain."""
        return self._to_value

    @to_value.setter
    def to_value(self, value: float) -> None:
        self._guard_template()
        value = float(value)
        if not _same(value, self._to_value):
            self._to_value = value
            self._notifier.notify(self, Field.TO_VALUE)

    @property
    def increment(self) -> float | ContinuousSpan:
        """Step size; negative steps backward, zero means empty."""
        return self._increment

    @increment.setter
    def increment(self, value: float | ContinuousSpan) -> None:
        value = _normalize_increment(value)
        self._guard_template()
        if value is not self._increment and value != self._increment:
            self._store_increment(value)
            self._notifier.notify(self, Field.INCREMENT)

    @property
    def first(self) -> float | None:
        """First value, or None if the progression is empty."""
        return None if self._empty else self._from_value

    @property
    def is_empty(self) -> bool:
        return self._empty

    @property
    def is_continuous(self) -> bool:
        return self._increment is CONTINUOUS

    @property
    def is_increasing(self) -> bool:
        return self._increasing

    @property
    def editing(self) -> bool:
        return self._snapshot is not None

    def _store_increment(self, increment: float | ContinuousSpan) -> None:
        self._increment = increment
        # Cached for the O(1) predicates
        self._increasing = increment is not CONTINUOUS and increment > 0
        self._empty = increment is not CONTINUOUS and increment == 0

    def _guard_template(self) -> None:
        if self._from_template:
            raise InvalidOperation("Cannot change a progression that came from a template.")

    # ---- Set semantics ----

    def has_value(self, x: float) -> bool:
        """True if ``x`` is a member. O(1).

        For a discrete progression ``(x - from_value) / increment`` must be an
        integer. Operands are read as their shortest decimal text, so ``0.3`` is
        a member of ``From 0 To 1.5 By 0.1``; there is no tolerance band.
        """
        x = float(x)
        if self._increment is CONTINUOUS:
            low, high = sorted((self._from_value, self._to_value))
            return low <= x <= high

        in_range = (
            ((self._increasing or self._empty) and self._from_value <= x <= self._to_value)
            or self._to_value <= x <= self._from_value
        )
        if not in_range or self._empty:
            return False

        if not (math.isfinite(x) and math.isfinite(self._from_value)):
            return False
        return _is_whole_steps(_as_decimal(x), _as_decimal(self._from_value),
                               _as_decimal(self._increment))

    __contains__ = has_value

    def is_subset_of(self, other: Progression | None) -> bool:
        """True if every member of this progression is a member of ``other``. O(1).

        Approximate: some true subsets are reported as False. ``None`` is
        treated as the empty set.
        """
        # The empty set is a subset of everything
        if self._empty:
            return True

        if other is None or not other.has_value(self._from_value):
            return False

        # A single point already known to be in other
        if (self._increment is CONTINUOUS
                or abs(self._increment) > abs(self._from_value - self._to_value)):
            return True

        # The value one step before the end must not fall outside other
        boundary = self._to_value - self._increment
        inside = ((boundary < other._to_value) != (boundary < other._from_value)
                  and (boundary != other._to_value or boundary != other._from_value))
        if not inside:
            return False

        if other._increment is CONTINUOUS:
            return True

        # Float modulus is unreliable, so compare as decimals
        return _is_whole_steps(_as_rounded_decimal(self._increment), Decimal(0),
                               _as_rounded_decimal(other._increment))

    # ---- Enumeration ----

    def values(self) -> Iterator[float]:
        """Lazily yield members in traversal order.

        Ascending for a positive increment, descending for a negative one,
        nothing for an empty or continuous progression. Each value is the
        running sum ``from_value + increment + increment + ...``, so drift
        accumulates exactly as repeated addition would produce it.
        """
        return _accumulate(self._from_value, self._to_value, self._increment)

    def __iter__(self) -> Iterator[float]:
        return self.values()

    def to_array(self) -> np.ndarray:
        return np.fromiter(self.values(), dtype=np.float64)

    # ---- Edit transaction ----

    def begin_edit(self) -> None:
        self._snapshot = _Snapshot(self._from_value, self._to_value, self._increment)

    def cancel_edit(self) -> None:
        """Restore the values captured by :meth:`begin_edit`.

        No-op outside an edit. The edit stays open until :meth:`end_edit`.
        """
        if self._snapshot is None:
            return
        self._from_value = self._snapshot.from_value
        self._to_value = self._snapshot.to_value
        self._store_increment(self._snapshot.increment)

    def end_edit(self) -> None:
        """Close the edit and announce every field, changed or not."""
        self._snapshot = None
        for fld in Field:
            self._notifier.notify(self, fld)

    @contextmanager
    def edit(self) -> Iterator[Progression]:
        """``begin_edit`` on entry; ``cancel_edit`` on error; ``end_edit`` always."""
        self.begin_edit()
        try:
            yield self
        except Exception:
            self.cancel_edit()
            raise
        finally:
            self.end_edit()

    # ---- Validation ----

    def field_error(self, field: Field | str) -> str:
        """Error message for one field, or "" when it is valid."""
        validator = _FIELD_VALIDATORS.get(Field(field))
        return validator(self) if validator is not None else ""

    @property
    def error(self) -> str:
        """All current errors, one per line; "" when valid."""
        lines: list[str] = []
        if self._to_value < self._from_value and self._increasing:
            lines.append("to_value cannot be less than from_value.")
        increment_error = self.field_error(Field.INCREMENT)
        if increment_error:
            lines.append(increment_error)
        return "".join(line + "\n" for line in lines)

    # ---- Copy / compare ----

    def clone(self) -> Progression:
        """Independent copy, including ``selected`` and ``from_template``."""
        copy = Progression.__new__(Progression)
        copy._init_state(self._from_value, self._to_value, self._increment,
                         self._from_template, self._selected)
        return copy

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Progression):
            return NotImplemented
        return (_same(self._from_value, other._from_value)
                and _same(self._to_value, other._to_value)
                and (self._increment is other._increment or self._increment == other._increment)
                and self._from_template == other._from_template)

    def __str__(self) -> str:
        return format_progression(self._from_value, self._to_value,
                                  float(self._increment), self._from_template)

    def __repr__(self) -> str:
        return (f"Progression({self._from_value!r}, {self._to_value!r}, "
                f"{self._increment!r}, from_template={self._from_template})")


def _accumulate(start: float, stop: float,
                step: float | ContinuousSpan) -> Iterator[float]:
    if step is CONTINUOUS or step == 0:
        return
    keep_going: Callable[[float], bool]
    if step > 0:
        keep_going = lambda v: v <= stop  # noqa: E731
    else:
        keep_going = lambda v: v >= stop  # noqa: E731

    current = start
    while keep_going(current):
        yield current
        following = current + step
        if following == current:
            logger.warning("Enumeration stalled at %r: increment %r is below its precision",
                           current, step)
            return
        current = following


def _from_value_error(p: Progression) -> str:
    if p.from_value > p.to_value:
        return "from_value cannot be greater than to_value."
    return ""


def _to_value_error(p: Progression) -> str:
    if p.to_value < p.from_value:
        return "to_value cannot be less than from_value."
    return ""


def _increment_error(p: Progression) -> str:
    if not p.is_continuous and math.isinf(p.increment):
        return "increment must be finite."
    return ""


_FIELD_VALIDATORS: dict[Field, Callable[[Progression], str]] = {
    Field.FROM_VALUE: _from_value_error,
    Field.TO_VALUE: _to_value_error,
    Field.INCREMENT: _increment_error,
}
