from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator, Mapping

import pandas as pd

from stepsweep.core.config import SweepConfig
from stepsweep.progression.errors import InvalidArgument
from stepsweep.progression.model import Progression

logger = logging.getLogger(__name__)


class SweepPlan:
    """Named progressions swept together during a test run.

    Only selected, non-empty progressions take part. Points are the
    cartesian product of their values, the first-added name varying slowest.
    """

    def __init__(self, progressions: Mapping[str, Progression] | None = None) -> None:
        self._progressions: dict[str, Progression] = {}
        for name, progression in (progressions or {}).items():
            self.add(name, progression)

    @classmethod
    def from_config(cls, cfg: SweepConfig) -> SweepPlan:
        """Parse every configured progression and apply the selection list."""
        section = cfg.sweep
        if section.selected is not None:
            unknown = sorted(set(section.selected) - set(section.progressions))
            if unknown:
                raise InvalidArgument(f"selected names are not configured: {unknown}")

        plan = cls()
        for name, text in section.progressions.items():
            progression = Progression.parse(text)
            progression.selected = section.selected is None or name in section.selected
            plan.add(name, progression)
        logger.debug("Built sweep plan: %s", ", ".join(plan.names))
        return plan

    def add(self, name: str, progression: Progression) -> None:
        if name in self._progressions:
            raise InvalidArgument(f"duplicate progression name: {name!r}")
        self._progressions[name] = progression

    def get(self, name: str) -> Progression:
        return self._progressions[name]

    @property
    def names(self) -> list[str]:
        return list(self._progressions)

    def __len__(self) -> int:
        return len(self._progressions)

    def __contains__(self, name: object) -> bool:
        return name in self._progressions

    def selected(self) -> list[tuple[str, Progression]]:
        return [(name, p) for name, p in self._progressions.items()
                if p.selected and not p.is_empty]

    def points(self) -> Iterator[dict[str, float]]:
        """Yield every test point as ``{name: value}``."""
        active = self.selected()
        for name, p in active:
            if p.is_continuous:
                raise InvalidArgument(f"cannot enumerate continuous progression {name!r}")
        if not active:
            return
        names = [name for name, _ in active]
        for combo in itertools.product(*(p.values() for _, p in active)):
            yield dict(zip(names, combo))

    def to_frame(self) -> pd.DataFrame:
        """All points as a DataFrame, one column per selected progression."""
        columns = [name for name, _ in self.selected()]
        return pd.DataFrame(list(self.points()), columns=columns)

    def contains(self, point: Mapping[str, float]) -> bool:
        """True if every selected progression has the point's coordinate."""
        return all(name in point and p.has_value(point[name])
                   for name, p in self.selected())

    def is_subset_of(self, other: SweepPlan) -> bool:
        """True if each selected progression is a subset of its namesake in other."""
        return all(p.is_subset_of(other._progressions.get(name))
                   for name, p in self.selected())
