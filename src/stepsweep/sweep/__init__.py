"""Sweeps over several progressions at once."""

from stepsweep.sweep.plan import SweepPlan

__all__ = ["SweepPlan"]
