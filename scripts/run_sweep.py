#!/usr/bin/env python3
"""Expand a sweep of progressions into its test points."""

import argparse
import sys
import xml.etree.ElementTree as ET

from stepsweep.core.config import SweepConfig
from stepsweep.core.logging import setup_logging
from stepsweep.progression import Progression, ProgressionError
from stepsweep.serialization.xml_codec import plan_to_element
from stepsweep.sweep import SweepPlan


def _parse_assignment(text: str) -> tuple[str, str]:
    name, sep, value = text.partition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text!r}")
    return name.strip(), value.strip()


def main() -> int:
    parser = argparse.ArgumentParser(description="Run a stepsweep expansion")
    parser.add_argument("--config", default="config/default.toml", help="Path to TOML config file")
    parser.add_argument("--logging.level", dest="logging_level")
    parser.add_argument("--sweep.element_name", dest="sweep_element_name")
    parser.add_argument("--progression", action="append", type=_parse_assignment, default=[],
                        metavar="NAME=TEXT", help='e.g. voltage="From 0 To 5 By 0.5"')
    parser.add_argument("--check", action="append", type=_parse_assignment, default=[],
                        metavar="NAME=VALUE", help="Report whether a value is swept")
    parser.add_argument("--csv", help="Write all points to this CSV file")
    parser.add_argument("--xml", action="store_true", help="Print the plan as XML")
    args = parser.parse_args()

    overrides: dict[str, object] = {}
    if args.logging_level is not None:
        overrides["logging.level"] = args.logging_level
    if args.sweep_element_name is not None:
        overrides["sweep.element_name"] = args.sweep_element_name

    cfg = SweepConfig.load_with_overrides(args.config, **overrides)
    setup_logging(cfg.logging.level)

    try:
        plan = SweepPlan.from_config(cfg)
        for name, text in args.progression:
            progression = Progression.parse(text)
            progression.selected = True
            plan.add(name, progression)
        checks = {name: float(value) for name, value in args.check}
    except (ProgressionError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    print(f"Sweep over {len(plan)} progressions:")
    for name in plan.names:
        p = plan.get(name)
        mark = "x" if p.selected else " "
        print(f"  [{mark}] {name}: {p}")

    for name, value in checks.items():
        found = name in plan and plan.get(name).has_value(value)
        print(f"  {name} has {value!r}: {found}")

    if args.xml:
        print(ET.tostring(plan_to_element(plan, cfg.sweep.element_name), encoding="unicode"))

    try:
        frame = plan.to_frame()
    except ProgressionError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    print(f"\n{len(frame)} test points")
    if args.csv:
        frame.to_csv(args.csv, index=False)
        print(f"Wrote {args.csv}")
    else:
        print(frame.to_string(index=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
