from __future__ import annotations

import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """Configure stdlib logging for stepsweep."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger("stepsweep")
    root.setLevel(numeric_level)

    # Re-running only adjusts the level
    for existing in root.handlers:
        if getattr(existing, "_stepsweep", False):
            existing.setLevel(numeric_level)
            return

    formatter = logging.Formatter(
        "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.setLevel(numeric_level)
    handler._stepsweep = True  # type: ignore[attr-defined]
    root.addHandler(handler)
