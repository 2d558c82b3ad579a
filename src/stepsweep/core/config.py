"""Configuration management for stepsweep using TOML files + kwargs overrides."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class SweepSection:
    element_name: str = "Progression"
    # name -> progression text, e.g. voltage = "From 0 To 5 By 0.5"
    progressions: dict[str, str] = field(default_factory=dict)
    # None selects every entry
    selected: list[str] | None = None


@dataclass
class SweepConfig:
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    sweep: SweepSection = field(default_factory=SweepSection)

    @staticmethod
    def defaults() -> SweepConfig:
        return SweepConfig()

    @staticmethod
    def load(path: str | Path) -> SweepConfig:
        """Load config from a TOML file. Missing file returns defaults."""
        cfg = SweepConfig()
        p = Path(path)
        if not p.exists():
            return cfg

        with open(p, "rb") as f:
            data = tomllib.load(f)

        _apply_toml(cfg, data)
        return cfg

    @staticmethod
    def load_with_overrides(path: str | Path, **kwargs: object) -> SweepConfig:
        """Load from TOML, then apply keyword overrides.

        Override keys use dot notation:
          logging.level=DEBUG
          sweep.element_name=Steps
        """
        cfg = SweepConfig.load(path)
        _apply_overrides(cfg, kwargs)
        return cfg


def _apply_toml(cfg: SweepConfig, data: dict) -> None:
    if "logging" in data:
        lg = data["logging"]
        if "level" in lg:
            cfg.logging.level = str(lg["level"])

    if "sweep" in data:
        s = data["sweep"]
        if "element_name" in s:
            cfg.sweep.element_name = str(s["element_name"])
        if "progressions" in s:
            cfg.sweep.progressions = {str(k): str(v) for k, v in s["progressions"].items()}
        if "selected" in s:
            cfg.sweep.selected = [str(name) for name in s["selected"]]


def _apply_overrides(cfg: SweepConfig, overrides: dict[str, object]) -> None:
    mapping: dict[str, tuple[object, str]] = {
        "logging.level": (cfg.logging, "level"),
        "sweep.element_name": (cfg.sweep, "element_name"),
    }

    for key, value in overrides.items():
        if key in mapping:
            obj, attr = mapping[key]
            setattr(obj, attr, str(value))
