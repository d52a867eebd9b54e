"""
Configuration for chronoviz.

Defines ChronovizSettings, a frozen dataclass carrying advisor and chart-layout
defaults. Defaults are sourced from chronoviz.core.constants (the single source of
truth); TOML files and environment variables override them.

Precedence
- environment (CHRONOVIZ_*) > TOML (chronoviz.toml or [tool.chronoviz]) > defaults.

Notes
- Invalid values are ignored and the previous layer's value is kept.
- Depends only on stdlib and chronoviz.core.constants.
"""

from __future__ import annotations

import math
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from chronoviz.core.constants import (
    BANKING_METHODS,
    CHART_WIDTH,
    DEFAULT_METHOD,
    DEFAULT_TARGET_ANGLE,
    LOG_LEVEL,
    MAX_HEIGHT,
    MAX_ITERATIONS,
    MIN_HEIGHT,
    TOLERANCE,
)

__all__ = ["ChronovizSettings"]

_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}

# Field name -> environment suffix (CHRONOVIZ_<SUFFIX>).
_ENV_KEYS: dict[str, str] = {
    "target_angle": "TARGET_ANGLE",
    "method": "METHOD",
    "max_iterations": "MAX_ITERATIONS",
    "tolerance": "TOLERANCE",
    "chart_width": "CHART_WIDTH",
    "min_height": "MIN_HEIGHT",
    "max_height": "MAX_HEIGHT",
    "log_level": "LOG_LEVEL",
}


@dataclass(frozen=True)
class ChronovizSettings:
    """
    Runtime settings for the banking advisor and chart builders.

    Attributes:
        target_angle (float): Target mean segment angle in degrees, in (0, 90).
        method (str): Banking method ("mean_angle", "median_slope", "mean_slope").
        max_iterations (int): Bisection iteration cap (>= 1).
        tolerance (float): Relative bisection tolerance on the ratio (> 0).
        chart_width (int): Default plot width in pixels.
        min_height (int): Lower clamp for banked chart heights.
        max_height (int): Upper clamp for banked chart heights.
        log_level (str): Loguru level used by the CLI.

    Examples:
        >>> from chronoviz.io import ChronovizSettings
        >>> ChronovizSettings(target_angle=30.0)  # doctest: +ELLIPSIS
        ChronovizSettings(...)
    """

    target_angle: float = DEFAULT_TARGET_ANGLE
    method: str = DEFAULT_METHOD
    max_iterations: int = MAX_ITERATIONS
    tolerance: float = TOLERANCE
    chart_width: int = CHART_WIDTH
    min_height: int = MIN_HEIGHT
    max_height: int = MAX_HEIGHT
    log_level: str = LOG_LEVEL

    @classmethod
    def _apply_mapping(
        cls, base: ChronovizSettings, cfg: dict[str, Any] | None
    ) -> ChronovizSettings:
        """Apply a loose config mapping onto settings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        def _float(v: Any) -> float | None:
            try:
                out = float(v)
            except (TypeError, ValueError):
                return None
            return out if math.isfinite(out) else None

        def _int(v: Any) -> int | None:
            try:
                return int(v)
            except (TypeError, ValueError):
                return None

        if "target_angle" in cfg:
            angle = _float(cfg["target_angle"])
            if angle is not None and 0.0 < angle < 90.0:
                s = replace(s, target_angle=angle)

        if "method" in cfg and isinstance(cfg["method"], str):
            method = cfg["method"].strip().lower()
            if method in BANKING_METHODS:
                s = replace(s, method=method)

        if "max_iterations" in cfg:
            n = _int(cfg["max_iterations"])
            if n is not None and n >= 1:
                s = replace(s, max_iterations=n)

        if "tolerance" in cfg:
            tol = _float(cfg["tolerance"])
            if tol is not None and tol > 0:
                s = replace(s, tolerance=tol)

        for key in ("chart_width", "min_height", "max_height"):
            if key in cfg:
                px = _int(cfg[key])
                if px is not None and px > 0:
                    s = replace(s, **{key: px})

        if "log_level" in cfg and isinstance(cfg["log_level"], str):
            level = cfg["log_level"].strip().upper()
            if level in _LOG_LEVELS:
                s = replace(s, log_level=level)

        return s

    @classmethod
    def from_env(
        cls, base: ChronovizSettings | None = None, prefix: str = "CHRONOVIZ_"
    ) -> ChronovizSettings:
        """
        Build settings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - CHRONOVIZ_TARGET_ANGLE
            - CHRONOVIZ_METHOD ("mean_angle" | "median_slope" | "mean_slope")
            - CHRONOVIZ_MAX_ITERATIONS
            - CHRONOVIZ_TOLERANCE
            - CHRONOVIZ_CHART_WIDTH
            - CHRONOVIZ_MIN_HEIGHT
            - CHRONOVIZ_MAX_HEIGHT
            - CHRONOVIZ_LOG_LEVEL
        """
        s = base or cls()
        mapping: dict[str, Any] = {}
        for field_name, suffix in _ENV_KEYS.items():
            v = os.getenv(prefix + suffix)
            if v:
                mapping[field_name] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> ChronovizSettings:
        """
        Build settings from a TOML file.

        Search order when `path` is None:
            1) ./chronoviz.toml ([bank] and [chart] tables, or top-level keys)
            2) ./pyproject.toml under [tool.chronoviz]

        Returns defaults if no file is present or the file cannot be parsed.
        """
        s = cls()

        def _load_toml(p: Path) -> dict[str, Any] | None:
            try:
                with p.open("rb") as fh:
                    return tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError):
                return None

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "chronoviz.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            data = _load_toml(p)
            if not isinstance(data, dict):
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                top = tool.get("chronoviz", {}) if isinstance(tool, dict) else {}
            else:
                top = data
            if not isinstance(top, dict):
                continue
            # Accept [bank]/[chart] tables or flat keys.
            merged: dict[str, Any] = {
                k: v for k, v in top.items() if not isinstance(v, dict)
            }
            for table in ("bank", "chart", "logging"):
                if isinstance(top.get(table), dict):
                    merged.update(top[table])
            if merged:
                cfg = merged
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> ChronovizSettings:
        """
        Load settings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults
                (chronoviz.toml, pyproject.toml).
        """
        s = cls.from_toml(path)
        return cls.from_env(base=s)
