"""
Numeric defaults for the banking advisor and chart layout.

This module is zero-IO and uses only the Python standard library. Settings in
chronoviz.io.config take their defaults from here.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_TARGET_ANGLE",
    "DEFAULT_METHOD",
    "BANKING_METHODS",
    "MAX_ITERATIONS",
    "TOLERANCE",
    "DEGENERATE_RATIO",
    "MAX_BRACKET_EXPANSIONS",
    "CHART_WIDTH",
    "MIN_HEIGHT",
    "MAX_HEIGHT",
    "LOG_LEVEL",
]

# Target mean segment angle in degrees (Cleveland's banking to 45).
DEFAULT_TARGET_ANGLE: float = 45.0

DEFAULT_METHOD: str = "mean_angle"
BANKING_METHODS: tuple[str, ...] = ("mean_angle", "median_slope", "mean_slope")

# Bisection bounds: hard iteration cap and relative width tolerance on r.
MAX_ITERATIONS: int = 64
TOLERANCE: float = 1e-9

# Ratio reported for all-flat series.
DEGENERATE_RATIO: float = 1.0

# Each expansion doubles the upper bracket (only needed when flat segments drag the mean down).
MAX_BRACKET_EXPANSIONS: int = 200

# Chart layout defaults (pixels).
CHART_WIDTH: int = 600
MIN_HEIGHT: int = 80
MAX_HEIGHT: int = 1200

LOG_LEVEL: str = "WARNING"
