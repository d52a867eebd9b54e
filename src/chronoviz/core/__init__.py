"""
Core contracts for chronoviz (series model, errors, constants, logging).

## Contracts
- Series — pydantic model of one ordered (x, y) series with validators.
- Errors — SeriesValidationError, banking errors, DataSourceError.
- Constants — advisor and layout defaults consumed by chronoviz.io.config.
- Logging — loguru setup (configure_logging).

## Notes
- Zero-IO policy: stdlib, pydantic, polars (for frame conversion) and loguru only.
- Higher layers (bank, io, viz, cli) import from here, never the reverse.
"""

from __future__ import annotations

from .errors import (
    BankingError,
    ChronovizError,
    DataSourceError,
    DegenerateSeriesError,
    InsufficientDataError,
    SeriesValidationError,
    UnreachableAngleError,
)
from .logs import configure_logging
from .series import Series, as_day_count, temporal_to_days

__all__ = [
    "Series",
    "temporal_to_days",
    "as_day_count",
    "configure_logging",
    "ChronovizError",
    "SeriesValidationError",
    "BankingError",
    "InsufficientDataError",
    "DegenerateSeriesError",
    "UnreachableAngleError",
    "DataSourceError",
]
