"""
chronoviz — Aspect-ratio banking and chart builders for time-series visualization.

## Packages
- core — Series model, errors, constants, logging.
- bank — AspectRatioAdvisor ("banking to 45") and ratio <-> pixel geometry.
- io — ChronovizSettings (env > TOML > defaults) and table reading.
- viz — Polars transforms and Altair chart builders with banked heights.
- cli — `chronoviz bank` / `chronoviz chart`.

## Notes
- Log records of this package are disabled until chronoviz.core.configure_logging()
  is called.
"""

from __future__ import annotations

from loguru import logger

from .bank import AspectRatioAdvisor, BankingResult, bank_to_45, bank_to_angle
from .core import Series, configure_logging

logger.disable("chronoviz")

__version__ = "0.1.0"

__all__ = [
    "AspectRatioAdvisor",
    "BankingResult",
    "Series",
    "bank_to_45",
    "bank_to_angle",
    "configure_logging",
    "__version__",
]
