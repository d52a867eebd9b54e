"""
Exception types raised by series validation, banking, and table loading.

Provides typed exceptions for chronoviz failures:
- SeriesValidationError for malformed series input (ordering, finiteness, lengths).
- InsufficientDataError when fewer than two points remain after filtering.
- DegenerateSeriesError for all-flat series (only raised in strict mode).
- UnreachableAngleError when flat segments cap the achievable mean angle.
- DataSourceError for unreadable tables or missing columns.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - Banking errors subclass ValueError: every failure reflects invalid input and is
      never retried.

Examples:
    >>> from chronoviz.core.errors import BankingError, InsufficientDataError
    >>> issubclass(InsufficientDataError, BankingError)
    True
"""

from __future__ import annotations

__all__ = [
    "ChronovizError",
    "SeriesValidationError",
    "BankingError",
    "InsufficientDataError",
    "DegenerateSeriesError",
    "UnreachableAngleError",
    "DataSourceError",
]


class ChronovizError(Exception):
    """Base class for chronoviz errors."""


class SeriesValidationError(ChronovizError, ValueError):
    """Series input failed validation (non-increasing x, non-finite values, length mismatch)."""


class BankingError(ChronovizError, ValueError):
    """Base class for aspect-ratio advisor failures."""


class InsufficientDataError(BankingError):
    """Fewer than two points remain after range filtering."""


class DegenerateSeriesError(BankingError):
    """
    Every segment slope is zero, so any ratio satisfies the target.

    Notes:
        Only raised when the advisor is called with ``strict=True``; the default call
        returns ratio 1.0 with ``degenerate=True``.
    """


class UnreachableAngleError(BankingError):
    """
    Target angle exceeds what the series can reach.

    Notes:
        With k nonzero slopes out of n segments the mean angle is bounded above by
        90 * k / n degrees.
    """


class DataSourceError(ChronovizError):
    """
    Raised when a table cannot be read or lacks required columns.

    Examples:
        - Unsupported file suffix
        - Column named on the command line is absent
    """
