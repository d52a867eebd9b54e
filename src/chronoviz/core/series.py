"""
Pydantic v2 model for an observed time series.

Responsibilities
- Hold one ordered (x, y) series as immutable tuples of floats.
- Enforce equal lengths, finite values, and strictly increasing x.
- Build series from Polars frames, converting Date/Datetime x columns to a day count.
- Provide the derived segment slopes and x-range windows used by the banking advisor.

Notes
- Validators raise SeriesValidationError, which pydantic surfaces as ValidationError.
- Day counts are relative to the Unix epoch; only differences matter for banking.

Examples:
    >>> from chronoviz.core.series import Series
    >>> s = Series(x=[1950, 1960, 1970], y=[45.0, 50.0, 55.0])
    >>> s.slopes()
    (0.5, 0.5)
"""

from __future__ import annotations

import datetime as dt
import math
from typing import Any

import polars as pl
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import DataSourceError, SeriesValidationError

__all__ = ["Series", "temporal_to_days", "as_day_count"]

_MS_PER_DAY = 86_400_000.0
_EPOCH = dt.date(1970, 1, 1)


def as_day_count(value: Any) -> float:
    """
    Convert a scalar x position to the numeric scale used by Series.

    Dates and datetimes become days since the Unix epoch (naive datetimes are read
    as UTC); numbers pass through as floats.

    Examples:
        >>> as_day_count(dt.date(1970, 1, 11))
        10.0
    """
    if isinstance(value, dt.datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=dt.UTC)
        return value.timestamp() * 1000.0 / _MS_PER_DAY
    if isinstance(value, dt.date):
        return float((value - _EPOCH).days)
    return float(value)


def temporal_to_days(df: pl.DataFrame, column: str) -> pl.DataFrame:
    """
    Replace a Date/Datetime column with a Float64 day count since the Unix epoch.

    Args:
        df (pl.DataFrame): Input frame.
        column (str): Column to convert. Numeric columns are cast to Float64 unchanged.

    Returns:
        pl.DataFrame: Frame with the converted column.

    Raises:
        DataSourceError: If the column dtype is neither temporal nor numeric.
    """
    dtype = df.schema[column]
    if dtype == pl.Date:
        expr = pl.col(column).cast(pl.Int32).cast(pl.Float64)
    elif isinstance(dtype, pl.Datetime):
        expr = pl.col(column).dt.epoch("ms").cast(pl.Float64) / _MS_PER_DAY
    elif dtype.is_numeric():
        expr = pl.col(column).cast(pl.Float64)
    else:
        raise DataSourceError(f"column {column!r} has unsupported dtype {dtype}")
    return df.with_columns(expr.alias(column))


class Series(BaseModel):
    """
    One observed time series (e.g., life expectancy by year for one country).

    Attributes:
        x (tuple[float, ...]): Strictly increasing positions (years, day counts, ...).
        y (tuple[float, ...]): Observed values, same length as x.
        name (str | None): Optional label (entity name).

    Raises:
        pydantic.ValidationError: Wrapping SeriesValidationError when lengths differ,
            values are not finite, or x is not strictly increasing.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    x: tuple[float, ...] = Field(default_factory=tuple)
    y: tuple[float, ...] = Field(default_factory=tuple)
    name: str | None = None

    @field_validator("x", "y", mode="after")
    @classmethod
    def _check_finite(cls, v: tuple[float, ...]) -> tuple[float, ...]:
        for value in v:
            if not math.isfinite(value):
                raise SeriesValidationError(f"series values must be finite, got {value!r}")
        return v

    @model_validator(mode="after")
    def _check_shape(self) -> Series:
        if len(self.x) != len(self.y):
            raise SeriesValidationError(
                f"x and y must have equal length (got {len(self.x)} and {len(self.y)})"
            )
        for a, b in zip(self.x, self.x[1:]):
            if not b > a:
                raise SeriesValidationError(f"x must be strictly increasing (found {a} then {b})")
        return self

    def __len__(self) -> int:
        return len(self.x)

    @classmethod
    def from_pairs(cls, pairs: Any, *, name: str | None = None) -> Series:
        """Build a series from an iterable of (x, y) pairs."""
        pts = [(float(px), float(py)) for px, py in pairs]
        return cls(x=tuple(p[0] for p in pts), y=tuple(p[1] for p in pts), name=name)

    @classmethod
    def from_frame(
        cls, df: pl.DataFrame, x: str, y: str, *, name: str | None = None
    ) -> Series:
        """
        Build a series from two frame columns.

        Rows with a null in either column are dropped and the rest sorted by x.
        Date/Datetime x columns are converted with temporal_to_days.

        Raises:
            DataSourceError: If a column is missing or has an unsupported dtype.
            pydantic.ValidationError: If x contains duplicates after sorting.
        """
        missing = [c for c in (x, y) if c not in df.columns]
        if missing:
            raise DataSourceError(f"missing columns: {missing}")
        sub = df.select([x, y]).drop_nulls()
        sub = temporal_to_days(sub, x)
        if not sub.schema[y].is_numeric():
            raise DataSourceError(f"column {y!r} must be numeric, got {sub.schema[y]}")
        sub = sub.sort(x)
        return cls(
            x=tuple(sub[x].cast(pl.Float64).to_list()),
            y=tuple(sub[y].cast(pl.Float64).to_list()),
            name=name,
        )

    def window(self, x_lo: float | None = None, x_hi: float | None = None) -> Series:
        """Return the points with x_lo <= x <= x_hi (open ends when None)."""
        if x_lo is None and x_hi is None:
            return self
        keep = [
            (px, py)
            for px, py in zip(self.x, self.y)
            if (x_lo is None or px >= x_lo) and (x_hi is None or px <= x_hi)
        ]
        return Series(
            x=tuple(p[0] for p in keep), y=tuple(p[1] for p in keep), name=self.name
        )

    def slopes(self) -> tuple[float, ...]:
        """Segment slopes (dy/dx) between consecutive points."""
        return tuple(
            (y1 - y0) / (x1 - x0)
            for x0, x1, y0, y1 in zip(self.x, self.x[1:], self.y, self.y[1:])
        )

    def x_span(self) -> float:
        return self.x[-1] - self.x[0] if self.x else 0.0

    def y_span(self) -> float:
        return max(self.y) - min(self.y) if self.y else 0.0
