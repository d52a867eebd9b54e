"""
Polars transforms that prepare time-series frames for charting.

All functions are pure: they take a DataFrame and return a new one. No pandas.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

import polars as pl

from chronoviz.core.errors import DataSourceError
from chronoviz.io.read import require_columns

__all__ = [
    "to_values",
    "is_temporal",
    "filter_entities",
    "aggregate_by_period",
    "rolling_smooth",
    "quantiles_by",
    "quantile_column",
    "sample_series",
]

_AGGS = ("sum", "mean", "median", "min", "max", "count")


def is_temporal(df: pl.DataFrame, column: str) -> bool:
    """True when ``column`` is a Date or Datetime column."""
    dtype = df.schema[column]
    return dtype == pl.Date or isinstance(dtype, pl.Datetime)


def to_values(df: pl.DataFrame) -> list[dict[str, Any]]:
    """
    JSON-ready records for alt.Data(values=...).

    Date columns become "YYYY-MM-DD" strings and Datetime columns ISO-8601 strings
    so Vega-Lite can parse them as temporal fields. Zone-aware datetimes are written
    in UTC with a "Z" suffix; naive ones carry no offset.
    """
    casts = []
    for name, dtype in df.schema.items():
        if dtype == pl.Date:
            casts.append(pl.col(name).dt.strftime("%Y-%m-%d"))
        elif isinstance(dtype, pl.Datetime) and dtype.time_zone is not None:
            casts.append(
                pl.col(name).dt.convert_time_zone("UTC").dt.strftime("%Y-%m-%dT%H:%M:%SZ")
            )
        elif isinstance(dtype, pl.Datetime):
            casts.append(pl.col(name).dt.strftime("%Y-%m-%dT%H:%M:%S"))
    if casts:
        df = df.with_columns(casts)
    return df.to_dicts()


def filter_entities(df: pl.DataFrame, column: str, values: Iterable[Any]) -> pl.DataFrame:
    """Keep rows whose ``column`` is one of ``values`` (e.g., a few countries)."""
    require_columns(df, [column])
    return df.filter(pl.col(column).is_in(list(values)))


def aggregate_by_period(
    df: pl.DataFrame,
    x: str,
    y: str,
    *,
    every: str = "1mo",
    agg: str = "sum",
    group: str | None = None,
) -> pl.DataFrame:
    """
    Bucket a series into calendar periods (e.g., daily flights -> monthly totals).

    Args:
        df (pl.DataFrame): Input frame.
        x (str): Temporal (or integer) index column.
        y (str): Value column.
        every (str): Polars duration string ("1d", "1w", "1mo", "1y"; "10i" for integers).
        agg (str): One of "sum", "mean", "median", "min", "max", "count".
        group (str | None): Optional entity column aggregated separately.

    Returns:
        pl.DataFrame: Columns [group?, x, y], one row per (group, period), x is the
        period start.

    Raises:
        DataSourceError: Unknown aggregation or missing columns.
    """
    if agg not in _AGGS:
        raise DataSourceError(f"unknown aggregation {agg!r}; expected one of {_AGGS}")
    require_columns(df, [x, y, group])
    expr = getattr(pl.col(y), agg)().alias(y)
    sorted_df = df.sort([group, x] if group else x)
    out = sorted_df.group_by_dynamic(x, every=every, group_by=group).agg(expr)
    return out.sort([group, x] if group else x)


def rolling_smooth(
    df: pl.DataFrame,
    x: str,
    y: str,
    *,
    window: int = 5,
    group: str | None = None,
    center: bool = True,
) -> pl.DataFrame:
    """
    Add a moving-average column ``{y}_smooth`` (per group when given).

    Edges use the points available (min_samples=1), so the output has no nulls
    where the input has none.
    """
    if window < 1:
        raise ValueError("window must be >= 1")
    require_columns(df, [x, y, group])
    smooth = pl.col(y).rolling_mean(window_size=window, min_samples=1, center=center)
    if group:
        return df.sort([group, x]).with_columns(smooth.over(group).alias(f"{y}_smooth"))
    return df.sort(x).with_columns(smooth.alias(f"{y}_smooth"))


def quantile_column(q: float) -> str:
    """
    Column name for quantile ``q`` (Vega field names must not contain dots).

    Examples:
        >>> quantile_column(0.25), quantile_column(0.025)
        ('q25', 'q2_5')
    """
    return f"q{q * 100:g}".replace(".", "_")


def quantiles_by(
    df: pl.DataFrame,
    x: str,
    y: str,
    quantiles: Sequence[float] = (0.1, 0.25, 0.5, 0.75, 0.9),
) -> pl.DataFrame:
    """
    Per-x quantile summary of a distribution over time (one column per quantile).

    Raises:
        ValueError: If a quantile lies outside (0, 1).
    """
    for q in quantiles:
        if not 0.0 < q < 1.0:
            raise ValueError(f"quantiles must lie in (0, 1), got {q}")
    require_columns(df, [x, y])
    return (
        df.group_by(x)
        .agg(
            [pl.col(y).quantile(q, interpolation="linear").alias(quantile_column(q)) for q in quantiles]
            + [pl.col(y).count().alias("n")]
        )
        .sort(x)
    )


def sample_series(
    df: pl.DataFrame, x: str, *, max_points: int | None = None, stride: int | None = None
) -> pl.DataFrame:
    """Even down-sampling by stride, or by the stride that caps rows at max_points."""
    if stride is not None and stride > 1:
        return df.sort(x).with_row_index(name="_rn").filter(pl.col("_rn") % stride == 0).drop("_rn")
    if max_points is not None and max_points > 0 and df.height > max_points:
        # Approx even sample by stride
        stride = max((df.height + max_points - 1) // max_points, 1)
        return df.sort(x).with_row_index(name="_rn").filter(pl.col("_rn") % stride == 0).drop("_rn")
    return df
