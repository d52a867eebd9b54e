"""
Table reading for chart inputs.

Overview
- read_table(): load a CSV or Parquet file into a Polars DataFrame with optional
  column projection and equality filters.
- parse_where(): turn "COL=VALUE" strings (CLI syntax) into a filter mapping.

Notes
- CSV reads use try_parse_dates so ISO date columns arrive as Date/Datetime.
- Filter values are compared as strings when the column is textual, otherwise cast
  to the column dtype.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import polars as pl
from loguru import logger

from chronoviz.core.errors import DataSourceError

__all__ = ["read_table", "parse_where", "require_columns"]

_SUFFIXES = {".csv", ".tsv", ".parquet", ".pq"}


def require_columns(df: pl.DataFrame, columns: Iterable[str | None]) -> None:
    """Raise DataSourceError naming any of ``columns`` absent from ``df`` (None entries skipped)."""
    missing = [c for c in columns if c is not None and c not in df.columns]
    if missing:
        raise DataSourceError(f"missing columns: {missing} (available: {df.columns})")


def parse_where(items: Iterable[str] | None) -> dict[str, str]:
    """
    Parse CLI-style equality filters.

    Args:
        items: Strings of the form "column=value".

    Returns:
        dict[str, str]: Mapping column -> raw value.

    Raises:
        DataSourceError: If an item lacks "=" or has an empty column name.

    Examples:
        >>> parse_where(["country=South Africa"])
        {'country': 'South Africa'}
    """
    out: dict[str, str] = {}
    for item in items or []:
        if "=" not in item:
            raise DataSourceError(f"filter {item!r} must look like COLUMN=VALUE")
        k, v = item.split("=", 1)
        k = k.strip()
        if not k:
            raise DataSourceError(f"filter {item!r} has an empty column name")
        out[k] = v.strip()
    return out


def _filter_expr(df: pl.DataFrame, column: str, value: Any) -> pl.Expr:
    dtype = df.schema[column]
    if dtype == pl.String or not isinstance(value, str):
        return pl.col(column) == value
    try:
        typed = pl.Series([value]).cast(dtype, strict=True)[0]
    except pl.exceptions.PolarsError as e:
        raise DataSourceError(f"cannot compare column {column!r} ({dtype}) with {value!r}") from e
    return pl.col(column) == typed


def read_table(
    path: str | os.PathLike[str],
    *,
    columns: list[str] | None = None,
    where: Mapping[str, Any] | None = None,
) -> pl.DataFrame:
    """
    Read a CSV/TSV/Parquet table.

    Args:
        path: File path; the suffix selects the reader.
        columns: Optional projection (validated after reading).
        where: Optional equality filters applied before projection.

    Returns:
        pl.DataFrame: Loaded (and filtered) frame.

    Raises:
        DataSourceError: Missing file, unsupported suffix, parse failure, or missing columns.
    """
    p = Path(path)
    suffix = p.suffix.lower()
    if suffix not in _SUFFIXES:
        raise DataSourceError(f"unsupported table format {suffix!r} for {p} (expected {sorted(_SUFFIXES)})")
    if not p.exists():
        raise DataSourceError(f"table not found: {p}")
    try:
        if suffix in (".parquet", ".pq"):
            df = pl.read_parquet(p)
        else:
            df = pl.read_csv(p, separator="\t" if suffix == ".tsv" else ",", try_parse_dates=True)
    except (OSError, pl.exceptions.PolarsError) as e:
        raise DataSourceError(f"failed to read {p}: {e}") from e

    if where:
        require_columns(df, where.keys())
        for column, value in where.items():
            df = df.filter(_filter_expr(df, column, value))
    if columns:
        require_columns(df, columns)
        df = df.select(columns)
    logger.debug("Read {} rows x {} columns from {}", df.height, df.width, p)
    return df
