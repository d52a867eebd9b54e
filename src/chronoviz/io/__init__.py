"""
chronoviz.io — Settings and table reading.

## Public API
- ChronovizSettings — advisor/layout configuration (env > TOML > defaults).
- read_table — CSV/TSV/Parquet into a Polars DataFrame with equality filters.
- parse_where — parse "COLUMN=VALUE" filters.
- require_columns — column presence check raising DataSourceError.

## Import DAG discipline
- Depends on stdlib, polars, loguru and chronoviz.core.*; must not import bank, viz, or cli.
"""

from __future__ import annotations

from .config import ChronovizSettings
from .read import parse_where, read_table, require_columns

__all__ = [
    "ChronovizSettings",
    "read_table",
    "parse_where",
    "require_columns",
]
