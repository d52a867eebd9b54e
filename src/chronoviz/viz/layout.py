"""
Banked chart layout: run the advisor on frame columns and size charts from it.

Temporal x columns are banked on a day-count scale; x_range bounds may be given as
dates/datetimes or numbers and are converted the same way.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import polars as pl

from chronoviz.bank.advisor import AspectRatioAdvisor, BankingResult
from chronoviz.bank.geometry import banked_height
from chronoviz.core.constants import CHART_WIDTH, MAX_HEIGHT, MIN_HEIGHT
from chronoviz.core.series import Series, as_day_count, temporal_to_days
from chronoviz.io.read import require_columns

__all__ = ["BankedLayout", "frame_series", "bank_frame"]


@dataclass(frozen=True)
class BankedLayout:
    """Banking result plus the chart size derived from it."""

    result: BankingResult
    width: int
    height: int
    x_span: float
    y_span: float


def frame_series(df: pl.DataFrame, x: str, y: str, group: str | None = None) -> list[Series]:
    """Split a long frame into one Series per group (a single Series when group is None)."""
    require_columns(df, [x, y, group])
    if group is None:
        return [Series.from_frame(df, x, y)]
    out: list[Series] = []
    for key, part in df.group_by(group, maintain_order=True):
        label = key[0] if isinstance(key, tuple) else key
        out.append(Series.from_frame(part, x, y, name=str(label)))
    return out


def _span(values: pl.Series) -> float:
    vals = values.drop_nulls()
    if vals.len() == 0:
        return 0.0
    return float(vals.max()) - float(vals.min())  # type: ignore[arg-type]


def bank_frame(
    df: pl.DataFrame,
    x: str,
    y: str,
    *,
    group: str | None = None,
    advisor: AspectRatioAdvisor | None = None,
    x_range: tuple[Any, Any] | None = None,
    width: int = CHART_WIDTH,
    min_height: int = MIN_HEIGHT,
    max_height: int = MAX_HEIGHT,
    strict: bool = False,
    extent: pl.DataFrame | None = None,
) -> BankedLayout:
    """
    Bank the series in ``df`` (pooled across groups) and size a chart of ``width``.

    The ratio comes from the x_range window; spans come from all rows, since the
    chart draws every row. Pass ``extent`` when the drawn axes cover more than
    ``df`` (a grey background layer, a band around a median): its ``x`` and ``y``
    columns then set the spans.

    Raises:
        DataSourceError: Missing or non-numeric columns.
        InsufficientDataError / UnreachableAngleError: From the advisor.
    """
    advisor = advisor or AspectRatioAdvisor()
    series = frame_series(df, x, y, group)
    window = None
    if x_range is not None:
        lo, hi = x_range
        window = (
            as_day_count(lo) if lo is not None else None,
            as_day_count(hi) if hi is not None else None,
        )
    if len(series) == 1:
        result = advisor.advise(series[0], x_range=window, strict=strict)
    else:
        result = advisor.advise_many(series, x_range=window, strict=strict)

    drawn = df if extent is None else extent
    require_columns(drawn, [x, y])
    numeric = temporal_to_days(drawn.select([x, y]).drop_nulls(), x)
    x_span = _span(numeric[x])
    y_span = _span(numeric[y])
    height = banked_height(
        result, width, x_span, y_span, min_height=min_height, max_height=max_height
    )
    return BankedLayout(result=result, width=width, height=height, x_span=x_span, y_span=y_span)
