"""
Distribution-over-time charts: quantile bands with a median line, and boxplots per period.
"""

from __future__ import annotations

from typing import Any

import altair as alt
import polars as pl

from chronoviz.bank.advisor import AspectRatioAdvisor
from chronoviz.core.constants import CHART_WIDTH
from chronoviz.io.read import require_columns

from .layout import bank_frame
from .theme import apply_chart_defaults, placeholder, x_encoding, y_encoding
from .transforms import quantile_column, quantiles_by, to_values

__all__ = ["quantile_band_chart", "boxplot_by_period"]


def quantile_band_chart(
    df: pl.DataFrame,
    x: str,
    y: str,
    *,
    outer: tuple[float, float] = (0.1, 0.9),
    inner: tuple[float, float] = (0.25, 0.75),
    width: int = CHART_WIDTH,
    height: int | None = None,
    advisor: AspectRatioAdvisor | None = None,
    color: str = "#4c78a8",
    title: str | None = None,
) -> alt.TopLevelMixin:
    """
    Outer and inner quantile bands plus the median line, one summary per x value.

    The height is banked on the median line.

    Args:
        df (pl.DataFrame): Long frame with many y observations per x (e.g., every
            country's life expectancy per year).
        outer (tuple[float, float]): Quantiles bounding the light band.
        inner (tuple[float, float]): Quantiles bounding the dark band.
    """
    require_columns(df, [x, y])
    if df.height == 0:
        return placeholder("No data")
    summary = quantiles_by(df, x, y, quantiles=(outer[0], inner[0], 0.5, inner[1], outer[1]))
    med = quantile_column(0.5)
    if height is None:
        # y axis spans the outer band, not just the median
        band_extent = pl.concat(
            [
                summary.select(x, pl.col(quantile_column(outer[0])).alias(med)),
                summary.select(x, pl.col(quantile_column(outer[1])).alias(med)),
            ]
        )
        height = bank_frame(summary, x, med, advisor=advisor, width=width, extent=band_extent).height

    data = alt.Data(values=to_values(summary))
    x_enc = x_encoding(summary, x)

    def band(lo: float, hi: float, opacity: float) -> alt.Chart:
        return (
            alt.Chart(data)
            .mark_area(color=color, opacity=opacity)
            .encode(x=x_enc, y=y_encoding(quantile_column(lo), title=y), y2=f"{quantile_column(hi)}:Q")
        )

    line = alt.Chart(data).mark_line(color=color).encode(x=x_enc, y=y_encoding(med, title=y))
    ch = alt.layer(band(*outer, 0.2), band(*inner, 0.35), line).properties(width=width, height=height)
    if title:
        ch = ch.properties(title=title)
    return apply_chart_defaults(ch)


def boxplot_by_period(
    df: pl.DataFrame,
    x: str,
    y: str,
    *,
    width: int = CHART_WIDTH,
    height: int = 300,
    extent: Any = 1.5,
    title: str | None = None,
) -> alt.TopLevelMixin:
    """Boxplot of y for each distinct x (ordinal), e.g., one box per decade."""
    require_columns(df, [x, y])
    if df.height == 0:
        return placeholder("No data")
    ch = (
        alt.Chart(alt.Data(values=to_values(df)))
        .mark_boxplot(extent=extent)
        .encode(x=alt.X(f"{x}:O"), y=y_encoding(y))
        .properties(width=width, height=height)
    )
    if title:
        ch = ch.properties(title=title)
    return apply_chart_defaults(ch)
