"""
Time-series chart builders: banked lines, highlighted spaghetti plots, connected
scatterplots, small multiples, and smoother overlays.

Every builder draws from alt.Data(values=...) produced by to_values(), so charts
serialize without a DataFrame transformer. Heights come from the banking advisor
unless an explicit height is given.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import altair as alt
import polars as pl

from chronoviz.bank.advisor import AspectRatioAdvisor
from chronoviz.core.constants import CHART_WIDTH
from chronoviz.io.read import require_columns

from .layout import bank_frame
from .theme import apply_chart_defaults, placeholder, strip_config, x_encoding, y_encoding
from .transforms import is_temporal, rolling_smooth, to_values

__all__ = [
    "banked_line_chart",
    "highlight_lines",
    "connected_scatter",
    "small_multiples",
    "with_smoother",
    "layer_with_rule_y",
    "layer_with_overlay",
]

_GREY = "#bbbbbb"


def banked_line_chart(
    df: pl.DataFrame,
    x: str,
    y: str,
    *,
    color: str | None = None,
    width: int = CHART_WIDTH,
    height: int | None = None,
    advisor: AspectRatioAdvisor | None = None,
    x_range: tuple[Any, Any] | None = None,
    axis: alt.Axis | None = None,
    title: str | None = None,
) -> alt.TopLevelMixin:
    """
    Line chart whose height banks the series to the advisor's target angle.

    Args:
        df (pl.DataFrame): Long frame with x, y (and optional color) columns.
        x (str): Time column (numeric year or Date/Datetime).
        y (str): Value column.
        color (str | None): Entity column; groups are banked together with one ratio.
        width (int): Plot width in pixels.
        height (int | None): Explicit height; skips banking when given.
        advisor (AspectRatioAdvisor | None): Advisor to use (defaults to 45 degrees).
        x_range (tuple | None): Sub-range whose segments drive the ratio (e.g., a
            cyclical stretch) while the whole series is drawn.
        axis (alt.Axis | None): X axis override (see date_axis()).
        title (str | None): Chart title.

    Returns:
        alt.TopLevelMixin: Configured line chart.
    """
    require_columns(df, [x, y, color])
    if df.height == 0:
        return placeholder("No data")
    if height is None:
        height = bank_frame(df, x, y, group=color, advisor=advisor, x_range=x_range, width=width).height

    enc: dict[str, Any] = {"x": x_encoding(df, x, axis=axis), "y": y_encoding(y)}
    if color:
        enc["color"] = alt.Color(f"{color}:N")
    ch = (
        alt.Chart(alt.Data(values=to_values(df.sort(x))))
        .mark_line()
        .encode(**enc)
        .properties(width=width, height=height)
    )
    if title:
        ch = ch.properties(title=title)
    return apply_chart_defaults(ch)


def highlight_lines(
    df: pl.DataFrame,
    x: str,
    y: str,
    group: str,
    highlight: Sequence[Any],
    *,
    width: int = CHART_WIDTH,
    height: int | None = None,
    advisor: AspectRatioAdvisor | None = None,
    label: bool = True,
    title: str | None = None,
) -> alt.TopLevelMixin:
    """
    Many entities in grey with a few highlighted in colour and labelled at their end.

    The ratio is banked on the highlighted entities only, since those carry the story.
    """
    require_columns(df, [x, y, group])
    if df.height == 0:
        return placeholder("No data")
    hi = df.filter(pl.col(group).is_in(list(highlight)))
    if hi.height == 0:
        return placeholder(f"None of {list(highlight)} found in {group!r}")
    if height is None:
        height = bank_frame(
            hi, x, y, group=group, advisor=advisor, width=width, extent=df
        ).height

    x_enc = x_encoding(df, x)
    y_enc = y_encoding(y)
    background = (
        alt.Chart(alt.Data(values=to_values(df.sort(x))))
        .mark_line(color=_GREY, strokeWidth=1, opacity=0.6)
        .encode(x=x_enc, y=y_enc, detail=f"{group}:N")
    )
    foreground = (
        alt.Chart(alt.Data(values=to_values(hi.sort(x))))
        .mark_line(strokeWidth=2.5)
        .encode(x=x_enc, y=y_enc, color=alt.Color(f"{group}:N", legend=None if label else alt.Undefined))
    )
    layers: list[Any] = [background, foreground]
    if label:
        ends = hi.sort(x).group_by(group, maintain_order=True).last()
        layers.append(
            alt.Chart(alt.Data(values=to_values(ends)))
            .mark_text(align="left", dx=4)
            .encode(x=x_enc, y=y_enc, text=f"{group}:N", color=alt.Color(f"{group}:N", legend=None))
        )
    ch = alt.layer(*layers).properties(width=width, height=height)
    if title:
        ch = ch.properties(title=title)
    return apply_chart_defaults(ch)


def connected_scatter(
    df: pl.DataFrame,
    x: str,
    y: str,
    order: str,
    *,
    label: str | None = None,
    width: int = 400,
    height: int = 400,
    title: str | None = None,
) -> alt.TopLevelMixin:
    """
    Path through (x, y) points in the order of a third (time) variable.

    Neither axis is time here, so the points are joined in ``order`` rather than by x.
    """
    require_columns(df, [x, y, order, label])
    if df.height == 0:
        return placeholder("No data")
    order_type = "T" if is_temporal(df, order) else "Q"
    data = alt.Data(values=to_values(df.sort(order)))
    path = (
        alt.Chart(data)
        .mark_line(point=True)
        .encode(
            x=alt.X(f"{x}:Q", scale=alt.Scale(zero=False)),
            y=alt.Y(f"{y}:Q", scale=alt.Scale(zero=False)),
            order=alt.Order(f"{order}:{order_type}"),
        )
    )
    layers: list[Any] = [path]
    if label:
        layers.append(
            alt.Chart(data)
            .mark_text(align="left", dx=5, dy=-5, fontSize=10)
            .encode(x=f"{x}:Q", y=f"{y}:Q", text=f"{label}:N")
        )
    ch = alt.layer(*layers).properties(width=width, height=height)
    if title:
        ch = ch.properties(title=title)
    return apply_chart_defaults(ch)


def small_multiples(
    df: pl.DataFrame,
    x: str,
    y: str,
    facet: str,
    *,
    columns: int = 4,
    panel_width: int = 150,
    advisor: AspectRatioAdvisor | None = None,
    title: str | None = None,
) -> alt.TopLevelMixin:
    """
    Lattice of line panels, one per ``facet`` value, sharing scales and one banked ratio.
    """
    require_columns(df, [x, y, facet])
    if df.height == 0:
        return placeholder("No data")
    layout = bank_frame(df, x, y, group=facet, advisor=advisor, width=panel_width)
    ch = (
        alt.Chart(alt.Data(values=to_values(df.sort([facet, x]))))
        .mark_line()
        .encode(x=x_encoding(df, x), y=y_encoding(y))
        .properties(width=panel_width, height=layout.height)
        .facet(facet=alt.Facet(f"{facet}:N", title=None), columns=columns)
    )
    if title:
        ch = ch.properties(title=title)
    return apply_chart_defaults(ch)


def with_smoother(
    chart: Any,
    df: pl.DataFrame,
    x: str,
    y: str,
    *,
    method: str = "loess",
    bandwidth: float = 0.3,
    window: int = 5,
    group: str | None = None,
    color: str = "#d62728",
) -> alt.TopLevelMixin:
    """
    Overlay a trend line on an existing chart.

    Args:
        method (str): "loess" (Vega-Lite loess transform; numeric x) or "rolling"
            (centered moving average computed in Polars).
        bandwidth (float): Loess bandwidth in (0, 1].
        window (int): Rolling window in rows.
        group (str | None): Smooth each entity separately.

    Raises:
        ValueError: Unknown method, or loess requested on a temporal x column.
    """
    require_columns(df, [x, y, group])
    enc: dict[str, Any] = {"x": x_encoding(df, x)}
    if group:
        enc["detail"] = f"{group}:N"
    if method == "loess":
        if is_temporal(df, x):
            raise ValueError("loess smoothing needs a numeric x column; use method='rolling'")
        base = alt.Chart(alt.Data(values=to_values(df)))
        if group:
            base = base.transform_loess(x, y, bandwidth=bandwidth, groupby=[group])
        else:
            base = base.transform_loess(x, y, bandwidth=bandwidth)
        overlay = base.mark_line(color=color, strokeDash=[6, 3]).encode(y=y_encoding(y), **enc)
    elif method == "rolling":
        sm = rolling_smooth(df, x, y, window=window, group=group)
        overlay = (
            alt.Chart(alt.Data(values=to_values(sm)))
            .mark_line(color=color, strokeDash=[6, 3])
            .encode(y=y_encoding(f"{y}_smooth", title=y), **enc)
        )
    else:
        raise ValueError(f"unknown smoothing method {method!r}; expected 'loess' or 'rolling'")
    return layer_with_overlay(chart, overlay)


def _layer(base: Any, *others: Any) -> alt.LayerChart:
    width = getattr(base, "width", alt.Undefined)
    height = getattr(base, "height", alt.Undefined)
    ch = alt.layer(strip_config(base), *others)
    if width is not alt.Undefined:
        ch = ch.properties(width=width)
    if height is not alt.Undefined:
        ch = ch.properties(height=height)
    return ch


def layer_with_rule_y(base: Any, y: float, *, color: str = "#999") -> alt.TopLevelMixin:
    """Return a LayerChart that overlays a horizontal rule at y on the base chart.

    Args:
        base (alt.TopLevelMixin): Base chart to layer on (configured or not).
        y (float): Y value for the rule.
        color (str): Rule color (default '#999').
    """
    rule = alt.Chart(alt.Data(values=[{"y": float(y)}])).mark_rule(color=color).encode(y="y:Q")
    return apply_chart_defaults(_layer(base, rule))


def layer_with_overlay(base: Any, overlay: Any) -> alt.TopLevelMixin:
    """Return a LayerChart combining a base chart with an overlay chart."""
    return apply_chart_defaults(_layer(base, strip_config(overlay)))
