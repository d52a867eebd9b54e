"""
Individual-event timelines (e.g., famines): one row per event, a rule from start to
end, and a point sized by magnitude.
"""

from __future__ import annotations

import altair as alt
import polars as pl

from chronoviz.core.constants import CHART_WIDTH, MAX_HEIGHT, MIN_HEIGHT
from chronoviz.io.read import require_columns

from .theme import apply_chart_defaults, placeholder, x_encoding
from .transforms import to_values

__all__ = ["event_timeline"]


def event_timeline(
    df: pl.DataFrame,
    start: str,
    end: str,
    label: str,
    *,
    size: str | None = None,
    color: str | None = None,
    width: int = CHART_WIDTH,
    row_height: int = 18,
    title: str | None = None,
) -> alt.TopLevelMixin:
    """
    Timeline of events ordered by start.

    Args:
        df (pl.DataFrame): One row per event.
        start (str): Start column (year or date).
        end (str): End column, same type as start; null ends are drawn as points.
        label (str): Event name shown on the y axis.
        size (str | None): Magnitude column (e.g., excess deaths) encoded as point area.
        color (str | None): Category column (e.g., region).
        row_height (int): Pixels per event row; the total is clamped to the layout bounds.
    """
    require_columns(df, [start, end, label, size, color])
    if df.height == 0:
        return placeholder("No events")
    events = df.sort(start).with_columns(pl.col(end).fill_null(pl.col(start)))
    order = events[label].cast(pl.String).to_list()
    height = min(max(row_height * events.height, MIN_HEIGHT), MAX_HEIGHT)

    data = alt.Data(values=to_values(events))
    x_enc = x_encoding(events, start)
    y_enc = alt.Y(f"{label}:N", sort=order, title=None)
    common: dict = {"y": y_enc}
    if color:
        common["color"] = alt.Color(f"{color}:N")

    rules = alt.Chart(data).mark_rule(strokeWidth=3).encode(x=x_enc, x2=f"{end}", **common)
    point_enc = dict(common)
    if size:
        point_enc["size"] = alt.Size(f"{size}:Q", title=size)
    points = alt.Chart(data).mark_circle(opacity=0.7).encode(x=x_enc, **point_enc)

    ch = alt.layer(rules, points).properties(width=width, height=height)
    if title:
        ch = ch.properties(title=title)
    return apply_chart_defaults(ch)
