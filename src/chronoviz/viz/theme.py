"""
Shared chart defaults and axis helpers.

- apply_chart_defaults(): uniform fonts/grid/view for top-level charts.
- date_axis() / x_encoding(): date and numeric time axes with data-tight scales,
  so the drawn spans equal the data spans used for banking.
- strip_config(): make a configured chart layerable again.
"""

from __future__ import annotations

from typing import Any

import altair as alt
import polars as pl

from .transforms import is_temporal

__all__ = [
    "apply_chart_defaults",
    "date_axis",
    "x_encoding",
    "y_encoding",
    "placeholder",
    "strip_config",
]


# Uniform chart defaults for a professional look
def apply_chart_defaults(ch: alt.TopLevelMixin) -> alt.TopLevelMixin:
    return (
        ch.configure_axis(labelFontSize=12, titleFontSize=12, grid=True)
        .configure_legend(labelFontSize=12, titleFontSize=12)
        .configure_title(fontSize=14)
        .configure_view(strokeOpacity=0)
    )


def strip_config(ch: Any) -> Any:
    """Copy of ``ch`` without top-level config, width or height (layers reject them)."""
    out = ch.copy(deep=True)
    out.config = alt.Undefined
    if hasattr(out, "width"):
        out.width = alt.Undefined
    if hasattr(out, "height"):
        out.height = alt.Undefined
    return out


def placeholder(text: str) -> alt.TopLevelMixin:
    """Empty-data text chart shown instead of an empty plot."""
    return apply_chart_defaults(
        alt.Chart(alt.Data(values=[])).mark_text().encode(text=alt.value(text))
    )


def date_axis(
    format: str | None = None,
    *,
    tick_count: int | str | None = None,
    label_angle: float = 0,
    title: str | None = None,
) -> alt.Axis:
    """
    Axis for time scales.

    Args:
        format (str | None): d3 time format for dates (e.g., "%Y", "%b %Y") or number
            format for numeric years (e.g., "d").
        tick_count (int | str | None): Approximate tick count or a time interval name
            ("year", "month").
        label_angle (float): Label rotation in degrees.
        title (str | None): Axis title.
    """
    kwargs: dict[str, Any] = {"labelAngle": label_angle}
    if format is not None:
        kwargs["format"] = format
    if tick_count is not None:
        kwargs["tickCount"] = tick_count
    if title is not None:
        kwargs["title"] = title
    return alt.Axis(**kwargs)


def x_encoding(
    df: pl.DataFrame, x: str, *, axis: alt.Axis | None = None, title: str | None = None
) -> alt.X:
    """
    X channel for a time column: temporal for Date/Datetime, quantitative otherwise.

    Numeric years get an integer label format so 1990 is not drawn as "1,990".
    """
    if is_temporal(df, x):
        return alt.X(
            f"{x}:T",
            axis=axis if axis is not None else date_axis(title=title),
            scale=alt.Scale(nice=False),
        )
    return alt.X(
        f"{x}:Q",
        axis=axis if axis is not None else date_axis("d", title=title),
        scale=alt.Scale(zero=False, nice=False),
    )


def y_encoding(y: str, *, title: str | None = None, field_type: str = "Q") -> alt.Y:
    """Quantitative y channel with a data-tight scale."""
    return alt.Y(
        f"{y}:{field_type}",
        title=title if title is not None else y,
        scale=alt.Scale(zero=False, nice=False),
    )
