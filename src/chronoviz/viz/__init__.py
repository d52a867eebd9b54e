"""
chronoviz.viz — Polars transforms and Altair chart builders for time series.

## Responsibilities
- Prepare frames for charting (period aggregation, rolling smoothers, quantile summaries).
- Build the common time-series chart families with banked heights.
- Never mutate inputs; builders return new charts.

## Public API
- transforms — to_values, aggregate_by_period, rolling_smooth, quantiles_by, sample_series.
- layout — bank_frame / BankedLayout (advisor + geometry on frame columns).
- timeseries — banked_line_chart, highlight_lines, connected_scatter, small_multiples,
  with_smoother, layer_with_rule_y, layer_with_overlay.
- distributions — quantile_band_chart, boxplot_by_period.
- events — event_timeline.
- theme — apply_chart_defaults, date_axis, x_encoding.
- save — save_chart.

## Import DAG discipline
- Depends on chronoviz.core, chronoviz.bank, chronoviz.io (require_columns), polars, altair.
- No pandas.

## Examples
```python
import polars as pl
from chronoviz.viz import banked_line_chart, with_smoother, save_chart

df = pl.DataFrame({"year": [1950, 1960, 1970, 1980, 1990, 2000],
                   "life_exp": [45.0, 50.0, 55.0, 60.0, 68.0, 60.0]})
ch = with_smoother(banked_line_chart(df, "year", "life_exp"), df, "year", "life_exp")
save_chart(ch, "life_exp.html")  # doctest: +SKIP
```
"""

from __future__ import annotations

from .distributions import boxplot_by_period, quantile_band_chart
from .events import event_timeline
from .layout import BankedLayout, bank_frame, frame_series
from .save import save_chart
from .theme import apply_chart_defaults, date_axis, x_encoding, y_encoding
from .timeseries import (
    banked_line_chart,
    connected_scatter,
    highlight_lines,
    layer_with_overlay,
    layer_with_rule_y,
    small_multiples,
    with_smoother,
)
from .transforms import (
    aggregate_by_period,
    filter_entities,
    quantiles_by,
    rolling_smooth,
    sample_series,
    to_values,
)

__all__ = [
    "BankedLayout",
    "bank_frame",
    "frame_series",
    "banked_line_chart",
    "highlight_lines",
    "connected_scatter",
    "small_multiples",
    "with_smoother",
    "layer_with_rule_y",
    "layer_with_overlay",
    "quantile_band_chart",
    "boxplot_by_period",
    "event_timeline",
    "apply_chart_defaults",
    "date_axis",
    "x_encoding",
    "y_encoding",
    "save_chart",
    "aggregate_by_period",
    "filter_entities",
    "quantiles_by",
    "rolling_smooth",
    "sample_series",
    "to_values",
]
