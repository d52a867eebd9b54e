from __future__ import annotations

import datetime as dt
import json
from pathlib import Path
from typing import Any

import altair as alt
import polars as pl
import pytest

from chronoviz.bank import (
    AspectRatioAdvisor,
    bank_to_45,
    banked_height,
    mean_segment_angle,
    ratio_for_size,
)
from chronoviz.core import DataSourceError, Series
from chronoviz.viz import (
    bank_frame,
    banked_line_chart,
    boxplot_by_period,
    connected_scatter,
    date_axis,
    event_timeline,
    highlight_lines,
    layer_with_rule_y,
    quantile_band_chart,
    save_chart,
    small_multiples,
    with_smoother,
)
from chronoviz.viz.transforms import quantiles_by


def find_in_spec(obj: Any, predicate) -> bool:
    """Recursively scan a chart spec dict for a predicate match."""
    if isinstance(obj, dict):
        if predicate(obj):
            return True
        return any(find_in_spec(v, predicate) for v in obj.values())
    if isinstance(obj, list):
        return any(find_in_spec(v, predicate) for v in obj)
    return False


def has_mark(kind: str):
    def pred(d: dict) -> bool:
        mark = d.get("mark")
        return mark == kind or (isinstance(mark, dict) and mark.get("type") == kind)

    return pred


def south_africa(df: pl.DataFrame) -> pl.DataFrame:
    return df.filter(pl.col("country") == "South Africa")


# 1) Banked line charts


def test_banked_line_chart_height_matches_advisor(life_expectancy: pl.DataFrame) -> None:
    df = south_africa(life_expectancy)
    spec = banked_line_chart(df, "year", "life_exp", width=600).to_dict()

    res = bank_to_45(Series.from_frame(df, "year", "life_exp"))
    expected = banked_height(res, 600, 50.0, 23.0)
    assert spec["width"] == 600
    assert spec["height"] == expected
    assert find_in_spec(spec, has_mark("line"))
    assert spec["encoding"]["x"]["type"] == "quantitative"
    assert spec["encoding"]["y"]["scale"]["zero"] is False
    assert "config" in spec


def test_banked_line_chart_explicit_height_and_title(life_expectancy: pl.DataFrame) -> None:
    spec = banked_line_chart(
        south_africa(life_expectancy), "year", "life_exp", height=123, title="SA"
    ).to_dict()
    assert spec["height"] == 123
    assert spec["title"] == "SA"


def test_banked_line_chart_groups_share_pooled_ratio(life_expectancy: pl.DataFrame) -> None:
    spec = banked_line_chart(life_expectancy, "year", "life_exp", color="country").to_dict()
    layout = bank_frame(life_expectancy, "year", "life_exp", group="country")
    assert spec["height"] == layout.height
    assert spec["encoding"]["color"]["field"] == "country"
    assert layout.result.n_segments == 15


def test_banked_line_chart_sub_range_changes_height() -> None:
    xs = list(range(0, 21))
    ys = [0.1 * x if x <= 10 else 1.0 + 2.0 * (x - 10) for x in xs]
    df = pl.DataFrame({"t": xs, "v": ys})
    full = banked_line_chart(df, "t", "v", width=400).to_dict()["height"]
    steep = banked_line_chart(df, "t", "v", width=400, x_range=(10, 20)).to_dict()["height"]
    assert steep < full


def test_banked_line_chart_temporal_axis() -> None:
    df = pl.DataFrame(
        {
            "date": [dt.date(2000, 1, 1), dt.date(2000, 2, 1), dt.date(2000, 3, 1)],
            "price": [1.0, 1.4, 1.1],
        }
    )
    ch = banked_line_chart(df, "date", "price", axis=date_axis("%b %Y", tick_count="month"))
    spec = ch.to_dict()
    assert spec["encoding"]["x"]["type"] == "temporal"
    assert spec["encoding"]["x"]["axis"]["format"] == "%b %Y"
    assert '"2000-02-01"' in json.dumps(spec)


def test_banked_line_chart_degenerate_uses_half_width() -> None:
    df = pl.DataFrame({"t": [1, 2, 3], "v": [5.0, 5.0, 5.0]})
    assert banked_line_chart(df, "t", "v", width=500).to_dict()["height"] == 250


def test_banked_line_chart_empty_and_missing_columns() -> None:
    empty = pl.DataFrame({"t": pl.Series([], dtype=pl.Int64), "v": pl.Series([], dtype=pl.Float64)})
    assert find_in_spec(banked_line_chart(empty, "t", "v").to_dict(), has_mark("text"))
    with pytest.raises(DataSourceError):
        banked_line_chart(empty, "t", "nope")


def test_custom_advisor_angle_changes_height(life_expectancy: pl.DataFrame) -> None:
    df = south_africa(life_expectancy)
    h45 = banked_line_chart(df, "year", "life_exp").to_dict()["height"]
    h20 = banked_line_chart(
        df, "year", "life_exp", advisor=AspectRatioAdvisor(target_angle=20.0)
    ).to_dict()["height"]
    assert h20 < h45


# 2) Multi-series encodings


def test_highlight_lines_layers(life_expectancy: pl.DataFrame) -> None:
    spec = highlight_lines(
        life_expectancy, "year", "life_exp", "country", ["South Africa", "Rwanda"]
    ).to_dict()
    assert len(spec["layer"]) == 3
    assert find_in_spec(spec, has_mark("text"))
    assert find_in_spec(spec, lambda d: d.get("detail", {}).get("field") == "country")
    hl = life_expectancy.filter(pl.col("country").is_in(["South Africa", "Rwanda"]))
    layout = bank_frame(hl, "year", "life_exp", group="country", extent=life_expectancy)
    assert spec["height"] == layout.height
    assert layout.y_span == 56.0


def test_highlight_lines_banks_over_drawn_axis_ranges(life_expectancy: pl.DataFrame) -> None:
    spec = highlight_lines(
        life_expectancy, "year", "life_exp", "country", ["South Africa"], width=400
    ).to_dict()
    # grey background draws every country, so the y axis runs 23 to 79
    realized = ratio_for_size(spec["width"], spec["height"], 50.0, 56.0)
    slopes = Series.from_frame(south_africa(life_expectancy), "year", "life_exp").slopes()
    assert mean_segment_angle(slopes, realized) == pytest.approx(45.0, abs=0.5)


def test_highlight_lines_unknown_entity_placeholder(life_expectancy: pl.DataFrame) -> None:
    spec = highlight_lines(life_expectancy, "year", "life_exp", "country", ["Atlantis"]).to_dict()
    assert find_in_spec(spec, has_mark("text"))


def test_connected_scatter_orders_by_time() -> None:
    df = pl.DataFrame(
        {
            "year": [2000, 2001, 2002],
            "unemployment": [4.0, 4.7, 5.8],
            "inflation": [3.4, 2.8, 1.6],
        }
    )
    spec = connected_scatter(df, "unemployment", "inflation", "year", label="year").to_dict()
    assert find_in_spec(spec, lambda d: d.get("order", {}).get("field") == "year")
    assert find_in_spec(spec, has_mark("text"))


def test_small_multiples_share_banked_height(life_expectancy: pl.DataFrame) -> None:
    spec = small_multiples(life_expectancy, "year", "life_exp", "country", panel_width=150).to_dict()
    layout = bank_frame(life_expectancy, "year", "life_exp", group="country", width=150)
    assert spec["facet"]["field"] == "country"
    assert spec["spec"]["height"] == layout.height
    assert spec["spec"]["width"] == 150


# 3) Smoothers and overlays


def test_with_smoother_loess(life_expectancy: pl.DataFrame) -> None:
    df = south_africa(life_expectancy)
    spec = with_smoother(banked_line_chart(df, "year", "life_exp"), df, "year", "life_exp").to_dict()
    assert find_in_spec(spec, lambda d: "loess" in d)
    assert "layer" in spec
    # config lives on the top level only
    assert all("config" not in layer for layer in spec["layer"])


def test_with_smoother_rolling_grouped(life_expectancy: pl.DataFrame) -> None:
    base = banked_line_chart(life_expectancy, "year", "life_exp", color="country")
    spec = with_smoother(
        base, life_expectancy, "year", "life_exp", method="rolling", window=3, group="country"
    ).to_dict()
    assert find_in_spec(spec, lambda d: d.get("field") == "life_exp_smooth")
    assert spec["height"] == base.to_dict()["height"]


def test_with_smoother_rejects_bad_input() -> None:
    df = pl.DataFrame({"d": [dt.date(2000, 1, 1), dt.date(2000, 1, 2)], "v": [1.0, 2.0]})
    base = banked_line_chart(df, "d", "v")
    with pytest.raises(ValueError):
        with_smoother(base, df, "d", "v", method="loess")
    with pytest.raises(ValueError):
        with_smoother(base, df, "d", "v", method="spline")


def test_layer_with_rule_y(life_expectancy: pl.DataFrame) -> None:
    base = banked_line_chart(south_africa(life_expectancy), "year", "life_exp")
    spec = layer_with_rule_y(base, 50.0).to_dict()
    assert find_in_spec(spec, has_mark("rule"))


# 4) Distributions and events


def test_quantile_band_chart_contains_bands_and_median(life_expectancy: pl.DataFrame) -> None:
    spec = quantile_band_chart(life_expectancy, "year", "life_exp").to_dict()

    def is_area_with_y_y2(d: dict) -> bool:
        if has_mark("area")(d):
            enc = d.get("encoding", {})
            return "y" in enc and "y2" in enc
        return False

    areas = [layer for layer in spec["layer"] if is_area_with_y_y2(layer)]
    assert len(areas) == 2
    assert find_in_spec(spec, lambda d: d.get("field") == "q50")
    assert find_in_spec(spec, has_mark("line"))


def test_quantile_band_chart_banks_median_over_band_range(life_expectancy: pl.DataFrame) -> None:
    spec = quantile_band_chart(life_expectancy, "year", "life_exp", width=600).to_dict()
    summary = quantiles_by(life_expectancy, "year", "life_exp", (0.1, 0.25, 0.5, 0.75, 0.9))
    y_span = summary["q90"].max() - summary["q10"].min()
    realized = ratio_for_size(spec["width"], spec["height"], 50.0, y_span)
    slopes = Series.from_frame(summary, "year", "q50").slopes()
    assert mean_segment_angle(slopes, realized) == pytest.approx(45.0, abs=0.5)


def test_boxplot_by_period(life_expectancy: pl.DataFrame) -> None:
    spec = boxplot_by_period(life_expectancy, "year", "life_exp").to_dict()
    assert find_in_spec(spec, has_mark("boxplot"))
    assert spec["encoding"]["x"]["type"] == "ordinal"


def test_event_timeline_famines() -> None:
    famines = pl.DataFrame(
        {
            "name": ["Great Leap Forward", "Bengal", "Ethiopia"],
            "start": [1959, 1943, 1983],
            "end": [1961, 1944, None],
            "deaths": [30_000_000, 2_100_000, 1_000_000],
        }
    )
    spec = event_timeline(famines, "start", "end", "name", size="deaths").to_dict()
    assert find_in_spec(spec, lambda d: has_mark("rule")(d) and "x2" in d.get("encoding", {}))
    assert find_in_spec(spec, lambda d: d.get("size", {}).get("field") == "deaths")
    y_sort = spec["layer"][0]["encoding"]["y"]["sort"]
    assert y_sort == ["Bengal", "Great Leap Forward", "Ethiopia"]


def test_event_timeline_empty() -> None:
    empty = pl.DataFrame(
        {"name": pl.Series([], dtype=pl.String), "start": pl.Series([], dtype=pl.Int64), "end": pl.Series([], dtype=pl.Int64)}
    )
    assert find_in_spec(event_timeline(empty, "start", "end", "name").to_dict(), has_mark("text"))


# 5) Save


def test_save_chart_json_and_html(tmp_path: Path, life_expectancy: pl.DataFrame) -> None:
    ch = banked_line_chart(south_africa(life_expectancy), "year", "life_exp")
    out_json = save_chart(ch, tmp_path / "sub" / "c.json")
    spec = json.loads(out_json.read_text())
    assert spec["height"] == ch.to_dict()["height"]
    out_html = save_chart(ch, tmp_path / "c.html")
    assert "vega" in out_html.read_text().lower()
    with pytest.raises(DataSourceError):
        save_chart(ch, tmp_path / "c.bmp")


def test_charts_are_altair_top_level(life_expectancy: pl.DataFrame) -> None:
    ch = banked_line_chart(life_expectancy, "year", "life_exp", color="country")
    assert isinstance(ch, alt.TopLevelMixin)
