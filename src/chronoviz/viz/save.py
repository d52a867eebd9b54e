"""
Chart persistence: Vega-Lite JSON or standalone HTML.
"""

from __future__ import annotations

import os
from pathlib import Path

import altair as alt
from loguru import logger

from chronoviz.core.errors import DataSourceError

__all__ = ["save_chart", "SUPPORTED_FORMATS"]

SUPPORTED_FORMATS = (".json", ".html")


def save_chart(chart: alt.TopLevelMixin, path: str | os.PathLike[str]) -> Path:
    """
    Write ``chart`` to ``path``; the suffix selects the format.

    Raises:
        DataSourceError: Unsupported suffix.
    """
    p = Path(path)
    if p.suffix.lower() not in SUPPORTED_FORMATS:
        raise DataSourceError(f"unsupported chart format {p.suffix!r}; expected one of {SUPPORTED_FORMATS}")
    p.parent.mkdir(parents=True, exist_ok=True)
    chart.save(str(p))
    logger.info("Wrote chart to {}", p)
    return p
