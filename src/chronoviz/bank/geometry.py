"""
Display geometry: convert between aspect ratios and chart pixel sizes.

A chart of width W over an x span Dx and height H over a y span Dy draws one x-unit
as W / Dx pixels and one y-unit as H / Dy pixels, so r = (H / Dy) / (W / Dx).
"""

from __future__ import annotations

from chronoviz.core.constants import MAX_HEIGHT, MIN_HEIGHT

from .advisor import BankingResult

__all__ = ["height_for_ratio", "ratio_for_size", "banked_height"]


def _require_positive(**values: float) -> None:
    for name, value in values.items():
        if not value > 0:
            raise ValueError(f"{name} must be > 0, got {value}")


def height_for_ratio(ratio: float, width: float, x_span: float, y_span: float) -> float:
    """
    Pixel height that realizes ``ratio`` for a chart of ``width`` pixels.

    Args:
        ratio (float): Aspect ratio r > 0.
        width (float): Plot width in pixels.
        x_span (float): Data range shown on the x axis.
        y_span (float): Data range shown on the y axis.

    Returns:
        float: H = r * W * y_span / x_span.

    Raises:
        ValueError: If any argument is not positive.

    Examples:
        >>> height_for_ratio(2.0, 600, 50, 10)
        240.0
    """
    _require_positive(ratio=ratio, width=width, x_span=x_span, y_span=y_span)
    return ratio * width * y_span / x_span


def ratio_for_size(width: float, height: float, x_span: float, y_span: float) -> float:
    """Aspect ratio realized by a ``width`` x ``height`` chart (inverse of height_for_ratio)."""
    _require_positive(width=width, height=height, x_span=x_span, y_span=y_span)
    return (height / y_span) / (width / x_span)


def banked_height(
    result: BankingResult,
    width: int,
    x_span: float,
    y_span: float,
    *,
    min_height: int = MIN_HEIGHT,
    max_height: int = MAX_HEIGHT,
) -> int:
    """
    Chart height for a banking result, clamped to [min_height, max_height].

    Degenerate results and zero spans fall back to half the width.
    """
    if result.degenerate or x_span <= 0 or y_span <= 0:
        raw = width / 2.0
    else:
        raw = height_for_ratio(result.ratio, width, x_span, y_span)
    return int(round(min(max(raw, float(min_height)), float(max_height))))
