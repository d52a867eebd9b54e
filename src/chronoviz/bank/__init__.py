"""
chronoviz.bank — Aspect-ratio advisor ("banking to 45") and display geometry.

## Public API
- AspectRatioAdvisor — configurable advisor (target angle, method, bisection bounds).
- BankingResult — ratio plus diagnostics (achieved angle, iterations, degeneracy).
- bank_to_angle / bank_to_45 — functional shortcuts.
- height_for_ratio / ratio_for_size / banked_height — ratio <-> pixel size.

## Import DAG discipline
- Depends on chronoviz.core only; must not import io, viz, or cli at runtime.

## Examples
```python
from chronoviz.core import Series
from chronoviz.bank import bank_to_45, height_for_ratio

s = Series(x=[1950, 1960, 1970, 1980, 1990, 2000], y=[45, 50, 55, 60, 68, 60])
res = bank_to_45(s)
height_for_ratio(res.ratio, 600, s.x_span(), s.y_span())
```
"""

from __future__ import annotations

from .advisor import (
    AspectRatioAdvisor,
    BankingResult,
    bank_to_45,
    bank_to_angle,
    mean_segment_angle,
)
from .geometry import banked_height, height_for_ratio, ratio_for_size

__all__ = [
    "AspectRatioAdvisor",
    "BankingResult",
    "bank_to_45",
    "bank_to_angle",
    "mean_segment_angle",
    "banked_height",
    "height_for_ratio",
    "ratio_for_size",
]
