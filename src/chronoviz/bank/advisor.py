"""
Aspect-ratio advisor ("banking to 45").

Overview
- AspectRatioAdvisor.advise(): choose the ratio r (physical length of one y-unit
  relative to one x-unit) so the mean absolute segment angle of a series matches a
  target angle, optionally over an x sub-range.
- bank_to_angle() / bank_to_45(): functional shortcuts with default settings.

Methods
- "mean_angle": solve mean_i atan(|s_i| * r) = theta by geometric bisection on r.
  The left side is strictly increasing in r whenever any slope is nonzero, so the
  root is unique. Bracket: [tan(theta) / max|s|, tan(theta) / min nonzero |s|],
  doubled upward while flat segments keep the mean below theta.
- "median_slope": r = tan(theta) / median of nonzero |s_i|.
- "mean_slope": r = tan(theta) / mean |s_i|.

Degenerate input
- All slopes zero: r = DEGENERATE_RATIO with degenerate=True, or DegenerateSeriesError
  when strict=True.

Notes
- Pure computation; identical input gives identical output.
- Log records are DEBUG except the degeneracy WARNING.
"""

from __future__ import annotations

import math
import statistics
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

from loguru import logger

from chronoviz.core.constants import (
    BANKING_METHODS,
    DEFAULT_METHOD,
    DEFAULT_TARGET_ANGLE,
    DEGENERATE_RATIO,
    MAX_BRACKET_EXPANSIONS,
    MAX_ITERATIONS,
    TOLERANCE,
)
from chronoviz.core.errors import (
    BankingError,
    DegenerateSeriesError,
    InsufficientDataError,
    UnreachableAngleError,
)
from chronoviz.core.series import Series

if TYPE_CHECKING:
    from chronoviz.io.config import ChronovizSettings

__all__ = [
    "BankingResult",
    "AspectRatioAdvisor",
    "mean_segment_angle",
    "bank_to_angle",
    "bank_to_45",
]

XRange = tuple[float | None, float | None]


@dataclass(frozen=True)
class BankingResult:
    """
    Outcome of one advisor call.

    Attributes:
        ratio (float): Aspect ratio r > 0.
        target_angle (float): Requested mean angle in degrees.
        mean_angle (float): Mean absolute segment angle achieved at ``ratio`` (degrees).
        method (str): Banking method used.
        n_points (int): Points remaining after range filtering.
        n_segments (int): Segments considered (n_points - 1).
        iterations (int): Bisection iterations (0 for closed-form methods).
        converged (bool): Whether the tolerance was met within the iteration cap.
        degenerate (bool): True when every slope is zero and ``ratio`` is the default.
    """

    ratio: float
    target_angle: float
    mean_angle: float
    method: str
    n_points: int
    n_segments: int
    iterations: int = 0
    converged: bool = True
    degenerate: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def mean_segment_angle(slopes: Sequence[float], ratio: float) -> float:
    """
    Mean absolute segment angle in degrees under aspect ratio ``ratio``.

    Args:
        slopes (Sequence[float]): Raw segment slopes dy/dx.
        ratio (float): Aspect ratio r > 0.

    Returns:
        float: mean_i degrees(atan(|s_i| * r)); 0.0 for no slopes.

    Examples:
        >>> round(mean_segment_angle([2.0, 0.5], 1.0), 6)
        45.0
    """
    if not slopes:
        return 0.0
    return math.degrees(math.fsum(math.atan(abs(s) * ratio) for s in slopes) / len(slopes))


class AspectRatioAdvisor:
    """
    Compute the aspect ratio that banks a series to a target mean angle.

    Args:
        target_angle (float): Target mean angle in degrees, strictly inside (0, 90).
        method (str): One of "mean_angle", "median_slope", "mean_slope".
        max_iterations (int): Bisection iteration cap.
        tolerance (float): Relative bracket width at which bisection stops.

    Raises:
        BankingError: If target_angle, method, max_iterations or tolerance is invalid.

    Examples:
        >>> from chronoviz.core.series import Series
        >>> advisor = AspectRatioAdvisor()
        >>> round(advisor.advise(Series(x=[0, 2], y=[0, 1])).ratio, 9)
        2.0
    """

    def __init__(
        self,
        *,
        target_angle: float = DEFAULT_TARGET_ANGLE,
        method: str = DEFAULT_METHOD,
        max_iterations: int = MAX_ITERATIONS,
        tolerance: float = TOLERANCE,
    ) -> None:
        if not (0.0 < float(target_angle) < 90.0):
            raise BankingError(f"target_angle must lie in (0, 90) degrees, got {target_angle}")
        if method not in BANKING_METHODS:
            raise BankingError(f"unknown banking method {method!r}; expected one of {BANKING_METHODS}")
        if max_iterations < 1:
            raise BankingError("max_iterations must be >= 1")
        if not tolerance > 0:
            raise BankingError("tolerance must be > 0")
        self.target_angle = float(target_angle)
        self.method = method
        self.max_iterations = int(max_iterations)
        self.tolerance = float(tolerance)

    @classmethod
    def from_settings(cls, settings: ChronovizSettings, **overrides: Any) -> AspectRatioAdvisor:
        """Build an advisor from ChronovizSettings; keyword overrides win."""
        params: dict[str, Any] = {
            "target_angle": settings.target_angle,
            "method": settings.method,
            "max_iterations": settings.max_iterations,
            "tolerance": settings.tolerance,
        }
        params.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**params)

    def __repr__(self) -> str:
        return (
            f"AspectRatioAdvisor(target_angle={self.target_angle}, method={self.method!r}, "
            f"max_iterations={self.max_iterations}, tolerance={self.tolerance})"
        )

    def advise(
        self,
        series: Series,
        *,
        x_range: XRange | None = None,
        strict: bool = False,
    ) -> BankingResult:
        """
        Compute the banking ratio for ``series``.

        Args:
            series (Series): Observed series.
            x_range (tuple[float | None, float | None] | None): Inclusive [x_lo, x_hi]
                window; None on either side leaves that end open.
            strict (bool): Raise DegenerateSeriesError instead of returning the
                default ratio for all-flat series.

        Returns:
            BankingResult: Ratio and diagnostics.

        Raises:
            InsufficientDataError: Fewer than two points remain after filtering.
            DegenerateSeriesError: All slopes zero and ``strict`` is True.
            UnreachableAngleError: Flat segments cap the mean angle below the target.
        """
        window = series.window(*x_range) if x_range is not None else series
        n_points = len(window)
        if n_points < 2:
            raise InsufficientDataError(
                f"need at least 2 points to bank a series, got {n_points}"
                + (f" in x range {x_range}" if x_range is not None else "")
            )
        return self._advise_slopes(window.slopes(), n_points, window.name, strict)

    def advise_many(
        self,
        series: Sequence[Series],
        *,
        x_range: XRange | None = None,
        strict: bool = False,
    ) -> BankingResult:
        """
        Bank several series drawn on one panel with a single shared ratio.

        Segments of every series are pooled, so the mean angle is taken over all of
        them. Series with fewer than two points in the window contribute nothing.

        Raises:
            InsufficientDataError: No series has two points in the window.
            DegenerateSeriesError: All pooled slopes zero and ``strict`` is True.
            UnreachableAngleError: Flat segments cap the mean angle below the target.
        """
        slopes: list[float] = []
        n_points = 0
        for s in series:
            window = s.window(*x_range) if x_range is not None else s
            if len(window) < 2:
                continue
            slopes.extend(window.slopes())
            n_points += len(window)
        if not slopes:
            raise InsufficientDataError(
                f"none of {len(series)} series has 2 points to bank"
                + (f" in x range {x_range}" if x_range is not None else "")
            )
        return self._advise_slopes(tuple(slopes), n_points, None, strict)

    def _advise_slopes(
        self, slopes: Sequence[float], n_points: int, name: str | None, strict: bool
    ) -> BankingResult:
        abs_slopes = [abs(s) for s in slopes]
        nonzero = [a for a in abs_slopes if a > 0.0]

        if not nonzero:
            if strict:
                raise DegenerateSeriesError("all segment slopes are zero; any ratio banks the series")
            logger.warning(
                "Degenerate series {} (all slopes zero); using ratio {}",
                name or "<unnamed>",
                DEGENERATE_RATIO,
            )
            return BankingResult(
                ratio=DEGENERATE_RATIO,
                target_angle=self.target_angle,
                mean_angle=0.0,
                method=self.method,
                n_points=n_points,
                n_segments=len(slopes),
                degenerate=True,
            )

        tan_t = math.tan(math.radians(self.target_angle))
        if self.method == "median_slope":
            ratio = tan_t / statistics.median(nonzero)
            return self._closed_form(ratio, slopes, n_points)
        if self.method == "mean_slope":
            ratio = tan_t / statistics.fmean(abs_slopes)
            return self._closed_form(ratio, slopes, n_points)
        return self._bisect(abs_slopes, nonzero, tan_t, n_points)

    def _closed_form(self, ratio: float, slopes: Sequence[float], n_points: int) -> BankingResult:
        result = BankingResult(
            ratio=ratio,
            target_angle=self.target_angle,
            mean_angle=mean_segment_angle(slopes, ratio),
            method=self.method,
            n_points=n_points,
            n_segments=len(slopes),
        )
        logger.debug("Banked ({}) to ratio {:.6g}", self.method, ratio)
        return result

    def _bisect(
        self, abs_slopes: list[float], nonzero: list[float], tan_t: float, n_points: int
    ) -> BankingResult:
        n = len(abs_slopes)
        ceiling = 90.0 * len(nonzero) / n
        if self.target_angle >= ceiling:
            raise UnreachableAngleError(
                f"target angle {self.target_angle} deg is unreachable: {n - len(nonzero)} of {n} "
                f"segments are flat, so the mean angle stays below {ceiling:.4g} deg"
            )

        def f(r: float) -> float:
            return mean_segment_angle(abs_slopes, r)

        # At lo every segment is at most theta; at hi every sloped segment is at least theta.
        lo = tan_t / max(nonzero)
        hi = tan_t / min(nonzero)
        expansions = 0
        while f(hi) < self.target_angle:
            expansions += 1
            if expansions > MAX_BRACKET_EXPANSIONS:
                raise UnreachableAngleError(
                    f"could not bracket target angle {self.target_angle} deg "
                    f"(mean angle ceiling {ceiling:.4g} deg)"
                )
            hi *= 2.0
        logger.debug("Bisection bracket [{:.6g}, {:.6g}] after {} expansions", lo, hi, expansions)

        iterations = 0
        converged = hi - lo <= self.tolerance * hi
        while not converged and iterations < self.max_iterations:
            iterations += 1
            mid = math.sqrt(lo * hi)
            if f(mid) < self.target_angle:
                lo = mid
            else:
                hi = mid
            converged = hi - lo <= self.tolerance * hi

        ratio = math.sqrt(lo * hi)
        if not converged:
            logger.warning(
                "Bisection stopped after {} iterations without reaching tolerance {}",
                iterations,
                self.tolerance,
            )
        logger.debug("Banked (mean_angle) to ratio {:.6g} in {} iterations", ratio, iterations)
        return BankingResult(
            ratio=ratio,
            target_angle=self.target_angle,
            mean_angle=f(ratio),
            method=self.method,
            n_points=n_points,
            n_segments=n,
            iterations=iterations,
            converged=converged,
        )


def bank_to_angle(
    series: Series,
    angle: float = DEFAULT_TARGET_ANGLE,
    *,
    x_range: XRange | None = None,
    method: str = DEFAULT_METHOD,
    strict: bool = False,
) -> BankingResult:
    """Bank ``series`` to ``angle`` degrees with a default-configured advisor."""
    return AspectRatioAdvisor(target_angle=angle, method=method).advise(
        series, x_range=x_range, strict=strict
    )


def bank_to_45(
    series: Series,
    *,
    x_range: XRange | None = None,
    method: str = DEFAULT_METHOD,
    strict: bool = False,
) -> BankingResult:
    """Bank ``series`` to a 45 degree mean segment angle."""
    return bank_to_angle(series, 45.0, x_range=x_range, method=method, strict=strict)
