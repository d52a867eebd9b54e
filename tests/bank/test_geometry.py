from __future__ import annotations

import pytest

from chronoviz.bank import BankingResult, banked_height, height_for_ratio, ratio_for_size


def _result(ratio: float, degenerate: bool = False) -> BankingResult:
    return BankingResult(
        ratio=ratio,
        target_angle=45.0,
        mean_angle=45.0,
        method="mean_angle",
        n_points=3,
        n_segments=2,
        degenerate=degenerate,
    )


def test_height_for_ratio_formula() -> None:
    assert height_for_ratio(2.0, 600, 50, 10) == pytest.approx(240.0)


def test_ratio_for_size_inverts_height_for_ratio() -> None:
    h = height_for_ratio(1.37, 480, 120.0, 7.5)
    assert ratio_for_size(480, h, 120.0, 7.5) == pytest.approx(1.37)


@pytest.mark.parametrize(
    "args",
    [(0.0, 600, 50, 10), (1.0, 0, 50, 10), (1.0, 600, 0, 10), (1.0, 600, 50, -1)],
)
def test_height_for_ratio_rejects_non_positive(args: tuple[float, int, int, int]) -> None:
    with pytest.raises(ValueError):
        height_for_ratio(*args)


def test_banked_height_clamps() -> None:
    assert banked_height(_result(2.0), 600, 50, 10) == 240
    assert banked_height(_result(1000.0), 600, 50, 10, max_height=900) == 900
    assert banked_height(_result(0.001), 600, 50, 10, min_height=80) == 80


def test_banked_height_degenerate_falls_back_to_half_width() -> None:
    assert banked_height(_result(1.0, degenerate=True), 600, 50, 10) == 300
    assert banked_height(_result(2.0), 600, 50, 0.0) == 300
