from __future__ import annotations

from pathlib import Path

import pytest

from chronoviz.io.config import ChronovizSettings

ENV_KEYS = [
    "CHRONOVIZ_TARGET_ANGLE",
    "CHRONOVIZ_METHOD",
    "CHRONOVIZ_MAX_ITERATIONS",
    "CHRONOVIZ_TOLERANCE",
    "CHRONOVIZ_CHART_WIDTH",
    "CHRONOVIZ_MIN_HEIGHT",
    "CHRONOVIZ_MAX_HEIGHT",
    "CHRONOVIZ_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def _write(tmp: Path, name: str, content: str) -> Path:
    p = tmp / name
    p.write_text(content)
    return p


def test_settings_precedence_env_over_toml(tmp_path: Path, monkeypatch) -> None:
    # Arrange TOML
    _write(
        tmp_path,
        "chronoviz.toml",
        """
        [bank]
        target_angle = 30.0
        method = "median_slope"

        [chart]
        chart_width = 800
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)
    # Arrange ENV that should override TOML
    monkeypatch.setenv("CHRONOVIZ_TARGET_ANGLE", "60")
    monkeypatch.setenv("CHRONOVIZ_CHART_WIDTH", "1000")

    # Act
    s = ChronovizSettings.load()

    # Assert precedence: env > TOML
    assert s.target_angle == 60.0
    assert s.chart_width == 1000
    assert s.method == "median_slope"  # from TOML


def test_settings_from_toml_when_no_env(tmp_path: Path, monkeypatch) -> None:
    _write(
        tmp_path,
        "chronoviz.toml",
        """
        target_angle = 40
        max_iterations = 32
        tolerance = 1e-8
        log_level = "debug"
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)

    s = ChronovizSettings.load()

    assert s.target_angle == 40.0
    assert s.max_iterations == 32
    assert s.tolerance == 1e-8
    assert s.log_level == "DEBUG"


def test_settings_from_pyproject_tool_table(tmp_path: Path, monkeypatch) -> None:
    _write(
        tmp_path,
        "pyproject.toml",
        """
        [project]
        name = "demo"

        [tool.chronoviz]
        method = "mean_slope"

        [tool.chronoviz.chart]
        min_height = 120
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)

    s = ChronovizSettings.load()

    assert s.method == "mean_slope"
    assert s.min_height == 120


def test_explicit_path_wins_over_search(tmp_path: Path, monkeypatch) -> None:
    _write(tmp_path, "chronoviz.toml", "target_angle = 20")
    other = _write(tmp_path, "custom.toml", "target_angle = 35")
    monkeypatch.chdir(tmp_path)

    assert ChronovizSettings.load(other).target_angle == 35.0


def test_invalid_values_are_ignored(tmp_path: Path, monkeypatch) -> None:
    _write(
        tmp_path,
        "chronoviz.toml",
        """
        target_angle = 95
        method = "golden"
        max_iterations = 0
        chart_width = "wide"
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CHRONOVIZ_TOLERANCE", "not-a-number")

    s = ChronovizSettings.load()
    defaults = ChronovizSettings()

    assert s == defaults


def test_malformed_toml_falls_back_to_defaults(tmp_path: Path, monkeypatch) -> None:
    _write(tmp_path, "chronoviz.toml", "target_angle = [unclosed")
    monkeypatch.chdir(tmp_path)

    assert ChronovizSettings.load() == ChronovizSettings()


def test_settings_defaults_when_no_config(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    s = ChronovizSettings.load()

    # Defaults from chronoviz.core.constants
    assert s.target_angle == 45.0
    assert s.method == "mean_angle"
    assert s.max_iterations == 64
    assert s.tolerance == 1e-9
    assert s.log_level == "WARNING"
