from __future__ import annotations

from collections.abc import Iterator

import polars as pl
import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def _quiet_chronoviz_logs() -> Iterator[None]:
    """CLI commands enable the chronoviz namespace; restore the library default afterwards."""
    yield
    logger.disable("chronoviz")


@pytest.fixture
def life_expectancy() -> pl.DataFrame:
    """Small Gapminder-shaped frame: three countries, six decades."""
    years = [1950, 1960, 1970, 1980, 1990, 2000]
    return pl.DataFrame(
        {
            "country": ["South Africa"] * 6 + ["Rwanda"] * 6 + ["Sweden"] * 6,
            "year": years * 3,
            "life_exp": [45.0, 50.0, 55.0, 60.0, 68.0, 60.0]
            + [40.0, 42.0, 44.0, 46.0, 23.0, 43.0]
            + [71.0, 73.0, 74.0, 75.0, 77.0, 79.0],
        }
    )
