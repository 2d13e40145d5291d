"""Shared fixtures: deterministic clocks and an environment-free config."""
from datetime import datetime, timezone

import pytest

from src.pool_times.config import ScraperConfig


def fixed_clock(year: int, month: int, day: int = 15):
    moment = datetime(year, month, day, 12, 0, tzinfo=timezone.utc)
    return lambda: moment


@pytest.fixture
def july_2024():
    return fixed_clock(2024, 7)


@pytest.fixture
def config():
    return ScraperConfig(_env_file=None)
