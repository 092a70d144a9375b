"""Pytest configuration and shared fixtures."""

import pytest
from typing import Callable

from fx_plot.data.store import SeriesStore

# 2001-09-09T01:46:40Z
BASE_TS_NS = 1_000_000_000_000_000_000
NANOS = 1_000_000_000

CITI_FIRST = "CITI|EURUSD|1.1000|1.1002|1.1001|1.1003|1.1002|1.1004|1000000000000000000"


def build_message(provider: str = "CITI",
                  buy_1m: str = "1.1000",
                  timestamp_ns: int = BASE_TS_NS,
                  pair: str = "EURUSD",
                  prices: tuple = ("1.1002", "1.1001", "1.1003", "1.1002", "1.1004")) -> str:
    """Build a wire message with the given buy price and timestamp."""
    return "|".join([provider, pair, buy_1m, *prices, str(timestamp_ns)])


@pytest.fixture
def citi_message() -> str:
    """First CITI quote from the reference feed."""
    return CITI_FIRST


@pytest.fixture
def make_message() -> Callable[..., str]:
    """Factory for wire messages."""
    return build_message


@pytest.fixture
def store() -> SeriesStore:
    """Empty series store."""
    return SeriesStore()
