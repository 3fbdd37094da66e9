"""Shared fixtures."""

from datetime import datetime, timezone
import pytest
from stockpulse.config import Settings
from stockpulse.data_sources.mock_prices import MockPriceSource
from stockpulse.entities import Ticker

FIXED_NOW = datetime(2024, 3, 1, 15, 30, tzinfo=timezone.utc)


@pytest.fixture
def settings():
    """A three-ticker registry with no simulated latency."""
    return Settings(
        tickers=(
            Ticker("Meta Platforms, Inc.", "META", 300.0),
            Ticker("Nvidia Corporation", "NVDA", 600.0),
            Ticker("Visa Inc.", "V", 250.0),
        ),
        latency_seconds=0.0,
    )


@pytest.fixture
def source(settings):
    """Seeded mock source with a frozen clock."""
    return MockPriceSource(settings, seed=123, clock=lambda: FIXED_NOW)


@pytest.fixture
def fixed_now():
    """The frozen "now" used by the source fixture."""
    return FIXED_NOW
