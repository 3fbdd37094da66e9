"""
Mock price feed.

Generates randomized minute samples around a per-ticker base price, with
simulated network latency, standing in for a real quote API. A real feed
should keep the fetch() signature and return the same PriceSeries shape.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
import numpy as np
from stockpulse.config import Settings, get_settings
from stockpulse.entities import PriceSeries, Sample
from stockpulse.errors import UnknownTickerError

logger = logging.getLogger(__name__)

SAMPLE_INTERVAL = timedelta(minutes=1)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MockPriceSource:
    """
    Asynchronous mock data source.

    Each fetch returns `minutes` samples, newest first: sample k is
    stamped now - k minutes and priced uniformly within
    ±variance_pct of the ticker's base price.

    Representation Invariants:
        - settings holds a non-empty ticker registry
        - latency_seconds >= 0
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        latency_seconds: Optional[float] = None,
        seed: Optional[int] = None,
        clock: Callable[[], datetime] = _utc_now
    ):
        """
        Initialize the mock source.

        Args:
            settings: Registry and feed settings (defaults to get_settings())
            latency_seconds: Override for the simulated latency
            seed: Seed for the random generator, for reproducible prices
            clock: Callable returning "now" for the first sample
        """
        self.settings = settings if settings is not None else get_settings()
        self.latency_seconds = (
            self.settings.latency_seconds if latency_seconds is None else latency_seconds
        )
        if self.latency_seconds < 0:
            raise ValueError("latency_seconds cannot be negative")

        self._rng = np.random.default_rng(seed)
        self._clock = clock

    async def fetch(self, ticker: str, minutes: int) -> PriceSeries:
        """
        Fetch the last `minutes` samples for a ticker.

        Preconditions:
            - minutes is a positive int

        Postconditions:
            - len(result) == minutes
            - result timestamps step back exactly one minute per sample,
              starting at the call time

        Args:
            ticker: Ticker symbol
            minutes: Number of one-minute samples

        Returns:
            PriceSeries, newest sample first

        Raises:
            UnknownTickerError: If ticker is not in the registry
            ValueError: If minutes is not a positive int
        """
        if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes <= 0:
            raise ValueError(f"minutes must be a positive int, got {minutes!r}")

        now = self._clock()
        logger.debug("Generating mock data for %s, minutes: %d", ticker, minutes)

        if self.latency_seconds:
            await asyncio.sleep(self.latency_seconds)

        entry = self.settings.ticker(ticker)
        if entry is None:
            logger.warning("Rejected fetch for unknown ticker %s", ticker)
            raise UnknownTickerError(ticker)

        return PriceSeries(ticker, self._generate(entry.base_price, minutes, now))

    def _generate(self, base_price: float, minutes: int, now: datetime):
        variance = self.settings.variance_pct
        offsets = self._rng.uniform(-variance, variance, size=minutes)
        return [
            Sample(price=float(base_price * (1 + offset)), timestamp=now - k * SAMPLE_INTERVAL)
            for k, offset in enumerate(offsets)
        ]
