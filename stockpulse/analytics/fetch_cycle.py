"""
Concurrent fetch cycles and heatmap assembly.

All tickers are fetched concurrently so a cycle takes as long as its
slowest fetch. Failed tickers are collected without discarding the
successful ones, and anything that needs every ticker (the correlation
matrix) is only computed from a complete cycle.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence
from stockpulse.analytics.colors import correlation_to_color, label_color
from stockpulse.analytics.statistics import build_correlation_matrix, compute_statistics
from stockpulse.entities import CorrelationMatrix, PriceSeries, Statistics
from stockpulse.errors import IncompleteDataError

logger = logging.getLogger(__name__)


class PriceSource(Protocol):
    async def fetch(self, ticker: str, minutes: int) -> PriceSeries:
        ...


@dataclass
class FetchResult:
    """
    Outcome of one fetch cycle.

    Attributes:
        symbols: Symbols requested, in request order
        minutes: Window requested
        series: Successfully fetched series by symbol
        errors: "SYMBOL: message" for each failed fetch, in request order
        cycle_id: Tag of the cycle that produced this result
    """
    symbols: List[str]
    minutes: int
    series: Dict[str, PriceSeries] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)
    cycle_id: int = 0

    @property
    def missing(self) -> List[str]:
        return [s for s in self.symbols if s not in self.series]

    @property
    def is_complete(self) -> bool:
        return not self.missing

    @property
    def warning(self) -> Optional[str]:
        """Combined warning for failed tickers, or None if all succeeded."""
        if not self.errors:
            return None
        return f"Some stocks failed to load: {', '.join(self.errors)}"

    def require_complete(self) -> Dict[str, PriceSeries]:
        """
        Return the series mapping, guaranteeing every symbol is present.

        Raises:
            IncompleteDataError: If any requested symbol failed to load
        """
        missing = self.missing
        if missing:
            raise IncompleteDataError(missing)
        return self.series


async def fetch_all(
    source: PriceSource,
    symbols: Sequence[str],
    minutes: int,
    cycle_id: int = 0
) -> FetchResult:
    """
    Fetch every symbol concurrently and gather the results.

    Failures of individual fetches are recorded in FetchResult.errors and
    never abort the others.

    Args:
        source: Object with an async fetch(ticker, minutes) method
        symbols: Symbols to fetch
        minutes: Window length
        cycle_id: Tag copied onto the result

    Returns:
        FetchResult
    """
    symbols = list(symbols)
    outcomes = await asyncio.gather(
        *(source.fetch(symbol, minutes) for symbol in symbols),
        return_exceptions=True
    )

    result = FetchResult(symbols=symbols, minutes=minutes, cycle_id=cycle_id)
    for symbol, outcome in zip(symbols, outcomes):
        if isinstance(outcome, Exception):
            result.errors.append(f"{symbol}: {outcome}")
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            result.series[symbol] = outcome

    if result.errors:
        logger.warning("Cycle %d: %s", cycle_id, result.warning)
    return result


@dataclass
class HeatmapSnapshot:
    """
    Everything the heatmap view renders for one cycle.

    matrix, colors and label_colors are None when the cycle is incomplete.
    """
    symbols: List[str]
    minutes: int
    statistics: Dict[str, Statistics]
    matrix: Optional[CorrelationMatrix]
    colors: Optional[List[List[str]]]
    label_colors: Optional[List[List[str]]]
    warning: Optional[str]
    cycle_id: int = 0


def build_heatmap(result: FetchResult) -> HeatmapSnapshot:
    """
    Compute per-ticker statistics and, for a complete cycle, the
    correlation matrix with its cell colors.

    Statistics are computed for every ticker that loaded. The matrix is
    skipped entirely when any ticker is missing.

    Args:
        result: Fetch cycle outcome

    Returns:
        HeatmapSnapshot
    """
    statistics = {
        symbol: compute_statistics(series.prices)
        for symbol, series in result.series.items()
    }

    matrix = colors = labels = None
    try:
        complete = result.require_complete()
    except IncompleteDataError as e:
        logger.info("Cycle %d: skipping correlation matrix (%s)", result.cycle_id, e)
    else:
        prices = {symbol: series.prices for symbol, series in complete.items()}
        matrix = build_correlation_matrix(prices, result.symbols)
        colors = [[correlation_to_color(v) for v in row] for row in matrix.values]
        labels = [[label_color(v) for v in row] for row in matrix.values]

    return HeatmapSnapshot(
        symbols=list(result.symbols),
        minutes=result.minutes,
        statistics=statistics,
        matrix=matrix,
        colors=colors,
        label_colors=labels,
        warning=result.warning,
        cycle_id=result.cycle_id,
    )


class FetchCoordinator:
    """
    Owns the latest fetch-cycle result for a presentation layer.

    Each run() is tagged with an increasing cycle id. When cycles overlap,
    a completion older than the latest committed cycle is discarded, so
    stale and fresh data are never mixed.
    """

    def __init__(self, source: PriceSource, symbols: Sequence[str]):
        self.source = source
        self.symbols = list(symbols)
        self._next_cycle = 0
        self._latest: Optional[FetchResult] = None

    @property
    def latest(self) -> Optional[FetchResult]:
        """Most recently committed result, or None before the first cycle."""
        return self._latest

    async def run(self, minutes: int) -> Optional[FetchResult]:
        """
        Run one fetch cycle.

        Returns:
            The committed FetchResult, or None if a newer cycle committed
            first and this one was discarded
        """
        self._next_cycle += 1
        cycle_id = self._next_cycle

        result = await fetch_all(self.source, self.symbols, minutes, cycle_id=cycle_id)

        if self._latest is not None and self._latest.cycle_id > cycle_id:
            logger.info(
                "Discarding stale cycle %d (cycle %d already committed)",
                cycle_id, self._latest.cycle_id
            )
            return None

        self._latest = result
        return result
