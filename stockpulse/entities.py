"""
Core entity classes (ADTs) for stockpulse.

These classes represent the data passed between the data source, the
statistics engine, and the presentation layer, with their representation
invariants checked on construction.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Sequence
import pandas as pd


@dataclass(frozen=True)
class Ticker:
    """
    A tradable instrument known to the registry.

    Attributes:
        name: Display name (e.g., "Nvidia Corporation")
        symbol: Ticker symbol (e.g., "NVDA")
        base_price: Reference price the mock feed perturbs around

    Representation Invariants:
        - name and symbol are non-empty
        - base_price > 0
    """
    name: str
    symbol: str
    base_price: float

    def __post_init__(self):
        """Validate representation invariants."""
        if not self.name:
            raise ValueError("name cannot be empty")
        if not self.symbol:
            raise ValueError("symbol cannot be empty")
        if not self.base_price > 0:
            raise ValueError(f"base_price must be positive, got {self.base_price}")


@dataclass(frozen=True)
class Sample:
    """A single price observation."""
    price: float
    timestamp: datetime


@dataclass(frozen=True)
class Statistics:
    """Mean and sample standard deviation of a price sequence."""
    mean: float
    std_dev: float


class PriceSeries:
    """
    Samples for one ticker over one query window.

    Samples are kept in the order the data source produced them, which is
    newest first. Use chronological() or to_series() before plotting a
    time axis.

    Representation Invariants:
        - symbol is non-empty
        - samples is an immutable tuple of Sample
    """

    def __init__(self, symbol: str, samples: Sequence[Sample]):
        if not symbol:
            raise ValueError("symbol cannot be empty")
        self._symbol = symbol
        self._samples = tuple(samples)

    @property
    def symbol(self) -> str:
        """Return the ticker symbol (read-only)."""
        return self._symbol

    @property
    def samples(self) -> tuple:
        """Return the samples, newest first (read-only)."""
        return self._samples

    @property
    def prices(self) -> List[float]:
        """Prices in sample order."""
        return [s.price for s in self._samples]

    @property
    def timestamps(self) -> List[datetime]:
        """Timestamps in sample order."""
        return [s.timestamp for s in self._samples]

    def chronological(self) -> List[Sample]:
        """Return the samples ordered oldest first."""
        return sorted(self._samples, key=lambda s: s.timestamp)

    def to_series(self) -> pd.Series:
        """
        Convert to a pandas Series of prices indexed by timestamp.

        Postconditions:
            - Index is a DatetimeIndex sorted in ascending order
            - Series name is the ticker symbol
        """
        ordered = self.chronological()
        index = pd.DatetimeIndex([s.timestamp for s in ordered], name="timestamp")
        return pd.Series([s.price for s in ordered], index=index, name=self._symbol, dtype=float)

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self):
        return iter(self._samples)

    def __repr__(self) -> str:
        return f"PriceSeries({self._symbol}, {len(self)} samples)"


class CorrelationMatrix:
    """
    Pairwise correlations over a fixed, caller-defined symbol order.

    values[i][j] is the correlation between symbols[i] and symbols[j].

    Representation Invariants:
        - values is square with side len(symbols)
        - symbols contain no duplicates
    """

    def __init__(self, symbols: Sequence[str], values: Sequence[Sequence[float]]):
        symbols = list(symbols)
        rows = [list(row) for row in values]

        if len(set(symbols)) != len(symbols):
            raise ValueError("symbols must not contain duplicates")
        if len(rows) != len(symbols) or any(len(row) != len(symbols) for row in rows):
            raise ValueError(
                f"matrix must be {len(symbols)}x{len(symbols)} to match symbols"
            )

        self._symbols = symbols
        self._values = rows
        self._positions: Dict[str, int] = {s: i for i, s in enumerate(symbols)}

    @property
    def symbols(self) -> List[str]:
        """Return the row/column order (copy)."""
        return list(self._symbols)

    @property
    def values(self) -> List[List[float]]:
        """Return the matrix as a list of rows (copy)."""
        return [list(row) for row in self._values]

    def value(self, symbol1: str, symbol2: str) -> float:
        """
        Look up the correlation between two symbols.

        Raises:
            KeyError: If either symbol is not part of the matrix
        """
        return self._values[self._positions[symbol1]][self._positions[symbol2]]

    def to_frame(self) -> pd.DataFrame:
        """Return the matrix as a DataFrame labelled by symbol on both axes."""
        return pd.DataFrame(self._values, index=self._symbols, columns=self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def __getitem__(self, i: int) -> List[float]:
        return list(self._values[i])

    def __repr__(self) -> str:
        return f"CorrelationMatrix({len(self)}x{len(self)})"

