"""Custom exceptions for the stockpulse package."""

from typing import Iterable


class PulseError(Exception):
    """Base exception for stockpulse errors."""
    pass


class DataError(PulseError):
    """Raised when data is missing, invalid, or insufficient."""
    pass


class UnknownTickerError(DataError):
    """Raised when a fetch is requested for a symbol not in the registry."""

    def __init__(self, ticker: str):
        self.ticker = ticker
        super().__init__(f"Invalid stock ticker: {ticker}")


class IncompleteDataError(DataError):
    """Raised when a computation needs every ticker but some are missing."""

    def __init__(self, missing: Iterable[str]):
        self.missing = list(missing)
        super().__init__(f"Missing price data for: {', '.join(self.missing)}")


class ConfigError(PulseError):
    """Raised when the ticker registry or settings cannot be loaded."""
    pass
