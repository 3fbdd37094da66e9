"""
Configuration loading.

The ticker registry and feed/window settings live in a YAML file. The
bundled default is stockpulse/data/tickers.yaml; set STOCKPULSE_CONFIG to
point at another file.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional, Tuple, Union
import yaml
from stockpulse.entities import Ticker
from stockpulse.errors import ConfigError

CONFIG_ENV_VAR = "STOCKPULSE_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent / "data" / "tickers.yaml"


@dataclass(frozen=True)
class Settings:
    """
    Immutable runtime settings.

    Attributes:
        tickers: Registry entries in display order
        latency_seconds: Simulated fetch latency of the mock feed
        variance_pct: Max relative perturbation of mock prices (0.05 = ±5%)
        default_minutes: Window used when the caller does not pick one
        min_minutes: Smallest selectable window
        max_minutes: Largest selectable window

    Representation Invariants:
        - tickers is non-empty with unique symbols
        - 0 < min_minutes <= default_minutes <= max_minutes
        - latency_seconds >= 0, 0 <= variance_pct < 1
    """
    tickers: Tuple[Ticker, ...]
    latency_seconds: float = 0.5
    variance_pct: float = 0.05
    default_minutes: int = 50
    min_minutes: int = 10
    max_minutes: int = 100

    def __post_init__(self):
        """Validate representation invariants."""
        if not self.tickers:
            raise ConfigError("ticker registry cannot be empty")
        symbols = [t.symbol for t in self.tickers]
        if len(set(symbols)) != len(symbols):
            raise ConfigError(f"duplicate symbols in ticker registry: {symbols}")
        if not 0 < self.min_minutes <= self.default_minutes <= self.max_minutes:
            raise ConfigError(
                "window must satisfy 0 < min_minutes <= default_minutes <= max_minutes"
            )
        if self.latency_seconds < 0:
            raise ConfigError("latency_seconds cannot be negative")
        if not 0 <= self.variance_pct < 1:
            raise ConfigError("variance_pct must be in [0, 1)")

    @property
    def registry(self) -> Dict[str, str]:
        """Display name -> symbol, in registry order."""
        return {t.name: t.symbol for t in self.tickers}

    @property
    def symbols(self) -> Tuple[str, ...]:
        return tuple(t.symbol for t in self.tickers)

    def ticker(self, symbol: str) -> Optional[Ticker]:
        """Return the registry entry for symbol, or None if unknown."""
        for ticker in self.tickers:
            if ticker.symbol == symbol:
                return ticker
        return None


def _parse_settings(raw: dict, source: str) -> Settings:
    if not isinstance(raw, dict):
        raise ConfigError(f"{source}: expected a mapping at top level")

    entries = raw.get("tickers")
    if not isinstance(entries, list):
        raise ConfigError(f"{source}: 'tickers' must be a list")

    feed = raw.get("feed") or {}
    window = raw.get("window") or {}

    try:
        tickers = tuple(
            Ticker(
                name=str(entry["name"]),
                symbol=str(entry["symbol"]),
                base_price=float(entry["base_price"]),
            )
            for entry in entries
        )
        return Settings(
            tickers=tickers,
            latency_seconds=float(feed.get("latency_seconds", 0.5)),
            variance_pct=float(feed.get("variance_pct", 0.05)),
            default_minutes=int(window.get("default_minutes", 50)),
            min_minutes=int(window.get("min_minutes", 10)),
            max_minutes=int(window.get("max_minutes", 100)),
        )
    except ConfigError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"{source}: invalid settings: {e}") from e


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Load settings from a YAML file.

    Args:
        path: Config file; defaults to $STOCKPULSE_CONFIG, then the bundled file

    Returns:
        Settings object

    Raises:
        ConfigError: If the file is missing, unparseable, or invalid
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
    path = Path(path)

    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config file {path}: {e}") from e

    return _parse_settings(raw, str(path))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, loaded once."""
    return load_settings()
