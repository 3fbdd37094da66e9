"""
Tests for configuration loading.

Tests cover:
- Bundled default registry and its order
- Loading from explicit paths and the environment variable
- Invalid files and settings
"""

import pytest
from stockpulse.config import CONFIG_ENV_VAR, Settings, load_settings
from stockpulse.entities import Ticker
from stockpulse.errors import ConfigError


class TestDefaultSettings:
    """Tests for the bundled tickers.yaml."""

    def test_registry_order(self):
        """Test the registry keeps file order."""
        settings = load_settings()
        assert list(settings.symbols) == ["META", "MSFT", "NVDA", "PYPL", "2330TW", "TSLA", "V"]

    def test_registry_mapping(self):
        """Test display name -> symbol mapping."""
        registry = load_settings().registry
        assert registry["Nvidia Corporation"] == "NVDA"
        assert registry["TSMC"] == "2330TW"

    def test_base_prices(self):
        """Test per-ticker base prices."""
        settings = load_settings()
        assert settings.ticker("NVDA").base_price == 600
        assert settings.ticker("PYPL").base_price == 70
        assert settings.ticker("UNKNOWN") is None

    def test_feed_and_window(self):
        """Test feed latency and slider window defaults."""
        settings = load_settings()
        assert settings.latency_seconds == 0.5
        assert settings.variance_pct == 0.05
        assert (settings.min_minutes, settings.default_minutes, settings.max_minutes) == (10, 50, 100)


class TestLoadSettings:
    """Tests for load_settings with custom files."""

    def test_explicit_path(self, tmp_path):
        """Test loading a minimal file; omitted sections use defaults."""
        path = tmp_path / "custom.yaml"
        path.write_text(
            "tickers:\n"
            "  - {name: Alpha, symbol: AAA, base_price: 10}\n"
            "  - {name: Beta, symbol: BBB, base_price: 20.5}\n"
        )
        settings = load_settings(path)
        assert settings.symbols == ("AAA", "BBB")
        assert settings.ticker("BBB").base_price == 20.5
        assert settings.default_minutes == 50

    def test_env_var(self, tmp_path, monkeypatch):
        """Test STOCKPULSE_CONFIG selects the file."""
        path = tmp_path / "env.yaml"
        path.write_text(
            "tickers:\n"
            "  - {name: Gamma, symbol: GGG, base_price: 5}\n"
            "feed: {latency_seconds: 0}\n"
        )
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        settings = load_settings()
        assert settings.symbols == ("GGG",)
        assert settings.latency_seconds == 0

    def test_missing_file(self, tmp_path):
        """Test a missing file raises ConfigError."""
        with pytest.raises(ConfigError, match="Failed to read"):
            load_settings(tmp_path / "nope.yaml")

    def test_bad_yaml(self, tmp_path):
        """Test unparseable YAML raises ConfigError."""
        path = tmp_path / "bad.yaml"
        path.write_text("tickers: [unclosed\n")
        with pytest.raises(ConfigError, match="Failed to parse"):
            load_settings(path)

    def test_missing_field(self, tmp_path):
        """Test an entry without base_price raises ConfigError."""
        path = tmp_path / "partial.yaml"
        path.write_text("tickers:\n  - {name: Alpha, symbol: AAA}\n")
        with pytest.raises(ConfigError, match="invalid settings"):
            load_settings(path)

    def test_tickers_not_a_list(self, tmp_path):
        """Test a malformed tickers section raises ConfigError."""
        path = tmp_path / "shape.yaml"
        path.write_text("tickers: AAA\n")
        with pytest.raises(ConfigError, match="must be a list"):
            load_settings(path)


class TestSettingsValidation:
    """Tests for Settings invariants."""

    def test_empty_registry(self):
        with pytest.raises(ConfigError, match="cannot be empty"):
            Settings(tickers=())

    def test_duplicate_symbols(self):
        with pytest.raises(ConfigError, match="duplicate"):
            Settings(tickers=(Ticker("A", "AAA", 1.0), Ticker("B", "AAA", 2.0)))

    def test_window_order(self):
        with pytest.raises(ConfigError, match="min_minutes"):
            Settings(tickers=(Ticker("A", "AAA", 1.0),), min_minutes=60, default_minutes=50)

    def test_variance_range(self):
        with pytest.raises(ConfigError, match="variance_pct"):
            Settings(tickers=(Ticker("A", "AAA", 1.0),), variance_pct=1.5)
