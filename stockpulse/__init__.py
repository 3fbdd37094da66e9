"""
Stock Pulse

Live stock price statistics and a pairwise correlation heatmap for a
fixed set of tickers, driven by polled time series data.
"""

__version__ = "0.1.0"
