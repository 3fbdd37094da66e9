"""
Price statistics and pairwise correlation.

Pure functions over price sequences. Degenerate inputs (empty, single
sample, length mismatch, constant series) return explicit fallback values
instead of raising, so every function here is total over its input domain.
"""

from typing import Mapping, Sequence
import numpy as np
from stockpulse.entities import CorrelationMatrix, Statistics
from stockpulse.errors import IncompleteDataError


def compute_statistics(prices: Sequence[float]) -> Statistics:
    """
    Compute mean and sample standard deviation.

    Postconditions:
        - Empty input -> Statistics(0.0, 0.0)
        - Single price or constant series -> std_dev is 0.0
        - Otherwise std_dev uses the n-1 divisor

    Args:
        prices: Sequence of prices, any order

    Returns:
        Statistics object
    """
    values = np.asarray(prices, dtype=float)
    n = len(values)

    if n == 0:
        return Statistics(mean=0.0, std_dev=0.0)

    # Single price or constant series
    if np.all(values == values[0]):
        return Statistics(mean=float(values[0]), std_dev=0.0)

    return Statistics(mean=float(values.mean()), std_dev=float(values.std(ddof=1)))


def compute_correlation(prices1: Sequence[float], prices2: Sequence[float]) -> float:
    """
    Compute the Pearson correlation of two equal-length price sequences.

    Covariance and both standard deviations use the n-1 divisor. The
    result is not clamped and may drift marginally outside [-1, 1].

    Postconditions:
        - Length mismatch or fewer than 2 prices -> 0.0
        - Either sequence constant (zero variance) -> 0.0
        - compute_correlation(a, b) == compute_correlation(b, a)

    Args:
        prices1: First price sequence
        prices2: Second price sequence

    Returns:
        Correlation coefficient
    """
    a = np.asarray(prices1, dtype=float)
    b = np.asarray(prices2, dtype=float)
    n = len(a)

    if n != len(b) or n < 2:
        return 0.0

    stats1 = compute_statistics(a)
    stats2 = compute_statistics(b)
    denominator = stats1.std_dev * stats2.std_dev
    if denominator == 0:
        return 0.0

    covariance = float(np.sum((a - stats1.mean) * (b - stats2.mean)) / (n - 1))
    return covariance / denominator


def build_correlation_matrix(
    series_by_symbol: Mapping[str, Sequence[float]],
    order: Sequence[str]
) -> CorrelationMatrix:
    """
    Build the correlation matrix for every ordered pair of symbols.

    The engine does not align by timestamp; all series should have equal
    length (mismatched pairs correlate to 0.0).

    Preconditions:
        - Every symbol in order has an entry in series_by_symbol

    Postconditions:
        - Matrix side is len(order), rows/columns follow order exactly
        - matrix[i][j] == matrix[j][i]
        - Diagonal is 1.0 (up to rounding) for non-constant series

    Args:
        series_by_symbol: Prices per symbol
        order: Row/column symbol order

    Returns:
        CorrelationMatrix

    Raises:
        IncompleteDataError: If a symbol in order has no series
    """
    missing = [s for s in order if s not in series_by_symbol]
    if missing:
        raise IncompleteDataError(missing)

    size = len(order)
    values = [[0.0] * size for _ in range(size)]
    for i in range(size):
        for j in range(i, size):
            corr = compute_correlation(series_by_symbol[order[i]], series_by_symbol[order[j]])
            values[i][j] = corr
            values[j][i] = corr

    return CorrelationMatrix(order, values)
