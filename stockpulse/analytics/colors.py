"""
Heatmap color mapping.

Maps a correlation in [-1, 1] onto a blue-white-red scale by linear
interpolation in RGB space.
"""

import math
from typing import Dict, Tuple

HEATMAP_COLORS: Dict[str, str] = {
    "high": "#ff0000",  # strong positive correlation
    "mid": "#ffffff",   # no correlation
    "low": "#0000ff",   # strong negative correlation
}

# Cells with |correlation| above this get light label text
LABEL_CONTRAST_THRESHOLD = 0.5


def _parse_hex(color: str) -> Tuple[int, int, int]:
    if len(color) != 7 or not color.startswith("#"):
        raise ValueError(f"expected a #rrggbb color, got {color!r}")
    return int(color[1:3], 16), int(color[3:5], 16), int(color[5:7], 16)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def interpolate_color(color1: str, color2: str, factor: float) -> str:
    """
    Linearly interpolate between two #rrggbb colors.

    Each channel is round(c1 + (c2 - c1) * factor), rounding halves up,
    and clamped to [0, 255].

    Args:
        color1: Color at factor 0
        color2: Color at factor 1
        factor: Interpolation factor, expected in [0, 1]

    Returns:
        Lowercase, zero-padded #rrggbb string
    """
    start = _parse_hex(color1)
    end = _parse_hex(color2)
    channels = [
        min(255, max(0, _round_half_up(c1 + (c2 - c1) * factor)))
        for c1, c2 in zip(start, end)
    ]
    return "#" + "".join(f"{c:02x}" for c in channels)


def correlation_to_color(value: float) -> str:
    """
    Map a correlation value to its heatmap cell color.

    Non-negative values blend white toward red by factor value; negative
    values blend white toward blue by factor -value. The factor is clamped
    to [0, 1], and NaN maps to the neutral color.

    Examples:
        correlation_to_color(0)   -> "#ffffff"
        correlation_to_color(1)   -> "#ff0000"
        correlation_to_color(-1)  -> "#0000ff"
        correlation_to_color(0.5) -> "#ff8080"
    """
    if math.isnan(value):
        return HEATMAP_COLORS["mid"]

    if value >= 0:
        target, factor = HEATMAP_COLORS["high"], value
    else:
        target, factor = HEATMAP_COLORS["low"], -value

    factor = min(1.0, max(0.0, factor))
    return interpolate_color(HEATMAP_COLORS["mid"], target, factor)


def label_color(value: float) -> str:
    """Text color that stays readable on the cell color for value."""
    return "#ffffff" if abs(value) > LABEL_CONTRAST_THRESHOLD else "#000000"


def legend_gradient() -> Tuple[str, str, str]:
    """Legend anchors from -1 through 0 to +1."""
    return HEATMAP_COLORS["low"], HEATMAP_COLORS["mid"], HEATMAP_COLORS["high"]
