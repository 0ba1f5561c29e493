"""Short-term trend classification for issue arrival counts."""

from __future__ import annotations

INCREASING = "increasing"
DECREASING = "decreasing"
STABLE = "stable"

# Strict bounds: exactly 1.2x or 0.8x the previous window is still stable
INCREASE_RATIO = 1.2
DECREASE_RATIO = 0.8


def classify_trend(recent: int, previous: int) -> str:
    if recent > previous * INCREASE_RATIO:
        return INCREASING
    if recent < previous * DECREASE_RATIO:
        return DECREASING
    return STABLE
