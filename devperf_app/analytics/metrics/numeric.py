"""Small numeric helpers shared by the estimators (pure functions)."""

from __future__ import annotations

import math
from collections.abc import Iterable

import numpy as np


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round halves away from zero for non-negative inputs (88.5 -> 89).

    Python's built-in ``round`` uses banker's rounding, which would turn 88.5
    into 88; scores and hour estimates round half-up instead.
    """
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def mean_of_present(values: Iterable[float | None]) -> float:
    """Average of the non-null values; 0.0 when none are present.

    Absent values carry no signal, so they are excluded from the denominator
    rather than counted as zero.
    """
    present = [float(v) for v in values if v is not None and not math.isnan(v)]
    return sum(present) / max(len(present), 1)


def coefficient_of_variation(values: Iterable[float]) -> float:
    """Population standard deviation divided by the mean.

    Returns 0.0 for an empty sample or a zero mean (no measurable dispersion).
    """
    arr = np.asarray(list(values), dtype=float)
    if arr.size == 0:
        return 0.0
    mean = float(arr.mean())
    if mean == 0:
        return 0.0
    return float(math.sqrt(float(arr.var())) / mean)
