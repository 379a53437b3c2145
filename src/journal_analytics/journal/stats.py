"""Small numeric helpers shared by the analyzers.

Sums are plain left-to-right accumulations, so a total always equals the
last point of the running equity curve (builtin ``sum`` is compensated for
floats on Python 3.12+).
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence


def total(values: Iterable[float]) -> float:
    acc = 0.0
    for v in values:
        acc += v
    return acc


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return total(values) / len(values)


def population_std(values: Sequence[float]) -> float:
    """Population standard deviation (divide by N), 0.0 when empty."""
    if not values:
        return 0.0
    mu = total(values) / len(values)
    variance = total((v - mu) ** 2 for v in values) / len(values)
    return math.sqrt(variance)


def win_rate(pnls: Sequence[float]) -> float:
    """Percentage of strictly positive values, 0.0 when empty."""
    if not pnls:
        return 0.0
    wins = sum(1 for p in pnls if p > 0)
    return wins / len(pnls) * 100


def finite(values: Iterable[float]) -> list[float]:
    """Drop NaN sentinels (undefined R-factors)."""
    return [v for v in values if not math.isnan(v)]
