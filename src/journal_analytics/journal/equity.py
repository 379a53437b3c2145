"""Equity and drawdown primitives.

The equity curve is the cumulative P&L of trades in entry-date order.  It
is the single series from which drawdown, max drawdown and recovery factor
are derived:

    drawdown[i]   = equity[i] - max(0, equity[0..i])
    max_drawdown  = |min(drawdown)|

The running peak starts at the pre-trade equity of zero, so an account that
has only lost money is in drawdown by everything it lost.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from journal_analytics.core.models import Trade
from journal_analytics.core.timeutils import timestamp_of


def sort_by_entry(trades: Sequence[Trade]) -> list[Trade]:
    """Stable ascending sort by entry instant; input is left untouched."""
    return sorted(trades, key=lambda t: timestamp_of(t.entry_date))


def cumulative(pnls: Sequence[float]) -> np.ndarray:
    """Running total of *pnls* (sequential, same order of additions)."""
    return np.cumsum(np.asarray(pnls, dtype=float))


def drawdown_series(equity: np.ndarray) -> np.ndarray:
    """Distance below the running peak at each point (<= 0)."""
    if equity.size == 0:
        return equity
    return equity - np.maximum(np.maximum.accumulate(equity), 0.0)


def max_drawdown(equity: np.ndarray) -> float:
    """Largest peak-to-trough decline as a non-negative magnitude."""
    if equity.size == 0:
        return 0.0
    return float(abs(drawdown_series(equity).min()))
