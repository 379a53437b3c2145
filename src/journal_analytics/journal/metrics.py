"""Per-trade arithmetic and account-level aggregates.

Everything else in the engine is built on :func:`calculate_pnl` and
:func:`calculate_r_factor`.  Both are pure functions of the stored trade
fields, so recomputing them always yields the same value.

Sentinels
---------
* R-factor with zero risk (stop == entry): ``nan``.
* Profit factor / risk-reward ratio / recovery factor with a zero
  denominator: ``inf`` when the numerator side is positive, else ``0.0``.

Usage::

    metrics = compute_trade_metrics(trade)
    print(metrics.pnl, metrics.r_factor)
    stats = get_account_stats(trades)
    print(stats.win_rate, get_profit_factor(trades))
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import asdict, dataclass
from typing import Any, Sequence

from journal_analytics.core.enums import Direction, TradeOutcome
from journal_analytics.core.errors import InvalidDirectionError
from journal_analytics.core.models import Trade

from .equity import cumulative, max_drawdown, sort_by_entry
from .stats import finite, mean, total

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TradeMetrics:
    """Derived values for a single trade."""

    pnl: float
    r_factor: float  # nan when risk is zero

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AccountStats:
    """Account-level aggregate over a trade collection."""

    total_trades: int
    wins: int
    losses: int
    win_rate: float
    total_pnl: float
    average_pnl: float
    best_trade: float
    worst_trade: float
    average_r: float
    max_drawdown: float
    best_setup: str
    worst_setup: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Per-trade
# ---------------------------------------------------------------------------

def _price_delta(trade: Trade) -> float:
    """Exit minus entry, signed so that a profitable move is positive."""
    if trade.direction == Direction.BUY:
        return trade.exit_price - trade.entry_price
    if trade.direction == Direction.SELL:
        return trade.entry_price - trade.exit_price
    raise InvalidDirectionError(trade.direction)


def calculate_pnl(trade: Trade) -> float:
    """Gross P&L: price move in the trade's favour times quantity."""
    return _price_delta(trade) * trade.quantity


def calculate_r_factor(trade: Trade) -> float:
    """Realised reward in multiples of initial risk.

    ``(directional price delta) / |entry - stop|``; ``nan`` when the stop
    sits on the entry price.
    """
    delta = _price_delta(trade)
    risk = abs(trade.entry_price - trade.stop_loss_price)
    if risk == 0:
        return math.nan
    return delta / risk


def trade_outcome(trade: Trade) -> TradeOutcome:
    pnl = calculate_pnl(trade)
    if pnl > 0:
        return TradeOutcome.WIN
    if pnl < 0:
        return TradeOutcome.LOSS
    return TradeOutcome.BREAKEVEN


def compute_trade_metrics(trade: Trade) -> TradeMetrics:
    return TradeMetrics(pnl=calculate_pnl(trade), r_factor=calculate_r_factor(trade))


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------

def get_profit_factor(trades: Sequence[Trade]) -> float:
    """Gross profit divided by gross loss magnitude.

    No losing trades: ``inf`` if anything was won, ``0.0`` otherwise.
    """
    pnls = [calculate_pnl(t) for t in trades]
    gross_profit = total(p for p in pnls if p > 0)
    gross_loss = abs(total(p for p in pnls if p < 0))
    if gross_loss == 0:
        return math.inf if gross_profit > 0 else 0.0
    return gross_profit / gross_loss


def get_risk_reward_ratio(trades: Sequence[Trade]) -> float:
    """Average winning P&L over average losing P&L magnitude.

    No winners: ``0.0``.  Winners but no losers: ``inf``.
    """
    pnls = [calculate_pnl(t) for t in trades]
    winners = [p for p in pnls if p > 0]
    losers = [p for p in pnls if p < 0]
    if not winners:
        return 0.0
    if not losers:
        return math.inf
    return mean(winners) / abs(mean(losers))


def get_recovery_factor(trades: Sequence[Trade]) -> float:
    """Net P&L divided by maximum drawdown of the equity curve.

    Zero drawdown: ``inf`` if net P&L is positive, ``0.0`` otherwise.
    """
    pnls = [calculate_pnl(t) for t in sort_by_entry(trades)]
    net = total(pnls)
    dd = max_drawdown(cumulative(pnls))
    if dd == 0:
        return math.inf if net > 0 else 0.0
    return net / dd


def get_account_stats(trades: Sequence[Trade]) -> AccountStats:
    """Aggregate count, win rate, P&L totals and extremes."""
    if not trades:
        return AccountStats(
            total_trades=0,
            wins=0,
            losses=0,
            win_rate=0.0,
            total_pnl=0.0,
            average_pnl=0.0,
            best_trade=0.0,
            worst_trade=0.0,
            average_r=0.0,
            max_drawdown=0.0,
            best_setup="N/A",
            worst_setup="N/A",
        )

    pnls = [calculate_pnl(t) for t in trades]
    wins = sum(1 for p in pnls if p > 0)
    losses = sum(1 for p in pnls if p < 0)
    net = total(pnls)

    r_values = finite(calculate_r_factor(t) for t in trades)
    if len(r_values) < len(trades):
        logger.debug("Skipped %d trades with undefined R-factor", len(trades) - len(r_values))

    setup_pnl: dict[str, float] = defaultdict(float)
    for trade, pnl in zip(trades, pnls):
        setup_pnl[trade.setup_name] += pnl
    # First setup reaching the extreme wins ties
    best_setup = max(setup_pnl, key=lambda s: setup_pnl[s])
    worst_setup = min(setup_pnl, key=lambda s: setup_pnl[s])

    return AccountStats(
        total_trades=len(pnls),
        wins=wins,
        losses=losses,
        win_rate=wins / len(pnls) * 100,
        total_pnl=net,
        average_pnl=net / len(pnls),
        best_trade=max(pnls),
        worst_trade=min(pnls),
        average_r=mean(r_values),
        max_drawdown=max_drawdown(cumulative([calculate_pnl(t) for t in sort_by_entry(trades)])),
        best_setup=best_setup,
        worst_setup=worst_setup,
    )
