"""Time-bucketed performance analytics.

Groups trades into weekly, monthly, hourly and day-of-week buckets keyed by
the local wall-clock time of ``entry_date`` (never ``exit_date``) and builds
the equity curve.  Buckets are created lazily from observed trades, so an
empty period never shows up with a zero value.

Usage::

    metrics = generate_performance_metrics(trades, monthly_targets={"2024-03": 2500})
    print(metrics.monthly_pnl["2024-03"])
    print(metrics.equity_curve[-1].equity)
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from datetime import tzinfo
from typing import Any, Mapping, Sequence

from journal_analytics.core.models import Trade
from journal_analytics.core.timeutils import (
    SUNDAY,
    day_key,
    hour_key,
    local_time,
    month_key,
    start_of_week,
    weekday_name,
)

from .equity import cumulative, drawdown_series, max_drawdown, sort_by_entry
from .metrics import calculate_pnl

logger = logging.getLogger(__name__)

DEFAULT_MONTHLY_TARGET = 1000.0
WEEKLY_WINDOW = 12


@dataclass(frozen=True)
class EquityPoint:
    date: str  # YYYY-MM-DD (local)
    equity: float


@dataclass(frozen=True)
class MonthlyTarget:
    month: str  # YYYY-MM
    target: float
    actual: float
    percentage: float


@dataclass
class PerformanceMetrics:
    """Every time-bucketed series for one trade collection."""

    weekly_pnl: dict[str, float] = field(default_factory=dict)
    monthly_pnl: dict[str, float] = field(default_factory=dict)
    equity_curve: list[EquityPoint] = field(default_factory=list)
    best_trading_hours: dict[str, float] = field(default_factory=dict)
    best_trading_days: dict[str, float] = field(default_factory=dict)
    monthly_return_targets: list[MonthlyTarget] = field(default_factory=list)
    monthly_win_rate: dict[str, float] = field(default_factory=dict)
    average_trade_size: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# P&L buckets
# ---------------------------------------------------------------------------

def calculate_weekly_pnl(
    trades: Sequence[Trade],
    *,
    window: int = WEEKLY_WINDOW,
    week_start: int = SUNDAY,
    tz: tzinfo | None = None,
) -> dict[str, float]:
    """P&L per week (keyed by the week's first day), most recent *window*."""
    weekly: dict[str, float] = defaultdict(float)
    for trade in trades:
        week = start_of_week(local_time(trade.entry_date, tz), week_start)
        weekly[week.isoformat()] += calculate_pnl(trade)

    ordered = sorted(weekly.items())
    if len(ordered) > window:
        logger.debug("Weekly P&L truncated from %d to %d weeks", len(ordered), window)
    return dict(ordered[-window:])


def calculate_monthly_pnl(
    trades: Sequence[Trade], *, tz: tzinfo | None = None
) -> dict[str, float]:
    """P&L per ``YYYY-MM``, ascending, every observed month."""
    monthly: dict[str, float] = defaultdict(float)
    for trade in trades:
        monthly[month_key(local_time(trade.entry_date, tz))] += calculate_pnl(trade)
    return dict(sorted(monthly.items()))


# ---------------------------------------------------------------------------
# Equity curve
# ---------------------------------------------------------------------------

def calculate_equity_curve(
    trades: Sequence[Trade], *, tz: tzinfo | None = None
) -> list[EquityPoint]:
    """Cumulative P&L, one point per trade in entry-date order."""
    ordered = sort_by_entry(trades)
    equity = cumulative([calculate_pnl(t) for t in ordered])
    return [
        EquityPoint(date=day_key(local_time(t.entry_date, tz)), equity=float(e))
        for t, e in zip(ordered, equity)
    ]


def calculate_drawdown_series(trades: Sequence[Trade]) -> list[float]:
    """Drawdown (<= 0) at each equity curve point."""
    pnls = [calculate_pnl(t) for t in sort_by_entry(trades)]
    return [float(d) for d in drawdown_series(cumulative(pnls))]


def calculate_max_drawdown(trades: Sequence[Trade]) -> float:
    """Deepest drawdown of the equity curve as a non-negative magnitude."""
    pnls = [calculate_pnl(t) for t in sort_by_entry(trades)]
    return max_drawdown(cumulative(pnls))


# ---------------------------------------------------------------------------
# Time-of-day / day-of-week
# ---------------------------------------------------------------------------

def calculate_best_trading_hours(
    trades: Sequence[Trade], *, tz: tzinfo | None = None
) -> dict[str, float]:
    """Average (not total) P&L per entry hour, keyed ``"H:00"``."""
    hour_pnl: dict[str, float] = defaultdict(float)
    hour_count: dict[str, int] = defaultdict(int)
    for trade in trades:
        key = hour_key(local_time(trade.entry_date, tz))
        hour_pnl[key] += calculate_pnl(trade)
        hour_count[key] += 1
    return {hour: pnl / hour_count[hour] for hour, pnl in hour_pnl.items()}


def calculate_best_trading_days(
    trades: Sequence[Trade], *, tz: tzinfo | None = None
) -> dict[str, float]:
    """Total P&L per weekday name."""
    day_pnl: dict[str, float] = defaultdict(float)
    for trade in trades:
        day_pnl[weekday_name(local_time(trade.entry_date, tz))] += calculate_pnl(trade)
    return dict(day_pnl)


# ---------------------------------------------------------------------------
# Monthly series
# ---------------------------------------------------------------------------

def calculate_monthly_return_targets(
    trades: Sequence[Trade],
    monthly_targets: Mapping[str, float] | None = None,
    *,
    default_target: float = DEFAULT_MONTHLY_TARGET,
    tz: tzinfo | None = None,
) -> list[MonthlyTarget]:
    """Actual monthly P&L against a goal.

    ``monthly_targets`` comes from goal configuration; months without an
    entry (or with a zero goal) use ``default_target``.
    """
    monthly_targets = monthly_targets or {}
    results = []
    for month, actual in calculate_monthly_pnl(trades, tz=tz).items():
        target = monthly_targets.get(month) or default_target
        results.append(MonthlyTarget(
            month=month,
            target=target,
            actual=actual,
            percentage=actual / target * 100,
        ))
    return results


def calculate_monthly_win_rate(
    trades: Sequence[Trade], *, tz: tzinfo | None = None
) -> dict[str, float]:
    wins: dict[str, int] = defaultdict(int)
    counts: dict[str, int] = defaultdict(int)
    for trade in trades:
        key = month_key(local_time(trade.entry_date, tz))
        counts[key] += 1
        if calculate_pnl(trade) > 0:
            wins[key] += 1
    return {month: wins[month] / n * 100 for month, n in counts.items()}


def calculate_average_trade_size(
    trades: Sequence[Trade], *, tz: tzinfo | None = None
) -> dict[str, float]:
    """Mean absolute P&L per month."""
    sizes: dict[str, float] = defaultdict(float)
    counts: dict[str, int] = defaultdict(int)
    for trade in trades:
        key = month_key(local_time(trade.entry_date, tz))
        sizes[key] += abs(calculate_pnl(trade))
        counts[key] += 1
    return {month: size / counts[month] for month, size in sizes.items()}


def generate_performance_metrics(
    trades: Sequence[Trade],
    monthly_targets: Mapping[str, float] | None = None,
    *,
    default_target: float = DEFAULT_MONTHLY_TARGET,
    weekly_window: int = WEEKLY_WINDOW,
    week_start: int = SUNDAY,
    tz: tzinfo | None = None,
) -> PerformanceMetrics:
    """Compute every performance series in one call."""
    return PerformanceMetrics(
        weekly_pnl=calculate_weekly_pnl(
            trades, window=weekly_window, week_start=week_start, tz=tz
        ),
        monthly_pnl=calculate_monthly_pnl(trades, tz=tz),
        equity_curve=calculate_equity_curve(trades, tz=tz),
        best_trading_hours=calculate_best_trading_hours(trades, tz=tz),
        best_trading_days=calculate_best_trading_days(trades, tz=tz),
        monthly_return_targets=calculate_monthly_return_targets(
            trades, monthly_targets, default_target=default_target, tz=tz
        ),
        monthly_win_rate=calculate_monthly_win_rate(trades, tz=tz),
        average_trade_size=calculate_average_trade_size(trades, tz=tz),
    )
