"""Loss-streak (tilt) detection and drawdown period analysis.

Both analyses walk the trades in entry-date order.  A loss is any trade
with P&L < 0; break-even trades end a losing streak.

Equity starts at zero before the first trade.  A drawdown period opens at
the first trade that leaves equity below its running peak and closes at the
trade that sets a new peak.  A period still open at the last trade is
reported with ``end_date=None``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field
from datetime import date, tzinfo
from typing import Any, Sequence

from journal_analytics.core.models import Trade
from journal_analytics.core.timeutils import day_key, local_time

from .equity import cumulative, max_drawdown, sort_by_entry
from .metrics import calculate_pnl, calculate_r_factor

logger = logging.getLogger(__name__)

MAX_STREAK_THRESHOLD = 3
DAILY_LOSS_LIMIT_R = 3.0
CAUTION_STREAK = 2
CAUTION_LOSS_RATIO = 0.7
RECENT_PERIODS = 5


@dataclass(frozen=True)
class LossStreakAlert:
    current_streak: int
    max_streak: int
    daily_loss_r: float
    daily_loss_limit: float
    is_on_tilt: bool
    alerts: list[str]
    recommendation: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class DrawdownPeriod:
    start_date: str
    end_date: str | None  # None while not yet recovered
    drawdown_amount: float
    drawdown_r: float  # Sum of negative R-factors inside the period
    trades_in_period: int
    recovery_trades: int
    caused_by_setups: list[str] = field(default_factory=list)


@dataclass
class DrawdownAnalysis:
    max_drawdown: float = 0.0
    max_drawdown_r: float = 0.0
    current_drawdown: float = 0.0
    drawdown_periods: list[DrawdownPeriod] = field(default_factory=list)
    structural_weaknesses: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Loss streaks
# ---------------------------------------------------------------------------

def analyze_loss_streak(
    trades: Sequence[Trade],
    *,
    max_streak_threshold: int = MAX_STREAK_THRESHOLD,
    daily_loss_limit_r: float = DAILY_LOSS_LIMIT_R,
    today: date | None = None,
    tz: tzinfo | None = None,
) -> LossStreakAlert:
    """Consecutive losses and today's R loss against the tilt limits.

    Args:
        today: Calendar day whose losing trades count toward the daily
            limit (defaults to the current local date).
    """
    ordered = sort_by_entry(trades)
    pnls = [calculate_pnl(t) for t in ordered]

    current = 0
    for pnl in reversed(pnls):
        if pnl >= 0:
            break
        current += 1

    longest = 0
    run = 0
    for pnl in pnls:
        run = run + 1 if pnl < 0 else 0
        longest = max(longest, run)

    day = (today or date.today()).isoformat()
    lost_r = 0.0
    for trade, pnl in zip(ordered, pnls):
        if pnl >= 0 or day_key(local_time(trade.entry_date, tz)) != day:
            continue
        r = calculate_r_factor(trade)
        if not math.isnan(r):
            lost_r += r
    daily_loss_r = abs(lost_r)

    on_tilt = current >= max_streak_threshold or daily_loss_r >= daily_loss_limit_r

    alerts = []
    if current >= max_streak_threshold:
        alerts.append(f"Warning: {current} consecutive losses. Consider taking a break.")
    if daily_loss_r >= daily_loss_limit_r:
        alerts.append(f"Daily loss limit reached: {daily_loss_r:.1f}R lost today.")
    if CAUTION_STREAK <= current < max_streak_threshold:
        alerts.append(f"Caution: {current} losses in a row. Stay disciplined.")

    if on_tilt:
        recommendation = "STOP TRADING. Take a break, review your trades, and return tomorrow."
        logger.debug("Tilt detected: streak=%d daily_loss_r=%.2f", current, daily_loss_r)
    elif current >= CAUTION_STREAK or daily_loss_r >= daily_loss_limit_r * CAUTION_LOSS_RATIO:
        recommendation = "Reduce position size or take a short break before next trade."
    else:
        recommendation = "Trading conditions normal. Continue with your plan."

    return LossStreakAlert(
        current_streak=current,
        max_streak=longest,
        daily_loss_r=daily_loss_r,
        daily_loss_limit=daily_loss_limit_r,
        is_on_tilt=on_tilt,
        alerts=alerts,
        recommendation=recommendation,
    )


# ---------------------------------------------------------------------------
# Drawdowns
# ---------------------------------------------------------------------------

def _close_period(
    start_date: str,
    end_date: str | None,
    peak: float,
    members: list[Trade],
    equities: list[float],
) -> DrawdownPeriod:
    setups = list(dict.fromkeys(t.setup_name for t in members))
    drawdown_r = 0.0
    for t in members:
        r = calculate_r_factor(t)
        if not math.isnan(r):
            drawdown_r += min(0.0, r)
    return DrawdownPeriod(
        start_date=start_date,
        end_date=end_date,
        drawdown_amount=peak - min(equities),
        drawdown_r=drawdown_r,
        trades_in_period=len(members),
        recovery_trades=1 if end_date is not None else 0,
        caused_by_setups=setups,
    )


def analyze_drawdowns(trades: Sequence[Trade]) -> DrawdownAnalysis:
    """Max/current drawdown, recent drawdown periods and the setup that
    contributed most to them.
    """
    ordered = sort_by_entry(trades)
    if not ordered:
        return DrawdownAnalysis()

    pnl_curve = cumulative([calculate_pnl(t) for t in ordered])
    r_curve = cumulative([
        0.0 if math.isnan(r) else r for r in (calculate_r_factor(t) for t in ordered)
    ])

    periods: list[DrawdownPeriod] = []
    peak = 0.0
    start_date = ""
    members: list[Trade] = []
    equities: list[float] = []

    for trade, equity in zip(ordered, pnl_curve):
        equity = float(equity)
        if equity > peak:
            if members:
                periods.append(_close_period(start_date, trade.entry_date, peak, members, equities))
                members, equities = [], []
            peak = equity
            continue
        if not members and equity == peak:
            continue
        if not members:
            start_date = trade.entry_date
        members.append(trade)
        equities.append(equity)

    if members:
        periods.append(_close_period(start_date, None, peak, members, equities))

    impact: dict[str, float] = {}
    for period in periods:
        for setup in period.caused_by_setups:
            impact[setup] = impact.get(setup, 0.0) + period.drawdown_amount

    weaknesses = []
    if impact:
        # First setup reaching the maximum wins ties
        worst = max(impact, key=lambda s: impact[s])
        weaknesses.append(f'Setup "{worst}" contributed most to drawdowns')

    return DrawdownAnalysis(
        max_drawdown=max_drawdown(pnl_curve),
        max_drawdown_r=max_drawdown(r_curve),
        current_drawdown=peak - float(pnl_curve[-1]),
        drawdown_periods=periods[-RECENT_PERIODS:],
        structural_weaknesses=weaknesses,
    )
