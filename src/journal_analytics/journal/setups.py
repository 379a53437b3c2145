"""Setup / pattern analysis.

Groups trades by their named strategy ("setup"), scores how alike two
trades are, produces side-by-side comparisons and turns setup statistics
into short advisory strings.

Similarity score (0-100)
------------------------
* same setup: 40
* same symbol: 20
* entry price within 1% / 5% / 10% of the reference: 15 / 10 / 5
* quantity within 10% / 25% of the reference: 10 / 5
* risk-reward magnitude within 0.5 / 1.0: 15 / 8

Usage::

    for pattern in top_setups(trades, n=3):
        print(pattern.setup_name, pattern.total_pnl)

    matches = find_similar_trades(trades[0], trades)
    report = compare_trades(trades[0], trades[1])
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from typing import Any, Sequence

from journal_analytics.core.enums import Priority
from journal_analytics.core.models import Trade

from .equity import cumulative, max_drawdown, sort_by_entry
from .filters import risk_reward_magnitude
from .metrics import calculate_pnl, calculate_r_factor
from .stats import finite, mean, population_std, total, win_rate

logger = logging.getLogger(__name__)

LOW_WIN_RATE = 45.0
LOW_AVG_R = 1.5
CONSISTENT_STDEV = 100.0
CONSISTENT_MIN_TRADES = 5
MOMENTUM_WINDOW = 10
MOMENTUM_POINTS = 10.0

SIMILARITY_THRESHOLD = 80.0
SIMILARITY_LIMIT = 10


@dataclass(frozen=True)
class SetupPattern:
    """Aggregate statistics for one setup."""

    setup_name: str
    count: int
    total_pnl: float
    avg_pnl: float
    win_rate: float
    avg_r_factor: float  # Undefined R-factors skipped
    best_trade: float
    worst_trade: float
    consistency: float  # Population stdev of P&L
    max_drawdown: float  # Of this setup's own equity curve

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SimilarTrade:
    trade: Trade
    score: float

    def to_dict(self) -> dict[str, Any]:
        return {"trade_id": self.trade.id, "score": self.score}


@dataclass
class TradeComparison:
    trade1: Trade
    trade2: Trade
    similarities: list[str] = field(default_factory=list)
    differences: list[str] = field(default_factory=list)
    outcome: str = ""


@dataclass(frozen=True)
class Recommendation:
    priority: Priority
    title: str
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "priority": self.priority.value,
            "title": self.title,
            "description": self.description,
        }


# ---------------------------------------------------------------------------
# Setup grouping
# ---------------------------------------------------------------------------

def _group_by_setup(trades: Sequence[Trade]) -> dict[str, list[Trade]]:
    groups: dict[str, list[Trade]] = defaultdict(list)
    for trade in trades:
        groups[trade.setup_name].append(trade)
    return groups


def _pattern_for(setup_name: str, setup_trades: list[Trade]) -> SetupPattern:
    pnls = [calculate_pnl(t) for t in setup_trades]
    r_values = finite(calculate_r_factor(t) for t in setup_trades)
    curve = cumulative([calculate_pnl(t) for t in sort_by_entry(setup_trades)])
    return SetupPattern(
        setup_name=setup_name,
        count=len(pnls),
        total_pnl=total(pnls),
        avg_pnl=mean(pnls),
        win_rate=win_rate(pnls),
        avg_r_factor=mean(r_values),
        best_trade=max(pnls),
        worst_trade=min(pnls),
        consistency=population_std(pnls),
        max_drawdown=max_drawdown(curve),
    )


def analyze_by_setup(trades: Sequence[Trade]) -> list[SetupPattern]:
    """Per-setup statistics, most profitable setup first."""
    patterns = [
        _pattern_for(name, group) for name, group in _group_by_setup(trades).items()
    ]
    patterns.sort(key=lambda p: p.total_pnl, reverse=True)
    return patterns


def top_setups(trades: Sequence[Trade], n: int = 5) -> list[SetupPattern]:
    return analyze_by_setup(trades)[:n]


# ---------------------------------------------------------------------------
# Similarity
# ---------------------------------------------------------------------------

def _relative_gap(reference: float, other: float) -> float:
    return abs(reference - other) / reference


def calculate_trade_similarity(reference: Trade, other: Trade) -> float:
    """Heuristic 0-100 likeness of *other* to *reference*."""
    score = 0.0

    if reference.setup_name == other.setup_name:
        score += 40
    if reference.symbol == other.symbol:
        score += 20

    price_gap = _relative_gap(reference.entry_price, other.entry_price)
    if price_gap < 0.01:
        score += 15
    elif price_gap < 0.05:
        score += 10
    elif price_gap < 0.1:
        score += 5

    size_gap = _relative_gap(reference.quantity, other.quantity)
    if size_gap < 0.1:
        score += 10
    elif size_gap < 0.25:
        score += 5

    rr_gap = abs(risk_reward_magnitude(reference) - risk_reward_magnitude(other))
    if rr_gap < 0.5:
        score += 15
    elif rr_gap < 1:
        score += 8

    return min(score, 100.0)


def find_similar_trades(
    reference: Trade,
    trades: Sequence[Trade],
    *,
    threshold: float = SIMILARITY_THRESHOLD,
    limit: int = SIMILARITY_LIMIT,
) -> list[SimilarTrade]:
    """Same-setup trades scoring at least *threshold* against *reference*,
    best first.

    Only trades sharing the reference's setup are candidates, and the
    reference itself (matched by id) is never returned.  Equal scores keep
    input order.
    """
    scored = [
        SimilarTrade(trade=t, score=calculate_trade_similarity(reference, t))
        for t in trades
        if t.id != reference.id and t.setup_name == reference.setup_name
    ]
    matches = [s for s in scored if s.score >= threshold]
    matches.sort(key=lambda s: s.score, reverse=True)
    logger.debug(
        "Found %d trades similar to %s (threshold %.0f)",
        len(matches), reference.id, threshold,
    )
    return matches[:limit]


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------

def _fmt_r(value: float) -> str:
    return "n/a" if math.isnan(value) else f"{value:.2f}R"


def _verb(pnl: float) -> str:
    if pnl > 0:
        return "won"
    if pnl < 0:
        return "lost"
    return "broke even"


def compare_trades(trade1: Trade, trade2: Trade) -> TradeComparison:
    """Qualitative side-by-side report of two trades."""
    cmp = TradeComparison(trade1=trade1, trade2=trade2)

    def note(same: bool, alike: str, unlike: str) -> None:
        (cmp.similarities if same else cmp.differences).append(alike if same else unlike)

    note(
        trade1.setup_name == trade2.setup_name,
        f"Same setup: {trade1.setup_name}",
        f"Different setups: {trade1.setup_name} vs {trade2.setup_name}",
    )
    note(
        trade1.symbol == trade2.symbol,
        f"Same symbol: {trade1.symbol}",
        f"Different symbols: {trade1.symbol} vs {trade2.symbol}",
    )
    note(
        trade1.direction == trade2.direction,
        f"Same direction: {trade1.direction.value}",
        f"Different directions: {trade1.direction.value} vs {trade2.direction.value}",
    )

    prices = f"${trade1.entry_price:.2f} vs ${trade2.entry_price:.2f}"
    note(
        abs(trade1.entry_price - trade2.entry_price) < 1,
        f"Similar entry price: {prices}",
        f"Different entry price: {prices}",
    )

    sizes = f"{trade1.quantity:g} vs {trade2.quantity:g}"
    note(
        trade1.quantity == trade2.quantity,
        f"Same quantity: {trade1.quantity:g}",
        f"Different quantity: {sizes}",
    )

    r1 = abs(calculate_r_factor(trade1))
    r2 = abs(calculate_r_factor(trade2))
    # nan compares unequal, so an undefined R is always a difference
    note(
        abs(r1 - r2) < 0.5,
        f"Similar R-factor magnitude: {_fmt_r(r1)} vs {_fmt_r(r2)}",
        f"Different R-factor magnitude: {_fmt_r(r1)} vs {_fmt_r(r2)}",
    )

    emotion1 = trade1.emotion or "none"
    emotion2 = trade2.emotion or "none"
    note(
        emotion1 == emotion2,
        f"Same emotion: {emotion1}",
        f"Different emotions: {emotion1} vs {emotion2}",
    )

    pnl1 = calculate_pnl(trade1)
    pnl2 = calculate_pnl(trade2)
    note(
        (pnl1 > 0 and pnl2 > 0) or (pnl1 < 0 and pnl2 < 0),
        f"Both {'winning' if pnl1 > 0 else 'losing'} trades",
        f"Different outcome: Trade 1 {_verb(pnl1)}, Trade 2 {_verb(pnl2)}",
    )

    if pnl1 > pnl2:
        cmp.outcome = f"Trade 1 performed better (+${pnl1 - pnl2:.2f})"
    elif pnl2 > pnl1:
        cmp.outcome = f"Trade 2 performed better (+${pnl2 - pnl1:.2f})"
    else:
        cmp.outcome = "Both trades had same outcome"
    return cmp


# ---------------------------------------------------------------------------
# Insights
# ---------------------------------------------------------------------------

def _setup_flags(pattern: SetupPattern, *, has_r: bool = True) -> list[str]:
    flags = []
    name = pattern.setup_name
    if pattern.win_rate < LOW_WIN_RATE:
        flags.append(
            f'"{name}" has a low win rate ({pattern.win_rate:.1f}%) - '
            "review its entry criteria"
        )
    if has_r and pattern.avg_r_factor < LOW_AVG_R:
        flags.append(
            f'"{name}" averages {pattern.avg_r_factor:.2f}R - '
            "plan targets of at least 1.5R before entry"
        )
    if pattern.max_drawdown > pattern.total_pnl > 0:
        flags.append(
            f'"{name}" drawdown (${pattern.max_drawdown:.2f}) exceeds its profit '
            f"(${pattern.total_pnl:.2f}) - reduce position size"
        )
    return flags


def get_trade_insights(trades: Sequence[Trade]) -> list[str]:
    """Advisory strings from setup statistics and recent momentum."""
    if not trades:
        return []

    insights: list[str] = []
    patterns = analyze_by_setup(trades)

    best = patterns[0]
    insights.append(
        f'Your best setup is "{best.setup_name}" with {best.win_rate:.1f}% '
        f"win rate on {best.count} trades"
    )

    consistent = [
        p for p in patterns
        if p.consistency < CONSISTENT_STDEV and p.count >= CONSISTENT_MIN_TRADES
    ]
    if consistent:
        insights.append(
            f'Your most consistent setup is "{consistent[0].setup_name}" with '
            f"${consistent[0].consistency:.2f} standard deviation"
        )

    ordered = [calculate_pnl(t) for t in sort_by_entry(trades)]
    recent_rate = win_rate(ordered[-MOMENTUM_WINDOW:])
    overall_rate = win_rate(ordered)
    if recent_rate > overall_rate + MOMENTUM_POINTS:
        insights.append(
            f"Great momentum! Recent win rate ({recent_rate:.1f}%) is above average"
        )
    elif recent_rate < overall_rate - MOMENTUM_POINTS:
        insights.append(
            "Win rate has declined recently. Review your recent trades for patterns"
        )

    # patterns[0] holds the maximum total P&L
    if best.total_pnl > 0:
        insights.append(
            f'"{best.setup_name}" is your most profitable setup: '
            f"${best.total_pnl:.2f} total"
        )

    # Setups whose every stop sits on entry have no R to judge
    rated = {t.setup_name for t in trades if not math.isnan(calculate_r_factor(t))}
    for pattern in patterns:
        insights.extend(_setup_flags(pattern, has_r=pattern.setup_name in rated))

    return insights


def get_improvement_recommendations(trades: Sequence[Trade]) -> list[Recommendation]:
    """Account-level priorities; never empty."""
    fallback = Recommendation(
        priority=Priority.LOW,
        title="Keep Trading",
        description=(
            "You need more trades to generate meaningful insights. "
            "Keep maintaining your journal."
        ),
    )
    if not trades:
        return [fallback]

    pnls = [calculate_pnl(t) for t in trades]
    rate = win_rate(pnls)
    r_values = finite(calculate_r_factor(t) for t in trades)
    avg_r = mean(r_values)
    net = total(pnls)
    dd = max_drawdown(cumulative([calculate_pnl(t) for t in sort_by_entry(trades)]))

    recs: list[Recommendation] = []
    if rate < LOW_WIN_RATE:
        recs.append(Recommendation(
            priority=Priority.HIGH,
            title="Improve Win Rate",
            description=(
                f"Your win rate is {rate:.1f}%. Target 50%+ by reviewing "
                "losing trades for patterns."
            ),
        ))
    if r_values and avg_r < LOW_AVG_R:
        recs.append(Recommendation(
            priority=Priority.HIGH,
            title="Better Risk-Reward",
            description=(
                f"Average R is {avg_r:.2f}. Aim for 2:1 or better risk-reward "
                "ratio on entries."
            ),
        ))
    if dd > net > 0:
        recs.append(Recommendation(
            priority=Priority.HIGH,
            title="Reduce Drawdown",
            description=(
                f"Max drawdown ({dd:.2f}) exceeds profits. Consider stricter "
                "position sizing."
            ),
        ))
    if rate >= 50 and avg_r >= LOW_AVG_R:
        recs.append(Recommendation(
            priority=Priority.MEDIUM,
            title="Scale Up",
            description="Your metrics look solid. Consider gradually increasing position size.",
        ))
    if net < 0:
        recs.append(Recommendation(
            priority=Priority.HIGH,
            title="Review Strategy",
            description=(
                "You're in drawdown. Take a break and analyze your recent "
                "trades for setup failures."
            ),
        ))

    return recs or [fallback]
