"""Expectancy, R-multiple statistics and setup quality scores.

Expectancy is the average amount a trade is expected to make::

    expectancy   = win% * avg_win   - loss% * avg_loss      (money)
    expectancy_r = win% * avg_win_r - loss% * avg_loss_r    (R multiples)

``avg_loss`` and ``avg_loss_r`` are magnitudes.  Break-even trades count
toward the total but are neither wins nor losses.  Trades whose R-factor is
undefined (stop on the entry price) are left out of every R statistic.

Usage::

    result = calculate_expectancy(trades)
    print(result.interpretation, result.expectancy_r)
    for score in calculate_setup_quality_scores(trades):
        print(score.rank, score.setup_name, score.recommendation)
"""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Sequence

import numpy as np

from journal_analytics.core.enums import Interpretation, SetupRecommendation
from journal_analytics.core.models import Trade

from .equity import cumulative, max_drawdown, sort_by_entry
from .metrics import calculate_pnl, calculate_r_factor
from .stats import finite, mean, total

DRAWDOWN_SCALE = 1000.0

KEEP_MIN_SCORE = 0.5
AVOID_MAX_EXPECTANCY_R = -0.2

# (label, lower bound exclusive, upper bound inclusive)
R_BUCKETS: tuple[tuple[str, float, float], ...] = (
    ("< -2R", -math.inf, -2.0),
    ("-2R to -1R", -2.0, -1.0),
    ("-1R to 0", -1.0, 0.0),
    ("0 to 1R", 0.0, 1.0),
    ("1R to 2R", 1.0, 2.0),
    ("2R to 3R", 2.0, 3.0),
    ("> 3R", 3.0, math.inf),
)


@dataclass(frozen=True)
class ExpectancyResult:
    expectancy: float
    expectancy_r: float
    win_rate: float  # Percent
    loss_rate: float  # Percent
    avg_win: float
    avg_loss: float  # Magnitude
    avg_win_r: float
    avg_loss_r: float  # Magnitude
    total_trades: int
    interpretation: Interpretation

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["interpretation"] = self.interpretation.value
        return d


@dataclass(frozen=True)
class RBucket:
    range: str
    count: int
    percentage: float


@dataclass
class RMultipleStats:
    average_r: float = 0.0
    max_r: float = 0.0
    min_r: float = 0.0
    median_r: float = 0.0
    percent_above_2r: float = 0.0
    percent_above_3r: float = 0.0
    percent_minus_1r: float = 0.0
    percent_minus_2r_or_worse: float = 0.0
    total_r: float = 0.0
    distribution: list[RBucket] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class SetupQualityScore:
    setup_name: str
    score: float
    win_rate: float
    avg_r: float
    expectancy_r: float
    max_drawdown: float
    total_trades: int
    total_pnl: float
    recommendation: SetupRecommendation
    rank: int = 0

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["recommendation"] = self.recommendation.value
        return d


# ---------------------------------------------------------------------------
# Expectancy
# ---------------------------------------------------------------------------

def _interpret(expectancy: float) -> Interpretation:
    if expectancy > 0:
        return Interpretation.PROFITABLE
    if expectancy < 0:
        return Interpretation.LOSING
    return Interpretation.BREAK_EVEN


def calculate_expectancy(trades: Sequence[Trade]) -> ExpectancyResult:
    """Money and R expectancy for a trade collection."""
    if not trades:
        return ExpectancyResult(
            expectancy=0.0,
            expectancy_r=0.0,
            win_rate=0.0,
            loss_rate=0.0,
            avg_win=0.0,
            avg_loss=0.0,
            avg_win_r=0.0,
            avg_loss_r=0.0,
            total_trades=0,
            interpretation=Interpretation.BREAK_EVEN,
        )

    wins: list[float] = []
    losses: list[float] = []
    wins_r: list[float] = []
    losses_r: list[float] = []
    for trade in trades:
        pnl = calculate_pnl(trade)
        r = calculate_r_factor(trade)
        if pnl > 0:
            wins.append(pnl)
            if not math.isnan(r):
                wins_r.append(r)
        elif pnl < 0:
            losses.append(pnl)
            if not math.isnan(r):
                losses_r.append(r)

    n = len(trades)
    win_frac = len(wins) / n
    loss_frac = len(losses) / n
    avg_win = mean(wins)
    avg_loss = abs(mean(losses))
    avg_win_r = mean(wins_r)
    avg_loss_r = abs(mean(losses_r))

    expectancy = win_frac * avg_win - loss_frac * avg_loss
    return ExpectancyResult(
        expectancy=expectancy,
        expectancy_r=win_frac * avg_win_r - loss_frac * avg_loss_r,
        win_rate=win_frac * 100,
        loss_rate=loss_frac * 100,
        avg_win=avg_win,
        avg_loss=avg_loss,
        avg_win_r=avg_win_r,
        avg_loss_r=avg_loss_r,
        total_trades=n,
        interpretation=_interpret(expectancy),
    )


def calculate_expectancy_by(
    trades: Sequence[Trade],
    key: Callable[[Trade], str | None],
) -> dict[str, ExpectancyResult]:
    """Expectancy per group; trades whose key is None are skipped."""
    groups: dict[str, list[Trade]] = defaultdict(list)
    for trade in trades:
        k = key(trade)
        if k is None:
            continue
        groups[k].append(trade)
    return {k: calculate_expectancy(group) for k, group in groups.items()}


def calculate_expectancy_by_setup(trades: Sequence[Trade]) -> dict[str, ExpectancyResult]:
    return calculate_expectancy_by(trades, lambda t: t.setup_name)


def calculate_expectancy_by_symbol(trades: Sequence[Trade]) -> dict[str, ExpectancyResult]:
    return calculate_expectancy_by(trades, lambda t: t.symbol)


# ---------------------------------------------------------------------------
# R-multiples
# ---------------------------------------------------------------------------

def _percent(count: int, n: int) -> float:
    return count / n * 100


def calculate_r_multiple_stats(trades: Sequence[Trade]) -> RMultipleStats:
    """Distribution of R-factors.

    Percentages are relative to the number of trades with a defined
    R-factor.  Bucket bounds are lower-exclusive, upper-inclusive.
    """
    r_values = finite(calculate_r_factor(t) for t in trades)
    if not r_values:
        return RMultipleStats()

    n = len(r_values)
    arr = np.asarray(r_values, dtype=float)
    distribution = []
    for label, low, high in R_BUCKETS:
        count = int(np.count_nonzero((arr > low) & (arr <= high)))
        distribution.append(RBucket(range=label, count=count, percentage=_percent(count, n)))

    r_total = total(r_values)
    return RMultipleStats(
        average_r=r_total / n,
        max_r=float(arr.max()),
        min_r=float(arr.min()),
        median_r=float(np.median(arr)),
        percent_above_2r=_percent(int(np.count_nonzero(arr >= 2)), n),
        percent_above_3r=_percent(int(np.count_nonzero(arr >= 3)), n),
        percent_minus_1r=_percent(int(np.count_nonzero((arr <= -1) & (arr > -2))), n),
        percent_minus_2r_or_worse=_percent(int(np.count_nonzero(arr <= -2)), n),
        total_r=r_total,
        distribution=distribution,
    )


# ---------------------------------------------------------------------------
# Setup quality
# ---------------------------------------------------------------------------

def _recommend(score: float, expectancy_r: float) -> SetupRecommendation:
    if score > KEEP_MIN_SCORE and expectancy_r > 0:
        return SetupRecommendation.KEEP
    if score < 0 or expectancy_r < AVOID_MAX_EXPECTANCY_R:
        return SetupRecommendation.AVOID
    return SetupRecommendation.REVIEW


def calculate_setup_quality_scores(
    trades: Sequence[Trade],
    *,
    drawdown_scale: float = DRAWDOWN_SCALE,
) -> list[SetupQualityScore]:
    """Rank setups by ``(win rate * avg R) / max(1, max drawdown / scale)``.

    Win rate enters as a fraction.  Ranks start at 1; equal scores keep
    first-seen setup order.
    """
    groups: dict[str, list[Trade]] = defaultdict(list)
    for trade in trades:
        groups[trade.setup_name].append(trade)

    scores: list[SetupQualityScore] = []
    for setup_name, setup_trades in groups.items():
        exp = calculate_expectancy(setup_trades)
        avg_r = mean(finite(calculate_r_factor(t) for t in setup_trades))
        dd = max_drawdown(cumulative([calculate_pnl(t) for t in sort_by_entry(setup_trades)]))
        factor = max(1.0, dd / drawdown_scale)
        score = (exp.win_rate / 100) * avg_r / factor
        scores.append(SetupQualityScore(
            setup_name=setup_name,
            score=score,
            win_rate=exp.win_rate,
            avg_r=avg_r,
            expectancy_r=exp.expectancy_r,
            max_drawdown=dd,
            total_trades=len(setup_trades),
            total_pnl=total(calculate_pnl(t) for t in setup_trades),
            recommendation=_recommend(score, exp.expectancy_r),
        ))

    scores.sort(key=lambda s: s.score, reverse=True)
    for rank, s in enumerate(scores, start=1):
        s.rank = rank
    return scores
