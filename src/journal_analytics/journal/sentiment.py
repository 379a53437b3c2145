"""Sentiment and emotion analysis of journal notes.

Scores free-text notes with a small fixed lexicon, measures how each
recorded emotion relates to P&L, tracks daily sentiment over time and ranks
note keywords by their average P&L impact.  This is a heuristic, not NLP:
lexicon words match as plain substrings, so ``"unconfident"`` still counts
as ``"confident"`` and two overlapping words both fire.

The lexicons are static tables.  Callers may pass their own word lists to
extend them without changing the default behaviour.

Usage::

    impacts = analyze_emotion_impact(trades)
    print(impacts[0].emotion, impacts[0].total_pnl)
    for line in get_emotional_insights(trades):
        print(line)
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from dataclasses import asdict, dataclass
from typing import Any, Sequence

from journal_analytics.core.enums import PatternImpact
from journal_analytics.core.models import Trade
from journal_analytics.core.timeutils import date_portion

from .equity import sort_by_entry
from .metrics import calculate_pnl
from .stats import mean, population_std, total, win_rate

logger = logging.getLogger(__name__)

POSITIVE_WORDS = (
    "good", "great", "excellent", "strong", "confident",
    "focused", "disciplined", "calm", "patient",
)
NEGATIVE_WORDS = (
    "bad", "poor", "weak", "anxious", "scared",
    "confused", "rushed", "greedy", "frustrated",
)
POSITIVE_EMOTIONS = ("confident", "focused", "calm", "disciplined")

NEUTRAL_EMOTION = "neutral"

SCORE_BASELINE = 3
SCORE_MIN = 1
SCORE_MAX = 5

TREND_DAYS = 30
EMOTIONAL_CONTROL_RATIO = 0.7

KEYWORD_MAX_TOKENS = 10
KEYWORD_MIN_LENGTH = 4
KEYWORD_MIN_TRADES = 3
KEYWORD_LIMIT = 10

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class EmotionImpact:
    emotion: str
    trade_count: int
    total_pnl: float
    avg_pnl: float
    win_rate: float
    consistency: float  # Population stdev of P&L, lower = steadier

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SentimentTrend:
    date: str  # YYYY-MM-DD as written in entry_date
    average_sentiment: float  # 1-5
    pnl: float
    trades: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class KeywordImpact:
    keyword: str
    impact: float  # Average P&L per occurrence

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class EmotionalPattern:
    """A named behavioural pattern found in the emotion table."""

    pattern: str
    description: str
    trade_count: int
    impact: PatternImpact
    recommendation: str

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["impact"] = self.impact.value
        return d


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def calculate_sentiment_score(
    text: str,
    *,
    positive_words: Sequence[str] = POSITIVE_WORDS,
    negative_words: Sequence[str] = NEGATIVE_WORDS,
) -> int:
    """Lexicon score on a 1-5 scale, 3 being neutral."""
    lowered = text.lower()
    score = SCORE_BASELINE
    score += sum(1 for word in positive_words if word in lowered)
    score -= sum(1 for word in negative_words if word in lowered)
    return max(SCORE_MIN, min(SCORE_MAX, score))


# ---------------------------------------------------------------------------
# Emotion impact
# ---------------------------------------------------------------------------

def analyze_emotion_impact(trades: Sequence[Trade]) -> list[EmotionImpact]:
    """Per-emotion performance table, most profitable emotion first.

    Trades without an emotion label are grouped as ``"neutral"``.
    """
    groups: dict[str, list[float]] = defaultdict(list)
    for trade in trades:
        groups[trade.emotion or NEUTRAL_EMOTION].append(calculate_pnl(trade))

    impacts = [
        EmotionImpact(
            emotion=emotion,
            trade_count=len(pnls),
            total_pnl=total(pnls),
            avg_pnl=mean(pnls),
            win_rate=win_rate(pnls),
            consistency=population_std(pnls),
        )
        for emotion, pnls in groups.items()
    ]
    # Stable: equal totals keep first-seen order
    impacts.sort(key=lambda e: e.total_pnl, reverse=True)
    return impacts


# ---------------------------------------------------------------------------
# Trends
# ---------------------------------------------------------------------------

def calculate_sentiment_trends(
    trades: Sequence[Trade],
    *,
    days: int = TREND_DAYS,
) -> list[SentimentTrend]:
    """Daily average note sentiment next to daily P&L, last *days* days."""
    daily: dict[str, dict[str, Any]] = {}
    for trade in sort_by_entry(trades):
        bucket = daily.setdefault(
            date_portion(trade.entry_date), {"scores": [], "pnl": 0.0, "count": 0}
        )
        bucket["scores"].append(calculate_sentiment_score(trade.notes or ""))
        bucket["pnl"] += calculate_pnl(trade)
        bucket["count"] += 1

    trends = [
        SentimentTrend(
            date=day,
            average_sentiment=total(data["scores"]) / len(data["scores"]),
            pnl=data["pnl"],
            trades=data["count"],
        )
        for day, data in daily.items()
    ]
    return trends[-days:] if days > 0 else []


# ---------------------------------------------------------------------------
# Insights
# ---------------------------------------------------------------------------

def _has_positive_emotion(trade: Trade, positive_emotions: Sequence[str]) -> bool:
    emotion = (trade.emotion or "").lower()
    return any(word in emotion for word in positive_emotions)


def get_emotional_insights(
    trades: Sequence[Trade],
    *,
    positive_emotions: Sequence[str] = POSITIVE_EMOTIONS,
    control_ratio: float = EMOTIONAL_CONTROL_RATIO,
) -> list[str]:
    """Plain-language observations, always in the order
    best emotion, worst emotion, most consistent, emotional control.
    """
    if not trades:
        return []

    insights: list[str] = []
    impacts = analyze_emotion_impact(trades)

    best = impacts[0]
    insights.append(
        f'Your best trades are when you feel "{best.emotion}" '
        f"({best.trade_count} trades, {best.win_rate:.1f}% win rate)"
    )

    worst = impacts[-1]
    if worst.total_pnl < 0:
        insights.append(
            f'Avoid trading when feeling "{worst.emotion}" - '
            f"{worst.trade_count} trades with -${abs(worst.total_pnl):.2f} loss"
        )

    lowest = min(e.consistency for e in impacts)
    steadiest = next(e for e in impacts if e.consistency == lowest)
    insights.append(
        f'When "{steadiest.emotion}", your results are most consistent '
        f"({steadiest.consistency:.0f} stdev)"
    )

    positive = sum(1 for t in trades if _has_positive_emotion(t, positive_emotions))
    if positive >= len(trades) * control_ratio:
        insights.append(
            f"Excellent emotional control! {positive / len(trades) * 100:.1f}% "
            "of trades made with positive mindset"
        )

    return insights


def detect_emotional_patterns(trades: Sequence[Trade]) -> list[EmotionalPattern]:
    """Flag emotions that stand out by win rate or by outcome volatility."""
    impacts = analyze_emotion_impact(trades)
    if not impacts:
        return []

    patterns: list[EmotionalPattern] = []
    # Earliest group wins ties, matching a left-to-right scan
    best = impacts[0]
    worst = impacts[0]
    for e in impacts[1:]:
        if e.win_rate > best.win_rate:
            best = e
        if e.win_rate < worst.win_rate:
            worst = e

    if best.win_rate > 60:
        patterns.append(EmotionalPattern(
            pattern=f"{best.emotion} State Excellence",
            description=f"Trading with {best.emotion} emotion shows superior performance",
            trade_count=best.trade_count,
            impact=PatternImpact.POSITIVE,
            recommendation=f"Consider preparing/priming for {best.emotion} state before trading sessions",
        ))

    if worst.win_rate < 40 and worst.trade_count >= 3:
        patterns.append(EmotionalPattern(
            pattern=f"{worst.emotion} State Avoidance",
            description=(
                f"{worst.emotion} emotion correlates with poor performance "
                f"({worst.win_rate:.1f}% win rate)"
            ),
            trade_count=worst.trade_count,
            impact=PatternImpact.NEGATIVE,
            recommendation=f"Implement emotional resets or take breaks when you notice {worst.emotion} feeling",
        ))

    avg_consistency = mean([e.consistency for e in impacts])
    volatile = next((e for e in impacts if e.consistency > avg_consistency * 1.5), None)
    if volatile is not None:
        patterns.append(EmotionalPattern(
            pattern="Emotional Volatility",
            description=f"{volatile.emotion} emotion produces highly variable trade outcomes",
            trade_count=volatile.trade_count,
            impact=PatternImpact.NEGATIVE,
            recommendation="Use risk management rules to control position size during this emotional state",
        ))

    return patterns


# ---------------------------------------------------------------------------
# Keyword correlation
# ---------------------------------------------------------------------------

def correlate_notes_with_performance(
    trades: Sequence[Trade],
    *,
    max_tokens: int = KEYWORD_MAX_TOKENS,
    min_length: int = KEYWORD_MIN_LENGTH,
    min_trades: int = KEYWORD_MIN_TRADES,
    top_n: int = KEYWORD_LIMIT,
) -> list[KeywordImpact]:
    """Rank note keywords by average P&L per occurrence.

    Only the first ``max_tokens`` whitespace-delimited tokens of each note
    are read, and a keyword must appear in at least ``min_trades`` distinct
    trades' notes to be reported.
    """
    pnl_sum: dict[str, float] = defaultdict(float)
    occurrences: dict[str, int] = defaultdict(int)
    trade_hits: dict[str, int] = defaultdict(int)

    for trade in trades:
        if not trade.notes:
            continue
        pnl = calculate_pnl(trade)
        seen: set[str] = set()
        for word in _WHITESPACE.split(trade.notes.lower())[:max_tokens]:
            if len(word) < min_length:
                continue
            pnl_sum[word] += pnl
            occurrences[word] += 1
            if word not in seen:
                trade_hits[word] += 1
                seen.add(word)

    ranked = [
        KeywordImpact(keyword=word, impact=pnl_sum[word] / count)
        for word, count in occurrences.items()
        if trade_hits[word] >= min_trades
    ]
    ranked.sort(key=lambda k: abs(k.impact), reverse=True)
    return ranked[:top_n]
