"""One-call analytics summary.

Runs every analyzer over the same trade collection with thresholds taken
from :class:`Settings` and condenses the results into a handful of key
insight strings.  Each call starts a new logging run id, so every line
logged while building one summary can be correlated.

Usage::

    settings = load_settings("config/journal.toml")
    summary = build_analytics_summary(trades, settings)
    for line in summary.key_insights:
        print(line)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Sequence

from journal_analytics.core.config import Settings
from journal_analytics.core.enums import SetupRecommendation
from journal_analytics.core.models import Trade
from journal_analytics.observability.logger import analytics_run, get_logger

from .discipline import DrawdownAnalysis, LossStreakAlert, analyze_drawdowns, analyze_loss_streak
from .equity import sort_by_entry
from .expectancy import (
    ExpectancyResult,
    RMultipleStats,
    SetupQualityScore,
    calculate_expectancy,
    calculate_r_multiple_stats,
    calculate_setup_quality_scores,
)
from .metrics import AccountStats, get_account_stats
from .performance import PerformanceMetrics, generate_performance_metrics
from .sentiment import (
    EmotionImpact,
    KeywordImpact,
    SentimentTrend,
    analyze_emotion_impact,
    calculate_sentiment_trends,
    correlate_notes_with_performance,
    get_emotional_insights,
)
from .setups import (
    Recommendation,
    SetupPattern,
    SimilarTrade,
    analyze_by_setup,
    find_similar_trades,
    get_improvement_recommendations,
)

logger = get_logger(__name__)

STRONG_EXPECTANCY_R = 0.3
RUNNER_MIN_WIN_RATE = 50.0
RUNNER_MAX_2R_SHARE = 20.0


@dataclass
class AnalyticsSummary:
    """Every analyzer's output for one trade collection."""

    run_id: str
    account: AccountStats
    performance: PerformanceMetrics
    expectancy: ExpectancyResult
    r_multiple_stats: RMultipleStats
    setup_scores: list[SetupQualityScore]
    setup_patterns: list[SetupPattern]
    emotion_impact: list[EmotionImpact]
    emotional_insights: list[str]
    sentiment_trends: list[SentimentTrend]
    keyword_impacts: list[KeywordImpact]
    loss_streak: LossStreakAlert
    drawdowns: DrawdownAnalysis
    recommendations: list[Recommendation]
    similar_to_latest: list[SimilarTrade]  # Trades like the most recent one
    key_insights: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "account": self.account.to_dict(),
            "performance": self.performance.to_dict(),
            "expectancy": self.expectancy.to_dict(),
            "r_multiple_stats": self.r_multiple_stats.to_dict(),
            "setup_scores": [s.to_dict() for s in self.setup_scores],
            "setup_patterns": [p.to_dict() for p in self.setup_patterns],
            "emotion_impact": [e.to_dict() for e in self.emotion_impact],
            "emotional_insights": list(self.emotional_insights),
            "sentiment_trends": [t.to_dict() for t in self.sentiment_trends],
            "keyword_impacts": [k.to_dict() for k in self.keyword_impacts],
            "loss_streak": self.loss_streak.to_dict(),
            "drawdowns": self.drawdowns.to_dict(),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "similar_to_latest": [s.to_dict() for s in self.similar_to_latest],
            "key_insights": list(self.key_insights),
        }


def _key_insights(
    expectancy: ExpectancyResult,
    r_stats: RMultipleStats,
    setup_scores: list[SetupQualityScore],
    loss_streak: LossStreakAlert,
) -> list[str]:
    insights: list[str] = []

    if expectancy.expectancy_r > STRONG_EXPECTANCY_R:
        insights.append(
            f"Strong positive expectancy of {expectancy.expectancy_r:.2f}R per trade"
        )
    elif expectancy.expectancy_r < 0:
        insights.append(
            f"Negative expectancy of {expectancy.expectancy_r:.2f}R - review your strategy"
        )

    if setup_scores:
        best = setup_scores[0]
        if best.score > 0:
            insights.append(
                f"Best setup: {best.setup_name} with {best.win_rate:.1f}% win rate "
                f"and {best.avg_r:.2f}R average"
            )
        worst = setup_scores[-1]
        if worst.recommendation == SetupRecommendation.AVOID:
            insights.append(
                f"Consider dropping: {worst.setup_name} has negative expectancy"
            )

    if loss_streak.is_on_tilt:
        insights.append("ALERT: You may be on tilt. Consider stopping for today.")

    if (
        r_stats.percent_above_2r < RUNNER_MAX_2R_SHARE
        and expectancy.win_rate > RUNNER_MIN_WIN_RATE
    ):
        insights.append(
            "Consider letting winners run longer - only "
            f"{r_stats.percent_above_2r:.1f}% of trades reach 2R"
        )

    return insights


def _similar_to_latest(
    trades: Sequence[Trade], threshold: float, limit: int
) -> list[SimilarTrade]:
    if not trades:
        return []
    latest = sort_by_entry(trades)[-1]
    return find_similar_trades(latest, trades, threshold=threshold, limit=limit)


def _summarize(
    trades: Sequence[Trade],
    settings: Settings,
    today: date | None,
    run_id: str,
) -> AnalyticsSummary:
    perf = settings.performance
    senti = settings.sentiment
    disc = settings.discipline
    sim = settings.similarity
    tz = perf.tz()

    logger.info("analytics_summary_started", trades=len(trades))

    expectancy = calculate_expectancy(trades)
    r_stats = calculate_r_multiple_stats(trades)
    setup_scores = calculate_setup_quality_scores(
        trades, drawdown_scale=disc.drawdown_scale
    )
    loss_streak = analyze_loss_streak(
        trades,
        max_streak_threshold=disc.max_streak_threshold,
        daily_loss_limit_r=disc.daily_loss_limit_r,
        today=today,
        tz=tz,
    )

    summary = AnalyticsSummary(
        run_id=run_id,
        account=get_account_stats(trades),
        performance=generate_performance_metrics(
            trades,
            perf.monthly_targets,
            default_target=perf.monthly_target,
            weekly_window=perf.weekly_window,
            week_start=perf.week_start,
            tz=tz,
        ),
        expectancy=expectancy,
        r_multiple_stats=r_stats,
        setup_scores=setup_scores,
        setup_patterns=analyze_by_setup(trades),
        emotion_impact=analyze_emotion_impact(trades),
        emotional_insights=get_emotional_insights(
            trades, control_ratio=senti.emotional_control_ratio
        ),
        sentiment_trends=calculate_sentiment_trends(trades, days=senti.trend_days),
        keyword_impacts=correlate_notes_with_performance(
            trades,
            max_tokens=senti.keyword_max_tokens,
            min_length=senti.keyword_min_length,
            min_trades=senti.keyword_min_trades,
            top_n=senti.keyword_limit,
        ),
        loss_streak=loss_streak,
        drawdowns=analyze_drawdowns(trades),
        recommendations=get_improvement_recommendations(trades),
        similar_to_latest=_similar_to_latest(trades, sim.threshold, sim.limit),
        key_insights=_key_insights(expectancy, r_stats, setup_scores, loss_streak),
    )

    logger.info(
        "analytics_summary_completed",
        insights=len(summary.key_insights),
        on_tilt=loss_streak.is_on_tilt,
    )
    return summary


def build_analytics_summary(
    trades: Sequence[Trade],
    settings: Settings | None = None,
    *,
    today: date | None = None,
) -> AnalyticsSummary:
    """Run every analyzer once and derive key insights.

    Everything logged while the summary is built shares its ``run_id``.
    """
    with analytics_run() as run_id:
        return _summarize(trades, settings or Settings(), today, run_id)
