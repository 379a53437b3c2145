"""Trade Analytics & Filtering: pure analyzers over journal trades.

Every function takes an immutable sequence of :class:`Trade` records and
returns fresh results; nothing mutates its input or touches storage
(preset functions go through an injected :class:`IPresetStore`).

Key components
--------------
**Metrics**

compute_trade_metrics         P&L and R-factor of one trade
get_account_stats             Count, win rate, totals, extremes
get_profit_factor / get_risk_reward_ratio / get_recovery_factor

**Performance**

generate_performance_metrics  Weekly/monthly P&L, equity curve, hours, days,
                              monthly targets, win rate and trade size

**Filtering**

apply_filters                 Conjunctive trade filter
save_filter_preset / get_filter_presets / delete_filter_preset

**Sentiment & Emotion**

analyze_emotion_impact        Per-emotion performance table
calculate_sentiment_trends    Daily note sentiment vs P&L
get_emotional_insights        Plain-language emotion observations
correlate_notes_with_performance  Note keyword impact ranking

**Setups**

analyze_by_setup              Per-setup statistics
find_similar_trades           Similarity search against a reference trade
compare_trades                Side-by-side trade comparison
get_trade_insights            Setup-level advisory strings

**Expectancy & Discipline**

calculate_expectancy          Money and R expectancy
calculate_setup_quality_scores  Keep / Review / Avoid ranking
analyze_loss_streak           Tilt detection
analyze_drawdowns             Drawdown periods and weaknesses
build_analytics_summary       Everything above in one call
"""

from .discipline import DrawdownAnalysis, LossStreakAlert, analyze_drawdowns, analyze_loss_streak
from .expectancy import (
    ExpectancyResult,
    RMultipleStats,
    SetupQualityScore,
    calculate_expectancy,
    calculate_expectancy_by,
    calculate_expectancy_by_setup,
    calculate_expectancy_by_symbol,
    calculate_r_multiple_stats,
    calculate_setup_quality_scores,
)
from .filters import (
    apply_filter_preset,
    apply_filters,
    delete_filter_preset,
    get_filter_presets,
    matches_filters,
    risk_reward_magnitude,
    save_filter_preset,
)
from .metrics import (
    AccountStats,
    TradeMetrics,
    calculate_pnl,
    calculate_r_factor,
    compute_trade_metrics,
    get_account_stats,
    get_profit_factor,
    get_recovery_factor,
    get_risk_reward_ratio,
    trade_outcome,
)
from .performance import (
    EquityPoint,
    MonthlyTarget,
    PerformanceMetrics,
    calculate_average_trade_size,
    calculate_best_trading_days,
    calculate_best_trading_hours,
    calculate_drawdown_series,
    calculate_equity_curve,
    calculate_max_drawdown,
    calculate_monthly_pnl,
    calculate_monthly_return_targets,
    calculate_monthly_win_rate,
    calculate_weekly_pnl,
    generate_performance_metrics,
)
from .sentiment import (
    EmotionalPattern,
    EmotionImpact,
    KeywordImpact,
    SentimentTrend,
    analyze_emotion_impact,
    calculate_sentiment_score,
    calculate_sentiment_trends,
    correlate_notes_with_performance,
    detect_emotional_patterns,
    get_emotional_insights,
)
from .setups import (
    Recommendation,
    SetupPattern,
    SimilarTrade,
    TradeComparison,
    analyze_by_setup,
    calculate_trade_similarity,
    compare_trades,
    find_similar_trades,
    get_improvement_recommendations,
    get_trade_insights,
    top_setups,
)
from .summary import AnalyticsSummary, build_analytics_summary

__all__ = [
    # metrics
    "TradeMetrics",
    "AccountStats",
    "calculate_pnl",
    "calculate_r_factor",
    "trade_outcome",
    "compute_trade_metrics",
    "get_profit_factor",
    "get_risk_reward_ratio",
    "get_recovery_factor",
    "get_account_stats",
    # performance
    "EquityPoint",
    "MonthlyTarget",
    "PerformanceMetrics",
    "calculate_weekly_pnl",
    "calculate_monthly_pnl",
    "calculate_equity_curve",
    "calculate_drawdown_series",
    "calculate_max_drawdown",
    "calculate_best_trading_hours",
    "calculate_best_trading_days",
    "calculate_monthly_return_targets",
    "calculate_monthly_win_rate",
    "calculate_average_trade_size",
    "generate_performance_metrics",
    # filters
    "risk_reward_magnitude",
    "matches_filters",
    "apply_filters",
    "save_filter_preset",
    "get_filter_presets",
    "delete_filter_preset",
    "apply_filter_preset",
    # sentiment
    "EmotionImpact",
    "SentimentTrend",
    "KeywordImpact",
    "EmotionalPattern",
    "calculate_sentiment_score",
    "analyze_emotion_impact",
    "calculate_sentiment_trends",
    "get_emotional_insights",
    "detect_emotional_patterns",
    "correlate_notes_with_performance",
    # setups
    "SetupPattern",
    "SimilarTrade",
    "TradeComparison",
    "Recommendation",
    "analyze_by_setup",
    "top_setups",
    "calculate_trade_similarity",
    "find_similar_trades",
    "compare_trades",
    "get_trade_insights",
    "get_improvement_recommendations",
    # expectancy
    "ExpectancyResult",
    "RMultipleStats",
    "SetupQualityScore",
    "calculate_expectancy",
    "calculate_expectancy_by",
    "calculate_expectancy_by_setup",
    "calculate_expectancy_by_symbol",
    "calculate_r_multiple_stats",
    "calculate_setup_quality_scores",
    # discipline
    "LossStreakAlert",
    "DrawdownAnalysis",
    "analyze_loss_streak",
    "analyze_drawdowns",
    # summary
    "AnalyticsSummary",
    "build_analytics_summary",
]
