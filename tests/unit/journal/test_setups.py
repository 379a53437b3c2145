"""Tests for setup grouping, similarity search, comparison and insights."""

import pytest

from journal_analytics.core.enums import Priority
from journal_analytics.journal.setups import (
    analyze_by_setup,
    calculate_trade_similarity,
    compare_trades,
    find_similar_trades,
    get_improvement_recommendations,
    get_trade_insights,
    top_setups,
)

from .conftest import make_loser, make_series, make_trade, make_winner


def _by_id(trades):
    return {t.id: t for t in trades}


class TestAnalyzeBySetup:
    def test_sorted_by_total_pnl(self, mixed_trades):
        patterns = analyze_by_setup(mixed_trades)
        assert [p.setup_name for p in patterns] == ["Breakout", "Pullback"]

    def test_breakout_stats(self, mixed_trades):
        breakout = analyze_by_setup(mixed_trades)[0]
        assert breakout.count == 3
        assert breakout.total_pnl == pytest.approx(220.0)
        assert breakout.avg_pnl == pytest.approx(220 / 3)
        assert breakout.win_rate == pytest.approx(200 / 3)
        assert breakout.avg_r_factor == pytest.approx((2 + 4 - 1.6) / 3)
        assert breakout.best_trade == pytest.approx(200.0)
        assert breakout.worst_trade == pytest.approx(-80.0)
        assert breakout.max_drawdown == pytest.approx(80.0)

    def test_consistency_is_population_stdev(self):
        [pattern] = analyze_by_setup(make_series([10, 30]))
        assert pattern.consistency == pytest.approx(10.0)

    def test_undefined_r_skipped(self):
        trades = [make_trade("a", stop=100.0), make_trade("b", exit=120.0)]
        [pattern] = analyze_by_setup(trades)
        assert pattern.avg_r_factor == pytest.approx(4.0)

    def test_all_undefined_r_is_zero(self):
        [pattern] = analyze_by_setup([make_trade("a", stop=100.0)])
        assert pattern.avg_r_factor == 0.0

    def test_top_setups(self, mixed_trades):
        assert [p.setup_name for p in top_setups(mixed_trades, n=1)] == ["Breakout"]

    def test_empty(self):
        assert analyze_by_setup([]) == []


class TestSimilarity:
    def test_scores(self, mixed_trades):
        t = _by_id(mixed_trades)
        assert calculate_trade_similarity(t["a"], t["e"]) == pytest.approx(100.0)
        assert calculate_trade_similarity(t["a"], t["c"]) == pytest.approx(85.0)
        assert calculate_trade_similarity(t["a"], t["b"]) == pytest.approx(25.0)

    def test_bounded(self, mixed_trades):
        for other in mixed_trades:
            assert 0 <= calculate_trade_similarity(mixed_trades[0], other) <= 100

    def test_find_excludes_reference(self, mixed_trades):
        reference = mixed_trades[0]
        matches = find_similar_trades(reference, mixed_trades)
        assert [m.trade.id for m in matches] == ["e", "c"]
        assert reference.id not in {m.trade.id for m in matches}

    def test_threshold_and_limit(self, mixed_trades):
        reference = mixed_trades[0]
        assert [m.trade.id for m in find_similar_trades(reference, mixed_trades, threshold=90)] == ["e"]
        assert len(find_similar_trades(reference, mixed_trades, threshold=0, limit=2)) == 2

    def test_other_setups_are_not_candidates(self):
        reference = make_trade("ref", symbol="AAPL", setup="Breakout")
        other_setup = make_trade("x", symbol="AAPL", setup="Pullback")
        # symbol, price, size and risk-reward all match: 20 + 15 + 10 + 15
        assert calculate_trade_similarity(reference, other_setup) == pytest.approx(60.0)
        assert find_similar_trades(reference, [other_setup], threshold=60) == []

    def test_default_threshold(self):
        reference = make_trade("ref")
        # same setup, other symbol, same price, size and risk-reward: 80 points
        near = make_trade("near", symbol="MSFT")
        # same setup, other symbol, price 8% away, quantity 20% away: 40 + 5 + 5 + 15 = 65
        far = make_trade("far", symbol="MSFT", entry=108.0, exit=118.8, stop=102.6, qty=12.0)
        assert [m.trade.id for m in find_similar_trades(reference, [near, far])] == ["near"]

    def test_ties_keep_input_order(self):
        reference = make_trade("ref")
        trades = [reference, make_trade("x"), make_trade("y")]
        assert [m.trade.id for m in find_similar_trades(reference, trades)] == ["x", "y"]


class TestCompareTrades:
    def test_report(self, mixed_trades):
        t = _by_id(mixed_trades)
        cmp = compare_trades(t["a"], t["b"])
        assert cmp.similarities == [
            "Same direction: buy",
            "Similar entry price: $100.00 vs $100.00",
            "Same quantity: 10",
        ]
        assert "Different setups: Breakout vs Pullback" in cmp.differences
        assert "Different symbols: AAPL vs GOOGL" in cmp.differences
        assert "Different R-factor magnitude: 2.00R vs 1.00R" in cmp.differences
        assert "Different emotions: confident vs anxious" in cmp.differences
        assert "Different outcome: Trade 1 won, Trade 2 lost" in cmp.differences
        assert cmp.outcome == "Trade 1 performed better (+$150.00)"

    def test_same_outcome(self):
        cmp = compare_trades(make_trade("a"), make_trade("b"))
        assert "Both winning trades" in cmp.similarities
        assert cmp.outcome == "Both trades had same outcome"
        assert cmp.differences == []

    def test_second_better(self):
        cmp = compare_trades(make_loser("a", -20), make_loser("b", -5))
        assert "Both losing trades" in cmp.similarities
        assert cmp.outcome == "Trade 2 performed better (+$15.00)"

    def test_undefined_r_is_a_difference(self):
        cmp = compare_trades(make_trade("a", stop=100.0), make_trade("b", stop=100.0))
        assert "Different R-factor magnitude: n/a vs n/a" in cmp.differences


class TestTradeInsights:
    def test_mixed(self, mixed_trades):
        insights = get_trade_insights(mixed_trades)
        assert insights[0] == 'Your best setup is "Breakout" with 66.7% win rate on 3 trades'
        assert insights[1] == '"Breakout" is your most profitable setup: $220.00 total'
        assert insights[2].startswith('"Breakout" averages 1.47R')
        assert insights[3].startswith('"Pullback" averages -0.10R')
        assert len(insights) == 4

    def test_consistent_setup(self):
        insights = get_trade_insights(make_series([10] * 5))
        assert 'Your most consistent setup is "Breakout" with $0.00 standard deviation' in insights

    def test_momentum_up(self):
        insights = get_trade_insights(make_series([-10] * 10 + [10] * 10))
        assert "Great momentum! Recent win rate (100.0%) is above average" in insights

    def test_momentum_down(self):
        insights = get_trade_insights(make_series([10] * 10 + [-10] * 10))
        assert "Win rate has declined recently. Review your recent trades for patterns" in insights

    def test_low_win_rate_flag(self):
        insights = get_trade_insights(make_series([50, -10, -10]))
        assert any("low win rate (33.3%)" in i for i in insights)

    def test_risk_sizing_flag(self):
        insights = get_trade_insights(make_series([300, -250, 10]))
        assert any("drawdown ($250.00) exceeds its profit ($60.00)" in i for i in insights)

    def test_no_r_target_flag_without_defined_r(self):
        insights = get_trade_insights([make_trade("a", stop=100.0), make_trade("b", stop=100.0)])
        assert not any("averages" in i for i in insights)

    def test_r_target_flag_for_rated_setup_only(self):
        trades = [
            make_trade("a", setup="Scalp", stop=100.0),
            make_trade("b", setup="Swing", exit=102.0),
        ]
        insights = get_trade_insights(trades)
        assert any(i.startswith('"Swing" averages 0.40R') for i in insights)
        assert not any(i.startswith('"Scalp" averages') for i in insights)

    def test_empty(self):
        assert get_trade_insights([]) == []


class TestImprovementRecommendations:
    def test_mixed(self, mixed_trades):
        recs = get_improvement_recommendations(mixed_trades)
        assert [r.title for r in recs] == ["Better Risk-Reward"]
        assert recs[0].priority == Priority.HIGH

    def test_losing_account(self):
        recs = get_improvement_recommendations(make_series([-10, -20]))
        assert [r.title for r in recs] == ["Improve Win Rate", "Better Risk-Reward", "Review Strategy"]

    def test_scale_up(self):
        recs = get_improvement_recommendations(make_series([30, 30, -10]))
        assert [(r.priority, r.title) for r in recs] == [(Priority.MEDIUM, "Scale Up")]

    def test_reduce_drawdown(self):
        titles = [r.title for r in get_improvement_recommendations(make_series([300, -250, 10]))]
        assert "Reduce Drawdown" in titles

    def test_no_defined_r_skips_risk_reward(self):
        recs = get_improvement_recommendations([make_trade("a", stop=100.0)])
        assert [r.title for r in recs] == ["Keep Trading"]

    def test_empty_falls_back(self):
        [rec] = get_improvement_recommendations([])
        assert rec.title == "Keep Trading"
        assert rec.to_dict()["priority"] == "low"
