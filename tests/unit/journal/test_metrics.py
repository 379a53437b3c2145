"""Tests for per-trade metrics and account aggregates."""

import math

import pytest

from journal_analytics.core.errors import InvalidDirectionError
from journal_analytics.core.enums import TradeOutcome
from journal_analytics.core.models import Trade
from journal_analytics.journal.metrics import (
    calculate_pnl,
    calculate_r_factor,
    compute_trade_metrics,
    get_account_stats,
    get_profit_factor,
    get_recovery_factor,
    get_risk_reward_ratio,
    trade_outcome,
)

from .conftest import make_loser, make_series, make_trade, make_winner


class TestCalculatePnl:
    """P&L sign conventions for both directions."""

    def test_buy_winner(self):
        assert calculate_pnl(make_trade(entry=100, exit=110, qty=10)) == 100

    def test_buy_loser(self):
        assert calculate_pnl(make_trade(entry=100, exit=95, qty=10)) == -50

    def test_sell_winner(self):
        trade = make_trade(direction="sell", entry=100, exit=90, stop=105, qty=10)
        assert calculate_pnl(trade) == 100

    def test_sell_loser(self):
        trade = make_trade(direction="sell", entry=100, exit=104, stop=105, qty=5)
        assert calculate_pnl(trade) == -20

    def test_unknown_direction_raises(self):
        trade = Trade.model_construct(**{**make_trade().model_dump(), "direction": "hold"})
        with pytest.raises(InvalidDirectionError, match="hold"):
            calculate_pnl(trade)


class TestCalculateRFactor:
    def test_buy_r_factor(self):
        trade = make_trade(entry=100, exit=120, stop=95)
        assert calculate_r_factor(trade) == pytest.approx(4.0)

    def test_buy_losing_r_factor(self):
        trade = make_trade(entry=100, exit=95, stop=95)
        assert calculate_r_factor(trade) == pytest.approx(-1.0)

    def test_sell_r_factor(self):
        trade = make_trade(direction="sell", entry=100, exit=90, stop=105)
        assert calculate_r_factor(trade) == pytest.approx(2.0)

    def test_zero_risk_is_nan(self):
        trade = make_trade(entry=100, exit=110, stop=100)
        assert math.isnan(calculate_r_factor(trade))

    def test_recomputation_is_stable(self):
        trade = make_trade(entry=101.37, exit=99.12, stop=97.5, qty=3.3)
        assert calculate_r_factor(trade) == calculate_r_factor(trade)
        assert calculate_pnl(trade) == calculate_pnl(trade)


class TestTradeMetrics:
    def test_compute_trade_metrics(self):
        metrics = compute_trade_metrics(make_trade(entry=100, exit=120, stop=95, qty=10))
        assert metrics.pnl == 200
        assert metrics.r_factor == pytest.approx(4.0)
        assert metrics.to_dict() == {"pnl": 200, "r_factor": pytest.approx(4.0)}

    def test_outcomes(self):
        assert trade_outcome(make_trade(exit=110)) == TradeOutcome.WIN
        assert trade_outcome(make_trade(exit=90)) == TradeOutcome.LOSS
        assert trade_outcome(make_trade(exit=100)) == TradeOutcome.BREAKEVEN


class TestProfitFactor:
    def test_ratio(self):
        trades = [make_winner("w1", 300), make_loser("l1", -50), make_loser("l2", -50)]
        assert get_profit_factor(trades) == pytest.approx(3.0)

    def test_no_losers_with_profit_is_inf(self):
        assert get_profit_factor([make_winner("w1", 10)]) == math.inf

    def test_empty_is_zero(self):
        assert get_profit_factor([]) == 0.0

    def test_breakeven_only_is_zero(self):
        assert get_profit_factor([make_trade(exit=100)]) == 0.0


class TestRiskRewardRatio:
    def test_ratio(self):
        trades = [
            make_winner("w1", 100), make_winner("w2", 200),
            make_loser("l1", -50),
        ]
        assert get_risk_reward_ratio(trades) == pytest.approx(3.0)

    def test_no_winners(self):
        assert get_risk_reward_ratio([make_loser("l1", -20)]) == 0.0

    def test_no_losers(self):
        assert get_risk_reward_ratio([make_winner("w1", 20)]) == math.inf


class TestRecoveryFactor:
    def test_net_over_drawdown(self):
        # equity 100, 50, 250 -> max drawdown 50, net 250
        trades = make_series([100, -50, 200])
        assert get_recovery_factor(trades) == pytest.approx(5.0)

    def test_uses_date_order(self):
        trades = list(reversed(make_series([100, -50, 200])))
        assert get_recovery_factor(trades) == pytest.approx(5.0)

    def test_no_drawdown_with_profit_is_inf(self):
        assert get_recovery_factor(make_series([10, 20])) == math.inf

    def test_losing_start_counts_as_drawdown(self):
        # equity -400, -300 -> drawdown 400 from the zero baseline
        assert get_recovery_factor(make_series([-400, 100])) == pytest.approx(-0.75)

    def test_empty_is_zero(self):
        assert get_recovery_factor([]) == 0.0


class TestAccountStats:
    def test_only_losses_drawdown_is_total_loss(self):
        stats = get_account_stats(make_series([-100, -100, -100]))
        assert stats.max_drawdown == pytest.approx(300.0)

    def test_empty(self):
        stats = get_account_stats([])
        assert stats.total_trades == 0
        assert stats.win_rate == 0.0
        assert stats.best_setup == "N/A"
        assert stats.worst_setup == "N/A"

    def test_aggregates(self, mixed_trades):
        stats = get_account_stats(mixed_trades)
        assert stats.total_trades == 5
        assert stats.wins == 3
        assert stats.losses == 2
        assert stats.win_rate == pytest.approx(60.0)
        assert stats.total_pnl == pytest.approx(210.0)
        assert stats.average_pnl == pytest.approx(42.0)
        assert stats.best_trade == pytest.approx(200.0)
        assert stats.worst_trade == pytest.approx(-80.0)
        assert stats.max_drawdown == pytest.approx(80.0)
        # Breakout: 100 + 200 - 80 = 220, Pullback: -50 + 40 = -10
        assert stats.best_setup == "Breakout"
        assert stats.worst_setup == "Pullback"

    def test_average_r_skips_undefined(self):
        trades = [
            make_trade("a", entry=100, exit=110, stop=95),  # 2R
            make_trade("b", entry=100, exit=110, stop=100),  # undefined
        ]
        assert get_account_stats(trades).average_r == pytest.approx(2.0)

    def test_to_dict(self, mixed_trades):
        d = get_account_stats(mixed_trades).to_dict()
        assert d["total_trades"] == 5
        assert d["best_setup"] == "Breakout"
