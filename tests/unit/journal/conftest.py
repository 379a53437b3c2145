"""Shared trade factories for analytics tests.

All dates are naive ISO strings, so calendar buckets are the wall-clock
values written here regardless of the machine's timezone.
"""

from __future__ import annotations

import pytest

from journal_analytics.core.models import Trade


def make_trade(
    trade_id: str = "t1",
    symbol: str = "AAPL",
    direction: str = "buy",
    setup: str = "Breakout",
    entry: float = 100.0,
    exit: float = 110.0,
    stop: float = 95.0,
    qty: float = 10.0,
    entry_date: str = "2024-01-15T10:00:00",
    exit_date: str | None = None,
    notes: str = "",
    emotion: str | None = None,
) -> Trade:
    """Helper to create a Trade.  Defaults: +100 P&L, R = 2.0."""
    return Trade(
        id=trade_id,
        symbol=symbol,
        direction=direction,
        setup_name=setup,
        entry_price=entry,
        exit_price=exit,
        stop_loss_price=stop,
        quantity=qty,
        entry_date=entry_date,
        exit_date=exit_date or entry_date,
        notes=notes,
        emotion=emotion,
    )


def make_winner(trade_id: str = "w1", pnl: float = 100.0, **kwargs) -> Trade:
    """Buy at 100 with stop 95 and quantity 1, exiting at 100 + pnl."""
    kwargs.setdefault("qty", 1.0)
    return make_trade(trade_id=trade_id, entry=100.0, exit=100.0 + pnl / kwargs["qty"], **kwargs)


def make_loser(trade_id: str = "l1", pnl: float = -50.0, **kwargs) -> Trade:
    """Buy at 100 with stop 95 and quantity 1, exiting at 100 + pnl (pnl < 0)."""
    kwargs.setdefault("qty", 1.0)
    return make_trade(trade_id=trade_id, entry=100.0, exit=100.0 + pnl / kwargs["qty"], **kwargs)


def make_series(pnls: list[float], setup: str = "Breakout", start_day: int = 1) -> list[Trade]:
    """One trade per day in January 2024 with the given P&Ls.

    Quantity 1 and a stop 10 below entry, so each R-factor is pnl / 10.
    """
    trades = []
    for i, pnl in enumerate(pnls):
        trades.append(make_trade(
            trade_id=f"s{i}",
            setup=setup,
            entry=500.0,
            exit=500.0 + pnl,
            stop=490.0,
            qty=1.0,
            entry_date=f"2024-01-{start_day + i:02d}T10:00:00",
        ))
    return trades


@pytest.fixture
def mixed_trades() -> list[Trade]:
    """Two setups, two symbols, winners and losers over two months."""
    return [
        make_trade("a", symbol="AAPL", setup="Breakout", exit=110.0,
                   entry_date="2024-01-02T09:30:00", emotion="confident",
                   notes="Clean breakout, felt confident"),
        make_trade("b", symbol="GOOGL", setup="Pullback", exit=95.0,
                   entry_date="2024-01-03T14:00:00", emotion="anxious",
                   notes="Rushed entry, anxious"),
        make_trade("c", symbol="AAPL", setup="Breakout", exit=120.0,
                   entry_date="2024-01-10T09:45:00", emotion="confident"),
        make_trade("d", symbol="GOOGL", setup="Pullback", exit=104.0,
                   entry_date="2024-02-05T11:00:00", emotion="calm"),
        make_trade("e", symbol="AAPL", setup="Breakout", exit=92.0,
                   entry_date="2024-02-06T15:00:00"),
    ]
