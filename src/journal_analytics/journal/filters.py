"""Trade filter engine and filter presets.

:class:`TradeFilters` is a plain conjunctive description; every set field
must pass and an unset (or empty-list) field never excludes anything.
:func:`apply_filters` keeps input order, and an empty filter is the
identity.

Risk-reward filtering uses :func:`risk_reward_magnitude`, an undirected
``|(exit - entry) / (stop - entry)|`` that falls back to 0 when the stop
equals the entry.  This is intentionally *not* :func:`calculate_r_factor`
(signed, ``nan`` on zero risk); user-visible filtering depends on the
undirected form.

Presets are persisted through any :class:`IPresetStore`.  The engine only
creates (with a generated id), lists and deletes; ``get_filter_presets``
ordering is whatever the store returns.

Usage::

    filters = TradeFilters(symbols=["AAPL"], win_only=True)
    winners = apply_filters(trades, filters)

    preset_id = save_filter_preset(store, "AAPL winners", filters)
    [preset] = [p for p in get_filter_presets(store) if p.id == preset_id]
    same = apply_filter_preset(trades, preset)
"""

from __future__ import annotations

import logging
from typing import Sequence

from journal_analytics.core.ids import epoch_ms, new_preset_id
from journal_analytics.core.interfaces import IPresetStore
from journal_analytics.core.models import FilterPreset, Trade, TradeFilters
from journal_analytics.core.timeutils import timestamp_of

from .metrics import calculate_pnl

logger = logging.getLogger(__name__)


def risk_reward_magnitude(trade: Trade) -> float:
    """Undirected reward/risk ratio used by the ``min_risk_reward`` filter."""
    denominator = trade.stop_loss_price - trade.entry_price
    if denominator == 0:
        return 0.0
    return abs((trade.exit_price - trade.entry_price) / denominator)


def _matches_search(trade: Trade, needle: str) -> bool:
    needle = needle.lower()
    fields = [trade.symbol, trade.setup_name, trade.notes, trade.emotion]
    return any(needle in f.lower() for f in fields if f)


def matches_filters(
    trade: Trade,
    filters: TradeFilters,
    *,
    date_bounds: tuple[float, float] | None = None,
) -> bool:
    """Single-trade predicate behind :func:`apply_filters`.

    ``date_bounds`` lets a caller pass pre-parsed range bounds; otherwise
    they are parsed from ``filters.date_range``.
    """
    if filters.date_range is not None:
        if date_bounds is None:
            date_bounds = (
                timestamp_of(filters.date_range.start),
                timestamp_of(filters.date_range.end),
            )
        start, end = date_bounds
        entered = timestamp_of(trade.entry_date)
        if entered < start or entered > end:
            return False

    if filters.symbols and trade.symbol not in filters.symbols:
        return False

    if filters.setups and trade.setup_name not in filters.setups:
        return False

    pnl = calculate_pnl(trade)
    if filters.min_pnl is not None and pnl < filters.min_pnl:
        return False
    if filters.max_pnl is not None and pnl > filters.max_pnl:
        return False

    # Independent flags; both set yields nothing
    if filters.win_only and pnl <= 0:
        return False
    if filters.loss_only and pnl >= 0:
        return False

    if filters.min_risk_reward is not None:
        if risk_reward_magnitude(trade) < filters.min_risk_reward:
            return False

    if filters.emotions:
        if not trade.emotion or trade.emotion not in filters.emotions:
            return False

    if filters.search_text and not _matches_search(trade, filters.search_text):
        return False

    return True


def apply_filters(trades: Sequence[Trade], filters: TradeFilters) -> list[Trade]:
    """Return the trades satisfying every active field, in input order."""
    if filters.is_empty():
        return list(trades)

    date_bounds = None
    if filters.date_range is not None:
        date_bounds = (
            timestamp_of(filters.date_range.start),
            timestamp_of(filters.date_range.end),
        )

    result = [t for t in trades if matches_filters(t, filters, date_bounds=date_bounds)]
    logger.debug("Filters kept %d of %d trades", len(result), len(trades))
    return result


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

def save_filter_preset(store: IPresetStore, name: str, filters: TradeFilters) -> str:
    """Persist a named snapshot of *filters* and return its generated id."""
    created_at = epoch_ms()
    preset = FilterPreset(
        id=new_preset_id(created_at),
        name=name,
        filters=filters,
        created_at=created_at,
    )
    store.create(preset)
    logger.info("Saved filter preset %s (%s)", preset.id, name)
    return preset.id


def get_filter_presets(store: IPresetStore) -> list[FilterPreset]:
    """All stored presets; callers must not rely on the order."""
    return store.list_all()


def delete_filter_preset(store: IPresetStore, preset_id: str) -> None:
    """Remove a preset; deleting an unknown id is a no-op."""
    store.delete(preset_id)
    logger.info("Deleted filter preset %s", preset_id)


def apply_filter_preset(trades: Sequence[Trade], preset: FilterPreset) -> list[Trade]:
    """Filter the current collection with a stored preset's filters."""
    return apply_filters(trades, preset.filters)
