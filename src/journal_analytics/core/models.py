"""Core domain models used across the analytics engine.

``Trade`` is the canonical, already-validated journal record.  Storage owns
its lifecycle; analytics only ever read it.  Derived values (P&L, R-factor,
sentiment) are never stored on the model.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import Direction


# ---------------------------------------------------------------------------
# Trade record
# ---------------------------------------------------------------------------

class Trade(BaseModel):
    """Immutable journal entry for one closed trade.

    Accepts both snake_case and the camelCase keys written by the journal
    front end (``setupName``, ``stopLossPrice``, ``entryDate``...).
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    symbol: str
    direction: Direction
    setup_name: str = ""

    entry_price: float = Field(gt=0)
    exit_price: float = Field(gt=0)
    stop_loss_price: float = Field(gt=0)
    quantity: float = Field(gt=0)

    entry_date: str  # ISO-8601
    exit_date: str  # ISO-8601

    notes: str = ""
    emotion: str | None = None
    image_urls: list[str] = Field(default_factory=list)

    # Storage bookkeeping (epoch ms), unused by analytics
    created_at: int = 0
    updated_at: int = 0


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------

class DateRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: str
    end: str


class TradeFilters(BaseModel):
    """Conjunctive filter description.  Unset fields never exclude."""

    model_config = ConfigDict(frozen=True)

    date_range: DateRange | None = None
    symbols: list[str] | None = None
    setups: list[str] | None = None
    min_pnl: float | None = None
    max_pnl: float | None = None
    win_only: bool = False
    loss_only: bool = False
    min_risk_reward: float | None = None
    emotions: list[str] | None = None
    search_text: str | None = None

    def is_empty(self) -> bool:
        """True when no field would narrow a trade collection."""
        return not (
            self.date_range
            or self.symbols
            or self.setups
            or self.min_pnl is not None
            or self.max_pnl is not None
            or self.win_only
            or self.loss_only
            or self.min_risk_reward is not None
            or self.emotions
            or self.search_text
        )


class FilterPreset(BaseModel):
    """A named snapshot of :class:`TradeFilters`.

    Applying a preset filters the *current* trade collection; no result set
    is frozen with it.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    filters: TradeFilters
    created_at: int  # epoch ms
