"""Enumerations used across the analytics engine."""

from enum import Enum


class Direction(str, Enum):
    BUY = "buy"
    SELL = "sell"


class TradeOutcome(str, Enum):
    """Win / loss / break-even classification derived from P&L."""

    WIN = "win"
    LOSS = "loss"
    BREAKEVEN = "breakeven"


class Interpretation(str, Enum):
    PROFITABLE = "Profitable"
    BREAK_EVEN = "Break-Even"
    LOSING = "Losing"


class SetupRecommendation(str, Enum):
    KEEP = "Keep"
    REVIEW = "Review"
    AVOID = "Avoid"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class PatternImpact(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


class StoreBackend(str, Enum):
    MEMORY = "memory"
    JSONL = "jsonl"
