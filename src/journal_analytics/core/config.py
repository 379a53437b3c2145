"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from datetime import tzinfo
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from .enums import StoreBackend
from .timeutils import SUNDAY, resolve_timezone


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class PerformanceConfig(BaseModel):
    monthly_target: float = 1000.0  # Fallback monthly P&L goal
    monthly_targets: dict[str, float] = Field(default_factory=dict)  # "YYYY-MM" -> goal
    weekly_window: int = 12  # Most recent weeks kept
    week_start: int = SUNDAY  # datetime.weekday() numbering
    timezone: str | None = None  # IANA name; None = system local

    def tz(self) -> tzinfo | None:
        return resolve_timezone(self.timezone)


class SentimentConfig(BaseModel):
    trend_days: int = 30
    keyword_limit: int = 10
    keyword_min_length: int = 4
    keyword_max_tokens: int = 10  # Only the first N words of a note
    keyword_min_trades: int = 3
    emotional_control_ratio: float = 0.7


class SimilarityConfig(BaseModel):
    threshold: float = 80.0  # Score out of 100
    limit: int = 10


class DisciplineConfig(BaseModel):
    max_streak_threshold: int = 3
    daily_loss_limit_r: float = 3.0
    drawdown_scale: float = 1000.0  # Setup quality drawdown normaliser


class StorageConfig(BaseModel):
    backend: StoreBackend = StoreBackend.MEMORY
    presets_path: str = "data/filter_presets.jsonl"


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level application settings.

    Loaded from TOML config files, overridden by environment variables
    (``JOURNAL_PERFORMANCE__MONTHLY_TARGET=2500``).
    """

    performance: PerformanceConfig = Field(default_factory=PerformanceConfig)
    sentiment: SentimentConfig = Field(default_factory=SentimentConfig)
    similarity: SimilarityConfig = Field(default_factory=SimilarityConfig)
    discipline: DisciplineConfig = Field(default_factory=DisciplineConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "JOURNAL_", "env_nested_delimiter": "__"}

    def validate_settings(self) -> None:
        """Reject values that would make analytics meaningless."""
        from .errors import ConfigError

        if not 0 <= self.performance.week_start <= 6:
            raise ConfigError(
                f"performance.week_start must be 0-6, got {self.performance.week_start}"
            )
        if self.performance.weekly_window < 1:
            raise ConfigError("performance.weekly_window must be >= 1")
        if self.performance.monthly_target == 0:
            raise ConfigError("performance.monthly_target must be non-zero")
        if not 0 < self.sentiment.emotional_control_ratio <= 1:
            raise ConfigError("sentiment.emotional_control_ratio must be in (0, 1]")
        # Raises ConfigError for unknown zone names
        self.performance.tz()


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            with open(path, "rb") as f:
                data = tomli.load(f)

    if overrides:
        data.update(overrides)

    settings = Settings(**data)
    settings.validate_settings()
    return settings
