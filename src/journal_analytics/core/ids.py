"""Canonical ID and timestamp factories.

Preset IDs keep the ``preset-<epoch ms>`` shape used by stored presets,
suffixed with a short random part so two presets saved within the same
millisecond do not collide.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def epoch_ms(moment: datetime | None = None) -> int:
    """Milliseconds since the Unix epoch (now when *moment* is None)."""
    moment = moment or utc_now()
    return int(moment.timestamp() * 1000)


def new_preset_id(created_at_ms: int | None = None) -> str:
    """Generate a filter preset ID, e.g. ``preset-1717243200000-3f9a1c2e``."""
    ms = created_at_ms if created_at_ms is not None else epoch_ms()
    return f"preset-{ms}-{uuid.uuid4().hex[:8]}"
