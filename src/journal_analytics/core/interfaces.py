"""Protocol interfaces for the analytics engine's external collaborators.

The engine owns no storage.  Anything that persists presets implements
:class:`IPresetStore`; implementations can be swapped (memory, JSONL, a
browser-backed bridge) without changing callers.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models import FilterPreset


# ---------------------------------------------------------------------------
# Preset store
# ---------------------------------------------------------------------------

@runtime_checkable
class IPresetStore(Protocol):
    """Keyed persistent store for filter presets.

    The only contract: create by (caller-generated) id, list everything,
    delete by id.  ``list_all`` ordering is unspecified.
    """

    def create(self, preset: FilterPreset) -> None: ...

    def list_all(self) -> list[FilterPreset]: ...

    def delete(self, preset_id: str) -> None: ...
