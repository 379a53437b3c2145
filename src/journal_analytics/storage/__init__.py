"""Preset store adapters."""

from .preset_store import InMemoryPresetStore, JsonFilePresetStore, create_preset_store

__all__ = [
    "InMemoryPresetStore",
    "JsonFilePresetStore",
    "create_preset_store",
]
